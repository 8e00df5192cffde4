# application/dto/pipeline_config.py
# Immutable configuration for one deep-fry run.

from dataclasses import dataclass, field
from typing import Tuple

from fryer.clip import ClipFunction, soft_clip

DEFAULT_BITRATES: Tuple[int, ...] = (32, 40, 48, 56, 64)
DEFAULT_ITERATIONS: int = 50
DEFAULT_BOOST_DB: float = 10.0
DEFAULT_CLIP_SLOPE: float = 10.0
DEFAULT_FINAL_BITRATE: int = 192


@dataclass(frozen=True)
class TrimSettings:
    """Envelope follower parameters for the noise trimmer."""
    integrator_window: int = 16
    average_window: int = 256
    low_threshold: float = 0.4
    high_threshold: float = 0.7

    def __post_init__(self) -> None:
        if self.integrator_window < 1:
            raise ValueError(
                f"integrator_window must be at least 1. Got: {self.integrator_window}."
            )
        if self.average_window < 1:
            raise ValueError(
                f"average_window must be at least 1. Got: {self.average_window}."
            )
        if self.low_threshold > self.high_threshold:
            raise ValueError(
                f"low_threshold ({self.low_threshold}) must not exceed "
                f"high_threshold ({self.high_threshold})."
            )


@dataclass(frozen=True)
class PipelineConfig:
    """Everything the degradation loop reads. Built once, never mutated."""
    bitrates: Tuple[int, ...] = DEFAULT_BITRATES
    iterations: int = DEFAULT_ITERATIONS
    boost_db: float = DEFAULT_BOOST_DB
    clip: ClipFunction = field(default_factory=lambda: soft_clip(DEFAULT_CLIP_SLOPE))
    trim_enabled: bool = True
    trim: TrimSettings = field(default_factory=TrimSettings)
    final_bitrate: int = DEFAULT_FINAL_BITRATE

    def __post_init__(self) -> None:
        # Accept any iterable of bitrates but store a tuple
        object.__setattr__(self, "bitrates", tuple(self.bitrates))

        if not self.bitrates:
            raise ValueError(
                "Bitrate pool must not be empty.\n"
                "    → Example: --bitrates 32,48,64"
            )
        for bitrate in self.bitrates:
            if isinstance(bitrate, bool) or not isinstance(bitrate, int) or bitrate <= 0:
                raise ValueError(
                    f"Bitrates must be positive integers (kbps). Got: {bitrate!r}."
                )
        if isinstance(self.iterations, bool) or not isinstance(self.iterations, int):
            raise ValueError(
                f"Iteration count must be an integer. Got: {self.iterations!r}."
            )
        if self.iterations < 1:
            raise ValueError(
                f"Iteration count must be at least 1. Got: {self.iterations}."
            )
        if self.final_bitrate <= 0:
            raise ValueError(
                f"Final bitrate must be positive. Got: {self.final_bitrate}."
            )
