# fryer/clip.py
# Bounded nonlinear transfer curves applied after the gain boost.

from dataclasses import dataclass
from enum import Enum

import numpy as np


class ClipKind(str, Enum):
    HARD = "hard"
    SOFT = "soft"
    DIODE = "diode"


@dataclass(frozen=True)
class ClipFunction:
    """
    A clip curve tagged by kind and parameterized by a slope.

    For finite input and slope > 0 every variant maps into [-1.0, 1.0].
    Call the instance directly on a scalar or an array of samples.
    """
    kind: ClipKind
    slope: float = 1.0

    def __post_init__(self) -> None:
        if not self.slope > 0:
            raise ValueError(
                f"Clip slope must be positive. Got: {self.slope}.\n"
                f"    → Use a value such as 1.0 or 10.0."
            )

    def __call__(self, samples):
        return evaluate_clip(self, samples)

    def __str__(self) -> str:
        return f"{self.kind.value}({self.slope:g})"


def hard_clip(slope: float = 1.0) -> ClipFunction:
    return ClipFunction(ClipKind.HARD, slope)


def soft_clip(slope: float = 1.0) -> ClipFunction:
    return ClipFunction(ClipKind.SOFT, slope)


def diode(slope: float = 1.0) -> ClipFunction:
    return ClipFunction(ClipKind.DIODE, slope)


def evaluate_clip(clip: ClipFunction, samples):
    """
    Apply ``clip`` to ``samples`` (scalar or ndarray).

    Hard:  clamp(x * s, -1, 1)
    Soft:  tanh(x * s)
    Diode: clamp(sign(x) * |x| ** (1 / s), -1, 1), with sign(0) = 0
    """
    x = np.asarray(samples, dtype=np.float64)

    if clip.kind is ClipKind.HARD:
        y = np.clip(x * clip.slope, -1.0, 1.0)
    elif clip.kind is ClipKind.SOFT:
        y = np.tanh(x * clip.slope)
    elif clip.kind is ClipKind.DIODE:
        # np.sign(0) == 0 and 0 ** (1/s) == 0, so silence stays silent
        y = np.clip(np.sign(x) * np.power(np.abs(x), 1.0 / clip.slope), -1.0, 1.0)
    else:
        raise ValueError(f"Unknown clip kind: {clip.kind!r}")

    if np.ndim(samples) == 0:
        return float(y)
    return y


CLIP_FACTORIES = {
    ClipKind.HARD.value: hard_clip,
    ClipKind.SOFT.value: soft_clip,
    ClipKind.DIODE.value: diode,
}


def parse_clip(name: str, slope: float) -> ClipFunction:
    """Build a clip function from its CLI name (``hard``, ``soft`` or ``diode``)."""
    factory = CLIP_FACTORIES.get(name.lower())
    if factory is None:
        raise ValueError(
            f"Unknown clip function: '{name}'.\n"
            f"    Supported: {', '.join(sorted(CLIP_FACTORIES))}"
        )
    return factory(slope)
