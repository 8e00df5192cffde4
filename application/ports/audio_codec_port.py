# application/ports/audio_codec_port.py
# Port interfaces for the codecs the pipeline round-trips audio through.
# Domain layer: must not import infrastructure or adapter code.

from abc import ABC, abstractmethod
from typing import Tuple

import numpy as np


class ILossyCodec(ABC):
    """Compressed format the degradation loop pushes audio through (MP3)."""

    @abstractmethod
    def encode(
        self,
        samples: np.ndarray,    # shape: (channels, num_frames) float
        sample_rate: int,
        bitrate: int,
    ) -> bytes:
        """Compress ``samples`` at ``bitrate`` kbps and return the encoded bytes."""
        ...

    @abstractmethod
    def decode(self, data: bytes) -> Tuple[np.ndarray, int]:
        """Return ``(samples, sample_rate)`` with samples shaped (channels, num_frames)."""
        ...


class IContainerCodec(ABC):
    """Uncompressed PCM container (WAV)."""

    @abstractmethod
    def decode(self, data: bytes) -> Tuple[np.ndarray, int]:
        """Return ``(samples, sample_rate)`` with samples shaped (channels, num_frames)."""
        ...

    @abstractmethod
    def encode(
        self,
        samples: np.ndarray,
        sample_rate: int,
        bit_depth: int = 16,
    ) -> bytes:
        """Serialize ``samples`` as integer PCM of ``bit_depth`` bits."""
        ...
