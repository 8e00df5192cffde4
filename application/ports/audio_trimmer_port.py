# application/ports/audio_trimmer_port.py
# Port interface for trimming noisy regions off a single channel.

from abc import ABC, abstractmethod
import numpy as np


class IAudioTrimmer(ABC):
    """Abstract base class for audio trimming."""

    @abstractmethod
    def trim(self, channel: np.ndarray) -> np.ndarray:
        """
        Keep only the part of ``channel`` the trimmer considers signal.

        Args:
            channel: One channel as a 1-D float array.

        Returns:
            A contiguous slice of the input, or the input itself when
            nothing is removed.
        """
        ...
