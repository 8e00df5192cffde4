# infrastructure/audio/envelope_noise_trimmer.py
# Implementation of IAudioTrimmer using an envelope-ratio follower with hysteresis.

from typing import Optional, Tuple

import numpy as np

from application.dto.pipeline_config import TrimSettings
from application.ports.audio_trimmer_port import IAudioTrimmer


class EnvelopeNoiseTrimmer(IAudioTrimmer):
    """
    Drop the noisy lead-in and tail of a channel.

    A short integrator measures how much the signal moves from sample to
    sample relative to how loud it is (sum |x[n] - x[n-1]| / sum |x[n]|).
    White-ish noise scores high, smooth or silent material scores low. The
    ratio is smoothed and compared against two thresholds so the
    noise/signal decision does not chatter.
    """

    def __init__(self, settings: Optional[TrimSettings] = None) -> None:
        self.settings: TrimSettings = settings or TrimSettings()

    def envelope_ratio(self, channel: np.ndarray) -> np.ndarray:
        """
        Instantaneous ratio for every index past the integrator warm-up.

        Element k belongs to sample index k + integrator_window. Windows whose
        magnitude sum is zero report a ratio of 0.
        """
        x: np.ndarray = np.asarray(channel, dtype=np.float64)
        span: int = self.settings.integrator_window + 1
        if len(x) < span:
            return np.zeros(0, dtype=np.float64)

        magnitudes: np.ndarray = np.abs(x)
        deltas: np.ndarray = np.abs(np.diff(x, prepend=x[0]))

        # Direct convolution sums each window independently, so an all-zero
        # window sums to exactly 0.0 instead of a rounding residue.
        kernel: np.ndarray = np.ones(span)
        sum0: np.ndarray = np.convolve(magnitudes, kernel, mode="valid")
        sum1: np.ndarray = np.convolve(deltas, kernel, mode="valid")

        ratio: np.ndarray = np.zeros_like(sum0)
        np.divide(sum1, sum0, out=ratio, where=sum0 > 0)
        return ratio

    def find_region(self, channel: np.ndarray) -> Optional[Tuple[int, int]]:
        """Return the half-open ``(start, end)`` region to keep, or None."""
        window: int = self.settings.average_window
        low: float = self.settings.low_threshold
        high: float = self.settings.high_threshold
        offset: int = self.settings.integrator_window

        trim_start: Optional[int] = None
        trim_end: Optional[int] = None
        is_noise: bool = True
        avg: Optional[float] = None

        for k, r in enumerate(self.envelope_ratio(channel).tolist()):
            i: int = k + offset

            # Recursive blend, not a bounded moving average
            avg = r if avg is None else (avg * (window - 1) + r) / window

            if is_noise and avg < low:
                is_noise = False
                start = max(i - window, 0)
                trim_start = start if trim_start is None else min(trim_start, start)
            elif not is_noise and avg > high:
                is_noise = True
                end = i - window
                trim_end = end if trim_end is None else max(trim_end, end)

        if trim_start is None or trim_end is None or trim_start >= trim_end:
            return None
        return trim_start, trim_end

    def trim(self, channel: np.ndarray) -> np.ndarray:
        region = self.find_region(channel)
        if region is None:
            return channel
        start, end = region
        return channel[start:end]
