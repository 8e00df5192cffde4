import numpy as np

from fryer.clip import ClipFunction


def db_to_amplitude(gain_db: float) -> float:
    """Convert a gain in decibels to a linear amplitude factor."""
    return float(10.0 ** (gain_db / 20.0))


def boost(
    samples: np.ndarray,
    gain_db: float,
    clip: ClipFunction,
) -> np.ndarray:
    """
    Amplify every sample of every channel, then pass it through ``clip``.

    Args:
        samples: Shape (channels, num_frames), any number of equal-length channels.
        gain_db: Boost in decibels (0 dB leaves the level unchanged).
        clip:    Clip function applied after the gain.

    Returns:
        A new array of the same shape; the input is not modified.
    """
    amplitude: float = db_to_amplitude(gain_db)
    return clip(np.asarray(samples, dtype=np.float64) * amplitude)


def downmix_to_mono(samples: np.ndarray) -> np.ndarray:
    """
    Average all channels into one.

    Args:
        samples: Shape (channels, num_frames) with channels >= 1.

    Returns:
        Shape (1, num_frames). A mono input comes back unchanged.
    """
    samples = np.asarray(samples, dtype=np.float64)
    if samples.ndim != 2:
        raise ValueError(
            f"Expected a (channels, frames) buffer, got shape {samples.shape}."
        )

    channel_count: int = samples.shape[0]
    if channel_count == 0:
        raise ValueError("Cannot downmix a buffer with no channels.")
    if channel_count == 1:
        return samples.copy()

    return samples.sum(axis=0, keepdims=True) / channel_count
