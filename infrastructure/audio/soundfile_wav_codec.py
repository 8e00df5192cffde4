# infrastructure/audio/soundfile_wav_codec.py
# IContainerCodec backed by soundfile (libsndfile).

import io
from typing import Tuple

import numpy as np
import soundfile as sf

from application.ports.audio_codec_port import IContainerCodec
from fryer.errors import CodecError

PCM_SUBTYPES: dict[int, str] = {
    16: "PCM_16",
    24: "PCM_24",
    32: "PCM_32",
}


class SoundfileWavCodec(IContainerCodec):
    """Read and write integer-PCM WAV data held in memory."""

    def decode(self, data: bytes) -> Tuple[np.ndarray, int]:
        try:
            frames, sample_rate = sf.read(
                io.BytesIO(data), dtype="float64", always_2d=True
            )
        except (RuntimeError, TypeError) as exc:
            raise CodecError(
                f"WAV decode failed: {exc}\n"
                f"    → Check that the input is an uncompressed WAV file."
            ) from exc

        # soundfile returns (num_frames, channels)
        return np.ascontiguousarray(frames.T), int(sample_rate)

    def encode(
        self,
        samples: np.ndarray,
        sample_rate: int,
        bit_depth: int = 16,
    ) -> bytes:
        subtype = PCM_SUBTYPES.get(bit_depth)
        if subtype is None:
            raise ValueError(
                f"Unsupported bit depth: {bit_depth}.\n"
                f"    Supported: {', '.join(str(b) for b in sorted(PCM_SUBTYPES))}"
            )

        samples = np.atleast_2d(np.asarray(samples, dtype=np.float64))
        buffer = io.BytesIO()
        try:
            sf.write(
                buffer,
                np.clip(samples, -1.0, 1.0).T,
                sample_rate,
                format="WAV",
                subtype=subtype,
            )
        except (RuntimeError, TypeError) as exc:
            raise CodecError(f"WAV encode failed: {exc}") from exc
        return buffer.getvalue()
