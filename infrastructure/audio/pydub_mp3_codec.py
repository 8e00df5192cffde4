# infrastructure/audio/pydub_mp3_codec.py
# ILossyCodec backed by pydub (ffmpeg/libmp3lame under the hood).

import io
from typing import Tuple

import numpy as np
from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError, CouldntEncodeError

from application.ports.audio_codec_port import ILossyCodec
from fryer.errors import CodecError

SAMPLE_WIDTH: int = 2  # 16-bit PCM handed to the encoder


class PydubMp3Codec(ILossyCodec):
    """Encode/decode MP3 entirely in memory through pydub."""

    def encode(
        self,
        samples: np.ndarray,
        sample_rate: int,
        bitrate: int,
    ) -> bytes:
        samples = np.atleast_2d(np.asarray(samples, dtype=np.float64))
        channels: int = samples.shape[0]

        # pydub wants interleaved little-endian int16 frames
        full_scale: int = (1 << (8 * SAMPLE_WIDTH - 1)) - 1
        interleaved: np.ndarray = np.round(
            np.clip(samples.T, -1.0, 1.0) * full_scale
        ).astype("<i2")

        segment: AudioSegment = AudioSegment(
            data=interleaved.tobytes(),
            sample_width=SAMPLE_WIDTH,
            frame_rate=sample_rate,
            channels=channels,
        )

        buffer = io.BytesIO()
        try:
            segment.export(buffer, format="mp3", bitrate=f"{bitrate}k")
        except (CouldntEncodeError, OSError) as exc:
            raise CodecError(
                f"MP3 encode failed at {bitrate} kbps: {exc}\n"
                f"    → Make sure FFmpeg with libmp3lame is installed and on PATH."
            ) from exc
        return buffer.getvalue()

    def decode(self, data: bytes) -> Tuple[np.ndarray, int]:
        try:
            segment: AudioSegment = AudioSegment.from_file(io.BytesIO(data), format="mp3")
        except (CouldntDecodeError, OSError) as exc:
            raise CodecError(
                f"MP3 decode failed: {exc}\n"
                f"    → Check that the input is a valid MP3 file and FFmpeg is installed."
            ) from exc

        raw: np.ndarray = np.array(segment.get_array_of_samples(), dtype=np.float64)
        full_scale: float = float(1 << (8 * segment.sample_width - 1))
        samples: np.ndarray = raw.reshape(-1, segment.channels).T / full_scale
        return samples, segment.frame_rate
