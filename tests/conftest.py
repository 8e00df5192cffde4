import os
from typing import List, Optional, Tuple

import numpy as np
import pytest
import soundfile as sf

from application.ports.audio_codec_port import ILossyCodec
from fryer.errors import CodecError

_MAGIC: bytes = b"FAKEMP3\x00"


class FakeLossyCodec(ILossyCodec):
    """
    Lossless stand-in for the MP3 boundary.

    Frames are stored as raw float64 behind a small header, so a decode
    returns exactly what was encoded. Every call is recorded.
    """

    def __init__(self, fail_on_decode: Optional[int] = None) -> None:
        self.fail_on_decode: Optional[int] = fail_on_decode
        self.encode_bitrates: List[int] = []
        self.encoded_inputs: List[np.ndarray] = []
        self.decode_calls: int = 0

    def encode(self, samples: np.ndarray, sample_rate: int, bitrate: int) -> bytes:
        samples = np.atleast_2d(np.asarray(samples, dtype=np.float64))
        self.encode_bitrates.append(bitrate)
        self.encoded_inputs.append(samples.copy())
        header = np.array([sample_rate, samples.shape[0], bitrate], dtype="<i8")
        return _MAGIC + header.tobytes() + samples.astype("<f8").tobytes()

    def decode(self, data: bytes) -> Tuple[np.ndarray, int]:
        self.decode_calls += 1
        if self.fail_on_decode is not None and self.decode_calls >= self.fail_on_decode:
            raise CodecError(f"fake decode failure on call {self.decode_calls}")
        if not data.startswith(_MAGIC):
            raise CodecError("not a fake mp3 payload")

        body = data[len(_MAGIC):]
        sample_rate, channels, _ = np.frombuffer(body[:24], dtype="<i8").tolist()
        frames = np.frombuffer(body[24:], dtype="<f8").reshape(channels, -1)
        return frames.copy(), sample_rate


class ScriptedRng:
    """Random source that hands out a fixed sequence of choices."""

    def __init__(self, picks: List[int]) -> None:
        self.picks: List[int] = list(picks)
        self.pools: List[tuple] = []

    def choice(self, seq):
        self.pools.append(tuple(seq))
        return self.picks.pop(0)


def write_wav(path: str, channels: np.ndarray, sr: int = 8000) -> None:
    """Write a (channels, frames) array as 16-bit WAV."""
    sf.write(path, np.asarray(channels).T, sr, subtype="PCM_16")


@pytest.fixture
def fake_codec() -> FakeLossyCodec:
    return FakeLossyCodec()


@pytest.fixture
def fake_codec_cls():
    return FakeLossyCodec


@pytest.fixture
def scripted_rng_cls():
    return ScriptedRng


@pytest.fixture
def wav_writer():
    return write_wav


@pytest.fixture
def mono_wav(tmp_path) -> str:
    """1000 uniform-random samples in [-1, 1], mono, 8 kHz."""
    rng = np.random.default_rng(1234)
    path = os.path.join(str(tmp_path), "input.wav")
    write_wav(path, rng.uniform(-1.0, 1.0, size=(1, 1000)))
    return path
