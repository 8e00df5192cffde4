import logging
import os
import random
import time
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional, Tuple

import numpy as np

from application.dto.fry_report_dto import FryReportDTO
from application.dto.pipeline_config import PipelineConfig
from application.ports.audio_codec_port import IContainerCodec, ILossyCodec
from application.ports.audio_trimmer_port import IAudioTrimmer
from fryer.effects import boost, downmix_to_mono
from fryer.errors import InputError
from fryer.utils import (
    MPEG_EXT,
    classify_input,
    temp_artifact_paths,
    try_unlink,
    validate_not_temp_artifact,
    validate_output_path,
)
from infrastructure.audio.envelope_noise_trimmer import EnvelopeNoiseTrimmer
from infrastructure.audio.pydub_mp3_codec import PydubMp3Codec
from infrastructure.audio.soundfile_wav_codec import SoundfileWavCodec

logger = logging.getLogger("deep_fry")

OUTPUT_BIT_DEPTH: int = 16

ProgressCallback = Callable[[int, int], None]
StatusCallback = Callable[[str], None]


# ── File helpers ─────────────────────────────────────────────────

def _read_bytes(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def _write_bytes(path: str, data: bytes) -> None:
    with open(path, "wb") as f:
        f.write(data)


@contextmanager
def temp_artifacts(work_dir: Optional[str] = None) -> Iterator[Tuple[str, str]]:
    """
    Own the (mpeg, wave) scratch files for the duration of a run.

    Both files are deleted on every exit path. A file that was never created
    is not an error; any other OSError is raised once both deletions have
    been attempted.
    """
    mpeg_path, wave_path = temp_artifact_paths(work_dir)
    try:
        yield mpeg_path, wave_path
    finally:
        failures: List[OSError] = []
        for path in (mpeg_path, wave_path):
            try:
                if try_unlink(path):
                    logger.debug("removed %s", path)
            except OSError as exc:
                logger.error("could not delete %s: %s", path, exc)
                failures.append(exc)
        if failures:
            raise failures[0]


# ── Orchestrator ─────────────────────────────────────────────────

class DeepFryer:
    """
    Runs the degradation pipeline:
    load → downmix → N × (mp3 encode → decode → boost/clip) → trim → final mp3.

    Args:
        config:          Immutable pipeline settings.
        lossy_codec:     MP3 boundary used by every iteration and the final write.
        container_codec: WAV boundary for WAV input and the per-iteration scratch file.
        trimmer:         Used when ``config.trim_enabled``; defaults to the
                         envelope trimmer built from ``config.trim``.
        rng:             Anything with ``choice(seq)``; picks each iteration's bitrate.
        work_dir:        Directory holding the scratch files (default: cwd).
    """

    def __init__(
        self,
        config: PipelineConfig,
        lossy_codec: ILossyCodec,
        container_codec: IContainerCodec,
        trimmer: Optional[IAudioTrimmer] = None,
        rng: Optional[random.Random] = None,
        work_dir: Optional[str] = None,
    ) -> None:
        if trimmer is None:
            trimmer = EnvelopeNoiseTrimmer(config.trim)

        self.config: PipelineConfig = config
        self.lossy_codec: ILossyCodec = lossy_codec
        self.container_codec: IContainerCodec = container_codec
        self.trimmer: IAudioTrimmer = trimmer
        self.rng = rng if rng is not None else random.Random()
        self.work_dir: Optional[str] = work_dir

        self.stage: str = "idle"
        self.failed_stage: Optional[str] = None
        self._status_callback: Optional[StatusCallback] = None

    def run(
        self,
        input_path: str,
        output_path: str,
        progress_callback: Optional[ProgressCallback] = None,
        status_callback: Optional[StatusCallback] = None,
    ) -> FryReportDTO:
        """
        Deep-fry ``input_path`` (.mp3 or .wav) into the MP3 ``output_path``.

        Input problems raise InputError before any scratch file exists,
        except an unreadable input, which is only found when it is read.
        Codec and filesystem failures abort the run; the scratch files are
        removed either way. A failed cleanup sets ``failed_stage`` to
        "cleaning up" and chains the run's own error, if any, as its cause.
        """
        self.failed_stage = None
        self._status_callback = status_callback

        self.stage = "validating input"
        input_path = os.path.abspath(input_path)
        output_path = os.path.abspath(output_path)
        try:
            input_ext: str = classify_input(input_path)
            validate_output_path(output_path)
            validate_not_temp_artifact(input_path, "Input", self.work_dir)
            validate_not_temp_artifact(output_path, "Output", self.work_dir)
        except InputError as exc:
            self.failed_stage = self.stage
            logger.error("input rejected: %s", exc)
            raise

        report = FryReportDTO(input_path=input_path, output_path=output_path)
        start_time: float = time.time()

        run_error: Optional[Exception] = None
        try:
            with temp_artifacts(self.work_dir) as (mpeg_path, wave_path):
                try:
                    self._degrade(
                        input_path, input_ext, output_path,
                        mpeg_path, wave_path, report, progress_callback,
                    )
                except Exception as exc:
                    run_error = exc
                    self.failed_stage = self.stage
                    logger.error("deep fry failed while %s: %s", self.stage, exc)
                    raise
                finally:
                    self._set_stage("cleaning up")
        except OSError as exc:
            if exc is run_error:
                raise
            # Raised by the scratch-file cleanup itself
            self.failed_stage = "cleaning up"
            logger.error("deep fry failed while cleaning up: %s", exc)
            if run_error is not None:
                raise exc from run_error
            raise

        report.elapsed_sec = time.time() - start_time
        self.stage = "done"
        logger.info(
            "fried %s -> %s in %.1fs (%d iterations, %d frames)",
            input_path, output_path, report.elapsed_sec,
            report.iterations, report.output_frames,
        )
        return report

    # ── Stages ───────────────────────────────────────────────────

    def _set_stage(self, stage: str, detail: Optional[str] = None) -> None:
        self.stage = stage
        message: str = f"{stage}: {detail}" if detail else stage
        logger.info("%s", message)
        if self._status_callback:
            self._status_callback(message)

    def _degrade(
        self,
        input_path: str,
        input_ext: str,
        output_path: str,
        mpeg_path: str,
        wave_path: str,
        report: FryReportDTO,
        progress_callback: Optional[ProgressCallback],
    ) -> None:
        samples, sample_rate = self._load(input_path, input_ext)
        report.input_frames = samples.shape[1]

        self._set_stage("downmixing")
        samples = downmix_to_mono(samples)

        total: int = self.config.iterations
        for i in range(1, total + 1):
            self.stage = f"iteration {i}/{total}"
            if progress_callback:
                progress_callback(i, total)

            bitrate: int = self.rng.choice(self.config.bitrates)
            report.bitrates_used.append(bitrate)
            logger.debug("iteration %d/%d at %d kbps", i, total, bitrate)

            samples, sample_rate = self._fry_once(
                samples, sample_rate, bitrate, mpeg_path, wave_path
            )

        if self.config.trim_enabled:
            self._set_stage("trimming")
            channel: np.ndarray = samples[0]
            kept: np.ndarray = self.trimmer.trim(channel)
            report.frames_trimmed = len(channel) - len(kept)
            samples = kept[np.newaxis, :]

        self._set_stage("writing", output_path)
        encoded: bytes = self.lossy_codec.encode(
            samples, sample_rate, self.config.final_bitrate
        )
        _write_bytes(output_path, encoded)

        report.sample_rate = sample_rate
        report.output_frames = samples.shape[1]

    def _load(self, input_path: str, input_ext: str) -> Tuple[np.ndarray, int]:
        try:
            data: bytes = _read_bytes(input_path)
        except OSError as exc:
            raise InputError(
                f"Cannot read input file: '{input_path}' ({exc.strerror or exc}).\n"
                f"    → Check that the file is readable."
            ) from exc
        if input_ext == MPEG_EXT:
            self._set_stage("decoding", input_path)
            return self.lossy_codec.decode(data)

        self._set_stage("reading", input_path)
        return self.container_codec.decode(data)

    def _fry_once(
        self,
        samples: np.ndarray,
        sample_rate: int,
        bitrate: int,
        mpeg_path: str,
        wave_path: str,
    ) -> Tuple[np.ndarray, int]:
        """One encode → decode → boost cycle; both scratch files are rewritten in full."""
        _write_bytes(mpeg_path, self.lossy_codec.encode(samples, sample_rate, bitrate))
        decoded, sample_rate = self.lossy_codec.decode(_read_bytes(mpeg_path))

        boosted: np.ndarray = boost(
            downmix_to_mono(decoded), self.config.boost_db, self.config.clip
        )

        _write_bytes(
            wave_path,
            self.container_codec.encode(boosted, sample_rate, OUTPUT_BIT_DEPTH),
        )
        return self.container_codec.decode(_read_bytes(wave_path))


def deep_fry(
    input_path: str,
    output_path: str,
    config: Optional[PipelineConfig] = None,
    progress_callback: Optional[ProgressCallback] = None,
    status_callback: Optional[StatusCallback] = None,
    seed: Optional[int] = None,
    work_dir: Optional[str] = None,
) -> FryReportDTO:
    """
    Full pipeline with the default codecs: pydub/FFmpeg for MP3, soundfile for WAV.

    Args:
        input_path:  Source file (.mp3 or .wav, case-insensitive).
        output_path: Destination MP3 file.
        config:      Pipeline settings (defaults: 50 iterations, 32–64 kbps,
                     +10 dB into soft clip ×10, trimming on).
        progress_callback: Optional callback (iteration, total).
        status_callback:   Optional callback receiving stage messages.
        seed:        Seed for the bitrate picker, for reproducible runs.
        work_dir:    Directory for the scratch files (default: cwd).
    """
    fryer = DeepFryer(
        config=config or PipelineConfig(),
        lossy_codec=PydubMp3Codec(),
        container_codec=SoundfileWavCodec(),
        rng=random.Random(seed),
        work_dir=work_dir,
    )
    return fryer.run(
        input_path,
        output_path,
        progress_callback=progress_callback,
        status_callback=status_callback,
    )
