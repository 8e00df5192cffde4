#!/usr/bin/env python3
"""
Deep Fry CLI
Destroy an audio recording on purpose: run it through MP3 compression dozens
of times, boosting and clipping after every pass, then write the wreckage as MP3.

Usage:
    python main.py input.wav output.mp3
    python main.py input.mp3 output.mp3 --iterations 20 --clip hard --slope 2
    python main.py input.wav output.mp3 --bitrates 32,64 --boost 6 --no-trim
"""

import argparse
import logging
import os
import random
import sys
import time
from typing import List, Optional

from tqdm import tqdm

from application.dto.pipeline_config import (
    DEFAULT_BITRATES,
    DEFAULT_BOOST_DB,
    DEFAULT_CLIP_SLOPE,
    DEFAULT_FINAL_BITRATE,
    DEFAULT_ITERATIONS,
    PipelineConfig,
    TrimSettings,
)
from fryer.clip import CLIP_FACTORIES, parse_clip
from fryer.core import DeepFryer
from fryer.errors import CodecError, InputError
from fryer.printer import OutputPrinter
from fryer.utils import USAGE, parse_bitrates, validate_param_range
from infrastructure.audio.pydub_mp3_codec import PydubMp3Codec
from infrastructure.audio.soundfile_wav_codec import SoundfileWavCodec

EXIT_OK: int = 0
EXIT_USAGE: int = 1
EXIT_FAILURE: int = 2
EXIT_INTERRUPTED: int = 130

_TRIM_DEFAULTS = TrimSettings()


def build_parser() -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="deep-fry",
        description="Deep-fry audio: repeated MP3 compression, boost and clipping.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py voice.wav voice_fried.mp3
  python main.py song.mp3 song_fried.mp3 --iterations 10 --boost 3
  python main.py song.wav out.mp3 --clip diode --slope 4 --seed 7

Parameter guide:
  --iterations 5   = crunchy      | 50  = thoroughly fried
  --boost      0   = level only   | 10  = heavy drive every pass
  --clip       hard = harsh edges | soft = tanh warmth | diode = power-law knee
        """,
    )

    # Positional arguments (both optional so a bare call prints usage)
    parser.add_argument(
        "input",
        metavar="SRC",
        nargs="?",
        default=None,
        help="Path to the input audio file (.wav or .mp3).",
    )
    parser.add_argument(
        "output",
        metavar="DST",
        nargs="?",
        default=None,
        help="Path for the fried MP3 file.",
    )

    fry_group = parser.add_argument_group("Degradation Parameters")
    fry_group.add_argument(
        "--iterations",
        "-i",
        type=int,
        default=DEFAULT_ITERATIONS,
        metavar="N",
        help=f"Encode/decode/boost passes (default: {DEFAULT_ITERATIONS}).",
    )
    fry_group.add_argument(
        "--bitrates",
        "-b",
        type=str,
        default=",".join(str(b) for b in DEFAULT_BITRATES),
        metavar="KBPS,...",
        help="Pool of MP3 bitrates, one picked at random per pass "
        f"(default: {','.join(str(b) for b in DEFAULT_BITRATES)}).",
    )
    fry_group.add_argument(
        "--boost",
        "-g",
        type=float,
        default=DEFAULT_BOOST_DB,
        metavar="DB",
        help=f"Gain applied after every pass, in dB (default: {DEFAULT_BOOST_DB}).",
    )
    fry_group.add_argument(
        "--clip",
        type=str,
        default="soft",
        choices=sorted(CLIP_FACTORIES),
        help="Clip curve applied after the boost (default: soft).",
    )
    fry_group.add_argument(
        "--slope",
        type=float,
        default=DEFAULT_CLIP_SLOPE,
        metavar="S",
        help=f"Slope of the clip curve (default: {DEFAULT_CLIP_SLOPE}).",
    )
    fry_group.add_argument(
        "--final-bitrate",
        type=int,
        default=DEFAULT_FINAL_BITRATE,
        metavar="KBPS",
        help=f"Bitrate of the written MP3 (default: {DEFAULT_FINAL_BITRATE}).",
    )
    fry_group.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the bitrate picker, for repeatable runs.",
    )

    trim_group = parser.add_argument_group("Noise Trimming")
    trim_group.add_argument(
        "--no-trim",
        action="store_true",
        help="Keep the noisy lead-in and tail.",
    )
    trim_group.add_argument(
        "--integrator-window",
        type=int,
        default=_TRIM_DEFAULTS.integrator_window,
        metavar="N",
        help=f"Samples per envelope window (default: {_TRIM_DEFAULTS.integrator_window}).",
    )
    trim_group.add_argument(
        "--average-window",
        type=int,
        default=_TRIM_DEFAULTS.average_window,
        metavar="N",
        help=f"Envelope smoothing horizon (default: {_TRIM_DEFAULTS.average_window}).",
    )
    trim_group.add_argument(
        "--low-threshold",
        type=float,
        default=_TRIM_DEFAULTS.low_threshold,
        metavar="R",
        help=f"Ratio below which noise ends (default: {_TRIM_DEFAULTS.low_threshold}).",
    )
    trim_group.add_argument(
        "--high-threshold",
        type=float,
        default=_TRIM_DEFAULTS.high_threshold,
        metavar="R",
        help=f"Ratio above which noise resumes (default: {_TRIM_DEFAULTS.high_threshold}).",
    )

    out_group = parser.add_argument_group("Output Options")
    out_group.add_argument(
        "--temp-dir",
        type=str,
        default=None,
        metavar="DIR",
        help="Directory for the two scratch files (default: current directory).",
    )
    out_group.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress all output except errors.",
    )
    out_group.add_argument(
        "--no-color",
        "-n",
        action="store_true",
        help="Disable colored output (also auto-disabled when NO_COLOR env var is set).",
    )
    out_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every stage.",
    )

    return parser


def build_config(args: argparse.Namespace) -> PipelineConfig:
    """Turn parsed options into a PipelineConfig. Raises ValueError on bad values."""
    validate_param_range(args.iterations, "iterations", 1)
    validate_param_range(args.final_bitrate, "final_bitrate", 1)
    validate_param_range(args.boost, "boost", -60.0, 60.0)

    trim = TrimSettings(
        integrator_window=args.integrator_window,
        average_window=args.average_window,
        low_threshold=args.low_threshold,
        high_threshold=args.high_threshold,
    )
    return PipelineConfig(
        bitrates=parse_bitrates(args.bitrates),
        iterations=args.iterations,
        boost_db=args.boost,
        clip=parse_clip(args.clip, args.slope),
        trim_enabled=not args.no_trim,
        trim=trim,
        final_bitrate=args.final_bitrate,
    )


class IterationProgress:
    """tqdm bar for the degradation loop, closed before the next stage line."""

    def __init__(self, printer: OutputPrinter) -> None:
        self.printer: OutputPrinter = printer
        self.bar: Optional[tqdm] = None

    def on_progress(self, iteration: int, total: int) -> None:
        if self.printer.quiet:
            return
        if self.bar is None:
            self.bar = tqdm(total=total, desc="- frying", unit="pass")
        self.bar.update(1)

    def on_status(self, message: str) -> None:
        self.close()
        self.printer.stage(message)

    def close(self) -> None:
        if self.bar is not None:
            self.bar.close()
            self.bar = None


def main(argv: Optional[List[str]] = None) -> int:
    parser: argparse.ArgumentParser = build_parser()
    try:
        args: argparse.Namespace = parser.parse_args(argv)
    except SystemExit as exc:
        # --help exits 0, bad options exit 2; map the latter to a usage error
        return EXIT_OK if exc.code in (0, None) else EXIT_USAGE

    printer: OutputPrinter = OutputPrinter(quiet=args.quiet, no_color=args.no_color)

    if args.input is None or args.output is None:
        printer.usage(USAGE)
        return EXIT_OK

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    try:
        config: PipelineConfig = build_config(args)
    except ValueError as exc:
        printer.error(str(exc))
        return EXIT_USAGE

    fryer: DeepFryer = DeepFryer(
        config=config,
        lossy_codec=PydubMp3Codec(),
        container_codec=SoundfileWavCodec(),
        rng=random.Random(args.seed),
        work_dir=args.temp_dir,
    )
    progress: IterationProgress = IterationProgress(printer)

    start_time: float = time.time()
    try:
        report = fryer.run(
            args.input,
            args.output,
            progress_callback=progress.on_progress,
            status_callback=progress.on_status,
        )
    except InputError as exc:
        progress.close()
        printer.error(str(exc))
        printer.usage(USAGE)
        return EXIT_USAGE
    except (CodecError, OSError) as exc:
        progress.close()
        stage: str = fryer.failed_stage or fryer.stage
        message: str = f"Failed while {stage}: {exc}"
        if stage == "cleaning up" and exc.__cause__ is not None:
            message += f"\n    → The run had already failed: {exc.__cause__}"
        printer.error(message)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        progress.close()
        printer.warning("Deep fry cancelled.", hint="Output file was not saved.")
        return EXIT_INTERRUPTED
    except Exception as exc:
        progress.close()
        stage = fryer.failed_stage or fryer.stage
        printer.error(f"Failed while {stage}: {type(exc).__name__}: {exc}")
        return EXIT_FAILURE
    finally:
        progress.close()

    size_kb: float = os.path.getsize(report.output_path) / 1024
    elapsed: float = time.time() - start_time
    printer.success(
        title=report.output_path,
        details={
            "Passes": str(report.iterations),
            "Frames": f"{report.output_frames} ({report.frames_trimmed} trimmed)",
            "Size": f"{size_kb:.1f} KB",
            "Time": f"{elapsed:.1f}s",
        },
    )
    return EXIT_OK


def main_entry() -> None:
    sys.exit(main())


if __name__ == "__main__":
    main_entry()
