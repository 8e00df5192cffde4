import os
from typing import Optional, Tuple

from fryer.errors import InputError

# Supported formats
MPEG_EXT: str = ".mp3"
WAVE_EXT: str = ".wav"
SUPPORTED_INPUT_FORMATS: set[str] = {MPEG_EXT, WAVE_EXT}

# Scratch files reused by every iteration, relative to the working directory
TEMP_MPEG_NAME: str = "_temp-mpeg.mp3"
TEMP_WAVE_NAME: str = "_temp-wave.wav"

USAGE: str = "Usage: deep-fry <src-file[.wav|.mp3]> <dst-file[.mp3]>"


# Validation helpers
def classify_input(path: str) -> str:
    """
    Return the lowercased extension of a usable input file.

    Raises InputError when the file is missing, is not a regular file, or
    is neither MP3 nor WAV.
    """
    ext: str = os.path.splitext(path)[1].lower()
    if ext not in SUPPORTED_INPUT_FORMATS:
        raise InputError(
            f"Unsupported file type: '{ext or os.path.basename(path)}'.\n"
            f"    Supported: {', '.join(sorted(SUPPORTED_INPUT_FORMATS))}\n"
            f"    → Example: deep-fry song.wav song_fried.mp3"
        )
    if not os.path.exists(path):
        raise InputError(
            f"Input file not found: '{path}'.\n"
            f"    → Check the path and try again."
        )
    if not os.path.isfile(path):
        raise InputError(
            f"Input path is not a file: '{path}'.\n"
            f"    → Provide a path to an audio file, not a directory."
        )
    return ext


def validate_output_path(path: str) -> None:
    """Raise InputError if the output directory does not exist."""
    output_dir: str = os.path.dirname(os.path.abspath(path))
    if not os.path.isdir(output_dir):
        raise InputError(
            f"Output directory does not exist: '{output_dir}'.\n"
            f"    → Create the directory first, or choose an existing path."
        )


def validate_param_range(
    value: float, name: str, min_val: float, max_val: Optional[float] = None
) -> None:
    """Raise ValueError if a numeric parameter is out of its valid range."""
    if max_val is None:
        if value < min_val:
            raise ValueError(
                f"Parameter '{name}' must be at least {min_val}. Got: {value}.\n"
                f"    → Adjust the value to be within the valid range."
            )
        return
    if not (min_val <= value <= max_val):
        raise ValueError(
            f"Parameter '{name}' must be between {min_val} and {max_val}. Got: {value}.\n"
            f"    → Adjust the value to be within the valid range."
        )


def parse_bitrates(text: str) -> Tuple[int, ...]:
    """Parse a comma-separated kbps list such as ``"32,48,64"``."""
    parts = [part.strip() for part in text.split(",") if part.strip()]
    if not parts:
        raise ValueError(
            "Bitrate pool must not be empty.\n"
            "    → Example: --bitrates 32,48,64"
        )
    try:
        bitrates = tuple(int(part) for part in parts)
    except ValueError:
        raise ValueError(
            f"Bitrates must be whole numbers in kbps. Got: '{text}'.\n"
            f"    → Example: --bitrates 32,48,64"
        ) from None
    for bitrate in bitrates:
        if bitrate <= 0:
            raise ValueError(f"Bitrates must be positive. Got: {bitrate}.")
    return bitrates


# Path helpers

def temp_artifact_paths(work_dir: Optional[str] = None) -> Tuple[str, str]:
    """Return the (mpeg, wave) scratch paths inside ``work_dir`` (default: cwd)."""
    base_dir: str = os.path.abspath(work_dir or os.getcwd())
    return (
        os.path.join(base_dir, TEMP_MPEG_NAME),
        os.path.join(base_dir, TEMP_WAVE_NAME),
    )


def validate_not_temp_artifact(
    path: str, role: str, work_dir: Optional[str] = None
) -> None:
    """Raise InputError if ``path`` is one of the scratch files a run overwrites and deletes."""
    target: str = os.path.normcase(os.path.abspath(path))
    for temp_path in temp_artifact_paths(work_dir):
        if target == os.path.normcase(temp_path):
            raise InputError(
                f"{role} file is a scratch file of the run: '{path}'.\n"
                f"    → Rename the file, or move the scratch files with --temp-dir."
            )


def try_unlink(path: str) -> bool:
    """Delete ``path``. A missing file is fine; any other OSError propagates."""
    try:
        os.remove(path)
    except FileNotFoundError:
        return False
    return True
