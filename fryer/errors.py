# fryer/errors.py
# Exception taxonomy for the deep-fry pipeline.


class DeepFryError(Exception):
    """Base class for every failure raised by the pipeline itself."""


class InputError(DeepFryError, ValueError):
    """Unsupported, missing or unreadable input. Raised before temp files exist."""


class CodecError(DeepFryError, RuntimeError):
    """A lossy or container codec failed to encode or decode."""
