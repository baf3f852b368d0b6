"""
TreeCheck — Custom Exception Hierarchy
=======================================
All TreeCheck tools raise exceptions from this module so callers can
catch them at the right level of granularity.

Hierarchy::

    TreeCheckError                       ← catch-all base
    ├── InputValidationError             ← bad files, bad buffers, bad settings
    │   ├── InvalidBufferError           ← pixel buffer size / sample mismatch
    │   └── ConfigurationError           ← detector or classifier setting out of range
    ├── ImageDecodeError                 ← image file / bytes cannot be decoded
    └── OutputWriteError                 ← cannot write to output path

Usage::

    from shared.python.exceptions import InvalidBufferError

    raise InvalidBufferError("zero width", width=0, height=100)
"""

from __future__ import annotations


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


class TreeCheckError(Exception):
    """Base exception for all TreeCheck tools.

    Catch this to handle any tool-specific error without caring about
    the exact subtype.

    Args:
        message: Human-readable description of the error.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message: str = message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------


class InputValidationError(TreeCheckError):
    """Raised when a tool's inputs fail pre-processing validation.

    This is the parent class for more specific input problems.
    """


class InvalidBufferError(InputValidationError):
    """Raised when a decoded pixel buffer cannot be scanned.

    Covers zero width or height, a sample count that does not equal
    ``width * height * channels``, an unsupported channel count and
    sample values outside the 8-bit range.

    Args:
        reason: Short explanation of what is wrong with the buffer.
        width: Declared buffer width in pixels.
        height: Declared buffer height in pixels.
        expected: Expected number of samples, when known.
        actual: Number of samples actually supplied, when known.

    Example::

        raise InvalidBufferError(
            "sample count mismatch", width=4, height=4, expected=48, actual=47
        )
    """

    def __init__(
        self,
        reason: str,
        *,
        width: int,
        height: int,
        expected: int | None = None,
        actual: int | None = None,
    ) -> None:
        detail = ""
        if expected is not None and actual is not None:
            detail = f" (expected {expected} samples, got {actual})"
        super().__init__(
            f"Invalid {width}x{height} pixel buffer: {reason}{detail}"
        )
        self.reason: str = reason
        self.width: int = width
        self.height: int = height
        self.expected: int | None = expected
        self.actual: int | None = actual


class ConfigurationError(InputValidationError):
    """Raised when a detector or classifier setting is out of range.

    Args:
        field: Name of the offending setting (e.g. ``"pixels_per_tree"``).
        reason: Why the value was rejected.

    Example::

        raise ConfigurationError("pixels_per_tree", "must be positive, got 0")
    """

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"Invalid setting '{field}': {reason}")
        self.field: str = field
        self.reason: str = reason


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


class ImageDecodeError(TreeCheckError):
    """Raised when an image source cannot be turned into a pixel buffer.

    The detection engine is never called with an image that failed to
    decode; callers surface this error instead.

    Args:
        source: Path or short description of the image source
                (e.g. ``"photos/before.jpg"`` or ``"<bytes: 2048>"``).
        reason: Underlying library error message.

    Example::

        raise ImageDecodeError("before.jpg", "not a supported image format")
    """

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Cannot decode image '{source}': {reason}")
        self.source: str = source
        self.reason: str = reason


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class OutputWriteError(TreeCheckError):
    """Raised when the tool cannot write its output to disk.

    Args:
        output_path: String representation of the path that failed.
        reason: Underlying OS or library error message.

    Example::

        raise OutputWriteError("/read-only/dir/report.json", "Permission denied")
    """

    def __init__(self, output_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to write output to '{output_path}': {reason}"
        )
        self.output_path: str = output_path
        self.reason: str = reason
