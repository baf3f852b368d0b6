"""
TreeCheck — Shared Input Validators
====================================
Static utility methods used across every TreeCheck tool to validate
common preconditions before processing begins.

All methods raise an appropriate exception from
:mod:`shared.python.exceptions` rather than returning booleans — this
makes ``validate_inputs`` implementations in each tool simple and
readable::

    class MyTool(TreeCheckTool):
        def validate_inputs(self) -> None:
            Validators.assert_file_exists(self.input_path)
            Validators.assert_supported_extension(self.input_path, [".png"])
"""

from __future__ import annotations

import numbers
from pathlib import Path
from typing import Sequence

from shared.python.exceptions import (
    ConfigurationError,
    InputValidationError,
    InvalidBufferError,
    OutputWriteError,
)


class Validators:
    """Collection of static precondition checks shared across all tools.

    All methods are ``@staticmethod`` — this class is never instantiated.
    It exists purely as a logical namespace.
    """

    # ------------------------------------------------------------------
    # File-system checks
    # ------------------------------------------------------------------

    @staticmethod
    def assert_file_exists(path: Path) -> None:
        """Assert that *path* points to an existing regular file.

        Args:
            path: Path object to check.

        Raises:
            InputValidationError: If *path* does not exist or is a
                directory rather than a file.

        Example::

            Validators.assert_file_exists(Path("photos/before.jpg"))
        """
        path = Path(path)
        if not path.exists():
            raise InputValidationError(
                f"Input file not found: '{path}'. "
                "Check that the path is correct and the file exists."
            )
        if path.is_dir():
            raise InputValidationError(
                f"Expected a file but got a directory: '{path}'."
            )

    @staticmethod
    def assert_output_dir_writable(output_path: Path) -> None:
        """Assert that the parent directory of *output_path* is writable.

        Creates the parent directory (and any missing parents) if it does
        not yet exist, so callers never have to pre-create output dirs.

        Args:
            output_path: Intended output file path.  The parent directory
                         is created if absent.

        Raises:
            OutputWriteError: If the parent directory cannot be created.
        """
        parent = Path(output_path).parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputWriteError(str(output_path), str(exc)) from exc

    @staticmethod
    def assert_supported_extension(path: Path, extensions: Sequence[str]) -> None:
        """Assert that *path* has one of the allowed file extensions.

        Args:
            path: File path to check.
            extensions: Sequence of allowed extensions, each starting with
                        a dot (e.g. ``[".png", ".jpg", ".tif"]``).

        Raises:
            InputValidationError: If the file extension is not in
                *extensions*.
        """
        path = Path(path)
        suffix = path.suffix.lower()
        allowed = [ext.lower() for ext in extensions]
        if suffix not in allowed:
            raise InputValidationError(
                f"Unsupported file extension '{suffix}' for '{path.name}'. "
                f"Accepted extensions: {', '.join(allowed)}"
            )

    # ------------------------------------------------------------------
    # Pixel buffer checks
    # ------------------------------------------------------------------

    @staticmethod
    def assert_buffer_dimensions(width: int, height: int) -> None:
        """Assert that a pixel buffer has a non-empty grid.

        Args:
            width: Declared width in pixels.
            height: Declared height in pixels.

        Raises:
            InvalidBufferError: If either dimension is zero or negative.
        """
        if width <= 0 or height <= 0:
            raise InvalidBufferError(
                "width and height must both be positive",
                width=width,
                height=height,
            )

    @staticmethod
    def assert_sample_count(
        sample_count: int,
        width: int,
        height: int,
        channels: int,
    ) -> None:
        """Assert that a flat sample sequence fills the declared grid exactly.

        Args:
            sample_count: Number of 8-bit samples supplied.
            width: Declared width in pixels.
            height: Declared height in pixels.
            channels: Samples per pixel (3 for RGB, 4 for RGBA).

        Raises:
            InvalidBufferError: If ``sample_count != width * height * channels``.

        Example::

            Validators.assert_sample_count(len(data), 640, 480, 4)
        """
        expected = width * height * channels
        if sample_count != expected:
            raise InvalidBufferError(
                "sample data does not match width x height x channels",
                width=width,
                height=height,
                expected=expected,
                actual=sample_count,
            )

    # ------------------------------------------------------------------
    # Numeric setting checks
    # ------------------------------------------------------------------

    @staticmethod
    def assert_number(field: str, value: object) -> None:
        """Assert that a setting is a real number (booleans excluded).

        Raises:
            ConfigurationError: If *value* is not numeric.
        """
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise ConfigurationError(field, f"must be a number, got {value!r}")

    @staticmethod
    def assert_in_range(
        field: str,
        value: float,
        minimum: float,
        maximum: float | None = None,
    ) -> None:
        """Assert that a numeric setting lies in ``[minimum, maximum]``.

        Args:
            field: Setting name, used in the error message.
            value: Value to check.
            minimum: Inclusive lower bound.
            maximum: Inclusive upper bound, or ``None`` for no upper bound.

        Raises:
            ConfigurationError: If *value* is not a number or falls outside
                the range.
        """
        Validators.assert_number(field, value)
        if value < minimum or (maximum is not None and value > maximum):
            bound = f"[{minimum}, {maximum}]" if maximum is not None else f">= {minimum}"
            raise ConfigurationError(field, f"must be {bound}, got {value!r}")
