"""
TreeCheck — Shared Python Package
==================================
Re-exports the shared base class, exception hierarchy, and validator
utilities so individual tools can import from a single location::

    from shared.python import TreeCheckTool, Validators
    from shared.python.exceptions import InvalidBufferError
"""

from shared.python.base_tool import TreeCheckTool
from shared.python.exceptions import (
    ConfigurationError,
    ImageDecodeError,
    InputValidationError,
    InvalidBufferError,
    OutputWriteError,
    TreeCheckError,
)
from shared.python.validators import Validators

__all__ = [
    "TreeCheckTool",
    "Validators",
    "TreeCheckError",
    "InputValidationError",
    "InvalidBufferError",
    "ConfigurationError",
    "ImageDecodeError",
    "OutputWriteError",
]
