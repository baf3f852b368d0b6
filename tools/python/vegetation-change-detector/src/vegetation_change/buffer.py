"""
Vegetation Change Detector — Pixel Buffer
==========================================
A decoded image as an immutable grid of 8-bit RGB or RGBA samples.

The decoder collaborator (see :mod:`vegetation_change.decoder`) produces
one :class:`PixelBuffer` per image; the engine only ever reads from it.
Validation happens once, at construction, so every buffer that exists
is safe to scan.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np
import numpy.typing as npt

from shared.python.exceptions import InvalidBufferError
from shared.python.validators import Validators

SUPPORTED_CHANNELS = (3, 4)


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """Row-major grid of 8-bit samples for one decoded image.

    Args:
        width: Image width in pixels.  Must be positive.
        height: Image height in pixels.  Must be positive.
        data: ``width * height * channels`` samples in row-major order.
              Accepts ``bytes``/``bytearray``/``memoryview``, a sequence
              of ints in 0–255, or a numpy array of any shape with that
              many elements.
        channels: 3 for RGB or 4 for RGBA (canvas ``getImageData`` order).

    Raises:
        InvalidBufferError: If the grid is empty, the sample count does
            not match, the channel count is unsupported, or any sample
            lies outside 0–255.

    Example::

        buf = PixelBuffer(width=2, height=1, data=bytes([0, 200, 0, 0, 0, 0]))
        buf.total_pixels   # 2
    """

    width: int
    height: int
    data: npt.NDArray[np.uint8] = field(repr=False)
    channels: int = 3

    def __post_init__(self) -> None:
        Validators.assert_buffer_dimensions(self.width, self.height)
        if self.channels not in SUPPORTED_CHANNELS:
            raise InvalidBufferError(
                f"unsupported channel count {self.channels} "
                f"(expected one of {SUPPORTED_CHANNELS})",
                width=self.width,
                height=self.height,
            )

        samples = self._as_uint8(self.data)
        Validators.assert_sample_count(samples.size, self.width, self.height, self.channels)

        # Private read-only copy: the caller keeps ownership of what it passed in.
        samples = samples.reshape(-1).copy()
        samples.setflags(write=False)
        object.__setattr__(self, "data", samples)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_array(cls, array: npt.ArrayLike) -> "PixelBuffer":
        """Build a buffer from an ``(H, W)``, ``(H, W, 3)`` or ``(H, W, 4)`` array.

        Two-dimensional (grayscale) arrays are expanded to RGB by
        repeating the single channel.

        Raises:
            InvalidBufferError: If the array has any other shape.
        """
        arr = np.asarray(array)
        if arr.ndim == 2:
            arr = np.repeat(arr[:, :, np.newaxis], 3, axis=2)
        if arr.ndim != 3 or arr.shape[2] not in SUPPORTED_CHANNELS:
            height = arr.shape[0] if arr.ndim >= 1 else 0
            width = arr.shape[1] if arr.ndim >= 2 else 0
            raise InvalidBufferError(
                f"expected an (H, W), (H, W, 3) or (H, W, 4) array, got shape {arr.shape}",
                width=width,
                height=height,
            )
        height, width, channels = arr.shape
        return cls(width=width, height=height, data=arr, channels=channels)

    @classmethod
    def filled(cls, width: int, height: int, rgb: tuple[int, int, int]) -> "PixelBuffer":
        """Build a buffer where every pixel has the same RGB value."""
        Validators.assert_buffer_dimensions(width, height)
        arr = np.tile(np.asarray(rgb, dtype=np.int64), (height, width, 1))
        return cls(width=width, height=height, data=arr, channels=3)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def total_pixels(self) -> int:
        """Number of pixels in the grid (``width * height``)."""
        return self.width * self.height

    @property
    def shape(self) -> tuple[int, int, int]:
        """``(height, width, channels)`` — numpy image order."""
        return (self.height, self.width, self.channels)

    def rgb(self) -> npt.NDArray[np.uint8]:
        """Read-only ``(N, 3)`` view of the red, green and blue samples.

        Alpha, when present, is dropped; the classifier ignores it.
        """
        return self.data.reshape(-1, self.channels)[:, :3]

    def __repr__(self) -> str:
        return (
            f"PixelBuffer(width={self.width}, height={self.height}, "
            f"channels={self.channels})"
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _as_uint8(self, data: Any) -> npt.NDArray[np.uint8]:
        """Coerce *data* to a uint8 array, rejecting out-of-range samples."""
        if isinstance(data, (bytes, bytearray, memoryview)):
            return np.frombuffer(data, dtype=np.uint8)

        arr = np.asarray(data)
        if arr.dtype == np.uint8:
            return arr
        if arr.size == 0:
            return arr.astype(np.uint8)
        if arr.dtype.kind not in "iub":
            raise InvalidBufferError(
                f"samples must be integers, got dtype {arr.dtype}",
                width=self.width,
                height=self.height,
            )
        if int(arr.min()) < 0 or int(arr.max()) > 255:
            raise InvalidBufferError(
                "samples must lie in 0-255",
                width=self.width,
                height=self.height,
            )
        return arr.astype(np.uint8)
