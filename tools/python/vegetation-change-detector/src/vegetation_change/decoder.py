"""
Vegetation Change Detector — Image Decoder
===========================================
Turns image files or encoded image bytes (uploads, camera frames) into
:class:`~vegetation_change.buffer.PixelBuffer` objects.

Decoding goes through :mod:`rasterio` (GDAL), which reads PNG, JPEG,
GeoTIFF, BMP and GIF.  Plain photos carry no georeferencing, so the
``NotGeoreferencedWarning`` rasterio emits for them is silenced.

Band handling::

    1 band   palette         → looked up in the colour table (RGBA)
    1 band   grey            → expanded to RGB
    2 bands  grey + alpha    → grey expanded to RGB, alpha dropped
    3 bands  RGB
    4+ bands RGBA (first four bands)

Any failure raises :class:`~shared.python.exceptions.ImageDecodeError`;
the engine is never called with a partially decoded image.
"""

from __future__ import annotations

import logging
import warnings
from pathlib import Path

import numpy as np
import numpy.typing as npt
import rasterio
from rasterio.enums import ColorInterp
from rasterio.errors import NotGeoreferencedWarning, RasterioIOError
from rasterio.io import DatasetReader, MemoryFile

from shared.python.exceptions import ImageDecodeError, InvalidBufferError
from shared.python.validators import Validators

from vegetation_change.buffer import PixelBuffer

logger = logging.getLogger("treecheck.vegetation_change.decoder")


class ImageDecoder:
    """Decode images into pixel buffers.

    All methods are stateless; a single instance can be reused freely.

    Example::

        decoder = ImageDecoder()
        before = decoder.decode_file(Path("site_before.jpg"))
        after = decoder.decode_bytes(upload.read())
    """

    SUPPORTED_EXTENSIONS = [".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".gif"]

    def decode_file(self, path: Path) -> PixelBuffer:
        """Decode the image stored at *path*.

        Raises:
            InputValidationError: If *path* is missing or has an
                unsupported extension.
            ImageDecodeError: If the file cannot be read as an 8-bit image.
        """
        path = Path(path)
        Validators.assert_file_exists(path)
        Validators.assert_supported_extension(path, self.SUPPORTED_EXTENSIONS)

        try:
            with warnings.catch_warnings():
                warnings.simplefilter("ignore", NotGeoreferencedWarning)
                with rasterio.open(path) as src:
                    buffer = self._read(src, str(path))
        except RasterioIOError as exc:
            raise ImageDecodeError(str(path), str(exc)) from exc

        logger.debug("Decoded %s → %r", path.name, buffer)
        return buffer

    def decode_bytes(self, data: bytes, *, label: str | None = None) -> PixelBuffer:
        """Decode an encoded image held in memory.

        Args:
            data: Complete encoded file contents (PNG, JPEG, ...).
            label: Name used in log and error messages.  Defaults to
                   ``"<bytes: N>"``.

        Raises:
            ImageDecodeError: If *data* is empty or not a readable 8-bit image.
        """
        source = label or f"<bytes: {len(data)}>"
        if not data:
            raise ImageDecodeError(source, "no image data")

        try:
            with warnings.catch_warnings():
                warnings.simplefilter("ignore", NotGeoreferencedWarning)
                with MemoryFile(bytes(data)) as memfile:
                    with memfile.open() as src:
                        buffer = self._read(src, source)
        except RasterioIOError as exc:
            raise ImageDecodeError(source, str(exc)) from exc

        logger.debug("Decoded %s → %r", source, buffer)
        return buffer

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _read(self, src: DatasetReader, source: str) -> PixelBuffer:
        """Read an open dataset into a :class:`PixelBuffer`."""
        if src.count < 1:
            raise ImageDecodeError(source, "image has no bands")
        if any(dtype != "uint8" for dtype in src.dtypes):
            raise ImageDecodeError(
                source, f"expected 8-bit samples, got {', '.join(sorted(set(src.dtypes)))}"
            )

        if src.colorinterp[0] == ColorInterp.palette:
            pixels = self._apply_palette(src.read(1), src.colormap(1))
        else:
            band_count = min(src.count, 4)
            pixels = self._to_pixels(src.read(list(range(1, band_count + 1))))
        try:
            return PixelBuffer.from_array(pixels)
        except InvalidBufferError as exc:
            raise ImageDecodeError(source, exc.message) from exc

    @staticmethod
    def _to_pixels(bands: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
        """Rearrange ``(bands, H, W)`` into an ``(H, W, 3|4)`` pixel grid."""
        if bands.shape[0] <= 2:
            grey = bands[0]
            return np.stack([grey, grey, grey], axis=-1)
        return np.moveaxis(bands, 0, -1)

    @staticmethod
    def _apply_palette(
        indices: npt.NDArray[np.uint8],
        colormap: dict[int, tuple[int, int, int, int]],
    ) -> npt.NDArray[np.uint8]:
        """Resolve palette indices into an ``(H, W, 4)`` RGBA grid.

        Indices missing from *colormap* decode as transparent black.
        """
        lut = np.zeros((256, 4), dtype=np.uint8)
        for index, rgba in colormap.items():
            if 0 <= index < 256:
                lut[index] = rgba[:4]
        return lut[indices]
