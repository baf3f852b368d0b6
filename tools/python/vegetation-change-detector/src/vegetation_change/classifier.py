"""
Vegetation Change Detector — Pixel Classifier
==============================================
Decides per pixel whether an RGB sample counts as "vegetation".

The rule is a green-dominance test::

    g > r  AND  g > b  AND  g > min_green
           AND  (g - r) > min_green_red_delta
           AND  (g - b) > min_green_blue_delta

with defaults ``min_green=40``, ``min_green_red_delta=10``,
``min_green_blue_delta=10``.  The ``min_green`` floor keeps near-black
noise out; the two deltas demand a visibly green cast rather than a
neutral grey.

This is a heuristic, not a calibrated colour-space classifier.  It will
count green-painted fences, tarps and turf as vegetation, and it will
miss desaturated, yellowing or shadowed foliage.  The defaults are kept
exactly as they are because downstream thresholds (detection threshold,
pixels-per-tree) were tuned against them.

Functions:
    is_vegetation       Scalar predicate for one ``(r, g, b)`` sample.
    vegetation_mask     Vectorised predicate over an ``(N, 3)`` array.
    count_vegetation    Number of vegetation pixels in a PixelBuffer.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from shared.python.validators import Validators

from vegetation_change.buffer import PixelBuffer


@dataclass(frozen=True)
class ClassifierThresholds:
    """Tunable limits of the green-dominance test.

    Attributes:
        min_green: Green must be strictly above this (suppresses dark noise).
        min_green_red_delta: ``g - r`` must be strictly above this.
        min_green_blue_delta: ``g - b`` must be strictly above this.
    """

    min_green: int = 40
    min_green_red_delta: int = 10
    min_green_blue_delta: int = 10

    def __post_init__(self) -> None:
        Validators.assert_in_range("min_green", self.min_green, 0, 255)
        Validators.assert_in_range("min_green_red_delta", self.min_green_red_delta, 0, 255)
        Validators.assert_in_range("min_green_blue_delta", self.min_green_blue_delta, 0, 255)


DEFAULT_THRESHOLDS = ClassifierThresholds()


def is_vegetation(
    r: int,
    g: int,
    b: int,
    thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS,
) -> bool:
    """Return ``True`` when the sample ``(r, g, b)`` is green-dominant.

    Total and side-effect free: any three integers give a boolean.

    Example::

        is_vegetation(0, 255, 0)      # True
        is_vegetation(255, 255, 255)  # False — no green cast
        is_vegetation(0, 0, 0)        # False
    """
    r, g, b = int(r), int(g), int(b)
    return (
        g > r
        and g > b
        and g > thresholds.min_green
        and (g - r) > thresholds.min_green_red_delta
        and (g - b) > thresholds.min_green_blue_delta
    )


def vegetation_mask(
    rgb: npt.NDArray[np.integer],
    thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS,
) -> npt.NDArray[np.bool_]:
    """Apply :func:`is_vegetation` to every row of an ``(..., 3)`` array.

    Args:
        rgb: Array whose last axis holds red, green, blue.
        thresholds: Classifier limits.

    Returns:
        Boolean array with the shape of ``rgb`` minus its last axis.
    """
    # int16 so that g - r cannot wrap around on uint8 input
    samples = np.asarray(rgb).astype(np.int16, copy=False)
    r = samples[..., 0]
    g = samples[..., 1]
    b = samples[..., 2]
    return (
        (g > r)
        & (g > b)
        & (g > thresholds.min_green)
        & ((g - r) > thresholds.min_green_red_delta)
        & ((g - b) > thresholds.min_green_blue_delta)
    )


def count_vegetation(
    buffer: PixelBuffer,
    thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS,
) -> int:
    """Count the pixels of *buffer* classified as vegetation.

    A full scan, ``O(width * height)``.  The result is always between 0
    and ``buffer.total_pixels``.
    """
    return int(np.count_nonzero(vegetation_mask(buffer.rgb(), thresholds)))
