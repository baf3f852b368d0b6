"""
Vegetation Change Detector — Scoring
=====================================
Pure formulas that turn two vegetation pixel counts into the public
metrics.  Nothing here touches pixels.

Confidence curve (``d`` = after − before, in pixels)::

    detected, d > 5000          min(95 + d / 10000, 99.9)
    detected, 2000 < d <= 5000  85 + d / 1000
    detected, otherwise         70 + d / 500
    not detected                clamp(d / 1000 * 50, 0, 50)

The tiers jump at 2000 and 5000 (e.g. 2000 → 74.0 but 2001 → 87.001).
The breakpoints are calibration, not a statistical model; keep them.
"""

from __future__ import annotations

import math

#: Highest confidence ever reported.
MAX_CONFIDENCE = 99.9

#: Ceiling for the confidence of a change that was *not* detected.
UNDETECTED_CONFIDENCE_CAP = 50.0

#: Reported increase when the "before" image had no vegetation at all.
ZERO_BASELINE_INCREASE = 100.0

# (lower bound exclusive, base, divisor) — checked top-down.
_DETECTED_TIERS: tuple[tuple[int, float, float], ...] = (
    (5000, 95.0, 10000.0),
    (2000, 85.0, 1000.0),
)
_DETECTED_FALLBACK = (70.0, 500.0)
_UNDETECTED_SCALE = 1000.0


def increase_percentage(before_count: int, after_count: int) -> float:
    """Relative change of the vegetation count, in percent.

    A zero baseline is defined as a 100% increase, whatever the after
    count (including zero).
    """
    if before_count > 0:
        return (after_count - before_count) / before_count * 100
    return ZERO_BASELINE_INCREASE


def coverage_percentage(count: int, total_pixels: int) -> float:
    """Share of an image's pixels that are vegetation, in ``[0, 100]``."""
    return min(max(count / total_pixels * 100, 0.0), 100.0)


def detection_confidence(difference: int, detected: bool) -> float:
    """Heuristic confidence in ``[0, 99.9]`` for a given pixel gain."""
    if not detected:
        confidence = difference / _UNDETECTED_SCALE * UNDETECTED_CONFIDENCE_CAP
        return max(0.0, min(confidence, UNDETECTED_CONFIDENCE_CAP))

    for lower, base, divisor in _DETECTED_TIERS:
        if difference > lower:
            confidence = base + difference / divisor
            break
    else:
        base, divisor = _DETECTED_FALLBACK
        confidence = base + difference / divisor

    return max(0.0, min(confidence, MAX_CONFIDENCE))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives.

    ``round()`` would send 2.5 to 2; tree counts have always gone to 3.
    """
    return int(math.floor(value + 0.5))


def estimate_tree_count(before_count: int, after_count: int, pixels_per_tree: int) -> int:
    """Trees visible in the greener of the two images."""
    return round_half_up(max(before_count, after_count) / pixels_per_tree)


def trees_in(count: int, pixels_per_tree: int) -> int:
    """Trees represented by one image's vegetation count."""
    return round_half_up(count / pixels_per_tree)


def annual_exchange(total_trees: int, per_tree_kg: float) -> int:
    """Yearly gas exchange for *total_trees*, rounded to whole kilograms."""
    return round_half_up(total_trees * per_tree_kg)
