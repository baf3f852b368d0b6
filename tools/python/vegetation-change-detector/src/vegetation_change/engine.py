"""
Vegetation Change Detector — Engine
====================================
Compares the vegetation content of a "before" and an "after" image of the
same place.

Both use cases of the detector share one counting stage and differ only
in how the two counts are turned into a report:

* **Planting verification** — :func:`build_change_result` decides whether
  the green-pixel gain is large enough to call a new planting and scores
  how convincing it is.
* **Area monitoring** — :func:`build_tree_estimate` converts the larger
  of the two counts into a tree count and yearly CO₂ / O₂ figures.

Classes:
    VegetationCounts        Frozen output of the counting stage.
    TreeEstimate            Monitoring metrics for one comparison.
    ChangeResult            Planting-verification metrics (+ optional TreeEstimate).
    VegetationChangeEngine  Stateless orchestrator; one ``analyze`` per pair.

Usage::

    engine = VegetationChangeEngine()
    result = engine.analyze(before_buffer, after_buffer)
    if result.detected:
        print(f"{result.confidence:.1f}% confident")
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass
from typing import Any

from vegetation_change import scoring
from vegetation_change.buffer import PixelBuffer
from vegetation_change.classifier import count_vegetation
from vegetation_change.config import DetectorConfig

logger = logging.getLogger("treecheck.vegetation_change")


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VegetationCounts:
    """Vegetation pixel counts for a before/after pair.

    Attributes:
        before: Vegetation pixels in the "before" image.
        after: Vegetation pixels in the "after" image.
        before_total: Total pixels in the "before" image.
        after_total: Total pixels in the "after" image.
    """

    before: int
    after: int
    before_total: int
    after_total: int

    @property
    def difference(self) -> int:
        """Signed gain in vegetation pixels (``after - before``)."""
        return self.after - self.before


@dataclass(frozen=True)
class TreeEstimate:
    """Tree count and gas-exchange estimate for one comparison.

    Attributes:
        before_trees: Trees represented by the "before" image.
        after_trees: Trees represented by the "after" image.
        total_trees: Trees in the greener of the two images.
        co2_absorption: CO₂ absorbed by ``total_trees``, kg/year.
        oxygen_production: O₂ produced by ``total_trees``, kg/year.
        absolute_difference: ``|after - before|`` in vegetation pixels.
        message: Human-readable summary for display.
    """

    before_trees: int
    after_trees: int
    total_trees: int
    co2_absorption: int
    oxygen_production: int
    absolute_difference: int
    message: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serialisable dict."""
        return asdict(self)


@dataclass(frozen=True)
class ChangeResult:
    """Outcome of one before/after comparison.

    Attributes:
        before_count: Vegetation pixels in the "before" image.
        after_count: Vegetation pixels in the "after" image.
        difference: ``after_count - before_count`` (signed).
        increase_percentage: ``difference`` relative to ``before_count``,
            in percent; 100 when ``before_count`` is zero.
        before_percentage: Vegetation coverage of the "before" image, 0–100.
        after_percentage: Vegetation coverage of the "after" image, 0–100.
        detected: Whether the gain qualifies as a planting event.
        confidence: Heuristic support for the decision, 0–99.9.
        tree_estimate: Monitoring metrics, when requested.
    """

    before_count: int
    after_count: int
    difference: int
    increase_percentage: float
    before_percentage: float
    after_percentage: float
    detected: bool
    confidence: float
    tree_estimate: TreeEstimate | None = None

    def __str__(self) -> str:
        verdict = "DETECTED" if self.detected else "not detected"
        return (
            f"Vegetation change {verdict}: {self.before_count:,} → "
            f"{self.after_count:,} px ({self.difference:+,}), "
            f"increase={self.increase_percentage:.1f}% "
            f"confidence={self.confidence:.1f}%"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serialisable dict."""
        return {
            "before_count": self.before_count,
            "after_count": self.after_count,
            "difference": self.difference,
            "increase_percentage": self.increase_percentage,
            "before_percentage": self.before_percentage,
            "after_percentage": self.after_percentage,
            "detected": self.detected,
            "confidence": self.confidence,
            "tree_estimate": self.tree_estimate.to_dict() if self.tree_estimate else None,
        }


# ---------------------------------------------------------------------------
# Output builders
# ---------------------------------------------------------------------------


def build_tree_estimate(counts: VegetationCounts, config: DetectorConfig) -> TreeEstimate:
    """Derive the area-monitoring metrics from a pair of counts."""
    total_trees = scoring.estimate_tree_count(counts.before, counts.after, config.pixels_per_tree)
    plural = "" if total_trees == 1 else "s"
    return TreeEstimate(
        before_trees=scoring.trees_in(counts.before, config.pixels_per_tree),
        after_trees=scoring.trees_in(counts.after, config.pixels_per_tree),
        total_trees=total_trees,
        co2_absorption=scoring.annual_exchange(total_trees, config.co2_per_tree),
        oxygen_production=scoring.annual_exchange(total_trees, config.o2_per_tree),
        absolute_difference=abs(counts.difference),
        message=f"Successfully detected {total_trees} tree{plural} in your images!",
    )


def build_change_result(counts: VegetationCounts, config: DetectorConfig) -> ChangeResult:
    """Derive the planting-verification metrics from a pair of counts."""
    difference = counts.difference
    detected = difference > config.detection_threshold
    return ChangeResult(
        before_count=counts.before,
        after_count=counts.after,
        difference=difference,
        increase_percentage=scoring.increase_percentage(counts.before, counts.after),
        before_percentage=scoring.coverage_percentage(counts.before, counts.before_total),
        after_percentage=scoring.coverage_percentage(counts.after, counts.after_total),
        detected=detected,
        confidence=scoring.detection_confidence(difference, detected),
        tree_estimate=build_tree_estimate(counts, config) if config.include_tree_estimate else None,
    )


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class VegetationChangeEngine:
    """Stateless before/after vegetation comparison.

    The engine holds only its configuration; every call allocates its own
    counts and result, so one instance may be shared between threads.

    Args:
        config: Calibration and classifier settings.  Defaults to
                :class:`~vegetation_change.config.DetectorConfig` ().
    """

    def __init__(self, config: DetectorConfig | None = None) -> None:
        self.config: DetectorConfig = config or DetectorConfig()

    def count(self, before: PixelBuffer, after: PixelBuffer) -> VegetationCounts:
        """Run the shared counting stage over both images.

        The two scans are independent; with ``config.parallel_scan`` they
        run on two worker threads, otherwise one after the other.
        """
        thresholds = self.config.thresholds
        if self.config.parallel_scan:
            with ThreadPoolExecutor(max_workers=2) as pool:
                before_future = pool.submit(count_vegetation, before, thresholds)
                after_future = pool.submit(count_vegetation, after, thresholds)
                before_count = before_future.result()
                after_count = after_future.result()
        else:
            before_count = count_vegetation(before, thresholds)
            after_count = count_vegetation(after, thresholds)

        logger.debug(
            "Vegetation pixels: before=%d/%d after=%d/%d",
            before_count, before.total_pixels, after_count, after.total_pixels,
        )
        return VegetationCounts(
            before=before_count,
            after=after_count,
            before_total=before.total_pixels,
            after_total=after.total_pixels,
        )

    def analyze(self, before: PixelBuffer, after: PixelBuffer) -> ChangeResult:
        """Compare two images and score the vegetation gain.

        Args:
            before: Decoded "before" image.
            after: Decoded "after" image.  May differ in size from *before*;
                   coverage is normalised by each image's own pixel count.

        Returns:
            A fresh :class:`ChangeResult`.
        """
        result = build_change_result(self.count(before, after), self.config)
        logger.debug("%s", result)
        return result

    def estimate_trees(self, before: PixelBuffer, after: PixelBuffer) -> TreeEstimate:
        """Compare two images and report only the monitoring metrics."""
        return build_tree_estimate(self.count(before, after), self.config)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(config={self.config!r})"
