"""
Tests for VegetationChangeEngine
=================================
End-to-end comparisons over synthetic pixel buffers.

Test classes:
    TestScenarios           Reference before/after pairs with known outcomes.
    TestDirectionality      Swapping before and after.
    TestTreeEstimate        Area-monitoring metrics.
    TestEngineBehaviour     Determinism, parallel scan, mixed sizes.
"""

from __future__ import annotations

import json

import numpy as np
import pytest

from vegetation_change.buffer import PixelBuffer
from vegetation_change.config import DetectorConfig
from vegetation_change.engine import (
    ChangeResult,
    TreeEstimate,
    VegetationChangeEngine,
    VegetationCounts,
    build_change_result,
    build_tree_estimate,
)

GREEN = (0, 200, 0)
BLACK = (0, 0, 0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _buffer_with_green(green_pixels: int, width: int = 100, height: int = 100) -> PixelBuffer:
    """A black image whose first *green_pixels* pixels (row-major) are green."""
    pixels = np.zeros((width * height, 3), dtype=np.uint8)
    pixels[:green_pixels] = GREEN
    return PixelBuffer(width=width, height=height, data=pixels)


def _counts(before: int, after: int, total: int = 1_000_000) -> VegetationCounts:
    return VegetationCounts(before=before, after=after, before_total=total, after_total=total)


# ---------------------------------------------------------------------------
# Reference scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    """Before/after pairs with hand-computed results."""

    def test_black_to_green(self) -> None:
        """100×100 black → 100×100 green: a clear, high-confidence planting."""
        before = PixelBuffer.filled(100, 100, BLACK)
        after = PixelBuffer.filled(100, 100, GREEN)

        result = VegetationChangeEngine().analyze(before, after)

        assert result.before_count == 0
        assert result.after_count == 10_000
        assert result.difference == 10_000
        assert result.detected is True
        assert result.confidence == pytest.approx(96.0)
        assert result.increase_percentage == 100.0
        assert result.before_percentage == 0.0
        assert result.after_percentage == pytest.approx(100.0)

    @pytest.mark.parametrize("rgb", [BLACK, GREEN, (120, 130, 110), (255, 255, 255)])
    def test_identical_images(self, rgb: tuple[int, int, int]) -> None:
        image = PixelBuffer.filled(64, 48, rgb)

        result = VegetationChangeEngine().analyze(image, image)

        assert result.difference == 0
        assert result.detected is False
        assert result.confidence == 0.0

    def test_moderate_gain_uses_lowest_tier(self) -> None:
        """3000 → 4500 vegetation pixels: difference 1500, confidence 73."""
        result = VegetationChangeEngine().analyze(_buffer_with_green(3000), _buffer_with_green(4500))

        assert result.before_count == 3000
        assert result.after_count == 4500
        assert result.difference == 1500
        assert result.detected is True
        assert result.confidence == pytest.approx(73.0)
        assert result.increase_percentage == pytest.approx(50.0)
        assert result.before_percentage == pytest.approx(30.0)
        assert result.after_percentage == pytest.approx(45.0)

    def test_empty_pair_boundary(self) -> None:
        """No vegetation in either image: zero-baseline rule gives 100%."""
        black = PixelBuffer.filled(10, 10, BLACK)

        result = VegetationChangeEngine().analyze(black, black)

        assert result.increase_percentage == 100.0
        assert result.difference == 0
        assert result.detected is False
        assert result.confidence == 0.0

    def test_gain_at_threshold_is_not_detected(self) -> None:
        """The threshold must be exceeded, not merely reached."""
        result = VegetationChangeEngine().analyze(_buffer_with_green(0), _buffer_with_green(1000))
        assert result.detected is False
        assert result.confidence == pytest.approx(50.0)

    def test_small_gain_partial_confidence(self) -> None:
        result = VegetationChangeEngine().analyze(_buffer_with_green(100), _buffer_with_green(600))
        assert result.detected is False
        assert result.confidence == pytest.approx(25.0)


# ---------------------------------------------------------------------------
# Swapping before and after
# ---------------------------------------------------------------------------


class TestDirectionality:
    """Outcome depends on direction; only some fields mirror."""

    def test_forward_and_reverse(self) -> None:
        engine = VegetationChangeEngine()
        low, high = _buffer_with_green(2000), _buffer_with_green(9000)

        forward = engine.analyze(low, high)
        reverse = engine.analyze(high, low)

        assert forward.difference == 7000
        assert reverse.difference == -7000
        assert forward.increase_percentage > 0
        assert reverse.increase_percentage < 0
        assert forward.detected is True
        assert forward.confidence == pytest.approx(95.7)
        assert reverse.detected is False
        assert reverse.confidence == 0.0

    def test_swap_negates_difference(self) -> None:
        engine = VegetationChangeEngine()
        a, b = _buffer_with_green(1234), _buffer_with_green(4321)
        assert engine.analyze(a, b).difference == -engine.analyze(b, a).difference


# ---------------------------------------------------------------------------
# Area-monitoring metrics
# ---------------------------------------------------------------------------


class TestTreeEstimate:
    """Tree count and gas-exchange estimates."""

    def test_attached_by_default(self) -> None:
        result = VegetationChangeEngine().analyze(_buffer_with_green(0), _buffer_with_green(10_000))
        estimate = result.tree_estimate

        assert isinstance(estimate, TreeEstimate)
        assert estimate.total_trees == 2
        assert estimate.before_trees == 0
        assert estimate.after_trees == 2
        assert estimate.co2_absorption == 44
        assert estimate.oxygen_production == 236
        assert estimate.absolute_difference == 10_000
        assert estimate.message == "Successfully detected 2 trees in your images!"

    def test_uses_greener_image_when_vegetation_lost(self) -> None:
        estimate = VegetationChangeEngine().estimate_trees(
            _buffer_with_green(7500), _buffer_with_green(1000)
        )
        assert estimate.total_trees == 2
        assert estimate.absolute_difference == 6500

    def test_singular_message(self) -> None:
        estimate = build_tree_estimate(_counts(0, 5000), DetectorConfig())
        assert estimate.total_trees == 1
        assert estimate.message == "Successfully detected 1 tree in your images!"

    def test_zero_trees(self) -> None:
        estimate = build_tree_estimate(_counts(0, 2499), DetectorConfig())
        assert estimate.total_trees == 0
        assert estimate.co2_absorption == 0
        assert estimate.oxygen_production == 0

    def test_custom_calibration(self) -> None:
        config = DetectorConfig(pixels_per_tree=1000, co2_per_tree=10, o2_per_tree=50)
        estimate = build_tree_estimate(_counts(0, 3000), config)
        assert (estimate.total_trees, estimate.co2_absorption, estimate.oxygen_production) == (3, 30, 150)

    def test_can_be_disabled(self) -> None:
        engine = VegetationChangeEngine(DetectorConfig(include_tree_estimate=False))
        result = engine.analyze(_buffer_with_green(0), _buffer_with_green(10_000))
        assert result.tree_estimate is None
        assert result.to_dict()["tree_estimate"] is None


# ---------------------------------------------------------------------------
# General engine behaviour
# ---------------------------------------------------------------------------


class TestEngineBehaviour:

    def test_repeated_calls_identical(self) -> None:
        rng = np.random.default_rng(42)
        before = PixelBuffer.from_array(rng.integers(0, 256, size=(60, 80, 3), dtype=np.uint8))
        after = PixelBuffer.from_array(rng.integers(0, 256, size=(60, 80, 3), dtype=np.uint8))
        engine = VegetationChangeEngine()

        first = engine.analyze(before, after)
        for _ in range(3):
            again = engine.analyze(before, after)
            assert again == first
            assert json.dumps(again.to_dict()) == json.dumps(first.to_dict())

    def test_parallel_scan_matches_sequential(self) -> None:
        before, after = _buffer_with_green(1200), _buffer_with_green(8800)
        sequential = VegetationChangeEngine().analyze(before, after)
        parallel = VegetationChangeEngine(DetectorConfig(parallel_scan=True)).analyze(before, after)
        assert parallel == sequential

    def test_different_sizes_normalise_separately(self) -> None:
        before = _buffer_with_green(100, width=10, height=20)   # 200 px
        after = _buffer_with_green(1000, width=50, height=40)   # 2000 px

        result = VegetationChangeEngine().analyze(before, after)

        assert result.before_percentage == pytest.approx(50.0)
        assert result.after_percentage == pytest.approx(50.0)
        assert result.difference == 900

    def test_detection_threshold_is_configurable(self) -> None:
        engine = VegetationChangeEngine(DetectorConfig(detection_threshold=100))
        result = engine.analyze(_buffer_with_green(0), _buffer_with_green(500))
        assert result.detected is True
        assert result.confidence == pytest.approx(71.0)

    def test_classifier_thresholds_are_configurable(self) -> None:
        from vegetation_change.classifier import ClassifierThresholds

        dim = PixelBuffer.filled(10, 10, (20, 35, 20))
        black = PixelBuffer.filled(10, 10, BLACK)
        strict = VegetationChangeEngine().count(black, dim)
        loose = VegetationChangeEngine(
            DetectorConfig(thresholds=ClassifierThresholds(min_green=30))
        ).count(black, dim)
        assert strict.after == 0
        assert loose.after == 100

    def test_result_is_frozen(self) -> None:
        result = build_change_result(_counts(0, 0), DetectorConfig())
        with pytest.raises(AttributeError):
            result.detected = True  # type: ignore[misc]

    def test_str_summary(self) -> None:
        result = build_change_result(_counts(3000, 4500), DetectorConfig())
        text = str(result)
        assert "DETECTED" in text
        assert "+1,500" in text
        assert isinstance(result, ChangeResult)
