"""
Tests for DetectorConfig
=========================
Defaults, validation and JSON loading.
"""

from __future__ import annotations

import json
from pathlib import Path

import numpy as np
import pytest

from vegetation_change.classifier import ClassifierThresholds
from vegetation_change.config import (
    CO2_KG_PER_TREE_PER_YEAR,
    DETECTION_THRESHOLD,
    O2_KG_PER_TREE_PER_YEAR,
    PIXELS_PER_TREE,
    DetectorConfig,
)
from shared.python.exceptions import ConfigurationError, InputValidationError, TreeCheckError


class TestDetectorConfigDefaults:

    def test_named_constants(self) -> None:
        assert DETECTION_THRESHOLD == 1000
        assert PIXELS_PER_TREE == 5000
        assert CO2_KG_PER_TREE_PER_YEAR == 22
        assert O2_KG_PER_TREE_PER_YEAR == 118

    def test_defaults_use_constants(self) -> None:
        config = DetectorConfig()
        assert config.detection_threshold == DETECTION_THRESHOLD
        assert config.pixels_per_tree == PIXELS_PER_TREE
        assert config.co2_per_tree == CO2_KG_PER_TREE_PER_YEAR
        assert config.o2_per_tree == O2_KG_PER_TREE_PER_YEAR
        assert config.thresholds == ClassifierThresholds(40, 10, 10)
        assert config.include_tree_estimate is True
        assert config.parallel_scan is False


class TestDetectorConfigValidation:

    def test_zero_pixels_per_tree(self) -> None:
        with pytest.raises(ConfigurationError, match="pixels_per_tree"):
            DetectorConfig(pixels_per_tree=0)

    def test_negative_threshold(self) -> None:
        with pytest.raises(ConfigurationError, match="detection_threshold"):
            DetectorConfig(detection_threshold=-1)

    def test_negative_multiplier(self) -> None:
        with pytest.raises(ConfigurationError, match="co2_per_tree"):
            DetectorConfig(co2_per_tree=-22)

    @pytest.mark.parametrize(
        "settings",
        [
            {"co2_per_tree": "22"},
            {"detection_threshold": None},
            {"pixels_per_tree": [5000]},
            {"o2_per_tree": True},
            {"thresholds": {"min_green": "40"}},
        ],
    )
    def test_non_numeric_value_rejected(self, settings: dict) -> None:
        with pytest.raises(ConfigurationError, match="must be a number"):
            DetectorConfig.from_dict(settings)

    def test_non_numeric_is_a_treecheck_error(self) -> None:
        with pytest.raises(TreeCheckError):
            DetectorConfig.from_dict({"co2_per_tree": "22"})

    def test_numpy_scalars_accepted(self) -> None:
        config = DetectorConfig(pixels_per_tree=np.int64(2500), co2_per_tree=np.float64(21.5))
        assert config.pixels_per_tree == 2500

    def test_flag_must_be_boolean(self) -> None:
        with pytest.raises(ConfigurationError, match="parallel_scan"):
            DetectorConfig.from_dict({"parallel_scan": "yes"})


class TestDetectorConfigSerialisation:

    def test_round_trip_through_dict(self) -> None:
        config = DetectorConfig(
            detection_threshold=1500,
            thresholds=ClassifierThresholds(min_green=50),
            parallel_scan=True,
        )
        assert DetectorConfig.from_dict(config.to_dict()) == config

    def test_partial_thresholds(self) -> None:
        config = DetectorConfig.from_dict({"thresholds": {"min_green_red_delta": 20}})
        assert config.thresholds == ClassifierThresholds(40, 20, 10)

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="pixels_per_shrub"):
            DetectorConfig.from_dict({"pixels_per_shrub": 10})

    def test_unknown_threshold_key_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="thresholds.min_blue"):
            DetectorConfig.from_dict({"thresholds": {"min_blue": 10}})

    def test_from_json_file(self, tmp_path: Path) -> None:
        path = tmp_path / "detector.json"
        path.write_text(json.dumps({"detection_threshold": 2500, "pixels_per_tree": 4000}))

        config = DetectorConfig.from_json_file(path)

        assert config.detection_threshold == 2500
        assert config.pixels_per_tree == 4000
        assert config.co2_per_tree == 22

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(InputValidationError, match="not valid JSON"):
            DetectorConfig.from_json_file(path)

    def test_json_must_be_object(self, tmp_path: Path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]")
        with pytest.raises(InputValidationError, match="JSON object"):
            DetectorConfig.from_json_file(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(InputValidationError, match="not found"):
            DetectorConfig.from_json_file(tmp_path / "absent.json")
