"""
Vegetation Change Detector — Configuration
===========================================
Named calibration constants and the :class:`DetectorConfig` bundle that
carries them into the engine.

None of the numbers the detector depends on appear as literals in the
algorithm: every one of them is a field here with the historical value
as its default.

Usage::

    from vegetation_change.config import DetectorConfig

    config = DetectorConfig(detection_threshold=1500, parallel_scan=True)
    config = DetectorConfig.from_json_file(Path("detector.json"))
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

from shared.python.exceptions import ConfigurationError, InputValidationError
from shared.python.validators import Validators

from vegetation_change.classifier import ClassifierThresholds

# ---------------------------------------------------------------------------
# Calibration constants
# ---------------------------------------------------------------------------

#: Minimum gain in vegetation pixels (not a percentage) to report a planting.
DETECTION_THRESHOLD = 1000

#: Vegetation pixels that correspond to one tree in a typical phone photo.
PIXELS_PER_TREE = 5000

#: Published per-tree annual CO₂ absorption estimate, kg/year.
CO2_KG_PER_TREE_PER_YEAR = 22

#: Published per-tree annual O₂ production estimate, kg/year.
O2_KG_PER_TREE_PER_YEAR = 118


@dataclass(frozen=True)
class DetectorConfig:
    """Configuration for :class:`~vegetation_change.engine.VegetationChangeEngine`.

    Attributes:
        detection_threshold: Pixel-count gain that must be *exceeded* for
            a change to count as a planting event.
        pixels_per_tree: Vegetation pixels per estimated tree.
        co2_per_tree: CO₂ absorbed per tree, kg/year.
        o2_per_tree: O₂ produced per tree, kg/year.
        thresholds: Pixel classifier limits.
        include_tree_estimate: Attach a
            :class:`~vegetation_change.engine.TreeEstimate` to every
            :class:`~vegetation_change.engine.ChangeResult`.
        parallel_scan: Count the two images on separate worker threads.
            Results are identical either way.
    """

    detection_threshold: int = DETECTION_THRESHOLD
    pixels_per_tree: int = PIXELS_PER_TREE
    co2_per_tree: float = CO2_KG_PER_TREE_PER_YEAR
    o2_per_tree: float = O2_KG_PER_TREE_PER_YEAR
    thresholds: ClassifierThresholds = field(default_factory=ClassifierThresholds)
    include_tree_estimate: bool = True
    parallel_scan: bool = False

    def __post_init__(self) -> None:
        Validators.assert_in_range("detection_threshold", self.detection_threshold, 0)
        Validators.assert_number("pixels_per_tree", self.pixels_per_tree)
        if self.pixels_per_tree <= 0:
            raise ConfigurationError(
                "pixels_per_tree", f"must be positive, got {self.pixels_per_tree!r}"
            )
        Validators.assert_in_range("co2_per_tree", self.co2_per_tree, 0)
        Validators.assert_in_range("o2_per_tree", self.o2_per_tree, 0)
        for flag in ("include_tree_estimate", "parallel_scan"):
            if not isinstance(getattr(self, flag), bool):
                raise ConfigurationError(flag, f"must be true or false, got {getattr(self, flag)!r}")

    # ------------------------------------------------------------------
    # (De)serialisation
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a plain, JSON-ready dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "DetectorConfig":
        """Build a config from a plain dict (inverse of :meth:`to_dict`).

        Missing keys keep their defaults.  ``thresholds`` may be a nested
        dict with any subset of the classifier fields.

        Raises:
            ConfigurationError: On an unknown key, a non-numeric value or an
                out-of-range value.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(d) - known)
        if unknown:
            raise ConfigurationError(
                unknown[0], f"unknown setting (valid settings: {', '.join(sorted(known))})"
            )

        values = dict(d)
        raw_thresholds = values.pop("thresholds", None)
        if isinstance(raw_thresholds, ClassifierThresholds):
            values["thresholds"] = raw_thresholds
        elif raw_thresholds is not None:
            if not isinstance(raw_thresholds, dict):
                raise ConfigurationError("thresholds", "must be an object of classifier settings")
            threshold_names = {f.name for f in fields(ClassifierThresholds)}
            bad = sorted(set(raw_thresholds) - threshold_names)
            if bad:
                raise ConfigurationError(f"thresholds.{bad[0]}", "unknown classifier setting")
            values["thresholds"] = ClassifierThresholds(**raw_thresholds)
        return cls(**values)

    @classmethod
    def from_json_file(cls, path: Path) -> "DetectorConfig":
        """Load a config from a JSON object stored in *path*.

        Raises:
            InputValidationError: If the file is missing or not a JSON object.
            ConfigurationError: If a setting is unknown or out of range.
        """
        Validators.assert_file_exists(path)
        try:
            with open(path, encoding="utf-8") as fh:
                raw = json.load(fh)
        except json.JSONDecodeError as exc:
            raise InputValidationError(f"Config file '{path}' is not valid JSON: {exc}") from exc
        if not isinstance(raw, dict):
            raise InputValidationError(f"Config file '{path}' must contain a JSON object.")
        return cls.from_dict(raw)
