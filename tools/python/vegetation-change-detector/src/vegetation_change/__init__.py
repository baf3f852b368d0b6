"""
Vegetation Change Detector
===========================
Estimate how much green vegetation changed between a before and an after
photo of the same place, and derive tree-count and CO₂/O₂ figures.
"""

from vegetation_change.buffer import PixelBuffer
from vegetation_change.classifier import (
    DEFAULT_THRESHOLDS,
    ClassifierThresholds,
    count_vegetation,
    is_vegetation,
    vegetation_mask,
)
from vegetation_change.config import (
    CO2_KG_PER_TREE_PER_YEAR,
    DETECTION_THRESHOLD,
    O2_KG_PER_TREE_PER_YEAR,
    PIXELS_PER_TREE,
    DetectorConfig,
)
from vegetation_change.decoder import ImageDecoder
from vegetation_change.detector import VegetationChangeDetector
from vegetation_change.engine import (
    ChangeResult,
    TreeEstimate,
    VegetationChangeEngine,
    VegetationCounts,
    build_change_result,
    build_tree_estimate,
)

__all__ = [
    "PixelBuffer",
    "ClassifierThresholds",
    "DEFAULT_THRESHOLDS",
    "is_vegetation",
    "vegetation_mask",
    "count_vegetation",
    "DetectorConfig",
    "DETECTION_THRESHOLD",
    "PIXELS_PER_TREE",
    "CO2_KG_PER_TREE_PER_YEAR",
    "O2_KG_PER_TREE_PER_YEAR",
    "ImageDecoder",
    "VegetationChangeDetector",
    "VegetationChangeEngine",
    "VegetationCounts",
    "ChangeResult",
    "TreeEstimate",
    "build_change_result",
    "build_tree_estimate",
]
__version__ = "1.0.0"
