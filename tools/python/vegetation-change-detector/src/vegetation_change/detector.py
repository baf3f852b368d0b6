"""
Vegetation Change Detector — File Tool
=======================================
Runs the engine on two image files and writes a JSON report.

Pipeline (via :class:`~shared.python.base_tool.TreeCheckTool`)::

    validate_inputs   both images exist with a supported extension,
                      output directory can be created
    process           decode → analyze → write report

Usage::

    from pathlib import Path
    from vegetation_change.detector import VegetationChangeDetector

    tool = VegetationChangeDetector(
        before_path=Path("photos/site_before.jpg"),
        after_path=Path("photos/site_after.jpg"),
        output_path=Path("output/vegetation_change.json"),
    )
    tool.run()
    print(tool.result)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from shared.python.base_tool import TreeCheckTool
from shared.python.exceptions import OutputWriteError
from shared.python.validators import Validators

from vegetation_change.buffer import PixelBuffer
from vegetation_change.config import DetectorConfig
from vegetation_change.decoder import ImageDecoder
from vegetation_change.engine import ChangeResult, VegetationChangeEngine

logger = logging.getLogger("treecheck.vegetation_change")


class VegetationChangeDetector(TreeCheckTool):
    """Compare a before/after photo pair and report the vegetation change.

    Inherits the Template Method pipeline from
    :class:`~shared.python.TreeCheckTool`.

    Args:
        before_path: Image taken before planting.
        after_path: Image of the same place taken afterwards.
        output_path: Destination of the JSON report.
        config: Detector settings.  Defaults to :class:`DetectorConfig` ().
        verbose: Enable DEBUG-level logging.

    Note:
        The ``input_path`` attribute inherited from ``TreeCheckTool`` is the
        "before" image, used for logging and repr.
    """

    def __init__(
        self,
        before_path: Path,
        after_path: Path,
        output_path: Path,
        config: DetectorConfig | None = None,
        *,
        verbose: bool = False,
    ) -> None:
        super().__init__(Path(before_path), Path(output_path), verbose=verbose)
        self.before_path: Path = Path(before_path)
        self.after_path: Path = Path(after_path)
        self.config: DetectorConfig = config or DetectorConfig()
        self.decoder = ImageDecoder()
        self.engine = VegetationChangeEngine(self.config)
        self._result: ChangeResult | None = None

    # ------------------------------------------------------------------
    # TreeCheckTool abstract method implementations
    # ------------------------------------------------------------------

    def validate_inputs(self) -> None:
        """Check both images and the output location.

        Raises:
            InputValidationError: If an image is missing or has an
                unsupported extension.
            OutputWriteError: If the output directory cannot be created.
        """
        for path in (self.before_path, self.after_path):
            Validators.assert_file_exists(path)
            Validators.assert_supported_extension(path, ImageDecoder.SUPPORTED_EXTENSIONS)
        Validators.assert_output_dir_writable(self.output_path)
        logger.debug("Inputs validated: %s, %s", self.before_path.name, self.after_path.name)

    def process(self) -> None:
        """Decode both images, run the comparison and write the report.

        Raises:
            ImageDecodeError: If either image cannot be decoded.  Nothing
                is analysed or written in that case.
            OutputWriteError: If writing the report fails.
        """
        logger.info("Decoding %s and %s...", self.before_path.name, self.after_path.name)
        before = self.decoder.decode_file(self.before_path)
        after = self.decoder.decode_file(self.after_path)

        logger.info("Analysing vegetation change...")
        result = self.engine.analyze(before, after)
        logger.info("  %s", result)
        if result.tree_estimate is not None:
            logger.info("  %s", result.tree_estimate.message)

        self._write_report(self._build_report(before, after, result))
        self._result = result

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_report(
        self,
        before: PixelBuffer,
        after: PixelBuffer,
        result: ChangeResult,
    ) -> dict[str, Any]:
        """Assemble the JSON report body."""
        return {
            "before": self._describe(self.before_path, before),
            "after": self._describe(self.after_path, after),
            "config": self.config.to_dict(),
            "result": result.to_dict(),
        }

    @staticmethod
    def _describe(path: Path, buffer: PixelBuffer) -> dict[str, Any]:
        return {
            "source_file": str(path),
            "width": buffer.width,
            "height": buffer.height,
            "total_pixels": buffer.total_pixels,
        }

    def _write_report(self, report: dict[str, Any]) -> None:
        """Serialise *report* to :attr:`output_path`.

        Raises:
            OutputWriteError: If the file cannot be written.
        """
        try:
            with open(self.output_path, "w", encoding="utf-8") as fh:
                json.dump(report, fh, indent=2)
        except OSError as exc:
            raise OutputWriteError(str(self.output_path), str(exc)) from exc

    @property
    def result(self) -> ChangeResult | None:
        """The :class:`ChangeResult` from the last run, or ``None``."""
        return self._result
