"""
TreeCheck — Shared Base Tool
=============================
``TreeCheckTool`` fixes the order every file-based TreeCheck tool runs in:
check the inputs, do the work, then log how long it took and where the
report went.  Subclasses supply ``validate_inputs`` and ``process``.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path

# Parent of every ``treecheck.<tool>`` logger.
logger = logging.getLogger("treecheck")

_LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s — %(message)s"


class TreeCheckTool(ABC):
    """Base class for TreeCheck tools that read images and write a report.

    Attributes:
        input_path: The image the tool reads first (the "before" photo for
            change detection).
        output_path: Where the report is written.
        verbose: Log at DEBUG instead of INFO.
    """

    def __init__(
        self,
        input_path: Path,
        output_path: Path,
        *,
        verbose: bool = False,
    ) -> None:
        self.input_path: Path = Path(input_path)
        self.output_path: Path = Path(output_path)
        self.verbose: bool = verbose

        self._configure_logging()

    @abstractmethod
    def validate_inputs(self) -> None:
        """Raise :class:`~shared.python.exceptions.InputValidationError`
        if anything the tool needs is missing or unusable."""

    @abstractmethod
    def process(self) -> None:
        """Decode, analyse and write the report."""

    def run(self) -> None:
        """Validate, process and log the elapsed time.

        Errors from either step propagate unchanged; nothing is logged as
        a success unless both complete.
        """
        name = type(self).__name__
        logger.info("Starting %s", name)
        start = time.perf_counter()

        self.validate_inputs()
        self.process()

        logger.info(
            "%s finished in %.2fs, report at %s",
            name,
            time.perf_counter() - start,
            self.output_path,
        )

    def _configure_logging(self) -> None:
        # One console handler per process, however many tools are created.
        if not logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt="%H:%M:%S"))
            logger.addHandler(handler)
        logger.setLevel(logging.DEBUG if self.verbose else logging.INFO)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.input_path!r} → {self.output_path!r})"
