"""
Vegetation Change Detector — CLI Entry Point
=============================================
Exposes :class:`~vegetation_change.detector.VegetationChangeDetector` as
the ``treecheck-veg-change`` command.

Usage::

    treecheck-veg-change before.jpg after.jpg \\
        --output output/vegetation_change.json \\
        --detection-threshold 1000 \\
        --pixels-per-tree 5000

Run ``treecheck-veg-change --help`` for the full option list.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import click

from shared.python.exceptions import TreeCheckError

from vegetation_change.config import DetectorConfig
from vegetation_change.detector import VegetationChangeDetector

logger = logging.getLogger("treecheck.vegetation_change.cli")


def _build_config(
    config_path: Path | None,
    overrides: dict[str, Any],
    threshold_overrides: dict[str, Any],
) -> DetectorConfig:
    """Merge a JSON config file with explicitly given CLI options.

    Options left at ``None`` fall back to the file, then to the defaults.
    """
    base = DetectorConfig.from_json_file(config_path).to_dict() if config_path else {}
    base.update({k: v for k, v in overrides.items() if v is not None})
    thresholds = dict(base.get("thresholds") or {})
    thresholds.update({k: v for k, v in threshold_overrides.items() if v is not None})
    if thresholds:
        base["thresholds"] = thresholds
    config = DetectorConfig.from_dict(base)
    logger.debug("Effective config: %s", config.to_dict())
    return config


@click.command("treecheck-veg-change")
@click.argument("before", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("after", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output", "-o", "output_path",
    default="output/vegetation_change.json",
    show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path for the JSON report.",
)
@click.option(
    "--config", "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file with detector settings. Explicit options override it.",
)
@click.option(
    "--detection-threshold",
    type=click.IntRange(min=0),
    default=None,
    help="Vegetation pixel gain that must be exceeded to report a planting [default: 1000].",
)
@click.option(
    "--pixels-per-tree",
    type=click.IntRange(min=1),
    default=None,
    help="Vegetation pixels per estimated tree [default: 5000].",
)
@click.option(
    "--co2-per-tree",
    type=click.FloatRange(min=0),
    default=None,
    help="CO2 absorbed per tree, kg/year [default: 22].",
)
@click.option(
    "--o2-per-tree",
    type=click.FloatRange(min=0),
    default=None,
    help="O2 produced per tree, kg/year [default: 118].",
)
@click.option(
    "--min-green",
    type=click.IntRange(0, 255),
    default=None,
    help="Green channel must exceed this [default: 40].",
)
@click.option(
    "--min-green-red-delta",
    type=click.IntRange(0, 255),
    default=None,
    help="Green minus red must exceed this [default: 10].",
)
@click.option(
    "--min-green-blue-delta",
    type=click.IntRange(0, 255),
    default=None,
    help="Green minus blue must exceed this [default: 10].",
)
@click.option(
    "--no-trees",
    "no_trees",
    is_flag=True,
    default=False,
    help="Leave out the tree count and CO2/O2 estimate.",
)
@click.option(
    "--parallel",
    "parallel_scan",
    is_flag=True,
    default=False,
    help="Scan the two images on separate threads.",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def main(
    before: Path,
    after: Path,
    output_path: Path,
    config_path: Path | None,
    detection_threshold: int | None,
    pixels_per_tree: int | None,
    co2_per_tree: float | None,
    o2_per_tree: float | None,
    min_green: int | None,
    min_green_red_delta: int | None,
    min_green_blue_delta: int | None,
    no_trees: bool,
    parallel_scan: bool,
    verbose: bool,
) -> None:
    """Compare BEFORE and AFTER photos of the same place and report the
    change in green vegetation.

    \b
    Examples:
        # Verify a planting with the default calibration
        treecheck-veg-change before.jpg after.jpg

        # Stricter detection, report only the planting verdict
        treecheck-veg-change before.png after.png \\
            --detection-threshold 2500 --no-trees -o report.json
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = _build_config(
            config_path,
            {
                "detection_threshold": detection_threshold,
                "pixels_per_tree": pixels_per_tree,
                "co2_per_tree": co2_per_tree,
                "o2_per_tree": o2_per_tree,
                "include_tree_estimate": False if no_trees else None,
                "parallel_scan": True if parallel_scan else None,
            },
            {
                "min_green": min_green,
                "min_green_red_delta": min_green_red_delta,
                "min_green_blue_delta": min_green_blue_delta,
            },
        )
        tool = VegetationChangeDetector(before, after, output_path, config, verbose=verbose)
        tool.run()
    except TreeCheckError as exc:
        click.echo(f"Error: {exc.message}", err=True)
        sys.exit(1)

    result = tool.result
    click.echo(f"\n{result}")
    if result.tree_estimate is not None:
        estimate = result.tree_estimate
        click.echo(f"  {estimate.message}")
        click.echo(
            f"  CO2 absorption: {estimate.co2_absorption} kg/year, "
            f"O2 production: {estimate.oxygen_production} kg/year"
        )
    click.echo(f"Report written to: {output_path}")


if __name__ == "__main__":
    main()
