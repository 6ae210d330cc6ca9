"""Chart discovery and per-chart dispatch."""

import os
from pathlib import Path
from typing import Callable
import yaml
from .utils import log


CHART_MANIFEST = "chart.yaml"
EXCLUDED_DIR = "examples"


def discover_charts(root: Path) -> list[str]:
    """
    Find every chart below root.

    A chart is any directory holding a Chart.yaml (name matched case-insensitively).
    Charts living under an 'examples' directory are skipped.

    Returns:
        list[str]: Chart directories relative to root, sorted
    """
    charts = set()

    for dirpath, _dirnames, filenames in os.walk(root):
        if not any(name.lower() == CHART_MANIFEST for name in filenames):
            continue

        relative = Path(dirpath).relative_to(root)
        if EXCLUDED_DIR in relative.parts:
            continue

        charts.add(relative.as_posix())

    return sorted(charts)


def read_chart_metadata(root: Path, chart: str) -> dict:
    """
    Load the Chart.yaml of a discovered chart.

    Raises:
        FileNotFoundError: If the chart directory has no Chart.yaml
        ValueError: If Chart.yaml is not a mapping
    """
    chart_dir = root / chart
    for entry in chart_dir.iterdir():
        if entry.is_file() and entry.name.lower() == CHART_MANIFEST:
            with open(entry) as f:
                metadata = yaml.safe_load(f) or {}
            if not isinstance(metadata, dict):
                raise ValueError(f"{entry} must be a mapping, got {type(metadata).__name__}")
            return metadata

    raise FileNotFoundError(f"No Chart.yaml found in {chart_dir}")


def run_for_each_chart(charts: list[str], operation: Callable[[str], int], verbose: bool = False) -> int:
    """
    Run operation for every chart in order.

    Stops at the first chart whose operation returns a non-zero exit code;
    the remaining charts are not run.

    Returns:
        0 if every chart succeeded, otherwise the first non-zero exit code
    """
    for chart in charts:
        log(f"Chart: {chart}", verbose)
        returncode = operation(chart)
        if returncode != 0:
            log(f"Chart {chart} failed with exit code {returncode}, stopping", verbose)
            return returncode

    return 0
