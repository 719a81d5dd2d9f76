"""Exporter module - CSV export of collected day metrics."""

from __future__ import annotations

import warnings
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from logger import log

from .base import BuildingMetricsDict

if TYPE_CHECKING:
    from .collector import DayMetricsCollector


def export_metrics(collector: DayMetricsCollector, timestamp: Optional[str] = None) -> list[Path]:
    """Write the collected time series to timestamped CSV files using pandas."""
    timestamp = timestamp or datetime.now().strftime("%Y%m%d_%H%M%S")
    collector.export_path.mkdir(parents=True, exist_ok=True)

    exports = [
        _export_global_metrics_df(collector, timestamp),
        _export_building_metrics_df(collector, collector.house_metrics, "house_metrics", timestamp),
        _export_building_metrics_df(
            collector, collector.commercial_metrics, "commercial_metrics", timestamp
        ),
    ]

    written = [path for path in exports if path is not None]
    if written:
        log(
            "DayMetricsCollector: Exported CSV metrics: " + ", ".join(p.name for p in written),
            level="INFO",
        )
    else:
        log("DayMetricsCollector: No metrics available for CSV export", level="WARNING")
    return written


def _export_global_metrics_df(collector: DayMetricsCollector, timestamp: str) -> Optional[Path]:
    if not collector.global_metrics:
        return None

    import pandas as pd

    rows = []
    for day, metrics in collector.global_metrics.items():
        row = {"day": int(day)}
        row.update(metrics)
        rows.append(row)

    df = pd.DataFrame.from_records(rows).sort_values("day")
    output_file = collector.export_path / f"global_metrics_{timestamp}.csv"
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", RuntimeWarning)
        df.to_csv(output_file, index=False)
    collector.global_metrics_df = df
    return output_file


def _export_building_metrics_df(
    collector: DayMetricsCollector,
    building_metrics: BuildingMetricsDict,
    filename_prefix: str,
    timestamp: str,
) -> Optional[Path]:
    if not building_metrics:
        return None

    import pandas as pd

    rows = []
    for building_id, time_series in building_metrics.items():
        for day, metrics in time_series.items():
            row = {"day": int(day), "building_id": str(building_id)}
            row.update(metrics)
            rows.append(row)

    if not rows:
        return None

    df = pd.DataFrame.from_records(rows).sort_values(["day", "building_id"])
    output_file = collector.export_path / f"{filename_prefix}_{timestamp}.csv"
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", RuntimeWarning)
        df.to_csv(output_file, index=False)

    if filename_prefix.startswith("house"):
        collector.house_metrics_df = df
    else:
        collector.commercial_metrics_df = df
    return output_file
