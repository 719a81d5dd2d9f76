"""Base types for the metrics package."""

from typing import Any, Dict

# Type aliases
Day = int
MetricDict = Dict[str, Any]
TimeSeriesDict = Dict[Day, MetricDict]
BuildingMetricsDict = Dict[str, TimeSeriesDict]
