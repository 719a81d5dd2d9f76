"""Metrics package for city simulation analysis."""

from .base import BuildingMetricsDict, Day, MetricDict, TimeSeriesDict
from .collector import DayMetricsCollector
from .exporter import export_metrics

__all__ = [
    "DayMetricsCollector",
    "export_metrics",
    "BuildingMetricsDict",
    "Day",
    "MetricDict",
    "TimeSeriesDict",
]
