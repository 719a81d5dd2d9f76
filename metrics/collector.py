"""DayMetricsCollector - collects one row per simulated day."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Dict, Optional

from buildings.building import BuildingCategory, House
from config import CONFIG_MODEL, SimulationConfig
from logger import log

from .base import BuildingMetricsDict, Day, MetricDict

if TYPE_CHECKING:
    import pandas as pd

    from simulation.context import SimulationContext
    from simulation.pipeline import DayReport


class DayMetricsCollector:
    """
    Collects city-wide and per-building metrics after every day rollover.

    Tracks the treasury, population and the outcome of each daily pass so a
    run can be exported and plotted afterwards.
    """

    def __init__(self, config: Optional[SimulationConfig] = None):
        self.config = config or CONFIG_MODEL
        self.export_path = Path(self.config.metrics_export_path)
        self.global_metrics: Dict[Day, MetricDict] = {}
        self.house_metrics: BuildingMetricsDict = {}
        self.commercial_metrics: BuildingMetricsDict = {}
        self.global_metrics_df: Optional[pd.DataFrame] = None
        self.house_metrics_df: Optional[pd.DataFrame] = None
        self.commercial_metrics_df: Optional[pd.DataFrame] = None

    def record_day(self, report: DayReport, context: SimulationContext) -> MetricDict:
        registry = context.registry
        houses = [h for h in registry.by_category(BuildingCategory.HOUSE) if isinstance(h, House)]
        occupied = [h for h in houses if not h.abandoned]
        avg_happiness = (
            sum(h.happiness for h in occupied) / len(occupied)
            if occupied
            else context.config.happiness.neutral_happiness
        )

        funding = report.funding
        population = report.population
        commerce = report.commerce
        row: MetricDict = {
            "treasury": report.treasury_after,
            "treasury_delta": report.treasury_delta,
            "population": population.total if population else 0,
            "occupied_houses": population.occupied_houses if population else len(occupied),
            "abandoned_houses": population.abandoned_houses if population else len(houses) - len(occupied),
            "average_happiness": avg_happiness,
            "service_cost": funding.total_cost if funding else 0,
            "active_services": funding.active_services if funding else 0,
            "shutdown_services": funding.shutdown_services if funding else 0,
            "commercial_income": commerce.total_income if commerce else 0,
            "supplied_commercials": commerce.eligible if commerce else 0,
            "factories": registry.count(BuildingCategory.FACTORY),
            "skipped_passes": len(report.skipped_passes),
            "failed_passes": len(report.failed_passes),
        }
        self.global_metrics[report.day] = row

        for house in houses:
            self.house_metrics.setdefault(house.unique_id, {})[report.day] = {
                "happiness": house.happiness,
                "population": house.current_population,
                "unhappy_streak": house.unhappy_streak,
                "abandoned": house.abandoned,
            }

        if commerce is not None:
            for commercial_id, income in commerce.incomes.items():
                self.commercial_metrics.setdefault(commercial_id, {})[report.day] = {
                    "income": income,
                    "supplied": True,
                }
            for commercial_id in commerce.without_factory:
                self.commercial_metrics.setdefault(commercial_id, {})[report.day] = {
                    "income": 0,
                    "supplied": False,
                }

        log(f"DayMetricsCollector: recorded day {report.day}.", level="DEBUG")
        return row

    def latest(self) -> MetricDict:
        if not self.global_metrics:
            return {}
        return self.global_metrics[max(self.global_metrics)]

    def export_metrics(self) -> list[Path]:
        from .exporter import export_metrics

        return export_metrics(self)
