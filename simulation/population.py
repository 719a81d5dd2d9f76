"""City population totals and the radius queries used by commerce."""

from __future__ import annotations

from dataclasses import dataclass

from buildings.building import BuildingCategory, House, Position
from buildings.registry import BuildingRegistry
from config import CONFIG_MODEL, HappinessConfig
from simulation.logging_utils import create_system_logger


@dataclass(frozen=True)
class PopulationSnapshot:
    total: int = 0
    occupied_houses: int = 0
    abandoned_houses: int = 0


class PopulationAggregator:
    def __init__(self, registry: BuildingRegistry, config: HappinessConfig | None = None) -> None:
        self.registry = registry
        self.config: HappinessConfig = config or CONFIG_MODEL.happiness
        self.snapshot = PopulationSnapshot()
        self.logger = create_system_logger("PopulationAggregator")

    @property
    def total_population(self) -> int:
        """Population as of the last daily update."""
        return self.snapshot.total

    def update_population(self) -> PopulationSnapshot:
        """Sum residents over every occupied house."""
        total = occupied = abandoned = 0
        for house in self._houses():
            if house.abandoned:
                abandoned += 1
            else:
                occupied += 1
                total += house.current_population

        self.snapshot = PopulationSnapshot(total, occupied, abandoned)
        self.logger.info(
            f"Total: {total} residents in {occupied} houses ({abandoned} abandoned)"
        )
        self.logger.log_system_metric("population", total, "residents")
        return self.snapshot

    def average_happiness_in_radius(self, position: Position, radius: float) -> float:
        """Mean happiness of occupied houses in range, neutral when there are none.

        Abandoned houses are left out entirely rather than counted as unhappy.
        """
        values = [
            house.happiness
            for house in self._houses_in_radius(position, radius)
            if not house.abandoned
        ]
        if not values:
            return self.config.neutral_happiness
        return sum(values) / len(values)

    def population_in_radius(self, position: Position, radius: float) -> int:
        return sum(house.current_population for house in self._houses_in_radius(position, radius))

    def _houses(self) -> list[House]:
        return [
            b for b in self.registry.by_category(BuildingCategory.HOUSE) if isinstance(b, House)
        ]

    def _houses_in_radius(self, position: Position, radius: float) -> list[House]:
        return [
            b
            for b in self.registry.in_radius(position, radius, BuildingCategory.HOUSE)
            if isinstance(b, House)
        ]
