"""Placed buildings and their per-category runtime state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from config import (
    BuildingTemplate,
    CommercialTemplate,
    FactoryTemplate,
    HouseTemplate,
    RoadTemplate,
    ServiceTemplate,
)
from simulation.logging_utils import BuildingLogger, create_building_logger


class BuildingCategory(str, Enum):
    HOUSE = "house"
    SERVICE = "service"
    FACTORY = "factory"
    COMMERCIAL = "commercial"
    ROAD = "road"


class HouseTransition(str, Enum):
    ABANDONED = "abandoned"
    RECOVERED = "recovered"


@dataclass(frozen=True)
class Position:
    """World-space coordinate; y is height and is ignored by radius math."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def ground_distance_sq(self, other: Position) -> float:
        dx = self.x - other.x
        dz = self.z - other.z
        return dx * dx + dz * dz


class Building:
    category: ClassVar[BuildingCategory]

    def __init__(self, unique_id: str, template: BuildingTemplate, position: Position) -> None:
        if template.category != self.category.value:
            msg = f"{type(self).__name__} cannot be built from a {template.category!r} template"
            raise ValueError(msg)
        self.unique_id = unique_id
        self.template = template
        self.position = position
        self.paid = False
        self.logger: BuildingLogger = create_building_logger(unique_id, type(self).__name__)

    @property
    def display_name(self) -> str:
        return self.template.display_name

    @property
    def cost(self) -> int:
        return self.template.cost

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.unique_id!r}, {self.display_name!r})"


class House(Building):
    category = BuildingCategory.HOUSE
    template: HouseTemplate

    def __init__(
        self,
        unique_id: str,
        template: HouseTemplate,
        position: Position,
        initial_happiness: float = 50.0,
    ) -> None:
        super().__init__(unique_id, template, position)
        self.population: int = template.housing_capacity
        self.happiness: float = 0.0
        self.unhappy_streak: int = 0
        self.abandoned: bool = False
        self.set_happiness(initial_happiness)

    @property
    def housing_capacity(self) -> int:
        return self.template.housing_capacity

    @property
    def current_population(self) -> int:
        return 0 if self.abandoned else self.population

    def set_happiness(self, value: float) -> None:
        self.happiness = max(0.0, min(100.0, float(value)))

    def check_abandonment(
        self, threshold: float, days_before_abandonment: int, recovery_margin: float = 10.0
    ) -> HouseTransition | None:
        """Advance the occupied/abandoned state machine by one day.

        Must be called after today's happiness has been stored. Returns the
        transition that happened, if any.
        """
        if self.abandoned:
            if self.happiness >= threshold + recovery_margin:
                self.abandoned = False
                self.unhappy_streak = 0
                self.population = self.housing_capacity
                self.logger.log_state_change(
                    "abandoned", "occupied", f"happiness {self.happiness:.1f}"
                )
                return HouseTransition.RECOVERED
            self.population = 0
            return None

        if self.happiness < threshold:
            self.unhappy_streak += 1
            if self.unhappy_streak >= days_before_abandonment:
                self.abandoned = True
                self.population = 0
                self.logger.log_state_change(
                    "occupied",
                    "abandoned",
                    f"{self.unhappy_streak} unhappy days in a row",
                )
                return HouseTransition.ABANDONED
        else:
            self.unhappy_streak = 0
        return None


class Service(Building):
    category = BuildingCategory.SERVICE
    template: ServiceTemplate

    def __init__(self, unique_id: str, template: ServiceTemplate, position: Position) -> None:
        super().__init__(unique_id, template, position)
        # New services count as running until their first funding pass.
        self.active: bool = True

    def set_active(self, active: bool) -> None:
        if active != self.active:
            self.logger.log_state_change(
                "active" if self.active else "shut down",
                "active" if active else "shut down",
                None if active else "insufficient funds",
            )
        self.active = active


class Factory(Building):
    category = BuildingCategory.FACTORY
    template: FactoryTemplate


class Commercial(Building):
    category = BuildingCategory.COMMERCIAL
    template: CommercialTemplate


class Road(Building):
    category = BuildingCategory.ROAD
    template: RoadTemplate


BUILDING_CLASSES: dict[BuildingCategory, type[Building]] = {
    BuildingCategory.HOUSE: House,
    BuildingCategory.SERVICE: Service,
    BuildingCategory.FACTORY: Factory,
    BuildingCategory.COMMERCIAL: Commercial,
    BuildingCategory.ROAD: Road,
}


def create_building(
    unique_id: str,
    template: BuildingTemplate,
    position: Position,
    initial_happiness: float = 50.0,
) -> Building:
    """Build an unpaid, unregistered building of the template's category."""
    category = BuildingCategory(template.category)
    if category is BuildingCategory.HOUSE:
        return House(unique_id, template, position, initial_happiness=initial_happiness)
    return BUILDING_CLASSES[category](unique_id, template, position)
