"""Daily happiness recompute and the abandonment state machine for houses.

Each house drifts toward the neutral baseline, gains the bonus of every
active service that covers it and loses the penalty of every factory that
pollutes it. The clamped result then drives the occupied/abandoned
transition with a recovery margin above the abandonment threshold.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from buildings.building import (
    BuildingCategory,
    Factory,
    House,
    HouseTransition,
    Position,
    Service,
)
from buildings.registry import BuildingRegistry
from config import CONFIG_MODEL, HappinessConfig
from simulation.logging_utils import create_system_logger


class Mood(str, Enum):
    HAPPY = "happy"
    NEUTRAL = "neutral"
    UNHAPPY = "unhappy"
    ABANDONED = "abandoned"


@dataclass
class HappinessResult:
    houses_updated: int = 0
    newly_abandoned: list[str] = field(default_factory=list)
    recovered: list[str] = field(default_factory=list)


class HappinessEngine:
    def __init__(self, registry: BuildingRegistry, config: HappinessConfig | None = None) -> None:
        self.registry = registry
        self.config: HappinessConfig = config or CONFIG_MODEL.happiness
        self.logger = create_system_logger("HappinessEngine")

    def compute_happiness(self, house: House) -> float:
        """Tomorrow's happiness for ``house``; does not modify it."""
        cfg = self.config
        happiness = house.happiness + cfg.decay_factor * (cfg.neutral_happiness - house.happiness)

        service_bonus = 0.0
        for service in self.registry.by_category(BuildingCategory.SERVICE):
            if not isinstance(service, Service) or not service.active:
                continue
            if _covers(service.position, house, service.template.service_radius):
                service_bonus += service.template.happiness_bonus

        factory_penalty = 0.0
        for factory in self.registry.by_category(BuildingCategory.FACTORY):
            if not isinstance(factory, Factory):
                continue
            if _covers(factory.position, house, factory.template.pollution_radius):
                factory_penalty += factory.template.pollution_penalty

        happiness += service_bonus - factory_penalty
        return max(0.0, min(100.0, happiness))

    def update_happiness(self) -> HappinessResult:
        """Recompute every house, then advance its abandonment state."""
        result = HappinessResult()
        houses = self.registry.by_category(BuildingCategory.HOUSE)
        self.logger.debug(f"Updating happiness for {len(houses)} houses")

        for house in houses:
            if not isinstance(house, House):
                continue
            house.set_happiness(self.compute_happiness(house))
            transition = house.check_abandonment(
                self.config.abandonment_threshold,
                self.config.days_before_abandonment,
                self.config.recovery_margin,
            )
            result.houses_updated += 1
            if transition is HouseTransition.ABANDONED:
                result.newly_abandoned.append(house.unique_id)
            elif transition is HouseTransition.RECOVERED:
                result.recovered.append(house.unique_id)
            self.logger.debug(
                f"{house.display_name} ({house.unique_id}): happiness {house.happiness:.1f}, "
                f"streak {house.unhappy_streak}, abandoned={house.abandoned}"
            )

        if result.newly_abandoned or result.recovered:
            self.logger.info(
                f"{len(result.newly_abandoned)} house(s) abandoned, "
                f"{len(result.recovered)} recovered"
            )
        return result

    def mood(self, house: House) -> Mood:
        if house.abandoned:
            return Mood.ABANDONED
        if house.happiness >= self.config.happy_threshold:
            return Mood.HAPPY
        if house.happiness <= self.config.unhappy_threshold:
            return Mood.UNHAPPY
        return Mood.NEUTRAL


def _covers(source: Position, house: House, radius: float) -> bool:
    if radius <= 0:
        return False
    return source.ground_distance_sq(house.position) <= radius * radius
