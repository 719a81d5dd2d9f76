# registry.py
from __future__ import annotations

from collections.abc import Iterator

from buildings.building import Building, BuildingCategory, Position
from simulation.events import BuildingRegistered, BuildingUnregistered, EventBus
from simulation.logging_utils import SystemLogger, create_system_logger


class BuildingRegistry:
    """
    Authoritative store of every registered building.

    Handles:
    - Registration and removal of buildings placed by the player
    - Per-category lists in registration order (used as pairing priority)
    - Radius and closest-N queries on the ground plane
    """

    def __init__(self, id_prefix: str = "building_", events: EventBus | None = None) -> None:
        self._by_category: dict[BuildingCategory, list[Building]] = {
            category: [] for category in BuildingCategory
        }
        self._all: list[Building] = []
        self._by_id: dict[str, Building] = {}
        self._id_prefix = id_prefix
        self._next_index = 1
        self.events = events
        self.logger: SystemLogger = create_system_logger("BuildingRegistry")

    def next_id(self) -> str:
        """Return a fresh identity that no registered building uses."""
        while True:
            candidate = f"{self._id_prefix}{self._next_index}"
            self._next_index += 1
            if candidate not in self._by_id:
                return candidate

    def can_register(self, building: Building) -> bool:
        """Whether ``register`` would accept ``building``; logs the reason when not."""
        if building in self:
            self.logger.warning(
                f"Building {building.unique_id} ({building.display_name}) already registered"
            )
            return False
        if building.unique_id in self._by_id:
            self.logger.warning(
                f"Identity {building.unique_id} already belongs to another registered building"
            )
            return False
        if getattr(building, "category", None) not in self._by_category:
            self.logger.error(f"No registry entry for category of building {building.unique_id}")
            return False
        return True

    def register(self, building: Building) -> bool:
        """
        Register a building once its cost has been paid.

        Returns:
            True when the building was added, False when the request was rejected
        """
        if not self.can_register(building):
            return False

        bucket = self._by_category[building.category]
        bucket.append(building)
        self._all.append(building)
        self._by_id[building.unique_id] = building
        self.logger.info(
            f"Registered {building.category.value} building {building.display_name} "
            f"({building.unique_id}). Total {building.category.value}s: {len(bucket)}"
        )
        if self.events is not None:
            self.events.publish(BuildingRegistered(building.unique_id, building.category.value))
        return True

    def unregister(self, building: Building) -> bool:
        """Remove a building; returns False if it was not registered."""
        if building not in self:
            return False

        self._by_category[building.category].remove(building)
        self._all.remove(building)
        del self._by_id[building.unique_id]
        self.logger.info(
            f"Unregistered {building.category.value} building {building.display_name} "
            f"({building.unique_id}). Total {building.category.value}s: "
            f"{len(self._by_category[building.category])}"
        )
        if self.events is not None:
            self.events.publish(BuildingUnregistered(building.unique_id, building.category.value))
        return True

    def clear(self) -> None:
        """Drop every registration (scene reset)."""
        for bucket in self._by_category.values():
            bucket.clear()
        self._all.clear()
        self._by_id.clear()
        self.logger.info("All buildings cleared from registry")

    def __contains__(self, building: object) -> bool:
        unique_id = getattr(building, "unique_id", None)
        return unique_id is not None and self._by_id.get(unique_id) is building

    def __len__(self) -> int:
        return len(self._all)

    def __iter__(self) -> Iterator[Building]:
        return iter(tuple(self._all))

    def get(self, unique_id: str) -> Building | None:
        return self._by_id.get(unique_id)

    def all_buildings(self) -> tuple[Building, ...]:
        return tuple(self._all)

    def by_category(self, category: BuildingCategory | str) -> tuple[Building, ...]:
        """Registered buildings of one category in registration order.

        Unknown categories yield an empty result.
        """
        key = _as_category(category)
        if key is None:
            self.logger.debug(f"Query for unknown category {category!r}")
            return ()
        return tuple(self._by_category[key])

    def count(self, category: BuildingCategory | str) -> int:
        key = _as_category(category)
        return len(self._by_category[key]) if key is not None else 0

    def in_radius(
        self,
        position: Position,
        radius: float,
        category: BuildingCategory | str | None = None,
    ) -> list[Building]:
        """All buildings whose ground distance to ``position`` is at most ``radius``."""
        if radius <= 0:
            return []
        if category is None:
            candidates: tuple[Building, ...] = tuple(self._all)
        else:
            candidates = self.by_category(category)
        radius_sq = radius * radius
        return [b for b in candidates if b.position.ground_distance_sq(position) <= radius_sq]

    def closest(
        self, position: Position, category: BuildingCategory | str, count: int
    ) -> list[Building]:
        """The ``count`` nearest buildings of a category, nearest first."""
        if count <= 0:
            return []
        nearest = sorted(
            self.by_category(category), key=lambda b: b.position.ground_distance_sq(position)
        )
        return nearest[:count]


def _as_category(category: BuildingCategory | str | None) -> BuildingCategory | None:
    if isinstance(category, BuildingCategory):
        return category
    try:
        return BuildingCategory(category)
    except ValueError:
        return None
