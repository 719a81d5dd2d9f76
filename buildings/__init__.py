"""Buildings placed in the city and the registry that tracks them.

- building: categories, positions and per-category runtime state
- registry: BuildingRegistry with category and radius queries
- treasury: the city's money balance
- placement: one-shot pay-and-register flow for pending buildings
"""

from .building import (
    Building,
    BuildingCategory,
    Commercial,
    Factory,
    House,
    HouseTransition,
    Position,
    Road,
    Service,
    create_building,
)
from .placement import PlacementService
from .registry import BuildingRegistry
from .treasury import Treasury

__all__ = [
    "Building",
    "BuildingCategory",
    "BuildingRegistry",
    "Commercial",
    "Factory",
    "House",
    "HouseTransition",
    "PlacementService",
    "Position",
    "Road",
    "Service",
    "Treasury",
    "create_building",
]
