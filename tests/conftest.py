import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from buildings.building import House, Position  # noqa: E402
from config import SimulationConfig, load_simulation_config  # noqa: E402
from simulation.context import create_context  # noqa: E402

TEST_CATALOG = {
    "house": {"category": "house", "cost": 100, "housing_capacity": 10},
    "big_house": {"category": "house", "cost": 100, "housing_capacity": 25},
    "hut": {"category": "house", "cost": 10, "housing_capacity": 3},
    "school": {
        "category": "service",
        "cost": 200,
        "daily_operating_cost": 50,
        "happiness_bonus": 10.0,
        "service_radius": 5.0,
    },
    "factory": {
        "category": "factory",
        "cost": 300,
        "pollution_penalty": 5.0,
        "pollution_radius": 4.0,
    },
    "smelter": {
        "category": "factory",
        "cost": 300,
        "pollution_penalty": 40.0,
        "pollution_radius": 4.0,
    },
    "shop": {
        "category": "commercial",
        "cost": 150,
        "base_income": 100.0,
        "commercial_radius": 6.0,
        "min_population_threshold": 5,
        "happiness_threshold": 50.0,
    },
    "road": {"category": "road", "cost": 5},
}


@pytest.fixture
def sim_config(tmp_path) -> SimulationConfig:
    return load_simulation_config(
        {
            "simulation_days": 3,
            "catalog": TEST_CATALOG,
            "time": {"day_length_seconds": 10.0, "tick_seconds": 0.5},
            "metrics_export_path": str(tmp_path / "metrics"),
            "log_file": str(tmp_path / "simulation.log"),
            "SUMMARY_FILE": str(tmp_path / "summary.json"),
        }
    )


@pytest.fixture
def context(sim_config):
    ctx = create_context(sim_config)
    yield ctx
    ctx.teardown()


@pytest.fixture
def add_building(context):
    """Register a catalog building directly, skipping payment."""

    def _add(template_name: str, x: float = 0.0, z: float = 0.0, happiness: float | None = None):
        building = context.placement.create_pending(template_name, Position(x, 0.0, z))
        if happiness is not None and isinstance(building, House):
            building.set_happiness(happiness)
        assert context.registry.register(building)
        return building

    return _add


@pytest.fixture
def catalog() -> dict:
    return {name: dict(entry) for name, entry in TEST_CATALOG.items()}
