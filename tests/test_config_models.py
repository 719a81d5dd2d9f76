import textwrap

import pytest
from pydantic import ValidationError

import config


def test_simulation_config_structure_defaults() -> None:
    """Defaults match the stock city: 7000 in the bank, 10 second days, 30 days."""
    cfg = config.SimulationConfig()

    assert cfg.simulation_days == 30
    assert cfg.treasury.initial_balance == 7000
    assert cfg.time.day_length_seconds == 10.0
    assert cfg.happiness.abandonment_threshold == 30.0
    assert cfg.happiness.days_before_abandonment == 3
    assert cfg.happiness.decay_factor == pytest.approx(0.1)
    assert cfg.commerce.bonus_multiplier == pytest.approx(1.3)
    assert set(cfg.catalog) == {"house", "school", "factory", "shop", "road"}


def test_catalog_entries_resolve_to_category_templates() -> None:
    cfg = config.SimulationConfig()

    assert isinstance(cfg.catalog["house"], config.HouseTemplate)
    assert isinstance(cfg.catalog["school"], config.ServiceTemplate)
    assert isinstance(cfg.catalog["factory"], config.FactoryTemplate)
    assert isinstance(cfg.catalog["shop"], config.CommercialTemplate)
    assert isinstance(cfg.catalog["road"], config.RoadTemplate)


def test_catalog_display_name_defaults_to_key() -> None:
    cfg = config.load_simulation_config(
        {"catalog": {"cottage": {"category": "house", "housing_capacity": 4}}}
    )

    assert cfg.catalog["cottage"].display_name == "cottage"


def test_simulation_config_enforces_reasonable_bounds() -> None:
    with pytest.raises(ValidationError):
        config.SimulationConfig(simulation_days=0)

    with pytest.raises(ValidationError):
        config.SimulationConfig(time={"day_length_seconds": 0})

    with pytest.raises(ValidationError):
        config.SimulationConfig(happiness={"decay_factor": 1.5})

    with pytest.raises(ValidationError):
        config.SimulationConfig(happiness={"happy_threshold": 30, "unhappy_threshold": 60})

    with pytest.raises(ValidationError):
        config.SimulationConfig(catalog={"bad": {"category": "house", "cost": -1}})


def test_unknown_category_is_rejected() -> None:
    with pytest.raises(ValidationError):
        config.SimulationConfig(catalog={"castle": {"category": "castle"}})


def test_city_placements_must_reference_catalog() -> None:
    with pytest.raises(ValidationError):
        config.SimulationConfig(city=[{"template": "spaceport", "x": 1.0}])


def test_load_simulation_config_casts_types() -> None:
    payload = {
        "simulation_days": "12",
        "treasury": {"initial_balance": "2500"},
        "city": [{"template": "house", "x": "1.5", "z": 2}],
    }

    cfg = config.load_simulation_config(payload)

    assert cfg.simulation_days == 12
    assert cfg.treasury.initial_balance == 2500
    assert cfg.city[0].x == pytest.approx(1.5)
    assert cfg.city[0].z == pytest.approx(2.0)


def test_load_simulation_config_rejects_non_string_keys() -> None:
    with pytest.raises(TypeError):
        config.load_simulation_config({"catalog": {1: {"category": "road"}}})


def test_load_from_yaml(tmp_path) -> None:
    path = tmp_path / "city.yaml"
    path.write_text(
        textwrap.dedent(
            """
            simulation_days: 5
            treasury:
              initial_balance: 1200
            catalog:
              house:
                category: house
                cost: 100
                housing_capacity: 8
            city:
              - template: house
                x: 1.0
                z: 2.0
            """
        ).strip()
        + "\n",
        encoding="utf-8",
    )

    cfg = config.load_simulation_config_from_yaml(path)

    assert cfg.simulation_days == 5
    assert cfg.treasury.initial_balance == 1200
    assert cfg.catalog["house"].housing_capacity == 8
    assert cfg.city[0].template == "house"


def test_load_from_empty_yaml_gives_defaults(tmp_path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    cfg = config.load_simulation_config_from_yaml(path)

    assert cfg.simulation_days == config.SimulationConfig().simulation_days


def test_load_from_yaml_requires_mapping(tmp_path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")

    with pytest.raises(TypeError):
        config.load_simulation_config_from_yaml(path)
