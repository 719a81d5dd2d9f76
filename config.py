from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Annotated, Literal, Union, cast

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    PositiveInt,
    field_validator,
    model_validator,
)

output_dir = "output/"


class BaseConfigModel(BaseModel):
    model_config = ConfigDict(validate_default=True, frozen=False)


class TemplateBase(BaseConfigModel):
    display_name: str = ""
    cost: NonNegativeInt = 0


class HouseTemplate(TemplateBase):
    category: Literal["house"] = "house"
    housing_capacity: NonNegativeInt = 10


class ServiceTemplate(TemplateBase):
    category: Literal["service"] = "service"
    daily_operating_cost: NonNegativeInt = 50
    happiness_bonus: float = Field(10.0, ge=0)
    service_radius: float = Field(5.0, ge=0)


class FactoryTemplate(TemplateBase):
    category: Literal["factory"] = "factory"
    daily_maintenance_cost: NonNegativeInt = 0
    pollution_penalty: float = Field(5.0, ge=0)
    pollution_radius: float = Field(4.0, ge=0)


class CommercialTemplate(TemplateBase):
    category: Literal["commercial"] = "commercial"
    base_income: float = Field(100.0, ge=0)
    commercial_radius: float = Field(6.0, ge=0)
    min_population_threshold: NonNegativeInt = 5
    # Kept for catalog compatibility; the income formula uses CommerceConfig.loss_fraction.
    low_happiness_multiplier: float = Field(0.5, ge=0)
    happiness_threshold: float = Field(50.0, ge=0, le=100)


class RoadTemplate(TemplateBase):
    category: Literal["road"] = "road"


BuildingTemplate = Annotated[
    Union[HouseTemplate, ServiceTemplate, FactoryTemplate, CommercialTemplate, RoadTemplate],
    Field(discriminator="category"),
]


def _default_catalog() -> dict[str, dict[str, object]]:
    return {
        "house": {"category": "house", "display_name": "House", "cost": 500, "housing_capacity": 10},
        "school": {
            "category": "service",
            "display_name": "School",
            "cost": 1500,
            "daily_operating_cost": 50,
            "happiness_bonus": 10.0,
            "service_radius": 5.0,
        },
        "factory": {
            "category": "factory",
            "display_name": "Factory",
            "cost": 2000,
            "pollution_penalty": 5.0,
            "pollution_radius": 4.0,
        },
        "shop": {
            "category": "commercial",
            "display_name": "Shop",
            "cost": 1000,
            "base_income": 100.0,
            "commercial_radius": 6.0,
            "min_population_threshold": 5,
            "happiness_threshold": 50.0,
        },
        "road": {"category": "road", "display_name": "Road", "cost": 50},
    }


class Placement(BaseConfigModel):
    """Initial building of a headless run: catalog entry plus world position."""

    template: str
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


class TimeConfig(BaseConfigModel):
    day_length_seconds: float = Field(10.0, gt=0)
    tick_seconds: float = Field(0.5, gt=0)
    start_running: bool = True


class HappinessConfig(BaseConfigModel):
    abandonment_threshold: float = Field(30.0, ge=0, le=100)
    days_before_abandonment: PositiveInt = 3
    recovery_margin: float = Field(10.0, ge=0)
    neutral_happiness: float = Field(50.0, ge=0, le=100)
    decay_factor: float = Field(0.1, ge=0, le=1)
    initial_happiness: float = Field(50.0, ge=0, le=100)
    happy_threshold: float = Field(70.0, ge=0, le=100)
    unhappy_threshold: float = Field(40.0, ge=0, le=100)

    @model_validator(mode="after")
    def _validate_mood_band(self) -> HappinessConfig:
        if self.unhappy_threshold > self.happy_threshold:
            msg = "unhappy_threshold must not exceed happy_threshold"
            raise ValueError(msg)
        return self


class CommerceConfig(BaseConfigModel):
    population_step_offset: NonNegativeInt = 10
    population_step_size: PositiveInt = 10
    max_population_steps: NonNegativeInt = 4
    step_multiplier: float = Field(0.5, ge=0)
    loss_fraction: float = Field(0.5, ge=0)
    bonus_multiplier: float = Field(1.3, ge=0)
    bonus_margin: float = Field(20.0, ge=0)


class TreasuryConfig(BaseConfigModel):
    initial_balance: int = 7000


class SimulationConfig(BaseConfigModel):
    simulation_days: PositiveInt = 30
    time: TimeConfig = Field(default_factory=TimeConfig)
    happiness: HappinessConfig = Field(default_factory=HappinessConfig)
    commerce: CommerceConfig = Field(default_factory=CommerceConfig)
    treasury: TreasuryConfig = Field(default_factory=TreasuryConfig)
    catalog: dict[str, BuildingTemplate] = Field(default_factory=_default_catalog)
    city: list[Placement] = Field(default_factory=list)
    logging_level: str = "INFO"
    log_file: str = output_dir + "simulation.log"
    log_format: str = "%(asctime)s - %(levelname)s - %(message)s"
    SUMMARY_FILE: str = output_dir + "simulation_summary.json"
    JSON_INDENT: PositiveInt = 4
    metrics_export_path: str = output_dir + "metrics"
    BUILDING_ID_PREFIX: str = "building_"

    @field_validator("catalog")
    @classmethod
    def _validate_catalog(cls, value: dict[str, BuildingTemplate]) -> dict[str, BuildingTemplate]:
        for name, template in value.items():
            if not template.display_name:
                template.display_name = name
        return value

    @model_validator(mode="after")
    def _validate_city(self) -> SimulationConfig:
        unknown = sorted({p.template for p in self.city if p.template not in self.catalog})
        if unknown:
            msg = f"City placements reference unknown templates: {', '.join(unknown)}"
            raise ValueError(msg)
        return self

    @property
    def summary_file(self) -> str:
        return self.SUMMARY_FILE

    @property
    def json_indent(self) -> PositiveInt:
        return self.JSON_INDENT


ConfigScalar = bool | int | float | str | None
ConfigValue = ConfigScalar | list["ConfigValue"] | dict[str, "ConfigValue"]


def _coerce_value(value: object) -> ConfigValue:
    if isinstance(value, (bool, int, float, str)) or value is None:
        return value
    if isinstance(value, (list, tuple)):
        return [_coerce_value(item) for item in value]
    if isinstance(value, Mapping):
        coerced: dict[str, ConfigValue] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                msg = "CONFIG keys must be strings"
                raise TypeError(msg)
            coerced[key] = _coerce_value(item)
        return coerced
    msg = f"Unsupported CONFIG value type: {type(value)!r}"
    raise TypeError(msg)


def _coerce_config_dict(data: Mapping[str, object]) -> dict[str, ConfigValue]:
    return {key: _coerce_value(value) for key, value in data.items()}


def load_simulation_config(data: Mapping[str, ConfigValue] | None = None) -> SimulationConfig:
    if data is not None:
        coerced = _coerce_config_dict(cast(Mapping[str, object], data))
        return SimulationConfig(**coerced)
    return SimulationConfig()


def load_simulation_config_from_yaml(path: str | Path) -> SimulationConfig:
    """Load and validate a YAML configuration file.

    An empty file yields the defaults. The top level must be a mapping.
    """
    text = Path(path).read_text(encoding="utf-8")
    raw = yaml.safe_load(text)
    if raw is None:
        return load_simulation_config()
    if not isinstance(raw, Mapping):
        msg = f"Config file {path} must contain a mapping at the top level"
        raise TypeError(msg)
    return load_simulation_config(cast(Mapping[str, ConfigValue], raw))


CONFIG_MODEL: SimulationConfig = load_simulation_config()
