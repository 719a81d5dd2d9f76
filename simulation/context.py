"""The per-session object graph of the simulation."""

from __future__ import annotations

from dataclasses import dataclass

from buildings.placement import PlacementService
from buildings.protocols import TreasuryProtocol
from buildings.registry import BuildingRegistry
from buildings.treasury import Treasury
from config import CONFIG_MODEL, SimulationConfig
from logger import log
from simulation.commerce import CommercialIncomeCalculator
from simulation.events import EventBus
from simulation.happiness import HappinessEngine
from simulation.population import PopulationAggregator
from simulation.service_funding import ServiceFundingProcessor


@dataclass
class SimulationContext:
    """Owns every component of one session; built once, torn down with the session.

    Any daily component may be set to None; the schedule then skips its pass.
    """

    config: SimulationConfig
    events: EventBus
    registry: BuildingRegistry
    treasury: TreasuryProtocol | None
    placement: PlacementService | None
    funding: ServiceFundingProcessor | None
    happiness: HappinessEngine | None
    population: PopulationAggregator | None
    commerce: CommercialIncomeCalculator | None

    def teardown(self) -> None:
        self.registry.clear()
        log("SimulationContext: session torn down.", level="INFO")


def create_context(
    config: SimulationConfig | None = None, treasury: TreasuryProtocol | None = None
) -> SimulationContext:
    config = config or CONFIG_MODEL
    events = EventBus()
    registry = BuildingRegistry(config.BUILDING_ID_PREFIX, events=events)
    treasury = treasury if treasury is not None else Treasury(config=config)
    population = PopulationAggregator(registry, config.happiness)

    return SimulationContext(
        config=config,
        events=events,
        registry=registry,
        treasury=treasury,
        placement=PlacementService(registry, treasury, config=config, events=events),
        funding=ServiceFundingProcessor(registry, treasury),
        happiness=HappinessEngine(registry, config.happiness),
        population=population,
        commerce=CommercialIncomeCalculator(registry, population, treasury, config.commerce),
    )
