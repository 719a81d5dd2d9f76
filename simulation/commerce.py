"""Daily revenue of commercial buildings."""

from __future__ import annotations

from dataclasses import dataclass, field

from buildings.building import BuildingCategory, Commercial
from buildings.protocols import TreasuryProtocol
from buildings.registry import BuildingRegistry
from config import CONFIG_MODEL, CommerceConfig
from simulation.logging_utils import create_system_logger
from simulation.population import PopulationAggregator


@dataclass
class CommerceResult:
    factory_count: int = 0
    eligible: int = 0
    total_income: int = 0
    incomes: dict[str, int] = field(default_factory=dict)
    without_factory: list[str] = field(default_factory=list)


class CommercialIncomeCalculator:
    """
    Computes and books the income of every commercial building.

    Each commercial needs a factory to supply it: the Nth commercial in
    registration order pairs with the Nth factory, and commercials beyond the
    factory count earn nothing. A paired commercial uses up its factory even
    when it earns nothing or makes a loss.
    """

    def __init__(
        self,
        registry: BuildingRegistry,
        population: PopulationAggregator | None,
        treasury: TreasuryProtocol | None,
        config: CommerceConfig | None = None,
    ) -> None:
        self.registry = registry
        self.population = population
        self.treasury = treasury
        self.config: CommerceConfig = config or CONFIG_MODEL.commerce
        self.logger = create_system_logger("CommercialIncome")

    def process_commercial_buildings(self) -> CommerceResult:
        if self.population is None or self.treasury is None:
            self.logger.error("Population aggregator or treasury missing; commerce skipped")
            return CommerceResult()

        commercials = self.registry.by_category(BuildingCategory.COMMERCIAL)
        factory_count = self.registry.count(BuildingCategory.FACTORY)
        result = CommerceResult(factory_count=factory_count)

        if factory_count == 0:
            if commercials:
                self.logger.warning("No factories exist! Commercial buildings cannot generate income.")
            return result

        if len(commercials) > factory_count:
            self.logger.warning(
                f"Only {factory_count} factory(ies) for {len(commercials)} commercial building(s)."
            )

        for commercial in commercials:
            if not isinstance(commercial, Commercial):
                continue
            if result.eligible >= factory_count:
                result.without_factory.append(commercial.unique_id)
                self.logger.debug(f"{commercial.display_name} ({commercial.unique_id}): no factory")
                continue

            result.eligible += 1
            income = self.calculate_income(commercial)
            result.incomes[commercial.unique_id] = income
            result.total_income += income
            if income != 0:
                self.treasury.add(income)

        self.logger.info(
            f"{len(commercials)} commercial building(s), {factory_count} factory(ies), "
            f"{result.eligible} supplied. Total income: {result.total_income}"
        )
        return result

    def calculate_income(self, commercial: Commercial) -> int:
        """Income (negative for a loss) of one supplied commercial building."""
        if self.population is None:
            return 0
        cfg = self.config
        template = commercial.template
        radius = template.commercial_radius

        nearby_population = self.population.population_in_radius(commercial.position, radius)
        if nearby_population < template.min_population_threshold:
            self.logger.debug(
                f"{commercial.display_name}: population {nearby_population} below minimum"
            )
            return 0

        steps = (nearby_population - cfg.population_step_offset) // cfg.population_step_size
        steps = max(0, min(cfg.max_population_steps, steps))
        population_multiplier = 1.0 + cfg.step_multiplier * steps

        happiness = self.population.average_happiness_in_radius(commercial.position, radius)
        if happiness < template.happiness_threshold:
            income = -template.base_income * cfg.loss_fraction
        elif happiness >= template.happiness_threshold + cfg.bonus_margin:
            income = template.base_income * cfg.bonus_multiplier
        else:
            income = template.base_income

        # round() is half-to-even
        final_income = int(round(income * population_multiplier))
        self.logger.debug(
            f"{commercial.display_name}: population {nearby_population} (x{population_multiplier:.1f}), "
            f"happiness {happiness:.1f} -> {final_income}"
        )
        return final_income

    def has_factory(self, commercial: Commercial) -> bool:
        """Whether ``commercial`` falls within today's factory budget."""
        commercials = self.registry.by_category(BuildingCategory.COMMERCIAL)
        if commercial not in commercials:
            return False
        return commercials.index(commercial) < self.registry.count(BuildingCategory.FACTORY)
