"""The ordered list of passes run at every day rollover.

Order matters: funding decides which services are active before happiness
reads them, happiness decides abandonment before population is summed, and
commerce reads the fresh population. Reordering changes results.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import cast

from simulation.commerce import CommerceResult, CommercialIncomeCalculator
from simulation.context import SimulationContext
from simulation.happiness import HappinessEngine, HappinessResult
from simulation.logging_utils import create_system_logger
from simulation.population import PopulationAggregator, PopulationSnapshot
from simulation.service_funding import FundingResult, ServiceFundingProcessor

_logger = create_system_logger("DailyPipeline")


@dataclass
class DayReport:
    day: int
    treasury_before: int = 0
    treasury_after: int = 0
    funding: FundingResult | None = None
    happiness: HappinessResult | None = None
    population: PopulationSnapshot | None = None
    commerce: CommerceResult | None = None
    completed_passes: list[str] = field(default_factory=list)
    skipped_passes: list[str] = field(default_factory=list)
    failed_passes: list[str] = field(default_factory=list)

    @property
    def treasury_delta(self) -> int:
        return self.treasury_after - self.treasury_before


PassRunner = Callable[[SimulationContext, DayReport], None]


@dataclass(frozen=True)
class DailyPass:
    name: str
    run: PassRunner
    requires: tuple[str, ...] = ()

    def missing(self, context: SimulationContext) -> list[str]:
        return [attr for attr in self.requires if getattr(context, attr, None) is None]


def _run_funding(context: SimulationContext, report: DayReport) -> None:
    report.funding = cast(ServiceFundingProcessor, context.funding).process_daily_costs()


def _run_happiness(context: SimulationContext, report: DayReport) -> None:
    report.happiness = cast(HappinessEngine, context.happiness).update_happiness()


def _run_population(context: SimulationContext, report: DayReport) -> None:
    report.population = cast(PopulationAggregator, context.population).update_population()


def _run_commerce(context: SimulationContext, report: DayReport) -> None:
    commerce = cast(CommercialIncomeCalculator, context.commerce)
    report.commerce = commerce.process_commercial_buildings()


DEFAULT_PIPELINE: tuple[DailyPass, ...] = (
    DailyPass("funding", _run_funding, ("funding", "treasury")),
    DailyPass("happiness", _run_happiness, ("happiness",)),
    DailyPass("population", _run_population, ("population",)),
    DailyPass("commerce", _run_commerce, ("commerce", "population", "treasury")),
)


def run_pipeline(
    context: SimulationContext, report: DayReport, passes: Sequence[DailyPass] = DEFAULT_PIPELINE
) -> DayReport:
    """Run every pass in order; a skipped or failing pass never stops the next one."""
    for daily_pass in passes:
        missing = daily_pass.missing(context)
        if missing:
            _logger.error(
                f"Day {report.day}: pass '{daily_pass.name}' skipped, missing {', '.join(missing)}"
            )
            report.skipped_passes.append(daily_pass.name)
            continue
        try:
            daily_pass.run(context, report)
        except Exception as exc:
            _logger.error(f"Day {report.day}: pass '{daily_pass.name}' failed: {exc!r}")
            report.failed_passes.append(daily_pass.name)
            continue
        report.completed_passes.append(daily_pass.name)
    return report
