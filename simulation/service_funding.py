"""Daily upkeep for service buildings."""

from __future__ import annotations

from dataclasses import dataclass, field

from buildings.building import BuildingCategory, Service
from buildings.protocols import TreasuryProtocol
from buildings.registry import BuildingRegistry
from simulation.logging_utils import create_system_logger


@dataclass
class FundingResult:
    total_cost: int = 0
    active_services: int = 0
    shutdown_services: int = 0
    shutdown_ids: list[str] = field(default_factory=list)

    @property
    def all_paid(self) -> bool:
        return self.shutdown_services == 0


class ServiceFundingProcessor:
    """Charges each service its operating cost, shutting down the ones the city cannot pay."""

    def __init__(self, registry: BuildingRegistry, treasury: TreasuryProtocol | None) -> None:
        self.registry = registry
        self.treasury = treasury
        self.logger = create_system_logger("ServiceFunding")

    def process_daily_costs(self) -> FundingResult:
        """
        Charge every registered service in registration order.

        A service is paid in full or not at all. Unpaid services are shut
        down for the day and reconsidered tomorrow.
        """
        result = FundingResult()
        if self.treasury is None:
            self.logger.error("No treasury attached; service funding skipped")
            return result

        services = self.registry.by_category(BuildingCategory.SERVICE)
        self.logger.debug(f"Processing {len(services)} services for daily costs")

        for service in services:
            if not isinstance(service, Service):
                continue
            cost = service.template.daily_operating_cost
            if self.treasury.can_afford(cost):
                self.treasury.spend(cost)
                service.set_active(True)
                result.total_cost += cost
                result.active_services += 1
                self.logger.debug(f"Paid {cost} for {service.display_name} ({service.unique_id})")
            else:
                service.set_active(False)
                result.shutdown_services += 1
                result.shutdown_ids.append(service.unique_id)
                self.logger.warning(
                    f"Cannot afford {service.display_name} ({service.unique_id}, cost {cost}). "
                    "Service shut down."
                )

        if services:
            self.logger.info(
                f"Daily service summary: {result.active_services} active, "
                f"{result.shutdown_services} shut down. Total cost: {result.total_cost}"
            )
        return result

    def is_service_active(self, service: Service) -> bool:
        return service in self.registry and service.active

    def active_service_count(self) -> int:
        return sum(
            1
            for service in self.registry.by_category(BuildingCategory.SERVICE)
            if isinstance(service, Service) and service.active
        )
