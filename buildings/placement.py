# placement.py
from __future__ import annotations

from buildings.building import Building, Position, create_building
from buildings.protocols import PlacementSignal, TreasuryProtocol
from buildings.registry import BuildingRegistry
from config import CONFIG_MODEL, SimulationConfig
from simulation.events import EventBus, TreasuryChanged
from simulation.logging_utils import create_system_logger


class PlacementService:
    """
    Turns the player's placements into registered buildings.

    A pending building is paid for and registered in one step, the first
    time the geometry collaborator reports a valid placement while its marker
    is tracked and the treasury covers the cost. Removal unregisters without
    a refund.
    """

    def __init__(
        self,
        registry: BuildingRegistry,
        treasury: TreasuryProtocol,
        config: SimulationConfig | None = None,
        events: EventBus | None = None,
    ) -> None:
        self.registry = registry
        self.treasury = treasury
        self.config: SimulationConfig = config or CONFIG_MODEL
        self.events = events
        self.logger = create_system_logger("Placement")

    def create_pending(
        self, template_name: str, position: Position, unique_id: str | None = None
    ) -> Building:
        """Build an unpaid, unregistered building from a catalog entry.

        Raises:
            KeyError: if the catalog has no entry named ``template_name``
        """
        template = self.config.catalog[template_name]
        return create_building(
            unique_id or self.registry.next_id(),
            template,
            position,
            initial_happiness=self.config.happiness.initial_happiness,
        )

    def confirm_placement(
        self,
        building: Building,
        placement_valid: bool | PlacementSignal,
        tracked: bool = True,
    ) -> bool:
        """
        Pay for and register a pending building.

        Args:
            building: Building created by create_pending
            placement_valid: Validity flag, or a collaborator answering it
            tracked: Whether the building's marker is currently tracked

        Returns:
            True if the building is registered after the call
        """
        if building in self.registry:
            self.logger.warning(
                f"Building {building.unique_id} ({building.display_name}) already registered"
            )
            return True
        if not tracked:
            self.logger.debug(f"{building.unique_id}: marker not tracked, placement deferred")
            return False

        valid = (
            placement_valid.is_placement_valid()
            if isinstance(placement_valid, PlacementSignal)
            else bool(placement_valid)
        )
        if not valid:
            self.logger.debug(f"{building.unique_id}: placement invalid, payment deferred")
            return False
        if not self.registry.can_register(building):
            return False

        if not building.paid:
            if not self.treasury.try_pay(building.cost):
                self.logger.info(
                    f"Cannot afford {building.display_name} (cost {building.cost}, "
                    f"balance {self.treasury.balance})"
                )
                return False
            building.paid = True
            self.logger.info(f"Paid {building.cost} for {building.display_name}")
            if self.events is not None and building.cost:
                self.events.publish(
                    TreasuryChanged(balance=self.treasury.balance, delta=-building.cost)
                )

        registered = self.registry.register(building)
        if registered:
            self.logger.log_event(
                "building_placed",
                {
                    "building_id": building.unique_id,
                    "category": building.category.value,
                    "cost": building.cost,
                    "position": [building.position.x, building.position.y, building.position.z],
                },
            )
        return registered

    def place(self, template_name: str, position: Position) -> Building | None:
        """Create and confirm in one call; used for scripted layouts."""
        building = self.create_pending(template_name, position)
        if self.confirm_placement(building, placement_valid=True):
            return building
        return None

    def remove_building(self, building: Building) -> bool:
        return self.registry.unregister(building)
