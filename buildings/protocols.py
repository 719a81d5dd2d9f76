"""Protocols for the collaborators the simulation core talks to."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class TreasuryProtocol(Protocol):
    """Protocol for the city's money balance."""

    @property
    def balance(self) -> int: ...

    def can_afford(self, amount: int) -> bool: ...

    def spend(self, amount: int) -> None: ...

    def add(self, amount: int) -> None: ...

    def try_pay(self, amount: int) -> bool: ...


@runtime_checkable
class PlacementSignal(Protocol):
    """Geometry collaborator that decides whether a pending building may be paid for."""

    def is_placement_valid(self) -> bool: ...
