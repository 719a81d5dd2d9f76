"""Simulation events and the synchronous bus that delivers them.

Events are internal signals FROM the simulation TO its collaborators (UI
labels, progress bars, indicators). Delivery is synchronous and in
subscription order; a failing listener is logged and does not stop delivery
to the others.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from logger import log


@dataclass(frozen=True)
class SimulationEvent:
    pass


@dataclass(frozen=True)
class DayAdvanced(SimulationEvent):
    """Fired once per rollover, after every daily pass has run."""

    day: int


@dataclass(frozen=True)
class DayProgress(SimulationEvent):
    """Fired on every running tick; ``fraction`` is in [0, 1)."""

    fraction: float


@dataclass(frozen=True)
class TreasuryChanged(SimulationEvent):
    balance: int
    delta: int


@dataclass(frozen=True)
class PopulationChanged(SimulationEvent):
    total: int
    occupied_houses: int
    abandoned_houses: int


@dataclass(frozen=True)
class BuildingRegistered(SimulationEvent):
    building_id: str
    category: str


@dataclass(frozen=True)
class BuildingUnregistered(SimulationEvent):
    building_id: str
    category: str


E = TypeVar("E", bound=SimulationEvent)


class EventBus:
    def __init__(self) -> None:
        self._listeners: dict[type[SimulationEvent], list[Callable[[SimulationEvent], None]]] = (
            defaultdict(list)
        )

    def subscribe(self, event_type: type[E], listener: Callable[[E], None]) -> None:
        self._listeners[event_type].append(listener)  # type: ignore[arg-type]

    def unsubscribe(self, event_type: type[E], listener: Callable[[E], None]) -> bool:
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)  # type: ignore[arg-type]
            return True
        return False

    def publish(self, event: SimulationEvent) -> None:
        for listener in list(self._listeners.get(type(event), [])):
            try:
                listener(event)
            except Exception as exc:
                log(
                    f"EventBus: listener {getattr(listener, '__name__', listener)!r} failed "
                    f"on {type(event).__name__}: {exc}",
                    level="ERROR",
                )
