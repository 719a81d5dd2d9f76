"""Standardized logging utilities for the simulation."""

import json
from typing import Any, Dict, Literal, Optional

from logger import log

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class SimulationLogger:
    """
    Standardized logger for simulation components.

    Prefixes every message with the component name (and building id, when
    given) so the log of one day reads as a sequence of tagged entries.
    """

    def __init__(self, component_name: str, building_id: Optional[str] = None):
        """
        Initialize simulation logger.

        Args:
            component_name: Name of the component (e.g., "HappinessEngine", "House")
            building_id: Optional building identifier for context
        """
        self.component_name = component_name
        self.building_id = building_id
        self._log_count = 0

    def _format_message(self, message: str, level: LogLevel) -> str:
        """Format log message with context."""
        if self.building_id:
            prefix = f"[{self.component_name}:{self.building_id}]"
        else:
            prefix = f"[{self.component_name}]"
        return f"{prefix} [{level}] {message}"

    def debug(self, message: str, data: Optional[Dict] = None) -> None:
        self._log("DEBUG", message, data)

    def info(self, message: str, data: Optional[Dict] = None) -> None:
        self._log("INFO", message, data)

    def warning(self, message: str, data: Optional[Dict] = None) -> None:
        self._log("WARNING", message, data)

    def error(self, message: str, data: Optional[Dict] = None) -> None:
        self._log("ERROR", message, data)

    def _log(self, level: LogLevel, message: str, data: Optional[Dict] = None) -> None:
        """Internal logging method."""
        log(self._format_message(message, level), level=level)
        self._log_count += 1

        if data:
            try:
                data_str = json.dumps(data, default=str)
            except (TypeError, ValueError):
                data_str = "(unserializable data)"
            log(f"DATA: {data_str}", level=level)

    def log_event(self, event_type: str, data: Dict[str, Any]) -> None:
        """
        Log a structured event with context.

        Args:
            event_type: Type of event
            data: Event data dictionary
        """
        event_data = {
            "component": self.component_name,
            "building_id": self.building_id,
            "event_type": event_type,
            "data": data,
        }
        self.info(f"EVENT: {event_type}", event_data)

    @property
    def log_count(self) -> int:
        return self._log_count


class BuildingLogger(SimulationLogger):
    """Building-specific logger with state-change helpers."""

    def __init__(self, building_id: str, building_type: str):
        super().__init__(building_type, building_id)
        self.building_type = building_type

    def log_state_change(self, old_state: str, new_state: str, reason: Optional[str] = None) -> None:
        """
        Log a building state change.

        Args:
            old_state: Previous state
            new_state: New state
            reason: Optional reason for change
        """
        data = {"old_state": old_state, "new_state": new_state, "reason": reason}
        self.info(f"State change: {old_state} -> {new_state}", data)


class SystemLogger(SimulationLogger):
    """System-level logger for the daily passes and the scheduler."""

    def __init__(self, system_name: str):
        super().__init__(system_name)

    def log_system_metric(self, metric_name: str, value: Any, unit: Optional[str] = None) -> None:
        data = {"metric": metric_name, "value": value, "unit": unit}
        self.debug(f"System metric: {metric_name} = {value}{f' {unit}' if unit else ''}", data)


def create_building_logger(building_id: str, building_type: str) -> BuildingLogger:
    return BuildingLogger(building_id, building_type)


def create_system_logger(system_name: str) -> SystemLogger:
    return SystemLogger(system_name)
