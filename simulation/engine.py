from __future__ import annotations

import os
import sys
import time
from collections.abc import Sequence
from enum import Enum
from typing import Any

from buildings.building import BuildingCategory, Position
from config import SimulationConfig
from logger import log
from metrics import DayMetricsCollector
from sim_clock import DayCounter
from simulation.context import SimulationContext, create_context
from simulation.events import DayAdvanced, DayProgress, PopulationChanged, TreasuryChanged
from simulation.pipeline import DEFAULT_PIPELINE, DailyPass, DayReport, run_pipeline


def _format_duration(seconds: float) -> str:
    if seconds < 0 or seconds != seconds:  # NaN guard
        return "?"
    seconds_int = int(seconds)
    mins, secs = divmod(seconds_int, 60)
    hours, mins = divmod(mins, 60)
    if hours:
        return f"{hours:d}h{mins:02d}m{secs:02d}s"
    if mins:
        return f"{mins:d}m{secs:02d}s"
    return f"{secs:d}s"


def _progress_bar(done: int, total: int, width: int = 30) -> str:
    if total <= 0:
        return "[" + ("?" * width) + "]"
    ratio = max(0.0, min(1.0, done / total))
    filled = int(round(ratio * width))
    return "[" + ("#" * filled) + ("-" * (width - filled)) + "]"


class ScheduleState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class DaySchedule:
    """
    Advances simulated time and runs the daily pipeline on every rollover.

    The host calls tick() once per frame with the frame's duration. While
    idle, ticks are ignored and the timer stays frozen.
    """

    def __init__(
        self,
        context: SimulationContext,
        passes: Sequence[DailyPass] = DEFAULT_PIPELINE,
        counter: DayCounter | None = None,
    ) -> None:
        self.context = context
        self.passes: tuple[DailyPass, ...] = tuple(passes)
        self.counter = counter or DayCounter(context.config.time)
        self.state = ScheduleState.IDLE
        self.last_report: DayReport | None = None

    @property
    def is_running(self) -> bool:
        return self.state is ScheduleState.RUNNING

    @property
    def current_day(self) -> int:
        return self.counter.current_day

    @property
    def progress(self) -> float:
        return self.counter.progress

    @property
    def time_until_next_day(self) -> float:
        return self.counter.time_until_next_day

    @property
    def pass_names(self) -> list[str]:
        return [p.name for p in self.passes]

    def start(self) -> None:
        if self.state is ScheduleState.RUNNING:
            return
        self.state = ScheduleState.RUNNING
        log("DaySchedule: day system started.", level="INFO")

    def stop(self) -> None:
        if self.state is ScheduleState.IDLE:
            return
        self.state = ScheduleState.IDLE
        log("DaySchedule: day system stopped.", level="INFO")

    def tick(self, delta_seconds: float) -> DayReport | None:
        """Advance the timer; returns the day's report when a day ended."""
        if self.state is not ScheduleState.RUNNING:
            return None

        rolled = self.counter.advance(delta_seconds)
        report = self.advance_day() if rolled else None
        self.context.events.publish(DayProgress(self.counter.progress))
        return report

    def advance_day(self) -> DayReport:
        """Run the pipeline and start the next day, regardless of the timer."""
        treasury = self.context.treasury
        day = self.counter.current_day + 1
        log(f"=== Day {day} started ===", level="INFO")

        report = DayReport(day=day)
        report.treasury_before = treasury.balance if treasury is not None else 0
        run_pipeline(self.context, report, self.passes)
        report.treasury_after = treasury.balance if treasury is not None else 0

        self.counter.roll_over()
        self.last_report = report

        events = self.context.events
        events.publish(DayAdvanced(day))
        events.publish(TreasuryChanged(balance=report.treasury_after, delta=report.treasury_delta))
        if report.population is not None:
            events.publish(
                PopulationChanged(
                    report.population.total,
                    report.population.occupied_houses,
                    report.population.abandoned_houses,
                )
            )

        log(
            f"Day {day} complete. Treasury {report.treasury_after} ({report.treasury_delta:+d}).",
            level="INFO",
        )
        return report


class SimulationEngine:
    """Headless driver: builds a session from config and runs it for a number of days."""

    def __init__(self, config: SimulationConfig):
        self.config = config
        self.reset()

    def reset(self) -> None:
        """Reset the simulation to its initial state."""
        self.context: SimulationContext = create_context(self.config)
        self.schedule = DaySchedule(self.context)
        self.collector = DayMetricsCollector(config=self.config)
        self.days = int(self.config.simulation_days)
        self.reports: list[DayReport] = []
        self.rejected_placements: list[str] = []

        self._place_city()

        if self.config.time.start_running:
            self.schedule.start()

        self.progress_enabled = os.getenv("SIM_PROGRESS", "0") not in {"0", "false", "False"}
        self.start_ts = time.time()

    def _place_city(self) -> None:
        placement = self.context.placement
        if placement is None:
            self.rejected_placements.extend(entry.template for entry in self.config.city)
            log("SimulationEngine: no placement service, city layout skipped.", level="ERROR")
            return
        for entry in self.config.city:
            building = placement.place(entry.template, Position(entry.x, entry.y, entry.z))
            if building is None:
                self.rejected_placements.append(entry.template)
                log(
                    f"SimulationEngine: could not place '{entry.template}' at "
                    f"({entry.x}, {entry.y}, {entry.z}).",
                    level="WARNING",
                )

    def step(self) -> DayReport:
        """Tick the schedule until exactly one more day has elapsed."""
        if not self.schedule.is_running:
            self.schedule.start()
        tick = self.config.time.tick_seconds
        report = None
        while report is None:
            report = self.schedule.tick(tick)
        self.reports.append(report)
        self.collector.record_day(report, self.context)
        self._print_progress(report.day)
        return report

    def run(self) -> dict[str, Any]:
        """Run the configured number of days."""
        log(f"Starting simulation for {self.days} days...", level="INFO")
        while self.schedule.current_day < self.days:
            self.step()
        self.schedule.stop()
        log("Simulation finished.", level="INFO")
        self.collector.export_metrics()
        return self.summary()

    def summary(self) -> dict[str, Any]:
        registry = self.context.registry
        treasury = self.context.treasury
        population = self.context.population
        return {
            "days": self.schedule.current_day,
            "treasury": treasury.balance if treasury is not None else None,
            "population": population.total_population if population is not None else None,
            "buildings": {
                category.value: registry.count(category)
                for category in BuildingCategory
            },
            "rejected_placements": list(self.rejected_placements),
            "houses": {
                house.unique_id: {
                    "happiness": round(house.happiness, 2),
                    "population": house.current_population,
                    "abandoned": house.abandoned,
                }
                for house in registry.by_category("house")
            },
        }

    def _print_progress(self, done: int) -> None:
        if not self.progress_enabled:
            return
        elapsed = time.time() - self.start_ts
        pct = (done / self.days * 100.0) if self.days > 0 else 100.0
        bar = _progress_bar(done, self.days, width=22)
        treasury = self.context.treasury.balance if self.context.treasury is not None else 0
        sys.stdout.write(
            f"\r{bar} {pct:6.2f}%  day {done}/{self.days}  money {treasury:>8}  "
            f"elapsed {_format_duration(elapsed)}"
        )
        if done >= self.days:
            sys.stdout.write("\n")
        sys.stdout.flush()
