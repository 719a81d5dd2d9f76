"""Simulation clock: real seconds accumulate into simulated days.

Convention used everywhere in this project:

- the host calls ``advance(delta_seconds)`` once per frame
- one day lasts ``TimeConfig.day_length_seconds``
- on rollover ``elapsed`` is reset to exactly 0; any overshoot is dropped, so
  one oversized frame never advances more than one day
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from config import TimeConfig


@dataclass
class DayCounter:
    """Day number plus the time accumulated toward the next rollover."""

    time: TimeConfig
    current_day: int = 0
    elapsed: float = 0.0

    @property
    def day_length(self) -> float:
        return float(self.time.day_length_seconds)

    def advance(self, delta_seconds: float) -> bool:
        """Add frame time; return True when a day boundary was reached.

        Negative or non-finite deltas are ignored.
        """
        if not math.isfinite(delta_seconds) or delta_seconds <= 0:
            return False
        self.elapsed += delta_seconds
        return self.elapsed >= self.day_length

    def roll_over(self) -> int:
        """Start the next day and return its number."""
        self.current_day += 1
        self.elapsed = 0.0
        return self.current_day

    # --- Derived values ---
    @property
    def progress(self) -> float:
        """Fraction of the current day that has passed, in [0, 1]."""
        return max(0.0, min(1.0, self.elapsed / self.day_length))

    @property
    def time_until_next_day(self) -> float:
        return max(0.0, self.day_length - self.elapsed)
