"""
Break reminder.

Counts down from the start of a study session and asks the learner to
rest their eyes once the interval has elapsed.
"""

from __future__ import annotations

from datetime import datetime, timedelta

DEFAULT_BREAK_INTERVAL = timedelta(minutes=15)


class BreakReminder:
    """Wall-clock countdown; the caller supplies ``now`` at each check."""

    def __init__(self, started_at: datetime, interval: timedelta = DEFAULT_BREAK_INTERVAL):
        if interval <= timedelta(0):
            raise ValueError("Break interval must be positive")
        self.interval = interval
        self.started_at = started_at

    def remaining(self, now: datetime) -> timedelta:
        return max(self.started_at + self.interval - now, timedelta(0))

    def is_due(self, now: datetime) -> bool:
        return self.remaining(now) == timedelta(0)

    def acknowledge(self, now: datetime) -> None:
        """Restart the countdown after the learner has taken the break."""
        self.started_at = now
