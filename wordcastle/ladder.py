"""
Interval Ladder: the retention schedule.

Stage ``s`` means the next review is due ``ladder[s]`` after the last one.
A stage equal to ``len(ladder)`` is graduated and never scheduled again.
"""

from __future__ import annotations

import re
from datetime import timedelta

Ladder = tuple[timedelta, ...]

DEFAULT_LADDER: Ladder = (
    timedelta(hours=1),
    timedelta(days=1),
    timedelta(days=3),
    timedelta(days=7),
    timedelta(days=14),
    timedelta(days=30),
)

_UNITS = {
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
    "w": timedelta(weeks=1),
}

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhdw])\s*$", re.IGNORECASE)


def parse_duration(text: str) -> timedelta:
    """Parse a compact duration such as ``90m`` or ``3d``."""
    match = _DURATION_RE.match(text)
    if not match:
        raise ValueError(f"Invalid duration: {text!r} (expected e.g. '1h', '3d')")
    amount, unit = match.groups()
    return int(amount) * _UNITS[unit.lower()]


def parse_ladder(text: str) -> Ladder:
    """
    Parse a comma-separated ladder definition.

    Args:
        text: e.g. "1h,1d,3d,7d,14d,30d"

    Returns:
        Tuple of positive timedeltas, in the given order

    Raises:
        ValueError: empty ladder or non-positive step
    """
    parts = [p for p in text.split(",") if p.strip()]
    if not parts:
        raise ValueError("Interval ladder must have at least one step")

    ladder = tuple(parse_duration(p) for p in parts)
    if any(step <= timedelta(0) for step in ladder):
        raise ValueError("Interval ladder steps must be positive")
    return ladder


def format_duration(delta: timedelta) -> str:
    """Render a timedelta using the largest whole unit that fits."""
    seconds = int(delta.total_seconds())
    if seconds < 0:
        return "-" + format_duration(-delta)
    for unit in ("w", "d", "h", "m"):
        size = int(_UNITS[unit].total_seconds())
        if seconds >= size and seconds % size == 0:
            return f"{seconds // size}{unit}"
    if seconds >= 3600:
        return f"{seconds // 3600}h{(seconds % 3600) // 60:02d}m"
    if seconds >= 60:
        return f"{seconds // 60}m"
    return f"{seconds}s"


def is_graduated(stage: int, ladder: Ladder) -> bool:
    """Whether a stage is past the end of the ladder."""
    return stage >= len(ladder)
