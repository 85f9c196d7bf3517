"""
Progress data model.

Immutable snapshot types for learner progress:
- ReviewEntry: per-item review state
- ReviewLedger: item_id -> ReviewEntry mapping
- LearnerStats: counters shown on the home screen
- SessionState: everything that gets persisted

Transitions never mutate these objects; they build new ones with
``dataclasses.replace`` or the ``with_*`` helpers below.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any


def as_utc(moment: datetime) -> datetime:
    """Aware UTC copy of ``moment``; naive values are taken to be UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


# =============================================================================
# Review Ledger
# =============================================================================


@dataclass(frozen=True)
class ReviewEntry:
    """Review state for a single catalog item."""

    item_id: str
    last_review_time: datetime
    stage: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "last_review_time", as_utc(self.last_review_time))
        if self.stage < 0:
            raise ValueError(f"stage must be >= 0, got {self.stage}")


class ReviewLedger(Mapping[str, ReviewEntry]):
    """
    Immutable mapping of item ids to review entries.

    Keys are unique. Iteration follows insertion order, but callers that
    need a particular order must sort explicitly.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[ReviewEntry] = ()):
        self._entries: dict[str, ReviewEntry] = {e.item_id: e for e in entries}

    def __getitem__(self, item_id: str) -> ReviewEntry:
        return self._entries[item_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ReviewLedger({list(self._entries.values())!r})"

    def with_entry(self, entry: ReviewEntry) -> ReviewLedger:
        """Return a new ledger with ``entry`` inserted or overwritten."""
        updated = dict(self._entries)
        updated[entry.item_id] = entry
        ledger = ReviewLedger()
        ledger._entries = updated
        return ledger

    def entries(self) -> list[ReviewEntry]:
        return list(self._entries.values())


# =============================================================================
# Learner Stats
# =============================================================================


@dataclass(frozen=True)
class LearnerStats:
    """Learner-level counters."""

    last_active: datetime
    stars: int = 0
    items_mastered: int = 0
    study_minutes: int = 0
    streak_days: int = 1  # passthrough, nothing updates it
    items_learned_today: int = 0
    daily_goal: int = 15

    def __post_init__(self) -> None:
        object.__setattr__(self, "last_active", as_utc(self.last_active))
        for name in ("stars", "items_mastered", "study_minutes", "items_learned_today"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")
        if self.streak_days < 1:
            raise ValueError("streak_days must be >= 1")
        if self.daily_goal <= 0:
            raise ValueError("daily_goal must be > 0")

    @property
    def daily_progress(self) -> float:
        """Fraction of today's goal reached, capped at 1.0."""
        return min(self.items_learned_today / self.daily_goal, 1.0)

    @property
    def goal_reached(self) -> bool:
        return self.items_learned_today >= self.daily_goal


# =============================================================================
# Session State
# =============================================================================


@dataclass(frozen=True)
class SessionState:
    """The complete persisted learner snapshot."""

    stats: LearnerStats
    ledger: ReviewLedger = field(default_factory=ReviewLedger)
    current_category: str = ""
    wrong_words: tuple[dict[str, Any], ...] = ()

    @classmethod
    def fresh(
        cls,
        now: datetime,
        *,
        daily_goal: int = 15,
        initial_stars: int = 5,
        category: str = "",
    ) -> SessionState:
        """Defaults for a learner with no stored progress."""
        return cls(
            stats=LearnerStats(
                last_active=now,
                stars=initial_stars,
                daily_goal=daily_goal,
            ),
            current_category=category,
        )

    def with_stats(self, **changes: Any) -> SessionState:
        return replace(self, stats=replace(self.stats, **changes))

    def with_ledger(self, ledger: ReviewLedger) -> SessionState:
        if ledger is self.ledger:
            return self
        return replace(self, ledger=ledger)
