"""
Review Scheduler.

Derives the "due now" set from the ledger and the current time.
Nothing here mutates state or keeps timers; the due set is recomputed
on demand and is deterministic for a given (ledger, now).

Ordering is most-overdue first, ties broken by item id.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from loguru import logger

from .catalog import Catalog, Word
from .ladder import DEFAULT_LADDER, Ladder, is_graduated
from .models import ReviewEntry, ReviewLedger, as_utc

# =============================================================================
# Due Computation
# =============================================================================


def next_due_at(entry: ReviewEntry, ladder: Ladder = DEFAULT_LADDER) -> datetime | None:
    """When ``entry`` becomes due, or None if it has graduated."""
    if is_graduated(entry.stage, ladder):
        return None
    return entry.last_review_time + ladder[entry.stage]


def overdue_by(entry: ReviewEntry, now: datetime, ladder: Ladder = DEFAULT_LADDER) -> timedelta | None:
    """How far past its due time ``entry`` is (negative if not yet due)."""
    due_at = next_due_at(entry, ladder)
    if due_at is None:
        return None
    return as_utc(now) - due_at


def due_items(
    ledger: ReviewLedger,
    now: datetime,
    ladder: Ladder = DEFAULT_LADDER,
) -> list[ReviewEntry]:
    """
    Entries due for review at ``now``.

    An entry is due when it has not graduated and the time since its last
    review is at least the wait for its stage (boundary inclusive).

    Returns:
        Due entries, most overdue first
    """
    due: list[tuple[timedelta, ReviewEntry]] = []
    for entry in ledger.values():
        lateness = overdue_by(entry, now, ladder)
        if lateness is not None and lateness >= timedelta(0):
            due.append((lateness, entry))

    due.sort(key=lambda pair: (-pair[0], pair[1].item_id))
    return [entry for _, entry in due]


def count_graduated(ledger: ReviewLedger, ladder: Ladder = DEFAULT_LADDER) -> int:
    return sum(1 for entry in ledger.values() if is_graduated(entry.stage, ladder))


# =============================================================================
# Memoizing Scheduler
# =============================================================================


class ReviewScheduler:
    """
    Caches the last due set per (ledger, now).

    The cache only avoids recomputation when the same ledger object is
    queried again at the same instant; results are identical either way.
    """

    def __init__(self, ladder: Ladder = DEFAULT_LADDER):
        self.ladder = ladder
        self._cached_ledger: ReviewLedger | None = None
        self._cached_now: datetime | None = None
        self._cached_due: list[ReviewEntry] = []

    def due(self, ledger: ReviewLedger, now: datetime) -> list[ReviewEntry]:
        if ledger is not self._cached_ledger or now != self._cached_now:
            self._cached_due = due_items(ledger, now, self.ladder)
            self._cached_ledger = ledger
            self._cached_now = now
            logger.debug(f"Due set recomputed: {len(self._cached_due)} of {len(ledger)} items")
        return list(self._cached_due)

    def count_graduated(self, ledger: ReviewLedger) -> int:
        return count_graduated(ledger, self.ladder)


# =============================================================================
# Review Queue
# =============================================================================


@dataclass
class ReviewQueue:
    """A prepared review session."""

    words: list[Word] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)  # due ids absent from the catalog

    @property
    def total_cards(self) -> int:
        return len(self.words)


def build_review_queue(due: list[ReviewEntry], catalog: Catalog) -> ReviewQueue:
    """Join due entries with their catalog words, keeping due order."""
    ids = [entry.item_id for entry in due]
    queue = ReviewQueue(
        words=catalog.get_by_ids(ids),
        missing=[item_id for item_id in ids if item_id not in catalog],
    )

    if queue.missing:
        logger.warning(f"{len(queue.missing)} due items not in catalog: {queue.missing[:5]}")
    return queue
