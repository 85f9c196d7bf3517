"""
Learner Session: owns the current progress snapshot.

Applies learner events as pure transitions and writes the result through
the ProgressStore after each one.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from loguru import logger

from .ladder import DEFAULT_LADDER, Ladder
from .mastery import record_learned
from .models import ReviewEntry, SessionState
from .progress import award_stars, log_wrong_word, select_category
from .review import apply_result
from .scheduler import ReviewScheduler
from .state_store import ProgressStore

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LearnerSession:
    """
    The single live SessionState for this process.

    Handles:
    - "item learned" and "item reviewed" events
    - star rewards, category selection, wrong-answer log
    - due-set queries through a memoizing ReviewScheduler
    """

    def __init__(
        self,
        store: ProgressStore,
        ladder: Ladder = DEFAULT_LADDER,
        clock: Clock = utc_now,
    ):
        """
        Load progress and persist it straight back (rollover included).

        Args:
            store: Progress store
            ladder: Interval ladder
            clock: Time source, read once per event
        """
        self.store = store
        self.ladder = ladder
        self.clock = clock
        self.scheduler = ReviewScheduler(ladder)

        self._state = store.load(clock())
        self.last_save_ok = store.save(self._state)

    @property
    def state(self) -> SessionState:
        return self._state

    def _commit(self, new_state: SessionState) -> SessionState:
        if new_state is self._state:
            return new_state
        self._state = new_state
        self.last_save_ok = self.store.save(new_state)
        if not self.last_save_ok:
            logger.warning("Progress kept in memory only; it will be lost on exit unless a later save succeeds")
        return new_state

    # =========================================================================
    # Learner Events
    # =========================================================================

    def learned(self, item_id: str) -> SessionState:
        return self._commit(record_learned(self._state, item_id, self.clock()))

    def reviewed(self, item_id: str, success: bool) -> SessionState:
        ledger = apply_result(self._state.ledger, item_id, success, self.clock(), self.ladder)
        return self._commit(self._state.with_ledger(ledger))

    def award_stars(self, amount: int) -> SessionState:
        return self._commit(award_stars(self._state, amount))

    def select_category(self, category: str) -> SessionState:
        return self._commit(select_category(self._state, category))

    def log_wrong_word(self, record: dict[str, Any]) -> SessionState:
        return self._commit(log_wrong_word(self._state, record))

    # =========================================================================
    # Queries
    # =========================================================================

    def due_items(self, now: datetime | None = None) -> list[ReviewEntry]:
        return self.scheduler.due(self._state.ledger, now or self.clock())

    def count_graduated(self) -> int:
        return self.scheduler.count_graduated(self._state.ledger)
