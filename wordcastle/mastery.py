"""
Mastery Recorder.

Handles "item learned" events from the learn flow.
"""

from __future__ import annotations

from datetime import datetime

from loguru import logger

from .models import ReviewEntry, SessionState


def record_learned(state: SessionState, item_id: str, now: datetime) -> SessionState:
    """
    Record that the learner has just been taught ``item_id``.

    First exposure seeds a stage-0 ledger entry and bumps the mastered and
    learned-today counters. Re-exposure resets the existing entry to stage 0
    (un-graduating it if needed) and leaves both counters alone.

    Args:
        state: Current snapshot
        item_id: Catalog item id (not validated)
        now: Event time

    Returns:
        New SessionState
    """
    is_new = item_id not in state.ledger
    ledger = state.ledger.with_entry(ReviewEntry(item_id=item_id, last_review_time=now, stage=0))

    stats = state.stats
    if is_new:
        new_state = state.with_ledger(ledger).with_stats(
            items_mastered=stats.items_mastered + 1,
            items_learned_today=stats.items_learned_today + 1,
            last_active=now,
        )
        logger.debug(
            f"Learned {item_id}: {new_state.stats.items_learned_today}/{stats.daily_goal} today"
        )
    else:
        new_state = state.with_ledger(ledger).with_stats(last_active=now)
        logger.debug(f"Re-exposed {item_id} (was stage {state.ledger[item_id].stage}), reset to stage 0")

    return new_state
