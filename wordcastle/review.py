"""
Review Result Processor.

Moves an item along the interval ladder after a review:
success advances one stage, failure drops back to stage 0.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from loguru import logger

from .ladder import DEFAULT_LADDER, Ladder, is_graduated
from .models import ReviewLedger


def apply_result(
    ledger: ReviewLedger,
    item_id: str,
    success: bool,
    now: datetime,
    ladder: Ladder = DEFAULT_LADDER,
) -> ReviewLedger:
    """
    Apply a review outcome to the ledger.

    Unknown items and graduated items are left untouched; the same ledger
    object is returned so callers can tell nothing changed.

    Args:
        ledger: Current ledger
        item_id: Reviewed item
        success: Whether the learner recalled it
        now: Review time
        ladder: Interval ladder (its length defines graduation)

    Returns:
        Updated ReviewLedger
    """
    entry = ledger.get(item_id)
    if entry is None:
        logger.debug(f"Ignoring review for unknown item {item_id}")
        return ledger

    if is_graduated(entry.stage, ladder):
        logger.debug(f"Ignoring review for graduated item {item_id}")
        return ledger

    stage = entry.stage + 1 if success else 0
    updated = replace(entry, stage=stage, last_review_time=now)

    if is_graduated(stage, ladder):
        logger.info(f"{item_id} graduated")
    else:
        logger.debug(f"Review {item_id}: {'pass' if success else 'fail'}, stage {entry.stage} -> {stage}")

    return ledger.with_entry(updated)
