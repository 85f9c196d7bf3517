"""
Learner-level progress transitions.

Pure functions over SessionState: daily rollover, star rewards,
category selection and the wrong-answer log.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Any

from loguru import logger

from .models import SessionState, as_utc


def calendar_day(moment: datetime) -> date:
    """The local calendar date of ``moment`` (naive values are UTC)."""
    return as_utc(moment).astimezone().date()


def needs_rollover(state: SessionState, now: datetime) -> bool:
    return calendar_day(state.stats.last_active) != calendar_day(now)


def rollover(state: SessionState, now: datetime) -> SessionState:
    """
    Start a new learning day if the last activity was on another date.

    Resets the daily counter and stamps ``last_active``; the ledger, stars
    and mastered count are carried over unchanged.
    """
    if not needs_rollover(state, now):
        return state

    logger.info(
        f"Daily rollover: {calendar_day(state.stats.last_active)} -> {calendar_day(now)} "
        f"({state.stats.items_learned_today} learned yesterday)"
    )
    return state.with_stats(items_learned_today=0, last_active=now)


def award_stars(state: SessionState, amount: int) -> SessionState:
    """Add a reward computed elsewhere (games, tests, review sessions)."""
    if amount < 0:
        raise ValueError(f"Star reward must be non-negative, got {amount}")
    if amount == 0:
        return state
    return state.with_stats(stars=state.stats.stars + amount)


def review_reward(cards_reviewed: int, per_item: int = 2) -> int:
    """Stars for finishing a review session."""
    return max(cards_reviewed, 0) * per_item


def select_category(state: SessionState, category: str) -> SessionState:
    if category == state.current_category:
        return state
    return replace(state, current_category=category)


def log_wrong_word(state: SessionState, record: dict[str, Any]) -> SessionState:
    """Append a missed item to the wrong-answer log."""
    return replace(state, wrong_words=state.wrong_words + (dict(record),))
