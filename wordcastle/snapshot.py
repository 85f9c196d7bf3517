"""
Snapshot codec.

Converts SessionState to and from the persisted JSON record:

    {
      "stats": {"stars", "wordsMastered", "studyMinutes", "streak",
                "lastActive", "wordsLearnedToday", "dailyGoal"},
      "currentCategory": "...",
      "wrongWords": [...],
      "reviewData": {"<itemId>": {"wordId", "lastReviewTime", "stage"}}
    }

``lastActive`` is ISO-8601 UTC with millisecond precision, ``lastReviewTime``
is epoch milliseconds. Encoding is deterministic so an unchanged state always
produces the same bytes.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer, field_validator

from .models import LearnerStats, ReviewEntry, ReviewLedger, SessionState, as_utc

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MS = timedelta(milliseconds=1)


class SnapshotCorruptError(ValueError):
    """Raised when a stored snapshot cannot be parsed."""
    pass


def to_epoch_ms(moment: datetime) -> int:
    return (as_utc(moment) - EPOCH) // _MS


def from_epoch_ms(ms: int) -> datetime:
    return EPOCH + ms * _MS


# =============================================================================
# Wire Models
# =============================================================================


class StatsRecord(BaseModel):
    """``stats`` block; absent fields fall back to defaults on load."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    stars: int | None = Field(default=None, ge=0)
    words_mastered: int | None = Field(default=None, alias="wordsMastered", ge=0)
    study_minutes: int | None = Field(default=None, alias="studyMinutes", ge=0)
    streak: int | None = Field(default=None, ge=1)
    last_active: datetime | None = Field(default=None, alias="lastActive")
    words_learned_today: int | None = Field(default=None, alias="wordsLearnedToday", ge=0)
    daily_goal: int | None = Field(default=None, alias="dailyGoal", gt=0)

    @field_validator("last_active")
    @classmethod
    def _utc(cls, value: datetime | None) -> datetime | None:
        return None if value is None else as_utc(value)

    @field_serializer("last_active")
    def _iso(self, value: datetime | None) -> str | None:
        if value is None:
            return None
        return as_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ReviewRecord(BaseModel):
    """One ``reviewData`` value."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    word_id: str | None = Field(default=None, alias="wordId")  # the reviewData key wins
    last_review_time: int = Field(alias="lastReviewTime")
    stage: int = Field(ge=0)


class SnapshotRecord(BaseModel):
    """The whole persisted record."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    stats: StatsRecord = Field(default_factory=StatsRecord)
    current_category: str | None = Field(default=None, alias="currentCategory")
    wrong_words: list[dict[str, Any]] = Field(default_factory=list, alias="wrongWords")
    review_data: dict[str, ReviewRecord] = Field(default_factory=dict, alias="reviewData")


# =============================================================================
# Encode / Decode
# =============================================================================


def encode(state: SessionState) -> str:
    """Serialize a SessionState to its JSON snapshot."""
    stats = state.stats
    record = SnapshotRecord(
        stats=StatsRecord(
            stars=stats.stars,
            words_mastered=stats.items_mastered,
            study_minutes=stats.study_minutes,
            streak=stats.streak_days,
            last_active=stats.last_active,
            words_learned_today=stats.items_learned_today,
            daily_goal=stats.daily_goal,
        ),
        current_category=state.current_category,
        wrong_words=[dict(w) for w in state.wrong_words],
        review_data={
            entry.item_id: ReviewRecord(
                word_id=entry.item_id,
                last_review_time=to_epoch_ms(entry.last_review_time),
                stage=entry.stage,
            )
            for entry in state.ledger.values()
        },
    )
    return record.model_dump_json(by_alias=True)


def decode(raw: str | bytes, defaults: SessionState) -> SessionState:
    """
    Parse a JSON snapshot, filling absent fields from ``defaults``.

    Args:
        raw: Stored JSON text
        defaults: Fresh state used for any field the snapshot lacks

    Returns:
        SessionState

    Raises:
        SnapshotCorruptError: malformed JSON or invalid field values
    """
    try:
        record = SnapshotRecord.model_validate_json(raw)
    except ValidationError as e:
        raise SnapshotCorruptError(str(e)) from e

    base = defaults.stats
    s = record.stats

    def pick(value, fallback):
        return fallback if value is None else value

    try:
        stats = LearnerStats(
            last_active=pick(s.last_active, base.last_active),
            stars=pick(s.stars, base.stars),
            items_mastered=pick(s.words_mastered, base.items_mastered),
            study_minutes=pick(s.study_minutes, base.study_minutes),
            streak_days=pick(s.streak, base.streak_days),
            items_learned_today=pick(s.words_learned_today, base.items_learned_today),
            daily_goal=pick(s.daily_goal, base.daily_goal),
        )
        # The reviewData key is authoritative for the item id
        ledger = ReviewLedger(
            ReviewEntry(
                item_id=item_id,
                last_review_time=from_epoch_ms(r.last_review_time),
                stage=r.stage,
            )
            for item_id, r in record.review_data.items()
        )
    except (ValueError, OverflowError) as e:
        raise SnapshotCorruptError(str(e)) from e

    return SessionState(
        stats=stats,
        ledger=ledger,
        current_category=pick(record.current_category, defaults.current_category),
        wrong_words=tuple(record.wrong_words),
    )
