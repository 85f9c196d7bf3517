"""
Word Castle: vocabulary trainer with spaced review.

Components:
- Catalog: read-only word packs
- ProgressStore: SQLite persistence of the learner snapshot
- record_learned: Mastery Recorder
- apply_result: Review Result Processor
- due_items / ReviewScheduler: Review Scheduler
- LearnerSession: owns the live snapshot and persists every change
"""

from .catalog import Catalog, CatalogError, Word, WordPack
from .ladder import DEFAULT_LADDER, parse_ladder
from .mastery import record_learned
from .models import LearnerStats, ReviewEntry, ReviewLedger, SessionState
from .progress import award_stars, log_wrong_word, rollover, select_category
from .review import apply_result
from .scheduler import ReviewScheduler, build_review_queue, due_items
from .session import LearnerSession
from .snapshot import SnapshotCorruptError
from .state_store import ProgressStore

__version__ = "1.0.0"

__all__ = [
    # Catalog
    "Catalog",
    "CatalogError",
    "Word",
    "WordPack",
    # Model
    "LearnerStats",
    "ReviewEntry",
    "ReviewLedger",
    "SessionState",
    # Transitions
    "record_learned",
    "apply_result",
    "rollover",
    "award_stars",
    "select_category",
    "log_wrong_word",
    # Scheduling
    "DEFAULT_LADDER",
    "parse_ladder",
    "due_items",
    "ReviewScheduler",
    "build_review_queue",
    # Persistence
    "ProgressStore",
    "SnapshotCorruptError",
    "LearnerSession",
]
