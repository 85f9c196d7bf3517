"""
SQLite Progress Store.

Persists the learner snapshot as one JSON document under a single key:
- Whole-snapshot overwrite on every save (last write wins)
- Daily rollover applied on load
- Corrupt snapshots discarded in favour of fresh defaults
- JSON backups on reset, with restore

Database location: ~/.wordcastle/state.db
"""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from pathlib import Path

from loguru import logger

from . import snapshot
from .models import SessionState
from .progress import rollover
from .snapshot import SnapshotCorruptError

DEFAULT_STORAGE_KEY = "wordcastle_progress_v3"


class ProgressStore:
    """
    SQLite-backed persistence for the learner snapshot.

    Storage failures on save are logged and reported through the return
    value; they never interrupt the caller's state transition.
    """

    DEFAULT_DB_PATH = Path.home() / ".wordcastle" / "state.db"

    def __init__(
        self,
        db_path: Path | None = None,
        storage_key: str = DEFAULT_STORAGE_KEY,
        *,
        daily_goal: int = 15,
        initial_stars: int = 5,
        default_category: str = "",
    ):
        """
        Initialize the progress store.

        Args:
            db_path: Custom database path (defaults to ~/.wordcastle/state.db)
            storage_key: Key the snapshot is stored under
            daily_goal: Goal for a fresh learner
            initial_stars: Stars for a fresh learner
            default_category: Category for a fresh learner
        """
        self.db_path = db_path or self.DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.storage_key = storage_key
        self.daily_goal = daily_goal
        self.initial_stars = initial_stars
        self.default_category = default_category

        self._conn: sqlite3.Connection | None = None
        self._init_schema()

        logger.info(f"ProgressStore initialized at {self.db_path}")

    @property
    def conn(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
        return self._conn

    @property
    def backup_dir(self) -> Path:
        return self.db_path.parent / "backups"

    def _init_schema(self) -> None:
        """Initialize database schema."""
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS snapshots (
                key TEXT PRIMARY KEY,
                payload TEXT NOT NULL,
                saved_at TIMESTAMP NOT NULL
            )
        """)
        self.conn.commit()

    def defaults(self, now: datetime) -> SessionState:
        """Fresh state for a learner with no stored progress."""
        return SessionState.fresh(
            now,
            daily_goal=self.daily_goal,
            initial_stars=self.initial_stars,
            category=self.default_category,
        )

    # =========================================================================
    # Snapshot Operations
    # =========================================================================

    def read_raw(self) -> str | None:
        """The stored JSON snapshot, or None if nothing is stored."""
        cursor = self.conn.execute(
            "SELECT payload FROM snapshots WHERE key = ?", (self.storage_key,)
        )
        row = cursor.fetchone()
        return None if row is None else row["payload"]

    def load(self, now: datetime) -> SessionState:
        """
        Load the learner snapshot.

        Args:
            now: Current time, used for defaults and daily rollover

        Returns:
            Stored state (rolled over to today if needed), or defaults when
            nothing is stored or the stored snapshot is corrupt
        """
        defaults = self.defaults(now)
        raw = self.read_raw()

        if raw is None:
            logger.info("No stored progress, starting fresh")
            return defaults

        try:
            state = snapshot.decode(raw, defaults)
        except SnapshotCorruptError as e:
            logger.warning(f"Discarding corrupt snapshot '{self.storage_key}': {e}")
            return defaults

        logger.debug(
            f"Loaded snapshot: {len(state.ledger)} tracked items, "
            f"{state.stats.items_learned_today} learned today"
        )
        return rollover(state, now)

    def save(self, state: SessionState) -> bool:
        """
        Overwrite the stored snapshot with ``state``.

        Returns:
            True on success, False if the write failed (already logged)
        """
        payload = snapshot.encode(state)
        try:
            with self.conn:
                self.conn.execute(
                    """
                    INSERT INTO snapshots (key, payload, saved_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        payload = excluded.payload,
                        saved_at = excluded.saved_at
                """,
                    (self.storage_key, payload, datetime.now().isoformat()),
                )
        except sqlite3.Error as e:
            logger.warning(f"Could not save progress to {self.db_path}: {e}")
            return False
        return True

    # =========================================================================
    # Backup / Reset
    # =========================================================================

    def reset(self) -> Path | None:
        """
        Delete stored progress after writing a JSON backup.

        Returns:
            Path of the backup file, or None if nothing was stored
        """
        raw = self.read_raw()
        if raw is None:
            return None

        self.backup_dir.mkdir(exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        backup_file = self.backup_dir / f"progress_backup_{timestamp}.json"

        backup = {
            "timestamp": timestamp,
            "storage_key": self.storage_key,
            "snapshot": raw,
        }
        with open(backup_file, "w", encoding="utf-8") as f:
            json.dump(backup, f, indent=2, ensure_ascii=False)
        logger.info(f"Backup saved: {backup_file}")

        with self.conn:
            self.conn.execute("DELETE FROM snapshots WHERE key = ?", (self.storage_key,))
        logger.info(f"Progress '{self.storage_key}' reset")
        return backup_file

    def restore(self, backup_file: Path | None = None) -> Path | None:
        """
        Restore progress from a backup file.

        Args:
            backup_file: Backup to restore. If None, uses most recent backup.

        Returns:
            The backup used, or None if no backup was found or it was unreadable
        """
        if backup_file is None:
            backups = self.list_backups()
            if not backups:
                logger.warning("No backup files found")
                return None
            backup_file = backups[0]

        if not backup_file.exists():
            logger.warning(f"Backup file not found: {backup_file}")
            return None

        try:
            with open(backup_file, encoding="utf-8") as f:
                snapshot = json.load(f)["snapshot"]
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, KeyError, TypeError) as e:
            logger.warning(f"Unreadable backup {backup_file}: {e}")
            return None
        if not isinstance(snapshot, str):
            logger.warning(f"Backup {backup_file} holds no snapshot text")
            return None

        with self.conn:
            self.conn.execute(
                """
                INSERT OR REPLACE INTO snapshots (key, payload, saved_at)
                VALUES (?, ?, ?)
            """,
                (self.storage_key, snapshot, datetime.now().isoformat()),
            )
        logger.info(f"Restored progress from {backup_file.name}")
        return backup_file

    def list_backups(self) -> list[Path]:
        """List available backup files, newest first."""
        if not self.backup_dir.exists():
            return []
        return sorted(self.backup_dir.glob("progress_backup_*.json"), reverse=True)

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None
