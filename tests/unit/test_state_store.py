"""
Unit tests for the SQLite ProgressStore.
"""

import json
import sqlite3
from datetime import datetime, timedelta, timezone

import pytest

from wordcastle.mastery import record_learned
from wordcastle.models import SessionState
from wordcastle.progress import award_stars
from wordcastle.scheduler import due_items
from wordcastle.state_store import ProgressStore


class TestLoad:
    def test_empty_store_returns_defaults(self, store, now):
        state = store.load(now)

        assert state.stats.items_mastered == 0
        assert state.stats.streak_days == 1
        assert state.stats.items_learned_today == 0
        assert state.stats.stars == 5
        assert state.stats.daily_goal == 15
        assert state.stats.last_active == now
        assert state.current_category == "Unit 1"
        assert len(state.ledger) == 0
        assert store.read_raw() is None

    def test_saved_state_loads_back(self, store, now):
        state = record_learned(store.load(now), "cat", now)
        assert store.save(state)

        loaded = store.load(now + timedelta(minutes=1))
        assert loaded.ledger == state.ledger
        assert loaded.stats == state.stats

    def test_rollover_on_new_day(self, store, now):
        yesterday = now - timedelta(days=1)
        state = store.load(yesterday)
        for word in ("cat", "dog", "fish"):
            state = record_learned(state, word, yesterday)
        state = award_stars(state, 20)
        store.save(state)

        loaded = store.load(now)

        assert loaded.stats.items_learned_today == 0
        assert loaded.stats.last_active == now
        assert loaded.stats.items_mastered == 3
        assert loaded.stats.stars == 25
        assert loaded.ledger == state.ledger

    def test_no_rollover_same_day(self, store, now):
        state = record_learned(store.load(now), "cat", now)
        store.save(state)

        loaded = store.load(now + timedelta(minutes=1))
        assert loaded.stats.items_learned_today == 1
        assert loaded.stats.last_active == now

    def test_corrupt_snapshot_falls_back_to_defaults(self, store, now):
        store.conn.execute(
            "INSERT INTO snapshots (key, payload, saved_at) VALUES (?, ?, ?)",
            (store.storage_key, "{broken", now.isoformat()),
        )
        store.conn.commit()

        state = store.load(now)
        assert len(state.ledger) == 0
        assert state.stats.stars == 5

    def test_storage_keys_are_independent(self, tmp_path, now):
        a = ProgressStore(tmp_path / "shared.db", "learner-a")
        b = ProgressStore(tmp_path / "shared.db", "learner-b")
        a.save(record_learned(a.load(now), "cat", now))

        assert len(b.load(now).ledger) == 0
        a.close()
        b.close()


class TestSave:
    def test_save_load_save_is_byte_identical(self, store, now):
        store.save(record_learned(store.load(now), "猫", now))

        store.save(store.load(now + timedelta(minutes=1)))
        first = store.read_raw()
        store.save(store.load(now + timedelta(minutes=2)))
        second = store.read_raw()

        assert first == second

    def test_last_write_wins(self, store, now):
        state = store.load(now)
        store.save(award_stars(state, 1))
        store.save(award_stars(state, 7))
        assert store.load(now).stats.stars == 12

    def test_naive_times_survive_a_save_and_load(self, store):
        naive_now = datetime(2026, 3, 10, 12, 0)
        store.save(record_learned(store.load(naive_now), "cat", naive_now))

        later = naive_now + timedelta(hours=2)
        due = due_items(store.load(later).ledger, later)

        assert [e.item_id for e in due] == ["cat"]
        assert due[0].last_review_time == naive_now.replace(tzinfo=timezone.utc)

    def test_write_failure_is_reported_not_raised(self, store, now):
        state = store.load(now)
        store.conn.close()  # leaves a closed connection in place

        assert store.save(state) is False


class TestBackups:
    def test_reset_with_nothing_stored(self, store):
        assert store.reset() is None

    def test_reset_writes_backup_and_clears(self, store, now):
        state = record_learned(store.load(now), "cat", now)
        store.save(state)
        raw = store.read_raw()

        backup = store.reset()

        assert backup is not None and backup.exists()
        assert json.loads(backup.read_text(encoding="utf-8"))["snapshot"] == raw
        assert store.read_raw() is None
        assert store.list_backups() == [backup]

    def test_restore_newest_backup(self, store, now):
        state = record_learned(store.load(now), "cat", now)
        store.save(state)
        store.reset()

        used = store.restore()

        assert used is not None
        assert store.load(now).ledger == state.ledger

    def test_restore_without_backups(self, store):
        assert store.restore() is None

    @pytest.mark.parametrize("content", ["{not json", '{"timestamp": "x"}', "[1, 2]", '{"snapshot": 42}'])
    def test_restore_unreadable_backup(self, store, now, tmp_path, content):
        store.save(record_learned(store.load(now), "cat", now))
        raw = store.read_raw()
        bad = tmp_path / "progress_backup_bad.json"
        bad.write_text(content, encoding="utf-8")

        assert store.restore(bad) is None
        assert store.read_raw() == raw


def test_schema_created(store):
    tables = {
        row[0]
        for row in store.conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
    }
    assert "snapshots" in tables


def test_fresh_state_matches_store_defaults(store, now):
    assert store.defaults(now) == SessionState.fresh(now, daily_goal=15, initial_stars=5, category="Unit 1")
