"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import json
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from wordcastle.state_store import ProgressStore


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def now():
    """A fixed, timezone-aware instant."""
    return datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def short_ladder():
    """Two-step ladder: 1 hour, then 24 hours."""
    return (timedelta(hours=1), timedelta(hours=24))


@pytest.fixture
def store(tmp_path):
    """ProgressStore on a temporary database."""
    s = ProgressStore(tmp_path / "state.db", daily_goal=15, initial_stars=5, default_category="Unit 1")
    yield s
    s.close()


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


@pytest.fixture
def clock(now):
    return FakeClock(now)


@pytest.fixture
def catalog_file(tmp_path):
    """A small catalog file with two categories."""
    data = {
        "categories": [
            {
                "name": "Animals",
                "words": [
                    {"id": "cat", "nativeText": "猫", "targetText": "cat"},
                    {"id": "dog", "nativeText": "狗", "targetText": "dog"},
                ],
            },
            {
                "name": "Food",
                "words": [
                    {"id": "apple", "nativeText": "苹果", "targetText": "apple"},
                ],
            },
        ]
    }
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path
