"""
Unit tests for the break reminder countdown.
"""

from datetime import timedelta

import pytest

from wordcastle.break_reminder import BreakReminder


def test_counts_down_fifteen_minutes(now):
    reminder = BreakReminder(now)
    assert reminder.remaining(now) == timedelta(minutes=15)
    assert not reminder.is_due(now + timedelta(minutes=14, seconds=59))
    assert reminder.is_due(now + timedelta(minutes=15))
    assert reminder.remaining(now + timedelta(hours=1)) == timedelta(0)


def test_acknowledge_restarts(now):
    reminder = BreakReminder(now, timedelta(minutes=5))
    later = now + timedelta(minutes=6)
    assert reminder.is_due(later)

    reminder.acknowledge(later)
    assert not reminder.is_due(later)
    assert reminder.is_due(later + timedelta(minutes=5))


def test_interval_must_be_positive(now):
    with pytest.raises(ValueError):
        BreakReminder(now, timedelta(0))
