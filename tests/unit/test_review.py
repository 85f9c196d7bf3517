"""
Unit tests for the Review Result Processor.
"""

from datetime import timedelta

import pytest

from wordcastle.ladder import DEFAULT_LADDER
from wordcastle.models import ReviewEntry, ReviewLedger
from wordcastle.review import apply_result


@pytest.fixture
def later(now):
    return now + timedelta(days=2)


class TestSuccess:
    @pytest.mark.parametrize("stage", range(len(DEFAULT_LADDER)))
    def test_advances_exactly_one_stage(self, now, later, stage):
        ledger = ReviewLedger([ReviewEntry("x", now, stage)])
        result = apply_result(ledger, "x", True, later)
        assert result["x"].stage == stage + 1
        assert result["x"].last_review_time == later

    def test_final_stage_graduates(self, now, later):
        last = len(DEFAULT_LADDER) - 1
        ledger = ReviewLedger([ReviewEntry("x", now, last)])
        result = apply_result(ledger, "x", True, later)
        assert result["x"].stage == len(DEFAULT_LADDER)


class TestFailure:
    @pytest.mark.parametrize("stage", range(len(DEFAULT_LADDER)))
    def test_resets_to_zero(self, now, later, stage):
        ledger = ReviewLedger([ReviewEntry("x", now, stage)])
        result = apply_result(ledger, "x", False, later)
        assert result["x"].stage == 0
        assert result["x"].last_review_time == later

    def test_stage_four_goes_to_zero_not_three(self, now, later):
        ledger = ReviewLedger([ReviewEntry("x", now, 4)])
        assert apply_result(ledger, "x", False, later)["x"].stage == 0


class TestNoOps:
    def test_unknown_item_returns_same_ledger(self, now):
        ledger = ReviewLedger([ReviewEntry("x", now, 1)])
        assert apply_result(ledger, "nope", True, now) is ledger
        assert apply_result(ledger, "nope", False, now) is ledger

    @pytest.mark.parametrize("success", [True, False])
    def test_graduated_is_absorbing(self, now, later, success):
        entry = ReviewEntry("x", now, len(DEFAULT_LADDER))
        ledger = ReviewLedger([entry])
        result = apply_result(ledger, "x", success, later)
        assert result is ledger
        assert result["x"] is entry

    def test_naive_review_time_stored_as_utc(self, now):
        ledger = ReviewLedger([ReviewEntry("cat", now, 0)])
        updated = apply_result(ledger, "cat", True, now.replace(tzinfo=None) + timedelta(hours=1))
        assert updated["cat"].last_review_time == now + timedelta(hours=1)

    def test_input_ledger_untouched(self, now, later):
        entry = ReviewEntry("x", now, 2)
        ledger = ReviewLedger([entry, ReviewEntry("y", now, 0)])
        result = apply_result(ledger, "x", True, later)
        assert ledger["x"] is entry
        assert result["y"] is ledger["y"]
