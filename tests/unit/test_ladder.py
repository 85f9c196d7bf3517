"""
Unit tests for interval ladder parsing.
"""

from datetime import timedelta

import pytest

from wordcastle.ladder import DEFAULT_LADDER, format_duration, is_graduated, parse_duration, parse_ladder


def test_default_ladder():
    assert DEFAULT_LADDER == (
        timedelta(hours=1),
        timedelta(days=1),
        timedelta(days=3),
        timedelta(days=7),
        timedelta(days=14),
        timedelta(days=30),
    )


def test_parse_ladder_round_trips_default():
    assert parse_ladder("1h,1d,3d,7d,14d,30d") == DEFAULT_LADDER


@pytest.mark.parametrize(
    "text,expected",
    [
        ("30s", timedelta(seconds=30)),
        ("90m", timedelta(minutes=90)),
        (" 2H ", timedelta(hours=2)),
        ("1w", timedelta(weeks=1)),
    ],
)
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize("text", ["", ",", "1y", "h", "0h", "-1d", "1.5h"])
def test_invalid_ladders(text):
    with pytest.raises(ValueError):
        parse_ladder(text)


@pytest.mark.parametrize(
    "delta,expected",
    [
        (timedelta(hours=1), "1h"),
        (timedelta(days=14), "2w"),
        (timedelta(days=3), "3d"),
        (timedelta(minutes=90), "90m"),
        (timedelta(seconds=3725), "1h02m"),
        (timedelta(seconds=45), "45s"),
        (timedelta(hours=-2), "-2h"),
    ],
)
def test_format_duration(delta, expected):
    assert format_duration(delta) == expected


def test_is_graduated():
    assert not is_graduated(len(DEFAULT_LADDER) - 1, DEFAULT_LADDER)
    assert is_graduated(len(DEFAULT_LADDER), DEFAULT_LADDER)
