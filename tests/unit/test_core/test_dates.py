#!/usr/bin/env python3
"""Tests for SessionDate primitive type."""

from datetime import date

import pytest

from splitcheck.core.dates import SessionDate


class TestSessionDateConstruction:
    """Test SessionDate construction."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("2024-01-15", date(2024, 1, 15)),
            ("2024-01-15T10:30:00", date(2024, 1, 15)),
            ("2024-01-15T10:30:00.000Z", date(2024, 1, 15)),
            ("  2024-01-15  ", date(2024, 1, 15)),
        ],
        ids=["date", "timestamp", "javascript_timestamp", "whitespace"],
    )
    def test_from_string(self, text, expected):
        assert SessionDate.from_string(text).date == expected

    @pytest.mark.parametrize("text", ["", "yesterday", "2024-13-01", "15/01/2024"])
    def test_from_string_rejects_invalid(self, text):
        with pytest.raises(ValueError):
            SessionDate.from_string(text)

    def test_today(self):
        assert SessionDate.today().date == date.today()


class TestSessionDateBucketKeys:
    """Test the day/week/month keys used for trends."""

    def test_day_key(self):
        assert SessionDate(date(2024, 3, 9)).day_key() == "2024-03-09"

    def test_month_key(self):
        assert SessionDate(date(2024, 3, 9)).month_key() == "2024-03"

    @pytest.mark.parametrize(
        "day,expected",
        [
            (date(2024, 3, 10), "2024-03-10"),  # Sunday
            (date(2024, 3, 11), "2024-03-10"),  # Monday
            (date(2024, 3, 16), "2024-03-10"),  # Saturday
            (date(2024, 3, 2), "2024-02-25"),  # week spans a month boundary
        ],
    )
    def test_week_key_starts_on_sunday(self, day, expected):
        assert SessionDate(day).week_key() == expected


class TestSessionDateComparison:
    """Test SessionDate comparison."""

    def test_ordering(self):
        early = SessionDate(date(2024, 1, 1))
        late = SessionDate(date(2024, 2, 1))

        assert early < late
        assert early <= late
        assert late > early
        assert late >= early
        assert early == SessionDate(date(2024, 1, 1))

    def test_str(self):
        assert str(SessionDate(date(2024, 1, 5))) == "2024-01-05"
