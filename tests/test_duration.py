"""Tests for the time-entry duration policy."""

import logging
from datetime import UTC, datetime

import pytest

from pathos.errors import EndBeforeStartError, ValidationError
from pathos.time_entries.service import resolve_duration, span_minutes

START = datetime(2026, 5, 1, 10, 0, 0, tzinfo=UTC)


def at(hour: int, minute: int = 0, second: int = 0) -> datetime:
    return datetime(2026, 5, 1, hour, minute, second, tzinfo=UTC)


class TestSpanMinutes:
    def test_forty_five_minutes(self):
        assert span_minutes(START, at(10, 45)) == 45

    def test_rounds_to_nearest_minute(self):
        assert span_minutes(START, at(10, 0, 40)) == 1
        assert span_minutes(START, at(10, 1, 20)) == 1

    def test_naive_treated_as_utc(self):
        naive_end = datetime(2026, 5, 1, 11, 0, 0)
        assert span_minutes(START, naive_end) == 60


class TestResolveDuration:
    def test_computed_when_omitted(self):
        assert resolve_duration(START, at(10, 45), None) == 45

    def test_supplied_wins(self):
        assert resolve_duration(START, at(10, 45), 30) == 30

    def test_mismatch_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="pathos.time_entries.service"):
            resolve_duration(START, at(10, 45), 30)
        assert "differs" in caplog.text

    def test_end_equal_to_start_rejected(self):
        with pytest.raises(EndBeforeStartError):
            resolve_duration(START, START, 10)

    def test_end_before_start_rejected(self):
        with pytest.raises(EndBeforeStartError):
            resolve_duration(at(11), START, None)

    def test_zero_duration_rejected(self):
        with pytest.raises(ValidationError):
            resolve_duration(START, at(11), 0)

    def test_over_a_day_rejected(self):
        with pytest.raises(ValidationError):
            resolve_duration(START, at(11), 1441)

    def test_computed_sub_minute_rejected(self):
        """Twenty seconds rounds to 0 minutes, below the 1 minute floor."""
        with pytest.raises(ValidationError):
            resolve_duration(START, at(10, 0, 20), None)

    def test_bounds_inclusive(self):
        assert resolve_duration(START, at(11), 1) == 1
        assert resolve_duration(START, at(11), 1440) == 1440
