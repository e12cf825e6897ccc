"""Tests for the timestamp freshness window."""

import time
from datetime import timedelta

import pytest

from aksk.common.errors import TimestampEmpty, TimestampExpired, TimestampInvalid
from aksk.core.timestamp import TimestampValidator

NOW = 1_700_000_000


@pytest.fixture
def validator(clock) -> TimestampValidator:
    assert clock.now == NOW
    return TimestampValidator(timedelta(seconds=30), clock=clock)


class TestWindow:
    """Boundary behavior with a 30 second window."""

    def test_now(self, validator):
        validator.check(str(NOW))

    def test_past_boundary_accepted(self, validator):
        """Exactly window seconds old is accepted."""
        validator.check(str(NOW - 30))

    def test_past_beyond_boundary_expired(self, validator):
        with pytest.raises(TimestampExpired):
            validator.check(str(NOW - 31))

    def test_future_boundary_accepted(self, validator):
        """Exactly window seconds ahead is accepted."""
        validator.check(str(NOW + 30))

    def test_future_beyond_boundary_invalid(self, validator):
        with pytest.raises(TimestampInvalid):
            validator.check(str(NOW + 31))

    def test_fractional_clock_truncated(self, clock, validator):
        """The clock is compared in whole seconds."""
        clock.now = NOW + 0.9
        validator.check(str(NOW - 30))

    def test_zero_window(self, clock):
        """A zero window accepts only the current second."""
        validator = TimestampValidator(0, clock=clock)
        validator.check(str(NOW))
        with pytest.raises(TimestampExpired):
            validator.check(str(NOW - 1))

    def test_real_clock(self):
        """Default clock accepts the current time."""
        TimestampValidator().check(str(int(time.time())))


class TestParsing:
    """Malformed timestamps."""

    def test_empty(self, validator):
        with pytest.raises(TimestampEmpty):
            validator.check("")

    @pytest.mark.parametrize(
        "value",
        ["1570000a00", "abc", " 1700000000", "1700000000 ", "1_700_000_000", "1.7e9", "99999999999999999999"],
    )
    def test_not_an_integer(self, validator, value):
        with pytest.raises(TimestampInvalid):
            validator.check(value)

    def test_signed_value_parsed(self, validator):
        """A leading sign is part of a valid integer."""
        validator.check(f"+{NOW}")
        with pytest.raises(TimestampExpired):
            validator.check("-1")

    def test_int64_max_is_future(self, validator):
        with pytest.raises(TimestampInvalid):
            validator.check("9223372036854775807")

    def test_int64_min_is_expired(self, validator):
        with pytest.raises(TimestampExpired):
            validator.check("-9223372036854775808")


class TestConstruction:
    """Validator configuration."""

    def test_seconds_accepted(self):
        assert TimestampValidator(45).acceptable_skew == timedelta(seconds=45)

    def test_negative_skew_rejected(self):
        with pytest.raises(ValueError):
            TimestampValidator(timedelta(seconds=-1))
