"""Request timestamp freshness check."""

from __future__ import annotations

import re
import time
from collections.abc import Callable
from datetime import timedelta

from aksk.common.errors import TimestampEmpty, TimestampExpired, TimestampInvalid

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def parse_unix_seconds(value: str) -> int:
    """Parse a signed base-10 int64 string, rejecting anything else."""
    if not _INT_RE.fullmatch(value):
        raise TimestampInvalid()
    parsed = int(value)
    if not _INT64_MIN <= parsed <= _INT64_MAX:
        raise TimestampInvalid()
    return parsed


class TimestampValidator:
    """Accepts timestamps within +/- acceptable_skew of the local clock."""

    __slots__ = ("_skew", "_clock")

    def __init__(
        self,
        acceptable_skew: timedelta | float = timedelta(seconds=60),
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not isinstance(acceptable_skew, timedelta):
            acceptable_skew = timedelta(seconds=acceptable_skew)
        if acceptable_skew < timedelta(0):
            raise ValueError("acceptable_skew must not be negative")
        self._skew = acceptable_skew
        self._clock = clock

    @property
    def acceptable_skew(self) -> timedelta:
        return self._skew

    def now(self) -> int:
        """Current Unix time in whole seconds."""
        return int(self._clock())

    def check(self, timestamp: str) -> None:
        """
        Validate a Unix-seconds timestamp string.

        Raises:
            TimestampEmpty: timestamp is ""
            TimestampInvalid: not an integer, or too far in the future
            TimestampExpired: older than the skew window
        """
        if not timestamp:
            raise TimestampEmpty()
        parsed = parse_unix_seconds(timestamp)

        # whole seconds as ints; timedelta overflows near the int64 bounds
        delta = self.now() - parsed
        window = self._skew.total_seconds()
        if delta > window:
            raise TimestampExpired()
        if delta < -window:
            raise TimestampInvalid()
