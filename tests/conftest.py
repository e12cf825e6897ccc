"""Pytest configuration and fixtures."""

from datetime import timedelta

import pytest

from aksk.common.settings import Settings
from aksk.core.auth import Auth

NOW = 1_700_000_000


class FakeClock:
    """Settable clock returning whole seconds."""

    def __init__(self, now: float = NOW) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Clock fixed at NOW."""
    return FakeClock()


@pytest.fixture
def auth(clock: FakeClock) -> Auth:
    """Base64 / SHA-256 auth with a 30 second window on a fixed clock."""
    return Auth(acceptable_skew=timedelta(seconds=30), clock=clock)


@pytest.fixture
def credentials() -> dict[str, str]:
    """Access key -> secret key map."""
    return {"123": "456"}


@pytest.fixture
def settings(credentials: dict[str, str]) -> Settings:
    """Create test settings."""
    return Settings(
        credentials=credentials,
        acceptable_skew_seconds=60,
        replay_protection_enabled=False,
        log_level="WARNING",
    )
