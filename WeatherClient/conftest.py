"""Shared pytest fixtures."""
from datetime import datetime, timedelta, timezone

import pytest


class FakeClock:
    """Manually advanced clock so cache expiry can be tested without sleeping."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()
