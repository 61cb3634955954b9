"""Settable clock for driving RewardState through calendar days."""

from __future__ import annotations

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

TEST_TZ = ZoneInfo("UTC")
TEST_START = datetime(2025, 1, 15, 12, 0, 0, tzinfo=TEST_TZ)  # a Wednesday


class FakeClock:
    """Callable returning a fixed, advanceable local datetime."""

    def __init__(self, now: datetime = TEST_START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        """Move the clock forward (timedelta keyword arguments)."""
        self.now += timedelta(**kwargs)
