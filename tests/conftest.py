"""
Pytest Configuration and Shared Fixtures
=========================================
"""

import asyncio
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from statmind.models.aggregator import WeightSet
from statmind.scheduler.timers import Clock, TimerFactory, TimerHandle
from statmind.schemas.stats import TeamStats

EASTERN = ZoneInfo("America/New_York")

# Sunday 2025-10-19 15:00 ET (inside the default Sunday window)
SUNDAY_AFTERNOON = datetime(2025, 10, 19, 15, 0, tzinfo=EASTERN)
# Tuesday 2025-10-21 10:00 ET (outside every default window)
TUESDAY_MORNING = datetime(2025, 10, 21, 10, 0, tzinfo=EASTERN)


BASE_STATS = dict(
    rating=1500.0,
    wins=6,
    losses=4,
    home_wins=3,
    home_losses=2,
    away_wins=3,
    away_losses=2,
    offensive_rating=60.0,
    defensive_rating=55.0,
    points_for_per_game=24.0,
    points_against_per_game=20.0,
)


@pytest.fixture
def make_team():
    """Factory for TeamStats with sensible, identical defaults."""
    def _make(team_id: str, **overrides) -> TeamStats:
        stats = dict(BASE_STATS)
        stats.update(overrides)
        return TeamStats(team_id=team_id, **stats)
    return _make


@pytest.fixture
def default_weights() -> WeightSet:
    return WeightSet(
        rating_differential=0.35,
        season_performance=0.15,
        situational=0.25,
        matchup=0.20,
        recent_form=0.05,
    )


class FakeClock(Clock):
    """Clock frozen at a settable moment."""

    def __init__(self, moment: datetime = SUNDAY_AFTERNOON):
        self.moment = moment

    def now(self) -> datetime:
        return self.moment


class FakeTimerHandle(TimerHandle):
    def __init__(self, interval: float, callback):
        self.interval = interval
        self.callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class FakeTimers(TimerFactory):
    """Records timers; tests fire them by hand."""

    def __init__(self):
        self.handles = []

    def every(self, interval_seconds, callback) -> FakeTimerHandle:
        handle = FakeTimerHandle(interval_seconds, callback)
        self.handles.append(handle)
        return handle

    def active(self, interval=None):
        return [
            h for h in self.handles
            if not h.cancelled and (interval is None or h.interval == interval)
        ]

    def fire(self, interval) -> int:
        """Fire every live timer with the given interval. Returns how many fired."""
        fired = 0
        for handle in self.active(interval):
            handle.callback()
            fired += 1
        return fired


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def fake_timers():
    return FakeTimers()


class RefreshRecorder:
    """Async refresh callable that counts calls and can block or fail on demand."""

    def __init__(self):
        self.calls = 0
        self.running = 0
        self.max_running = 0
        self.gate = None
        self.error = None

    def block(self):
        self.gate = asyncio.Event()
        return self.gate

    async def __call__(self):
        self.calls += 1
        self.running += 1
        self.max_running = max(self.max_running, self.running)
        try:
            if self.gate is not None:
                await self.gate.wait()
            if self.error is not None:
                raise self.error
        finally:
            self.running -= 1


@pytest.fixture
def refresh_recorder():
    return RefreshRecorder()
