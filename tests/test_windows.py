"""
Tests for statmind/scheduler/windows.py and timers.py
=====================================================
"""

import asyncio
from datetime import datetime

import pytest

from statmind.scheduler.timers import AsyncioTimerFactory, SystemClock
from statmind.scheduler.windows import RefreshWindow

from tests.conftest import EASTERN, SUNDAY_AFTERNOON, TUESDAY_MORNING


def _at(day, hour, minute=0):
    # October 2025: 13th is a Monday
    return datetime(2025, 10, day, hour, minute, tzinfo=EASTERN)


class TestRefreshWindow:
    def test_default_sunday_afternoon_is_inside(self):
        assert RefreshWindow.default().contains(SUNDAY_AFTERNOON)

    def test_default_tuesday_morning_is_outside(self):
        assert not RefreshWindow.default().contains(TUESDAY_MORNING)

    @pytest.mark.parametrize("moment,expected", [
        (_at(19, 12, 59), False),   # Sunday before kickoff window
        (_at(19, 13, 0), True),     # Sunday window opens
        (_at(19, 23, 59), True),    # Sunday night
        (_at(20, 19, 59), False),   # Monday before window
        (_at(20, 20, 0), True),     # Monday night
        (_at(16, 21, 30), True),    # Thursday night
        (_at(18, 21, 30), False),   # Saturday
    ])
    def test_default_boundaries(self, moment, expected):
        assert RefreshWindow.default().contains(moment) is expected

    def test_end_hour_is_exclusive(self):
        window = RefreshWindow({1: [(9, 11)]})
        assert window.contains(_at(14, 10, 59))
        assert not window.contains(_at(14, 11, 0))

    def test_always_and_never(self):
        assert RefreshWindow.always().contains(TUESDAY_MORNING)
        assert not RefreshWindow.never().contains(SUNDAY_AFTERNOON)

    @pytest.mark.parametrize("ranges", [
        {7: [(0, 24)]},
        {0: [(10, 10)]},
        {0: [(20, 25)]},
        {0: [(-1, 5)]},
    ])
    def test_invalid_ranges_rejected(self, ranges):
        with pytest.raises(ValueError):
            RefreshWindow(ranges)

    def test_describe(self):
        assert RefreshWindow.default().describe() == {
            "Monday": ["20:00-24:00"],
            "Thursday": ["20:00-24:00"],
            "Sunday": ["13:00-24:00"],
        }


class TestSystemClock:
    def test_now_is_timezone_aware(self):
        now = SystemClock("America/New_York").now()
        assert now.tzinfo is not None


class TestAsyncioTimerFactory:
    def test_fires_repeatedly_until_cancelled(self):
        fired = []

        async def run():
            handle = AsyncioTimerFactory().every(0.01, lambda: fired.append(1))
            await asyncio.sleep(0.08)
            handle.cancel()
            count = len(fired)
            await asyncio.sleep(0.05)
            return handle, count

        handle, count_at_cancel = asyncio.run(run())
        assert count_at_cancel >= 2
        assert len(fired) == count_at_cancel
        assert handle.cancelled

    def test_cancel_before_first_fire(self):
        fired = []

        async def run():
            handle = AsyncioTimerFactory().every(0.01, lambda: fired.append(1))
            handle.cancel()
            await asyncio.sleep(0.05)

        asyncio.run(run())
        assert fired == []
