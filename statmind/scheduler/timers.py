"""Clock and timer abstractions used by the polling scheduler."""
import asyncio
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Optional
from zoneinfo import ZoneInfo


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime:
        """Current time, timezone-aware."""
        pass


class SystemClock(Clock):
    """Wall clock in a fixed timezone (refresh windows are local game times)."""

    def __init__(self, tz: str = "America/New_York"):
        self.tz = ZoneInfo(tz)

    def now(self) -> datetime:
        return datetime.now(self.tz)


class TimerHandle(ABC):
    @abstractmethod
    def cancel(self) -> None:
        """Cancel the timer. A cancelled timer never fires again."""
        pass

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        pass


class TimerFactory(ABC):
    @abstractmethod
    def every(self, interval_seconds: float, callback: Callable[[], None]) -> TimerHandle:
        """Call `callback` every `interval_seconds` until cancelled."""
        pass


class _AsyncioRepeatingTimer(TimerHandle):
    def __init__(self, loop: asyncio.AbstractEventLoop, interval: float, callback: Callable[[], None]):
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._cancelled = False
        self._handle: Optional[asyncio.TimerHandle] = loop.call_later(interval, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        self._handle = self._loop.call_later(self._interval, self._fire)
        self._callback()

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class AsyncioTimerFactory(TimerFactory):
    """Repeating timers on the running asyncio event loop."""

    def every(self, interval_seconds: float, callback: Callable[[], None]) -> TimerHandle:
        loop = asyncio.get_running_loop()
        return _AsyncioRepeatingTimer(loop, interval_seconds, callback)
