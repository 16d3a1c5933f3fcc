"""
Adaptive polling scheduler for live game data.

States:
- STOPPED: no timers armed.
- ACTIVE:  periodic refresh timer and one-second ticker armed.
- PAUSED:  timers cancelled, history kept; toggle_pause() resumes.

Every refresh trigger (start, timer tick, visibility regain, resume, manual)
goes through one serialized path: while a refresh is outstanding, further
triggers are no-ops.
"""
import asyncio
import inspect
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional, Set, Union

from statmind.config import Settings
from statmind.errors import RefreshError
from statmind.scheduler.timers import AsyncioTimerFactory, Clock, SystemClock, TimerFactory, TimerHandle
from statmind.scheduler.windows import RefreshWindow
from statmind.app_logging import get_logger

logger = get_logger(__name__)

RefreshCallable = Callable[[], Union[Awaitable[Any], Any]]
LivenessCheck = Callable[[], Union[Optional[bool], Awaitable[Optional[bool]]]]

TICKER_INTERVAL_SECONDS = 1.0


class SchedulerState(str, Enum):
    STOPPED = "stopped"
    ACTIVE = "active"
    PAUSED = "paused"


@dataclass
class RefreshState:
    """Mutable scheduler-owned state. Never handed out directly."""
    is_refreshing: bool = False
    is_paused: bool = False
    last_updated: Optional[datetime] = None
    seconds_since_update: int = 0
    is_visible: bool = True


@dataclass(frozen=True)
class RefreshSnapshot:
    """Read-only view of the scheduler for callers and UIs."""
    state: SchedulerState
    is_refreshing: bool
    is_paused: bool
    last_updated: Optional[datetime]
    seconds_since_update: int
    is_game_window: bool
    is_visible: bool

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "is_refreshing": self.is_refreshing,
            "is_paused": self.is_paused,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
            "seconds_since_update": self.seconds_since_update,
            "is_game_window": self.is_game_window,
            "is_visible": self.is_visible,
        }


@dataclass
class PollingConfig:
    interval_ms: int = 60000
    windows: RefreshWindow = field(default_factory=RefreshWindow.default)
    stop_when_all_final: bool = True
    # Returns True when every tracked game is finished, None when unknown
    liveness_check: Optional[LivenessCheck] = None

    def __post_init__(self):
        if self.interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {self.interval_ms}")

    @classmethod
    def from_settings(cls, settings: Settings, liveness_check: Optional[LivenessCheck] = None) -> "PollingConfig":
        return cls(
            interval_ms=settings.REFRESH_INTERVAL_MS,
            windows=RefreshWindow(settings.REFRESH_WINDOWS),
            stop_when_all_final=settings.REFRESH_STOP_WHEN_ALL_FINAL,
            liveness_check=liveness_check,
        )


class AdaptivePollingScheduler:
    """
    Keeps live data fresh only while it matters.

    Starts only inside a refresh window or while the liveness check reports
    unfinished games. Refreshes only when active, unpaused and visible.
    Stops itself once everything is final.

    Must be driven from a single asyncio event loop.
    """

    def __init__(
        self,
        refresh: RefreshCallable,
        config: Optional[PollingConfig] = None,
        clock: Optional[Clock] = None,
        timers: Optional[TimerFactory] = None,
    ):
        self._refresh = refresh
        self.config = config or PollingConfig()
        self._clock = clock or SystemClock()
        self._timers = timers or AsyncioTimerFactory()

        self._state = SchedulerState.STOPPED
        self._refresh_state = RefreshState()
        self._handles: List[TimerHandle] = []
        self._tasks: Set[asyncio.Future] = set()
        # Bumped on stop(); in-flight refreshes from an older generation are discarded
        self._generation = 0
        # Outlives stop(): an old call still running blocks new refreshes until it returns
        self._in_flight = False

    @property
    def state(self) -> SchedulerState:
        return self._state

    def is_game_window(self) -> bool:
        return self.config.windows.contains(self._clock.now())

    def snapshot(self) -> RefreshSnapshot:
        rs = self._refresh_state
        return RefreshSnapshot(
            state=self._state,
            is_refreshing=rs.is_refreshing,
            is_paused=rs.is_paused,
            last_updated=rs.last_updated,
            seconds_since_update=rs.seconds_since_update,
            is_game_window=self.is_game_window(),
            is_visible=rs.is_visible,
        )

    # Operations

    async def start(self) -> RefreshSnapshot:
        if self._state is not SchedulerState.STOPPED:
            logger.debug(f"start() ignored - scheduler is {self._state.value}")
            return self.snapshot()

        generation = self._generation
        may_run = await self._may_run()
        if generation != self._generation or self._state is not SchedulerState.STOPPED:
            logger.debug("start() superseded while checking for live games")
            return self.snapshot()
        if not may_run:
            logger.info("Outside refresh window and no live games - auto-refresh not started")
            return self.snapshot()

        self._state = SchedulerState.ACTIVE
        self._arm_timers()
        logger.info(f"Starting auto-refresh ({self.config.interval_ms / 1000:g}s intervals)")
        await self._perform_refresh("start")
        return self.snapshot()

    def stop(self) -> RefreshSnapshot:
        """Stop from any state. Cancels timers and resets refresh state.

        A refresh already running is not cancelled: its result is discarded and
        no new refresh starts until it returns.
        """
        self._cancel_timers()
        self._generation += 1
        previous = self._state
        self._state = SchedulerState.STOPPED
        # Visibility belongs to the viewing surface, so it survives the reset
        self._refresh_state = RefreshState(is_visible=self._refresh_state.is_visible)
        if previous is not SchedulerState.STOPPED:
            logger.info(f"Auto-refresh stopped (was {previous.value})", extra={"scheduler_state": previous.value})
        return self.snapshot()

    async def tick(self) -> RefreshSnapshot:
        """One periodic timer tick."""
        rs = self._refresh_state
        if self._state is not SchedulerState.ACTIVE or rs.is_paused:
            return self.snapshot()
        if not rs.is_visible:
            logger.debug("Refresh skipped - surface not visible")
            return self.snapshot()
        if rs.is_refreshing or self._in_flight:
            logger.debug("Refresh skipped - previous refresh still in flight")
            return self.snapshot()

        generation = self._generation
        await self._perform_refresh("tick")

        if generation != self._generation or self._state is not SchedulerState.ACTIVE:
            return self.snapshot()
        if not self.config.stop_when_all_final:
            return self.snapshot()
        all_final = await self._check_all_final()
        if all_final is True and generation == self._generation:
            logger.info("All games final - stopping auto-refresh")
            self.stop()
        return self.snapshot()

    async def toggle_pause(self) -> RefreshSnapshot:
        if self._state is SchedulerState.ACTIVE:
            self._cancel_timers()
            self._state = SchedulerState.PAUSED
            self._refresh_state.is_paused = True
            logger.info("Auto-refresh paused")
            return self.snapshot()

        if self._state is SchedulerState.PAUSED:
            generation = self._generation
            may_run = await self._may_run()
            if generation != self._generation or self._state is not SchedulerState.PAUSED:
                logger.debug("Resume superseded while checking for live games")
                return self.snapshot()
            self._refresh_state.is_paused = False
            if may_run:
                self._state = SchedulerState.ACTIVE
                self._arm_timers()
                logger.info("Auto-refresh resumed")
                await self._perform_refresh("resume")
            else:
                logger.info("Resumed outside refresh window with no live games - stopping")
                self.stop()
            return self.snapshot()

        logger.debug("toggle_pause() ignored - scheduler is stopped")
        return self.snapshot()

    async def set_visibility(self, visible: bool) -> RefreshSnapshot:
        rs = self._refresh_state
        regained = visible and not rs.is_visible
        rs.is_visible = visible
        if not visible:
            logger.debug("Surface hidden - periodic refresh suspended")
        elif regained and self._state is SchedulerState.ACTIVE and not rs.is_paused:
            logger.debug("Surface visible again - refreshing now")
            await self._perform_refresh("visibility")
        return self.snapshot()

    async def manual_refresh(self) -> RefreshSnapshot:
        """Refresh now, regardless of window or pause. Does not change state."""
        await self._perform_refresh("manual")
        return self.snapshot()

    # Internals

    async def _perform_refresh(self, source: str) -> bool:
        rs = self._refresh_state
        if rs.is_refreshing or self._in_flight:
            logger.debug(f"{source} refresh skipped - previous refresh still in flight")
            return False

        generation = self._generation
        rs.is_refreshing = True
        self._in_flight = True
        succeeded = False
        try:
            result = self._refresh()
            if inspect.isawaitable(result):
                await result
            succeeded = True
        except Exception as e:
            error = e if isinstance(e, RefreshError) else RefreshError(f"{type(e).__name__}: {e}")
            logger.error(f"Auto-refresh error ({source}): {error}", extra={"refresh_source": source})
        finally:
            self._in_flight = False
            if generation == self._generation:
                rs.is_refreshing = False
                if succeeded:
                    rs.last_updated = self._clock.now()
                    rs.seconds_since_update = 0

        if generation != self._generation:
            logger.debug(f"{source} refresh finished after stop - result discarded")
            return False
        return succeeded

    async def _check_all_final(self) -> Optional[bool]:
        """Liveness check result, or None when there is no check or it failed."""
        check = self.config.liveness_check
        if check is None:
            return None
        try:
            result = check()
            if inspect.isawaitable(result):
                result = await result
            return None if result is None else bool(result)
        except Exception as e:
            logger.error(f"Error checking if all games are final: {e}")
            return None

    async def _may_run(self) -> bool:
        if self.is_game_window():
            return True
        return await self._check_all_final() is False

    def _arm_timers(self) -> None:
        self._cancel_timers()
        self._handles = [
            self._timers.every(self.config.interval_ms / 1000, self._on_refresh_timer),
            self._timers.every(TICKER_INTERVAL_SECONDS, self._on_second),
        ]

    def _cancel_timers(self) -> None:
        for handle in self._handles:
            handle.cancel()
        self._handles = []

    def _on_refresh_timer(self) -> None:
        task = asyncio.ensure_future(self.tick())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _on_second(self) -> None:
        if self._state is SchedulerState.ACTIVE:
            self._refresh_state.seconds_since_update += 1
