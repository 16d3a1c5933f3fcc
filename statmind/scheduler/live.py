"""Server-side live scoreboard polling."""
import asyncio
from typing import Optional, Set

from statmind.adapters.scoreboard_adapter import LiveScoreboard, ScoreboardAdapter
from statmind.config import Settings
from statmind.scheduler.polling import AdaptivePollingScheduler, PollingConfig, RefreshSnapshot, SchedulerState
from statmind.scheduler.timers import AsyncioTimerFactory, Clock, SystemClock, TimerFactory, TimerHandle
from statmind.app_logging import get_logger

logger = get_logger(__name__)

DEFAULT_WATCH_INTERVAL_SECONDS = 900.0


class LiveScoreService:
    """Wires the ESPN scoreboard into the adaptive polling scheduler.

    The scoreboard fetch is blocking (requests), so it runs in a worker
    thread. The last fetched board answers the liveness check.

    A slow watcher timer calls start() while the scheduler is stopped, so
    polling picks up again when a window opens or a game goes live outside
    one after an auto-stop.
    """

    def __init__(
        self,
        board: LiveScoreboard,
        config: PollingConfig,
        clock: Optional[Clock] = None,
        timers: Optional[TimerFactory] = None,
        watch_interval_seconds: float = DEFAULT_WATCH_INTERVAL_SECONDS,
    ):
        self.board = board
        self.watch_interval_seconds = watch_interval_seconds
        self._timers = timers or AsyncioTimerFactory()
        self._watch_handle: Optional[TimerHandle] = None
        self._watch_tasks: Set[asyncio.Future] = set()
        if config.liveness_check is None:
            config.liveness_check = self._all_final
        self.scheduler = AdaptivePollingScheduler(self._refresh, config=config, clock=clock, timers=self._timers)

    @classmethod
    def from_settings(cls, settings: Settings) -> "LiveScoreService":
        adapter = ScoreboardAdapter(url=settings.SCOREBOARD_URL, timeout=settings.SCOREBOARD_TIMEOUT_SECONDS)
        logger.info(f"Live polling every {settings.REFRESH_INTERVAL_MS / 1000:g}s from {settings.SCOREBOARD_URL}")
        return cls(
            board=LiveScoreboard(adapter),
            config=PollingConfig.from_settings(settings),
            clock=SystemClock(settings.TZ),
            watch_interval_seconds=settings.LIVE_WATCH_INTERVAL_SECONDS,
        )

    @property
    def is_watching(self) -> bool:
        return self._watch_handle is not None

    def start_watching(self) -> None:
        if self._watch_handle is not None:
            return
        self._watch_handle = self._timers.every(self.watch_interval_seconds, self._on_watch_timer)
        logger.info(f"Watching for game windows every {self.watch_interval_seconds:g}s")

    def stop_watching(self) -> None:
        if self._watch_handle is None:
            return
        self._watch_handle.cancel()
        self._watch_handle = None
        logger.info("Stopped watching for game windows")

    async def watch(self) -> RefreshSnapshot:
        """One watcher pass: try to start polling if the scheduler is stopped."""
        scheduler = self.scheduler
        if scheduler.state is not SchedulerState.STOPPED:
            return scheduler.snapshot()
        if not scheduler.is_game_window():
            # Outside a window the board is the only evidence of live games
            await scheduler.manual_refresh()
        return await scheduler.start()

    def _on_watch_timer(self) -> None:
        task = asyncio.ensure_future(self.watch())
        self._watch_tasks.add(task)
        task.add_done_callback(self._watch_tasks.discard)

    def _all_final(self) -> Optional[bool]:
        if self.board.fetched_at is None:
            return None
        if self.scheduler.state is SchedulerState.ACTIVE:
            # Auto-stop: games not yet kicked off still count as unfinished
            return self.board.all_final()
        # Starting outside a window: only games under way count
        return not self.board.has_live_games()

    async def _refresh(self) -> None:
        await asyncio.to_thread(self.board.refresh)
