"""Live data refresh scheduling."""
from statmind.scheduler.polling import (
    AdaptivePollingScheduler, PollingConfig, RefreshSnapshot, SchedulerState,
)
from statmind.scheduler.timers import AsyncioTimerFactory, Clock, SystemClock, TimerFactory, TimerHandle
from statmind.scheduler.windows import RefreshWindow

__all__ = [
    'AdaptivePollingScheduler', 'PollingConfig', 'RefreshSnapshot', 'SchedulerState',
    'AsyncioTimerFactory', 'Clock', 'SystemClock', 'TimerFactory', 'TimerHandle',
    'RefreshWindow',
]
