"""Common dependencies."""
from typing import Optional
from uuid import uuid4
from fastapi import Header

from statmind.config import settings
from statmind.models.engine import PredictionEngine
from statmind.scheduler.live import LiveScoreService

# Singletons (one engine per process keeps a run's weights fixed)
_engine: Optional[PredictionEngine] = None
_live_service: Optional[LiveScoreService] = None


def get_request_id(x_request_id: str | None = Header(None)) -> str:
    """Get or generate request ID."""
    return x_request_id or str(uuid4())


def get_engine() -> PredictionEngine:
    """Prediction engine built from settings."""
    global _engine
    if _engine is None:
        _engine = PredictionEngine.from_settings(settings)
    return _engine


def get_live_service() -> LiveScoreService:
    """Live scoreboard poller built from settings."""
    global _live_service
    if _live_service is None:
        _live_service = LiveScoreService.from_settings(settings)
    return _live_service
