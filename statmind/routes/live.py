"""Live score polling control endpoints."""
from typing import Any, Dict
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from statmind.deps import get_live_service
from statmind.scheduler.live import LiveScoreService
from statmind.app_logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


class VisibilityRequest(BaseModel):
    visible: bool


@router.get("/status")
async def get_status(live: LiveScoreService = Depends(get_live_service)) -> Dict[str, Any]:
    """Current refresh state."""
    data = live.scheduler.snapshot().to_dict()
    data["is_watching"] = live.is_watching
    return data


@router.post("/start")
async def start_polling(live: LiveScoreService = Depends(get_live_service)) -> Dict[str, Any]:
    """Enable live polling. Stays enabled across auto-stops until /stop."""
    live.start_watching()
    snapshot = await live.scheduler.start()
    return snapshot.to_dict()


@router.post("/stop")
async def stop_polling(live: LiveScoreService = Depends(get_live_service)) -> Dict[str, Any]:
    live.stop_watching()
    return live.scheduler.stop().to_dict()


@router.post("/pause")
async def toggle_pause(live: LiveScoreService = Depends(get_live_service)) -> Dict[str, Any]:
    """Pause or resume auto-refresh."""
    snapshot = await live.scheduler.toggle_pause()
    return snapshot.to_dict()


@router.post("/refresh")
async def manual_refresh(live: LiveScoreService = Depends(get_live_service)) -> Dict[str, Any]:
    """Refresh now, regardless of window or pause."""
    snapshot = await live.scheduler.manual_refresh()
    return snapshot.to_dict()


@router.post("/visibility")
async def set_visibility(
    request: VisibilityRequest,
    live: LiveScoreService = Depends(get_live_service),
) -> Dict[str, Any]:
    """Report whether any client is currently viewing live data."""
    snapshot = await live.scheduler.set_visibility(request.visible)
    return snapshot.to_dict()


@router.get("/games")
async def get_games(live: LiveScoreService = Depends(get_live_service)) -> Dict[str, Any]:
    """Games from the most recent scoreboard refresh."""
    board = live.board
    return {
        "fetched_at": board.fetched_at.isoformat() if board.fetched_at else None,
        "has_live_games": board.has_live_games(),
        "all_final": board.all_final(),
        "games": [game.model_dump(mode="json") for game in board.games],
    }
