"""Health check endpoints."""
from datetime import datetime, timezone
from typing import Dict, Any
from fastapi import APIRouter, Depends

from statmind import __version__
from statmind.config import settings
from statmind.deps import get_request_id, get_engine, get_live_service
from statmind.app_logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.get("/ping")
async def ping(request_id: str = Depends(get_request_id)) -> Dict[str, Any]:
    """Simple health check."""
    logger.debug("Health check requested", extra={"request_id": request_id})
    return {
        "status": "ok",
        "message": "StatMind Prediction API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
        "environment": settings.ENVIRONMENT,
    }


@router.get("/health")
async def health(request_id: str = Depends(get_request_id)) -> Dict[str, Any]:
    """Detailed health check."""
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
        "environment": settings.ENVIRONMENT,
        "services": {
            "api": "healthy",
            "prediction_engine": "unknown",
            "reasoning_provider": "unknown",
            "live_polling": "unknown",
        },
    }

    try:
        engine = get_engine()
        health_status["services"]["prediction_engine"] = "healthy"
        provider = engine.reasoning.provider
        health_status["services"]["reasoning_provider"] = (
            provider.provider_name if provider else "fallback-only"
        )
    except Exception as e:
        health_status["services"]["prediction_engine"] = "unhealthy"
        health_status["status"] = "degraded"
        logger.error(f"Prediction engine health check failed: {e}")

    health_status["services"]["live_polling"] = get_live_service().scheduler.state.value

    status_value = health_status["status"]
    logger.info(f"Health check completed - {status_value}", extra={"request_id": request_id})
    return health_status
