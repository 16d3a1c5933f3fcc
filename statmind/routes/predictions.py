"""
Prediction routes: score a matchup, enqueue a batch run, inspect configuration.
"""
import asyncio
from typing import Any, Dict
from fastapi import APIRouter, Depends, HTTPException

from statmind.deps import get_engine
from statmind.jobs.predictions import job_generate_predictions
from statmind.models.engine import PredictionEngine
from statmind.schemas.prediction import BatchPredictionRequest, Prediction, PredictionRequest
from statmind.app_logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.post("/", response_model=Prediction)
async def create_prediction(
    request: PredictionRequest,
    engine: PredictionEngine = Depends(get_engine),
) -> Prediction:
    """
    Score one matchup.

    Returns the home win probability, predicted winner, confidence tier and
    reasoning. Reasoning falls back to a template when the text provider is
    unavailable; the prediction itself always succeeds for valid input.
    """
    logger.info(f"Predicting {request.away.team_id} @ {request.home.team_id}")
    # Scoring may call out to the text provider, which blocks
    return await asyncio.to_thread(
        engine.predict,
        request.home,
        request.away,
        weights=request.weights,
        use_provider=request.use_provider,
    )


@router.post("/batch")
async def enqueue_batch(
    request: BatchPredictionRequest,
    engine: PredictionEngine = Depends(get_engine),
) -> Dict[str, Any]:
    """Enqueue a batch scoring run that shares one weight set."""
    from statmind.jobs.queue import enqueue_job

    # Validate weights now so configuration errors surface to the caller
    weight_set = engine.resolve_weights(request.weights)

    job = await asyncio.to_thread(
        enqueue_job,
        job_generate_predictions,
        matchups=[m.model_dump() for m in request.matchups],
        weights=weight_set.as_dict(),
        use_provider=request.use_provider,
        job_timeout=600
    )

    return {
        "message": "Prediction job enqueued",
        "job_id": job.id,
        "matchups": len(request.matchups),
        "weights": weight_set.as_dict(),
    }


@router.get("/jobs/{job_id}")
async def get_batch_status(job_id: str):
    """Get status of a batch prediction job."""
    from statmind.jobs.queue import get_job_status

    status = await asyncio.to_thread(get_job_status, job_id)
    if not status:
        raise HTTPException(status_code=404, detail="Job not found")

    return status


@router.get("/config")
async def get_scoring_config(engine: PredictionEngine = Depends(get_engine)) -> Dict[str, Any]:
    """Active weight set, probability scale and confidence thresholds."""
    thresholds = engine.classifier.thresholds
    return {
        "weights": engine.weights.as_dict(),
        "probability_scale": engine.aggregator.scale,
        "missing_stat_default": engine.scorer.missing_stat_default,
        "confidence_thresholds": {
            "low": thresholds.low,
            "high": thresholds.high,
        },
        "reasoning_provider": engine.reasoning.provider.provider_name if engine.reasoning.provider else None,
    }
