"""Batch prediction jobs."""
from typing import Dict, List, Optional
from datetime import datetime, timezone

from pydantic import ValidationError
from rq import get_current_job

from statmind.config import settings
from statmind.models.engine import PredictionEngine
from statmind.schemas.stats import TeamStats
from statmind.app_logging import get_logger

logger = get_logger(__name__)


def job_generate_predictions(
    matchups: List[Dict],
    weights: Optional[Dict[str, float]] = None,
    use_provider: bool = False,
    engine: Optional[PredictionEngine] = None,
) -> dict:
    """
    Score a run of matchups with one shared weight set.

    Each matchup is {"home": {...TeamStats...}, "away": {...TeamStats...}}.
    Bad matchups are reported in `errors` and do not stop the run; bad
    weights raise InvalidWeights before anything is scored.
    """
    engine = engine or PredictionEngine.from_settings(settings)
    weight_set = engine.resolve_weights(weights)
    job = get_current_job()
    log_extra = {"job_id": job.id if job else None}
    logger.info(f"Generating predictions for {len(matchups)} matchups", extra=log_extra)

    results = {
        'predictions': [],
        'errors': [],
        'weights': weight_set.as_dict(),
        'timestamp': datetime.now(timezone.utc).isoformat()
    }

    for i, matchup in enumerate(matchups):
        try:
            home = TeamStats.model_validate(matchup['home'])
            away = TeamStats.model_validate(matchup['away'])
        except (KeyError, TypeError, ValidationError) as e:
            logger.error(f"Skipping matchup {i}: invalid team stats: {e}", extra=log_extra)
            results['errors'].append({'index': i, 'error': str(e)})
            continue

        prediction = engine.predict(home, away, weights=weight_set, use_provider=use_provider)
        results['predictions'].append(prediction.model_dump(mode='json'))

    logger.info(
        f"Generated {len(results['predictions'])} predictions successfully, "
        f"{len(results['errors'])} skipped"
    )
    return results
