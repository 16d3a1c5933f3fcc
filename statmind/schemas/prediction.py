"""Prediction request/response schemas."""
from datetime import datetime
from typing import Dict, List, Optional, Literal
from pydantic import BaseModel, ConfigDict, Field

from statmind.schemas.stats import TeamStats


class Prediction(BaseModel):
    """One scored matchup. Immutable; re-predicting creates a new record."""
    home_team_id: str
    away_team_id: str
    home_win_probability: float = Field(ge=0.0, le=1.0)
    away_win_probability: float = Field(ge=0.0, le=1.0)
    predicted_winner: str
    confidence: Literal["Low", "Medium", "High"]
    reasoning: str
    reasoning_source: Literal["provider", "fallback"]

    # Component breakdown, flattened
    rating_differential_score: float
    season_performance_score: float
    situational_score: float
    matchup_score: float
    recent_form_score: float

    defaulted_fields: List[str] = Field(default_factory=list)
    generated_at: datetime

    model_config = ConfigDict(frozen=True)


class PredictionRequest(BaseModel):
    """Score a single matchup, optionally with a weight override."""
    home: TeamStats
    away: TeamStats
    weights: Optional[Dict[str, float]] = None
    use_provider: bool = True


class MatchupInput(BaseModel):
    home: TeamStats
    away: TeamStats


class BatchPredictionRequest(BaseModel):
    """Score many matchups in one run with a single shared weight set."""
    matchups: List[MatchupInput] = Field(..., min_length=1)
    weights: Optional[Dict[str, float]] = None
    use_provider: bool = False
