"""Weighted aggregation of component scores into a win probability."""
import math
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

import numpy as np

from statmind.errors import InvalidWeights
from statmind.models.components import COMPONENT_NAMES, ComponentBreakdown
from statmind.app_logging import get_logger

logger = get_logger(__name__)

WEIGHT_TOLERANCE = 1e-6
DEFAULT_PROBABILITY_SCALE = 15.0


@dataclass(frozen=True)
class WeightSet:
    """Proportional importance of each component. Must sum to 1."""
    rating_differential: float
    season_performance: float
    situational: float
    matchup: float
    recent_form: float

    def __post_init__(self):
        self.validate()

    @classmethod
    def from_mapping(cls, weights: Mapping[str, float]) -> "WeightSet":
        unknown = sorted(set(weights) - set(COMPONENT_NAMES))
        missing = [name for name in COMPONENT_NAMES if name not in weights]
        if unknown:
            raise InvalidWeights(f"Unknown components in weight set: {unknown}")
        if missing:
            raise InvalidWeights(f"Weight set is missing components: {missing}")
        try:
            values = {name: float(weights[name]) for name in COMPONENT_NAMES}
        except (TypeError, ValueError) as e:
            raise InvalidWeights(f"Weights must be numeric: {e}") from e
        return cls(**values)

    def validate(self) -> None:
        values = self.as_vector()
        if not np.all(np.isfinite(values)):
            raise InvalidWeights(f"Weights must be finite: {self.as_dict()}")
        negative = [name for name, w in self.as_dict().items() if w < 0]
        if negative:
            raise InvalidWeights(f"Weights must be non-negative, got negative {negative}")
        total = float(np.sum(values))
        if abs(total - 1.0) > WEIGHT_TOLERANCE:
            raise InvalidWeights(f"Weights must sum to 1.0 (+/-{WEIGHT_TOLERANCE}), got {total:.8f}")

    def as_vector(self) -> np.ndarray:
        return np.array([getattr(self, name) for name in COMPONENT_NAMES], dtype=np.float64)

    def as_dict(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in COMPONENT_NAMES}


def logistic(x: float) -> float:
    """Numerically stable 1 / (1 + e^-x). logistic(0) == 0.5 exactly."""
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    z = math.exp(x)
    return z / (1.0 + z)


@dataclass(frozen=True)
class AggregateResult:
    weighted_sum: float
    home_win_probability: float
    home_favored: bool

    @property
    def away_win_probability(self) -> float:
        return 1.0 - self.home_win_probability


class PredictionAggregator:
    """
    Combines component scores into a home win probability.

    probability = logistic(sum(weight_i * score_i) / scale)

    The scale (default 15) maps the typical weighted range of about -30..+30
    onto a useful probability curve. A weighted sum of exactly zero gives
    p = 0.5 and the home team is the predicted winner.
    """

    def __init__(self, scale: float = DEFAULT_PROBABILITY_SCALE):
        if not scale > 0:
            raise ValueError(f"Probability scale must be positive, got {scale}")
        self.scale = scale

    def weighted_sum(self, breakdown: ComponentBreakdown, weights: WeightSet) -> float:
        scores = np.array([score.value for score in breakdown], dtype=np.float64)
        return float(np.dot(weights.as_vector(), scores))

    def aggregate(self, breakdown: ComponentBreakdown, weights: Optional[WeightSet]) -> AggregateResult:
        if not isinstance(weights, WeightSet):
            raise InvalidWeights(f"Expected a WeightSet, got {type(weights).__name__}")
        weights.validate()

        total = self.weighted_sum(breakdown, weights)
        probability = min(1.0, max(0.0, logistic(total / self.scale)))

        # Ties (p == 0.5) go to the home team
        home_favored = probability >= 0.5
        return AggregateResult(
            weighted_sum=total,
            home_win_probability=probability,
            home_favored=home_favored,
        )
