from datetime import datetime, timezone
from typing import Callable, Iterable, List, Mapping, Optional, Tuple, Union

from statmind.adapters.base import ProviderRegistry, ReasoningProvider
from statmind.config import Settings
from statmind.models.aggregator import PredictionAggregator, WeightSet
from statmind.models.components import ComponentScorer
from statmind.models.confidence import ConfidenceClassifier, ConfidenceThresholds
from statmind.models.reasoning import ReasoningContext, ReasoningGenerator
from statmind.schemas.prediction import Prediction
from statmind.schemas.stats import TeamStats
from statmind.app_logging import get_logger

logger = get_logger(__name__)

WeightsLike = Union[WeightSet, Mapping[str, float]]


def build_reasoning_provider(settings: Settings) -> Optional[ReasoningProvider]:
    """Create the configured reasoning provider, or None to bypass it."""
    name = (settings.REASONING_PROVIDER or "none").lower()
    if name == "none":
        return None
    if name == "anthropic":
        if not settings.ANTHROPIC_API_KEY:
            logger.info("ANTHROPIC_API_KEY not set - reasoning will use the template fallback")
            return None
        return ProviderRegistry.get_adapter(
            "anthropic",
            api_key=settings.ANTHROPIC_API_KEY,
            timeout=settings.REASONING_TIMEOUT_SECONDS,
            model=settings.REASONING_MODEL,
            max_tokens=settings.REASONING_MAX_TOKENS,
            temperature=settings.REASONING_TEMPERATURE,
            base_url=settings.ANTHROPIC_API_URL,
        )
    return ProviderRegistry.get_adapter(name, timeout=settings.REASONING_TIMEOUT_SECONDS)


class PredictionEngine:
    """
    Scores a matchup end to end.

    Pipeline: component scores -> weighted probability -> confidence tier ->
    reasoning text. The default WeightSet is fixed at construction and shared
    by every prediction this engine makes, so a run's predictions stay
    comparable.
    """

    def __init__(
        self,
        weights: WeightSet,
        scorer: Optional[ComponentScorer] = None,
        aggregator: Optional[PredictionAggregator] = None,
        classifier: Optional[ConfidenceClassifier] = None,
        reasoning: Optional[ReasoningGenerator] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not isinstance(weights, WeightSet):
            weights = WeightSet.from_mapping(weights)
        self.weights = weights
        self.scorer = scorer or ComponentScorer()
        self.aggregator = aggregator or PredictionAggregator()
        self.classifier = classifier or ConfidenceClassifier()
        self.reasoning = reasoning or ReasoningGenerator()
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    @classmethod
    def from_settings(cls, settings: Settings, provider: Optional[ReasoningProvider] = None) -> "PredictionEngine":
        """Build an engine from configuration. Raises InvalidWeights/InvalidThresholds."""
        if provider is None:
            provider = build_reasoning_provider(settings)
        return cls(
            weights=WeightSet.from_mapping(settings.PREDICTION_WEIGHTS),
            scorer=ComponentScorer(missing_stat_default=settings.MISSING_STAT_DEFAULT),
            aggregator=PredictionAggregator(scale=settings.PROBABILITY_SCALE),
            classifier=ConfidenceClassifier(ConfidenceThresholds(
                low=settings.CONFIDENCE_LOW_MARGIN,
                high=settings.CONFIDENCE_HIGH_MARGIN,
            )),
            reasoning=ReasoningGenerator(provider),
        )

    def resolve_weights(self, weights: Optional[WeightsLike] = None) -> WeightSet:
        if weights is None:
            return self.weights
        if isinstance(weights, WeightSet):
            return weights
        return WeightSet.from_mapping(weights)

    def predict(
        self,
        home: TeamStats,
        away: TeamStats,
        weights: Optional[WeightsLike] = None,
        use_provider: bool = True,
    ) -> Prediction:
        weight_set = self.resolve_weights(weights)

        breakdown = self.scorer.score(home, away)
        result = self.aggregator.aggregate(breakdown, weight_set)
        tier = self.classifier.classify(result.home_win_probability)
        winner = home.team_id if result.home_favored else away.team_id

        context = ReasoningContext(
            home=home,
            away=away,
            breakdown=breakdown,
            home_win_probability=result.home_win_probability,
            predicted_winner=winner,
            confidence=tier,
        )
        reasoning = self.reasoning.generate(context, use_provider=use_provider)

        prediction = Prediction(
            home_team_id=home.team_id,
            away_team_id=away.team_id,
            home_win_probability=result.home_win_probability,
            away_win_probability=result.away_win_probability,
            predicted_winner=winner,
            confidence=tier.value,
            reasoning=reasoning.text,
            reasoning_source=reasoning.source,
            rating_differential_score=breakdown.rating_differential,
            season_performance_score=breakdown.season_performance,
            situational_score=breakdown.situational,
            matchup_score=breakdown.matchup,
            recent_form_score=breakdown.recent_form,
            defaulted_fields=list(breakdown.defaulted_fields),
            generated_at=self.clock(),
        )

        logger.info(
            f"{context.matchup}: {winner} "
            f"(home {result.home_win_probability:.1%}, {tier.value} confidence, {reasoning.source} reasoning)",
            extra={"matchup": context.matchup},
        )
        return prediction

    def predict_many(
        self,
        matchups: Iterable[Tuple[TeamStats, TeamStats]],
        weights: Optional[WeightsLike] = None,
        use_provider: bool = True,
    ) -> List[Prediction]:
        """Score a run of matchups with one shared weight set."""
        weight_set = self.resolve_weights(weights)
        predictions = [
            self.predict(home, away, weights=weight_set, use_provider=use_provider)
            for home, away in matchups
        ]
        logger.info(f"Generated {len(predictions)} predictions")
        return predictions
