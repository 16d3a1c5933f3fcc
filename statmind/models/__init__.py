"""Prediction models: component scoring, aggregation, confidence, reasoning."""
from statmind.models.components import ComponentScorer, ComponentBreakdown, ComponentScore, COMPONENT_NAMES
from statmind.models.aggregator import PredictionAggregator, WeightSet, AggregateResult
from statmind.models.confidence import ConfidenceClassifier, ConfidenceThresholds, ConfidenceTier
from statmind.models.reasoning import ReasoningGenerator, ReasoningContext, ReasoningResult
from statmind.models.engine import PredictionEngine, build_reasoning_provider

__all__ = [
    'ComponentScorer', 'ComponentBreakdown', 'ComponentScore', 'COMPONENT_NAMES',
    'PredictionAggregator', 'WeightSet', 'AggregateResult',
    'ConfidenceClassifier', 'ConfidenceThresholds', 'ConfidenceTier',
    'ReasoningGenerator', 'ReasoningContext', 'ReasoningResult',
    'PredictionEngine', 'build_reasoning_provider',
]
