"""Confidence tiers from the distance between a probability and a coin flip."""
from dataclasses import dataclass
from enum import Enum

from statmind.errors import InvalidThresholds


class ConfidenceTier(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        return _TIER_RANK[self]

    def __lt__(self, other):
        if not isinstance(other, ConfidenceTier):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, ConfidenceTier):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, ConfidenceTier):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, ConfidenceTier):
            return NotImplemented
        return self.rank >= other.rank


_TIER_RANK = {ConfidenceTier.LOW: 0, ConfidenceTier.MEDIUM: 1, ConfidenceTier.HIGH: 2}


@dataclass(frozen=True)
class ConfidenceThresholds:
    """Margin cut-offs: margin < low -> Low, < high -> Medium, else High."""
    low: float = 0.05
    high: float = 0.15

    def __post_init__(self):
        if not (0 < self.low < self.high < 0.5):
            raise InvalidThresholds(
                f"Thresholds must satisfy 0 < low < high < 0.5, got low={self.low}, high={self.high}"
            )


class ConfidenceClassifier:
    """Maps |p - 0.5| onto Low / Medium / High."""

    def __init__(self, thresholds: ConfidenceThresholds = ConfidenceThresholds()):
        if not isinstance(thresholds, ConfidenceThresholds):
            raise InvalidThresholds(f"Expected ConfidenceThresholds, got {type(thresholds).__name__}")
        self.thresholds = thresholds

    @staticmethod
    def margin(probability: float) -> float:
        return abs(probability - 0.5)

    def classify(self, probability: float) -> ConfidenceTier:
        margin = self.margin(probability)
        if margin < self.thresholds.low:
            return ConfidenceTier.LOW
        if margin < self.thresholds.high:
            return ConfidenceTier.MEDIUM
        return ConfidenceTier.HIGH
