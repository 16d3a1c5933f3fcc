"""Error taxonomy for the prediction core and the live refresh scheduler."""
from typing import Optional


class StatMindError(Exception):
    """Base class for all service errors."""


class InvalidWeights(StatMindError, ValueError):
    """Weight set is negative, incomplete, or does not sum to 1."""


class InvalidThresholds(StatMindError, ValueError):
    """Confidence thresholds violate 0 < low < high < 0.5."""


class MissingStatField(StatMindError):
    """A team statistic required for scoring is absent.

    Recovered inside the scorer by substituting a default value.
    """

    def __init__(self, team_id: str, field: str):
        self.team_id = team_id
        self.field = field
        super().__init__(f"Missing stat '{field}' for team {team_id}")


class ProviderError(StatMindError):
    """Text-generation provider failed (timeout, network, quota, bad payload)."""

    def __init__(self, message: str, provider: Optional[str] = None, status_code: Optional[int] = None):
        self.provider = provider
        self.status_code = status_code
        super().__init__(message)


class RefreshError(StatMindError):
    """A live data refresh failed. Logged by the scheduler, never fatal."""
