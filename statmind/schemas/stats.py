"""Team statistics snapshot used as scoring input."""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from statmind.errors import MissingStatField


class TeamStats(BaseModel):
    """Season statistics for one team, as of the moment a prediction is made.

    Every numeric field is optional. The scorer substitutes a default for any
    missing value and records which fields were defaulted.
    """
    team_id: str
    rating: Optional[float] = None
    wins: Optional[int] = Field(default=None, ge=0)
    losses: Optional[int] = Field(default=None, ge=0)
    home_wins: Optional[int] = Field(default=None, ge=0)
    home_losses: Optional[int] = Field(default=None, ge=0)
    away_wins: Optional[int] = Field(default=None, ge=0)
    away_losses: Optional[int] = Field(default=None, ge=0)
    offensive_rating: Optional[float] = None
    defensive_rating: Optional[float] = None
    points_for_per_game: Optional[float] = Field(default=None, ge=0)
    points_against_per_game: Optional[float] = Field(default=None, ge=0)

    model_config = ConfigDict(frozen=True)

    def require(self, field: str) -> float:
        """Return a numeric stat, raising MissingStatField when it is absent."""
        value = getattr(self, field)
        if value is None:
            raise MissingStatField(self.team_id, field)
        return value

    def record(self) -> str:
        """Win-loss record, e.g. '9-4'. Missing counts show as 0."""
        return f"{self.wins or 0}-{self.losses or 0}"

    def home_record(self) -> str:
        return f"{self.home_wins or 0}-{self.home_losses or 0}"

    def away_record(self) -> str:
        return f"{self.away_wins or 0}-{self.away_losses or 0}"
