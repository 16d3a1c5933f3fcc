"""Provider data transfer objects."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class LiveGameDTO(BaseModel):
    """Live game state from the scoreboard provider."""
    external_id: str
    home_team: str
    away_team: str
    kickoff_time: Optional[datetime] = None
    state: str = "pre"  # pre, in, post
    status_detail: Optional[str] = None
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    is_final: bool = False

    @property
    def is_live(self) -> bool:
        """Has scores but is not final."""
        return self.home_score is not None and self.away_score is not None and not self.is_final
