"""
ESPN scoreboard adapter - live game state for the refresh scheduler.
"""

import requests
from datetime import datetime
from typing import Dict, List, Optional

from statmind.errors import RefreshError
from statmind.schemas.provider import LiveGameDTO
from statmind.app_logging import get_logger

logger = get_logger(__name__)


class ScoreboardAdapter:
    """
    Reads the public ESPN scoreboard.
    """

    def __init__(
        self,
        url: str = "https://site.api.espn.com/apis/site/v2/sports/football/nfl/scoreboard",
        timeout: float = 10.0,
    ):
        self.url = url
        self.timeout = timeout

    def fetch_games(self) -> List[LiveGameDTO]:
        """Fetch the current scoreboard. Raises RefreshError on any failure."""
        try:
            response = requests.get(self.url, timeout=self.timeout)
        except requests.RequestException as e:
            raise RefreshError(f"Scoreboard request failed: {e}") from e

        if response.status_code != 200:
            raise RefreshError(f"Scoreboard returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise RefreshError(f"Scoreboard returned invalid JSON: {e}") from e

        games = []
        for event in data.get("events", []):
            game = self._parse_event(event)
            if game:
                games.append(game)
        return games

    def _parse_event(self, event: Dict) -> Optional[LiveGameDTO]:
        competitions = event.get("competitions") or []
        if not competitions:
            return None
        competition = competitions[0]

        home = away = None
        for competitor in competition.get("competitors", []):
            if competitor.get("homeAway") == "home":
                home = competitor
            elif competitor.get("homeAway") == "away":
                away = competitor
        if home is None or away is None:
            logger.warning(f"Skipping event {event.get('id')}: missing competitors")
            return None

        status_type = (event.get("status") or {}).get("type") or {}
        state = status_type.get("state", "pre")

        return LiveGameDTO(
            external_id=str(event.get("id")),
            home_team=home.get("team", {}).get("abbreviation", "?"),
            away_team=away.get("team", {}).get("abbreviation", "?"),
            kickoff_time=self._parse_date(event.get("date")),
            state=state,
            status_detail=status_type.get("shortDetail"),
            home_score=self._parse_score(home) if state != "pre" else None,
            away_score=self._parse_score(away) if state != "pre" else None,
            is_final=bool(status_type.get("completed", False)),
        )

    @staticmethod
    def _parse_score(competitor: Dict) -> Optional[int]:
        try:
            return int(competitor.get("score"))
        except (TypeError, ValueError):
            return None

    @staticmethod
    def _parse_date(value: Optional[str]) -> Optional[datetime]:
        if not value:
            return None
        try:
            # ESPN uses e.g. 2025-09-07T17:00Z
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None


class LiveScoreboard:
    """Latest scoreboard snapshot, refreshed by the polling scheduler."""

    def __init__(self, adapter: ScoreboardAdapter):
        self.adapter = adapter
        self.games: List[LiveGameDTO] = []
        self.fetched_at: Optional[datetime] = None

    def refresh(self) -> List[LiveGameDTO]:
        games = self.adapter.fetch_games()
        self.games = games
        self.fetched_at = datetime.now().astimezone()
        live = sum(1 for g in games if g.is_live)
        logger.info(f"Scoreboard refreshed: {len(games)} games, {live} live")
        return games

    def all_final(self) -> Optional[bool]:
        """True when every tracked game is finished, None before the first fetch.

        A fetched empty board counts as finished.
        """
        if self.fetched_at is None:
            return None
        return all(game.is_final for game in self.games)

    def has_live_games(self) -> bool:
        return any(game.is_live for game in self.games)
