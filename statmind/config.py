"""Application configuration."""
from typing import Dict, List, Optional, Tuple
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Environment
    ENVIRONMENT: str = Field(default="development")

    # Redis (batch prediction jobs)
    REDIS_URL: str = Field(default="redis://localhost:6379/0")

    # Scoring
    # Canonical weight table. The older 25/25/20/15/15 split is kept only in DESIGN.md.
    PREDICTION_WEIGHTS: Dict[str, float] = Field(default={
        "rating_differential": 0.35,
        "season_performance": 0.15,
        "situational": 0.25,
        "matchup": 0.20,
        "recent_form": 0.05,
    })
    PROBABILITY_SCALE: float = Field(default=15.0, gt=0)
    MISSING_STAT_DEFAULT: float = Field(default=0.0)
    CONFIDENCE_LOW_MARGIN: float = Field(default=0.05)   # winner prob 0.55
    CONFIDENCE_HIGH_MARGIN: float = Field(default=0.15)  # winner prob 0.65

    # Reasoning provider
    REASONING_PROVIDER: str = Field(default="anthropic")  # "anthropic", "mock" or "none"
    ANTHROPIC_API_KEY: Optional[str] = Field(default=None)
    ANTHROPIC_API_URL: str = Field(default="https://api.anthropic.com/v1/messages")
    REASONING_MODEL: str = Field(default="claude-sonnet-4-20250514")
    REASONING_MAX_TOKENS: int = Field(default=500)
    REASONING_TEMPERATURE: float = Field(default=0.7)
    REASONING_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)

    # Live score polling
    LIVE_POLLING_ENABLED: bool = Field(default=False)
    SCOREBOARD_URL: str = Field(default="https://site.api.espn.com/apis/site/v2/sports/football/nfl/scoreboard")
    SCOREBOARD_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)
    REFRESH_INTERVAL_MS: int = Field(default=60000, gt=0)
    REFRESH_STOP_WHEN_ALL_FINAL: bool = Field(default=True)
    # How often a stopped scheduler re-checks for an open window or live games
    LIVE_WATCH_INTERVAL_SECONDS: float = Field(default=900.0, gt=0)
    # Weekday (0=Monday) -> list of [start_hour, end_hour) ranges, in TZ
    REFRESH_WINDOWS: Dict[int, List[Tuple[int, int]]] = Field(default={
        3: [(20, 24)],   # Thursday night
        6: [(13, 24)],   # Sunday slate
        0: [(20, 24)],   # Monday night
    })

    # Application
    TZ: str = Field(default="America/New_York")
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="json")  # "json" or "text"
    CORS_ORIGINS: List[str] = Field(default=["http://localhost:8080", "http://localhost:3000", "http://localhost:5173"])

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
