"""Component scoring: five signed scores per matchup (positive favors home)."""
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple

from statmind.errors import MissingStatField
from statmind.schemas.stats import TeamStats
from statmind.app_logging import get_logger

logger = get_logger(__name__)

RATING_DIFFERENTIAL = "rating_differential"
SEASON_PERFORMANCE = "season_performance"
SITUATIONAL = "situational"
MATCHUP = "matchup"
RECENT_FORM = "recent_form"

# Fixed order. Also the tie-break order when ranking by magnitude.
COMPONENT_NAMES: Tuple[str, ...] = (
    RATING_DIFFERENTIAL,
    SEASON_PERFORMANCE,
    SITUATIONAL,
    MATCHUP,
    RECENT_FORM,
)

COMPONENT_LABELS: Dict[str, str] = {
    RATING_DIFFERENTIAL: "Rating advantage",
    SEASON_PERFORMANCE: "Season performance edge",
    SITUATIONAL: "Home field advantage",
    MATCHUP: "Matchup superiority",
    RECENT_FORM: "Recent form momentum",
}


def _clamp(value: float, limit: float) -> float:
    return max(-limit, min(limit, value))


@dataclass(frozen=True)
class ComponentScore:
    """A named signed contribution of one factor to the prediction."""
    name: str
    value: float

    @property
    def label(self) -> str:
        return COMPONENT_LABELS[self.name]

    @property
    def magnitude(self) -> float:
        return abs(self.value)


@dataclass(frozen=True)
class ComponentBreakdown:
    """The five component scores for one matchup."""
    rating_differential: float
    season_performance: float
    situational: float
    matchup: float
    recent_form: float
    defaulted_fields: Tuple[str, ...] = field(default=())

    def __iter__(self) -> Iterator[ComponentScore]:
        for name in COMPONENT_NAMES:
            yield ComponentScore(name, getattr(self, name))

    def as_dict(self) -> Dict[str, float]:
        return {score.name: score.value for score in self}

    def ranked(self) -> List[ComponentScore]:
        """Scores sorted by magnitude descending, ties in fixed component order."""
        order = {name: i for i, name in enumerate(COMPONENT_NAMES)}
        return sorted(self, key=lambda s: (-s.magnitude, order[s.name]))


class ComponentScorer:
    """
    Turns two TeamStats snapshots into five component scores.

    Ranges (after clamping):
    - rating_differential: +/-50, rating gap / 20
    - season_performance:  +/-50, offense vs opposing defense power
    - situational:         +/-30, home win rate at home vs away win rate on the road
    - matchup:             +/-40, net offense-vs-defense advantage
    - recent_form:         +/-50, overall win rate gap

    Missing stats are replaced by `missing_stat_default` and reported in
    `ComponentBreakdown.defaulted_fields`; scoring never raises on bad data.
    """

    def __init__(self, missing_stat_default: float = 0.0):
        self.missing_stat_default = missing_stat_default

    def score(self, home: TeamStats, away: TeamStats) -> ComponentBreakdown:
        defaulted: List[str] = []

        def stat(side: str, team: TeamStats, name: str) -> float:
            try:
                return float(team.require(name))
            except MissingStatField as e:
                path = f"{side}.{name}"
                if path not in defaulted:
                    defaulted.append(path)
                    logger.warning(f"{e}; using default {self.missing_stat_default}")
                return float(self.missing_stat_default)

        h = lambda name: stat("home", home, name)
        a = lambda name: stat("away", away, name)

        breakdown = ComponentBreakdown(
            rating_differential=self.rating_differential(h("rating"), a("rating")),
            season_performance=self.season_performance(
                h("offensive_rating"), h("defensive_rating"),
                a("offensive_rating"), a("defensive_rating"),
            ),
            situational=self.situational(
                h("home_wins"), h("home_losses"), a("away_wins"), a("away_losses"),
            ),
            matchup=self.matchup(
                h("offensive_rating"), h("defensive_rating"),
                a("offensive_rating"), a("defensive_rating"),
            ),
            recent_form=self.recent_form(h("wins"), h("losses"), a("wins"), a("losses")),
            defaulted_fields=tuple(defaulted),
        )
        logger.debug(f"Component scores {home.team_id} vs {away.team_id}: {breakdown.as_dict()}")
        return breakdown

    @staticmethod
    def rating_differential(home_rating: float, away_rating: float) -> float:
        return _clamp((home_rating - away_rating) / 20, 50)

    @staticmethod
    def season_performance(home_off: float, home_def: float, away_off: float, away_def: float) -> float:
        # Each side's power: own offense plus how porous the opposing defense is
        home_power = (home_off + (100 - away_def)) / 2
        away_power = (away_off + (100 - home_def)) / 2
        return _clamp((home_power - away_power) / 100 * 50, 50)

    @staticmethod
    def situational(home_wins: float, home_losses: float, away_wins: float, away_losses: float) -> float:
        home_rate = home_wins / max(home_wins + home_losses, 1)
        road_rate = away_wins / max(away_wins + away_losses, 1)
        return _clamp((home_rate - road_rate) * 30, 30)

    @staticmethod
    def matchup(home_off: float, home_def: float, away_off: float, away_def: float) -> float:
        home_edge = home_off - away_def
        away_edge = away_off - home_def
        return _clamp((home_edge - away_edge) / 5, 40)

    @staticmethod
    def recent_form(home_wins: float, home_losses: float, away_wins: float, away_losses: float) -> float:
        home_rate = home_wins / max(home_wins + home_losses, 1)
        away_rate = away_wins / max(away_wins + away_losses, 1)
        return _clamp((home_rate - away_rate) * 50, 50)
