"""Natural-language justification for predictions.

The primary path sends a deterministic analyst prompt to a text-generation
provider. When the provider fails, times out, or is not configured, a
templated sentence is built from the component scores instead.
"""
from dataclasses import dataclass
from typing import List, Optional

from statmind.adapters.base import ReasoningProvider
from statmind.errors import ProviderError
from statmind.models.components import ComponentBreakdown, ComponentScore
from statmind.models.confidence import ConfidenceTier
from statmind.schemas.stats import TeamStats
from statmind.app_logging import get_logger

logger = get_logger(__name__)

KEY_FACTOR_COUNT = 3
FALLBACK_FACTOR_COUNT = 2

SOURCE_PROVIDER = "provider"
SOURCE_FALLBACK = "fallback"


@dataclass(frozen=True)
class ReasoningContext:
    """Everything the reasoning step may cite."""
    home: TeamStats
    away: TeamStats
    breakdown: ComponentBreakdown
    home_win_probability: float
    predicted_winner: str
    confidence: ConfidenceTier

    @property
    def home_favored(self) -> bool:
        return self.predicted_winner == self.home.team_id

    @property
    def winner_probability(self) -> float:
        p = self.home_win_probability
        return p if self.home_favored else 1.0 - p

    @property
    def matchup(self) -> str:
        return f"{self.away.team_id} @ {self.home.team_id}"


@dataclass(frozen=True)
class ReasoningResult:
    text: str
    source: str  # "provider" or "fallback"


def _fmt(value, spec: str = ".1f") -> str:
    return "n/a" if value is None else format(value, spec)


def game_narrative(context: ReasoningContext) -> str:
    """Categorize the game for the prompt."""
    margin = abs(context.home_win_probability - 0.5)
    if context.confidence == ConfidenceTier.HIGH:
        return "Clear Favorite Matchup"
    if margin < 0.07:
        return "Toss-Up Game"
    if abs(context.breakdown.rating_differential) > 15:
        return "Talent Mismatch"
    return "Competitive Matchup"


def _team_lines(team: TeamStats, role: str) -> List[str]:
    return [
        f"{team.team_id} ({role}):",
        f"- Rating: {_fmt(team.rating)}",
        f"- Record: {team.record()} (home {team.home_record()}, road {team.away_record()})",
        f"- Offensive rating: {_fmt(team.offensive_rating)} | Defensive rating: {_fmt(team.defensive_rating)}",
        f"- Scoring: {_fmt(team.points_for_per_game)} PPG | Allowing: {_fmt(team.points_against_per_game)} PPG",
    ]


def build_prompt(context: ReasoningContext) -> str:
    """Build the analyst prompt. Identical context always yields an identical prompt."""
    ranked = context.breakdown.ranked()

    breakdown_lines = []
    for i, score in enumerate(ranked, start=1):
        marker = " [KEY FACTOR]" if i <= KEY_FACTOR_COUNT else ""
        breakdown_lines.append(f"{i}. {score.label} ({score.name}): {score.value:+.2f}{marker}")

    lines = [
        "You are an NFL analyst writing game analysis for StatMind Sports.",
        "",
        f"**MATCHUP**: {context.matchup}",
        f"**PICK**: {context.predicted_winner}",
        f"**HOME WIN PROBABILITY**: {context.home_win_probability!r}",
        f"**PICK WIN PROBABILITY**: {context.winner_probability!r}",
        f"**CONFIDENCE**: {context.confidence.value}",
        f"**GAME TYPE**: {game_narrative(context)}",
        "",
        "**COMPONENT BREAKDOWN** (ranked by impact; positive favors home, negative favors away):",
        *breakdown_lines,
        "",
        "**RAW STATISTICS**:",
        *_team_lines(context.home, "home"),
        *_team_lines(context.away, "away"),
    ]
    if context.breakdown.defaulted_fields:
        lines.append(f"(Unavailable stats, treated as defaults: {', '.join(context.breakdown.defaulted_fields)})")

    lines += [
        "",
        "**YOUR TASK**: Write a 2-3 paragraph analysis explaining the pick.",
        "1. Open with the pick and why it makes sense from a football perspective.",
        "2. Break down the key factors above in football terms; reference records naturally.",
        "3. Close with the confidence level and what to watch.",
        "",
        "**STYLE RULES**:",
        "- Present tense, conversational but professional.",
        "- Never say \"our algorithm predicts\" or \"the numbers show\".",
        "- Keep it under 120 words.",
        f"- Sound confident but not arrogant ({context.confidence.value} confidence level).",
        "",
        "Write ONLY the analysis - no preamble, no title:",
    ]
    return "\n".join(lines)


def _agrees_with_winner(score: ComponentScore, home_favored: bool) -> bool:
    return score.value > 0 if home_favored else score.value < 0


def fallback_reasoning(context: ReasoningContext) -> str:
    """Templated reasoning. Never raises, never empty."""
    pct = int(round(context.winner_probability * 100))
    text = f"{context.predicted_winner} favored with {pct}% win probability."

    factors = [
        score for score in context.breakdown.ranked()
        if _agrees_with_winner(score, context.home_favored)
    ][:FALLBACK_FACTOR_COUNT]
    if factors:
        text += " Key factors: " + ", ".join(f.label for f in factors) + "."
    return text


class ReasoningGenerator:
    """Produces reasoning text, degrading to the template when the provider fails."""

    def __init__(self, provider: Optional[ReasoningProvider] = None):
        self.provider = provider

    def generate(self, context: ReasoningContext, use_provider: bool = True) -> ReasoningResult:
        if self.provider is None or not use_provider:
            return ReasoningResult(fallback_reasoning(context), SOURCE_FALLBACK)

        prompt = build_prompt(context)
        try:
            text = self.provider.generate(prompt).strip()
        except ProviderError as e:
            logger.warning(f"Reasoning provider failed for {context.matchup}, using fallback: {e}")
            return ReasoningResult(fallback_reasoning(context), SOURCE_FALLBACK)

        if not text:
            logger.warning(f"Reasoning provider returned empty text for {context.matchup}, using fallback")
            return ReasoningResult(fallback_reasoning(context), SOURCE_FALLBACK)

        logger.info(f"AI reasoning generated for {context.matchup}")
        return ReasoningResult(text, SOURCE_PROVIDER)
