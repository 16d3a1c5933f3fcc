"""Provider adapters."""
# Auto-register providers
from statmind.adapters.anthropic_adapter import AnthropicAdapter
from statmind.adapters.mock_adapter import MockAdapter
from statmind.adapters.scoreboard_adapter import ScoreboardAdapter, LiveScoreboard
