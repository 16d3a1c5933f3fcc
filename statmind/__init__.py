"""StatMind: matchup win-probability predictions and live score polling."""

__version__ = "0.1.0"
