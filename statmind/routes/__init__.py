"""API routes module."""
from . import health
from . import predictions
from . import live

__all__ = ["health", "predictions", "live"]
