"""Logging configuration."""
import logging
import sys
import json
from datetime import datetime, timezone
from typing import Optional, TextIO

from statmind.config import settings

# Attributes passed via `extra=` that are copied into the JSON record
CONTEXT_FIELDS = ("request_id", "matchup", "job_id", "refresh_source", "scheduler_state")

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_data[name] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(stream: Optional[TextIO] = None, fmt: Optional[str] = None) -> None:
    """Configure the root logger from LOG_LEVEL and LOG_FORMAT ("json" or "text")."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    root_logger.handlers = []

    handler = logging.StreamHandler(stream or sys.stdout)
    if (fmt or settings.LOG_FORMAT).lower() == "text":
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    else:
        handler.setFormatter(JSONFormatter())
    root_logger.addHandler(handler)

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    # requests/urllib3 connection chatter during scoreboard polling
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("rq.worker").setLevel(logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Get logger instance."""
    return logging.getLogger(name)
