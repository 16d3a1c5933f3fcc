"""RQ worker for batch prediction jobs.

    statmind-worker              # listen on high, default, low
    statmind-worker default low  # listen on a subset, in priority order
"""
import sys
from typing import List, Optional

from rq import Worker

from statmind.config import settings
from statmind.jobs.queue import QUEUE_NAMES, QUEUES, redis_conn
from statmind.app_logging import setup_logging, get_logger

logger = get_logger(__name__)


def run_worker(queue_names: Optional[List[str]] = None) -> None:
    """Run an RQ worker over the named queues."""
    setup_logging()
    names = queue_names if queue_names is not None else sys.argv[1:]
    names = names or list(QUEUE_NAMES)

    unknown = [name for name in names if name not in QUEUES]
    if unknown:
        raise SystemExit(f"Unknown queues {unknown}; choose from {list(QUEUE_NAMES)}")

    queues = [QUEUES[name] for name in names]
    logger.info(
        f"Starting worker for queues {names} "
        f"(weights {settings.PREDICTION_WEIGHTS}, reasoning provider {settings.REASONING_PROVIDER})"
    )
    Worker(queues, connection=redis_conn).work()


if __name__ == '__main__':
    run_worker()
