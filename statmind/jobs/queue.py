"""Redis Queue setup and helpers for batch prediction runs."""
from typing import Any, Dict, Optional

import redis
from rq import Queue
from rq.exceptions import NoSuchJobError
from rq.job import Job

from statmind.config import settings
from statmind.app_logging import get_logger

logger = get_logger(__name__)

QUEUE_NAMES = ('high', 'default', 'low')
# Finished batch results stay fetchable for a day
RESULT_TTL_SECONDS = 24 * 60 * 60

# No network I/O until the first command
redis_conn = redis.from_url(settings.REDIS_URL)

QUEUES: Dict[str, Queue] = {name: Queue(name, connection=redis_conn) for name in QUEUE_NAMES}


def enqueue_job(
    func,
    *args,
    queue_name: str = 'default',
    job_timeout: int = 300,
    **kwargs
) -> Job:
    """Enqueue `func(*args, **kwargs)` on a named queue (unknown names fall back to default)."""
    queue = QUEUES.get(queue_name) or QUEUES['default']
    job = queue.enqueue(
        func,
        *args,
        job_timeout=job_timeout,
        result_ttl=RESULT_TTL_SECONDS,
        **kwargs
    )
    logger.info(f"Enqueued {func.__name__} as job {job.id} on {queue.name} queue")
    return job


def get_job_status(job_id: str) -> Optional[Dict[str, Any]]:
    """Status, timing and result of a job, or None if Redis has no such job."""
    try:
        job = Job.fetch(job_id, connection=redis_conn)
    except NoSuchJobError:
        logger.warning(f"Job {job_id} not found")
        return None

    return {
        'id': job.id,
        'status': job.get_status(),
        'result': job.result,
        'error': job.exc_info,
        'created_at': job.created_at,
        'started_at': job.started_at,
        'ended_at': job.ended_at,
    }
