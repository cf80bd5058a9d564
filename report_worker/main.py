"""RQ worker entrypoint and job lifecycle hooks."""

import os
import platform

from rq import SimpleWorker, Worker
from rq.job import Job

from report_service.config import get_settings
from report_service.logging import get_logger, setup_logging
from report_worker.redis import QUEUES, get_redis_connection_bytes

logger = get_logger(__name__)


def on_job_success(job: Job, _connection: object, result: object) -> None:
    """Called when a job succeeds."""
    logger.info(
        "job_completed",
        job_id=job.id,
        report_format=job.meta.get("format"),
        result=str(result)[:100],
    )


def on_job_failure(
    job: Job,
    _connection: object,
    _exc_type: type,
    exc_value: Exception,
    _traceback: object,
) -> None:
    """Called when a job fails."""
    logger.error("job_failed", job_id=job.id, error=str(exc_value))


def run_worker() -> None:
    """Start the RQ worker."""
    settings = get_settings()
    setup_logging()

    logger.info("worker_starting", env=settings.env, queues=QUEUES)

    # Use SimpleWorker on Windows (no os.fork() support)
    WorkerClass = SimpleWorker if platform.system() == "Windows" else Worker

    worker = WorkerClass(
        QUEUES,
        connection=get_redis_connection_bytes(),
        name=f"report-worker-{os.getpid()}",
    )

    worker.work(logging_level=settings.log_level)


if __name__ == "__main__":
    run_worker()
