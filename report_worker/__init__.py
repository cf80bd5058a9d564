"""Report engine worker package."""

# Lazy imports so the rendering stack loads without a Redis client configured
# Use explicit imports when these are needed:
# from report_worker.queue import JobQueue, JobInfo, JobStatus, QueuePriority, enqueue_report
# from report_worker.redis import get_redis_connection_bytes, QUEUE_HIGH, QUEUE_DEFAULT, QUEUE_LOW

from typing import Any

__all__ = [
    "JobQueue",
    "JobInfo",
    "JobStatus",
    "QueuePriority",
    "enqueue_report",
    "get_job_queue",
    "QUEUE_HIGH",
    "QUEUE_DEFAULT",
    "QUEUE_LOW",
]


def __getattr__(name: str) -> Any:
    """Lazy import for queue helpers."""
    if name in ("JobQueue", "JobInfo", "JobStatus", "QueuePriority", "enqueue_report", "get_job_queue"):
        from report_worker import queue

        return getattr(queue, name)
    if name in ("QUEUE_HIGH", "QUEUE_DEFAULT", "QUEUE_LOW"):
        from report_worker import redis

        return getattr(redis, name)
    raise AttributeError(f"module 'report_worker' has no attribute '{name}'")
