"""Job queue service for report rendering jobs."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from functools import lru_cache
from typing import Any

from redis import Redis
from rq import Callback, Queue
from rq.exceptions import NoSuchJobError
from rq.job import Job

from report_service.config import get_settings
from report_service.logging import get_logger
from report_service.schemas.job import ReportJobRequest
from report_worker.main import on_job_failure, on_job_success
from report_worker.redis import (
    QUEUE_DEFAULT,
    QUEUE_HIGH,
    QUEUE_LOW,
    get_redis_connection_bytes,
)
from report_worker.tasks.report import generate_report

logger = get_logger(__name__)


class JobStatus(str, Enum):
    """RQ job status values."""

    QUEUED = "queued"
    STARTED = "started"
    DEFERRED = "deferred"
    FINISHED = "finished"
    STOPPED = "stopped"
    SCHEDULED = "scheduled"
    FAILED = "failed"
    CANCELED = "canceled"


class QueuePriority(str, Enum):
    """Queue priority levels."""

    HIGH = "high"
    DEFAULT = "default"
    LOW = "low"


@dataclass
class JobInfo:
    """Job information wrapper."""

    id: str
    status: JobStatus
    created_at: datetime | None
    started_at: datetime | None
    ended_at: datetime | None
    result: Any | None
    error: str | None
    meta: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "result": self.result,
            "error": self.error,
            "meta": self.meta,
        }


class JobQueue:
    """Service for managing report job queues."""

    def __init__(self, connection: Redis | None = None) -> None:
        self._conn = connection if connection is not None else get_redis_connection_bytes()
        self._queues = {
            QueuePriority.HIGH: Queue(QUEUE_HIGH, connection=self._conn),
            QueuePriority.DEFAULT: Queue(QUEUE_DEFAULT, connection=self._conn),
            QueuePriority.LOW: Queue(QUEUE_LOW, connection=self._conn),
        }

    def get_queue(self, priority: QueuePriority = QueuePriority.DEFAULT) -> Queue:
        """Get a queue by priority."""
        return self._queues[priority]

    def enqueue(
        self,
        func: Any,
        *args: Any,
        priority: QueuePriority = QueuePriority.DEFAULT,
        job_id: str | None = None,
        job_timeout: int | None = None,
        result_ttl: int | None = None,
        meta: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> Job:
        """
        Enqueue a job for background processing.

        Args:
            func: The function to execute
            *args: Positional arguments for the function
            priority: Queue priority (high, default, low)
            job_id: Optional custom job ID
            job_timeout: Job timeout in seconds (defaults to settings)
            result_ttl: How long to keep results (defaults to settings)
            meta: Additional metadata to store with job
            **kwargs: Keyword arguments for the function

        Returns:
            The enqueued RQ Job
        """
        settings = get_settings()
        queue = self.get_queue(priority)

        return queue.enqueue(
            func,
            *args,
            job_id=job_id,
            job_timeout=job_timeout or settings.report_job_timeout,
            result_ttl=result_ttl or settings.report_result_ttl,
            meta=meta or {},
            on_success=Callback(on_job_success),
            on_failure=Callback(on_job_failure),
            **kwargs,
        )

    def enqueue_report(
        self,
        request: ReportJobRequest,
        inputs: dict[str, Any],
        priority: QueuePriority = QueuePriority.DEFAULT,
    ) -> Job:
        """
        Enqueue one report render.

        The report id doubles as the job id so the dispatcher can poll the
        job without keeping a separate mapping.
        """
        job = self.enqueue(
            generate_report,
            request.model_dump(mode="json"),
            inputs,
            priority=priority,
            job_id=request.report_id,
            meta={
                "report_id": request.report_id,
                "project_id": request.project_id,
                "type": request.type.value,
                "format": request.format.value,
            },
        )
        logger.info(
            "report_job_enqueued",
            report_id=request.report_id,
            type=request.type.value,
            format=request.format.value,
            queue=self.get_queue(priority).name,
        )
        return job

    def get_job(self, job_id: str) -> Job | None:
        """Get a job by ID."""
        try:
            return Job.fetch(job_id, connection=self._conn)
        except NoSuchJobError:
            return None

    def get_job_info(self, job_id: str) -> JobInfo | None:
        """Get job information by ID."""
        job = self.get_job(job_id)
        if not job:
            return None

        status = JobStatus(job.get_status() or "queued")
        error = None

        if status == JobStatus.FAILED and job.exc_info:
            error = str(job.exc_info)

        return JobInfo(
            id=job.id,
            status=status,
            created_at=job.created_at,
            started_at=job.started_at,
            ended_at=job.ended_at,
            result=job.result if status == JobStatus.FINISHED else None,
            error=error,
            meta=job.meta or {},
        )

    def cancel_job(self, job_id: str) -> bool:
        """Cancel a queued job."""
        job = self.get_job(job_id)
        if not job:
            return False

        status = job.get_status()
        if status in ("queued", "deferred", "scheduled"):
            job.cancel()
            return True
        return False


@lru_cache
def get_job_queue() -> JobQueue:
    """Get the shared job queue, connecting on first use."""
    return JobQueue()


def enqueue_report(
    request: ReportJobRequest,
    inputs: dict[str, Any],
    priority: QueuePriority = QueuePriority.DEFAULT,
) -> Job:
    """Convenience wrapper around ``JobQueue.enqueue_report``."""
    return get_job_queue().enqueue_report(request, inputs, priority=priority)
