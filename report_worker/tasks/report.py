"""Report rendering background task."""

import hashlib
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import pydantic
import structlog
from rq import get_current_job

from report_service.config import get_settings
from report_service.exceptions import ReportError, ValidationError
from report_service.schemas.job import ReportFormat, ReportJobRequest, ReportType
from report_worker.renderers import render
from report_worker.reports.assembler import ReportAssemblerConfig, aggregate

logger = structlog.get_logger(__name__)

FILENAME_UNSAFE = re.compile(r"[^a-z0-9]+")


@dataclass
class RenderedReport:
    """A rendered report document ready for storage or download."""

    report_id: str
    type: ReportType
    format: ReportFormat
    filename: str
    content: bytes
    generated_at: datetime
    text_digest: str  # sha256 over the emitted body text

    @property
    def content_type(self) -> str:
        return self.format.content_type

    @property
    def size_bytes(self) -> int:
        return len(self.content)

    def to_dict(self) -> dict[str, Any]:
        """Metadata without the document bytes."""
        return {
            "report_id": self.report_id,
            "type": self.type.value,
            "format": self.format.value,
            "content_type": self.content_type,
            "filename": self.filename,
            "size_bytes": self.size_bytes,
            "generated_at": self.generated_at.isoformat(),
            "text_digest": self.text_digest,
        }


def report_filename(domain: str, report_type: ReportType, report_format: ReportFormat) -> str:
    """Download filename, e.g. ``example-com-summary-report.pdf``."""
    slug = FILENAME_UNSAFE.sub("-", domain.lower()).strip("-") or "report"
    return f"{slug}-{report_type.value}-report.{report_format.value}"


def text_digest(transcript: list[str]) -> str:
    return hashlib.sha256("\n".join(transcript).encode("utf-8")).hexdigest()


def generate_report(
    request_payload: dict[str, Any],
    inputs_payload: dict[str, Any],
    generated_at: datetime | None = None,
) -> RenderedReport:
    """
    Render one report end-to-end.

    This is the entry point for RQ. The job descriptor's rendering options
    take precedence over any config carried in the inputs payload.

    Args:
        request_payload: ReportJobRequest as a dictionary
        inputs_payload: Raw report inputs loaded by the dispatcher
        generated_at: Injectable generation timestamp

    Returns:
        RenderedReport

    Raises:
        ValidationError: Invalid descriptor or inputs
        InvariantViolationError: Inputs broke a data contract
        RenderError: The rendering backend failed
    """
    try:
        request = ReportJobRequest.model_validate(request_payload)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid report job: {e.errors()[0]['msg']}", field="request") from e

    job = get_current_job()
    log = logger.bind(
        report_id=request.report_id,
        project_id=request.project_id,
        crawl_id=request.crawl_id,
        job_id=job.id if job else None,
    )
    log.info("report_started", type=request.type.value, format=request.format.value)

    settings = get_settings()
    generated_at = generated_at or datetime.now(UTC)

    try:
        inputs = {**inputs_payload, "config": request.config.model_dump()}
        data = aggregate(
            inputs,
            generated_at=generated_at,
            config=ReportAssemblerConfig(ctr_per_10_points=settings.roi_ctr_per_10_points),
        )

        transcript: list[str] = []
        content = render(
            data,
            request.type.value,
            request.format.value,
            transcript=transcript,
            settings=settings,
            report_id=request.report_id,
        )
    except ReportError as e:
        log.error("report_failed", error=e.code, message=e.message)
        raise

    rendered = RenderedReport(
        report_id=request.report_id,
        type=request.type,
        format=request.format,
        filename=report_filename(data.project.domain, request.type, request.format),
        content=content,
        generated_at=generated_at,
        text_digest=text_digest(transcript),
    )

    if job:
        job.meta["filename"] = rendered.filename
        job.meta["size_bytes"] = rendered.size_bytes
        job.save_meta()

    log.info("report_completed", filename=rendered.filename, size_bytes=rendered.size_bytes)
    return rendered
