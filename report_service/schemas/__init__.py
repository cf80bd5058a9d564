"""Pydantic schemas for report jobs."""

from report_service.schemas.job import (
    ReportConfigPayload,
    ReportFormat,
    ReportJobRequest,
    ReportType,
)

__all__ = [
    "ReportConfigPayload",
    "ReportFormat",
    "ReportJobRequest",
    "ReportType",
]
