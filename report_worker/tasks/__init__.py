"""Background task definitions."""

from report_worker.tasks.report import RenderedReport, generate_report

__all__ = [
    "RenderedReport",
    "generate_report",
]
