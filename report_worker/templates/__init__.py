"""Document templates: turn ReportData into a format-neutral Document."""

from report_service.config import Settings
from report_service.exceptions import ValidationError
from report_worker.reports.contract import ReportData
from report_worker.templates.detailed import build_detailed_document
from report_worker.templates.document import Document
from report_worker.templates.formatting import resolve_brand
from report_worker.templates.summary import build_summary_document

TEMPLATES = {
    "summary": build_summary_document,
    "detailed": build_detailed_document,
}


def build_document(
    data: ReportData,
    template_type: str,
    settings: Settings | None = None,
    report_id: str | None = None,
) -> Document:
    """
    Assemble the document for a template type.

    Args:
        data: Report data
        template_type: "summary" or "detailed"
        settings: Settings for brand fallback (defaults to cached settings)
        report_id: Optional report id carried into document metadata

    Returns:
        Document

    Raises:
        ValidationError: Unknown template type
    """
    builder = TEMPLATES.get(str(getattr(template_type, "value", template_type)))
    if builder is None:
        raise ValidationError(f"Unknown report template: {template_type}", field="type")
    return builder(data, resolve_brand(data, settings), report_id=report_id)


__all__ = [
    "TEMPLATES",
    "build_detailed_document",
    "build_document",
    "build_summary_document",
]
