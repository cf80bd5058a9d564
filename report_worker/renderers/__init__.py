"""Format renderers.

Both renderers consume the same template Document and append every body
string they emit to a transcript, so content parity between formats can be
checked by comparing transcripts.
"""

from report_service.config import Settings
from report_service.exceptions import RenderError, ReportError, ValidationError
from report_service.logging import get_logger
from report_service.schemas.job import ReportFormat
from report_worker.renderers.docx import DocxRenderer
from report_worker.renderers.pdf import PdfRenderer
from report_worker.reports.contract import ReportData
from report_worker.templates import build_document
from report_worker.templates.document import Document

logger = get_logger(__name__)

Transcript = list[str]


def _run(renderer, document: Document, fmt: str) -> bytes:
    try:
        return renderer.render(document)
    except ReportError:
        raise
    except Exception as e:
        logger.error(
            "render_failed",
            report_id=document.report_id,
            format=fmt,
            error=str(e),
            exc_info=True,
        )
        raise RenderError(document.report_id, fmt, str(e)) from e


def render_pdf(document: Document, transcript: Transcript | None = None) -> bytes:
    """Render a Document to PDF bytes."""
    return _run(PdfRenderer(transcript), document, ReportFormat.PDF.value)


def render_docx(document: Document, transcript: Transcript | None = None) -> bytes:
    """Render a Document to DOCX bytes."""
    return _run(DocxRenderer(transcript), document, ReportFormat.DOCX.value)


RENDERERS = {
    ReportFormat.PDF: render_pdf,
    ReportFormat.DOCX: render_docx,
}


def render(
    report_data: ReportData,
    template_type: str,
    fmt: str,
    transcript: Transcript | None = None,
    settings: Settings | None = None,
    report_id: str | None = None,
) -> bytes:
    """
    Render report data with a template into a container format.

    Args:
        report_data: Aggregated report data
        template_type: "summary" or "detailed"
        fmt: "pdf" or "docx"
        transcript: Optional list that receives every emitted body string
        settings: Settings for brand fallback
        report_id: Report id used in metadata and error details

    Returns:
        Document bytes

    Raises:
        ValidationError: Unknown template type or format
        RenderError: The rendering backend failed
    """
    try:
        report_format = ReportFormat(fmt)
    except ValueError:
        raise ValidationError(f"Unknown report format: {fmt}", field="format") from None

    document = build_document(report_data, template_type, settings=settings, report_id=report_id)
    content = RENDERERS[report_format](document, transcript)

    logger.info(
        "report_rendered",
        report_id=report_id,
        template=document.template,
        format=report_format.value,
        pages=len(document.pages),
        size_bytes=len(content),
    )
    return content


__all__ = [
    "DocxRenderer",
    "PdfRenderer",
    "Transcript",
    "render",
    "render_docx",
    "render_pdf",
]
