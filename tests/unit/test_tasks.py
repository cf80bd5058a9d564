"""Tests for the report rendering task."""

from io import BytesIO

import docx
import pytest

from report_service.exceptions import InvariantViolationError, ValidationError
from report_service.schemas.job import ReportFormat, ReportType
from report_worker.tasks.report import RenderedReport, generate_report, report_filename, text_digest
from tests.fixtures.reports import GENERATED_AT, _issue, make_raw_inputs, make_request


class TestReportFilename:
    """Tests for report_filename."""

    def test_domain_slugged(self) -> None:
        """Dots and other punctuation become dashes."""
        assert report_filename("example.com", ReportType.SUMMARY, ReportFormat.PDF) == (
            "example-com-summary-report.pdf"
        )
        assert report_filename("Shop.Example.co.uk/", ReportType.DETAILED, ReportFormat.DOCX) == (
            "shop-example-co-uk-detailed-report.docx"
        )

    def test_empty_slug(self) -> None:
        """A domain with nothing usable falls back to a generic name."""
        assert report_filename("...", ReportType.SUMMARY, ReportFormat.PDF) == "report-summary-report.pdf"


class TestTextDigest:
    """Tests for text_digest."""

    def test_order_sensitive(self) -> None:
        """The digest changes with the order of strings."""
        assert text_digest(["a", "b"]) != text_digest(["b", "a"])
        assert text_digest(["a", "b"]) == text_digest(["a", "b"])


class TestGenerateReport:
    """Tests for generate_report."""

    def test_summary_pdf(self) -> None:
        """A summary PDF is rendered with its metadata."""
        rendered = generate_report(make_request(), make_raw_inputs(), generated_at=GENERATED_AT)

        assert isinstance(rendered, RenderedReport)
        assert rendered.report_id == "rep-123"
        assert rendered.filename == "example-com-summary-report.pdf"
        assert rendered.content.startswith(b"%PDF-")
        assert rendered.content_type == "application/pdf"
        assert rendered.generated_at == GENERATED_AT
        assert len(rendered.text_digest) == 64

    def test_detailed_docx(self) -> None:
        """A detailed DOCX opens and carries the report id."""
        request = make_request(type="detailed", format="docx")
        rendered = generate_report(request, make_raw_inputs(), generated_at=GENERATED_AT)

        opened = docx.Document(BytesIO(rendered.content))
        assert opened.core_properties.identifier == "rep-123"
        assert rendered.filename == "example-com-detailed-report.docx"

    def test_same_text_across_formats(self) -> None:
        """PDF and DOCX of the same report share a text digest."""
        pdf = generate_report(make_request(format="pdf"), make_raw_inputs(), generated_at=GENERATED_AT)
        word = generate_report(make_request(format="docx"), make_raw_inputs(), generated_at=GENERATED_AT)

        assert pdf.text_digest == word.text_digest

    def test_to_dict_excludes_content(self) -> None:
        """Job results carry metadata only."""
        rendered = generate_report(make_request(), make_raw_inputs(), generated_at=GENERATED_AT)
        result = rendered.to_dict()

        assert "content" not in result
        assert result["size_bytes"] == rendered.size_bytes
        assert result["generated_at"] == "2024-03-06T09:30:00+00:00"

    def test_request_config_wins(self) -> None:
        """Rendering options come from the job descriptor."""
        inputs = make_raw_inputs(config={"prepared_for": "Someone Else", "is_public": True})
        request = make_request(config={"prepared_for": "Acme Corp", "is_public": False})

        private = generate_report(request, inputs, generated_at=GENERATED_AT)
        public = generate_report(
            make_request(config={"prepared_for": "Acme Corp", "is_public": True}),
            inputs,
            generated_at=GENERATED_AT,
        )

        assert private.text_digest != public.text_digest

    def test_invalid_request(self) -> None:
        """A malformed descriptor is a validation error."""
        with pytest.raises(ValidationError) as exc_info:
            generate_report(make_request(format="html"), make_raw_inputs())
        assert exc_info.value.details == {"field": "request"}

    def test_invalid_inputs(self) -> None:
        """Inputs without a crawl are a validation error."""
        with pytest.raises(ValidationError):
            generate_report(make_request(), {"project": {"domain": "example.com"}})

    def test_invariant_violation_propagates(self) -> None:
        """Contract violations are not swallowed."""
        inputs = make_raw_inputs(issues=[_issue("X", "technical", "fatal")])
        with pytest.raises(InvariantViolationError):
            generate_report(make_request(), inputs)
