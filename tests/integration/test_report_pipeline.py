"""Integration test for the full report pipeline.

Runs raw collaborator inputs through aggregation, both templates and both
renderers, then reads the documents back.
"""

from io import BytesIO

import docx
import pytest

from report_worker.renderers import render
from report_worker.reports.assembler import aggregate
from report_worker.tasks.report import generate_report
from report_worker.templates import build_document
from tests.fixtures.documents import docx_text, missing_in_order, pdf_text
from tests.fixtures.reports import GENERATED_AT, make_minimal_inputs, make_raw_inputs, make_request

pytestmark = pytest.mark.integration


@pytest.mark.parametrize("template", ["summary", "detailed"])
def test_formats_carry_identical_text(template: str) -> None:
    """Both files hold the document's text, in order."""
    data = aggregate(make_raw_inputs(), generated_at=GENERATED_AT)
    document = build_document(data, template)

    pdf_transcript: list[str] = []
    docx_transcript: list[str] = []
    pdf = render(data, template, "pdf", transcript=pdf_transcript)
    word = render(data, template, "docx", transcript=docx_transcript)

    assert pdf.startswith(b"%PDF-")
    assert word.startswith(b"PK")
    assert pdf_transcript == docx_transcript == document.text_content()
    assert missing_in_order(document.text_content(), pdf_text(pdf)) == []
    assert missing_in_order(document.text_content(), docx_text(word)) == []


@pytest.mark.parametrize("template", ["summary", "detailed"])
@pytest.mark.parametrize("fmt", ["pdf", "docx"])
def test_minimal_inputs_render(template: str, fmt: str) -> None:
    """A crawl with no optional data still renders in every combination."""
    data = aggregate(make_minimal_inputs(), generated_at=GENERATED_AT)
    content = render(data, template, fmt)

    assert len(content) > 0


def test_detailed_docx_contents() -> None:
    """The detailed Word document contains every section heading."""
    rendered = generate_report(
        make_request(type="detailed", format="docx"),
        make_raw_inputs(),
        generated_at=GENERATED_AT,
    )
    opened = docx.Document(BytesIO(rendered.content))
    paragraphs = {p.text for p in opened.paragraphs}

    for heading in (
        "Category Scorecard",
        "Issue Catalog",
        "Action Plan",
        "Competitor Analysis",
        "Microsoft Clarity Data",
    ):
        assert heading in paragraphs


def test_repeatable_output() -> None:
    """The same job rendered twice produces the same bytes."""
    first = generate_report(make_request(), make_raw_inputs(), generated_at=GENERATED_AT)
    second = generate_report(make_request(), make_raw_inputs(), generated_at=GENERATED_AT)

    assert first.content == second.content
    assert first.text_digest == second.text_digest
