"""Tests for the summary and detailed document templates."""

from dataclasses import replace

import pytest

from report_service.config import Settings
from report_service.exceptions import ValidationError
from report_service.schemas.job import ReportType
from report_worker.templates import build_document
from report_worker.templates.document import BulletList, ChartBlock, Heading, PageKind, Table, TextStyle
from report_worker.templates.formatting import capped, fmt_delta, fmt_score, more_note, truncate_url
from tests.fixtures.reports import HISTORY, _issue, make_report_data


def settings() -> Settings:
    return Settings(
        default_brand_name="LLM Boost",
        default_brand_color="#4f46e5",
        default_brand_url="https://llmboost.com",
    )


def section(document, title):
    return next(s for p in document.pages for s in p.sections if s.title == title)


class TestSummaryTemplate:
    """Tests for the summary template."""

    def test_page_layout(self, report_data) -> None:
        """Cover, scorecard, trends and call to action in order."""
        document = build_document(report_data, "summary", settings=settings())

        assert document.page_kinds() == (
            PageKind.COVER,
            PageKind.CONTENT,
            PageKind.CONTENT,
            PageKind.CALL_TO_ACTION,
        )
        assert document.section_titles() == (
            "Category Scorecard",
            "Executive Summary",
            "Top Quick Wins",
            "Score Trend",
            "AI Visibility Snapshot",
        )
        assert document.title == "AI-Readiness Report: example.com"
        assert document.generated_at_label == "March 6, 2024"

    def test_cover(self, report_data) -> None:
        """The cover carries the score, grade and recipient."""
        text = build_document(report_data, "summary", settings=settings()).text_content()

        assert "Overall Score: 76/100" in text
        assert "4 pages analyzed | C Grade" in text
        assert "Prepared for Acme Corp" in text

    def test_quick_wins_numbered(self, report_data) -> None:
        """Quick wins are numbered and tagged with their estimates."""
        wins = section(build_document(report_data, "summary", settings=settings()), "Top Quick Wins")
        items = wins.blocks[0].items

        assert items[0].text == "1. Ai crawler blocked detected"
        assert items[0].tags == ("+8 pts", "2 pages", "Effort: low", "+37 clicks/month")

    def test_quick_wins_capped(self) -> None:
        """More than five quick wins end with a more-note."""
        issues = [_issue(f"WARN_{i:02d}", "technical", "warning") for i in range(12)]
        data = make_report_data(issues=issues)
        wins = section(build_document(data, "summary", settings=settings()), "Top Quick Wins")

        assert len(wins.blocks[0].items) == 5
        assert wins.blocks[-1].text == "...and 5 more quick wins"

    def test_no_quick_wins(self) -> None:
        """Without critical or warning issues a placeholder is shown."""
        data = make_report_data(issues=[_issue("SLOW_LCP", "performance", "info")])
        wins = section(build_document(data, "summary", settings=settings()), "Top Quick Wins")

        assert wins.blocks[0].text == "No critical or warning issues found."

    def test_trend_omitted_with_single_crawl(self) -> None:
        """One completed crawl is not a trend."""
        data = make_report_data(history=[HISTORY[1]])
        titles = build_document(data, "summary", settings=settings()).section_titles()

        assert "Score Trend" not in titles
        assert "AI Visibility Snapshot" in titles

    def test_no_trends_page(self, minimal_inputs) -> None:
        """No trend and no visibility drops the whole page."""
        from report_worker.reports.assembler import aggregate

        data = aggregate(minimal_inputs)
        document = build_document(data, "summary", settings=settings())

        assert document.page_kinds() == (PageKind.COVER, PageKind.CONTENT)

    def test_call_to_action_only_when_public(self) -> None:
        """Private reports have no call-to-action page."""
        data = make_report_data(config={"is_public": False})
        document = build_document(data, "summary", settings=settings())

        assert PageKind.CALL_TO_ACTION not in document.page_kinds()

    def test_default_brand_call_to_action(self, report_data) -> None:
        """The default brand links to its site."""
        text = build_document(report_data, "summary", settings=settings()).text_content()

        assert "llmboost.com" in text
        assert "Powered by LLM Boost" in text

    def test_agency_call_to_action(self) -> None:
        """A white-label brand is named in the call to action."""
        data = make_report_data(
            project={"name": "Example", "domain": "example.com", "branding": {"company_name": "Agency X"}}
        )
        document = build_document(data, "summary", settings=settings())

        assert document.brand.name == "Agency X"
        assert document.brand.is_custom is True
        assert "Contact Agency" in document.text_content()


class TestDetailedTemplate:
    """Tests for the detailed template."""

    def test_section_order(self, report_data) -> None:
        """Every section with data appears in a fixed order."""
        document = build_document(report_data, ReportType.DETAILED, settings=settings())

        assert document.section_titles() == (
            "Category Scorecard",
            "Executive Summary",
            "Issues Overview",
            "Quick Wins",
            "Readiness Coverage",
            "Score Trend",
            "Category Trends",
            "AI Visibility Snapshot",
            "Platform Details",
            "Issue Catalog",
            "Lowest Scoring Pages",
            "Grade Distribution",
            "Content Health Metrics",
            "Competitor Analysis",
            "Gap Queries",
            "Action Plan",
            "Google Search Console Data",
            "Google Analytics Data",
            "Microsoft Clarity Data",
        )
        assert PageKind.CALL_TO_ACTION not in document.page_kinds()

    def test_minimal_sections(self, minimal_inputs) -> None:
        """Sections without backing data are left out."""
        from report_worker.reports.assembler import aggregate

        data = aggregate(minimal_inputs)
        document = build_document(data, "detailed", settings=settings())

        assert document.section_titles() == ("Category Scorecard", "Quick Wins", "Issue Catalog", "Action Plan")
        text = document.text_content()
        assert "All priority issues are resolved. Keep monitoring future crawls." in text
        assert "No issues were found in this crawl." in text

    def test_scorecard_changes(self, report_data) -> None:
        """The scorecard table shows deltas against the last crawl."""
        table = section(build_document(report_data, "detailed", settings=settings()), "Category Scorecard").blocks[1]

        assert isinstance(table, Table)
        assert table.rows[0] == ("Overall", "76", "+6 vs last crawl")
        assert table.rows[4] == ("Performance", "90", "+10 vs last crawl")

    def test_quick_wins_grouped_by_pillar(self, report_data) -> None:
        """Pillar headings in order, wins sorted by impact per effort."""
        wins = section(build_document(report_data, "detailed", settings=settings()), "Quick Wins")
        headings = [b.text for b in wins.blocks if isinstance(b, Heading)]
        lists = [b for b in wins.blocks if isinstance(b, BulletList)]

        assert headings == ["Technical SEO", "Content Quality", "AI Readiness"]
        assert [i.text for i in lists[1].items] == [
            "Missing meta desc detected",
            "Thin content detected",
        ]

    def test_issue_catalog(self, report_data) -> None:
        """Issues are grouped under severity headings with counts."""
        catalog = section(build_document(report_data, "detailed", settings=settings()), "Issue Catalog")
        headings = [b.text for b in catalog.blocks if isinstance(b, Heading)]
        critical = next(b for b in catalog.blocks if isinstance(b, BulletList))

        assert catalog.subtitle == "6 issues found across 4 pages"
        assert headings == ["Critical (2)", "Warning (2)", "Info (2)"]
        assert critical.items[0].text == "AI_CRAWLER_BLOCKED | AI Readiness: Ai crawler blocked detected"
        assert critical.items[0].tags == ("2 pages | -8 pts | Visibility: medium | +37 clicks/month",)

    def test_issue_catalog_capped(self) -> None:
        """Each severity group is capped with a more-note."""
        issues = [_issue(f"INFO_{i:02d}", "content", "info") for i in range(25)]
        data = make_report_data(issues=issues)
        catalog = section(build_document(data, "detailed", settings=settings()), "Issue Catalog")

        assert catalog.blocks[-1].text == "...and 5 more info issues"

    def test_worst_pages(self, report_data) -> None:
        """The worst page is listed first."""
        table = section(build_document(report_data, "detailed", settings=settings()), "Lowest Scoring Pages").blocks[0]
        assert table.rows[0] == ("https://example.com/blog", "50", "60", "50", "40", "F", "4")

    def test_integrations(self, report_data) -> None:
        """Integration tables format their metrics."""
        document = build_document(report_data, "detailed", settings=settings())
        gsc = section(document, "Google Search Console Data").blocks[0]
        ga4 = section(document, "Google Analytics Data").blocks[0]

        assert gsc.rows[0] == ("ai seo", "2000", "60", "4.6")
        assert ga4.rows == (("Bounce Rate", "40.0%"), ("Avg Engagement Time", "61.5s"))

    def test_integrations_without_search_console(self, report_data) -> None:
        """Only the integration sources that are present get a section."""
        integrations = replace(report_data.integrations, gsc=None, clarity=None)
        data = replace(report_data, integrations=integrations)
        titles = build_document(data, "detailed", settings=settings()).section_titles()

        assert "Google Analytics Data" in titles
        assert "Google Search Console Data" not in titles
        assert "Microsoft Clarity Data" not in titles

    def test_charts_carry_legends(self, report_data) -> None:
        """Issue charts list their numbers as legend text."""
        overview = section(build_document(report_data, "detailed", settings=settings()), "Issues Overview")
        pie = overview.blocks[0]

        assert isinstance(pie, ChartBlock)
        assert [(e.label, e.value) for e in pie.legend] == [("Critical", "2"), ("Warning", "2"), ("Info", "2")]

    def test_report_id_carried(self, report_data) -> None:
        """The report id and timestamp reach the document metadata."""
        document = build_document(report_data, "detailed", settings=settings(), report_id="rep-9")

        assert document.report_id == "rep-9"
        assert document.generated_at == report_data.generated_at


class TestBuildDocument:
    """Tests for template dispatch."""

    def test_unknown_template(self, report_data) -> None:
        """An unknown template type is a validation error."""
        with pytest.raises(ValidationError) as exc_info:
            build_document(report_data, "executive", settings=settings())
        assert exc_info.value.details == {"field": "type"}

    def test_deterministic(self, report_data) -> None:
        """Building twice gives equal documents."""
        first = build_document(report_data, "detailed", settings=settings())
        second = build_document(report_data, "detailed", settings=settings())
        assert first == second

    def test_branding_color(self) -> None:
        """The caller's color overrides the default."""
        data = make_report_data(config={"branding_color": "#0ea5e9"})
        document = build_document(data, "summary", settings=settings())
        assert document.brand.color == "#0ea5e9"


class TestFormatting:
    """Tests for formatting helpers."""

    def test_fmt_score(self) -> None:
        """Scores are whole numbers; missing scores read N/A."""
        assert fmt_score(82.4) == "82"
        assert fmt_score(None) == "N/A"

    def test_fmt_delta(self) -> None:
        """Deltas are signed; zero reads as no change."""
        assert fmt_delta(4.2) == "+4 vs last crawl"
        assert fmt_delta(-3) == "-3 vs last crawl"
        assert fmt_delta(0.2) == "No change"

    def test_truncate_url(self) -> None:
        """Long URLs are cut with an ellipsis."""
        assert truncate_url("x" * 60) == "x" * 50 + "..."
        assert truncate_url("short") == "short"

    def test_capped_and_more_note(self) -> None:
        """Capping reports how many were left out."""
        shown, hidden = capped([1, 2, 3], 2)

        assert shown == (1, 2)
        assert hidden == 1
        assert more_note(hidden, "pages").text == "...and 1 more pages"
        assert more_note(hidden).style == TextStyle.NOTE
        assert more_note(0) is None
