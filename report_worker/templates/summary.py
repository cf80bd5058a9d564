"""Summary report template.

A short, lead-generation oriented report: cover, scorecard with the top
quick wins, an optional trends/visibility page, and a call-to-action page
for public reports.
"""

from report_worker.reports.contract import ReportData
from report_worker.templates import visuals
from report_worker.templates.document import (
    Block,
    BulletItem,
    BulletList,
    Brand,
    Document,
    Page,
    PageKind,
    Section,
    Table,
    TextBlock,
    TextStyle,
)
from report_worker.templates.formatting import capped, fmt_long_date, fmt_score, more_note

TOP_QUICK_WINS = 5
POWERED_BY = "Powered by LLM Boost"


def _cover(data: ReportData) -> Page:
    blocks: list[Block] = [
        visuals.score_ring(data.scores, size=160),
        TextBlock("AI-Readiness Report", TextStyle.TITLE),
        TextBlock(data.project.domain, TextStyle.SUBTITLE),
        TextBlock(
            f"{data.crawl.pages_scored} pages analyzed | {data.scores.letter_grade} Grade",
            TextStyle.MUTED,
        ),
        TextBlock(f"Overall Score: {fmt_score(data.scores.overall)}/100", TextStyle.EMPHASIS),
    ]
    if data.config.prepared_for:
        blocks.append(TextBlock(f"Prepared for {data.config.prepared_for}", TextStyle.MUTED))
    return Page(kind=PageKind.COVER, sections=(Section(title=None, blocks=tuple(blocks)),))


def _scorecard_page(data: ReportData, brand: Brand) -> Page:
    scores = data.scores
    scorecard = Section(
        title="Category Scorecard",
        blocks=(
            visuals.category_radar(scores, brand.color, size=180),
            Table(
                headers=("Category", "Score"),
                rows=(
                    ("Technical SEO", fmt_score(scores.technical)),
                    ("Content Quality", fmt_score(scores.content)),
                    ("AI Readiness", fmt_score(scores.ai_readiness)),
                    ("Performance", fmt_score(scores.performance)),
                ),
                column_widths=(3, 1),
            ),
        ),
    )
    sections = [scorecard]

    if data.crawl.summary:
        sections.append(
            Section(title="Executive Summary", blocks=(TextBlock(data.crawl.summary),))
        )

    wins, hidden = capped(data.quick_wins, TOP_QUICK_WINS)
    if wins:
        items = []
        for i, win in enumerate(wins, start=1):
            tags = [f"+{win.score_impact} pts", f"{win.affected_pages} pages", f"Effort: {win.effort.value}"]
            if win.roi.traffic_estimate:
                tags.append(win.roi.traffic_estimate)
            items.append(BulletItem(text=f"{i}. {win.message}", detail=win.recommendation, tags=tuple(tags)))
        blocks: list[Block] = [BulletList(items=tuple(items))]
        note = more_note(hidden, "quick wins")
        if note:
            blocks.append(note)
    else:
        blocks = [TextBlock("No critical or warning issues found.", TextStyle.MUTED)]
    sections.append(Section(title="Top Quick Wins", blocks=tuple(blocks)))

    return Page(kind=PageKind.CONTENT, sections=tuple(sections))


def _trends_page(data: ReportData, brand: Brand) -> Page | None:
    sections = []
    if data.has_trend:
        sections.append(
            Section(title="Score Trend", blocks=(visuals.overall_trend(data.history, brand.color, width=500),))
        )
    if data.visibility:
        sections.append(
            Section(
                title="AI Visibility Snapshot",
                blocks=(visuals.visibility_bars(data.visibility, brand.color),),
            )
        )
    if not sections:
        return None
    return Page(kind=PageKind.CONTENT, sections=tuple(sections))


def _call_to_action(brand: Brand) -> Page:
    if brand.is_custom:
        pitch = f"Contact {brand.name} to implement these expert AI SEO optimizations."
        action = "Contact Agency"
    else:
        pitch = "Scan your site free and start your journey to AI visibility."
        action = (brand.url or "").removeprefix("https://") or brand.name
    blocks = (
        TextBlock("Ready to optimize for AI Search?", TextStyle.TITLE),
        TextBlock(pitch, TextStyle.SUBTITLE),
        TextBlock(action, TextStyle.EMPHASIS),
        TextBlock(POWERED_BY, TextStyle.NOTE),
    )
    return Page(kind=PageKind.CALL_TO_ACTION, sections=(Section(title=None, blocks=blocks),))


def build_summary_document(data: ReportData, brand: Brand, report_id: str | None = None) -> Document:
    """
    Assemble the summary report.

    Args:
        data: Report data
        brand: Resolved branding
        report_id: Optional report id carried into document metadata

    Returns:
        Document with cover, scorecard, optional trends and optional CTA pages
    """
    pages = [_cover(data), _scorecard_page(data, brand)]

    trends = _trends_page(data, brand)
    if trends is not None:
        pages.append(trends)

    if data.config.is_public:
        pages.append(_call_to_action(brand))

    return Document(
        title=f"AI-Readiness Report: {data.project.domain}",
        template="summary",
        brand=brand,
        domain=data.project.domain,
        pages=tuple(pages),
        generated_at_label=fmt_long_date(data.generated_at),
        report_id=report_id,
        generated_at=data.generated_at,
    )
