"""Detailed report template.

The exhaustive report: every section whose backing data is present, in a
fixed order. Long lists are capped with an "...and N more" notice so two
renders of the same data always produce the same document.
"""

from report_worker.fixes.catalog import (
    CATEGORY_LABELS,
    PILLAR_LABELS,
    PILLAR_ORDER,
    SEVERITY_LABELS,
    SEVERITY_ORDER,
    EffortLevel,
)
from report_worker.reports.contract import IntegrationsSummary, QuickWin, ReportData
from report_worker.templates import visuals
from report_worker.templates.document import (
    Block,
    Brand,
    BulletItem,
    BulletList,
    Document,
    Heading,
    Page,
    PageKind,
    Section,
    Table,
    TextBlock,
    TextStyle,
)
from report_worker.templates.formatting import (
    capped,
    fmt_delta,
    fmt_long_date,
    fmt_percent,
    fmt_score,
    humanize,
    more_note,
    truncate_url,
)

QUICK_WINS_PER_PILLAR = 3
COVERAGE_LIMIT = 6
ISSUES_PER_SEVERITY = 20
WORST_PAGES_LIMIT = 20
COMPETITOR_QUERY_LIMIT = 3
GAP_QUERY_LIMIT = 10
ACTION_ITEMS_PER_TIER = 10
GSC_QUERY_LIMIT = 15
GA4_PAGE_LIMIT = 10
RAGE_CLICK_LIMIT = 10

# Quick wins within a pillar are ordered by impact per unit of effort
EFFORT_WEIGHT = {
    EffortLevel.LOW: 1,
    EffortLevel.MEDIUM: 2,
    EffortLevel.HIGH: 3,
}


def _cover(data: ReportData) -> Page:
    blocks: list[Block] = [
        visuals.score_ring(data.scores, size=160),
        TextBlock("AI-Readiness Report", TextStyle.TITLE),
        TextBlock(data.project.domain, TextStyle.SUBTITLE),
        TextBlock(
            f"{data.crawl.pages_scored} pages analyzed | {data.scores.letter_grade} Grade"
            " | Detailed Analysis",
            TextStyle.MUTED,
        ),
        TextBlock(f"Overall Score: {fmt_score(data.scores.overall)}/100", TextStyle.EMPHASIS),
    ]
    if data.config.prepared_for:
        blocks.append(TextBlock(f"Prepared for {data.config.prepared_for}", TextStyle.MUTED))
    if data.crawl.completed_at:
        blocks.append(TextBlock(f"Crawl completed {fmt_long_date(data.crawl.completed_at)}", TextStyle.MUTED))
    return Page(kind=PageKind.COVER, sections=(Section(title=None, blocks=tuple(blocks)),))


def _overview_page(data: ReportData, brand: Brand) -> Page:
    scores = data.scores
    deltas = data.score_deltas
    sections = [
        Section(
            title="Category Scorecard",
            blocks=(
                visuals.category_radar(scores, brand.color),
                Table(
                    headers=("Category", "Score", "Change"),
                    rows=(
                        ("Overall", fmt_score(scores.overall), fmt_delta(deltas.overall)),
                        ("Technical SEO", fmt_score(scores.technical), fmt_delta(deltas.technical)),
                        ("Content Quality", fmt_score(scores.content), fmt_delta(deltas.content)),
                        ("AI Readiness", fmt_score(scores.ai_readiness), fmt_delta(deltas.ai_readiness)),
                        ("Performance", fmt_score(scores.performance), fmt_delta(deltas.performance)),
                    ),
                    column_widths=(3, 1, 2),
                ),
            ),
        )
    ]

    if data.crawl.summary:
        sections.append(Section(title="Executive Summary", blocks=(TextBlock(data.crawl.summary),)))

    if data.issues.total > 0:
        sections.append(
            Section(
                title="Issues Overview",
                blocks=(visuals.severity_pie(data.issues), visuals.category_bars(data.issues)),
            )
        )

    return Page(kind=PageKind.CONTENT, sections=tuple(sections))


def _quick_win_item(win: QuickWin) -> BulletItem:
    meta = f"+{win.score_impact} pts | {win.affected_pages} pages affected"
    if win.roi.traffic_estimate:
        meta += f" | {win.roi.traffic_estimate}"
    return BulletItem(
        text=win.message,
        detail=win.recommendation,
        tags=(
            win.owner,
            f"Effort: {win.effort.value}",
            f"Visibility: {win.roi.visibility_impact.value}",
            meta,
        ),
    )


def _quick_wins_page(data: ReportData) -> Page:
    blocks: list[Block] = []
    for pillar in PILLAR_ORDER:
        wins = [w for w in data.quick_wins if w.pillar == pillar]
        if not wins:
            continue
        wins.sort(key=lambda w: -w.score_impact / EFFORT_WEIGHT[w.effort])
        shown, hidden = capped(wins, QUICK_WINS_PER_PILLAR)
        blocks.append(Heading(PILLAR_LABELS[pillar], level=3))
        blocks.append(BulletList(items=tuple(_quick_win_item(w) for w in shown)))
        note = more_note(hidden, "quick wins")
        if note:
            blocks.append(note)

    if not blocks:
        blocks.append(TextBlock("All priority issues are resolved. Keep monitoring future crawls."))

    sections = [
        Section(
            title="Quick Wins",
            subtitle="Top recommendations sorted by impact-to-effort ratio",
            blocks=tuple(blocks),
        )
    ]

    if data.readiness_coverage:
        shown, _ = capped(data.readiness_coverage, COVERAGE_LIMIT)
        sections.append(
            Section(
                title="Readiness Coverage",
                subtitle="Share of pages meeting core technical and AI-readiness controls",
                blocks=(
                    Table(
                        headers=("Control", "Pillar", "Coverage", "Pages Affected"),
                        rows=tuple(
                            (
                                m.label,
                                PILLAR_LABELS[m.pillar],
                                fmt_percent(m.coverage_percent),
                                f"{m.affected_pages} of {m.total_pages}",
                            )
                            for m in shown
                        ),
                        column_widths=(3, 2, 1, 2),
                    ),
                ),
            )
        )

    return Page(kind=PageKind.CONTENT, sections=tuple(sections))


def _trend_page(data: ReportData, brand: Brand) -> Page:
    return Page(
        kind=PageKind.CONTENT,
        sections=(
            Section(
                title="Score Trend",
                subtitle="Overall score progression across crawls",
                blocks=(visuals.overall_trend(data.history, brand.color),),
            ),
            Section(title="Category Trends", blocks=(visuals.category_trend(data.history),)),
        ),
    )


def _visibility_page(data: ReportData, brand: Brand) -> Page:
    platforms = data.visibility or ()
    rows = []
    for p in platforms:
        detail = f"Mentions: {p.brand_mention_rate}% | Citations: {p.url_citation_rate}%"
        if p.avg_position is not None:
            detail += f" | Avg Position: {p.avg_position:.1f}"
        detail += f" | {p.checks_count} checks"
        rows.append((humanize(p.provider), detail))

    return Page(
        kind=PageKind.CONTENT,
        sections=(
            Section(
                title="AI Visibility Snapshot",
                subtitle="How your brand appears across AI platforms",
                blocks=(visuals.visibility_bars(platforms, brand.color),),
            ),
            Section(
                title="Platform Details",
                blocks=(Table(headers=None, rows=tuple(rows), column_widths=(1, 4)),),
            ),
        ),
    )


def _issue_catalog_page(data: ReportData) -> Page:
    blocks: list[Block] = [
        TextBlock(
            "Issues are grouped by severity level. Each issue includes a "
            "recommendation and estimated impact."
        )
    ]
    for severity in SEVERITY_ORDER:
        group = [i for i in data.issues.items if i.severity == severity]
        if not group:
            continue
        shown, hidden = capped(group, ISSUES_PER_SEVERITY)
        blocks.append(Heading(f"{SEVERITY_LABELS[severity]} ({len(group)})", level=3))

        items = []
        for issue in shown:
            meta = f"{issue.affected_pages} pages | -{issue.score_impact} pts"
            if issue.roi:
                meta += f" | Visibility: {issue.roi.visibility_impact.value}"
                if issue.roi.traffic_estimate:
                    meta += f" | {issue.roi.traffic_estimate}"
            items.append(
                BulletItem(
                    text=f"{issue.code} | {CATEGORY_LABELS[issue.category]}: {issue.message}",
                    detail=issue.recommendation or None,
                    tags=(meta,),
                )
            )
        blocks.append(BulletList(items=tuple(items)))
        note = more_note(hidden, f"{severity.value} issues")
        if note:
            blocks.append(note)

    if data.issues.total == 0:
        blocks.append(TextBlock("No issues were found in this crawl.", TextStyle.MUTED))

    return Page(
        kind=PageKind.CONTENT,
        sections=(
            Section(
                title="Issue Catalog",
                subtitle=f"{data.issues.total} issues found across {data.crawl.pages_scored} pages",
                blocks=tuple(blocks),
            ),
        ),
    )


def _worst_pages_page(data: ReportData) -> Page:
    shown, hidden = capped(data.pages, WORST_PAGES_LIMIT)
    blocks: list[Block] = [
        Table(
            headers=("URL", "Overall", "Tech", "Content", "AI", "Grade", "Issues"),
            rows=tuple(
                (
                    truncate_url(p.url),
                    fmt_score(p.overall),
                    fmt_score(p.technical),
                    fmt_score(p.content),
                    fmt_score(p.ai_readiness),
                    p.grade,
                    str(p.issue_count),
                )
                for p in shown
            ),
            column_widths=(6, 1.2, 1, 1.2, 1, 1, 1),
        )
    ]
    note = more_note(hidden, "pages")
    if note:
        blocks.append(note)
    return Page(
        kind=PageKind.CONTENT,
        sections=(
            Section(
                title="Lowest Scoring Pages",
                subtitle=f"Top {WORST_PAGES_LIMIT} pages that need the most attention",
                blocks=tuple(blocks),
            ),
        ),
    )


def _quality_page(data: ReportData) -> Page | None:
    sections = []
    if data.grade_distribution:
        sections.append(
            Section(
                title="Grade Distribution",
                subtitle="Distribution of page grades across your site",
                blocks=(
                    Table(
                        headers=("Grade", "Pages", "Share"),
                        rows=tuple(
                            (b.grade, str(b.count), fmt_percent(b.percentage))
                            for b in data.grade_distribution
                        ),
                    ),
                ),
            )
        )

    health = data.content_health
    if health is not None:
        rows = [("Average Word Count", str(health.avg_word_count or 0))]
        for label, value in (
            ("Clarity Score", health.clarity),
            ("Authority Score", health.authority),
            ("Comprehensiveness", health.comprehensiveness),
            ("Structure Score", health.structure),
            ("Citation Worthiness", health.citation_worthiness),
        ):
            if value is not None:
                rows.append((label, f"{fmt_score(value)}/100"))
        rows.append(
            ("Pages Above Threshold", f"{health.pages_above_threshold} of {health.total_scored_pages}")
        )
        sections.append(
            Section(
                title="Content Health Metrics",
                subtitle="Aggregate content quality signals",
                blocks=(Table(headers=None, rows=tuple(rows), column_widths=(3, 2)),),
            )
        )

    if not sections:
        return None
    return Page(kind=PageKind.CONTENT, sections=tuple(sections))


def _competitor_page(data: ReportData) -> Page:
    items = []
    for comp in data.competitors or ():
        queries = None
        if comp.queries:
            queries = "Top queries: " + ", ".join(comp.queries[:COMPETITOR_QUERY_LIMIT])
        items.append(
            BulletItem(
                text=comp.domain,
                detail=f"{comp.mention_count} mentions across {', '.join(comp.platforms)}",
                tags=(queries,) if queries else (),
            )
        )
    sections = [
        Section(
            title="Competitor Analysis",
            subtitle="Domains that appear alongside your brand in AI responses",
            blocks=(BulletList(items=tuple(items)),),
        )
    ]

    if data.gap_queries:
        shown, hidden = capped(data.gap_queries, GAP_QUERY_LIMIT)
        blocks: list[Block] = [
            Table(
                headers=("Query", "Platform", "Competitors Cited"),
                rows=tuple(
                    (g.query, humanize(g.platform), ", ".join(g.competitor_domains)) for g in shown
                ),
                column_widths=(4, 1.5, 3),
            )
        ]
        note = more_note(hidden, "queries")
        if note:
            blocks.append(note)
        sections.append(
            Section(
                title="Gap Queries",
                subtitle="Queries where competitors are cited and your brand is not",
                blocks=tuple(blocks),
            )
        )
    return Page(kind=PageKind.CONTENT, sections=tuple(sections))


def _action_plan_page(data: ReportData) -> Page:
    blocks: list[Block] = []
    for tier in data.action_plan:
        blocks.append(Heading(tier.title, level=3))
        blocks.append(TextBlock(tier.description, TextStyle.MUTED))
        shown, hidden = capped(tier.items, ACTION_ITEMS_PER_TIER)
        blocks.append(
            BulletList(
                items=tuple(
                    BulletItem(
                        text=i.message,
                        detail=i.recommendation or None,
                        tags=(f"{i.owner} | Effort: {i.effort.value} | {i.affected_pages} pages",),
                    )
                    for i in shown
                )
            )
        )
        note = more_note(hidden)
        if note:
            blocks.append(note)

    if not blocks:
        blocks.append(TextBlock("No outstanding issues. Keep monitoring future crawls."))

    return Page(
        kind=PageKind.CONTENT,
        sections=(
            Section(
                title="Action Plan",
                subtitle="Prioritized roadmap for improving your AI readiness score",
                blocks=tuple(blocks),
            ),
        ),
    )


def _integrations_page(integrations: IntegrationsSummary) -> Page:
    sections = []

    if integrations.gsc is not None:
        shown, hidden = capped(integrations.gsc.top_queries, GSC_QUERY_LIMIT)
        blocks: list[Block] = [
            Table(
                headers=("Query", "Impressions", "Clicks", "Position"),
                rows=tuple(
                    (q.query, str(q.impressions), str(q.clicks), f"{q.position:.1f}") for q in shown
                ),
                column_widths=(4, 1.5, 1, 1),
            )
        ]
        note = more_note(hidden, "queries")
        if note:
            blocks.append(note)
        sections.append(
            Section(
                title="Google Search Console Data",
                subtitle="Top search queries driving traffic to your site",
                blocks=tuple(blocks),
            )
        )

    if integrations.ga4 is not None:
        ga4 = integrations.ga4
        blocks = [
            Table(
                headers=None,
                rows=(
                    ("Bounce Rate", f"{ga4.bounce_rate * 100:.1f}%"),
                    ("Avg Engagement Time", f"{ga4.avg_engagement:.1f}s"),
                ),
                column_widths=(3, 2),
            )
        ]
        if ga4.top_pages:
            shown_pages, hidden = capped(ga4.top_pages, GA4_PAGE_LIMIT)
            blocks.append(Heading("Top Pages by Sessions", level=3))
            blocks.append(
                Table(
                    headers=("URL", "Sessions"),
                    rows=tuple((truncate_url(p.url), str(p.sessions)) for p in shown_pages),
                    column_widths=(5, 1),
                )
            )
            note = more_note(hidden, "pages")
            if note:
                blocks.append(note)
        sections.append(Section(title="Google Analytics Data", blocks=tuple(blocks)))

    if integrations.clarity is not None:
        clarity = integrations.clarity
        blocks = [
            Table(
                headers=None,
                rows=(("Average UX Score", f"{clarity.avg_ux_score:.1f}"),),
                column_widths=(3, 2),
            )
        ]
        if clarity.rage_click_pages:
            shown_urls, hidden = capped(clarity.rage_click_pages, RAGE_CLICK_LIMIT)
            blocks.append(Heading("Pages with Rage Clicks", level=3))
            blocks.append(BulletList(items=tuple(BulletItem(text=truncate_url(u)) for u in shown_urls)))
            note = more_note(hidden, "pages")
            if note:
                blocks.append(note)
        sections.append(Section(title="Microsoft Clarity Data", blocks=tuple(blocks)))

    return Page(kind=PageKind.CONTENT, sections=tuple(sections))


def build_detailed_document(data: ReportData, brand: Brand, report_id: str | None = None) -> Document:
    """
    Assemble the detailed report.

    Pages appear in a fixed order; a page is included only when its backing
    data is present.

    Args:
        data: Report data
        brand: Resolved branding
        report_id: Optional report id carried into document metadata

    Returns:
        Document for the detailed report
    """
    pages = [_cover(data), _overview_page(data, brand), _quick_wins_page(data)]

    if data.has_trend:
        pages.append(_trend_page(data, brand))
    if data.visibility:
        pages.append(_visibility_page(data, brand))

    pages.append(_issue_catalog_page(data))

    if data.pages:
        pages.append(_worst_pages_page(data))

    quality = _quality_page(data)
    if quality is not None:
        pages.append(quality)

    if data.competitors:
        pages.append(_competitor_page(data))

    pages.append(_action_plan_page(data))

    if data.integrations is not None:
        pages.append(_integrations_page(data.integrations))

    return Document(
        title=f"AI-Readiness Report: {data.project.domain}",
        template="detailed",
        brand=brand,
        domain=data.project.domain,
        pages=tuple(pages),
        generated_at_label=fmt_long_date(data.generated_at),
        report_id=report_id,
        generated_at=data.generated_at,
    )
