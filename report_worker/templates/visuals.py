"""Chart blocks built from report data.

Each helper lays out one chart and pairs it with legend rows carrying the
plotted numbers as text, so formats that cannot draw still show the data.
"""

from report_worker.charts.bar import Bar, layout_bar_chart
from report_worker.charts.line import DataPoint, Series, layout_line_chart
from report_worker.charts.pie import Slice, layout_pie_chart
from report_worker.charts.primitives import (
    SERIES_COLORS,
    SEVERITY_COLORS,
    LegendEntry,
    score_color,
)
from report_worker.charts.radar import RadarAxis, layout_radar_chart
from report_worker.charts.ring import layout_score_ring
from report_worker.reports.contract import (
    HistoryPoint,
    PlatformVisibility,
    ReportIssues,
    ReportScores,
)
from report_worker.templates.document import ChartBlock
from report_worker.templates.formatting import fmt_percent, fmt_score, fmt_short_date, humanize

CATEGORY_COLORS = {
    "technical": SERIES_COLORS["technical"],
    "content": SERIES_COLORS["content"],
    "ai_readiness": SERIES_COLORS["ai_readiness"],
    "performance": SERIES_COLORS["performance"],
}


def score_ring(scores: ReportScores, size: float = 140) -> ChartBlock:
    return ChartBlock(layout=layout_score_ring(scores.overall, score_color(scores.overall), size=size))


def category_radar(scores: ReportScores, color: str, size: float = 200) -> ChartBlock:
    axes = (
        RadarAxis("Technical", scores.technical),
        RadarAxis("Content", scores.content),
        RadarAxis("AI Readiness", scores.ai_readiness),
        RadarAxis("Performance", scores.performance),
    )
    return ChartBlock(layout=layout_radar_chart(axes, size=size, color=color))


def overall_trend(history: tuple[HistoryPoint, ...], color: str, width: float = 450) -> ChartBlock:
    points = tuple(DataPoint(fmt_short_date(h.completed_at), h.overall) for h in history)
    layout = layout_line_chart(
        [Series(name="Overall", color=color, points=points)],
        width=width,
        height=200,
        title="Overall Score",
    )
    legend = tuple(LegendEntry(p.label, fmt_score(p.value), color) for p in points)
    return ChartBlock(layout=layout, title="Overall Score Trend", legend=legend)


def category_trend(history: tuple[HistoryPoint, ...], width: float = 450) -> ChartBlock:
    fields = ("technical", "content", "ai_readiness", "performance")
    series = []
    for name in fields:
        points = tuple(
            DataPoint(fmt_short_date(h.completed_at), getattr(h, name) or 0.0) for h in history
        )
        label = "AI Readiness" if name == "ai_readiness" else humanize(name)
        series.append(Series(name=label, color=CATEGORY_COLORS[name], points=points))

    layout = layout_line_chart(series, width=width, height=220, title="Category Scores")
    latest = history[-1]
    legend = tuple(
        LegendEntry(s.name, fmt_score(getattr(latest, name)), s.color)
        for s, name in zip(series, fields, strict=True)
    )
    return ChartBlock(layout=layout, title="Category Score Trends", legend=legend)


def visibility_bars(platforms: tuple[PlatformVisibility, ...], color: str) -> ChartBlock:
    bars = [Bar(label=humanize(p.provider), value=p.brand_mention_rate, color=color) for p in platforms]
    layout = layout_bar_chart(bars, max_value=100, title="Brand Mention Rate", value_suffix="%")
    legend = tuple(
        LegendEntry(humanize(p.provider), fmt_percent(p.brand_mention_rate), color) for p in platforms
    )
    return ChartBlock(layout=layout, title="Brand Mention Rate by Platform", legend=legend)


def severity_pie(issues: ReportIssues) -> ChartBlock:
    slices = [Slice(g.label, g.count, SEVERITY_COLORS[g.key]) for g in issues.by_severity]
    legend = tuple(LegendEntry(g.label, str(g.count), SEVERITY_COLORS[g.key]) for g in issues.by_severity)
    return ChartBlock(layout=layout_pie_chart(slices), title="Issues by Severity", legend=legend)


def category_bars(issues: ReportIssues) -> ChartBlock:
    bars = [Bar(g.label, g.count, CATEGORY_COLORS[g.key]) for g in issues.by_category]
    legend = tuple(LegendEntry(g.label, str(g.count), CATEGORY_COLORS[g.key]) for g in issues.by_category)
    return ChartBlock(
        layout=layout_bar_chart(bars, width=260, height=160),
        title="Issues by Category",
        legend=legend,
    )
