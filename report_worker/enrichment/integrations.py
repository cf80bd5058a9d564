"""Merge third-party integration exports into report summaries.

Search Console queries, GA4 analytics and Clarity UX telemetry are merged
independently. Absence is reported differently per source: a Search Console
summary with no usable query is ``None``, while GA4 metrics that no envelope
reported default to 0.
"""

from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from report_worker.enrichment.envelopes import (
    Envelope,
    Provider,
    by_provider,
    coerce_number,
    iter_records,
    parse_envelopes,
    resolve_shapes,
)
from report_worker.reports.contract import (
    AnalyticsSummary,
    IntegrationsSummary,
    PageSessions,
    SearchConsoleSummary,
    SearchQueryRow,
    UxTelemetrySummary,
)

logger = structlog.get_logger(__name__)

TOP_QUERIES_LIMIT = 20
TOP_PAGES_LIMIT = 20


def merge_search_console(envelopes: Iterable[Envelope]) -> SearchConsoleSummary | None:
    """
    Merge Search Console query records.

    Duplicate queries (exact string match) have impressions and clicks
    summed and positions averaged. The result keeps the top 20 queries by
    impressions; the impression total covers every merged query.

    Args:
        envelopes: Parsed envelopes (non-GSC envelopes are ignored)

    Returns:
        SearchConsoleSummary, or None if no usable query record was found
    """
    merged: dict[str, dict[str, Any]] = {}

    for envelope in by_provider(envelopes, Provider.GSC):
        shapes = resolve_shapes(envelope.data, list_key="queries", single_key="query")
        for record in iter_records(shapes):
            if not isinstance(record, Mapping):
                continue
            query = record.get("query")
            if not query:
                continue
            query = str(query)

            entry = merged.setdefault(query, {"impressions": 0, "clicks": 0, "positions": []})
            entry["impressions"] += int(coerce_number(record.get("impressions")) or 0)
            entry["clicks"] += int(coerce_number(record.get("clicks")) or 0)
            entry["positions"].append(coerce_number(record.get("position")) or 0.0)

    if not merged:
        return None

    rows = [
        SearchQueryRow(
            query=query,
            impressions=entry["impressions"],
            clicks=entry["clicks"],
            position=round(sum(entry["positions"]) / len(entry["positions"]), 1),
        )
        for query, entry in merged.items()
    ]
    rows.sort(key=lambda r: r.impressions, reverse=True)

    return SearchConsoleSummary(
        top_queries=tuple(rows[:TOP_QUERIES_LIMIT]),
        total_impressions=sum(r.impressions for r in rows),
    )


def merge_analytics(envelopes: Iterable[Envelope]) -> AnalyticsSummary | None:
    """
    Merge GA4 analytics exports.

    Bounce rate and engagement are averaged over the envelopes that reported
    each metric (counted independently). Sessions are summed per URL across
    single-page and page-list records.

    Args:
        envelopes: Parsed envelopes (non-GA4 envelopes are ignored)

    Returns:
        AnalyticsSummary, or None if there were no GA4 envelopes
    """
    ga4 = by_provider(envelopes, Provider.GA4)
    if not ga4:
        return None

    bounce_total = 0.0
    bounce_count = 0
    engagement_total = 0.0
    engagement_count = 0
    sessions: dict[str, int] = {}

    for envelope in ga4:
        data = envelope.data

        bounce = coerce_number(data.get("bounceRate"), default=None)
        if bounce is not None:
            bounce_total += bounce
            bounce_count += 1

        engagement = coerce_number(data.get("avgEngagement"), default=None)
        if engagement is not None:
            engagement_total += engagement
            engagement_count += 1

        shapes = resolve_shapes(data, list_key="pages", single_key="url")
        for record in iter_records(shapes):
            if not isinstance(record, Mapping) or not record.get("url"):
                continue
            if record is data and record.get("sessions") is None:
                continue
            url = str(record["url"])
            sessions[url] = sessions.get(url, 0) + int(coerce_number(record.get("sessions")) or 0)

    top_pages = [PageSessions(url=url, sessions=count) for url, count in sessions.items()]
    top_pages.sort(key=lambda p: p.sessions, reverse=True)

    return AnalyticsSummary(
        bounce_rate=round(bounce_total / bounce_count, 3) if bounce_count else 0.0,
        avg_engagement=round(engagement_total / engagement_count, 1) if engagement_count else 0.0,
        top_pages=tuple(top_pages[:TOP_PAGES_LIMIT]),
    )


def merge_ux_telemetry(envelopes: Iterable[Envelope]) -> UxTelemetrySummary | None:
    """
    Merge Clarity UX telemetry.

    Args:
        envelopes: Parsed envelopes (non-Clarity envelopes are ignored)

    Returns:
        UxTelemetrySummary, or None if there were no Clarity envelopes
    """
    clarity = by_provider(envelopes, Provider.CLARITY)
    if not clarity:
        return None

    ux_total = 0.0
    ux_count = 0
    rage_pages: set[str] = set()

    for envelope in clarity:
        data = envelope.data

        ux_score = coerce_number(data.get("uxScore"), default=None)
        if ux_score is not None:
            ux_total += ux_score
            ux_count += 1

        shapes = resolve_shapes(
            data, list_key="rageClicks", single_key="rageClickUrl", single_value=True
        )
        for url in iter_records(shapes):
            if url:
                rage_pages.add(str(url))

    return UxTelemetrySummary(
        avg_ux_score=round(ux_total / ux_count, 1) if ux_count else 0.0,
        rage_click_pages=tuple(sorted(rage_pages)),
    )


def aggregate_integrations(raw_envelopes: Iterable[Any]) -> IntegrationsSummary | None:
    """
    Merge all integration exports for a report.

    Args:
        raw_envelopes: Raw ``{provider, data}`` envelopes

    Returns:
        IntegrationsSummary, or None when no source produced anything
    """
    envelopes = parse_envelopes(raw_envelopes)

    gsc = merge_search_console(envelopes)
    ga4 = merge_analytics(envelopes)
    clarity = merge_ux_telemetry(envelopes)

    if gsc is None and ga4 is None and clarity is None:
        return None

    logger.debug(
        "integrations_merged",
        gsc_queries=len(gsc.top_queries) if gsc else 0,
        ga4_pages=len(ga4.top_pages) if ga4 else 0,
        rage_click_pages=len(clarity.rage_click_pages) if clarity else 0,
    )
    return IntegrationsSummary(gsc=gsc, ga4=ga4, clarity=clarity)
