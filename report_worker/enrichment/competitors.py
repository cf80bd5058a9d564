"""Competitor co-mention aggregation.

Each visibility check asks one AI platform one query; the answer may mention
competitor domains. These co-mention events are merged into one row per
competitor. The aggregator returns every triggering query; display caps are
the templates' job.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from report_worker.reports.contract import CompetitorRow, GapQuery
from report_worker.reports.inputs import RawVisibilityCheck


@dataclass(frozen=True)
class CompetitorMentionEvent:
    """A competitor domain seen in one platform's answer to one query."""

    domain: str
    platform: str
    query: str
    mentioned: bool = True


def mention_events(checks: Iterable[RawVisibilityCheck]) -> tuple[CompetitorMentionEvent, ...]:
    """Flatten visibility checks into co-mention events."""
    return tuple(
        CompetitorMentionEvent(
            domain=mention.domain,
            platform=check.provider,
            query=check.query,
            mentioned=mention.mentioned,
        )
        for check in checks
        for mention in check.competitor_mentions
    )


def aggregate_competitors(
    events: Iterable[CompetitorMentionEvent],
) -> tuple[CompetitorRow, ...] | None:
    """
    Merge co-mention events into one row per competitor domain.

    Rows are ordered by mention count (highest first), then domain. Platforms
    and queries keep first-seen order and are deduplicated.

    Args:
        events: Co-mention events; events with ``mentioned=False`` are ignored

    Returns:
        Competitor rows, or None if no competitor was ever mentioned
    """
    counts: dict[str, int] = {}
    platforms: dict[str, dict[str, None]] = {}
    queries: dict[str, dict[str, None]] = {}

    for event in events:
        if not event.mentioned or not event.domain:
            continue
        counts[event.domain] = counts.get(event.domain, 0) + 1
        platforms.setdefault(event.domain, {})[event.platform] = None
        if event.query:
            queries.setdefault(event.domain, {})[event.query] = None

    if not counts:
        return None

    rows = [
        CompetitorRow(
            domain=domain,
            mention_count=count,
            platforms=tuple(platforms.get(domain, {})),
            queries=tuple(queries.get(domain, {})),
        )
        for domain, count in counts.items()
    ]
    rows.sort(key=lambda r: (-r.mention_count, r.domain))
    return tuple(rows)


def find_gap_queries(checks: Iterable[RawVisibilityCheck]) -> tuple[GapQuery, ...]:
    """
    Queries where a competitor was mentioned and the subject was not.

    Args:
        checks: Visibility checks

    Returns:
        Gap queries in check order, one per (query, platform) pair
    """
    gaps: dict[tuple[str, str], dict[str, None]] = {}

    for check in checks:
        if check.brand_mentioned:
            continue
        cited = [m.domain for m in check.competitor_mentions if m.mentioned and m.domain]
        if not cited:
            continue
        domains = gaps.setdefault((check.query, check.provider), {})
        for domain in cited:
            domains[domain] = None

    return tuple(
        GapQuery(query=query, platform=platform, competitor_domains=tuple(domains))
        for (query, platform), domains in gaps.items()
    )
