"""AI platform visibility aggregation."""

from collections.abc import Iterable

from report_worker.reports.contract import PlatformVisibility
from report_worker.reports.inputs import RawVisibilityCheck


def aggregate_visibility(
    checks: Iterable[RawVisibilityCheck],
) -> tuple[PlatformVisibility, ...] | None:
    """
    Per-platform brand mention and URL citation rates.

    Platforms keep the order in which they first appear in the checks.

    Args:
        checks: Visibility checks for the project

    Returns:
        One entry per platform, or None when there are no checks
    """
    stats: dict[str, dict] = {}

    for check in checks:
        entry = stats.setdefault(
            check.provider, {"count": 0, "mentions": 0, "citations": 0, "positions": []}
        )
        entry["count"] += 1
        if check.brand_mentioned:
            entry["mentions"] += 1
        if check.url_cited:
            entry["citations"] += 1
        if check.citation_position is not None:
            entry["positions"].append(check.citation_position)

    if not stats:
        return None

    return tuple(
        PlatformVisibility(
            provider=provider,
            brand_mention_rate=round(entry["mentions"] / entry["count"] * 100),
            url_citation_rate=round(entry["citations"] / entry["count"] * 100),
            avg_position=(
                round(sum(entry["positions"]) / len(entry["positions"]), 1)
                if entry["positions"]
                else None
            ),
            checks_count=entry["count"],
        )
        for provider, entry in stats.items()
    )
