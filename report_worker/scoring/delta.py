"""Score deltas against the previous completed crawl.

History arrives from the crawl store in no guaranteed order, so the
previous crawl is the one completed most recently before the current crawl,
not whatever happens to sit last in the list.
"""

from collections.abc import Iterable
from datetime import datetime

import structlog

from report_worker.reports.contract import HistoryPoint, ReportScores, ScoreDeltas
from report_worker.reports.inputs import RawHistoryPoint
from report_worker.scoring.calculator import compute_overall

logger = structlog.get_logger(__name__)


def completed_history(points: Iterable[RawHistoryPoint]) -> tuple[HistoryPoint, ...]:
    """
    Normalize raw history into completed crawls, oldest first.

    Incomplete crawls are dropped. Ties on completion time keep their input
    order so the result is stable.
    """
    completed = [p for p in points if p.is_completed]
    completed.sort(key=lambda p: p.completed_at)  # type: ignore[arg-type,return-value]

    return tuple(
        HistoryPoint(
            crawl_id=p.crawl_id,
            completed_at=p.completed_at,  # type: ignore[arg-type]
            technical=p.technical,
            content=p.content,
            ai_readiness=p.ai_readiness,
            performance=p.performance,
            overall=(
                p.overall
                if p.overall is not None
                else compute_overall(p.technical, p.content, p.ai_readiness, p.performance)
            ),
        )
        for p in completed
    )


def find_previous(
    history: Iterable[HistoryPoint],
    current_crawl_id: str,
    current_completed_at: datetime | None = None,
) -> HistoryPoint | None:
    """
    Most recent crawl completed before the current one.

    When the current crawl's completion time is not given it is taken from
    its own history point. Crawls completed after the current one are never
    chosen; without any cutoff the latest other crawl is used.
    """
    points = list(history)
    cutoff = current_completed_at
    if cutoff is None:
        cutoff = next((p.completed_at for p in points if p.crawl_id == current_crawl_id), None)

    previous: HistoryPoint | None = None
    for point in points:
        if point.crawl_id == current_crawl_id:
            continue
        if cutoff is not None and point.completed_at >= cutoff:
            continue
        if previous is None or point.completed_at > previous.completed_at:
            previous = point
    return previous


def compute_score_deltas(
    current: ReportScores,
    history: Iterable[HistoryPoint],
    current_crawl_id: str,
    current_completed_at: datetime | None = None,
) -> ScoreDeltas:
    """
    Compute per-category deltas against the previous completed crawl.

    Args:
        current: Scores of the crawl being reported
        history: Completed crawls of the same project
        current_crawl_id: Id of the crawl being reported, excluded from the search
        current_completed_at: Completion time of the crawl being reported

    Returns:
        ScoreDeltas, all zero when there is no previous crawl
    """
    previous = find_previous(history, current_crawl_id, current_completed_at)
    if previous is None:
        return ScoreDeltas()

    performance_delta = 0.0
    if current.performance is not None and previous.performance is not None:
        performance_delta = current.performance - previous.performance

    deltas = ScoreDeltas(
        overall=round(current.overall - previous.overall, 1),
        technical=round(current.technical - previous.technical, 1),
        content=round(current.content - previous.content, 1),
        ai_readiness=round(current.ai_readiness - previous.ai_readiness, 1),
        performance=round(performance_delta, 1),
    )
    logger.debug(
        "score_deltas_computed",
        previous_crawl_id=previous.crawl_id,
        overall_delta=deltas.overall,
    )
    return deltas
