"""Content health aggregation from per-page analyzer output.

Page detail is free-form analyzer output: ``llm_content_scores`` holds the
LLM rubric scores and ``extracted.text_length`` the body word count. Pages
that were never LLM-scored simply contribute nothing to the rubric averages.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from report_worker.enrichment.envelopes import coerce_number
from report_worker.reports.contract import ContentHealth
from report_worker.reports.inputs import RawPageScore
from report_worker.scoring.calculator import average

# Minimum word count for a page to count as substantive
WORD_COUNT_THRESHOLD = 300

LLM_SCORE_FIELDS = (
    "clarity",
    "authority",
    "comprehensiveness",
    "structure",
    "citation_worthiness",
)


def _word_count(detail: Mapping[str, Any]) -> int:
    extracted = detail.get("extracted")
    if not isinstance(extracted, Mapping):
        return 0
    return int(coerce_number(extracted.get("text_length")) or 0)


def _llm_scores(detail: Mapping[str, Any]) -> Mapping[str, Any] | None:
    scores = detail.get("llm_content_scores")
    return scores if isinstance(scores, Mapping) and scores else None


def aggregate_content_health(pages: Iterable[RawPageScore]) -> ContentHealth | None:
    """
    Aggregate content quality signals across scored pages.

    Args:
        pages: Page score records with analyzer detail

    Returns:
        ContentHealth, or None if there are no pages
    """
    pages = list(pages)
    if not pages:
        return None

    word_counts = [_word_count(p.detail) for p in pages]
    rubric = [s for s in (_llm_scores(p.detail) for p in pages) if s is not None]

    averages: dict[str, float | None] = {}
    for name in LLM_SCORE_FIELDS:
        averages[name] = average(coerce_number(s.get(name), default=None) for s in rubric)

    return ContentHealth(
        avg_word_count=round(sum(word_counts) / len(word_counts)),
        clarity=averages["clarity"],
        authority=averages["authority"],
        comprehensiveness=averages["comprehensiveness"],
        structure=averages["structure"],
        citation_worthiness=averages["citation_worthiness"],
        pages_above_threshold=sum(1 for w in word_counts if w >= WORD_COUNT_THRESHOLD),
        total_scored_pages=len(pages),
    )
