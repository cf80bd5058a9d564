"""Overall score and letter grade calculation.

The overall score is an equal-weight average of the category scores that
are present. Performance comes from Lighthouse and is missing for crawls
that skipped it; the remaining weights are then renormalized so the
overall score is always defined.
"""

from collections.abc import Iterable, Sequence

from report_worker.reports.contract import GradeBucket

CATEGORY_WEIGHTS = {
    "technical": 0.25,
    "content": 0.25,
    "ai_readiness": 0.25,
    "performance": 0.25,
}

# Minimum score for each letter grade, best first
GRADE_THRESHOLDS: tuple[tuple[str, float], ...] = (
    ("A", 90.0),
    ("B", 80.0),
    ("C", 70.0),
    ("D", 60.0),
)
FAILING_GRADE = "F"
GRADES: tuple[str, ...] = ("A", "B", "C", "D", "F")


def compute_overall(
    technical: float,
    content: float,
    ai_readiness: float,
    performance: float | None = None,
) -> float:
    """
    Weighted overall score from the four category scores.

    Args:
        technical: Technical score (0-100)
        content: Content score (0-100)
        ai_readiness: AI readiness score (0-100)
        performance: Performance score (0-100), or None if not measured

    Returns:
        Overall score rounded to one decimal
    """
    scores = {
        "technical": technical,
        "content": content,
        "ai_readiness": ai_readiness,
        "performance": performance,
    }
    present = {k: v for k, v in scores.items() if v is not None}
    total_weight = sum(CATEGORY_WEIGHTS[k] for k in present)

    weighted = sum(CATEGORY_WEIGHTS[k] * v for k, v in present.items())
    return round(weighted / total_weight, 1)


def letter_grade(score: float) -> str:
    """Map a 0-100 score to a letter grade."""
    for grade, threshold in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return FAILING_GRADE


def average(values: Iterable[float | None]) -> float | None:
    """Mean of the non-null values rounded to one decimal, or None if there are none."""
    present = [v for v in values if v is not None]
    if not present:
        return None
    return round(sum(present) / len(present), 1)


def grade_distribution(grades: Sequence[str]) -> tuple[GradeBucket, ...]:
    """Count pages per letter grade, A through F."""
    total = len(grades)
    if total == 0:
        return ()

    buckets = []
    for grade in GRADES:
        count = sum(1 for g in grades if g == grade)
        buckets.append(
            GradeBucket(
                grade=grade,
                count=count,
                percentage=round(count / total * 100),
            )
        )
    return tuple(buckets)
