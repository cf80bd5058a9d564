"""ROI classifier for issue remediation.

Scores how valuable fixing a single issue is: how many points it costs,
how much of the site it touches, how visible it is to AI answer engines,
and (when search impressions are known) a rough traffic estimate.

The traffic estimate is a heuristic: every 10 score points recovered is
assumed to lift click-through rate by ``CTR_IMPROVEMENT_PER_10_POINTS``.
It has no empirical derivation, so it is kept as a named constant that
callers and settings can override.
"""

from dataclasses import dataclass
from enum import Enum

from report_worker.fixes.catalog import Severity

CTR_IMPROVEMENT_PER_10_POINTS = 0.02

# Share of pages above which an issue counts as site-wide
HIGH_REACH_RATIO = 0.5
MEDIUM_REACH_RATIO = 0.2


class VisibilityImpact(str, Enum):
    """How strongly an issue affects AI visibility."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class RoiEstimate:
    """Remediation value of a single issue."""

    score_impact: int
    page_reach: int
    visibility_impact: VisibilityImpact
    traffic_estimate: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "score_impact": self.score_impact,
            "page_reach": self.page_reach,
            "visibility_impact": self.visibility_impact.value,
            "traffic_estimate": self.traffic_estimate,
        }


def page_ratio(affected_pages: int, total_pages: int) -> float:
    """Share of pages affected; 0 when nothing was crawled."""
    if total_pages <= 0:
        return 0.0
    return affected_pages / total_pages


def classify_visibility_impact(severity: Severity, ratio: float) -> VisibilityImpact:
    """Classify visibility impact from severity and page ratio only."""
    if severity == Severity.CRITICAL and ratio > HIGH_REACH_RATIO:
        return VisibilityImpact.HIGH
    if severity in (Severity.CRITICAL, Severity.WARNING) or ratio > MEDIUM_REACH_RATIO:
        return VisibilityImpact.MEDIUM
    return VisibilityImpact.LOW


def estimate_traffic(
    impressions: int | float | None,
    score_deduction: int | float,
    ctr_per_10_points: float = CTR_IMPROVEMENT_PER_10_POINTS,
) -> str | None:
    """
    Estimate monthly clicks recovered by fixing an issue.

    Returns a "+N clicks/month" label, or None when impressions are unknown
    or the estimate is not positive.
    """
    if not impressions or impressions <= 0:
        return None

    estimated_clicks = round(impressions * ctr_per_10_points * (score_deduction / 10))
    if estimated_clicks <= 0:
        return None
    return f"+{estimated_clicks} clicks/month"


class RoiClassifier:
    """Classifies issue remediation value."""

    def __init__(self, ctr_per_10_points: float = CTR_IMPROVEMENT_PER_10_POINTS):
        self.ctr_per_10_points = ctr_per_10_points

    def classify(
        self,
        severity: Severity,
        score_deduction: int,
        affected_pages: int,
        total_pages: int,
        impressions: int | float | None = None,
    ) -> RoiEstimate:
        """
        Classify a single issue.

        Args:
            severity: Issue severity
            score_deduction: Score points the issue costs
            affected_pages: Number of pages the issue was found on
            total_pages: Number of pages crawled
            impressions: Search impressions for the affected surface, if known

        Returns:
            RoiEstimate for the issue
        """
        ratio = page_ratio(affected_pages, total_pages)
        return RoiEstimate(
            score_impact=score_deduction,
            page_reach=affected_pages,
            visibility_impact=classify_visibility_impact(severity, ratio),
            traffic_estimate=estimate_traffic(
                impressions, score_deduction, self.ctr_per_10_points
            ),
        )


def classify_roi(
    severity: Severity,
    score_deduction: int,
    affected_pages: int,
    total_pages: int,
    impressions: int | float | None = None,
    ctr_per_10_points: float = CTR_IMPROVEMENT_PER_10_POINTS,
) -> RoiEstimate:
    """
    Convenience function to classify one issue.

    Args:
        severity: Issue severity
        score_deduction: Score points the issue costs
        affected_pages: Number of pages the issue was found on
        total_pages: Number of pages crawled
        impressions: Search impressions for the affected surface, if known
        ctr_per_10_points: CTR uplift assumed per 10 recovered points

    Returns:
        RoiEstimate for the issue
    """
    classifier = RoiClassifier(ctr_per_10_points=ctr_per_10_points)
    return classifier.classify(
        severity=severity,
        score_deduction=score_deduction,
        affected_pages=affected_pages,
        total_pages=total_pages,
        impressions=impressions,
    )
