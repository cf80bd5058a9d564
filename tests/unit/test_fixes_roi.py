"""Tests for the ROI classifier."""

import pytest

from report_worker.fixes.catalog import Severity
from report_worker.fixes.roi import (
    CTR_IMPROVEMENT_PER_10_POINTS,
    RoiClassifier,
    RoiEstimate,
    VisibilityImpact,
    classify_roi,
    classify_visibility_impact,
    estimate_traffic,
    page_ratio,
)


class TestPageRatio:
    """Tests for page_ratio."""

    def test_ratio(self) -> None:
        """Affected share of total pages."""
        assert page_ratio(5, 20) == 0.25

    def test_zero_total_pages(self) -> None:
        """No crawled pages means zero reach, not a division error."""
        assert page_ratio(3, 0) == 0.0


class TestVisibilityImpact:
    """Tests for classify_visibility_impact."""

    def test_critical_site_wide_is_high(self) -> None:
        """Critical issues on more than half the site are high impact."""
        assert classify_visibility_impact(Severity.CRITICAL, 0.6) == VisibilityImpact.HIGH

    def test_critical_at_half_is_medium(self) -> None:
        """The high threshold is strictly greater than 50%."""
        assert classify_visibility_impact(Severity.CRITICAL, 0.5) == VisibilityImpact.MEDIUM

    def test_warning_is_medium(self) -> None:
        """Warnings are medium regardless of reach."""
        assert classify_visibility_impact(Severity.WARNING, 0.0) == VisibilityImpact.MEDIUM

    def test_info_with_wide_reach_is_medium(self) -> None:
        """Info issues touching more than 20% of pages are medium."""
        assert classify_visibility_impact(Severity.INFO, 0.25) == VisibilityImpact.MEDIUM

    def test_info_with_narrow_reach_is_low(self) -> None:
        """Info issues on few pages are low impact."""
        assert classify_visibility_impact(Severity.INFO, 0.2) == VisibilityImpact.LOW


class TestEstimateTraffic:
    """Tests for estimate_traffic."""

    def test_estimate(self) -> None:
        """10000 impressions * 0.02 * (8 / 10) = 160 clicks."""
        assert estimate_traffic(10000, 8) == "+160 clicks/month"

    def test_rounds_to_whole_clicks(self) -> None:
        """2300 * 0.02 * 0.8 = 36.8 rounds to 37."""
        assert estimate_traffic(2300, 8) == "+37 clicks/month"

    @pytest.mark.parametrize("impressions", [None, 0, -5])
    def test_no_impressions(self, impressions) -> None:
        """Unknown or non-positive impressions give no estimate."""
        assert estimate_traffic(impressions, 8) is None

    def test_estimate_rounding_to_zero(self) -> None:
        """Estimates that round to zero clicks are omitted."""
        assert estimate_traffic(10, 2) is None

    def test_custom_ctr(self) -> None:
        """The CTR heuristic can be overridden."""
        assert estimate_traffic(1000, 10, ctr_per_10_points=0.05) == "+50 clicks/month"

    @pytest.mark.parametrize("deduction", [-4, 0])
    def test_non_positive_deduction(self, deduction) -> None:
        """A zero or negative deduction never yields an estimate."""
        assert estimate_traffic(1000, deduction) is None


class TestRoiClassifier:
    """Tests for RoiClassifier."""

    def test_classify(self) -> None:
        """All fields are filled from the inputs."""
        roi = RoiClassifier().classify(
            severity=Severity.CRITICAL,
            score_deduction=8,
            affected_pages=12,
            total_pages=20,
            impressions=5000,
        )

        assert roi.score_impact == 8
        assert roi.page_reach == 12
        assert roi.visibility_impact == VisibilityImpact.HIGH
        assert roi.traffic_estimate == "+80 clicks/month"

    def test_classify_without_impressions(self) -> None:
        """Without impressions the traffic estimate is absent."""
        roi = classify_roi(Severity.WARNING, 4, 1, 10)

        assert roi.traffic_estimate is None
        assert roi.visibility_impact == VisibilityImpact.MEDIUM

    def test_classify_negative_deduction(self) -> None:
        """A negative deduction is carried through without a traffic estimate."""
        roi = RoiClassifier().classify(
            severity=Severity.WARNING,
            score_deduction=-4,
            affected_pages=3,
            total_pages=10,
            impressions=5000,
        )

        assert roi.score_impact == -4
        assert roi.traffic_estimate is None

    def test_default_ctr(self) -> None:
        """The classifier defaults to the module heuristic."""
        assert RoiClassifier().ctr_per_10_points == CTR_IMPROVEMENT_PER_10_POINTS

    def test_to_dict(self) -> None:
        """Serialization uses enum values."""
        roi = RoiEstimate(
            score_impact=4,
            page_reach=2,
            visibility_impact=VisibilityImpact.MEDIUM,
            traffic_estimate="+18 clicks/month",
        )

        assert roi.to_dict() == {
            "score_impact": 4,
            "page_reach": 2,
            "visibility_impact": "medium",
            "traffic_estimate": "+18 clicks/month",
        }

    def test_deterministic(self) -> None:
        """Same inputs always give the same estimate."""
        first = classify_roi(Severity.INFO, 2, 3, 10, impressions=4000)
        second = classify_roi(Severity.INFO, 2, 3, 10, impressions=4000)
        assert first == second
