"""Tests for score calculation and deltas."""

from datetime import UTC, datetime

import pytest

from report_worker.reports.contract import HistoryPoint, ReportScores
from report_worker.reports.inputs import RawHistoryPoint
from report_worker.scoring.calculator import (
    average,
    compute_overall,
    grade_distribution,
    letter_grade,
)
from report_worker.scoring.delta import completed_history, compute_score_deltas, find_previous
from tests.fixtures.reports import HISTORY


def point(crawl_id: str, day: int, overall: float, performance: float | None = 80.0) -> HistoryPoint:
    return HistoryPoint(
        crawl_id=crawl_id,
        completed_at=datetime(2024, 1, day, tzinfo=UTC),
        technical=overall,
        content=overall,
        ai_readiness=overall,
        performance=performance,
        overall=overall,
    )


class TestComputeOverall:
    """Tests for compute_overall."""

    def test_all_categories(self) -> None:
        """Four categories are weighted equally."""
        assert compute_overall(82, 70, 64, 90) == 76.5

    def test_without_performance(self) -> None:
        """Missing performance renormalizes the remaining weights."""
        assert compute_overall(90, 60, 60) == 70.0

    def test_bounds(self) -> None:
        """The overall score stays within the category range."""
        assert compute_overall(0, 0, 0, 0) == 0.0
        assert compute_overall(100, 100, 100, 100) == 100.0


class TestLetterGrade:
    """Tests for letter_grade."""

    @pytest.mark.parametrize(
        ("score", "grade"),
        [(100, "A"), (90, "A"), (89.9, "B"), (80, "B"), (70, "C"), (60, "D"), (59.9, "F"), (0, "F")],
    )
    def test_thresholds(self, score: float, grade: str) -> None:
        """Thresholds are inclusive lower bounds."""
        assert letter_grade(score) == grade


class TestAverage:
    """Tests for average."""

    def test_skips_none(self) -> None:
        """Null values do not count."""
        assert average([10, None, 20]) == 15.0

    def test_all_none(self) -> None:
        """Nothing present yields None."""
        assert average([None, None]) is None


class TestGradeDistribution:
    """Tests for grade_distribution."""

    def test_every_grade_listed(self) -> None:
        """Buckets cover A through F, including empty ones."""
        buckets = grade_distribution(["A", "A", "C", "F"])

        assert [b.grade for b in buckets] == ["A", "B", "C", "D", "F"]
        assert [b.count for b in buckets] == [2, 0, 1, 0, 1]
        assert [b.percentage for b in buckets] == [50, 0, 25, 0, 25]

    def test_no_pages(self) -> None:
        """No grades yields no buckets."""
        assert grade_distribution([]) == ()


class TestCompletedHistory:
    """Tests for completed_history."""

    def test_fixture_history(self) -> None:
        """Failed crawls are dropped and the rest sorted oldest first."""
        history = completed_history(RawHistoryPoint.from_dict(h) for h in HISTORY)

        assert [h.crawl_id for h in history] == ["crawl-1", "crawl-2", "crawl-3"]

    def test_missing_overall_computed(self) -> None:
        """A history point without an overall score gets one computed."""
        history = completed_history(RawHistoryPoint.from_dict(h) for h in HISTORY)
        assert history[0].overall == 59.0


class TestScoreDeltas:
    """Tests for find_previous and compute_score_deltas."""

    def test_previous_is_latest_other_crawl(self) -> None:
        """The previous crawl is found by completion time, not list position."""
        history = [point("b", 20, 70), point("a", 10, 60), point("current", 25, 80)]
        assert find_previous(history, "current").crawl_id == "b"

    def test_no_previous(self) -> None:
        """Only the current crawl in history gives zero deltas."""
        current = ReportScores(80, 80, 80, 80, 80.0, "B")
        deltas = compute_score_deltas(current, [point("current", 5, 80)], "current")

        assert deltas.to_dict() == {
            "overall": 0.0,
            "technical": 0.0,
            "content": 0.0,
            "ai_readiness": 0.0,
            "performance": 0.0,
        }

    def test_deltas(self) -> None:
        """Deltas are current minus previous, rounded to one decimal."""
        current = ReportScores(82, 70, 64, 90, 76.5, "C")
        deltas = compute_score_deltas(current, [point("prev", 1, 70.0)], "crawl-3")

        assert deltas.overall == 6.5
        assert deltas.technical == 12.0
        assert deltas.performance == 10.0

    def test_performance_missing_on_either_side(self) -> None:
        """Performance delta is zero when either crawl lacks it."""
        current = ReportScores(82, 70, 64, None, 72.0, "C")
        deltas = compute_score_deltas(current, [point("prev", 1, 70.0)], "crawl-3")
        assert deltas.performance == 0.0

    def test_newer_crawl_is_not_previous(self) -> None:
        """A crawl completed after the current one is never the baseline."""
        history = [point("c1", 1, 60), point("c2", 2, 70), point("c3", 3, 90)]

        assert find_previous(history, "c2").crawl_id == "c1"
        assert find_previous(history, "c2", datetime(2024, 1, 2, tzinfo=UTC)).crawl_id == "c1"

    def test_rerun_of_older_crawl(self) -> None:
        """Deltas for an older crawl compare against the crawl before it."""
        history = [point("c1", 1, 60), point("c2", 2, 70), point("c3", 3, 90)]
        current = ReportScores(70, 70, 70, 80, 70.0, "C")

        deltas = compute_score_deltas(current, history, "c2", datetime(2024, 1, 2, tzinfo=UTC))
        assert deltas.overall == 10.0

    def test_only_newer_crawls(self) -> None:
        """With only later crawls there is no baseline and deltas are zero."""
        current = ReportScores(70, 70, 70, 80, 70.0, "C")
        deltas = compute_score_deltas(
            current, [point("c3", 3, 90)], "c1", datetime(2024, 1, 1, tzinfo=UTC)
        )
        assert deltas.overall == 0.0

    def test_mixed_timestamp_offsets(self) -> None:
        """History mixing offset-free and Z timestamps sorts without error."""
        raw = [
            {"crawl_id": "b", "completed_at": "2024-02-01T00:00:00Z", "overall": 70},
            {"crawl_id": "a", "completed_at": "2024-01-01T00:00:00", "overall": 60},
        ]
        history = completed_history(RawHistoryPoint.from_dict(h) for h in raw)

        assert [h.crawl_id for h in history] == ["a", "b"]
