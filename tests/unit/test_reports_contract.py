"""Tests for report data contract invariants."""

import pytest

from report_service.exceptions import InvariantViolationError
from report_worker.reports.contract import CrawlInfo, GroupCount, ReportIssues


class TestCrawlInfo:
    """Tests for CrawlInfo."""

    def test_negative_counts_rejected(self) -> None:
        """Page counts cannot be negative."""
        with pytest.raises(InvariantViolationError) as exc_info:
            CrawlInfo(id="c", completed_at=None, pages_found=1, pages_crawled=-1, pages_scored=0)
        assert exc_info.value.details == {"field": "crawl.pages_crawled"}

    def test_to_dict(self) -> None:
        """Timestamps serialize as None when absent."""
        crawl = CrawlInfo(id="c", completed_at=None, pages_found=3, pages_crawled=2, pages_scored=1)
        assert crawl.to_dict()["completed_at"] is None


class TestReportIssues:
    """Tests for ReportIssues."""

    def test_empty(self) -> None:
        """An empty issue list is valid."""
        issues = ReportIssues(total=0, items=(), by_severity=(), by_category=())
        assert issues.to_dict()["items"] == []

    def test_total_must_match_items(self) -> None:
        """The total is the number of items."""
        with pytest.raises(InvariantViolationError):
            ReportIssues(total=1, items=(), by_severity=(), by_category=())

    def test_groups_must_sum_to_total(self, report_data) -> None:
        """Severity groups summing to the wrong total are rejected."""
        issues = report_data.issues
        with pytest.raises(InvariantViolationError):
            ReportIssues(
                total=issues.total,
                items=issues.items,
                by_severity=(GroupCount(key="critical", label="Critical", count=1),),
                by_category=issues.by_category,
            )
