"""Tests for raw input parsing."""

from datetime import UTC, datetime

import pytest

from report_service.exceptions import ValidationError
from report_worker.reports.inputs import RawHistoryPoint, RawReportInputs


class TestRawReportInputs:
    """Tests for RawReportInputs.from_dict."""

    def test_complete_payload(self, raw_inputs: dict) -> None:
        """Every collaborator section is parsed."""
        inputs = RawReportInputs.from_dict(raw_inputs)

        assert inputs.project.domain == "example.com"
        assert inputs.crawl.completed_at == datetime(2024, 3, 5, 12, tzinfo=UTC)
        assert len(inputs.issues) == 11
        assert len(inputs.pages) == 4
        assert len(inputs.history) == 4
        assert inputs.scores.performance == 90.0
        assert inputs.config.prepared_for == "Acme Corp"

    def test_non_mapping_enrichments_dropped(self, raw_inputs: dict) -> None:
        """Enrichment entries that are not dictionaries are dropped up front."""
        raw_inputs["enrichments"] = [{"provider": "gsc", "data": {}}, "junk", None]
        inputs = RawReportInputs.from_dict(raw_inputs)
        assert len(inputs.enrichments) == 1

    def test_minimal_payload(self, minimal_inputs: dict) -> None:
        """Missing optional sections default to empty."""
        inputs = RawReportInputs.from_dict(minimal_inputs)

        assert inputs.project.name == "Bare"
        assert inputs.issues == ()
        assert inputs.scores is None
        assert inputs.config.is_public is False

    def test_project_name_defaults_to_domain(self) -> None:
        """A project without a name is named after its domain."""
        inputs = RawReportInputs.from_dict(
            {"project": {"domain": "x.com"}, "crawl": {"id": "c"}}
        )
        assert inputs.project.name == "x.com"

    def test_missing_sections(self) -> None:
        """Project and crawl are both required."""
        with pytest.raises(ValidationError):
            RawReportInputs.from_dict({"project": {"domain": "x.com"}})

    def test_missing_domain(self) -> None:
        """A project needs a domain."""
        with pytest.raises(ValidationError) as exc_info:
            RawReportInputs.from_dict({"project": {"name": "x"}, "crawl": {"id": "c"}})
        assert exc_info.value.details == {"field": "project.domain"}

    def test_malformed_record(self) -> None:
        """A record missing a required key is a validation error."""
        with pytest.raises(ValidationError):
            RawReportInputs.from_dict(
                {
                    "project": {"domain": "x.com"},
                    "crawl": {"id": "c"},
                    "issues": [{"code": "X"}],
                }
            )

    def test_bad_timestamp(self) -> None:
        """Unparseable timestamps are rejected."""
        with pytest.raises(ValidationError):
            RawReportInputs.from_dict(
                {"project": {"domain": "x.com"}, "crawl": {"id": "c", "completed_at": "yesterday"}}
            )


class TestRawHistoryPoint:
    """Tests for RawHistoryPoint."""

    def test_failed_crawl_not_completed(self) -> None:
        """Only complete crawls with a completion time count."""
        failed = RawHistoryPoint.from_dict(
            {"crawl_id": "x", "completed_at": "2024-01-01T00:00:00Z", "status": "failed"}
        )
        pending = RawHistoryPoint.from_dict({"crawl_id": "y"})

        assert failed.is_completed is False
        assert pending.is_completed is False

    def test_timestamp_without_offset_is_utc(self) -> None:
        """Timestamps without an offset are read as UTC."""
        point = RawHistoryPoint.from_dict(
            {"crawl_id": "x", "completed_at": "2024-01-01T00:00:00", "status": "complete"}
        )
        assert point.completed_at == datetime(2024, 1, 1, tzinfo=UTC)

    def test_naive_datetime_is_utc(self) -> None:
        """Datetime objects without tzinfo are normalized to UTC."""
        point = RawHistoryPoint.from_dict(
            {"crawl_id": "x", "completed_at": datetime(2024, 1, 1), "status": "complete"}
        )
        assert point.completed_at.tzinfo is UTC
