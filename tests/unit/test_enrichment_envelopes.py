"""Tests for enrichment envelope parsing."""

import math

from report_worker.enrichment.envelopes import (
    Provider,
    RecordList,
    SingleRecord,
    by_provider,
    coerce_number,
    iter_records,
    parse_envelopes,
    resolve_shapes,
)


class TestParseEnvelopes:
    """Tests for parse_envelopes."""

    def test_parses_known_providers(self) -> None:
        """Known providers are parsed in input order."""
        envelopes = parse_envelopes(
            [
                {"provider": "ga4", "data": {"bounceRate": 0.5}},
                {"provider": "gsc", "data": {"queries": []}},
            ]
        )

        assert [e.provider for e in envelopes] == [Provider.GA4, Provider.GSC]

    def test_skips_malformed(self) -> None:
        """Unknown providers, missing data and non-mappings are skipped."""
        envelopes = parse_envelopes(
            [
                "not an envelope",
                {"provider": "semrush", "data": {}},
                {"provider": "gsc"},
                {"provider": "gsc", "data": ["wrong"]},
                {"provider": "clarity", "data": {"uxScore": 80}},
            ]
        )

        assert len(envelopes) == 1
        assert envelopes[0].provider == Provider.CLARITY

    def test_by_provider(self) -> None:
        """Filtering keeps input order."""
        envelopes = parse_envelopes(
            [
                {"provider": "gsc", "data": {"query": "a"}},
                {"provider": "ga4", "data": {}},
                {"provider": "gsc", "data": {"query": "b"}},
            ]
        )

        gsc = by_provider(envelopes, Provider.GSC)
        assert [e.data["query"] for e in gsc] == ["a", "b"]


class TestResolveShapes:
    """Tests for resolve_shapes."""

    def test_list_shape(self) -> None:
        """A list under the collection key is a RecordList."""
        shapes = resolve_shapes({"queries": [{"query": "a"}]}, "queries", "query")
        assert shapes == (RecordList(records=({"query": "a"},)),)

    def test_single_shape(self) -> None:
        """An inline record is the whole data mapping."""
        data = {"query": "a", "impressions": 3}
        shapes = resolve_shapes(data, "queries", "query")
        assert shapes == (SingleRecord(record=data),)

    def test_single_value_shape(self) -> None:
        """With single_value the record is the value under the key."""
        shapes = resolve_shapes({"rageClickUrl": "/x"}, "rageClicks", "rageClickUrl", single_value=True)
        assert shapes == (SingleRecord(record="/x"),)

    def test_both_shapes(self) -> None:
        """A list and an inline record may coexist, list first."""
        data = {"pages": [{"url": "/a", "sessions": 1}], "url": "/b", "sessions": 2}
        records = list(iter_records(resolve_shapes(data, "pages", "url")))
        assert records == [{"url": "/a", "sessions": 1}, data]

    def test_no_shapes(self) -> None:
        """Neither key present means nothing to merge."""
        assert resolve_shapes({"other": 1}, "queries", "query") == ()


class TestCoerceNumber:
    """Tests for coerce_number."""

    def test_numeric_strings(self) -> None:
        """Numeric strings are accepted."""
        assert coerce_number("12.5") == 12.5

    def test_fallbacks(self) -> None:
        """Missing, boolean, non-numeric and non-finite values fall back."""
        assert coerce_number(None) == 0.0
        assert coerce_number(True) == 0.0
        assert coerce_number("n/a") == 0.0
        assert coerce_number(math.nan) == 0.0
        assert coerce_number(math.inf, default=None) is None
