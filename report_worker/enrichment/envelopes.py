"""Enrichment envelope parsing.

Third-party exports arrive as ``{"provider": ..., "data": {...}}`` envelopes
whose ``data`` may carry one record inline, a list of records under a
collection key, or both. The shape is resolved once here into explicit
``SingleRecord`` / ``RecordList`` variants so the merge functions never sniff
shapes themselves.
"""

import math
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


class Provider(str, Enum):
    """Enrichment providers the reports understand."""

    GSC = "gsc"
    GA4 = "ga4"
    CLARITY = "clarity"


@dataclass(frozen=True)
class Envelope:
    """A raw enrichment record tagged with its provider."""

    provider: Provider
    data: Mapping[str, Any]


@dataclass(frozen=True)
class SingleRecord:
    """The envelope data itself is one record."""

    record: Any


@dataclass(frozen=True)
class RecordList:
    """The envelope data carries a list of records."""

    records: tuple[Any, ...]


RecordShape = SingleRecord | RecordList


def parse_envelopes(raw: Iterable[Any]) -> tuple[Envelope, ...]:
    """
    Parse raw envelopes, skipping anything malformed or from unknown providers.

    Args:
        raw: Envelope dictionaries from the enrichment store

    Returns:
        Parsed envelopes in input order
    """
    envelopes = []
    for item in raw:
        if not isinstance(item, Mapping):
            logger.debug("enrichment_envelope_skipped", reason="not_a_mapping")
            continue
        try:
            provider = Provider(item.get("provider"))
        except ValueError:
            logger.debug("enrichment_envelope_skipped", provider=item.get("provider"))
            continue
        data = item.get("data")
        if not isinstance(data, Mapping):
            logger.debug("enrichment_envelope_skipped", provider=provider.value, reason="no_data")
            continue
        envelopes.append(Envelope(provider=provider, data=data))
    return tuple(envelopes)


def by_provider(envelopes: Iterable[Envelope], provider: Provider) -> tuple[Envelope, ...]:
    """Envelopes from one provider, in input order."""
    return tuple(e for e in envelopes if e.provider == provider)


def resolve_shapes(
    data: Mapping[str, Any],
    list_key: str,
    single_key: str,
    single_value: bool = False,
) -> tuple[RecordShape, ...]:
    """
    Resolve which record shapes an envelope carries.

    Args:
        data: Envelope data
        list_key: Key holding a list of records
        single_key: Key whose presence marks an inline single record
        single_value: If True the single record is the value under
            ``single_key`` rather than the whole data mapping

    Returns:
        Zero, one or two shapes (a list and an inline record may coexist)
    """
    shapes: list[RecordShape] = []

    items = data.get(list_key)
    if isinstance(items, list | tuple):
        shapes.append(RecordList(records=tuple(items)))

    if data.get(single_key):
        shapes.append(SingleRecord(record=data[single_key] if single_value else data))

    return tuple(shapes)


def iter_records(shapes: Iterable[RecordShape]) -> Iterator[Any]:
    """Flatten resolved shapes into individual records."""
    for shape in shapes:
        if isinstance(shape, RecordList):
            yield from shape.records
        else:
            yield shape.record


def coerce_number(value: Any, default: float | None = 0.0) -> float | None:
    """
    Best-effort numeric coercion for third-party values.

    Returns ``default`` for missing, non-numeric, or non-finite values.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number
