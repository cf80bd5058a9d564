"""Raw collaborator inputs for report aggregation.

These are the records handed over by the crawl store, the issue catalog and
the enrichment store before anything is merged or annotated. Enrichment
envelopes stay as plain dictionaries because their shape varies by provider;
they are parsed at the aggregator boundary.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from report_service.exceptions import ValidationError


def _parse_datetime(value: Any) -> datetime | None:
    """Parse an ISO timestamp; values without an offset are taken as UTC."""
    if value is None or value == "":
        return None
    if not isinstance(value, datetime):
        try:
            value = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError as e:
            raise ValidationError(f"Invalid timestamp: {value!r}") from e
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class RawBranding:
    """Project branding as stored with the project."""

    logo_url: str | None = None
    company_name: str | None = None
    primary_color: str | None = None

    @classmethod
    def from_dict(cls, data: dict | None) -> "RawBranding | None":
        if not data:
            return None
        return cls(
            logo_url=data.get("logo_url"),
            company_name=data.get("company_name"),
            primary_color=data.get("primary_color"),
        )


@dataclass(frozen=True)
class RawProject:
    """Project the report is about."""

    name: str
    domain: str
    branding: RawBranding | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "RawProject":
        if not data.get("domain"):
            raise ValidationError("Project domain is required", field="project.domain")
        return cls(
            name=data.get("name") or data["domain"],
            domain=data["domain"],
            branding=RawBranding.from_dict(data.get("branding")),
        )


@dataclass(frozen=True)
class RawCrawl:
    """Crawl job the report is generated from."""

    id: str
    completed_at: datetime | None = None
    pages_found: int = 0
    pages_crawled: int = 0
    pages_scored: int = 0
    summary: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "RawCrawl":
        if not data.get("id"):
            raise ValidationError("Crawl id is required", field="crawl.id")
        return cls(
            id=str(data["id"]),
            completed_at=_parse_datetime(data.get("completed_at")),
            pages_found=int(data.get("pages_found") or 0),
            pages_crawled=int(data.get("pages_crawled") or 0),
            pages_scored=int(data.get("pages_scored") or 0),
            summary=data.get("summary") or None,
        )


@dataclass(frozen=True)
class RawScores:
    """Crawl-level category scores, when the score store already has them."""

    technical: float
    content: float
    ai_readiness: float
    performance: float | None = None

    @classmethod
    def from_dict(cls, data: dict | None) -> "RawScores | None":
        if not data:
            return None
        return cls(
            technical=float(data.get("technical", 0)),
            content=float(data.get("content", 0)),
            ai_readiness=float(data.get("ai_readiness", 0)),
            performance=_optional_float(data.get("performance")),
        )


@dataclass(frozen=True)
class RawIssue:
    """One issue occurrence on one page, straight from the issue catalog."""

    code: str
    category: str
    severity: str
    message: str
    recommendation: str = ""
    page_url: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "RawIssue":
        return cls(
            code=data["code"],
            category=data["category"],
            severity=data["severity"],
            message=data.get("message", ""),
            recommendation=data.get("recommendation") or "",
            page_url=data.get("page_url"),
        )


@dataclass(frozen=True)
class RawPageScore:
    """Per-page score record; ``detail`` carries the analyzer's free-form output."""

    url: str
    technical: float
    content: float
    ai_readiness: float
    lighthouse_perf: float | None = None  # 0-1
    lighthouse_seo: float | None = None  # 0-1
    overall: float | None = None
    issue_count: int = 0
    detail: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "RawPageScore":
        return cls(
            url=data["url"],
            technical=float(data.get("technical", 0)),
            content=float(data.get("content", 0)),
            ai_readiness=float(data.get("ai_readiness", 0)),
            lighthouse_perf=_optional_float(data.get("lighthouse_perf")),
            lighthouse_seo=_optional_float(data.get("lighthouse_seo")),
            overall=_optional_float(data.get("overall")),
            issue_count=int(data.get("issue_count") or 0),
            detail=dict(data.get("detail") or {}),
        )


@dataclass(frozen=True)
class RawHistoryPoint:
    """A crawl of the same project with its aggregate scores."""

    crawl_id: str
    completed_at: datetime | None
    technical: float
    content: float
    ai_readiness: float
    performance: float | None = None
    overall: float | None = None
    status: str = "complete"

    @property
    def is_completed(self) -> bool:
        return self.status == "complete" and self.completed_at is not None

    @classmethod
    def from_dict(cls, data: dict) -> "RawHistoryPoint":
        return cls(
            crawl_id=str(data["crawl_id"]),
            completed_at=_parse_datetime(data.get("completed_at")),
            technical=float(data.get("technical", 0)),
            content=float(data.get("content", 0)),
            ai_readiness=float(data.get("ai_readiness", 0)),
            performance=_optional_float(data.get("performance")),
            overall=_optional_float(data.get("overall")),
            status=data.get("status", "complete"),
        )


@dataclass(frozen=True)
class RawCompetitorMention:
    """A competitor domain seen in an AI answer."""

    domain: str
    mentioned: bool = True
    position: int | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "RawCompetitorMention":
        return cls(
            domain=data["domain"],
            mentioned=bool(data.get("mentioned", True)),
            position=data.get("position"),
        )


@dataclass(frozen=True)
class RawVisibilityCheck:
    """One query asked of one AI platform."""

    provider: str
    query: str
    brand_mentioned: bool = False
    url_cited: bool = False
    citation_position: int | None = None
    competitor_mentions: tuple[RawCompetitorMention, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "RawVisibilityCheck":
        return cls(
            provider=data["provider"],
            query=data.get("query", ""),
            brand_mentioned=bool(data.get("brand_mentioned", False)),
            url_cited=bool(data.get("url_cited", False)),
            citation_position=data.get("citation_position"),
            competitor_mentions=tuple(
                RawCompetitorMention.from_dict(m) for m in data.get("competitor_mentions") or []
            ),
        )


@dataclass(frozen=True)
class RawReportConfig:
    """Caller rendering options."""

    branding_color: str | None = None
    prepared_for: str | None = None
    is_public: bool = False

    @classmethod
    def from_dict(cls, data: dict | None) -> "RawReportConfig":
        data = data or {}
        return cls(
            branding_color=data.get("branding_color"),
            prepared_for=data.get("prepared_for"),
            is_public=bool(data.get("is_public", False)),
        )


@dataclass(frozen=True)
class RawReportInputs:
    """Everything the aggregator consumes for one report."""

    project: RawProject
    crawl: RawCrawl
    issues: tuple[RawIssue, ...] = ()
    pages: tuple[RawPageScore, ...] = ()
    history: tuple[RawHistoryPoint, ...] = ()
    scores: RawScores | None = None
    visibility_checks: tuple[RawVisibilityCheck, ...] = ()
    enrichments: tuple[dict[str, Any], ...] = ()
    config: RawReportConfig = field(default_factory=RawReportConfig)
    gsc_impressions: int | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "RawReportInputs":
        """Parse a collaborator payload (as stored on the job) into inputs."""
        if "project" not in data or "crawl" not in data:
            raise ValidationError("Report inputs need both project and crawl")
        try:
            return cls._parse(data)
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Malformed report inputs: {e!r}") from e

    @classmethod
    def _parse(cls, data: dict) -> "RawReportInputs":
        return cls(
            project=RawProject.from_dict(data["project"]),
            crawl=RawCrawl.from_dict(data["crawl"]),
            issues=tuple(RawIssue.from_dict(i) for i in data.get("issues") or []),
            pages=tuple(RawPageScore.from_dict(p) for p in data.get("pages") or []),
            history=tuple(RawHistoryPoint.from_dict(h) for h in data.get("history") or []),
            scores=RawScores.from_dict(data.get("scores")),
            visibility_checks=tuple(
                RawVisibilityCheck.from_dict(c) for c in data.get("visibility_checks") or []
            ),
            enrichments=tuple(e for e in data.get("enrichments") or [] if isinstance(e, dict)),
            config=RawReportConfig.from_dict(data.get("config")),
            gsc_impressions=data.get("gsc_impressions"),
        )
