"""Report data contract.

``ReportData`` is the single canonical model every template and renderer
reads. It is built once per render call by the assembler and never mutated:
all sections are frozen dataclasses and every sequence is a tuple.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from report_service.exceptions import InvariantViolationError
from report_worker.fixes.catalog import EffortLevel, IssueCategory, Pillar, Severity
from report_worker.fixes.roi import RoiEstimate


class ReportVersion(str, Enum):
    """Report data schema versions."""

    V1_0 = "1.0"


CURRENT_VERSION = ReportVersion.V1_0


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _round(value: float | None, digits: int = 2) -> float | None:
    return round(value, digits) if value is not None else None


@dataclass(frozen=True)
class Branding:
    """Project branding overrides."""

    logo_url: str | None = None
    company_name: str | None = None
    primary_color: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "logo_url": self.logo_url,
            "company_name": self.company_name,
            "primary_color": self.primary_color,
        }


@dataclass(frozen=True)
class ProjectInfo:
    """Project the report describes."""

    name: str
    domain: str
    branding: Branding | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "domain": self.domain,
            "branding": self.branding.to_dict() if self.branding else None,
        }


@dataclass(frozen=True)
class CrawlInfo:
    """Crawl the report was generated from."""

    id: str
    completed_at: datetime | None
    pages_found: int
    pages_crawled: int
    pages_scored: int
    summary: str | None = None

    def __post_init__(self) -> None:
        for name in ("pages_found", "pages_crawled", "pages_scored"):
            if getattr(self, name) < 0:
                raise InvariantViolationError(f"{name} cannot be negative", field=f"crawl.{name}")

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "completed_at": _iso(self.completed_at),
            "pages_found": self.pages_found,
            "pages_crawled": self.pages_crawled,
            "pages_scored": self.pages_scored,
            "summary": self.summary,
        }


@dataclass(frozen=True)
class ReportScores:
    """Category scores plus the derived overall score and grade."""

    technical: float
    content: float
    ai_readiness: float
    performance: float | None
    overall: float
    letter_grade: str

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "technical": _round(self.technical),
            "content": _round(self.content),
            "ai_readiness": _round(self.ai_readiness),
            "performance": _round(self.performance),
            "overall": _round(self.overall),
            "letter_grade": self.letter_grade,
        }


@dataclass(frozen=True)
class ReportIssue:
    """A deduplicated issue with its remediation metadata."""

    code: str
    category: IssueCategory
    severity: Severity
    message: str
    recommendation: str
    affected_pages: int
    score_impact: int
    pillar: Pillar
    owner: str
    effort: EffortLevel
    roi: RoiEstimate | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "code": self.code,
            "category": self.category.value,
            "severity": self.severity.value,
            "message": self.message,
            "recommendation": self.recommendation,
            "affected_pages": self.affected_pages,
            "score_impact": self.score_impact,
            "pillar": self.pillar.value,
            "owner": self.owner,
            "effort": self.effort.value,
            "roi": self.roi.to_dict() if self.roi else None,
        }


@dataclass(frozen=True)
class GroupCount:
    """One bucket of a group-by view over issues."""

    key: str
    label: str
    count: int

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"key": self.key, "label": self.label, "count": self.count}


@dataclass(frozen=True)
class ReportIssues:
    """Issue list with precomputed group-by views."""

    total: int
    items: tuple[ReportIssue, ...]
    by_severity: tuple[GroupCount, ...]
    by_category: tuple[GroupCount, ...]
    occurrences: int = 0  # page-level occurrences across all items

    def __post_init__(self) -> None:
        if self.total != len(self.items):
            raise InvariantViolationError(
                f"Issue total {self.total} does not match {len(self.items)} items",
                field="issues.total",
            )
        if sum(g.count for g in self.by_severity) != self.total:
            raise InvariantViolationError(
                "Severity groups do not sum to the issue total", field="issues.by_severity"
            )
        if sum(g.count for g in self.by_category) != self.total:
            raise InvariantViolationError(
                "Category groups do not sum to the issue total", field="issues.by_category"
            )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "occurrences": self.occurrences,
            "items": [i.to_dict() for i in self.items],
            "by_severity": [g.to_dict() for g in self.by_severity],
            "by_category": [g.to_dict() for g in self.by_category],
        }


@dataclass(frozen=True)
class QuickWin:
    """An issue promoted for prominent display; ROI is always present."""

    code: str
    category: IssueCategory
    severity: Severity
    message: str
    recommendation: str
    affected_pages: int
    score_impact: int
    pillar: Pillar
    owner: str
    effort: EffortLevel
    roi: RoiEstimate

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "code": self.code,
            "category": self.category.value,
            "severity": self.severity.value,
            "message": self.message,
            "recommendation": self.recommendation,
            "affected_pages": self.affected_pages,
            "score_impact": self.score_impact,
            "pillar": self.pillar.value,
            "owner": self.owner,
            "effort": self.effort.value,
            "roi": self.roi.to_dict(),
        }


@dataclass(frozen=True)
class PageScore:
    """Per-URL score snapshot."""

    url: str
    technical: float
    content: float
    ai_readiness: float
    performance: float | None
    overall: float
    grade: str
    issue_count: int

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "url": self.url,
            "technical": _round(self.technical),
            "content": _round(self.content),
            "ai_readiness": _round(self.ai_readiness),
            "performance": _round(self.performance),
            "overall": _round(self.overall),
            "grade": self.grade,
            "issue_count": self.issue_count,
        }


@dataclass(frozen=True)
class HistoryPoint:
    """Scores of one completed crawl."""

    crawl_id: str
    completed_at: datetime
    technical: float
    content: float
    ai_readiness: float
    performance: float | None
    overall: float

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "crawl_id": self.crawl_id,
            "completed_at": _iso(self.completed_at),
            "technical": _round(self.technical),
            "content": _round(self.content),
            "ai_readiness": _round(self.ai_readiness),
            "performance": _round(self.performance),
            "overall": _round(self.overall),
        }


@dataclass(frozen=True)
class ScoreDeltas:
    """Score change against the previous completed crawl."""

    overall: float = 0.0
    technical: float = 0.0
    content: float = 0.0
    ai_readiness: float = 0.0
    performance: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "overall": round(self.overall, 1),
            "technical": round(self.technical, 1),
            "content": round(self.content, 1),
            "ai_readiness": round(self.ai_readiness, 1),
            "performance": round(self.performance, 1),
        }


@dataclass(frozen=True)
class PlatformVisibility:
    """Mention and citation rates on one AI platform."""

    provider: str
    brand_mention_rate: int  # percent
    url_citation_rate: int  # percent
    avg_position: float | None
    checks_count: int

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "provider": self.provider,
            "brand_mention_rate": self.brand_mention_rate,
            "url_citation_rate": self.url_citation_rate,
            "avg_position": _round(self.avg_position, 1),
            "checks_count": self.checks_count,
        }


@dataclass(frozen=True)
class CompetitorRow:
    """A domain co-mentioned with the subject across AI platforms."""

    domain: str
    mention_count: int
    platforms: tuple[str, ...]
    queries: tuple[str, ...]

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "domain": self.domain,
            "mention_count": self.mention_count,
            "platforms": list(self.platforms),
            "queries": list(self.queries),
        }


@dataclass(frozen=True)
class GapQuery:
    """A query where competitors were mentioned but the subject was not."""

    query: str
    platform: str
    competitor_domains: tuple[str, ...]

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "query": self.query,
            "platform": self.platform,
            "competitor_domains": list(self.competitor_domains),
        }


@dataclass(frozen=True)
class ContentHealth:
    """Aggregate content-quality signals; any score may be missing."""

    avg_word_count: int | None
    clarity: float | None
    authority: float | None
    comprehensiveness: float | None
    structure: float | None
    citation_worthiness: float | None
    pages_above_threshold: int
    total_scored_pages: int

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "avg_word_count": self.avg_word_count,
            "clarity": _round(self.clarity, 1),
            "authority": _round(self.authority, 1),
            "comprehensiveness": _round(self.comprehensiveness, 1),
            "structure": _round(self.structure, 1),
            "citation_worthiness": _round(self.citation_worthiness, 1),
            "pages_above_threshold": self.pages_above_threshold,
            "total_scored_pages": self.total_scored_pages,
        }


@dataclass(frozen=True)
class SearchQueryRow:
    """One merged search-console query."""

    query: str
    impressions: int
    clicks: int
    position: float

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "query": self.query,
            "impressions": self.impressions,
            "clicks": self.clicks,
            "position": self.position,
        }


@dataclass(frozen=True)
class PageSessions:
    """Analytics sessions for one URL."""

    url: str
    sessions: int

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"url": self.url, "sessions": self.sessions}


@dataclass(frozen=True)
class SearchConsoleSummary:
    """Top search-console queries plus impressions across every query."""

    top_queries: tuple[SearchQueryRow, ...]
    total_impressions: int = 0  # includes queries beyond the top rows

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "top_queries": [q.to_dict() for q in self.top_queries],
            "total_impressions": self.total_impressions,
        }


@dataclass(frozen=True)
class AnalyticsSummary:
    """Merged analytics metrics."""

    bounce_rate: float  # 0-1
    avg_engagement: float  # seconds
    top_pages: tuple[PageSessions, ...]

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "bounce_rate": self.bounce_rate,
            "avg_engagement": self.avg_engagement,
            "top_pages": [p.to_dict() for p in self.top_pages],
        }


@dataclass(frozen=True)
class UxTelemetrySummary:
    """Merged UX telemetry."""

    avg_ux_score: float
    rage_click_pages: tuple[str, ...]

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "avg_ux_score": self.avg_ux_score,
            "rage_click_pages": list(self.rage_click_pages),
        }


@dataclass(frozen=True)
class IntegrationsSummary:
    """Normalized third-party integration data; at least one part is present."""

    gsc: SearchConsoleSummary | None = None
    ga4: AnalyticsSummary | None = None
    clarity: UxTelemetrySummary | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "gsc": self.gsc.to_dict() if self.gsc else None,
            "ga4": self.ga4.to_dict() if self.ga4 else None,
            "clarity": self.clarity.to_dict() if self.clarity else None,
        }


@dataclass(frozen=True)
class GradeBucket:
    """Number of pages with a given letter grade."""

    grade: str
    count: int
    percentage: int

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"grade": self.grade, "count": self.count, "percentage": self.percentage}


@dataclass(frozen=True)
class CoverageMetric:
    """Share of crawled pages compliant with one readiness control."""

    code: str
    label: str
    description: str
    pillar: Pillar
    total_pages: int
    affected_pages: int
    coverage_percent: int

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "code": self.code,
            "label": self.label,
            "description": self.description,
            "pillar": self.pillar.value,
            "total_pages": self.total_pages,
            "affected_pages": self.affected_pages,
            "coverage_percent": self.coverage_percent,
        }


@dataclass(frozen=True)
class ActionTier:
    """A titled slice of the issue list for the action plan."""

    priority: int
    title: str
    description: str
    items: tuple[ReportIssue, ...]

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "priority": self.priority,
            "title": self.title,
            "description": self.description,
            "items": [i.code for i in self.items],
        }


@dataclass(frozen=True)
class ReportConfig:
    """Caller-supplied rendering options."""

    branding_color: str | None = None
    prepared_for: str | None = None
    is_public: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "branding_color": self.branding_color,
            "prepared_for": self.prepared_for,
            "is_public": self.is_public,
        }


@dataclass(frozen=True)
class ReportData:
    """Canonical report model shared by every template and renderer."""

    project: ProjectInfo
    crawl: CrawlInfo
    scores: ReportScores
    issues: ReportIssues
    quick_wins: tuple[QuickWin, ...]
    pages: tuple[PageScore, ...]
    history: tuple[HistoryPoint, ...]
    score_deltas: ScoreDeltas
    generated_at: datetime
    config: ReportConfig = field(default_factory=ReportConfig)
    visibility: tuple[PlatformVisibility, ...] | None = None
    competitors: tuple[CompetitorRow, ...] | None = None
    gap_queries: tuple[GapQuery, ...] = ()
    content_health: ContentHealth | None = None
    integrations: IntegrationsSummary | None = None
    grade_distribution: tuple[GradeBucket, ...] = ()
    readiness_coverage: tuple[CoverageMetric, ...] = ()
    action_plan: tuple[ActionTier, ...] = ()
    version: ReportVersion = CURRENT_VERSION

    @property
    def has_trend(self) -> bool:
        """Trend charts need at least two completed crawls."""
        return len(self.history) > 1

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "version": self.version.value,
            "generated_at": _iso(self.generated_at),
            "project": self.project.to_dict(),
            "crawl": self.crawl.to_dict(),
            "scores": self.scores.to_dict(),
            "issues": self.issues.to_dict(),
            "quick_wins": [w.to_dict() for w in self.quick_wins],
            "pages": [p.to_dict() for p in self.pages],
            "history": [h.to_dict() for h in self.history],
            "score_deltas": self.score_deltas.to_dict(),
            "visibility": (
                [v.to_dict() for v in self.visibility] if self.visibility is not None else None
            ),
            "competitors": (
                [c.to_dict() for c in self.competitors] if self.competitors is not None else None
            ),
            "gap_queries": [g.to_dict() for g in self.gap_queries],
            "content_health": self.content_health.to_dict() if self.content_health else None,
            "integrations": self.integrations.to_dict() if self.integrations else None,
            "grade_distribution": [b.to_dict() for b in self.grade_distribution],
            "readiness_coverage": [c.to_dict() for c in self.readiness_coverage],
            "action_plan": [t.to_dict() for t in self.action_plan],
            "config": self.config.to_dict(),
        }
