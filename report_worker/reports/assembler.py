"""Report data aggregator.

Combines crawl scores, issues, page scores, history, visibility checks and
enrichment exports into one immutable ReportData. Optional sections
(visibility, competitors, integrations, content health) are built in
isolation: if one of them fails the report still goes out with that
section set to None.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TypeVar

import structlog

from report_service.exceptions import InvariantViolationError
from report_worker.enrichment.competitors import (
    aggregate_competitors,
    find_gap_queries,
    mention_events,
)
from report_worker.enrichment.content_health import aggregate_content_health
from report_worker.enrichment.integrations import aggregate_integrations
from report_worker.enrichment.visibility import aggregate_visibility
from report_worker.fixes.catalog import (
    CATEGORY_LABELS,
    CATEGORY_ORDER,
    READINESS_CONTROLS,
    SEVERITY_LABELS,
    SEVERITY_ORDER,
    IssueCategory,
    Severity,
    get_deduction,
    get_effort,
    get_owner,
    get_pillar,
)
from report_worker.fixes.roi import CTR_IMPROVEMENT_PER_10_POINTS, RoiClassifier
from report_worker.reports.contract import (
    ActionTier,
    Branding,
    CoverageMetric,
    CrawlInfo,
    GroupCount,
    PageScore,
    ProjectInfo,
    QuickWin,
    ReportConfig,
    ReportData,
    ReportIssue,
    ReportIssues,
    ReportScores,
)
from report_worker.reports.inputs import RawIssue, RawPageScore, RawReportInputs
from report_worker.scoring.calculator import (
    average,
    compute_overall,
    grade_distribution,
    letter_grade,
)
from report_worker.scoring.delta import completed_history, compute_score_deltas

logger = structlog.get_logger(__name__)

T = TypeVar("T")

HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")

# Warnings costing at least this many points are scheduled as quick wins
QUICK_WIN_IMPACT_THRESHOLD = 3


@dataclass
class ReportAssemblerConfig:
    """Configuration for report aggregation."""

    quick_win_limit: int = 10
    ctr_per_10_points: float = CTR_IMPROVEMENT_PER_10_POINTS

    include_visibility: bool = True
    include_competitors: bool = True
    include_integrations: bool = True
    include_content_health: bool = True


class ReportAssembler:
    """Builds ReportData from raw collaborator inputs."""

    def __init__(self, config: ReportAssemblerConfig | None = None):
        self.config = config or ReportAssemblerConfig()
        self.roi = RoiClassifier(ctr_per_10_points=self.config.ctr_per_10_points)

    def assemble(
        self,
        inputs: RawReportInputs,
        generated_at: datetime | None = None,
    ) -> ReportData:
        """
        Assemble a complete ReportData.

        Args:
            inputs: Raw collaborator outputs for one report
            generated_at: Timestamp stamped on the report (defaults to now, UTC)

        Returns:
            ReportData ready for templating
        """
        log = logger.bind(crawl_id=inputs.crawl.id, domain=inputs.project.domain)

        crawl = self._build_crawl(inputs)
        pages = self._build_pages(inputs.pages)
        scores = self._build_scores(inputs, pages)
        history = completed_history(inputs.history)
        deltas = compute_score_deltas(scores, history, crawl.id, crawl.completed_at)

        # Optional collaborators
        visibility = None
        if self.config.include_visibility:
            visibility = self._optional(
                "visibility", lambda: aggregate_visibility(inputs.visibility_checks)
            )

        competitors = None
        gap_queries: tuple = ()
        if self.config.include_competitors:
            competitors = self._optional(
                "competitors",
                lambda: aggregate_competitors(mention_events(inputs.visibility_checks)),
            )
            gap_queries = self._optional(
                "gap_queries", lambda: find_gap_queries(inputs.visibility_checks)
            ) or ()

        integrations = None
        if self.config.include_integrations:
            integrations = self._optional(
                "integrations", lambda: aggregate_integrations(inputs.enrichments)
            )

        content_health = None
        if self.config.include_content_health:
            content_health = self._optional(
                "content_health", lambda: aggregate_content_health(inputs.pages)
            )

        impressions = inputs.gsc_impressions
        if impressions is None and integrations is not None and integrations.gsc is not None:
            impressions = integrations.gsc.total_impressions

        total_pages = crawl.pages_crawled or len(pages)
        issues = self._build_issues(inputs.issues)
        quick_wins = self._build_quick_wins(issues.items, total_pages, impressions)
        issues = self._attach_roi(issues, quick_wins)

        report = ReportData(
            project=self._build_project(inputs),
            crawl=crawl,
            scores=scores,
            issues=issues,
            quick_wins=quick_wins,
            pages=pages,
            history=history,
            score_deltas=deltas,
            generated_at=generated_at or datetime.now(UTC),
            config=self._build_config(inputs),
            visibility=visibility,
            competitors=competitors,
            gap_queries=gap_queries,
            content_health=content_health,
            integrations=integrations,
            grade_distribution=grade_distribution([p.grade for p in pages]),
            readiness_coverage=self._build_readiness_coverage(issues.items, len(pages)),
            action_plan=self._build_action_plan(issues.items),
        )

        log.info(
            "report_data_assembled",
            overall=scores.overall,
            issues=issues.total,
            quick_wins=len(quick_wins),
            pages=len(pages),
            history=len(history),
        )
        return report

    def _optional(self, section: str, build: Callable[[], T]) -> T | None:
        """Build an optional section, degrading to None on collaborator failure."""
        try:
            return build()
        except InvariantViolationError:
            raise
        except Exception as e:
            logger.warning("optional_section_failed", section=section, error=str(e))
            return None

    def _build_project(self, inputs: RawReportInputs) -> ProjectInfo:
        raw = inputs.project.branding
        branding = None
        if raw is not None:
            branding = Branding(
                logo_url=raw.logo_url,
                company_name=raw.company_name,
                primary_color=raw.primary_color,
            )
        return ProjectInfo(name=inputs.project.name, domain=inputs.project.domain, branding=branding)

    def _build_crawl(self, inputs: RawReportInputs) -> CrawlInfo:
        raw = inputs.crawl
        return CrawlInfo(
            id=raw.id,
            completed_at=raw.completed_at,
            pages_found=raw.pages_found,
            pages_crawled=raw.pages_crawled,
            pages_scored=raw.pages_scored,
            summary=raw.summary,
        )

    def _build_config(self, inputs: RawReportInputs) -> ReportConfig:
        raw = inputs.config
        color = raw.branding_color
        if color is not None and not HEX_COLOR.match(color):
            logger.warning("invalid_branding_color_ignored", color=color)
            color = None
        return ReportConfig(
            branding_color=color,
            prepared_for=raw.prepared_for,
            is_public=raw.is_public,
        )

    def _build_pages(self, raw_pages: tuple[RawPageScore, ...]) -> tuple[PageScore, ...]:
        """Per-page snapshots, worst first."""
        pages = []
        for raw in raw_pages:
            performance = average(
                v * 100 for v in (raw.lighthouse_perf, raw.lighthouse_seo) if v is not None
            )
            overall = raw.overall
            if overall is None:
                overall = compute_overall(raw.technical, raw.content, raw.ai_readiness, performance)
            pages.append(
                PageScore(
                    url=raw.url,
                    technical=raw.technical,
                    content=raw.content,
                    ai_readiness=raw.ai_readiness,
                    performance=performance,
                    overall=overall,
                    grade=letter_grade(overall),
                    issue_count=raw.issue_count,
                )
            )
        pages.sort(key=lambda p: (p.overall, p.url))
        return tuple(pages)

    def _build_scores(
        self, inputs: RawReportInputs, pages: tuple[PageScore, ...]
    ) -> ReportScores:
        if inputs.scores is not None:
            technical = inputs.scores.technical
            content = inputs.scores.content
            ai_readiness = inputs.scores.ai_readiness
            performance = inputs.scores.performance
        else:
            technical = average(p.technical for p in pages) or 0.0
            content = average(p.content for p in pages) or 0.0
            ai_readiness = average(p.ai_readiness for p in pages) or 0.0
            performance = average(p.performance for p in pages)

        overall = compute_overall(technical, content, ai_readiness, performance)
        return ReportScores(
            technical=technical,
            content=content,
            ai_readiness=ai_readiness,
            performance=performance,
            overall=overall,
            letter_grade=letter_grade(overall),
        )

    def _build_issues(self, raw_issues: tuple[RawIssue, ...]) -> ReportIssues:
        """Deduplicate issue occurrences by code and compute group-by views."""
        grouped: dict[str, list[RawIssue]] = {}
        for raw in raw_issues:
            grouped.setdefault(raw.code, []).append(raw)

        items = []
        for code, occurrences in grouped.items():
            first = occurrences[0]
            severity = self._parse_severity(first)
            category = self._parse_category(first)
            pillar = get_pillar(category)

            urls = {o.page_url for o in occurrences if o.page_url}
            unnamed = sum(1 for o in occurrences if not o.page_url)

            items.append(
                ReportIssue(
                    code=code,
                    category=category,
                    severity=severity,
                    message=first.message,
                    recommendation=first.recommendation,
                    affected_pages=len(urls) + unnamed,
                    score_impact=get_deduction(severity),
                    pillar=pillar,
                    owner=get_owner(pillar),
                    effort=get_effort(code, severity),
                )
            )

        items.sort(key=lambda i: (SEVERITY_ORDER.index(i.severity), -i.affected_pages))

        by_severity = tuple(
            GroupCount(key=s.value, label=SEVERITY_LABELS[s], count=count)
            for s in SEVERITY_ORDER
            if (count := sum(1 for i in items if i.severity == s))
        )
        by_category = tuple(
            GroupCount(key=c.value, label=CATEGORY_LABELS[c], count=count)
            for c in CATEGORY_ORDER
            if (count := sum(1 for i in items if i.category == c))
        )

        return ReportIssues(
            total=len(items),
            items=tuple(items),
            by_severity=by_severity,
            by_category=by_category,
            occurrences=len(raw_issues),
        )

    @staticmethod
    def _parse_severity(raw: RawIssue) -> Severity:
        try:
            return Severity(raw.severity.lower())
        except (ValueError, AttributeError) as e:
            raise InvariantViolationError(
                f"Unknown severity {raw.severity!r} for issue {raw.code}",
                field="issues.severity",
            ) from e

    @staticmethod
    def _parse_category(raw: RawIssue) -> IssueCategory:
        try:
            return IssueCategory(raw.category.lower())
        except (ValueError, AttributeError) as e:
            raise InvariantViolationError(
                f"Unknown category {raw.category!r} for issue {raw.code}",
                field="issues.category",
            ) from e

    def _build_quick_wins(
        self,
        items: tuple[ReportIssue, ...],
        total_pages: int,
        impressions: int | None,
    ) -> tuple[QuickWin, ...]:
        """Promote the top critical and warning issues, classifying ROI once each."""
        candidates = [i for i in items if i.severity in (Severity.CRITICAL, Severity.WARNING)]

        wins = []
        for issue in candidates[: self.config.quick_win_limit]:
            roi = self.roi.classify(
                severity=issue.severity,
                score_deduction=issue.score_impact,
                affected_pages=issue.affected_pages,
                total_pages=total_pages,
                impressions=impressions,
            )
            wins.append(
                QuickWin(
                    code=issue.code,
                    category=issue.category,
                    severity=issue.severity,
                    message=issue.message,
                    recommendation=issue.recommendation,
                    affected_pages=issue.affected_pages,
                    score_impact=issue.score_impact,
                    pillar=issue.pillar,
                    owner=issue.owner,
                    effort=issue.effort,
                    roi=roi,
                )
            )
        return tuple(wins)

    def _attach_roi(self, issues: ReportIssues, quick_wins: tuple[QuickWin, ...]) -> ReportIssues:
        """Share each quick win's ROI with the matching issue item."""
        roi_by_code = {w.code: w.roi for w in quick_wins}
        items = tuple(
            ReportIssue(
                code=i.code,
                category=i.category,
                severity=i.severity,
                message=i.message,
                recommendation=i.recommendation,
                affected_pages=i.affected_pages,
                score_impact=i.score_impact,
                pillar=i.pillar,
                owner=i.owner,
                effort=i.effort,
                roi=roi_by_code.get(i.code),
            )
            for i in issues.items
        )
        return ReportIssues(
            total=issues.total,
            items=items,
            by_severity=issues.by_severity,
            by_category=issues.by_category,
            occurrences=issues.occurrences,
        )

    def _build_readiness_coverage(
        self, items: tuple[ReportIssue, ...], total_pages: int
    ) -> tuple[CoverageMetric, ...]:
        """Share of scored pages passing each readiness control, least covered first."""
        if total_pages <= 0:
            return ()

        affected_by_code = {i.code: i.affected_pages for i in items}
        metrics = []
        for control in READINESS_CONTROLS:
            affected = min(affected_by_code.get(control.code, 0), total_pages)
            metrics.append(
                CoverageMetric(
                    code=control.code,
                    label=control.label,
                    description=control.description,
                    pillar=control.pillar,
                    total_pages=total_pages,
                    affected_pages=affected,
                    coverage_percent=round((total_pages - affected) / total_pages * 100),
                )
            )
        metrics.sort(key=lambda m: m.coverage_percent)
        return tuple(metrics)

    def _build_action_plan(self, items: tuple[ReportIssue, ...]) -> tuple[ActionTier, ...]:
        """Split issues into priority tiers, dropping empty ones."""
        warnings = [i for i in items if i.severity == Severity.WARNING]
        tiers = [
            ActionTier(
                priority=1,
                title="Priority 1: Critical Fixes",
                description="Issues that block AI crawlers or severely hurt visibility. Fix immediately.",
                items=tuple(i for i in items if i.severity == Severity.CRITICAL),
            ),
            ActionTier(
                priority=2,
                title="Priority 2: Quick Wins",
                description="High-impact warnings that are straightforward to fix.",
                items=tuple(i for i in warnings if i.score_impact >= QUICK_WIN_IMPACT_THRESHOLD),
            ),
            ActionTier(
                priority=3,
                title="Priority 3: Strategic Improvements",
                description="Warnings that need planning or content work.",
                items=tuple(i for i in warnings if i.score_impact < QUICK_WIN_IMPACT_THRESHOLD),
            ),
            ActionTier(
                priority=4,
                title="Priority 4: Long-term Optimization",
                description="Informational items that polish AI readiness over time.",
                items=tuple(i for i in items if i.severity == Severity.INFO),
            ),
        ]
        return tuple(t for t in tiers if t.items)


def aggregate(
    raw_inputs: RawReportInputs | dict,
    generated_at: datetime | None = None,
    config: ReportAssemblerConfig | None = None,
) -> ReportData:
    """
    Convenience function to aggregate raw inputs into ReportData.

    Args:
        raw_inputs: Parsed inputs, or the raw payload dictionary
        generated_at: Injectable generation timestamp
        config: Optional assembler configuration

    Returns:
        ReportData
    """
    if isinstance(raw_inputs, dict):
        raw_inputs = RawReportInputs.from_dict(raw_inputs)
    assembler = ReportAssembler(config)
    return assembler.assemble(raw_inputs, generated_at=generated_at)
