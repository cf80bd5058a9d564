"""Issue catalog metadata used when annotating crawl issues for reports.

Maps issue codes emitted by the crawler to the remediation metadata the
reports need: how much an issue costs in score, which pillar owns it, who
usually fixes it, and how much effort the fix takes. Also defines the
readiness controls whose page coverage is reported.
"""

from dataclasses import dataclass
from enum import Enum


class Severity(str, Enum):
    """Issue severity levels, in display order."""

    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class IssueCategory(str, Enum):
    """Scoring categories an issue is filed under."""

    TECHNICAL = "technical"
    CONTENT = "content"
    AI_READINESS = "ai_readiness"
    PERFORMANCE = "performance"


class Pillar(str, Enum):
    """Grouping axis for quick wins (distinct from scoring categories)."""

    TECHNICAL = "technical"
    CONTENT = "content"
    AI_READINESS = "ai_readiness"


class EffortLevel(str, Enum):
    """Relative effort needed to fix an issue."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


SEVERITY_ORDER: tuple[Severity, ...] = (Severity.CRITICAL, Severity.WARNING, Severity.INFO)
CATEGORY_ORDER: tuple[IssueCategory, ...] = (
    IssueCategory.TECHNICAL,
    IssueCategory.CONTENT,
    IssueCategory.AI_READINESS,
    IssueCategory.PERFORMANCE,
)
PILLAR_ORDER: tuple[Pillar, ...] = (Pillar.TECHNICAL, Pillar.CONTENT, Pillar.AI_READINESS)

SEVERITY_LABELS = {
    Severity.CRITICAL: "Critical",
    Severity.WARNING: "Warning",
    Severity.INFO: "Info",
}

CATEGORY_LABELS = {
    IssueCategory.TECHNICAL: "Technical",
    IssueCategory.CONTENT: "Content",
    IssueCategory.AI_READINESS: "AI Readiness",
    IssueCategory.PERFORMANCE: "Performance",
}

PILLAR_LABELS = {
    Pillar.TECHNICAL: "Technical SEO",
    Pillar.CONTENT: "Content Quality",
    Pillar.AI_READINESS: "AI Readiness",
}

# Score points deducted per issue, by severity
SEVERITY_DEDUCTIONS = {
    Severity.CRITICAL: 8,
    Severity.WARNING: 4,
    Severity.INFO: 2,
}

# Effort when the code is not in ISSUE_EFFORT
DEFAULT_EFFORT = {
    Severity.CRITICAL: EffortLevel.LOW,
    Severity.WARNING: EffortLevel.MEDIUM,
    Severity.INFO: EffortLevel.MEDIUM,
}

CATEGORY_PILLARS = {
    IssueCategory.TECHNICAL: Pillar.TECHNICAL,
    IssueCategory.PERFORMANCE: Pillar.TECHNICAL,
    IssueCategory.CONTENT: Pillar.CONTENT,
    IssueCategory.AI_READINESS: Pillar.AI_READINESS,
}

PILLAR_OWNERS = {
    Pillar.TECHNICAL: "Engineering",
    Pillar.CONTENT: "Content",
    Pillar.AI_READINESS: "SEO",
}

ISSUE_EFFORT: dict[str, EffortLevel] = {
    # Technical
    "MISSING_TITLE": EffortLevel.LOW,
    "MISSING_META_DESC": EffortLevel.LOW,
    "MISSING_H1": EffortLevel.LOW,
    "MULTIPLE_H1": EffortLevel.LOW,
    "HEADING_HIERARCHY": EffortLevel.LOW,
    "BROKEN_LINKS": EffortLevel.MEDIUM,
    "MISSING_CANONICAL": EffortLevel.LOW,
    "NOINDEX_SET": EffortLevel.LOW,
    "MISSING_ALT_TEXT": EffortLevel.LOW,
    "HTTP_STATUS": EffortLevel.HIGH,
    "MISSING_OG_TAGS": EffortLevel.LOW,
    "SLOW_RESPONSE": EffortLevel.HIGH,
    "MISSING_SITEMAP": EffortLevel.MEDIUM,
    "SITEMAP_INVALID_FORMAT": EffortLevel.MEDIUM,
    "REDIRECT_CHAIN": EffortLevel.MEDIUM,
    # Content
    "THIN_CONTENT": EffortLevel.HIGH,
    "CONTENT_DEPTH": EffortLevel.HIGH,
    "CONTENT_CLARITY": EffortLevel.MEDIUM,
    "CONTENT_AUTHORITY": EffortLevel.HIGH,
    "DUPLICATE_CONTENT": EffortLevel.MEDIUM,
    "STALE_CONTENT": EffortLevel.MEDIUM,
    "NO_INTERNAL_LINKS": EffortLevel.LOW,
    "MISSING_FAQ_STRUCTURE": EffortLevel.MEDIUM,
    "POOR_READABILITY": EffortLevel.MEDIUM,
    "LOW_EEAT_SCORE": EffortLevel.HIGH,
    # AI readiness
    "MISSING_LLMS_TXT": EffortLevel.LOW,
    "AI_CRAWLER_BLOCKED": EffortLevel.LOW,
    "NO_STRUCTURED_DATA": EffortLevel.MEDIUM,
    "INCOMPLETE_SCHEMA": EffortLevel.MEDIUM,
    "CITATION_WORTHINESS": EffortLevel.HIGH,
    "NO_DIRECT_ANSWERS": EffortLevel.MEDIUM,
    "MISSING_ENTITY_MARKUP": EffortLevel.MEDIUM,
    "NO_SUMMARY_SECTION": EffortLevel.LOW,
    "POOR_QUESTION_COVERAGE": EffortLevel.HIGH,
    "INVALID_SCHEMA": EffortLevel.MEDIUM,
    "PDF_ONLY_CONTENT": EffortLevel.HIGH,
    # Performance
    "LH_PERF_LOW": EffortLevel.HIGH,
    "LH_SEO_LOW": EffortLevel.MEDIUM,
    "LH_A11Y_LOW": EffortLevel.MEDIUM,
    "LH_BP_LOW": EffortLevel.MEDIUM,
    "LARGE_PAGE_SIZE": EffortLevel.HIGH,
}


@dataclass(frozen=True)
class ReadinessControl:
    """A page-level control whose compliance share is reported."""

    code: str
    label: str
    description: str
    pillar: Pillar


READINESS_CONTROLS: tuple[ReadinessControl, ...] = (
    ReadinessControl(
        code="MISSING_LLMS_TXT",
        label="llms.txt present",
        description="Pages served from a site that publishes an llms.txt guide for AI crawlers.",
        pillar=Pillar.AI_READINESS,
    ),
    ReadinessControl(
        code="AI_CRAWLER_BLOCKED",
        label="AI crawlers allowed",
        description="Pages not blocked for AI crawlers in robots.txt.",
        pillar=Pillar.AI_READINESS,
    ),
    ReadinessControl(
        code="NO_STRUCTURED_DATA",
        label="Structured data",
        description="Pages exposing schema.org structured data.",
        pillar=Pillar.AI_READINESS,
    ),
    ReadinessControl(
        code="MISSING_CANONICAL",
        label="Canonical URL",
        description="Pages declaring a canonical URL.",
        pillar=Pillar.TECHNICAL,
    ),
    ReadinessControl(
        code="MISSING_META_DESC",
        label="Meta description",
        description="Pages with a meta description search and AI engines can quote.",
        pillar=Pillar.TECHNICAL,
    ),
    ReadinessControl(
        code="MISSING_H1",
        label="Primary heading",
        description="Pages with a single descriptive H1.",
        pillar=Pillar.TECHNICAL,
    ),
    ReadinessControl(
        code="THIN_CONTENT",
        label="Substantive content",
        description="Pages with enough body text to be cited.",
        pillar=Pillar.CONTENT,
    ),
    ReadinessControl(
        code="MISSING_FAQ_STRUCTURE",
        label="Question coverage",
        description="Pages that answer common questions in a scannable format.",
        pillar=Pillar.CONTENT,
    ),
)


def get_pillar(category: IssueCategory) -> Pillar:
    """Get the quick-win pillar for a scoring category."""
    return CATEGORY_PILLARS[category]


def get_owner(pillar: Pillar) -> str:
    """Get the team that usually owns fixes for a pillar."""
    return PILLAR_OWNERS[pillar]


def get_effort(code: str, severity: Severity) -> EffortLevel:
    """Get the effort level for an issue code, falling back on severity."""
    return ISSUE_EFFORT.get(code, DEFAULT_EFFORT[severity])


def get_deduction(severity: Severity) -> int:
    """Get the score deduction for an issue of the given severity."""
    return SEVERITY_DEDUCTIONS[severity]
