"""Shared text formatting and branding resolution for templates."""

import re
from collections.abc import Sequence
from datetime import datetime
from typing import TypeVar

from report_service.config import Settings, get_settings
from report_worker.charts.primitives import PRIMARY
from report_worker.reports.contract import ReportData
from report_worker.templates.document import Brand, TextBlock, TextStyle

T = TypeVar("T")

URL_DISPLAY_LIMIT = 50
HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


def resolve_brand(data: ReportData, settings: Settings | None = None) -> Brand:
    """
    Resolve the brand used for document chrome.

    The caller's branding color wins over the project's primary color; a
    project without branding falls back to the default brand.
    """
    settings = settings or get_settings()
    branding = data.project.branding

    color = data.config.branding_color
    if color is None and branding is not None and HEX_COLOR.match(branding.primary_color or ""):
        color = branding.primary_color

    name = settings.default_brand_name
    logo_url = None
    is_custom = False
    if branding is not None:
        if branding.company_name:
            name = branding.company_name
            is_custom = True
        logo_url = branding.logo_url

    return Brand(
        name=name,
        color=color or settings.default_brand_color or PRIMARY,
        url=settings.default_brand_url,
        logo_url=logo_url,
        is_custom=is_custom,
    )


def fmt_score(value: float | None) -> str:
    """Scores are shown as whole numbers."""
    if value is None:
        return "N/A"
    return str(round(value))


def fmt_delta(delta: float) -> str:
    """Delta against the previous crawl, e.g. "+4 vs last crawl"."""
    rounded = round(delta)
    if rounded > 0:
        return f"+{rounded} vs last crawl"
    if rounded < 0:
        return f"{rounded} vs last crawl"
    return "No change"


def fmt_short_date(value: datetime) -> str:
    """Axis label like "Mar 5"."""
    return f"{value.strftime('%b')} {value.day}"


def fmt_long_date(value: datetime | None) -> str:
    if value is None:
        return "Unknown date"
    return f"{value.strftime('%B')} {value.day}, {value.year}"


def fmt_percent(value: float) -> str:
    return f"{round(value)}%"


def truncate_url(url: str, limit: int = URL_DISPLAY_LIMIT) -> str:
    if len(url) <= limit:
        return url
    return url[:limit] + "..."


def capped(items: Sequence[T], limit: int) -> tuple[tuple[T, ...], int]:
    """First ``limit`` items and the number left out."""
    return tuple(items[:limit]), max(len(items) - limit, 0)


def more_note(hidden: int, noun: str = "items") -> TextBlock | None:
    """The "...and N more" notice shown under truncated lists."""
    if hidden <= 0:
        return None
    return TextBlock(text=f"...and {hidden} more {noun}", style=TextStyle.NOTE)


def humanize(value: str) -> str:
    """Enum value to label, e.g. "ai_readiness" -> "Ai Readiness"."""
    return value.replace("_", " ").title()
