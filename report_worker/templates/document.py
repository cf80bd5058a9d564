"""Format-neutral document description.

Templates assemble a ``Document`` out of pages, sections and content blocks;
renderers walk it and emit their container format. Blocks only carry text,
tables and laid-out chart geometry, never backend objects.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from report_worker.charts.primitives import ChartLayout, LegendEntry


class PageKind(str, Enum):
    """Page roles; renderers style each differently."""

    COVER = "cover"
    CONTENT = "content"
    CALL_TO_ACTION = "call_to_action"


class TextStyle(str, Enum):
    """Paragraph styles shared by both renderers."""

    TITLE = "title"
    SUBTITLE = "subtitle"
    BODY = "body"
    MUTED = "muted"
    EMPHASIS = "emphasis"
    NOTE = "note"  # truncation notices and footnotes


@dataclass(frozen=True)
class Heading:
    text: str
    level: int = 2


@dataclass(frozen=True)
class TextBlock:
    text: str
    style: TextStyle = TextStyle.BODY


@dataclass(frozen=True)
class Table:
    """Rows of pre-formatted cells; ``headers`` is None for key/value tables."""

    headers: tuple[str, ...] | None
    rows: tuple[tuple[str, ...], ...]
    column_widths: tuple[float, ...] | None = None  # relative weights

    @property
    def column_count(self) -> int:
        if self.headers:
            return len(self.headers)
        return max((len(r) for r in self.rows), default=0)


@dataclass(frozen=True)
class BulletItem:
    text: str
    detail: str | None = None
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class BulletList:
    items: tuple[BulletItem, ...]


@dataclass(frozen=True)
class ChartBlock:
    """A chart plus the legend rows that carry its numbers as text."""

    layout: ChartLayout
    title: str | None = None
    legend: tuple[LegendEntry, ...] = ()


Block = Heading | TextBlock | Table | BulletList | ChartBlock


@dataclass(frozen=True)
class Section:
    title: str | None
    blocks: tuple[Block, ...]
    subtitle: str | None = None


@dataclass(frozen=True)
class Page:
    kind: PageKind
    sections: tuple[Section, ...]


@dataclass(frozen=True)
class Brand:
    """Resolved branding for chrome and accents."""

    name: str
    color: str
    url: str | None = None
    logo_url: str | None = None
    is_custom: bool = False  # agency white-label rather than the default brand


@dataclass(frozen=True)
class Document:
    """A fully assembled report document."""

    title: str
    template: str
    brand: Brand
    domain: str
    pages: tuple[Page, ...]
    generated_at_label: str
    report_id: str | None = None
    generated_at: datetime | None = None

    def page_kinds(self) -> tuple[PageKind, ...]:
        return tuple(p.kind for p in self.pages)

    def section_titles(self) -> tuple[str, ...]:
        return tuple(s.title for p in self.pages for s in p.sections if s.title)

    def text_content(self) -> list[str]:
        """Every body string in reading order, excluding page chrome."""
        parts: list[str] = []
        for page in self.pages:
            for section in page.sections:
                if section.title:
                    parts.append(section.title)
                if section.subtitle:
                    parts.append(section.subtitle)
                for block in section.blocks:
                    parts.extend(block_text(block))
        return parts


def block_text(block: Block) -> list[str]:
    """
    Text content of a block in reading order.

    Chart geometry carries no text of its own beyond what the legend and
    title repeat, so only those are included.
    """
    if isinstance(block, Heading | TextBlock):
        return [block.text]
    if isinstance(block, Table):
        cells = list(block.headers or ())
        for row in block.rows:
            cells.extend(row)
        return cells
    if isinstance(block, BulletList):
        parts: list[str] = []
        for item in block.items:
            parts.append(item.text)
            if item.detail:
                parts.append(item.detail)
            parts.extend(item.tags)
        return parts
    if isinstance(block, ChartBlock):
        parts = [block.title] if block.title else []
        for entry in block.legend:
            parts.extend((entry.label, entry.value))
        return parts
    raise TypeError(f"Unknown block type: {type(block).__name__}")
