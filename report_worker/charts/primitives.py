"""Backend-neutral 2-D vector primitives.

Coordinates use a top-left origin with y growing downward, in points. The
renderer adapters convert to their own coordinate systems.
"""

from dataclasses import dataclass
from enum import Enum


class TextAnchor(str, Enum):
    """Horizontal text alignment relative to the anchor point."""

    START = "start"
    MIDDLE = "middle"
    END = "end"


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str = "#e5e7eb"
    stroke_width: float = 1.0
    dashed: bool = False


@dataclass(frozen=True)
class Polyline:
    points: tuple[Point, ...]
    stroke: str
    stroke_width: float = 2.0


@dataclass(frozen=True)
class Polygon:
    points: tuple[Point, ...]
    stroke: str
    fill: str | None = None
    fill_opacity: float = 1.0
    stroke_width: float = 1.0


@dataclass(frozen=True)
class Circle:
    cx: float
    cy: float
    r: float
    fill: str | None = None
    stroke: str | None = None
    stroke_width: float = 1.0


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    fill: str


@dataclass(frozen=True)
class Wedge:
    """Circular sector; angles in degrees, clockwise from 3 o'clock."""

    cx: float
    cy: float
    r: float
    start_angle: float
    end_angle: float
    fill: str


@dataclass(frozen=True)
class Text:
    x: float
    y: float  # baseline
    text: str
    font_size: float = 9.0
    anchor: TextAnchor = TextAnchor.START
    fill: str = "#6b7280"
    bold: bool = False


Primitive = Line | Polyline | Polygon | Circle | Rect | Wedge | Text


@dataclass(frozen=True)
class ChartLayout:
    """A laid-out chart: its bounding box and the primitives to draw."""

    width: float
    height: float
    primitives: tuple[Primitive, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.primitives

    def of_type(self, kind: type) -> tuple:
        """Primitives of one type, in drawing order."""
        return tuple(p for p in self.primitives if isinstance(p, kind))


@dataclass(frozen=True)
class LegendEntry:
    """A labelled value shown next to (or instead of) a chart."""

    label: str
    value: str
    color: str


# Palette shared by charts and renderers
PRIMARY = "#4f46e5"
GRID = "#e5e7eb"
AXIS_TEXT = "#6b7280"
DARK_TEXT = "#111827"

SERIES_COLORS = {
    "overall": "#4f46e5",
    "technical": "#3b82f6",
    "content": "#10b981",
    "ai_readiness": "#8b5cf6",
    "performance": "#f59e0b",
}

SEVERITY_COLORS = {
    "critical": "#ef4444",
    "warning": "#f59e0b",
    "info": "#3b82f6",
}


def score_color(score: float) -> str:
    """Traffic-light color for a 0-100 score."""
    if score >= 80:
        return "#16a34a"
    if score >= 60:
        return "#ca8a04"
    return "#dc2626"
