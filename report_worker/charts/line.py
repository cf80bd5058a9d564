"""Line chart layout for score trends."""

from collections.abc import Sequence
from dataclasses import dataclass

from report_worker.charts.primitives import (
    AXIS_TEXT,
    DARK_TEXT,
    GRID,
    ChartLayout,
    Circle,
    Line,
    Point,
    Polyline,
    Primitive,
    Rect,
    Text,
    TextAnchor,
)

GRIDLINE_VALUES = (0, 25, 50, 75, 100)
DOT_RADIUS = 3.0
LEGEND_ITEM_WIDTH = 100


@dataclass(frozen=True)
class DataPoint:
    label: str
    value: float


@dataclass(frozen=True)
class Series:
    """A named, colored series; all series share the first series' x positions."""

    name: str
    color: str
    points: tuple[DataPoint, ...]


def layout_line_chart(
    series: Sequence[Series],
    width: float = 450,
    height: float = 200,
    title: str | None = None,
    min_y: float = 0,
    max_y: float = 100,
) -> ChartLayout:
    """
    Lay out a multi-series line chart.

    Args:
        series: Series to plot; the first series supplies the x-axis labels
        width: Chart width in points
        height: Chart height in points
        title: Optional title drawn above the plot area
        min_y: Value mapped to the bottom of the plot area
        max_y: Value mapped to the top of the plot area

    Returns:
        ChartLayout; empty when there is nothing to plot
    """
    if not series or not series[0].points or max_y <= min_y:
        return ChartLayout(width=width, height=height)

    has_legend = len(series) > 1
    pad_top = 30 if title else 10
    pad_right = 20
    pad_bottom = 50 if has_legend else 30
    pad_left = 40

    chart_w = width - pad_left - pad_right
    chart_h = height - pad_top - pad_bottom
    count = len(series[0].points)

    def x(i: int) -> float:
        return pad_left + (i / max(count - 1, 1)) * chart_w

    def y(value: float) -> float:
        return pad_top + chart_h - ((value - min_y) / (max_y - min_y)) * chart_h

    primitives: list[Primitive] = []

    if title:
        primitives.append(
            Text(
                x=width / 2,
                y=18,
                text=title,
                font_size=11,
                anchor=TextAnchor.MIDDLE,
                fill=DARK_TEXT,
                bold=True,
            )
        )

    for value in GRIDLINE_VALUES:
        if not min_y <= value <= max_y:
            continue
        primitives.append(
            Line(x1=pad_left, y1=y(value), x2=width - pad_right, y2=y(value), stroke=GRID, stroke_width=0.5)
        )
        primitives.append(
            Text(x=pad_left - 6, y=y(value) + 3, text=str(value), font_size=8, anchor=TextAnchor.END)
        )

    # Same-day crawls produce identical adjacent labels; draw only the first
    label_y = height - (22 if has_legend else 6)
    previous_label = None
    for i, point in enumerate(series[0].points):
        if point.label != previous_label:
            primitives.append(
                Text(x=x(i), y=label_y, text=point.label, font_size=7, anchor=TextAnchor.MIDDLE)
            )
        previous_label = point.label

    for s in series:
        coords = tuple(Point(x(i), y(p.value)) for i, p in enumerate(s.points[:count]))
        if len(coords) > 1:
            primitives.append(Polyline(points=coords, stroke=s.color, stroke_width=2))
        primitives.extend(Circle(cx=c.x, cy=c.y, r=DOT_RADIUS, fill=s.color) for c in coords)

    if has_legend:
        legend_y = height - 14
        for i, s in enumerate(series):
            lx = pad_left + i * LEGEND_ITEM_WIDTH
            primitives.append(Rect(x=lx, y=legend_y - 4, width=10, height=3, fill=s.color))
            primitives.append(Text(x=lx + 14, y=legend_y, text=s.name, font_size=7, fill=AXIS_TEXT))

    return ChartLayout(width=width, height=height, primitives=tuple(primitives))
