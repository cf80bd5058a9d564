"""Radar chart layout for category scores."""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from report_worker.charts.primitives import (
    GRID,
    PRIMARY,
    ChartLayout,
    Circle,
    Line,
    Point,
    Polygon,
    Primitive,
    Text,
    TextAnchor,
)

LABEL_PADDING = 40  # room for axis labels outside the plot
RING_FRACTIONS = (0.25, 0.5, 0.75, 1.0)
AXIS_LABEL_OFFSET = 18
VALUE_LABEL_OFFSET = 10


@dataclass(frozen=True)
class RadarAxis:
    """One spoke of the radar; a missing value plots at the center."""

    label: str
    value: float | None


def layout_radar_chart(
    axes: Sequence[RadarAxis],
    size: float = 200,
    color: str = PRIMARY,
) -> ChartLayout:
    """
    Lay out a radar chart with evenly spaced axes starting at 12 o'clock.

    Values are 0-100 and map linearly from the center to the outer ring;
    out-of-range values are clamped.

    Args:
        axes: Axis labels and values, clockwise from the top
        size: Plot size in points (the layout adds label padding)
        color: Data polygon color

    Returns:
        ChartLayout; empty when there are no axes
    """
    box = size + LABEL_PADDING * 2
    if not axes:
        return ChartLayout(width=box, height=box)

    cx = cy = box / 2
    radius = (size - 60) / 2
    angles = [i * 2 * math.pi / len(axes) - math.pi / 2 for i in range(len(axes))]

    def point(angle: float, r: float) -> Point:
        return Point(cx + r * math.cos(angle), cy + r * math.sin(angle))

    primitives: list[Primitive] = []

    for fraction in RING_FRACTIONS:
        primitives.append(
            Polygon(
                points=tuple(point(a, radius * fraction) for a in angles),
                stroke=GRID,
                stroke_width=0.5,
            )
        )

    for angle in angles:
        end = point(angle, radius)
        primitives.append(Line(x1=cx, y1=cy, x2=end.x, y2=end.y, stroke="#d1d5db", stroke_width=0.5))

    values = [min(max(a.value or 0.0, 0.0), 100.0) for a in axes]
    data_points = tuple(point(angle, v / 100 * radius) for angle, v in zip(angles, values, strict=True))

    primitives.append(
        Polygon(points=data_points, stroke=color, fill=color, fill_opacity=0.15, stroke_width=2)
    )
    primitives.extend(Circle(cx=p.x, cy=p.y, r=3, fill=color) for p in data_points)

    for axis, angle in zip(axes, angles, strict=True):
        label = point(angle, radius + AXIS_LABEL_OFFSET)
        primitives.append(
            Text(
                x=label.x,
                y=label.y + 3,
                text=axis.label,
                font_size=8,
                anchor=TextAnchor.MIDDLE,
                fill="#374151",
            )
        )

    for axis, angle, value in zip(axes, angles, values, strict=True):
        anchor = point(angle, value / 100 * radius + VALUE_LABEL_OFFSET)
        primitives.append(
            Text(
                x=anchor.x,
                y=anchor.y + 3,
                text=str(round(axis.value)) if axis.value is not None else "N/A",
                font_size=7,
                anchor=TextAnchor.MIDDLE,
                fill=color,
                bold=True,
            )
        )

    return ChartLayout(width=box, height=box, primitives=tuple(primitives))
