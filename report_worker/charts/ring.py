"""Score ring layout for report covers.

A circular progress ring: a full background track, an arc sweeping
clockwise from 12 o'clock in proportion to the score, rounded end caps,
and the score printed in the middle.
"""

import math

from report_worker.charts.primitives import (
    ChartLayout,
    Circle,
    Point,
    Polyline,
    Primitive,
    Text,
    TextAnchor,
)

RING_BG = "#e5e7eb"
ARC_STEP_DEGREES = 3.0  # polyline resolution of the arc


def _arc_points(cx: float, cy: float, radius: float, start: float, sweep: float) -> tuple[Point, ...]:
    steps = max(int(math.ceil(sweep / ARC_STEP_DEGREES)), 1)
    return tuple(
        Point(
            cx + radius * math.cos(math.radians(start + sweep * i / steps)),
            cy + radius * math.sin(math.radians(start + sweep * i / steps)),
        )
        for i in range(steps + 1)
    )


def layout_score_ring(
    score: float,
    color: str,
    size: float = 140,
    ring_width: float = 10,
) -> ChartLayout:
    """
    Lay out a score ring.

    Args:
        score: 0-100 score (clamped)
        color: Arc and label color
        size: Width and height in points
        ring_width: Stroke width of the ring

    Returns:
        ChartLayout with the ring and the centered score
    """
    value = min(max(score, 0.0), 100.0)
    cx = cy = size / 2
    radius = size / 2 - ring_width

    primitives: list[Primitive] = [
        Circle(cx=cx, cy=cy, r=radius, stroke=RING_BG, stroke_width=ring_width)
    ]

    sweep = value / 100 * 360
    if sweep > 0:
        arc = _arc_points(cx, cy, radius, -90.0, sweep)
        primitives.append(Polyline(points=arc, stroke=color, stroke_width=ring_width))

        # Rounded end caps
        cap = ring_width / 2
        primitives.append(Circle(cx=arc[0].x, cy=arc[0].y, r=cap, fill=color))
        primitives.append(Circle(cx=arc[-1].x, cy=arc[-1].y, r=cap, fill=color))

    primitives.append(
        Text(
            x=cx,
            y=cy + size * 0.1,
            text=str(round(value)),
            font_size=size * 0.28,
            anchor=TextAnchor.MIDDLE,
            fill=color,
            bold=True,
        )
    )
    return ChartLayout(width=size, height=size, primitives=tuple(primitives))
