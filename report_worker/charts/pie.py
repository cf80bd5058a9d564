"""Pie chart layout."""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from report_worker.charts.primitives import ChartLayout, Primitive, Text, TextAnchor, Wedge

START_ANGLE = -90.0  # 12 o'clock
MIN_LABEL_SHARE = 0.05  # slices smaller than this get no percentage label


@dataclass(frozen=True)
class Slice:
    label: str
    value: float
    color: str


def layout_pie_chart(slices: Sequence[Slice], size: float = 160) -> ChartLayout:
    """
    Lay out a pie chart; slices are stacked clockwise from 12 o'clock.

    Non-positive slices take no arc.

    Args:
        slices: Slices in display order
        size: Width and height in points

    Returns:
        ChartLayout; empty when there is nothing positive to plot
    """
    total = sum(max(s.value, 0.0) for s in slices)
    if not slices or total <= 0:
        return ChartLayout(width=size, height=size)

    cx = cy = size / 2
    radius = size / 2 - 4
    primitives: list[Primitive] = []
    labels: list[Primitive] = []

    angle = START_ANGLE
    for s in slices:
        if s.value <= 0:
            continue
        share = s.value / total
        sweep = share * 360.0
        primitives.append(
            Wedge(cx=cx, cy=cy, r=radius, start_angle=angle, end_angle=angle + sweep, fill=s.color)
        )

        if share >= MIN_LABEL_SHARE:
            mid = math.radians(angle + sweep / 2)
            labels.append(
                Text(
                    x=cx + radius * 0.65 * math.cos(mid),
                    y=cy + radius * 0.65 * math.sin(mid) + 3,
                    text=f"{round(share * 100)}%",
                    font_size=8,
                    anchor=TextAnchor.MIDDLE,
                    fill="#ffffff",
                    bold=True,
                )
            )
        angle += sweep

    return ChartLayout(width=size, height=size, primitives=tuple(primitives + labels))
