"""Vertical bar chart layout."""

from collections.abc import Sequence
from dataclasses import dataclass

from report_worker.charts.primitives import (
    DARK_TEXT,
    GRID,
    ChartLayout,
    Line,
    Primitive,
    Rect,
    Text,
    TextAnchor,
)

BAR_FILL_RATIO = 0.6  # share of each slot taken by its bar


@dataclass(frozen=True)
class Bar:
    label: str
    value: float
    color: str


def layout_bar_chart(
    bars: Sequence[Bar],
    width: float = 450,
    height: float = 180,
    max_value: float | None = None,
    title: str | None = None,
    value_suffix: str = "",
) -> ChartLayout:
    """
    Lay out a vertical bar chart, one slot per category.

    Args:
        bars: Bars in display order
        width: Chart width in points
        height: Chart height in points
        max_value: Value mapped to full height (defaults to the largest bar)
        title: Optional title above the plot
        value_suffix: Appended to the value label on each bar (e.g. "%")

    Returns:
        ChartLayout; empty when there are no bars
    """
    if not bars:
        return ChartLayout(width=width, height=height)

    pad_top = 34 if title else 16
    pad_bottom = 24
    pad_left = 20
    pad_right = 20
    chart_w = width - pad_left - pad_right
    chart_h = height - pad_top - pad_bottom
    baseline = pad_top + chart_h

    top = max_value if max_value is not None else max(b.value for b in bars)
    slot = chart_w / len(bars)
    bar_w = slot * BAR_FILL_RATIO

    primitives: list[Primitive] = []
    if title:
        primitives.append(
            Text(x=width / 2, y=18, text=title, font_size=11, anchor=TextAnchor.MIDDLE, fill=DARK_TEXT, bold=True)
        )

    primitives.append(Line(x1=pad_left, y1=baseline, x2=width - pad_right, y2=baseline, stroke=GRID))

    for i, bar in enumerate(bars):
        value = max(bar.value, 0.0)
        bar_h = (min(value, top) / top) * chart_h if top > 0 else 0.0
        x = pad_left + i * slot + (slot - bar_w) / 2
        center = x + bar_w / 2

        if bar_h > 0:
            primitives.append(Rect(x=x, y=baseline - bar_h, width=bar_w, height=bar_h, fill=bar.color))
        primitives.append(
            Text(
                x=center,
                y=baseline - bar_h - 4,
                text=f"{value:g}{value_suffix}",
                font_size=8,
                anchor=TextAnchor.MIDDLE,
                fill=DARK_TEXT,
                bold=True,
            )
        )
        primitives.append(
            Text(x=center, y=baseline + 12, text=bar.label, font_size=7, anchor=TextAnchor.MIDDLE)
        )

    return ChartLayout(width=width, height=height, primitives=tuple(primitives))
