"""Convert chart layouts into reportlab drawings.

Layouts are y-down; reportlab drawings are y-up, so every y coordinate is
flipped against the drawing height.
"""

from reportlab.graphics import shapes
from reportlab.lib import colors

from report_worker.charts.primitives import (
    ChartLayout,
    Circle,
    Line,
    Polygon,
    Polyline,
    Primitive,
    Rect,
    Text,
    Wedge,
)

FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"


def _color(value: str | None):
    return colors.HexColor(value) if value else None


def _flat(points, height: float) -> list[float]:
    flat: list[float] = []
    for p in points:
        flat.extend((p.x, height - p.y))
    return flat


def _convert(primitive: Primitive, height: float) -> shapes.Shape:
    if isinstance(primitive, Line):
        return shapes.Line(
            primitive.x1,
            height - primitive.y1,
            primitive.x2,
            height - primitive.y2,
            strokeColor=_color(primitive.stroke),
            strokeWidth=primitive.stroke_width,
            strokeDashArray=[3, 3] if primitive.dashed else None,
        )
    if isinstance(primitive, Polyline):
        return shapes.PolyLine(
            _flat(primitive.points, height),
            strokeColor=_color(primitive.stroke),
            strokeWidth=primitive.stroke_width,
        )
    if isinstance(primitive, Polygon):
        return shapes.Polygon(
            _flat(primitive.points, height),
            strokeColor=_color(primitive.stroke),
            strokeWidth=primitive.stroke_width,
            fillColor=_color(primitive.fill),
            fillOpacity=primitive.fill_opacity,
        )
    if isinstance(primitive, Circle):
        return shapes.Circle(
            primitive.cx,
            height - primitive.cy,
            primitive.r,
            fillColor=_color(primitive.fill),
            strokeColor=_color(primitive.stroke),
            strokeWidth=primitive.stroke_width,
        )
    if isinstance(primitive, Rect):
        return shapes.Rect(
            primitive.x,
            height - primitive.y - primitive.height,
            primitive.width,
            primitive.height,
            fillColor=_color(primitive.fill),
            strokeColor=None,
        )
    if isinstance(primitive, Wedge):
        cy = height - primitive.cy
        if primitive.end_angle - primitive.start_angle >= 360:
            return shapes.Circle(
                primitive.cx, cy, primitive.r, fillColor=_color(primitive.fill), strokeColor=None
            )
        # Clockwise in y-down space is counter-clockwise negated in y-up space
        return shapes.Wedge(
            primitive.cx,
            cy,
            primitive.r,
            -primitive.end_angle,
            -primitive.start_angle,
            fillColor=_color(primitive.fill),
            strokeColor=colors.white,
            strokeWidth=1,
        )
    if isinstance(primitive, Text):
        return shapes.String(
            primitive.x,
            height - primitive.y,
            primitive.text,
            fontName=BOLD_FONT if primitive.bold else FONT,
            fontSize=primitive.font_size,
            fillColor=_color(primitive.fill),
            textAnchor=primitive.anchor.value,
        )
    raise TypeError(f"Unknown chart primitive: {type(primitive).__name__}")


def to_drawing(layout: ChartLayout) -> shapes.Drawing:
    """Build a reportlab Drawing with the layout's primitives in order."""
    drawing = shapes.Drawing(layout.width, layout.height)
    for primitive in layout.primitives:
        drawing.add(_convert(primitive, layout.height))
    return drawing
