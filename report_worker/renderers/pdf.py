"""PDF renderer built on reportlab platypus."""

from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import (
    BaseDocTemplate,
    Flowable,
    Frame,
    KeepTogether,
    NextPageTemplate,
    PageBreak,
    PageTemplate,
    Paragraph,
    Spacer,
    Table,
    TableStyle,
)

from report_worker.charts.primitives import AXIS_TEXT, DARK_TEXT, GRID
from report_worker.renderers.drawing import BOLD_FONT, FONT, to_drawing
from report_worker.templates.document import (
    Block,
    BulletList,
    ChartBlock,
    Document,
    Heading,
    Page,
    PageKind,
    Section,
    TextBlock,
    TextStyle,
)
from report_worker.templates.document import Table as TableBlock

MARGIN = 18 * mm
HEADER_HEIGHT = 10 * mm


class PdfRenderer:
    """
    Render a Document to PDF bytes.

    Each page kind gets its own page template: the cover carries only a
    footer, content pages a header and footer, and the call-to-action page
    a full brand-colored background. Every body string is appended to
    ``transcript`` in the order it is emitted.
    """

    def __init__(self, transcript: list[str] | None = None):
        self.transcript = transcript if transcript is not None else []

    def _build_styles(self) -> dict[str, ParagraphStyle]:
        base = getSampleStyleSheet()
        body = ParagraphStyle(
            "ReportBody", parent=base["BodyText"], fontName=FONT, fontSize=10, leading=14,
            textColor=colors.HexColor(DARK_TEXT),
        )
        return {
            "section": ParagraphStyle(
                "ReportSection", parent=base["Heading1"], fontName=BOLD_FONT, fontSize=18,
                leading=22, textColor=colors.HexColor(DARK_TEXT), spaceAfter=4,
            ),
            "section_subtitle": ParagraphStyle(
                "ReportSectionSubtitle", parent=body, textColor=colors.HexColor(AXIS_TEXT), spaceAfter=10,
            ),
            "h2": ParagraphStyle(
                "ReportH2", parent=base["Heading2"], fontName=BOLD_FONT, fontSize=14, leading=18,
                textColor=self.brand_color,
            ),
            "h3": ParagraphStyle(
                "ReportH3", parent=base["Heading3"], fontName=BOLD_FONT, fontSize=12, leading=15,
                textColor=colors.HexColor(DARK_TEXT), spaceBefore=8,
            ),
            TextStyle.TITLE.value: ParagraphStyle(
                "ReportTitle", parent=base["Title"], fontName=BOLD_FONT, fontSize=26, leading=32,
                alignment=TA_CENTER, textColor=colors.HexColor(DARK_TEXT),
            ),
            TextStyle.SUBTITLE.value: ParagraphStyle(
                "ReportSubtitle", parent=body, fontSize=15, leading=20, alignment=TA_CENTER,
                textColor=self.brand_color,
            ),
            TextStyle.BODY.value: body,
            TextStyle.MUTED.value: ParagraphStyle(
                "ReportMuted", parent=body, textColor=colors.HexColor(AXIS_TEXT),
            ),
            TextStyle.EMPHASIS.value: ParagraphStyle(
                "ReportEmphasis", parent=body, fontName=BOLD_FONT, fontSize=13, leading=18,
            ),
            TextStyle.NOTE.value: ParagraphStyle(
                "ReportNote", parent=body, fontSize=8, leading=11, textColor=colors.HexColor(AXIS_TEXT),
            ),
            "bullet": ParagraphStyle("ReportBullet", parent=body, leftIndent=12, bulletIndent=0),
            "bullet_detail": ParagraphStyle(
                "ReportBulletDetail", parent=body, leftIndent=12, fontSize=9, leading=12,
                textColor=colors.HexColor(AXIS_TEXT),
            ),
            "tag": ParagraphStyle(
                "ReportTag", parent=body, leftIndent=12, fontSize=8, leading=11, textColor=self.brand_color,
                spaceAfter=6,
            ),
            "cell": ParagraphStyle("ReportCell", parent=body, fontSize=9, leading=11),
            "header_cell": ParagraphStyle(
                "ReportHeaderCell", parent=body, fontName=BOLD_FONT, fontSize=9, leading=11,
                textColor=colors.white,
            ),
        }

    def _emit(self, text: str) -> str:
        self.transcript.append(text)
        return escape(text)

    def _paragraph(self, text: str, style: str, inverse: bool = False) -> Paragraph:
        para_style = self.styles[style]
        if inverse:
            para_style = ParagraphStyle(f"{para_style.name}Inverse", parent=para_style, textColor=colors.white)
        return Paragraph(self._emit(text), para_style)

    # Page chrome

    def _footer(self, canvas, doc) -> None:
        canvas.saveState()
        canvas.setFont(FONT, 8)
        canvas.setFillColor(colors.HexColor(AXIS_TEXT))
        canvas.drawString(MARGIN, MARGIN / 2, f"{self.document.brand.name} | {self.document.domain}")
        canvas.drawRightString(
            A4[0] - MARGIN, MARGIN / 2, f"{self.document.generated_at_label} | Page {doc.page}"
        )
        canvas.restoreState()

    def _cover_page(self, canvas, doc) -> None:
        canvas.saveState()
        canvas.setFillColor(self.brand_color)
        canvas.rect(0, A4[1] - 6 * mm, A4[0], 6 * mm, stroke=0, fill=1)
        canvas.restoreState()
        self._footer(canvas, doc)

    def _content_page(self, canvas, doc) -> None:
        canvas.saveState()
        top = A4[1] - MARGIN / 2
        canvas.setFont(BOLD_FONT, 9)
        canvas.setFillColor(self.brand_color)
        canvas.drawString(MARGIN, top - 8, self.document.brand.name)
        canvas.setFont(FONT, 8)
        canvas.setFillColor(colors.HexColor(AXIS_TEXT))
        canvas.drawRightString(A4[0] - MARGIN, top - 8, self.document.title)
        canvas.setStrokeColor(colors.HexColor(GRID))
        canvas.line(MARGIN, top - 12, A4[0] - MARGIN, top - 12)
        canvas.restoreState()
        self._footer(canvas, doc)

    def _cta_page(self, canvas, doc) -> None:
        canvas.saveState()
        canvas.setFillColor(self.brand_color)
        canvas.rect(0, 0, A4[0], A4[1], stroke=0, fill=1)
        canvas.restoreState()

    def _page_templates(self, doc: BaseDocTemplate) -> list[PageTemplate]:
        def frame(top_inset: float = 0) -> Frame:
            return Frame(doc.leftMargin, doc.bottomMargin, doc.width, doc.height - top_inset, id="body")

        templates = {
            PageKind.COVER: PageTemplate(id=PageKind.COVER.value, frames=[frame()], onPage=self._cover_page),
            PageKind.CONTENT: PageTemplate(
                id=PageKind.CONTENT.value, frames=[frame(HEADER_HEIGHT)], onPage=self._content_page
            ),
            PageKind.CALL_TO_ACTION: PageTemplate(
                id=PageKind.CALL_TO_ACTION.value, frames=[frame()], onPage=self._cta_page
            ),
        }
        # reportlab starts on the first template in the list
        first = self.document.pages[0].kind if self.document.pages else PageKind.CONTENT
        ordered = [templates[first]]
        ordered.extend(t for kind, t in templates.items() if kind != first)
        return ordered

    # Blocks

    def _table(self, block: TableBlock, width: float, inverse: bool) -> Table | None:
        cols = block.column_count
        if cols == 0:
            return None
        data = []
        if block.headers:
            data.append([self._paragraph(h, "header_cell") for h in block.headers])
        for row in block.rows:
            data.append([self._paragraph(cell, "cell", inverse) for cell in row[:cols]])

        col_widths = None
        if block.column_widths and len(block.column_widths) == block.column_count:
            total = sum(block.column_widths)
            col_widths = [width * w / total for w in block.column_widths]

        table = Table(data, colWidths=col_widths, repeatRows=1 if block.headers else 0, hAlign="LEFT")
        commands = [
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("LINEBELOW", (0, 0), (-1, -1), 0.5, colors.HexColor(GRID)),
            ("TOPPADDING", (0, 0), (-1, -1), 4),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
        ]
        if block.headers:
            commands.append(("BACKGROUND", (0, 0), (-1, 0), self.brand_color))
            commands.append(("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f9fafb")]))
        table.setStyle(TableStyle(commands))
        return table

    def _bullets(self, block: BulletList, inverse: bool) -> list[Flowable]:
        flowables: list[Flowable] = []
        for item in block.items:
            flowables.append(Paragraph(self._emit(item.text), self.styles["bullet"], bulletText="•"))
            if item.detail:
                flowables.append(self._paragraph(item.detail, "bullet_detail", inverse))
            if item.tags:
                tags = "  |  ".join(self._emit(tag) for tag in item.tags)
                flowables.append(Paragraph(tags, self.styles["tag"]))
            else:
                flowables.append(Spacer(1, 4))
        return flowables

    def _chart(self, block: ChartBlock, width: float) -> Flowable:
        parts: list[Flowable] = []
        if block.title:
            parts.append(self._paragraph(block.title, "h3"))
        if not block.layout.is_empty:
            drawing = to_drawing(block.layout)
            drawing.hAlign = "CENTER"
            parts.append(drawing)
        if block.legend:
            rows = [
                [self._paragraph(entry.label, "cell"), self._paragraph(entry.value, "cell")]
                for entry in block.legend
            ]
            legend = Table(rows, colWidths=[width * 0.5, width * 0.2], hAlign="CENTER")
            legend.setStyle(
                TableStyle(
                    [
                        ("LINEBEFORE", (0, i), (0, i), 3, colors.HexColor(entry.color))
                        for i, entry in enumerate(block.legend)
                    ]
                    + [("BOTTOMPADDING", (0, 0), (-1, -1), 2), ("TOPPADDING", (0, 0), (-1, -1), 2)]
                )
            )
            parts.append(legend)
        parts.append(Spacer(1, 8))
        return KeepTogether(parts)

    def _block(self, block: Block, width: float, inverse: bool) -> list[Flowable]:
        if isinstance(block, Heading):
            return [self._paragraph(block.text, "h2" if block.level <= 2 else "h3", inverse)]
        if isinstance(block, TextBlock):
            return [self._paragraph(block.text, block.style.value, inverse), Spacer(1, 4)]
        if isinstance(block, TableBlock):
            table = self._table(block, width, inverse)
            return [table, Spacer(1, 10)] if table is not None else []
        if isinstance(block, BulletList):
            return self._bullets(block, inverse)
        if isinstance(block, ChartBlock):
            return [self._chart(block, width)]
        raise TypeError(f"Unknown block type: {type(block).__name__}")

    def _section(self, section: Section, width: float, inverse: bool) -> list[Flowable]:
        story: list[Flowable] = []
        if section.title:
            story.append(self._paragraph(section.title, "section", inverse))
        if section.subtitle:
            story.append(self._paragraph(section.subtitle, "section_subtitle", inverse))
        for block in section.blocks:
            story.extend(self._block(block, width, inverse))
        story.append(Spacer(1, 14))
        return story

    def _page(self, page: Page, width: float) -> list[Flowable]:
        inverse = page.kind == PageKind.CALL_TO_ACTION
        story: list[Flowable] = []
        if page.kind in (PageKind.COVER, PageKind.CALL_TO_ACTION):
            story.append(Spacer(1, 60 * mm if inverse else 25 * mm))
        for section in page.sections:
            story.extend(self._section(section, width, inverse))
        return story

    def render(self, document: Document) -> bytes:
        self.document = document
        self.brand_color = colors.HexColor(document.brand.color)
        self.styles = self._build_styles()

        buffer = BytesIO()
        doc = BaseDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=MARGIN,
            rightMargin=MARGIN,
            topMargin=MARGIN,
            bottomMargin=MARGIN,
            title=self.document.title,
            author=self.document.brand.name,
            subject=f"{self.document.template.title()} AI-readiness report",
            creator=self.document.brand.name,
            invariant=1,
        )
        doc.addPageTemplates(self._page_templates(doc))

        story: list[Flowable] = []
        for i, page in enumerate(self.document.pages):
            if i > 0:
                story.append(NextPageTemplate(page.kind.value))
                story.append(PageBreak())
            story.extend(self._page(page, doc.width))

        doc.build(story)
        return buffer.getvalue()
