"""DOCX renderer built on python-docx.

Charts cannot be drawn natively, so a chart becomes its title followed by a
legend table carrying the plotted values.
"""

from io import BytesIO

from docx import Document as new_docx
from docx.enum.section import WD_SECTION
from docx.enum.table import WD_TABLE_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import parse_xml
from docx.oxml.ns import nsdecls
from docx.shared import Mm, Pt, RGBColor

from report_worker.charts.primitives import AXIS_TEXT, DARK_TEXT
from report_worker.templates.document import (
    Block,
    BulletList,
    ChartBlock,
    Document,
    Heading,
    PageKind,
    Section,
    TextBlock,
    TextStyle,
)
from report_worker.templates.document import Table as TableBlock

FONT = "Calibri"
WHITE = RGBColor(255, 255, 255)
DARK = RGBColor.from_string(DARK_TEXT.lstrip("#"))
GRAY = RGBColor.from_string(AXIS_TEXT.lstrip("#"))
STRIPE = "F9FAFB"

# (size in points, bold, centered) per paragraph style
TEXT_STYLES = {
    TextStyle.TITLE: (26, True, True),
    TextStyle.SUBTITLE: (15, False, True),
    TextStyle.BODY: (10, False, False),
    TextStyle.MUTED: (10, False, False),
    TextStyle.EMPHASIS: (13, True, False),
    TextStyle.NOTE: (8, False, False),
}


def set_cell_shading(cell, color_hex: str) -> None:
    """Set background shading on a table cell."""
    shading = parse_xml(f'<w:shd {nsdecls("w")} w:fill="{color_hex}" w:val="clear"/>')
    cell._tc.get_or_add_tcPr().append(shading)


class DocxRenderer:
    """
    Render a Document to DOCX bytes.

    Page kinds map onto Word sections: a change of kind starts a new section
    with its own header and footer, and consecutive pages of the same kind
    are separated by page breaks. Every body string is appended to
    ``transcript`` in the order it is emitted.
    """

    def __init__(self, transcript: list[str] | None = None):
        self.transcript = transcript if transcript is not None else []

    def _emit(self, text: str) -> str:
        self.transcript.append(text)
        return text

    def _run(self, paragraph, text: str, size: float = 10, bold: bool = False, color: RGBColor | None = None):
        run = paragraph.add_run(self._emit(text))
        run.font.size = Pt(size)
        run.font.bold = bold
        run.font.name = FONT
        run.font.color.rgb = color or DARK
        return run

    def _styled_para(self, text: str, style: TextStyle, inverse: bool = False):
        size, bold, centered = TEXT_STYLES[style]
        color = DARK
        if inverse or style == TextStyle.SUBTITLE:
            color = self.brand_color
        elif style in (TextStyle.MUTED, TextStyle.NOTE):
            color = GRAY
        p = self.doc.add_paragraph()
        self._run(p, text, size=size, bold=bold, color=color)
        if centered or inverse:
            p.alignment = WD_ALIGN_PARAGRAPH.CENTER
        p.paragraph_format.space_after = Pt(6)
        return p

    # Sections and chrome

    def _configure_section(self, section, kind: PageKind) -> None:
        section.page_width = Mm(210)
        section.page_height = Mm(297)
        for margin in ("left_margin", "right_margin", "top_margin", "bottom_margin"):
            setattr(section, margin, Mm(18))

        section.header.is_linked_to_previous = False
        section.footer.is_linked_to_previous = False
        header = section.header.paragraphs[0]
        footer = section.footer.paragraphs[0]
        header.text = ""
        footer.text = ""

        if kind == PageKind.CONTENT:
            run = header.add_run(f"{self.document.brand.name} | {self.document.title}")
            run.font.size = Pt(8)
            run.font.color.rgb = self.brand_color
        if kind != PageKind.CALL_TO_ACTION:
            run = footer.add_run(
                f"{self.document.brand.name} | {self.document.domain} | {self.document.generated_at_label}"
            )
            run.font.size = Pt(8)
            run.font.color.rgb = GRAY

    # Blocks

    def _heading(self, text: str, level: int) -> None:
        h = self.doc.add_heading(self._emit(text), level=level)
        for run in h.runs:
            run.font.name = FONT
            run.font.color.rgb = self.brand_color if level == 2 else DARK

    def _table(self, block: TableBlock) -> None:
        cols = block.column_count
        if cols == 0:
            return
        header_rows = 1 if block.headers else 0
        table = self.doc.add_table(rows=header_rows + len(block.rows), cols=cols)
        table.alignment = WD_TABLE_ALIGNMENT.LEFT
        table.style = "Table Grid"

        if block.headers:
            for i, text in enumerate(block.headers):
                cell = table.rows[0].cells[i]
                cell.text = ""
                self._run(cell.paragraphs[0], text, size=9, bold=True, color=WHITE)
                set_cell_shading(cell, self.brand_hex)

        for row_idx, row in enumerate(block.rows):
            for col_idx, text in enumerate(row[:cols]):
                cell = table.rows[header_rows + row_idx].cells[col_idx]
                cell.text = ""
                self._run(cell.paragraphs[0], text, size=9)
                if row_idx % 2 == 1:
                    set_cell_shading(cell, STRIPE)

        self.doc.add_paragraph()

    def _bullets(self, block: BulletList) -> None:
        for item in block.items:
            p = self.doc.add_paragraph(style="List Bullet")
            self._run(p, item.text, size=10)
            p.paragraph_format.space_after = Pt(2)
            if item.detail:
                detail = self.doc.add_paragraph()
                detail.paragraph_format.left_indent = Mm(6)
                self._run(detail, item.detail, size=9, color=GRAY)
            if item.tags:
                tags = self.doc.add_paragraph()
                tags.paragraph_format.left_indent = Mm(6)
                for i, tag in enumerate(item.tags):
                    if i:
                        sep = tags.add_run("  |  ")
                        sep.font.size = Pt(8)
                    self._run(tags, tag, size=8, color=self.brand_color)

    def _chart(self, block: ChartBlock) -> None:
        if block.title:
            p = self.doc.add_paragraph()
            self._run(p, block.title, size=12, bold=True)
        if not block.legend:
            return
        table = self.doc.add_table(rows=len(block.legend), cols=2)
        table.style = "Table Grid"
        for i, entry in enumerate(block.legend):
            label_cell, value_cell = table.rows[i].cells
            label_cell.text = ""
            value_cell.text = ""
            self._run(
                label_cell.paragraphs[0], entry.label, size=9,
                color=RGBColor.from_string(entry.color.lstrip("#").upper()),
            )
            self._run(value_cell.paragraphs[0], entry.value, size=9, bold=True)
        self.doc.add_paragraph()

    def _block(self, block: Block, inverse: bool) -> None:
        if isinstance(block, Heading):
            self._heading(block.text, min(max(block.level, 1), 9))
        elif isinstance(block, TextBlock):
            self._styled_para(block.text, block.style, inverse)
        elif isinstance(block, TableBlock):
            self._table(block)
        elif isinstance(block, BulletList):
            self._bullets(block)
        elif isinstance(block, ChartBlock):
            self._chart(block)
        else:
            raise TypeError(f"Unknown block type: {type(block).__name__}")

    def _section(self, section: Section, inverse: bool) -> None:
        if section.title:
            self._heading(section.title, 1)
        if section.subtitle:
            self._styled_para(section.subtitle, TextStyle.MUTED)
        for block in section.blocks:
            self._block(block, inverse)

    def render(self, document: Document) -> bytes:
        self.document = document
        self.brand_hex = document.brand.color.lstrip("#").upper()
        self.brand_color = RGBColor.from_string(self.brand_hex)
        self.doc = new_docx()

        previous: PageKind | None = None
        for page in self.document.pages:
            if previous is None:
                self._configure_section(self.doc.sections[0], page.kind)
            elif page.kind != previous:
                self._configure_section(self.doc.add_section(WD_SECTION.NEW_PAGE), page.kind)
            else:
                self.doc.add_page_break()

            inverse = page.kind == PageKind.CALL_TO_ACTION
            for section in page.sections:
                self._section(section, inverse)
            previous = page.kind

        props = self.doc.core_properties
        props.title = self.document.title
        props.author = self.document.brand.name
        props.subject = f"{self.document.template.title()} AI-readiness report"
        if self.document.generated_at is not None:
            props.created = self.document.generated_at
            props.modified = self.document.generated_at
        if self.document.report_id:
            props.identifier = self.document.report_id

        buffer = BytesIO()
        self.doc.save(buffer)
        return buffer.getvalue()
