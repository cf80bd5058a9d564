"""Read text back out of rendered report files.

Line wrapping differs between the two formats, so comparisons ignore
whitespace entirely.
"""

from collections.abc import Iterable
from io import BytesIO

import docx
from docx.table import Table as DocxTable
from pypdf import PdfReader


def pdf_text(content: bytes) -> str:
    """Text of every page of a PDF, in content order."""
    reader = PdfReader(BytesIO(content))
    return "\n".join(page.extract_text() or "" for page in reader.pages)


def docx_text(content: bytes) -> str:
    """Body paragraphs and table cells of a DOCX, in document order."""
    opened = docx.Document(BytesIO(content))
    parts: list[str] = []
    for item in opened.iter_inner_content():
        if isinstance(item, DocxTable):
            for row in item.rows:
                parts.extend(cell.text for cell in row.cells)
        else:
            parts.append(item.text)
    return "\n".join(parts)


def squash(text: str) -> str:
    return "".join(text.split())


def missing_in_order(expected: Iterable[str], text: str) -> list[str]:
    """Strings from ``expected`` that cannot be found, in order, in ``text``."""
    haystack = squash(text)
    position = 0
    missing = []
    for value in expected:
        needle = squash(value)
        if not needle:
            continue
        found = haystack.find(needle, position)
        if found < 0:
            missing.append(value)
        else:
            position = found + len(needle)
    return missing


def contained(candidates: Iterable[str], text: str) -> set[str]:
    """The candidates that appear somewhere in ``text``."""
    haystack = squash(text)
    return {c for c in candidates if squash(c) and squash(c) in haystack}
