"""Test utilities for the pagereflow test suite.

Helpers for building small PDF and DOCX documents with known content and
page geometry, and for reading written PDFs back.
"""

from pathlib import Path
from typing import Iterable, Sequence, Tuple

import docx
import fitz

A4 = (595.0, 842.0)
LETTER = (612.0, 792.0)
A4_LANDSCAPE = (842.0, 595.0)

PageSpec = Tuple[str, Tuple[float, float]]


def create_pdf(path: Path, pages: Sequence[PageSpec], **save_kwargs) -> Path:
    """Create a PDF with one page per (text, (width, height)) entry.

    Each line of the page text is placed on its own baseline.
    """
    doc = fitz.open()
    for text, (width, height) in pages:
        page = doc.new_page(width=width, height=height)
        for index, line in enumerate(text.split("\n")):
            if line:
                page.insert_text((72, 72 + index * 16), line, fontsize=11)
    doc.save(str(path), **save_kwargs)
    doc.close()
    return path


def create_text_pdf(path: Path, texts: Iterable[str], size: Tuple[float, float] = A4) -> Path:
    """Create a PDF whose pages all share one size."""
    return create_pdf(path, [(text, size) for text in texts])


def create_encrypted_pdf(path: Path, text: str, user_password: str) -> Path:
    """Create a one-page AES-256 encrypted PDF."""
    return create_pdf(
        path,
        [(text, A4)],
        encryption=fitz.PDF_ENCRYPT_AES_256,
        owner_pw=f"{user_password}-owner",
        user_pw=user_password,
    )


def read_pdf_geometry(path: Path) -> list[Tuple[float, float]]:
    """Return (width, height) of every page of a PDF."""
    with fitz.open(str(path)) as doc:
        return [(page.rect.width, page.rect.height) for page in doc]


def read_pdf_text(path: Path) -> list[str]:
    """Return the stripped text of every page of a PDF."""
    with fitz.open(str(path)) as doc:
        return [page.get_text("text").strip() for page in doc]


def create_docx(path: Path, paragraphs: Sequence[str], table: Sequence[Sequence[str]] = ()) -> Path:
    """Create a DOCX with the given paragraphs and an optional trailing table."""
    document = docx.Document()
    for text in paragraphs:
        document.add_paragraph(text)
    if table:
        grid = document.add_table(rows=len(table), cols=len(table[0]))
        for row_index, row in enumerate(table):
            for col_index, value in enumerate(row):
                grid.cell(row_index, col_index).text = value
    document.save(str(path))
    return path


def count_docx_page_breaks(path: Path) -> int:
    """Count hard page breaks in a DOCX body."""
    document = docx.Document(str(path))
    body = document.element.body
    return len(body.xpath('.//w:br[@w:type="page"]'))


def create_paged_docx(path: Path, pages: Sequence[Sequence[str]]) -> Path:
    """Create a DOCX whose pages end with a hard page break in their last paragraph, as Word writes them."""
    from docx.enum.text import WD_BREAK

    document = docx.Document()
    for index, paragraphs in enumerate(pages):
        last = None
        for text in paragraphs:
            last = document.add_paragraph(text)
        if index < len(pages) - 1:
            (last or document.add_paragraph()).add_run().add_break(WD_BREAK.PAGE)
    document.save(str(path))
    return path
