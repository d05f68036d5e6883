#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pagereflow/extractor.py
"""Page-aware text extraction.

Paginated sources (PDF) are read page by page with PyMuPDF and flattened
into one editable text blob with a ``[PAGE:n]`` marker line before each
page. Reflowable sources (DOCX, plain text) are extracted with paragraph
breaks only, except that the hard page breaks of a DOCX document, such as
the ones :mod:`pagereflow.docx_writer` writes, come back as page markers.
That keeps a PDF, DOCX, edit, PDF round trip on its original pages. The
caller chooses the entry point from the declared source format.

"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Union

from pagereflow.constants import (
    DEPS_DOCX,
    DEPS_PDF_READ,
    PLAIN_FORMAT_EXTENSIONS,
    SUPPORTED_PLAIN_FORMATS,
    PlainSourceFormat,
)
from pagereflow.exceptions import DocumentUnreadable, FormatError
from pagereflow.markers import build_marked_text, escape_page_text, to_display_text
from pagereflow.model import PageSegment
from pagereflow.options.extract import ExtractOptions
from pagereflow.resources import open_pdf, with_handle
from pagereflow.utils.decorators import debug_timer, requires_dependencies
from pagereflow.utils.encoding import decode_text
from pagereflow.utils.text import normalize_newlines, normalize_page_text

if TYPE_CHECKING:
    import fitz

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

WORDPROCESSING_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
WORD_TAG_PREFIX = f"{{{WORDPROCESSING_NS}}}"
WORD_RUN_TAG = f"{WORD_TAG_PREFIX}r"
WORD_TEXT_TAG = f"{WORD_TAG_PREFIX}t"
WORD_TAB_TAG = f"{WORD_TAG_PREFIX}tab"
WORD_BREAK_TAG = f"{WORD_TAG_PREFIX}br"
WORD_CARRIAGE_RETURN_TAG = f"{WORD_TAG_PREFIX}cr"
WORD_TYPE_ATTR = f"{WORD_TAG_PREFIX}type"


def _ensure_file(path: PathLike) -> Path:
    source = Path(path)
    if not source.is_file():
        raise DocumentUnreadable(f"File not found: {source}", file_path=str(source))
    return source


def _read_pdf_pages(doc: "fitz.Document") -> list[PageSegment]:
    pages = []
    for index in range(doc.page_count):
        raw = doc[index].get_text("text")
        pages.append(PageSegment(page_number=index + 1, text=normalize_page_text(raw)))
    return pages


def resolve_plain_format(path: PathLike, source_format: str | None = None) -> PlainSourceFormat:
    """Return the plain-text source format declared by the caller or implied by the extension.

    Raises
    ------
    FormatError
        If the format has no plain-text extractor.

    """
    if source_format is not None:
        normalized = source_format.lower().lstrip(".")
        if normalized not in SUPPORTED_PLAIN_FORMATS:
            raise FormatError(format_type=source_format, supported_formats=SUPPORTED_PLAIN_FORMATS)
        return PLAIN_FORMAT_EXTENSIONS[f".{normalized}"]

    suffix = Path(path).suffix.lower()
    if suffix not in PLAIN_FORMAT_EXTENSIONS:
        raise FormatError(format_type=suffix or str(path), supported_formats=SUPPORTED_PLAIN_FORMATS)
    return PLAIN_FORMAT_EXTENSIONS[suffix]


class PageAwareTextExtractor:
    """Extract editable text from documents.

    Parameters
    ----------
    options : ExtractOptions or None, default None
        Extraction options

    Examples
    --------
        >>> extractor = PageAwareTextExtractor()
        >>> extractor.extract_with_page_markers("three_pages.pdf")
        '[PAGE:1]\\nA\\n\\n[PAGE:2]\\nB\\n\\n[PAGE:3]\\nC\\n\\n'

    """

    def __init__(self, options: ExtractOptions | None = None):
        self.options = options or ExtractOptions()

    @requires_dependencies("pdf_read", DEPS_PDF_READ)
    def extract_pages(self, path: PathLike) -> list[PageSegment]:
        """Extract the text of every page, in ascending page order.

        Raises
        ------
        DocumentUnreadable
            If the document is missing, corrupt, or encrypted without a
            valid password.

        """
        source = _ensure_file(path)
        try:
            with debug_timer(logger, f"Page extraction ({source.name})"):
                pages = with_handle(lambda: open_pdf(source, self.options.password), _read_pdf_pages)
        except Exception as e:
            raise DocumentUnreadable(
                f"Failed to read PDF document {source}: {e!r}", file_path=str(source), original_error=e
            ) from e

        logger.debug(f"Extracted {len(pages)} page(s) from {source}")
        return pages

    def extract_with_page_markers(self, path: PathLike) -> str:
        """Extract a paginated document into editable text with page markers.

        Each page contributes its marker line, its text and a blank line.
        Markers run ``1..page_count`` with no gaps or repeats.
        """
        pages = self.extract_pages(path)
        return build_marked_text((page.text for page in pages), self.options.include_first_marker)

    def extract_plain(self, path: PathLike, source_format: str | None = None) -> str:
        """Extract a reflowable document as editable text.

        Plain text comes through with its paragraph breaks only. A DOCX
        document with hard page breaks (such as one written by
        :func:`~pagereflow.docx_writer.write_docx`) becomes marker text with
        one ``[PAGE:n]`` segment per Word page, unless ``docx_page_breaks``
        is disabled; without hard page breaks it has no markers either.

        Parameters
        ----------
        path : str or Path
            Source document
        source_format : {"docx", "txt"} or None
            Declared format; inferred from the file extension when None

        Raises
        ------
        FormatError
            If the format is not supported
        DocumentUnreadable
            If the document cannot be read

        """
        fmt = resolve_plain_format(path, source_format)
        source = _ensure_file(path)
        if fmt == "docx":
            pages = self._extract_docx(source)
            if len(pages) > 1 and self.options.docx_page_breaks:
                logger.debug(f"Mapped {len(pages) - 1} hard page break(s) in {source} to page markers")
                return build_marked_text(pages, self.options.include_first_marker)
            text = "\n\n".join(page for page in pages if page)
        else:
            text = self._extract_txt(source)
        # Marker-shaped lines in a reflowable source are content, not page breaks
        return escape_page_text(text)

    @requires_dependencies("docx", DEPS_DOCX)
    def _extract_docx(self, source: Path) -> list[str]:
        """Return the text of every hard-page-break-delimited part of a DOCX document."""
        import docx

        try:
            document = docx.Document(str(source))
        except Exception as e:
            raise DocumentUnreadable(
                f"Failed to open DOCX document {source}: {e!r}", file_path=str(source), original_error=e
            ) from e

        pages: list[list[str]] = [[]]
        for item in document.iter_inner_content():
            if hasattr(item, "rows"):
                pieces = [_docx_table_text(item)]
            else:
                pieces = _docx_paragraph_pieces(item)
            for index, piece in enumerate(pieces):
                if index:
                    pages.append([])
                piece = normalize_newlines(piece).strip()
                if piece:
                    pages[-1].append(piece)
        logger.debug(f"Extracted {sum(len(blocks) for blocks in pages)} block(s) from {source}")
        return ["\n\n".join(blocks) for blocks in pages]

    def _extract_txt(self, source: Path) -> str:
        try:
            data = source.read_bytes()
        except OSError as e:
            raise DocumentUnreadable(
                f"Failed to read text file {source}: {e!r}", file_path=str(source), original_error=e
            ) from e
        text = decode_text(data, self.options.text_encodings, use_chardet=self.options.detect_encoding)
        return normalize_newlines(text).lstrip("﻿").rstrip()


def _docx_table_text(table: Any) -> str:
    # Tables come through as rows of tab-separated cells
    lines = []
    for row in table.rows:
        cells = [cell.text.strip() for cell in row.cells]
        if any(cells):
            lines.append("\t".join(cells))
    return "\n".join(lines)


def _docx_paragraph_pieces(paragraph: Any) -> list[str]:
    """Return a paragraph's text split at its hard page breaks.

    A paragraph without page breaks gives one piece. Line and column breaks
    become newlines and tab characters stay tabs.
    """
    pieces: list[list[str]] = [[]]
    for element in paragraph._element.iter(WORD_TEXT_TAG, WORD_TAB_TAG, WORD_BREAK_TAG, WORD_CARRIAGE_RETURN_TAG):
        # Tab stop definitions in the paragraph properties are not content
        if element.getparent().tag != WORD_RUN_TAG:
            continue
        if element.tag == WORD_TEXT_TAG:
            pieces[-1].append(element.text or "")
        elif element.tag == WORD_TAB_TAG:
            pieces[-1].append("\t")
        elif element.tag == WORD_BREAK_TAG and element.get(WORD_TYPE_ATTR) == "page":
            pieces.append([])
        else:
            pieces[-1].append("\n")
    return ["".join(piece) for piece in pieces]


def extract_pages(path: PathLike, options: ExtractOptions | None = None) -> list[PageSegment]:
    """Extract the text of every page of a PDF."""
    return PageAwareTextExtractor(options).extract_pages(path)


def extract_with_page_markers(path: PathLike, options: ExtractOptions | None = None) -> str:
    """Extract a PDF into editable text with ``[PAGE:n]`` markers."""
    return PageAwareTextExtractor(options).extract_with_page_markers(path)


def extract_plain(path: PathLike, source_format: str | None = None, options: ExtractOptions | None = None) -> str:
    """Extract a DOCX or plain-text document without page markers."""
    return PageAwareTextExtractor(options).extract_plain(path, source_format)


__all__ = [
    "PageAwareTextExtractor",
    "extract_pages",
    "extract_with_page_markers",
    "extract_plain",
    "resolve_plain_format",
    "to_display_text",
]
