"""pagereflow - page-faithful round trips between PDF and editable text.

pagereflow extracts a paginated document into one editable text blob in
which every page starts with a ``[PAGE:n]`` marker line, and writes edited
text back to PDF. Written output either reuses the page sizes of a
reference document (one output page per marker) or is laid out on A4 pages
with greedy pagination.

Reading is done with PyMuPDF, PDF output with ReportLab, and Word
documents with python-docx. Output files are written atomically: a failed
conversion never leaves a partial file behind.

Examples
--------
Extract, edit and write back with the original page sizes:

    >>> from pagereflow import extract_with_page_markers, write_matching
    >>> text = extract_with_page_markers("report.pdf")
    >>> text = text.replace("Draft", "Final")
    >>> write_matching(text, "report.pdf", "report-final.pdf")

Readable preview without markers:

    >>> from pagereflow import to_display_text
    >>> print(to_display_text(text))

Geometry lookups never fail; unknown pages are A4:

    >>> from pagereflow import page_size
    >>> page_size("missing.pdf", 1)
    PageSize(width=595.0, height=842.0)

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "pagereflow requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "0.1.0"

from pagereflow.docx_writer import convert_pdf_to_docx, write_docx
from pagereflow.exceptions import (
    ConversionFailed,
    DependencyError,
    DocumentUnreadable,
    FormatError,
    GeometryUnavailable,
    MarkerInconsistency,
    PageReflowError,
    ValidationError,
)
from pagereflow.extractor import (
    PageAwareTextExtractor,
    extract_pages,
    extract_plain,
    extract_with_page_markers,
    to_display_text,
)
from pagereflow.geometry import PageGeometryResolver, describe_document, geometry_table, page_count, page_size
from pagereflow.model import (
    DEFAULT_PAGE_SIZE,
    DocumentInfo,
    GeometryTable,
    LaidOutPage,
    OutputDocument,
    PageSegment,
    PageSize,
    TextRun,
)
from pagereflow.options import ExtractOptions, ReflowOptions
from pagereflow.writer import ReflowPdfWriter, write_default, write_matching

__all__ = [
    "__version__",
    # Extraction
    "PageAwareTextExtractor",
    "extract_with_page_markers",
    "extract_pages",
    "extract_plain",
    "to_display_text",
    # Writing
    "ReflowPdfWriter",
    "write_matching",
    "write_default",
    "write_docx",
    "convert_pdf_to_docx",
    # Geometry
    "PageGeometryResolver",
    "page_count",
    "page_size",
    "geometry_table",
    "describe_document",
    # Options
    "ExtractOptions",
    "ReflowOptions",
    # Model
    "PageSize",
    "DEFAULT_PAGE_SIZE",
    "GeometryTable",
    "PageSegment",
    "TextRun",
    "LaidOutPage",
    "OutputDocument",
    "DocumentInfo",
    # Exceptions
    "PageReflowError",
    "ValidationError",
    "FormatError",
    "DocumentUnreadable",
    "GeometryUnavailable",
    "MarkerInconsistency",
    "ConversionFailed",
    "DependencyError",
]
