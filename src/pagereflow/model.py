#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pagereflow/model.py
"""Data model shared by the extractor, geometry resolver and writer.

Geometry is expressed in PDF points. Page numbers are 1-based everywhere a
user can see them (markers, geometry lookups); list positions are 0-based.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from pagereflow.constants import DEFAULT_PAGE_HEIGHT, DEFAULT_PAGE_WIDTH, ReflowMode
from pagereflow.utils.text import split_paragraphs


@dataclass(frozen=True)
class PageSize:
    """Physical size of one page in points."""

    width: float
    height: float

    def as_tuple(self) -> tuple[float, float]:
        """Return ``(width, height)``, the shape ReportLab expects for a page size."""
        return (self.width, self.height)


DEFAULT_PAGE_SIZE = PageSize(DEFAULT_PAGE_WIDTH, DEFAULT_PAGE_HEIGHT)


@dataclass(frozen=True)
class GeometryTable:
    """Page sizes of a reference document keyed by 1-based page number.

    Lookups never fail: a page number outside ``1..page_count`` resolves to
    the A4 default.
    """

    sizes: tuple[PageSize, ...] = ()

    @property
    def page_count(self) -> int:
        return len(self.sizes)

    def lookup(self, page_number: int | None) -> PageSize:
        """Return the size of ``page_number``, or the A4 default if unknown."""
        if page_number is None or page_number < 1 or page_number > len(self.sizes):
            return DEFAULT_PAGE_SIZE
        return self.sizes[page_number - 1]

    def __iter__(self) -> Iterator[tuple[int, PageSize]]:
        return iter(enumerate(self.sizes, start=1))


@dataclass
class PageSegment:
    """Text belonging to one page of editable text.

    Parameters
    ----------
    page_number : int or None
        1-based page number encoded by the marker that opened the segment,
        or None when the text carried no marker at all.
    text : str
        Raw (unescaped) page text without the marker line.

    """

    page_number: int | None
    text: str

    @property
    def paragraphs(self) -> list[str]:
        return split_paragraphs(self.text)


@dataclass(frozen=True)
class TextRun:
    """One wrapped line of text placed at a baseline position."""

    text: str
    x: float
    y: float


@dataclass
class LaidOutPage:
    """One page of an output document after layout."""

    size: PageSize
    runs: list[TextRun] = field(default_factory=list)
    source_page: int | None = None

    @property
    def is_blank(self) -> bool:
        return not self.runs


@dataclass
class OutputDocument:
    """Pages of a document under construction, in output order.

    The layout planner fills it; the PDF writer draws it and flushes it to
    storage exactly once.
    """

    pages: list[LaidOutPage] = field(default_factory=list)
    mode: ReflowMode = "free"

    @property
    def page_count(self) -> int:
        return len(self.pages)


@dataclass(frozen=True)
class DocumentInfo:
    """Page count and per-page geometry of a paginated document."""

    path: str
    geometry: GeometryTable

    @property
    def page_count(self) -> int:
        return self.geometry.page_count


__all__ = [
    "PageSize",
    "DEFAULT_PAGE_SIZE",
    "GeometryTable",
    "PageSegment",
    "TextRun",
    "LaidOutPage",
    "OutputDocument",
    "DocumentInfo",
]
