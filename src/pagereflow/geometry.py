#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pagereflow/geometry.py
"""Page geometry lookup with graceful degradation.

Geometry is advisory for every caller: a document that cannot be opened, a
page number outside the document, or any other lookup failure resolves to
A4 portrait (595 x 842 pt). Failures are reported through logging only and
never abort a conversion.

"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from pagereflow.exceptions import GeometryUnavailable
from pagereflow.model import DEFAULT_PAGE_SIZE, DocumentInfo, GeometryTable, PageSize
from pagereflow.resources import query_all_page_sizes, query_page_count, query_page_size

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class PageGeometryResolver:
    """Resolve page counts and page sizes of paginated documents.

    Parameters
    ----------
    password : str or None, default None
        Password used to open encrypted documents.

    Examples
    --------
        >>> resolver = PageGeometryResolver()
        >>> resolver.page_size("report.pdf", 2)
        PageSize(width=612.0, height=792.0)
        >>> resolver.page_size("missing.pdf", 1)
        PageSize(width=595.0, height=842.0)

    """

    def __init__(self, password: str | None = None):
        self.password = password

    def page_count(self, path: PathLike) -> int:
        """Return the number of pages, or 0 if the document cannot be read."""
        try:
            return query_page_count(path, self.password)
        except GeometryUnavailable as e:
            logger.warning(f"Page count unavailable, using 0: {e.message}")
            return 0

    def page_size(self, path: PathLike, page_number: int) -> PageSize:
        """Return the size of a 1-based page, or A4 if it cannot be determined."""
        try:
            return query_page_size(path, page_number, self.password)
        except GeometryUnavailable as e:
            logger.debug(f"Page size unavailable, using A4 default: {e.message}")
            return DEFAULT_PAGE_SIZE

    def geometry_table(self, path: PathLike) -> GeometryTable:
        """Return every page's size, opening the document only once.

        An unreadable document yields an empty table whose lookups all
        return the A4 default.
        """
        try:
            sizes = query_all_page_sizes(path, self.password)
        except GeometryUnavailable as e:
            logger.warning(f"Reference geometry unavailable, using A4 for every page: {e.message}")
            return GeometryTable()
        logger.debug(f"Resolved geometry of {len(sizes)} page(s) from {path}")
        return GeometryTable(sizes=sizes)

    def describe(self, path: PathLike) -> DocumentInfo:
        """Return page count and geometry of a document."""
        return DocumentInfo(path=str(path), geometry=self.geometry_table(path))


_default_resolver = PageGeometryResolver()


def page_count(path: PathLike) -> int:
    """Return the number of pages in ``path``; 0 on any failure."""
    return _default_resolver.page_count(path)


def page_size(path: PathLike, page_number: int) -> PageSize:
    """Return ``(width, height)`` of page ``page_number`` (1-based); A4 on any failure."""
    return _default_resolver.page_size(path, page_number)


def geometry_table(path: PathLike) -> GeometryTable:
    """Return the geometry of every page of ``path``; empty on failure."""
    return _default_resolver.geometry_table(path)


def describe_document(path: PathLike) -> DocumentInfo:
    """Return page count and per-page geometry of ``path``."""
    return _default_resolver.describe(path)


__all__ = ["PageGeometryResolver", "page_count", "page_size", "geometry_table", "describe_document"]
