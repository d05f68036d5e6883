#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pagereflow/layout.py
"""Line wrapping and pagination for reflowed text.

Layout is pure: it works on page sizes and a text-measuring callable and
never touches a native document handle. The writer supplies the measuring
function (ReportLab's ``stringWidth`` for the selected font) and draws the
resulting :class:`~pagereflow.model.LaidOutPage` objects.

Vertical positions follow PDF coordinates: ``y`` grows upwards and each
:class:`~pagereflow.model.TextRun` is placed at its baseline. The first
baseline of a page sits one font size below the top margin; every further
line moves down by one line height.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable

from pagereflow.constants import TAB_SIZE
from pagereflow.model import LaidOutPage, PageSize, TextRun
from pagereflow.options.reflow import ReflowOptions
from pagereflow.utils.text import split_paragraphs

logger = logging.getLogger(__name__)

MeasureFn = Callable[[str], float]

# Absorbs float noise when a paragraph fills the page exactly
_FIT_TOLERANCE = 1e-6

# A word together with the whitespace in front of it
_WORD_RE = re.compile(r"\s*\S+")


@dataclass(frozen=True)
class LayoutMetrics:
    """Text area of one page, derived from the reflow options and page size.

    Parameters
    ----------
    size : PageSize
        Physical page size in points
    options : ReflowOptions
        Margins, font size and spacing

    """

    size: PageSize
    options: ReflowOptions

    @property
    def left(self) -> float:
        return self.options.margin_left

    @property
    def font_size(self) -> float:
        return self.options.font_size

    @property
    def line_height(self) -> float:
        return self.options.line_height

    @property
    def paragraph_spacing(self) -> float:
        return self.options.effective_paragraph_spacing

    @property
    def usable_width(self) -> float:
        return self.size.width - self.options.margin_left - self.options.margin_right

    @property
    def usable_height(self) -> float:
        return self.size.height - self.options.margin_top - self.options.margin_bottom

    def baseline(self, used_height: float) -> float:
        """Return the baseline ``y`` of a line starting ``used_height`` below the top margin."""
        return self.size.height - self.options.margin_top - used_height - self.options.font_size

    def fits(self, used_height: float, extra: float) -> bool:
        return used_height + extra <= self.usable_height + _FIT_TOLERANCE


def wrap_text(text: str, max_width: float, measure: MeasureFn) -> list[str]:
    """Wrap text at word boundaries to fit ``max_width``.

    Every source line is wrapped on its own. Tabs are expanded to spaces and
    the whitespace between words, including leading indentation, is kept;
    only the whitespace at a wrap point is dropped. A word wider than the
    line is placed alone on its own line; words are never split.

    Parameters
    ----------
    text : str
        Text to wrap, possibly containing single newlines
    max_width : float
        Available line width in points
    measure : callable
        Returns the rendered width of a string in points

    Returns
    -------
    list of str
        Wrapped lines; empty for empty text

    Examples
    --------
        >>> wrap_text("aa bb cc", 5, len)
        ['aa bb', 'cc']
        >>> wrap_text("name\\tvalue", 20, len)
        ['name    value']

    """
    if not text:
        return []

    lines: list[str] = []
    for source_line in text.split("\n"):
        words = _WORD_RE.findall(source_line.expandtabs(TAB_SIZE))
        if not words:
            lines.append("")
            continue
        current = words[0]
        for word in words[1:]:
            candidate = current + word
            if measure(candidate) <= max_width:
                current = candidate
            else:
                lines.append(current)
                current = word.lstrip()
        lines.append(current)
    return lines


def _wrap_paragraphs(paragraphs: Iterable[str], metrics: LayoutMetrics, measure: MeasureFn) -> list[list[str]]:
    wrapped = []
    for paragraph in paragraphs:
        lines = wrap_text(paragraph, metrics.usable_width, measure)
        if lines:
            wrapped.append(lines)
    return wrapped


def layout_matched_page(
    text: str,
    size: PageSize,
    options: ReflowOptions,
    measure: MeasureFn,
    source_page: int | None = None,
) -> LaidOutPage:
    """Lay out one segment on exactly one page.

    Lines continue top-down with no re-pagination. Text that overflows the
    bottom margin is still placed (below the text area) and a warning is
    logged, so the output keeps the reference page count.

    Parameters
    ----------
    text : str
        Segment text
    size : PageSize
        Geometry of the output page
    options : ReflowOptions
        Layout options
    measure : callable
        Text width function for the selected font
    source_page : int or None, optional
        Page number the segment's marker encoded

    """
    metrics = LayoutMetrics(size, options)
    page = LaidOutPage(size=size, source_page=source_page)
    used = 0.0

    for index, lines in enumerate(_wrap_paragraphs(split_paragraphs(text), metrics, measure)):
        if index:
            used += metrics.paragraph_spacing
        for line in lines:
            page.runs.append(TextRun(text=line, x=metrics.left, y=metrics.baseline(used)))
            used += metrics.line_height

    if not metrics.fits(used, 0.0):
        logger.warning(
            f"Text for page {source_page if source_page is not None else '?'} overflows its page "
            f"({used:.1f}pt of {metrics.usable_height:.1f}pt); keeping it on one page"
        )
    return page


def layout_free(
    paragraphs: Iterable[str],
    size: PageSize,
    options: ReflowOptions,
    measure: MeasureFn,
    source_page: int | None = None,
) -> list[LaidOutPage]:
    """Paginate paragraphs greedily onto pages of one size.

    Single pass, never backtracking: a paragraph that does not fit in the
    space left on a non-empty page starts a new page. A paragraph taller
    than a whole page is split between lines across as many pages as it
    needs.

    Returns
    -------
    list of LaidOutPage
        At least one page, blank if there is no text.

    """
    metrics = LayoutMetrics(size, options)
    pages = [LaidOutPage(size=size, source_page=source_page)]
    page = pages[0]
    used = 0.0

    def new_page() -> LaidOutPage:
        fresh = LaidOutPage(size=size, source_page=source_page)
        pages.append(fresh)
        return fresh

    for lines in _wrap_paragraphs(paragraphs, metrics, measure):
        gap = metrics.paragraph_spacing if page.runs else 0.0
        if page.runs and not metrics.fits(used, gap + len(lines) * metrics.line_height):
            page, used, gap = new_page(), 0.0, 0.0
        used += gap

        for line in lines:
            if page.runs and not metrics.fits(used, metrics.line_height):
                page, used = new_page(), 0.0
            page.runs.append(TextRun(text=line, x=metrics.left, y=metrics.baseline(used)))
            used += metrics.line_height

    logger.debug(f"Free layout placed {sum(len(p.runs) for p in pages)} line(s) on {len(pages)} page(s)")
    return pages


__all__ = [
    "MeasureFn",
    "LayoutMetrics",
    "split_paragraphs",
    "wrap_text",
    "layout_matched_page",
    "layout_free",
]
