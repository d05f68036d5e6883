#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pagereflow/markers.py
"""Page-boundary markers inside editable text.

Editable text records page boundaries in-band with marker lines::

    [PAGE:1]
    first page text

    [PAGE:2]
    second page text

A marker is recognised only when it is a whole line on its own: the literal
``[PAGE:n]`` (``n`` a positive decimal integer) followed by a newline.
``[PAGE:`` occurring inside a line of page content is ordinary text.

Escaping
--------
A content line that would itself read as a marker line is written with one
extra leading backslash (``\\[PAGE:3]``); lines that already start with
backslashes before such a token get one more. Splitting removes exactly one
backslash again, so every page's text survives the round trip unchanged.

"""

from __future__ import annotations

import logging
import re
from typing import Iterable

from pagereflow.constants import (
    DISPLAY_PAGE_BREAK,
    ESCAPED_MARKER_PATTERN,
    MARKER_ESCAPE_CHAR,
    PAGE_MARKER_PATTERN,
    PAGE_MARKER_TEMPLATE,
    PAGE_SEPARATOR,
)
from pagereflow.model import PageSegment
from pagereflow.utils.text import normalize_newlines

logger = logging.getLogger(__name__)

_MARKER_RE = re.compile(PAGE_MARKER_PATTERN, re.MULTILINE)
_MARKER_SHAPED_LINE_RE = re.compile(ESCAPED_MARKER_PATTERN, re.MULTILINE)
_ESCAPED_LINE_RE = re.compile(r"^\\(\\*\[PAGE:\d+\][ \t]*)$", re.MULTILINE)


def format_marker(page_number: int) -> str:
    """Return the marker token for a 1-based page number.

    Raises
    ------
    ValueError
        If ``page_number`` is not positive.

    """
    if page_number < 1:
        raise ValueError(f"Page numbers start at 1, got {page_number}")
    return PAGE_MARKER_TEMPLATE.format(number=page_number)


def escape_page_text(text: str) -> str:
    """Escape content lines that would otherwise be read as markers."""
    return _MARKER_SHAPED_LINE_RE.sub(lambda m: MARKER_ESCAPE_CHAR + m.group(0), text)


def unescape_page_text(text: str) -> str:
    """Reverse :func:`escape_page_text`."""
    return _ESCAPED_LINE_RE.sub(lambda m: m.group(1), text)


def has_markers(text: str) -> bool:
    """Return True if ``text`` contains at least one marker line."""
    return _MARKER_RE.search(normalize_newlines(text)) is not None


def find_markers(text: str) -> list[int]:
    """Return the page numbers encoded by the marker lines, in text order."""
    return [int(m.group(1)) for m in _MARKER_RE.finditer(normalize_newlines(text))]


def build_marked_text(pages: Iterable[str], include_first_marker: bool = True) -> str:
    """Join page texts into editable text with a marker before each page.

    Every page contributes ``[PAGE:n]\\n`` + escaped text + a blank line.
    With ``include_first_marker`` False the ``[PAGE:1]`` line is omitted and
    the text before the first marker is read back as page 1.

    Examples
    --------
        >>> build_marked_text(["A", "B"])
        '[PAGE:1]\\nA\\n\\n[PAGE:2]\\nB\\n\\n'

    """
    parts: list[str] = []
    for page_number, page_text in enumerate(pages, start=1):
        if page_number > 1 or include_first_marker:
            parts.append(format_marker(page_number) + "\n")
        parts.append(escape_page_text(page_text))
        parts.append(PAGE_SEPARATOR)
    return "".join(parts)


def split_segments(text: str) -> list[PageSegment]:
    """Split editable text into page segments on marker lines.

    The marker tokens are discarded; each segment records the page number
    its marker encoded. Segment text is unescaped and stripped of the blank
    lines that separate pages.

    Text without any marker yields a single segment with ``page_number``
    None. Text before the first marker is kept: when the first marker is
    ``[PAGE:2]`` (the ``[PAGE:1]`` line was omitted) it is page 1 even if
    empty; any other non-blank preamble is page ``n - 1`` for a first
    marker ``[PAGE:n]`` with ``n > 1``, or is prepended to page 1.

    Returns
    -------
    list of PageSegment
        Segments in text order.

    """
    text = normalize_newlines(text)
    matches = list(_MARKER_RE.finditer(text))
    if not matches:
        return [PageSegment(page_number=None, text=unescape_page_text(text.strip("\n")))]

    segments: list[PageSegment] = []
    for index, match in enumerate(matches):
        end = matches[index + 1].start() if index + 1 < len(matches) else len(text)
        body = text[match.end() : end].strip("\n")
        segments.append(PageSegment(page_number=int(match.group(1)), text=unescape_page_text(body)))

    preamble = text[: matches[0].start()].strip("\n")
    first = segments[0]
    if first.page_number is not None and first.page_number > 1 and (preamble.strip() or first.page_number == 2):
        segments.insert(0, PageSegment(page_number=first.page_number - 1, text=unescape_page_text(preamble)))
    elif preamble.strip():
        logger.debug("Text before the first page marker was merged into page %s", first.page_number)
        joined = unescape_page_text(preamble)
        first.text = f"{joined}\n\n{first.text}" if first.text else joined

    return segments


def strip_markers(text: str) -> str:
    """Remove marker lines, leaving the page texts separated by blank lines."""
    return PAGE_SEPARATOR.join(segment.text for segment in split_segments(text) if segment.text.strip())


def to_display_text(text: str) -> str:
    """Replace every marker line with a human-readable page separator.

    The result is meant for read-only presentation and is never fed back
    into the writer. It contains no marker lines, so applying the function
    again returns it unchanged.

    Examples
    --------
        >>> to_display_text("[PAGE:1]\\nA\\n\\n[PAGE:2]\\nB\\n\\n")
        '--- Page Break ---\\nA\\n\\n--- Page Break ---\\nB\\n\\n'

    """
    return _MARKER_RE.sub(DISPLAY_PAGE_BREAK, normalize_newlines(text))


__all__ = [
    "format_marker",
    "escape_page_text",
    "unescape_page_text",
    "has_markers",
    "find_markers",
    "build_marked_text",
    "split_segments",
    "strip_markers",
    "to_display_text",
]
