#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pagereflow/utils/text.py
"""Text normalization helpers shared by extraction and layout.

Functions
---------
normalize_newlines : Convert CRLF/CR line endings to LF
normalize_page_text : Clean up text extracted from a single page
split_paragraphs : Split text into paragraphs on blank lines

"""

from __future__ import annotations

import re

_BLANK_LINE_RE = re.compile(r"\n[ \t]*\n")
# Form feeds and other page-level control characters emitted by extractors
_CONTROL_RE = re.compile(r"[\f\v\x00]")


def normalize_newlines(text: str) -> str:
    """Convert Windows and old Mac line endings to ``\\n``."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def normalize_page_text(text: str) -> str:
    """Normalize the raw text of one extracted page.

    Line endings become ``\\n``, control characters are removed, trailing
    whitespace is dropped from every line and blank lines around the page
    content are trimmed.

    Examples
    --------
        >>> normalize_page_text("Title  \\r\\n\\r\\nBody\\f")
        'Title\\n\\nBody'

    """
    text = _CONTROL_RE.sub("", normalize_newlines(text))
    lines = [line.rstrip() for line in text.split("\n")]
    return "\n".join(lines).strip("\n")


def split_paragraphs(text: str) -> list[str]:
    """Split text into paragraphs on blank-line boundaries.

    Single newlines inside a paragraph are kept, so each source line can be
    wrapped on its own. Runs of blank lines count as one boundary and
    whitespace-only paragraphs are dropped.

    Examples
    --------
        >>> split_paragraphs("one\\ntwo\\n\\n\\nthree")
        ['one\\ntwo', 'three']

    """
    paragraphs = []
    for chunk in _BLANK_LINE_RE.split(normalize_newlines(text)):
        chunk = chunk.strip("\n")
        if chunk.strip():
            paragraphs.append(chunk)
    return paragraphs
