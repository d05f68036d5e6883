"""Configuration options for page-aware text extraction.

This module defines the options used when turning a paginated or reflowable
source document into editable text.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pagereflow.constants import (
    DEFAULT_DOCX_PAGE_BREAKS,
    DEFAULT_INCLUDE_FIRST_MARKER,
    DEFAULT_TEXT_FALLBACK_ENCODINGS,
)
from pagereflow.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class ExtractOptions(CloneFrozenMixin):
    """Configuration options for text extraction.

    Parameters
    ----------
    password : str or None, default None
        Password used to open encrypted PDF documents.
    include_first_marker : bool, default True
        Emit the ``[PAGE:1]`` marker before the first page. When False the
        first page's text starts the output and is still read back as page 1.
    docx_page_breaks : bool, default True
        When extracting a DOCX document that has hard page breaks, emit one
        ``[PAGE:n]`` segment per page instead of unmarked text.
    text_encodings : tuple of str, default ("utf-8", "utf-8-sig", "latin-1")
        Encodings tried, after chardet detection, for plain-text sources.
    detect_encoding : bool, default True
        Use chardet to guess the encoding of plain-text sources.

    """

    password: str | None = field(
        default=None,
        metadata={"help": "Password for encrypted PDF documents", "importance": "security"},
    )
    include_first_marker: bool = field(
        default=DEFAULT_INCLUDE_FIRST_MARKER,
        metadata={
            "help": "Emit the [PAGE:1] marker before the first page",
            "cli_name": "no-first-marker",
            "importance": "core",
        },
    )
    docx_page_breaks: bool = field(
        default=DEFAULT_DOCX_PAGE_BREAKS,
        metadata={
            "help": "Turn hard page breaks in DOCX sources into page markers",
            "cli_name": "no-docx-page-breaks",
            "importance": "core",
        },
    )
    text_encodings: tuple[str, ...] = field(
        default=DEFAULT_TEXT_FALLBACK_ENCODINGS,
        metadata={"help": "Fallback encodings for plain-text sources", "importance": "advanced"},
    )
    detect_encoding: bool = field(
        default=True,
        metadata={"help": "Detect plain-text encodings with chardet", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Normalize list-valued settings coming from configuration files."""
        if isinstance(self.text_encodings, list):
            object.__setattr__(self, "text_encodings", tuple(self.text_encodings))
        if not self.text_encodings:
            raise ValueError("text_encodings must name at least one encoding")
