#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for pagereflow.

Constants are organized by category:
1. Type Definitions
2. Page Geometry
3. Page Markers
4. Layout Defaults
5. Dependencies
6. Source Formats
7. CLI
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

PlainSourceFormat = Literal["docx", "txt"]
ReflowMode = Literal["matched", "free"]

# =============================================================================
# Page Geometry
# =============================================================================

# A4 portrait at 72 dpi, in points
DEFAULT_PAGE_WIDTH = 595.0
DEFAULT_PAGE_HEIGHT = 842.0

# =============================================================================
# Page Markers
# =============================================================================

PAGE_MARKER_TEMPLATE = "[PAGE:{number}]"
# A marker only counts when it is the whole line
PAGE_MARKER_PATTERN = r"^\[PAGE:(\d+)\][ \t]*$"
# Content lines shaped like a marker line, possibly already escaped
ESCAPED_MARKER_PATTERN = r"^(\\*)(\[PAGE:\d+\][ \t]*)$"
MARKER_ESCAPE_CHAR = "\\"
PAGE_SEPARATOR = "\n\n"
DISPLAY_PAGE_BREAK = "--- Page Break ---"

DEFAULT_INCLUDE_FIRST_MARKER = True
DEFAULT_DOCX_PAGE_BREAKS = True

# =============================================================================
# Layout Defaults
# =============================================================================

DEFAULT_FONT_NAME = "Helvetica"
DEFAULT_FONT_SIZE = 11.0
DEFAULT_LINE_SPACING = 1.2
DEFAULT_MARGIN = 36.0
DEFAULT_CREATOR = "pagereflow"
DEFAULT_FALLBACK_ON_MISSING_PAGES = True
DEFAULT_BREAK_AT_MARKERS = False

# Tab stops used when expanding tabs in laid-out lines
TAB_SIZE = 4

# Python codecs for the encodings of the standard PDF fonts
STANDARD_FONT_CODECS = {
    "WinAnsiEncoding": "cp1252",
    "MacRomanEncoding": "mac_roman",
}

# Temporary output files are written next to their destination
TEMP_OUTPUT_SUFFIX = ".part"

# =============================================================================
# Dependencies
# =============================================================================

PDF_MIN_PYMUPDF_VERSION = "1.26.4"

DEPS_PDF_READ = [("pymupdf", "fitz", f">={PDF_MIN_PYMUPDF_VERSION}")]
DEPS_PDF_RENDER = [("reportlab", "reportlab", ">=4.0.0")]
DEPS_DOCX = [("python-docx", "docx", ">=1.2.0")]

# =============================================================================
# Source Formats
# =============================================================================

PLAIN_FORMAT_EXTENSIONS: dict[str, PlainSourceFormat] = {
    ".docx": "docx",
    ".txt": "txt",
    ".text": "txt",
}
SUPPORTED_PLAIN_FORMATS = ["docx", "txt"]
DEFAULT_TEXT_FALLBACK_ENCODINGS = ("utf-8", "utf-8-sig", "latin-1")

# =============================================================================
# CLI
# =============================================================================

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_DEPENDENCY_ERROR = 2
EXIT_VALIDATION_ERROR = 3
EXIT_UNREADABLE_ERROR = 4
EXIT_FORMAT_ERROR = 5
EXIT_CONVERSION_ERROR = 7

CONFIG_ENV_VAR = "PAGEREFLOW_CONFIG"
