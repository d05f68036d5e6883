"""Configuration options for writing edited text back to PDF.

This module defines the options that control page layout for both matched
(reference geometry) and free (A4, greedy pagination) reflow modes.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pagereflow.constants import (
    DEFAULT_BREAK_AT_MARKERS,
    DEFAULT_CREATOR,
    DEFAULT_FALLBACK_ON_MISSING_PAGES,
    DEFAULT_FONT_NAME,
    DEFAULT_FONT_SIZE,
    DEFAULT_LINE_SPACING,
    DEFAULT_MARGIN,
)
from pagereflow.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class ReflowOptions(CloneFrozenMixin):
    """Configuration options for rendering editable text to PDF with ReportLab.

    Parameters
    ----------
    font_name : str, default "Helvetica"
        Font used for every text run. Standard PDF fonts (Helvetica,
        Times-Roman, Courier) need no font file.
    font_path : str or None, default None
        Path to a TrueType font file. When set, the font is registered with
        ReportLab under ``font_name`` and embedded in the output.
    font_size : float, default 11.0
        Font size in points.
    line_spacing : float, default 1.2
        Line height as a multiple of the font size.
    paragraph_spacing : float or None, default None
        Extra vertical space between paragraphs in points. None uses one
        line height.
    margin_top, margin_bottom, margin_left, margin_right : float, default 36.0
        Page margins in points (72 points = 1 inch).
    fallback_on_missing_pages : bool, default True
        In matched mode, switch to free layout when the text carries fewer
        page segments than the reference document has pages.
    break_at_markers : bool, default False
        In free mode, start a new page at every page marker instead of
        dropping the markers.
    reference_password : str or None, default None
        Password for an encrypted reference document.
    creator : str or None, default "pagereflow"
        Creator recorded in the PDF metadata.
    title : str or None, default None
        Title recorded in the PDF metadata.

    """

    font_name: str = field(
        default=DEFAULT_FONT_NAME,
        metadata={"help": "Font name (Helvetica, Times-Roman, Courier or a registered TTF)", "importance": "core"},
    )
    font_path: str | None = field(
        default=None,
        metadata={"help": "TrueType font file registered under font_name", "importance": "advanced"},
    )
    font_size: float = field(
        default=DEFAULT_FONT_SIZE,
        metadata={"help": "Font size in points", "type": float, "importance": "core"},
    )
    line_spacing: float = field(
        default=DEFAULT_LINE_SPACING,
        metadata={"help": "Line spacing multiplier (1.0 = single)", "type": float, "importance": "advanced"},
    )
    paragraph_spacing: float | None = field(
        default=None,
        metadata={"help": "Space between paragraphs in points (default: one line)", "type": float},
    )
    margin_top: float = field(
        default=DEFAULT_MARGIN,
        metadata={"help": "Top margin in points (72pt = 1 inch)", "type": float, "importance": "advanced"},
    )
    margin_bottom: float = field(
        default=DEFAULT_MARGIN,
        metadata={"help": "Bottom margin in points", "type": float, "importance": "advanced"},
    )
    margin_left: float = field(
        default=DEFAULT_MARGIN, metadata={"help": "Left margin in points", "type": float, "importance": "advanced"}
    )
    margin_right: float = field(
        default=DEFAULT_MARGIN, metadata={"help": "Right margin in points", "type": float, "importance": "advanced"}
    )
    fallback_on_missing_pages: bool = field(
        default=DEFAULT_FALLBACK_ON_MISSING_PAGES,
        metadata={"help": "Use free layout when markers cover fewer pages than the reference", "importance": "core"},
    )
    break_at_markers: bool = field(
        default=DEFAULT_BREAK_AT_MARKERS,
        metadata={"help": "Free mode: start a new page at each page marker", "importance": "core"},
    )
    reference_password: str | None = field(
        default=None,
        metadata={"help": "Password for an encrypted reference PDF", "importance": "security"},
    )
    creator: str | None = field(
        default=DEFAULT_CREATOR,
        metadata={"help": "Creator application name for PDF metadata", "importance": "advanced"},
    )
    title: str | None = field(default=None, metadata={"help": "Document title for PDF metadata"})

    def __post_init__(self) -> None:
        """Validate numeric ranges for reflow options.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.font_size <= 0:
            raise ValueError(f"font_size must be positive, got {self.font_size}")
        if self.line_spacing < 1.0:
            raise ValueError(f"line_spacing must be at least 1.0, got {self.line_spacing}")
        if self.paragraph_spacing is not None and self.paragraph_spacing < 0:
            raise ValueError(f"paragraph_spacing must be non-negative, got {self.paragraph_spacing}")
        for name in ("margin_top", "margin_bottom", "margin_left", "margin_right"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")

    @property
    def line_height(self) -> float:
        """Vertical distance between consecutive baselines, in points."""
        return self.font_size * self.line_spacing

    @property
    def effective_paragraph_spacing(self) -> float:
        """Space inserted between paragraphs, in points."""
        return self.line_height if self.paragraph_spacing is None else self.paragraph_spacing
