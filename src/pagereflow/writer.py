#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pagereflow/writer.py
"""Write editable text back to PDF.

Two modes are supported:

- **matched**: one output page per marker-delimited segment, each sized like
  the reference document's page with the same number. Overflowing text stays
  on its page so the output keeps the reference pagination.
- **free**: every page is A4 and paragraphs are paginated greedily.

Matched mode falls back to free mode when the markers cannot describe the
reference document: no markers at all against a multi-page reference, or
(by default) fewer segments than reference pages.

Output is rendered with ReportLab's canvas into a temporary file beside the
destination and moved over it only once the PDF has been saved, so a failed
conversion leaves neither a partial file nor a damaged previous version.

"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterable, Union

from pagereflow.constants import DEPS_PDF_READ, DEPS_PDF_RENDER, STANDARD_FONT_CODECS
from pagereflow.exceptions import ConversionFailed, MarkerInconsistency, PageReflowError
from pagereflow.geometry import PageGeometryResolver
from pagereflow.layout import MeasureFn, layout_free, layout_matched_page
from pagereflow.markers import has_markers, split_segments, strip_markers
from pagereflow.model import DEFAULT_PAGE_SIZE, GeometryTable, OutputDocument, PageSegment
from pagereflow.options.reflow import ReflowOptions
from pagereflow.resources import atomic_output, with_write_handle
from pagereflow.utils.decorators import debug_timer, requires_dependencies
from pagereflow.utils.text import split_paragraphs

if TYPE_CHECKING:
    from reportlab.pdfgen.canvas import Canvas

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _unencodable_chars(texts: Iterable[str], codec: str) -> list[str]:
    """Return the distinct characters of ``texts`` that ``codec`` cannot encode, in order of appearance."""
    found: dict[str, None] = {}
    for text in texts:
        try:
            text.encode(codec)
            continue
        except UnicodeEncodeError:
            pass
        for char in text:
            if char in found:
                continue
            try:
                char.encode(codec)
            except UnicodeEncodeError:
                found[char] = None
    return list(found)


class ReflowPdfWriter:
    """Render editable text to PDF in matched or free mode.

    Parameters
    ----------
    options : ReflowOptions or None, default None
        Layout and metadata options

    Examples
    --------
    Rebuild a PDF from its edited text, keeping the original page sizes:

        >>> from pagereflow import extract_with_page_markers
        >>> text = extract_with_page_markers("report.pdf")
        >>> ReflowPdfWriter().write_matching(text, "report.pdf", "report-edited.pdf")
        PosixPath('report-edited.pdf')

    """

    def __init__(self, options: ReflowOptions | None = None):
        self.options = options or ReflowOptions()
        self._resolver = PageGeometryResolver(password=self.options.reference_password)

    def _font_measure(self) -> MeasureFn:
        """Register the configured font if needed and return its width function."""
        from reportlab.pdfbase import pdfmetrics

        font_name = self.options.font_name
        try:
            if self.options.font_path:
                from reportlab.pdfbase.ttfonts import TTFont

                pdfmetrics.registerFont(TTFont(font_name, self.options.font_path))
                logger.debug(f"Registered TrueType font {font_name} from {self.options.font_path}")
            pdfmetrics.getFont(font_name)
        except Exception as e:
            raise ConversionFailed(
                f"Font {font_name!r} is not available: {e!r}", conversion_stage="font", original_error=e
            ) from e

        font_size = self.options.font_size
        return lambda text: pdfmetrics.stringWidth(text, font_name, font_size)

    def _font_codec(self) -> str | None:
        """Return the codec of a standard font's single-byte encoding, or None for TrueType fonts."""
        if self.options.font_path:
            return None
        from reportlab.pdfbase import pdfmetrics

        encoding = getattr(pdfmetrics.getFont(self.options.font_name), "encoding", None)
        return STANDARD_FONT_CODECS.get(getattr(encoding, "name", None))

    def _check_encodable(self, document: OutputDocument) -> None:
        """Reject text the selected font cannot encode.

        Raises
        ------
        ConversionFailed
            With ``conversion_stage="encoding"`` for the first page holding
            characters outside the font's encoding

        """
        codec = self._font_codec()
        if codec is None:
            return

        for index, page in enumerate(document.pages, start=1):
            unencodable = _unencodable_chars((run.text for run in page.runs), codec)
            if unencodable:
                source = f" (source page {page.source_page})" if page.source_page is not None else ""
                raise ConversionFailed(
                    f"Page {index}{source} has characters that font {self.options.font_name!r} cannot encode: "
                    f"{''.join(unencodable[:20])!r}; set font_path to a TrueType font that covers them",
                    conversion_stage="encoding",
                )

    def _layout_free_segments(self, segments: list[PageSegment], measure: MeasureFn) -> OutputDocument:
        document = OutputDocument(mode="free")
        for segment in segments:
            document.pages.extend(
                layout_free(segment.paragraphs, DEFAULT_PAGE_SIZE, self.options, measure, segment.page_number)
            )
        return document

    @requires_dependencies("pdf_render", DEPS_PDF_RENDER)
    def plan_default(self, text: str) -> OutputDocument:
        """Lay out text on A4 pages with greedy pagination.

        Marker lines are dropped, or start a new page each when
        ``break_at_markers`` is set.
        """
        measure = self._font_measure()
        if self.options.break_at_markers and has_markers(text):
            document = self._layout_free_segments(split_segments(text), measure)
        else:
            document = OutputDocument(mode="free")
            document.pages.extend(
                layout_free(split_paragraphs(strip_markers(text)), DEFAULT_PAGE_SIZE, self.options, measure)
            )
        self._check_encodable(document)
        logger.debug(f"Planned {document.page_count} free-layout page(s)")
        return document

    def _check_segments(self, segments: list[PageSegment], geometry: GeometryTable) -> None:
        reference_pages = geometry.page_count
        if segments[0].page_number is None:
            if reference_pages > 1:
                raise MarkerInconsistency(
                    f"Text has no page markers but the reference has {reference_pages} pages",
                    segment_count=1,
                    reference_page_count=reference_pages,
                )
        elif self.options.fallback_on_missing_pages and len(segments) < reference_pages:
            raise MarkerInconsistency(
                f"Text has {len(segments)} page segment(s) but the reference has {reference_pages} pages",
                segment_count=len(segments),
                reference_page_count=reference_pages,
            )

    def _plan_matched(self, text: str, reference_path: PathLike) -> OutputDocument:
        segments = split_segments(text)
        geometry = self._resolver.geometry_table(reference_path)
        self._check_segments(segments, geometry)

        measure = self._font_measure()
        document = OutputDocument(mode="matched")
        for segment in segments:
            page_number = segment.page_number if segment.page_number is not None else 1
            size = geometry.lookup(page_number)
            document.pages.append(layout_matched_page(segment.text, size, self.options, measure, page_number))
        self._check_encodable(document)
        logger.debug(f"Planned {document.page_count} page(s) matched to {reference_path}")
        return document

    @requires_dependencies("pdf_render", DEPS_PDF_RENDER)
    def plan_matching(self, text: str, reference_path: PathLike) -> OutputDocument:
        """Lay out text against a reference document's page geometry.

        Returns a free-mode document when the markers do not fit the
        reference (see the module docstring).
        """
        try:
            return self._plan_matched(text, reference_path)
        except MarkerInconsistency as e:
            logger.warning(f"{e.message}; falling back to free layout")
            return self.plan_default(text)

    def _draw(self, pdf: "Canvas", document: OutputDocument) -> None:
        for page in document.pages:
            pdf.setPageSize(page.size.as_tuple())
            pdf.setFont(self.options.font_name, self.options.font_size)
            for run in page.runs:
                pdf.drawString(run.x, run.y, run.text)
            pdf.showPage()

    def _open_canvas(self, path: Path, document: OutputDocument) -> "Canvas":
        from reportlab.pdfgen import canvas

        first_size = document.pages[0].size if document.pages else DEFAULT_PAGE_SIZE
        pdf = canvas.Canvas(str(path), pagesize=first_size.as_tuple())
        if self.options.creator:
            pdf.setCreator(self.options.creator)
        if self.options.title:
            pdf.setTitle(self.options.title)
        return pdf

    @requires_dependencies("pdf_render", DEPS_PDF_RENDER)
    def render(self, document: OutputDocument, output_path: PathLike) -> Path:
        """Draw a planned document and save it atomically to ``output_path``.

        Raises
        ------
        ConversionFailed
            If drawing or saving fails. Nothing is left at ``output_path``
            unless a previous file was there, which stays untouched.

        """
        target = Path(output_path)
        try:
            with atomic_output(target) as temp_path:
                with_write_handle(
                    lambda: self._open_canvas(temp_path, document),
                    lambda pdf: self._draw(pdf, document),
                    output_path=temp_path,
                    finalize=lambda pdf: pdf.save(),
                )
        except Exception as e:
            raise ConversionFailed(
                f"Failed to render PDF: {e!r}", output_path=str(target), conversion_stage="rendering", original_error=e
            ) from e

        logger.info(f"Wrote {document.page_count} page(s) to {target} ({document.mode} layout)")
        return target

    def _plan_and_render(self, plan: Callable[[], OutputDocument], output_path: PathLike, operation: str) -> Path:
        try:
            with debug_timer(logger, operation):
                document = plan()
        except PageReflowError:
            raise
        except Exception as e:
            raise ConversionFailed(
                f"Failed to lay out text: {e!r}",
                output_path=str(output_path),
                conversion_stage="layout",
                original_error=e,
            ) from e
        return self.render(document, output_path)

    @requires_dependencies("pdf_read", DEPS_PDF_READ)
    def write_matching(self, text: str, reference_path: PathLike, output_path: PathLike) -> Path:
        """Write text as a PDF matching the reference document's pages.

        Parameters
        ----------
        text : str
            Editable text with ``[PAGE:n]`` markers
        reference_path : str or Path
            PDF whose page sizes are reused; unreadable references degrade
            to A4 pages
        output_path : str or Path
            Destination PDF

        Returns
        -------
        Path
            The written file

        Raises
        ------
        ConversionFailed
            If the PDF cannot be built, including text that a standard font
            cannot encode; no partial output remains

        """
        return self._plan_and_render(
            lambda: self.plan_matching(text, reference_path), output_path, f"Matched write ({Path(output_path).name})"
        )

    def write_default(self, text: str, output_path: PathLike) -> Path:
        """Write text as an A4 PDF with greedy pagination."""
        return self._plan_and_render(
            lambda: self.plan_default(text), output_path, f"Free write ({Path(output_path).name})"
        )


def write_matching(
    text: str, reference_path: PathLike, output_path: PathLike, options: ReflowOptions | None = None
) -> Path:
    """Write text as a PDF that reuses the reference document's page geometry."""
    return ReflowPdfWriter(options).write_matching(text, reference_path, output_path)


def write_default(text: str, output_path: PathLike, options: ReflowOptions | None = None) -> Path:
    """Write text as an A4 PDF with greedy pagination."""
    return ReflowPdfWriter(options).write_default(text, output_path)


__all__ = ["ReflowPdfWriter", "write_matching", "write_default"]
