#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pagereflow/docx_writer.py
"""Save editable text as a Word document.

Paragraphs are separated by blank lines; single newlines inside a paragraph
become line breaks. Every page marker after the first starts a new page
with a hard page break, so a document extracted from a PDF keeps one Word
page per PDF page. Like the PDF writer, the file is built beside the
destination and only moved into place once it has been saved.

"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Union

from pagereflow.constants import DEPS_DOCX
from pagereflow.exceptions import ConversionFailed
from pagereflow.extractor import extract_with_page_markers
from pagereflow.markers import split_segments
from pagereflow.options.extract import ExtractOptions
from pagereflow.options.reflow import ReflowOptions
from pagereflow.resources import atomic_output, with_write_handle
from pagereflow.utils.decorators import requires_dependencies

if TYPE_CHECKING:
    from docx.document import Document as DocxDocument

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _apply_style(document: "DocxDocument", options: ReflowOptions) -> None:
    from docx.shared import Pt

    normal = document.styles["Normal"]
    normal.font.name = options.font_name
    normal.font.size = Pt(options.font_size)
    if options.title:
        document.core_properties.title = options.title


def _fill_document(document: "DocxDocument", text: str, options: ReflowOptions) -> int:
    from docx.enum.text import WD_BREAK

    _apply_style(document, options)
    segments = split_segments(text)
    for index, segment in enumerate(segments):
        if index:
            document.add_paragraph().add_run().add_break(WD_BREAK.PAGE)
        for paragraph_text in segment.paragraphs:
            run = document.add_paragraph().add_run()
            for line_index, line in enumerate(paragraph_text.split("\n")):
                if line_index:
                    run.add_break()
                run.add_text(line)
    return len(segments)


@requires_dependencies("docx", DEPS_DOCX)
def write_docx(text: str, output_path: PathLike, options: ReflowOptions | None = None) -> Path:
    """Write editable text to a DOCX file.

    Parameters
    ----------
    text : str
        Editable text, with or without ``[PAGE:n]`` markers
    output_path : str or Path
        Destination DOCX file
    options : ReflowOptions or None, optional
        Font name, font size and title are applied to the document

    Returns
    -------
    Path
        The written file

    Raises
    ------
    ConversionFailed
        If the document cannot be built or saved; no partial file remains

    """
    from docx import Document

    options = options or ReflowOptions()
    target = Path(output_path)
    try:
        with atomic_output(target) as temp_path:
            page_count = with_write_handle(
                Document,
                lambda document: _fill_document(document, text, options),
                output_path=temp_path,
                finalize=lambda document: document.save(str(temp_path)),
            )
    except Exception as e:
        raise ConversionFailed(
            f"Failed to write DOCX: {e!r}", output_path=str(target), conversion_stage="docx", original_error=e
        ) from e

    logger.info(f"Wrote {page_count} page(s) to {target}")
    return target


def convert_pdf_to_docx(
    pdf_path: PathLike,
    output_path: PathLike,
    extract_options: ExtractOptions | None = None,
    options: ReflowOptions | None = None,
) -> Path:
    """Convert a PDF to DOCX with one Word page per PDF page.

    Raises
    ------
    DocumentUnreadable
        If the PDF cannot be read
    ConversionFailed
        If the DOCX cannot be written

    """
    text = extract_with_page_markers(pdf_path, extract_options)
    return write_docx(text, output_path, options)


__all__ = ["write_docx", "convert_pdf_to_docx"]
