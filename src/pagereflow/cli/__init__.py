"""Command-line interface for pagereflow.

Subcommands
-----------
extract
    Turn a PDF into editable text with ``[PAGE:n]`` markers (or a DOCX/TXT
    file into plain text with ``--plain``).
write
    Turn edited text back into a PDF, matching a reference PDF's pages with
    ``--reference`` or laid out on A4 pages otherwise.
docx
    Save edited text, or a PDF, as a Word document with one page per page marker.
info
    Print the page count and page sizes of a PDF.

Examples
--------
Round trip a document::

    $ pagereflow extract report.pdf -o report.txt
    $ $EDITOR report.txt
    $ pagereflow write report.txt --reference report.pdf -o report-edited.pdf

Free layout with a smaller font::

    $ pagereflow write notes.txt -o notes.pdf --font-size 9 --margin 54

Options not given on the command line come from a configuration file
(``--config``, the PAGEREFLOW_CONFIG environment variable, or a discovered
``.pagereflow.toml``/``.yaml``/``.json`` or ``[tool.pagereflow]`` table).

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional

from pagereflow.cli.config import build_options, load_config_with_priority
from pagereflow.constants import (
    CONFIG_ENV_VAR,
    EXIT_CONVERSION_ERROR,
    EXIT_DEPENDENCY_ERROR,
    EXIT_ERROR,
    EXIT_FORMAT_ERROR,
    EXIT_SUCCESS,
    EXIT_UNREADABLE_ERROR,
    EXIT_VALIDATION_ERROR,
    SUPPORTED_PLAIN_FORMATS,
)
from pagereflow.exceptions import (
    ConversionFailed,
    DependencyError,
    DocumentUnreadable,
    FormatError,
    PageReflowError,
    ValidationError,
)
from pagereflow.logging_utils import LOG_LEVEL_NAMES, configure_logging
from pagereflow.options import ReflowOptions

logger = logging.getLogger(__name__)

__all__ = ["main", "create_parser", "get_exit_code_for_exception"]


def _version() -> str:
    from pagereflow import __version__

    return __version__


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="pagereflow",
        description="Convert PDFs to editable text with page markers and back.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_version()}")
    parser.add_argument("--config", help=f"Configuration file (overrides ${CONFIG_ENV_VAR} and discovery)")
    parser.add_argument(
        "--log-level", default="WARNING", type=str.upper, choices=LOG_LEVEL_NAMES, help="Logging level"
    )
    parser.add_argument("--log-file", help="Also write log records to this file")
    parser.add_argument("--trace", action="store_true", help="Debug logging with timestamps and logger names")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    extract = subparsers.add_parser("extract", help="Extract editable text from a document")
    extract.add_argument("input", help="Source document")
    extract.add_argument("-o", "--output", help="Write text here instead of stdout")
    extract.add_argument("--display", action="store_true", help="Replace page markers with readable separators")
    extract.add_argument("--plain", action="store_true", help="Extract a reflowable DOCX or TXT document")
    extract.add_argument("--format", choices=SUPPORTED_PLAIN_FORMATS, help="Source format for --plain")
    extract.add_argument(
        "--no-first-marker", dest="include_first_marker", action="store_false", default=None, help="Omit [PAGE:1]"
    )
    extract.add_argument(
        "--no-docx-page-breaks",
        dest="docx_page_breaks",
        action="store_false",
        default=None,
        help="With --plain, ignore hard page breaks in a DOCX source instead of emitting page markers",
    )
    extract.add_argument("--password", help="Password for an encrypted PDF")

    write = subparsers.add_parser("write", help="Write edited text to PDF")
    write.add_argument("input", help="Editable text file ('-' for stdin)")
    write.add_argument("-o", "--output", required=True, help="Destination PDF")
    write.add_argument("--reference", help="Match the page sizes of this PDF")
    _add_layout_arguments(write)
    write.add_argument(
        "--break-at-markers",
        action="store_true",
        default=None,
        help="Free layout: start a new page at every page marker",
    )
    write.add_argument(
        "--no-fallback",
        dest="fallback_on_missing_pages",
        action="store_false",
        default=None,
        help="Keep matched layout when markers cover fewer pages than the reference",
    )
    write.add_argument("--reference-password", help="Password for an encrypted reference PDF")

    docx = subparsers.add_parser("docx", help="Save edited text or a PDF as DOCX")
    docx.add_argument("input", help="Editable text file, PDF, or '-' for stdin")
    docx.add_argument("-o", "--output", required=True, help="Destination DOCX")
    docx.add_argument("--font-name", help="Font name")
    docx.add_argument("--font-size", type=float, help="Font size in points")
    docx.add_argument("--title", help="Document title")
    docx.add_argument("--password", help="Password for an encrypted source PDF")

    info = subparsers.add_parser("info", help="Show page count and page sizes of a PDF")
    info.add_argument("input", help="PDF document")
    info.add_argument("--json", action="store_true", help="Print JSON")
    info.add_argument("--rich", action="store_true", help="Print a formatted table")

    return parser


def _add_layout_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--font-name", help="Font name (Helvetica, Times-Roman, Courier or --font-path)")
    parser.add_argument("--font-path", help="TrueType font file registered under --font-name")
    parser.add_argument("--font-size", type=float, help="Font size in points")
    parser.add_argument("--line-spacing", type=float, help="Line spacing multiplier")
    parser.add_argument("--margin", type=float, help="All four page margins in points")
    parser.add_argument("--title", help="Document title for PDF metadata")


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to a CLI exit code."""
    if isinstance(exception, (DependencyError, ImportError)):
        return EXIT_DEPENDENCY_ERROR
    if isinstance(exception, (ValidationError, argparse.ArgumentTypeError)):
        return EXIT_VALIDATION_ERROR
    if isinstance(exception, DocumentUnreadable):
        return EXIT_UNREADABLE_ERROR
    if isinstance(exception, FormatError):
        return EXIT_FORMAT_ERROR
    if isinstance(exception, ConversionFailed):
        return EXIT_CONVERSION_ERROR
    return EXIT_ERROR


def _overrides(args: argparse.Namespace, *names: str) -> dict[str, Any]:
    values = {}
    for name in names:
        value = getattr(args, name, None)
        if value is not None:
            values[name] = value
    return values


def _read_input_text(source: str) -> str:
    from pagereflow.utils.encoding import decode_text

    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise DocumentUnreadable(f"Cannot read text file {path}: {e}", file_path=str(path), original_error=e) from e
    return decode_text(data)


def _emit(text: str, output: Optional[str]) -> None:
    if output:
        Path(output).write_text(text, encoding="utf-8")
        logger.info(f"Wrote text to {output}")
    else:
        sys.stdout.write(text)


def _run_extract(args: argparse.Namespace, config: dict[str, Any]) -> int:
    from pagereflow.extractor import PageAwareTextExtractor, to_display_text

    extract_options, _ = build_options(config)
    overrides = _overrides(args, "include_first_marker", "docx_page_breaks", "password")
    if overrides:
        extract_options = extract_options.create_updated(**overrides)

    extractor = PageAwareTextExtractor(extract_options)
    if args.plain:
        text = extractor.extract_plain(args.input, args.format)
    else:
        text = extractor.extract_with_page_markers(args.input)
    if args.display:
        text = to_display_text(text)
    _emit(text, args.output)
    return EXIT_SUCCESS


def _reflow_options(args: argparse.Namespace, config: dict[str, Any]) -> ReflowOptions:
    _, reflow_options = build_options(config)
    overrides = _overrides(
        args,
        "font_name",
        "font_path",
        "font_size",
        "line_spacing",
        "title",
        "break_at_markers",
        "fallback_on_missing_pages",
        "reference_password",
    )
    margin = getattr(args, "margin", None)
    if margin is not None:
        overrides.update(margin_top=margin, margin_bottom=margin, margin_left=margin, margin_right=margin)
    if not overrides:
        return reflow_options
    try:
        return reflow_options.create_updated(**overrides)
    except ValueError as e:
        raise ValidationError(str(e), original_error=e) from e


def _run_write(args: argparse.Namespace, config: dict[str, Any]) -> int:
    from pagereflow.writer import ReflowPdfWriter

    writer = ReflowPdfWriter(_reflow_options(args, config))
    text = _read_input_text(args.input)
    if args.reference:
        output = writer.write_matching(text, args.reference, args.output)
    else:
        output = writer.write_default(text, args.output)
    print(f"Wrote {output}")
    return EXIT_SUCCESS


def _run_docx(args: argparse.Namespace, config: dict[str, Any]) -> int:
    from pagereflow.docx_writer import convert_pdf_to_docx, write_docx

    extract_options, _ = build_options(config)
    options = _reflow_options(args, config)
    if args.input != "-" and Path(args.input).suffix.lower() == ".pdf":
        if args.password:
            extract_options = extract_options.create_updated(password=args.password)
        output = convert_pdf_to_docx(args.input, args.output, extract_options, options)
    else:
        output = write_docx(_read_input_text(args.input), args.output, options)
    print(f"Wrote {output}")
    return EXIT_SUCCESS


def _print_info_table(info: Any) -> None:
    from rich.console import Console
    from rich.table import Table

    table = Table(title=f"{info.path} ({info.page_count} page(s))")
    table.add_column("Page", style="cyan", justify="right")
    table.add_column("Width (pt)", style="yellow", justify="right")
    table.add_column("Height (pt)", style="yellow", justify="right")
    table.add_column("Orientation", style="magenta")

    for number, size in info.geometry:
        orientation = "landscape" if size.width > size.height else "portrait"
        table.add_row(str(number), f"{size.width:g}", f"{size.height:g}", orientation)

    Console().print(table)


def _run_info(args: argparse.Namespace, config: dict[str, Any]) -> int:
    from pagereflow.geometry import PageGeometryResolver

    extract_options, _ = build_options(config)
    info = PageGeometryResolver(password=extract_options.password).describe(args.input)
    if info.page_count == 0:
        raise DocumentUnreadable(f"No pages could be read from {args.input}", file_path=args.input)

    if args.json:
        pages = [{"page": number, "width": size.width, "height": size.height} for number, size in info.geometry]
        print(json.dumps({"path": info.path, "page_count": info.page_count, "pages": pages}, indent=2))
    elif args.rich:
        _print_info_table(info)
    else:
        print(f"{info.path}: {info.page_count} page(s)")
        for number, size in info.geometry:
            print(f"  page {number}: {size.width:g} x {size.height:g} pt")
    return EXIT_SUCCESS


COMMANDS = {
    "extract": _run_extract,
    "write": _run_write,
    "docx": _run_docx,
    "info": _run_info,
}


def main(argv: Optional[list[str]] = None) -> int:
    """Run the pagereflow CLI and return its exit code."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        configure_logging(args.log_level, log_file=args.log_file, trace_mode=args.trace)
        config = load_config_with_priority(explicit_path=args.config, env_var_path=os.environ.get(CONFIG_ENV_VAR))
        return COMMANDS[args.command](args, config)
    except (PageReflowError, argparse.ArgumentTypeError, ImportError) as e:
        message = e.message if isinstance(e, PageReflowError) else str(e)
        logger.error(message)
        if args.trace:
            logger.exception("Traceback")
        return get_exit_code_for_exception(e)
    except Exception as e:
        logger.error(f"Unexpected error: {e!r}")
        if args.trace:
            logger.exception("Traceback")
        return EXIT_ERROR
