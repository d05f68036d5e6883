#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pagereflow/resources.py
"""Scoped acquisition of native document handles.

Every reader or writer handle the engine opens goes through this module so
that it is released on every exit path from the operation that opened it:
normal return, a failure inside the operation, or a failure while acquiring
a later handle. Write variants additionally delete the output artifact when
the operation or its finalize step fails, so a failed conversion never
leaves a partial file behind.

Release failures are logged and swallowed; they never replace the outcome
of the operation itself.

The module also offers best-effort page-count and page-size queries built
directly on PyMuPDF with the same acquire/operate/release pattern. They do
not depend on the extractor or the writer, so either side can change its
document library independently.

"""

from __future__ import annotations

import logging
import os
import tempfile
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Generator, TypeVar, Union

from pagereflow.constants import TEMP_OUTPUT_SUFFIX
from pagereflow.exceptions import GeometryUnavailable
from pagereflow.model import PageSize

if TYPE_CHECKING:
    import fitz

logger = logging.getLogger(__name__)

T = TypeVar("T")
H = TypeVar("H")
PathLike = Union[str, Path]


def close_quietly(handle: Any) -> None:
    """Release a handle, logging instead of raising on failure.

    Handles without a ``close`` method are ignored.
    """
    if handle is None:
        return
    close = getattr(handle, "close", None)
    if close is None:
        return
    try:
        close()
    except Exception as e:
        logger.warning(f"Error closing {type(handle).__name__}: {e!r}")


def remove_artifact(path: PathLike) -> None:
    """Delete a (possibly partial) output file if it exists."""
    try:
        Path(path).unlink(missing_ok=True)
        logger.debug(f"Removed output artifact {path}")
    except OSError as e:
        logger.warning(f"Could not remove output artifact {path}: {e!r}")


@contextmanager
def scoped_handle(
    open_fn: Callable[[], H], release: Callable[[H], None] = close_quietly
) -> Generator[H, None, None]:
    """Acquire a handle for the duration of a ``with`` block.

    Parameters
    ----------
    open_fn : callable
        Zero-argument function returning the native handle
    release : callable, default close_quietly
        Function releasing the handle; it must not raise

    """
    handle = open_fn()
    try:
        yield handle
    finally:
        release(handle)


def with_handle(open_fn: Callable[[], H], operation: Callable[[H], T]) -> T:
    """Run ``operation`` on a freshly acquired handle and release it afterwards.

    Parameters
    ----------
    open_fn : callable
        Zero-argument function returning the native handle
    operation : callable
        Function receiving the handle; its return value is returned

    Examples
    --------
        >>> count = with_handle(lambda: open_pdf("report.pdf"), lambda doc: doc.page_count)

    """
    with scoped_handle(open_fn) as handle:
        return operation(handle)


def with_write_handle(
    open_write_fn: Callable[[], H],
    operation: Callable[[H], T],
    *,
    output_path: PathLike,
    finalize: Callable[[H], None] | None = None,
) -> T:
    """Run a write operation, deleting ``output_path`` if anything fails.

    Parameters
    ----------
    open_write_fn : callable
        Zero-argument function creating the writer handle
    operation : callable
        Function receiving the writer handle
    output_path : str or Path
        Destination the writer creates; removed on failure
    finalize : callable, optional
        Called with the writer after ``operation`` succeeds (e.g. to flush
        the document to storage); a failure here also removes the output

    """
    try:
        with scoped_handle(open_write_fn) as writer:
            result = operation(writer)
            if finalize is not None:
                finalize(writer)
            return result
    except Exception:
        remove_artifact(output_path)
        raise


def with_read_write_handles(
    open_read_fn: Callable[[], Any],
    open_write_fn: Callable[[], Any],
    operation: Callable[[Any, Any], T],
    *,
    output_path: PathLike,
    finalize: Callable[[Any], None] | None = None,
) -> T:
    """Run an operation that reads one document and writes another.

    The reader is acquired first and the writer second; they are released
    in reverse order on every exit path, including a failure while opening
    the writer. Once the writer has been requested, any failure deletes
    ``output_path`` before the exception propagates.

    Parameters
    ----------
    open_read_fn : callable
        Zero-argument function opening the source document
    open_write_fn : callable
        Zero-argument function creating the output document
    operation : callable
        Function receiving ``(reader, writer)``
    output_path : str or Path
        Destination the writer creates
    finalize : callable, optional
        Called with the writer after ``operation`` succeeds

    """
    writer_requested = False
    try:
        with ExitStack() as stack:
            reader = open_read_fn()
            stack.callback(close_quietly, reader)
            writer_requested = True
            writer = open_write_fn()
            stack.callback(close_quietly, writer)
            result = operation(reader, writer)
            if finalize is not None:
                finalize(writer)
            return result
    except Exception:
        if writer_requested:
            remove_artifact(output_path)
        raise


@contextmanager
def atomic_output(output_path: PathLike) -> Generator[Path, None, None]:
    """Yield a temporary sibling path that replaces ``output_path`` on success.

    The temporary file lives in the destination directory so the final
    ``os.replace`` is atomic. If the block fails, the temporary file is
    deleted and an existing file at ``output_path`` is left untouched.

    """
    target = Path(output_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=TEMP_OUTPUT_SUFFIX, dir=target.parent)
    os.close(fd)
    temp_path = Path(temp_name)

    committed = False
    try:
        yield temp_path
        os.replace(temp_path, target)
        committed = True
    finally:
        if not committed:
            remove_artifact(temp_path)


def open_pdf(path: PathLike, password: str | None = None) -> "fitz.Document":
    """Open a PDF with PyMuPDF, authenticating it if it is encrypted.

    Raises
    ------
    FileNotFoundError, RuntimeError, PermissionError
        Whatever PyMuPDF raises for missing or corrupt files, or a
        PermissionError for an encrypted document without a valid password.

    """
    import fitz

    doc = fitz.open(filename=str(path), filetype="pdf")
    if doc.is_encrypted and not (password and doc.authenticate(password)):
        close_quietly(doc)
        raise PermissionError(f"PDF document is password-protected: {path}")
    return doc


def query_page_count(path: PathLike, password: str | None = None) -> int:
    """Return the number of pages in a PDF.

    Raises
    ------
    GeometryUnavailable
        If the document cannot be opened.

    """
    try:
        return with_handle(lambda: open_pdf(path, password), lambda doc: int(doc.page_count))
    except Exception as e:
        raise GeometryUnavailable(
            f"Cannot count pages of {path}: {e!r}", file_path=str(path), original_error=e
        ) from e


def _page_size_of(doc: "fitz.Document", page_number: int) -> PageSize:
    rect = doc[page_number - 1].rect
    return PageSize(float(rect.width), float(rect.height))


def query_page_size(path: PathLike, page_number: int, password: str | None = None) -> PageSize:
    """Return the size of one page (1-based) of a PDF.

    Raises
    ------
    GeometryUnavailable
        If the document cannot be opened or ``page_number`` is out of range.

    """

    def measure(doc: "fitz.Document") -> PageSize:
        if page_number < 1 or page_number > doc.page_count:
            raise GeometryUnavailable(
                f"Page {page_number} is outside 1..{doc.page_count}", file_path=str(path), page_number=page_number
            )
        return _page_size_of(doc, page_number)

    try:
        return with_handle(lambda: open_pdf(path, password), measure)
    except GeometryUnavailable:
        raise
    except Exception as e:
        raise GeometryUnavailable(
            f"Cannot read page {page_number} of {path}: {e!r}",
            file_path=str(path),
            page_number=page_number,
            original_error=e,
        ) from e


def query_all_page_sizes(path: PathLike, password: str | None = None) -> tuple[PageSize, ...]:
    """Return the size of every page of a PDF, opening it only once.

    Raises
    ------
    GeometryUnavailable
        If the document cannot be opened or a page cannot be measured.

    """

    def measure_all(doc: "fitz.Document") -> tuple[PageSize, ...]:
        return tuple(_page_size_of(doc, number) for number in range(1, doc.page_count + 1))

    try:
        return with_handle(lambda: open_pdf(path, password), measure_all)
    except Exception as e:
        raise GeometryUnavailable(
            f"Cannot read page geometry of {path}: {e!r}", file_path=str(path), original_error=e
        ) from e


__all__ = [
    "close_quietly",
    "remove_artifact",
    "scoped_handle",
    "with_handle",
    "with_write_handle",
    "with_read_write_handles",
    "atomic_output",
    "open_pdf",
    "query_page_count",
    "query_page_size",
    "query_all_page_sizes",
]
