#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pagereflow/utils/decorators.py
"""Decorators shared by the extractor, writer and DOCX exporter.

The native document libraries are imported lazily inside each entry point;
``requires_dependencies`` turns a missing library into a DependencyError with
an install hint instead of a bare ImportError deep inside a conversion.

"""

from __future__ import annotations

import importlib
import logging
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Generator, List, Tuple

from pagereflow.exceptions import DependencyError
from pagereflow.utils.packages import check_version_requirement


def requires_dependencies(component_name: str, packages: List[Tuple[str, str, str]]) -> Callable:
    """Check required dependencies and versions before the wrapped call.

    Parameters
    ----------
    component_name : str
        Name of the component (e.g. "pdf_read", "pdf_render", "docx"); it
        appears in the error message.
    packages : list of tuple
        Required packages as (install_name, import_name, version_spec) tuples,
        e.g. ``("pymupdf", "fitz", ">=1.26.4")``. Use "" for any version.

    Returns
    -------
    Callable
        Decorated function that checks dependencies before execution

    Raises
    ------
    DependencyError
        If any required package is missing or has an incompatible version.

    Examples
    --------
        >>> @requires_dependencies("pdf_render", [("reportlab", "reportlab", ">=4.0.0")])
        ... def render(doc, output):
        ...     from reportlab.pdfgen import canvas

    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            missing = []
            version_mismatches = []
            original_error = None

            for install_name, import_name, version_spec in packages:
                try:
                    importlib.import_module(import_name)
                    if version_spec:
                        meets_requirement, installed_version = check_version_requirement(install_name, version_spec)
                        if not meets_requirement:
                            version_mismatches.append((install_name, version_spec, installed_version or "unknown"))
                except ImportError as e:
                    missing.append((install_name, version_spec))
                    if original_error is None:
                        original_error = e

            if missing or version_mismatches:
                raise DependencyError(
                    converter_name=component_name,
                    missing_packages=missing,
                    version_mismatches=version_mismatches,
                    original_import_error=original_error,
                ) from original_error

            return func(*args, **kwargs)

        return wrapper

    return decorator


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Generator[None, None, None]:
    """Time a block and log the elapsed time at DEBUG level.

    Parameters
    ----------
    logger : logging.Logger
        Logger instance to use for DEBUG messages
    operation : str
        Description of the operation being timed (e.g., "Extraction (pdf)")

    Notes
    -----
    Nothing is measured when DEBUG logging is disabled. A failing block is
    not reported.

    """
    if logger.isEnabledFor(logging.DEBUG):
        start_time = time.perf_counter()
        yield
        elapsed = time.perf_counter() - start_time
        logger.debug(f"{operation} completed in {elapsed:.2f}s")
    else:
        yield
