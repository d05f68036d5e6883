#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pagereflow/logging_utils.py
"""Logging setup for the pagereflow command line.

Library modules only create module-level loggers; handlers are installed
here, by the CLI, and never on import.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from pagereflow.exceptions import ValidationError

LOG_FORMAT = "%(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def resolve_log_level(log_level: int | str) -> int:
    """Return the numeric level for a level number or name.

    Raises
    ------
    ValidationError
        If ``log_level`` is not a known level name.

    """
    if isinstance(log_level, int):
        return log_level
    name = str(log_level).upper()
    if name not in LOG_LEVEL_NAMES:
        raise ValidationError(
            f"Unknown log level '{log_level}'; expected one of {', '.join(LOG_LEVEL_NAMES)}",
            parameter_name="log_level",
            parameter_value=log_level,
        )
    return getattr(logging, name)


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Install stderr (and optionally file) handlers on the root logger.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or level name (e.g., "INFO").
    log_file : str, optional
        Append log records to this file as well.
    trace_mode : bool, default False
        Force DEBUG and add timestamps and logger names to every record.

    Returns
    -------
    logging.Logger
        The configured root logger.

    """
    level = logging.DEBUG if trace_mode else resolve_log_level(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if trace_mode:
        formatter = logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT)
    else:
        formatter = logging.Formatter(LOG_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
        except OSError as exc:
            root_logger.warning(f"Could not open log file {log_file}: {exc}")

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    if log_file and len(handlers) > 1:
        root_logger.info(f"Logging to file: {log_file}")
    return root_logger
