from __future__ import annotations

"""
Logging Handlers and Low-Level Utilities.

Builds the handlers attached by `configure_logging` and tags them so later
re-configuration only removes handlers this package installed.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

_HANDLER_TAG_ATTR: str = "_slnpack_handler"


def tag_handler(handler: logging.Handler) -> None:
    """Mark a handler as owned by slnpack."""
    setattr(handler, _HANDLER_TAG_ATTR, True)


def is_own_handler(handler: logging.Handler) -> bool:
    """Check whether a handler was installed by slnpack."""
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def create_console_handler(level_int: int, formatter: logging.Formatter) -> logging.Handler:
    """Create the tagged stderr handler."""
    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(level_int)
    sh.setFormatter(formatter)
    tag_handler(sh)
    return sh


def create_rotating_file_handler(
        log_file: str,
        level_int: int,
        formatter: logging.Formatter,
        max_bytes: int,
        backup_count: int,
) -> Optional[RotatingFileHandler]:
    """
    Initialize a RotatingFileHandler.

    A file that cannot be opened degrades to console-only logging; the
    failure is reported once on stderr.

    Args:
        log_file: Target path for the log file.
        level_int: Numeric logging level.
        formatter: Pre-configured logging formatter.
        max_bytes: Rollover threshold in bytes.
        backup_count: Number of archived files to keep.

    Returns:
        Optional[RotatingFileHandler]: Configured handler or None if I/O fails.
    """
    try:
        parent = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(parent, exist_ok=True)
        fh = RotatingFileHandler(
            log_file,
            maxBytes=int(max_bytes),
            backupCount=int(backup_count),
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"WARNING: Cannot open log file '{log_file}': {e}\n")
        return None

    fh.setLevel(level_int)
    fh.setFormatter(formatter)
    tag_handler(fh)
    return fh
