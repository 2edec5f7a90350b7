from __future__ import annotations

"""
Logging Core Orchestrator.

Maintains the idempotent lifecycle of the logging subsystem. Records are
routed through a QueueHandler/QueueListener pair so that writing the
diagnostic file never blocks the traversal.
"""

import atexit
import logging
import queue
from logging.handlers import QueueHandler, QueueListener
from typing import List, Optional

from slnpack.infra.logging.config import LEVEL_MAP, LoggingConfig
from slnpack.infra.logging.handlers import (
    create_console_handler,
    create_rotating_file_handler,
    is_own_handler,
    tag_handler,
)

_CONFIGURED_FLAG_ATTR: str = "_slnpack_configured"
_QUEUE_LISTENER_ATTR: str = "_slnpack_queue_listener"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Configure the root logger once per process.

    Repeated calls are no-ops unless `force` is set, in which case the
    handlers installed by a previous call are detached and replaced.

    Args:
        cfg: Structural configuration for the logging system.
        force: Re-initialize even if already configured.

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()

    if getattr(root, _CONFIGURED_FLAG_ATTR, False) and not force:
        return root

    level_int = parse_level(cfg.level)
    root.setLevel(level_int)
    shutdown_logging()

    handlers_list: List[logging.Handler] = []
    if cfg.console:
        handlers_list.append(
            create_console_handler(level_int, logging.Formatter(cfg.console_fmt))
        )
    if cfg.log_file:
        fh = create_rotating_file_handler(
            cfg.log_file,
            level_int,
            logging.Formatter(cfg.file_fmt, datefmt=cfg.datefmt),
            cfg.max_bytes,
            cfg.backup_count,
        )
        if fh:
            handlers_list.append(fh)

    if not handlers_list:
        return root

    log_queue: queue.Queue[logging.LogRecord] = queue.Queue(-1)
    queue_handler = QueueHandler(log_queue)
    tag_handler(queue_handler)

    listener = QueueListener(log_queue, *handlers_list, respect_handler_level=True)
    listener.start()
    root.addHandler(queue_handler)

    setattr(root, _QUEUE_LISTENER_ATTR, listener)
    setattr(root, _CONFIGURED_FLAG_ATTR, True)
    atexit.register(_stop_listener, listener)

    return root


def get_logger(name: str) -> logging.Logger:
    """
    Acquire a named logger instance.

    Args:
        name: Hierarchical name for the logger (usually __name__).

    Returns:
        logging.Logger: The requested logger instance.
    """
    return logging.getLogger(name)


def shutdown_logging() -> None:
    """
    Flush pending records and detach every slnpack handler.

    Safe to call when logging was never configured.
    """
    root = logging.getLogger()
    _stop_listener(getattr(root, _QUEUE_LISTENER_ATTR, None))
    setattr(root, _QUEUE_LISTENER_ATTR, None)

    for h in list(root.handlers):
        if is_own_handler(h):
            root.removeHandler(h)
            h.close()
    setattr(root, _CONFIGURED_FLAG_ATTR, False)


def parse_level(level: str) -> int:
    """Convert a textual level to its numeric constant (INFO on unknown)."""
    if not level:
        return logging.INFO
    return LEVEL_MAP.get(str(level).strip().upper(), logging.INFO)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _stop_listener(listener: Optional[QueueListener]) -> None:
    """Stop a listener, tolerating one that was already stopped."""
    if listener is None:
        return
    if getattr(listener, "_thread", None) is not None:
        listener.stop()
