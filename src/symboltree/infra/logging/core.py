from __future__ import annotations

"""
Logging Setup.

Idempotent configuration of the root logger. Records are pushed through a
QueueHandler and written by a QueueListener thread, so building a large
tree is never slowed down by terminal or file I/O. Handlers installed here
are tagged, which lets a reconfiguration remove exactly those and leave a
host application's handlers alone.
"""

import atexit
import logging
import os
import queue
import sys
from dataclasses import dataclass
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from typing import List, Optional

from symboltree.infra.fs import get_user_data_dir

_HANDLER_TAG_ATTR: str = "_symboltree_handler"
_CONFIGURED_FLAG_ATTR: str = "_symboltree_configured"
_QUEUE_LISTENER_ATTR: str = "_symboltree_queue_listener"

DEFAULT_LOG_FILE_NAME = "symboltree.log"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Immutable logging setup.

    Attributes:
        level: Minimum severity name ("DEBUG", "INFO", ...). Unknown names
            fall back to INFO.
        console: Emit records on stderr.
        log_file: Optional path of a rotating log file.
        max_bytes: Size of a log segment before rotation.
        backup_count: Number of rotated segments to keep.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 512 * 1024
    backup_count: int = 3

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def get_default_log_path(file_name: str = DEFAULT_LOG_FILE_NAME) -> str:
    """Resolve the log file path inside the user data directory."""
    return os.path.join(get_user_data_dir(), "logs", file_name)


def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Configure the root logger once.

    Later calls are no-ops unless force is set, in which case the handlers
    and listener from the previous call are torn down and rebuilt.

    Args:
        cfg: Logging setup to apply.
        force: Re-initialize even if logging was already configured.

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()

    if getattr(root, _CONFIGURED_FLAG_ATTR, False) and not force:
        return root

    level = logging.getLevelName(str(cfg.level or "").strip().upper())
    if not isinstance(level, int):
        level = logging.INFO
    root.setLevel(level)

    _teardown(root)

    sinks = _build_sinks(cfg, level)
    if not sinks:
        return root

    log_queue: queue.Queue[logging.LogRecord] = queue.Queue(-1)
    queue_handler = QueueHandler(log_queue)
    setattr(queue_handler, _HANDLER_TAG_ATTR, True)

    listener = QueueListener(log_queue, *sinks, respect_handler_level=True)
    listener.start()
    root.addHandler(queue_handler)

    setattr(root, _QUEUE_LISTENER_ATTR, listener)
    setattr(root, _CONFIGURED_FLAG_ATTR, True)

    # Flush pending records on interpreter shutdown
    atexit.register(_stop_listener, listener)

    return root


def get_logger(name: str) -> logging.Logger:
    """Return a named logger (usually __name__)."""
    return logging.getLogger(name)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _build_sinks(cfg: LoggingConfig, level: int) -> List[logging.Handler]:
    """Create the handlers the queue listener writes to."""
    sinks: List[logging.Handler] = []

    if cfg.console:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter(cfg.console_fmt))
        sinks.append(console)

    if cfg.log_file:
        try:
            os.makedirs(os.path.dirname(os.path.abspath(cfg.log_file)), exist_ok=True)
            file_sink = RotatingFileHandler(
                cfg.log_file,
                maxBytes=cfg.max_bytes,
                backupCount=cfg.backup_count,
                encoding="utf-8",
            )
        except OSError as e:
            # Logging is not up yet
            sys.stderr.write(f"WARNING: Log file '{cfg.log_file}' unavailable: {e}\n")
        else:
            file_sink.setFormatter(logging.Formatter(cfg.file_fmt, datefmt=cfg.datefmt))
            sinks.append(file_sink)

    for sink in sinks:
        sink.setLevel(level)
        setattr(sink, _HANDLER_TAG_ATTR, True)
    return sinks


def _teardown(root: logging.Logger) -> None:
    """Stop the previous listener and drop every handler tagged as ours."""
    _stop_listener(getattr(root, _QUEUE_LISTENER_ATTR, None))
    setattr(root, _QUEUE_LISTENER_ATTR, None)
    setattr(root, _CONFIGURED_FLAG_ATTR, False)

    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_TAG_ATTR, False):
            root.removeHandler(handler)
            handler.close()


def _stop_listener(listener: Optional[QueueListener]) -> None:
    """Stop a listener, tolerating one that has already been stopped."""
    if listener is not None and getattr(listener, "_thread", None) is not None:
        listener.stop()
        for handler in listener.handlers:
            handler.close()
