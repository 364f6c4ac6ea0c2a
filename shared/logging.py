"""
Logging utilities.

Stdlib logging with a per-run context identifier and structured extras.
"""

import logging
import sys
from contextvars import ContextVar
from typing import Optional

_run_id: ContextVar[Optional[str]] = ContextVar("run_id", default=None)

LOGGER_ROOT = "concept_video"

# Attributes present on every LogRecord; anything else came from `extra=`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime", "run_id"}


def set_run_id(run_id: Optional[str]) -> None:
    """
    Set run ID in context for logging.

    Args:
        run_id: Run ID attached to every record logged in this context
    """
    _run_id.set(run_id)


def get_run_id() -> Optional[str]:
    """Return the run ID of the current context."""
    return _run_id.get()


class RunContextFilter(logging.Filter):
    """Inject the current run ID into log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = _run_id.get() or "-"
        return True


class StructuredFormatter(logging.Formatter):
    """Append `extra` fields to the message as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if extras:
            fields = " ".join(f"{key}={value}" for key, value in sorted(extras.items()))
            message = f"{message} | {fields}"
        return message


def configure_logging(level: str = "INFO") -> None:
    """
    Configure the package root logger.

    Safe to call more than once; the handler is replaced, not duplicated.

    Args:
        level: Logging level name
    """
    root = logging.getLogger(LOGGER_ROOT)
    root.setLevel(level.upper())
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.addFilter(RunContextFilter())
    handler.setFormatter(StructuredFormatter(
        "%(asctime)s %(levelname)s [%(name)s] run=%(run_id)s %(message)s"
    ))
    root.addHandler(handler)
    root.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the package root.

    Args:
        name: Component name (e.g. "renderer" or a module __name__)

    Returns:
        Logger instance
    """
    if name.startswith(LOGGER_ROOT):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_ROOT}.{name}")
