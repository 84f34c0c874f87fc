"""Structured logging helpers with run correlation context."""

from __future__ import annotations

import contextvars
import logging
import uuid
from contextlib import contextmanager
from typing import Iterator

_RUN_ID_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "run_id", default="-"
)
_PHASE_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "phase", default="-"
)

# Loggers that receive DEBUG at verbosity 1.
PROJECT_LOGGERS: tuple[str, ...] = ("core", "extraction", "bindings", "run_bindgen")

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | run_id=%(run_id)s | phase=%(phase)s | "
    "%(name)s | %(message)s"
)


class _RunContextFilter(logging.Filter):
    """Inject run correlation fields into all log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = _RUN_ID_VAR.get("-")
        record.phase = _PHASE_VAR.get("-")
        return True


def _ensure_filter_on_root_handlers() -> None:
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        has_filter = any(isinstance(f, _RunContextFilter) for f in handler.filters)
        if not has_filter:
            handler.addFilter(_RunContextFilter())


def verbosity_to_levels(verbose: int) -> tuple[int, int]:
    """Map a ``-v`` count to ``(root_level, project_level)``."""
    if verbose >= 2:
        return logging.DEBUG, logging.DEBUG
    if verbose == 1:
        return logging.INFO, logging.DEBUG
    return logging.INFO, logging.INFO


def configure_structured_logging(level: int = logging.INFO, verbose: int = 0) -> None:
    """Configure root logging format with run/phase context.

    Args:
        level: Minimum root level when ``verbose`` is 0.
        verbose: Verbosity count from the command line. 1 enables DEBUG for
            the project packages, 2 or more enables DEBUG everywhere.
    """
    root_level, project_level = verbosity_to_levels(verbose)
    if verbose == 0:
        root_level = project_level = level

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=root_level, format=LOG_FORMAT)
    else:
        root_logger.setLevel(root_level)
        formatter = logging.Formatter(LOG_FORMAT)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)
    for name in PROJECT_LOGGERS:
        logging.getLogger(name).setLevel(project_level)
    _ensure_filter_on_root_handlers()


def set_run_id(run_id: str | None = None) -> str:
    """Set or generate run correlation ID."""
    value = run_id or str(uuid.uuid4())
    _RUN_ID_VAR.set(value)
    return value


def get_run_id() -> str:
    """Get current run correlation ID."""
    return _RUN_ID_VAR.get("-")


def get_phase() -> str:
    """Get the pipeline phase currently in scope."""
    return _PHASE_VAR.get("-")


@contextmanager
def phase_scope(phase: str) -> Iterator[None]:
    """Temporarily set phase context for emitted logs."""
    token = _PHASE_VAR.set(phase)
    try:
        yield
    finally:
        _PHASE_VAR.reset(token)
