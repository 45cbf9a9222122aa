"""Structured logging helpers with run, phase and section correlation context."""

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
_SECTION_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "section", default="-"
)

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | run_id=%(run_id)s | phase=%(phase)s | "
    "section=%(section)s | %(name)s | %(message)s"
)


class _RunContextFilter(logging.Filter):
    """Inject run correlation fields into all log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = _RUN_ID_VAR.get("-")
        record.phase = _PHASE_VAR.get("-")
        record.section = _SECTION_VAR.get("-")
        return True


def _ensure_filter_on_root_handlers() -> None:
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        has_filter = any(isinstance(f, _RunContextFilter) for f in handler.filters)
        if not has_filter:
            handler.addFilter(_RunContextFilter())


def configure_structured_logging(level: int = logging.INFO) -> None:
    """Configure root logging format with run/phase/section context."""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root_logger.setLevel(level)
        formatter = logging.Formatter(LOG_FORMAT)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)
    _ensure_filter_on_root_handlers()


def set_run_id(run_id: str | None = None) -> str:
    """Set or generate run correlation ID."""
    value = run_id or str(uuid.uuid4())
    _RUN_ID_VAR.set(value)
    return value


def get_run_id() -> str:
    """Get current run correlation ID."""
    return _RUN_ID_VAR.get("-")


def get_section() -> str:
    """Get the type section currently being processed."""
    return _SECTION_VAR.get("-")


@contextmanager
def phase_scope(phase: str) -> Iterator[None]:
    """Temporarily set phase context (segment, extract, emit) for emitted logs."""
    token = _PHASE_VAR.set(phase)
    try:
        yield
    finally:
        _PHASE_VAR.reset(token)


@contextmanager
def section_scope(type_name: str) -> Iterator[None]:
    """Temporarily attribute emitted logs to a type section.

    Anonymous (globals) sections are reported as ``<globals>``.
    """
    token = _SECTION_VAR.set(type_name or "<globals>")
    try:
        yield
    finally:
        _SECTION_VAR.reset(token)
