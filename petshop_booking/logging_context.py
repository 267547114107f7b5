"""Session ID logging context for tracing one customer's booking flow.

Provides a session_id-aware logger that attaches a correlation ID to every
log message, so a single booking attempt can be followed from service
selection through submission.

Usage:
    from petshop_booking.logging_context import get_session_logger, set_session_id

    set_session_id("SES-abc123")
    logger = get_session_logger(__name__)
    logger.info("Submitting booking")  # record.session_id == "SES-abc123"

Applications install ``session_log_handler`` so the id shows up in output.
"""

import logging
from contextvars import ContextVar
from typing import Optional

_session_id: ContextVar[str] = ContextVar("session_id", default="NO_SESSION_ID")


def set_session_id(session_id: str) -> None:
    """Set the correlation ID for the current context."""
    _session_id.set(session_id)


def get_session_id() -> str:
    """Retrieve the current correlation ID."""
    return _session_id.get()


class SessionIdFilter(logging.Filter):
    """Injects session_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = _session_id.get()  # type: ignore[attr-defined]
        return True


def get_session_logger(name: str) -> logging.Logger:
    """Return a logger with the SessionIdFilter attached.

    The filter adds ``session_id`` to each record so formatters can
    include ``%(session_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, SessionIdFilter) for f in logger.filters):
        logger.addFilter(SessionIdFilter())
    return logger


def session_log_handler(fmt: str, datefmt: Optional[str] = None) -> logging.Handler:
    """Stream handler whose records always carry ``session_id``.

    The filter sits on the handler, so records from plain module loggers
    (the engine's ``tools`` layer) can be formatted with ``%(session_id)s``
    as well.
    """
    handler = logging.StreamHandler()
    handler.addFilter(SessionIdFilter())
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler
