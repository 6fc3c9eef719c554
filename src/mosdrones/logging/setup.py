"""Structured logging configuration for MOS Drones.

Provides JSON and text formatters, an operation-context filter that
injects the attributes bound by :func:`operation_context` into every
log record, and a one-call ``configure_logging`` function driven by
config settings.
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
import uuid
from contextlib import contextmanager
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from mosdrones.config.settings import LoggingSettings

# Attributes that are part of the standard LogRecord; everything
# else is considered "extra" and gets included in structured output.
_STANDARD_ATTRS = frozenset(
    {
        "args",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
        # Context attributes, emitted explicitly below
        "operation_id",
        "operation",
        "account_id",
    }
)

_operation: contextvars.ContextVar[dict[str, object] | None] = contextvars.ContextVar(
    "mosdrones_operation",
    default=None,
)


@contextmanager
def operation_context(operation: str, **fields: object) -> Iterator[str]:
    """Bind *operation* (and e.g. ``account_id``) to every record logged inside.

    Yields the generated ``operation_id``.  Contexts nest; the inner
    one wins for the duration of its block.
    """
    operation_id = uuid.uuid4().hex[:16]
    token = _operation.set(
        {"operation_id": operation_id, "operation": operation, **fields},
    )
    try:
        yield operation_id
    finally:
        _operation.reset(token)


def current_operation() -> dict[str, object]:
    """Return a copy of the attributes bound by the innermost context."""
    return dict(_operation.get() or {})


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


class StructuredFormatter(logging.Formatter):
    """JSON-lines formatter for production logging.

    Every record becomes a single JSON object on one line containing
    the standard fields plus any *extra* attributes passed by the
    caller or injected by filters.
    """

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()

        data: dict = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.message,
        }

        for attr in ("operation_id", "operation", "account_id"):
            value = getattr(record, attr, None)
            if value is not None:
                data[attr] = value

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                data.setdefault(key, value)

        if record.exc_info and record.exc_info[0] is not None:
            data["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            data["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable formatter for development / console use."""

    _FMT = "%(asctime)s %(levelname)-8s [%(operation_id)s] %(name)s: %(message)s"

    def __init__(self) -> None:
        super().__init__(fmt=self._FMT, datefmt="%Y-%m-%d %H:%M:%S")


# ---------------------------------------------------------------------------
# Filter
# ---------------------------------------------------------------------------


class OperationContextFilter(logging.Filter):
    """Inject the active :func:`operation_context` into every log record.

    Attributes already present on the record (passed via ``extra=``)
    take precedence.  Outside any context ``operation_id`` is ``"-"``.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        ctx = _operation.get() or {}
        for key, value in ctx.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        if not hasattr(record, "operation_id"):
            record.operation_id = "-"  # type: ignore[attr-defined]
        if not hasattr(record, "operation"):
            record.operation = None  # type: ignore[attr-defined]
        if not hasattr(record, "account_id"):
            record.account_id = None  # type: ignore[attr-defined]
        return True


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def configure_logging(settings: LoggingSettings) -> logging.Logger:
    """Configure the ``mosdrones`` logger hierarchy from settings.

    Replaces any bootstrap handlers with properly formatted output.
    Sets up the audit file handler if ``settings.audit.enabled`` and
    a file is configured.

    Returns the root ``mosdrones`` logger.
    """
    level = getattr(logging, settings.level.upper(), logging.INFO)

    root = logging.getLogger("mosdrones")
    root.setLevel(level)
    root.handlers.clear()
    root.propagate = False

    formatter: logging.Formatter
    formatter = StructuredFormatter() if settings.format == "json" else TextFormatter()

    ctx_filter = OperationContextFilter()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    console.addFilter(ctx_filter)
    root.addHandler(console)

    logging.getLogger("psycopg").setLevel(logging.WARNING)

    audit = logging.getLogger("mosdrones.audit")
    audit.handlers.clear()
    audit.setLevel(logging.INFO)
    audit.disabled = not settings.audit.enabled

    if settings.audit.enabled and settings.audit.file:
        try:
            fh = RotatingFileHandler(
                settings.audit.file,
                maxBytes=settings.audit.max_file_size_bytes,
                backupCount=settings.audit.backup_count,
            )
        except OSError as exc:
            root.warning(
                "Could not open audit log file %s: %s",
                settings.audit.file,
                exc,
            )
        else:
            # Audit logs are always structured JSON
            fh.setFormatter(StructuredFormatter())
            fh.addFilter(ctx_filter)
            audit.addHandler(fh)

    return root
