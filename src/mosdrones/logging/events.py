"""Structured order audit events.

Emits one record per order lifecycle event to the ``mosdrones.audit``
logger with a stable ``event_id`` field for filtering.  Records pass
through :class:`~mosdrones.logging.setup.OperationContextFilter`, so
they also carry the ``operation_id`` of the call that produced them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from datetime import datetime

audit_log = logging.getLogger("mosdrones.audit")


def _emit(
    event_id: str,
    message: str,
    *args: Any,  # noqa: ANN401
    account_id: int | None = None,
    severity: str = "INFO",
    **extra: Any,  # noqa: ANN401
) -> None:
    data: dict[str, object] = {
        "event_id": event_id,
        "severity": severity,
    }
    if account_id is not None:
        data["account_id"] = account_id
    data.update(extra)
    level = getattr(logging, severity.upper(), logging.INFO)
    audit_log.log(level, message, *args, extra=data)


def order_created(
    order_id: int,
    package_id: str,
    account_id: int,
    delivery_date: datetime,
) -> None:
    """Log a successfully persisted order."""
    _emit(
        "mosdrones.audit.order_created",
        "Order %s created (package %s)",
        order_id,
        package_id,
        account_id=account_id,
        order_id=order_id,
        package_id=package_id,
        delivery_date=delivery_date.isoformat(),
    )


def order_rejected(account_id: int, outcome: str, destination: str) -> None:
    """Log an order request refused before anything was written."""
    _emit(
        "mosdrones.audit.order_rejected",
        "Order request rejected: %s",
        outcome,
        account_id=account_id,
        outcome=outcome,
        destination=destination,
        severity="WARNING",
    )


def order_creation_failed(account_id: int, error: str) -> None:
    """Log an order request that failed in storage."""
    _emit(
        "mosdrones.audit.order_creation_failed",
        "Order creation failed: %s",
        error,
        account_id=account_id,
        error=error,
        severity="ERROR",
    )


def order_status_changed(
    order_id: int,
    from_status: str,
    to_status: str,
) -> None:
    """Log a persisted order status change."""
    _emit(
        "mosdrones.audit.order_status_changed",
        "Order %s status %s -> %s",
        order_id,
        from_status,
        to_status,
        order_id=order_id,
        from_status=from_status,
        to_status=to_status,
    )
