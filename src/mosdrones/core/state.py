"""Order status state machine.

Orders move forward through a fixed sequence and never back::

    Pending -> Assigned -> In Transit -> Delivered

Moving forward more than one step at a time is allowed (an operator
may mark a pending order delivered); staying put, moving backwards and
leaving ``Delivered`` are not.  Enforced via :func:`assert_transition`.

Usage::

    from mosdrones.core.state import assert_transition
    from mosdrones.core.types import OrderStatus

    assert_transition(OrderStatus.PENDING, OrderStatus.ASSIGNED)
"""

from __future__ import annotations

import logging

from mosdrones.core.errors import InvalidTransition
from mosdrones.core.types import OrderStatus

log = logging.getLogger(__name__)

ORDER_SEQUENCE: tuple[OrderStatus, ...] = (
    OrderStatus.PENDING,
    OrderStatus.ASSIGNED,
    OrderStatus.IN_TRANSIT,
    OrderStatus.DELIVERED,
)

# Each status may move to any status later in the sequence.
ORDER_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    status: frozenset(ORDER_SEQUENCE[idx + 1 :]) for idx, status in enumerate(ORDER_SEQUENCE)
}


def is_terminal(status: OrderStatus) -> bool:
    """Return ``True`` if no transition leaves *status*."""
    return not ORDER_TRANSITIONS.get(status)


def assert_transition(
    current: OrderStatus,
    target: OrderStatus,
    table: dict[OrderStatus, frozenset[OrderStatus]] = ORDER_TRANSITIONS,
) -> None:
    """Raise :class:`InvalidTransition` if *current* → *target* is not allowed.

    Parameters
    ----------
    current:
        The order's current status.
    target:
        The desired new status.
    table:
        Transition table; defaults to :data:`ORDER_TRANSITIONS`.

    """
    allowed = table.get(current)
    if allowed is None:
        msg = f"Unknown status {current!r}"
        raise InvalidTransition(msg)
    if target not in allowed:
        msg = (
            f"Invalid transition {current.value!r} -> {target.value!r}; "
            f"allowed targets: {[s.value for s in ORDER_SEQUENCE if s in allowed] or '(terminal)'}"
        )
        raise InvalidTransition(msg)


def log_transition(
    resource_type: str,
    resource_id,
    from_status,
    to_status,
    *,
    reason: str | None = None,
) -> None:
    """Emit a structured log entry for a state transition.

    Parameters
    ----------
    resource_type:
        Kind of resource, e.g. ``"order"``.
    resource_id:
        The resource's identifier.
    from_status:
        The previous status value.
    to_status:
        The new status value.
    reason:
        Optional human-readable reason for the transition.

    """
    extra = {
        "event": "state_transition",
        "resource_type": resource_type,
        "resource_id": str(resource_id),
        "from_status": from_status.value if hasattr(from_status, "value") else str(from_status),
        "to_status": to_status.value if hasattr(to_status, "value") else str(to_status),
    }
    if reason:
        extra["reason"] = reason
    log.info(
        "%s %s: %s -> %s%s",
        resource_type,
        resource_id,
        extra["from_status"],
        extra["to_status"],
        f" ({reason})" if reason else "",
        extra=extra,
    )
