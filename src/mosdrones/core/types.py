"""Enumerated types for the MOS Drones order core.

All enums inherit from :class:`enum.StrEnum` so their ``.value`` is a
plain string that psycopg serialises as TEXT and JSON round-trips
naturally.
"""

from __future__ import annotations

from enum import StrEnum

# ---------------------------------------------------------------------------
# Order status
# ---------------------------------------------------------------------------


class OrderStatus(StrEnum):
    PENDING = "Pending"
    ASSIGNED = "Assigned"
    IN_TRANSIT = "In Transit"
    DELIVERED = "Delivered"


# Status every new order starts in.
INITIAL_ORDER_STATUS = OrderStatus.PENDING

# The only terminal status; everything else counts as "active".
TERMINAL_ORDER_STATUS = OrderStatus.DELIVERED


# ---------------------------------------------------------------------------
# Order creation outcome
# ---------------------------------------------------------------------------


class OrderOutcome(StrEnum):
    """User-visible result of an order request.

    The values are the messages shown to the requester.
    """

    CREATED = "Order Successfully Added"
    OUT_OF_RANGE = "Invalid Order Request: Out of Range"
    UNKNOWN_ACCOUNT = "Invalid Order Request: Unknown Account"
    FAILED = "Order Request Failed"
