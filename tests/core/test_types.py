"""Unit tests for mosdrones.core.types and mosdrones.core.errors."""

from __future__ import annotations

import pytest

from mosdrones.core.errors import (
    InvalidTransition,
    MosDronesError,
    OrderNotFound,
    PackageIdCollision,
    StorageFailure,
)
from mosdrones.core.types import (
    INITIAL_ORDER_STATUS,
    TERMINAL_ORDER_STATUS,
    OrderOutcome,
    OrderStatus,
)

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class TestOrderStatus:
    def test_values(self):
        assert [s.value for s in OrderStatus] == [
            "Pending",
            "Assigned",
            "In Transit",
            "Delivered",
        ]

    def test_str_equality(self):
        assert OrderStatus.IN_TRANSIT == "In Transit"

    def test_lookup_by_value(self):
        assert OrderStatus("Delivered") is OrderStatus.DELIVERED

    def test_unknown_value(self):
        with pytest.raises(ValueError):
            OrderStatus("Lost")

    def test_initial_and_terminal(self):
        assert INITIAL_ORDER_STATUS is OrderStatus.PENDING
        assert TERMINAL_ORDER_STATUS is OrderStatus.DELIVERED


class TestOrderOutcome:
    def test_user_facing_messages(self):
        assert OrderOutcome.CREATED == "Order Successfully Added"
        assert OrderOutcome.OUT_OF_RANGE == "Invalid Order Request: Out of Range"
        assert OrderOutcome.UNKNOWN_ACCOUNT.value.startswith("Invalid Order Request")
        assert OrderOutcome.FAILED.value == "Order Request Failed"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    def test_storage_failure_detail(self):
        exc = StorageFailure("connection refused")
        assert exc.detail == "connection refused"
        assert str(exc) == "connection refused"
        assert isinstance(exc, MosDronesError)

    def test_package_id_collision_is_storage_failure(self):
        exc = PackageIdCollision(5)
        assert isinstance(exc, StorageFailure)
        assert exc.attempts == 5
        assert "after 5 attempts" in str(exc)

    def test_order_not_found(self):
        exc = OrderNotFound(99)
        assert exc.order_id == 99
        assert str(exc) == "Order 99 not found"

    def test_invalid_transition_hierarchy(self):
        assert issubclass(InvalidTransition, MosDronesError)
        assert issubclass(InvalidTransition, ValueError)
