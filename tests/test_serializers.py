"""Tests for mosdrones.serializers."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from mosdrones.core.errors import StorageFailure
from mosdrones.core.types import OrderOutcome, OrderStatus
from mosdrones.models.address import Address
from mosdrones.models.order import OrderView
from mosdrones.serializers import serialize_address, serialize_order, serialize_result
from mosdrones.services.order import CreateOrderResult

_SHIP = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)


class TestSerializeOrder:
    def test_camel_case_keys(self):
        view = OrderView(
            order_id=42,
            package_id="0123456789abcdef",
            ship_date=_SHIP,
            delivery_date=_SHIP + timedelta(days=2),
            account_id=7,
            shipped_from=Address("100 Main St", "Springfield", "IL", "62701", id=1),
            shipped_to=Address("200 Oak Ave", "Springfield", "IL", "62704", unit="2B", id=2),
            status=OrderStatus.IN_TRANSIT,
        )

        data = serialize_order(view)

        assert data["orderId"] == 42
        assert data["packageId"] == "0123456789abcdef"
        assert data["shipDate"] == "2026-03-01T09:00:00+00:00"
        assert data["deliveryDate"] == "2026-03-03T09:00:00+00:00"
        assert data["status"] == "In Transit"
        assert data["active"] is True
        assert data["shippedTo"]["unit"] == "2B"
        assert data["shippedTo"]["postalCode"] == "62704"

    def test_delivered_is_inactive(self):
        view = OrderView(
            order_id=1,
            package_id="f" * 16,
            ship_date=_SHIP,
            delivery_date=_SHIP,
            account_id=7,
            shipped_from=Address("a", "b", "IL", "1"),
            shipped_to=Address("c", "d", "IL", "2"),
            status=OrderStatus.DELIVERED,
        )
        assert serialize_order(view)["active"] is False


class TestSerializeAddress:
    def test_unsaved_address(self):
        data = serialize_address(Address("1 Elm St", "Peoria", "IL", "61602"))
        assert data == {
            "id": None,
            "street": "1 Elm St",
            "unit": None,
            "city": "Peoria",
            "state": "IL",
            "postalCode": "61602",
            "country": "US",
        }


class TestSerializeResult:
    def test_created(self):
        data = serialize_result(
            CreateOrderResult(
                OrderOutcome.CREATED,
                order_id=5,
                package_id="0123456789abcdef",
                delivery_date=_SHIP,
            ),
        )
        assert data == {
            "outcome": "CREATED",
            "message": "Order Successfully Added",
            "orderId": 5,
            "packageId": "0123456789abcdef",
            "deliveryDate": "2026-03-01T09:00:00+00:00",
        }

    def test_rejected_omits_absent_fields(self):
        data = serialize_result(CreateOrderResult(OrderOutcome.OUT_OF_RANGE))
        assert data == {
            "outcome": "OUT_OF_RANGE",
            "message": "Invalid Order Request: Out of Range",
        }

    def test_failed_carries_error(self):
        data = serialize_result(
            CreateOrderResult(OrderOutcome.FAILED, error=StorageFailure("disk full")),
        )
        assert data["error"] == "disk full"
