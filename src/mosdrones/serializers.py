"""JSON-ready representations of orders and order outcomes.

Keys are camelCase to match what the client application consumes
(``packageId``, ``shipDate``, ``shippedFrom`` ...).  Timestamps are ISO
8601 strings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mosdrones.models.address import Address
    from mosdrones.models.order import OrderView
    from mosdrones.services.order import CreateOrderResult


def serialize_address(address: Address) -> dict[str, Any]:
    return {
        "id": address.id,
        "street": address.street,
        "unit": address.unit,
        "city": address.city,
        "state": address.state,
        "postalCode": address.postal_code,
        "country": address.country,
    }


def serialize_order(view: OrderView) -> dict[str, Any]:
    """Serialize an :class:`OrderView` for the client application."""
    return {
        "orderId": view.order_id,
        "packageId": view.package_id,
        "shipDate": view.ship_date.isoformat(),
        "deliveryDate": view.delivery_date.isoformat(),
        "accountId": view.account_id,
        "shippedFrom": serialize_address(view.shipped_from),
        "shippedTo": serialize_address(view.shipped_to),
        "status": view.status.value,
        "active": view.active,
    }


def serialize_result(result: CreateOrderResult) -> dict[str, Any]:
    """Serialize a :class:`CreateOrderResult`; absent fields are omitted."""
    data: dict[str, Any] = {
        "outcome": result.outcome.name,
        "message": result.message,
    }
    if result.order_id is not None:
        data["orderId"] = result.order_id
    if result.package_id is not None:
        data["packageId"] = result.package_id
    if result.delivery_date is not None:
        data["deliveryDate"] = result.delivery_date.isoformat()
    if result.error is not None:
        data["error"] = str(result.error)
    return data
