"""Order entity, the draft used to create one, and the caller-facing view."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from mosdrones.core.types import INITIAL_ORDER_STATUS, TERMINAL_ORDER_STATUS, OrderStatus

if TYPE_CHECKING:
    from mosdrones.models.address import Address

_EPOCH = datetime(1970, 1, 1)

PACKAGE_ID_LENGTH = 16


@dataclass(frozen=True)
class Order:
    """A persisted order with its origin and destination joined in."""

    id: int
    package_id: str
    ship_date: datetime
    delivery_date: datetime
    account_id: int
    origin: Address
    destination: Address
    status: OrderStatus
    created_at: datetime = _EPOCH
    updated_at: datetime = _EPOCH

    @property
    def origin_address_id(self) -> int | None:
        return self.origin.id

    @property
    def destination_address_id(self) -> int | None:
        return self.destination.id

    @property
    def is_active(self) -> bool:
        return self.status != TERMINAL_ORDER_STATUS


@dataclass(frozen=True)
class OrderDraft:
    """Everything the store needs to insert a new order.

    ``ship_date`` is the instant the delivery estimate was computed
    from; when ``None`` the store stamps the current time.
    """

    account_id: int
    origin: Address
    destination: Address
    delivery_date: datetime
    ship_date: datetime | None = None
    status: OrderStatus = INITIAL_ORDER_STATUS


@dataclass(frozen=True)
class OrderView:
    """Order as exposed to callers of :class:`~mosdrones.services.order.OrderService`."""

    order_id: int
    package_id: str
    ship_date: datetime
    delivery_date: datetime
    account_id: int
    shipped_from: Address
    shipped_to: Address
    status: OrderStatus

    @property
    def active(self) -> bool:
        return self.status != TERMINAL_ORDER_STATUS
