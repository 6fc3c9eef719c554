"""Order service: creation, lookup and status changes of delivery orders.

Validation always precedes persistence: an order request is checked
against the account store and the delivery estimator before anything
is written, and a rejected request leaves storage untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from mosdrones.core.errors import InvalidTransition, OrderNotFound, StorageFailure
from mosdrones.core.state import assert_transition, log_transition
from mosdrones.core.types import OrderOutcome, OrderStatus
from mosdrones.estimator.base import EstimatorError
from mosdrones.logging import events
from mosdrones.logging.setup import operation_context
from mosdrones.models.order import OrderDraft, OrderView

if TYPE_CHECKING:
    from mosdrones.config.settings import OrderSettings
    from mosdrones.estimator.base import DeliveryEstimator
    from mosdrones.models.address import Address
    from mosdrones.models.order import Order
    from mosdrones.repositories.account import AccountRepository
    from mosdrones.repositories.order import OrderRepository

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateOrderResult:
    """Outcome of :meth:`OrderService.create_order`.

    ``order_id``, ``package_id`` and ``delivery_date`` are set only for
    :attr:`OrderOutcome.CREATED`; ``error`` only for
    :attr:`OrderOutcome.FAILED`.
    """

    outcome: OrderOutcome
    order_id: int | None = None
    package_id: str | None = None
    delivery_date: datetime | None = None
    error: StorageFailure | None = None

    @property
    def created(self) -> bool:
        return self.outcome is OrderOutcome.CREATED

    @property
    def message(self) -> str:
        """User-facing message for the outcome."""
        return self.outcome.value


def _to_view(order: Order) -> OrderView:
    return OrderView(
        order_id=order.id,
        package_id=order.package_id,
        ship_date=order.ship_date,
        delivery_date=order.delivery_date,
        account_id=order.account_id,
        shipped_from=order.origin,
        shipped_to=order.destination,
        status=order.status,
    )


class OrderService:
    """Manage the delivery order lifecycle."""

    def __init__(
        self,
        order_repo: OrderRepository,
        account_repo: AccountRepository,
        estimator: DeliveryEstimator,
        order_settings: OrderSettings,
    ) -> None:
        self._orders = order_repo
        self._accounts = account_repo
        self._estimator = estimator
        self._settings = order_settings

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_order(self, order_id: int) -> OrderView | None:
        """Return the order with *order_id*, or ``None``."""
        order = self._orders.find_by_order_id(order_id)
        return _to_view(order) if order is not None else None

    def track_package(self, package_id: str) -> OrderView | None:
        """Return the order tracked by *package_id*, or ``None``."""
        order = self._orders.find_by_package_id(package_id)
        return _to_view(order) if order is not None else None

    def list_orders_for_account(self, account_id: int) -> list[OrderView]:
        return [_to_view(o) for o in self._orders.list_by_account_id(account_id)]

    def list_active_orders(self) -> list[OrderView]:
        return [_to_view(o) for o in self._orders.list_active()]

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_order(self, account_id: int, destination: Address) -> CreateOrderResult:
        """Create an order shipping from the account's home to *destination*.

        Returns
        -------
        CreateOrderResult
            ``UNKNOWN_ACCOUNT`` or ``OUT_OF_RANGE`` when the request is
            rejected (nothing is written), ``FAILED`` when storage
            failed (nothing is committed), ``CREATED`` otherwise.

        Raises
        ------
        StorageFailure
            If the account lookup fails.
        EstimatorError
            If the estimator fails or returns a delivery date earlier
            than the ship date.

        """
        with operation_context("create_order", account_id=account_id):
            account = self._accounts.get(account_id)
            if account is None:
                return self._reject(account_id, OrderOutcome.UNKNOWN_ACCOUNT, destination)

            if not self._estimator.is_serviceable(destination):
                return self._reject(account_id, OrderOutcome.OUT_OF_RANGE, destination)

            ship_date = datetime.now(UTC)
            delivery_date = self._estimator.estimate_delivery(
                ship_date,
                account.address,
                destination,
            )
            if delivery_date < ship_date:
                msg = (
                    f"Estimated delivery {delivery_date.isoformat()} precedes "
                    f"ship date {ship_date.isoformat()}"
                )
                raise EstimatorError(msg)

            draft = OrderDraft(
                account_id=account.id,
                origin=account.address,
                destination=destination,
                delivery_date=delivery_date,
                ship_date=ship_date,
            )
            try:
                order_id = self._orders.insert(draft)
            except StorageFailure as exc:
                log.error("Failed to persist order for account %s: %s", account_id, exc)
                events.order_creation_failed(account_id, str(exc))
                return CreateOrderResult(OrderOutcome.FAILED, error=exc)

            package_id = self._lookup_package_id(order_id)
            log.info("Created order %s for account %s", order_id, account_id)
            if package_id is not None:
                events.order_created(order_id, package_id, account_id, delivery_date)
            return CreateOrderResult(
                OrderOutcome.CREATED,
                order_id=order_id,
                package_id=package_id,
                delivery_date=delivery_date,
            )

    def _reject(
        self,
        account_id: int,
        outcome: OrderOutcome,
        destination: Address,
    ) -> CreateOrderResult:
        log.info("Rejected order request from account %s: %s", account_id, outcome.value)
        events.order_rejected(account_id, outcome.name, destination.one_line())
        return CreateOrderResult(outcome)

    def _lookup_package_id(self, order_id: int) -> str | None:
        # Order is committed at this point; CREATED stands regardless.
        try:
            order = self._orders.find_by_order_id(order_id)
        except StorageFailure as exc:
            log.warning("Could not read back order %s: %s", order_id, exc)
            return None
        return order.package_id if order is not None else None

    # ------------------------------------------------------------------
    # Status changes
    # ------------------------------------------------------------------

    def update_status(self, order_id: int, new_status: OrderStatus | str) -> OrderView:
        """Move *order_id* to *new_status* and return the updated order.

        With ``order.enforce_forward_transitions`` on, only forward moves
        along ``Pending -> Assigned -> In Transit -> Delivered`` are
        accepted and the write is a compare-and-swap against the status
        that was checked.

        Raises
        ------
        InvalidTransition
            If *new_status* is unknown, the move is not forward, or the
            order's status changed between the check and the write.
        OrderNotFound
            If no order has *order_id*.

        """
        try:
            target = OrderStatus(new_status)
        except ValueError as exc:
            msg = f"Unknown status {new_status!r}"
            raise InvalidTransition(msg) from exc

        order = self._orders.find_by_order_id(order_id)
        if order is None:
            raise OrderNotFound(order_id)

        if self._settings.enforce_forward_transitions:
            assert_transition(order.status, target)
            if not self._orders.transition_status(order_id, order.status, target):
                msg = (
                    f"Order {order_id} is no longer {order.status.value!r}; "
                    "status was changed concurrently"
                )
                raise InvalidTransition(msg)
        elif not self._orders.update_status(order_id, target):
            raise OrderNotFound(order_id)

        log_transition("order", order_id, order.status, target)
        events.order_status_changed(order_id, order.status.value, target.value)
        return _to_view(replace(order, status=target))
