"""Order repository."""

from __future__ import annotations

import logging
import secrets
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from pypgkit import BaseRepository

from mosdrones.core.errors import PackageIdCollision
from mosdrones.core.types import TERMINAL_ORDER_STATUS, OrderStatus
from mosdrones.db.unit_of_work import UnitOfWork
from mosdrones.models.order import PACKAGE_ID_LENGTH, Order
from mosdrones.repositories.base import address_columns, address_from_row, storage_errors

if TYPE_CHECKING:
    from collections.abc import Callable

    from pypgkit import Database

    from mosdrones.models.order import OrderDraft
    from mosdrones.repositories.address import AddressRepository

log = logging.getLogger(__name__)

DEFAULT_PACKAGE_ID_ATTEMPTS = 5

_SELECT_ORDERS = (
    "SELECT o.*, "
    + address_columns("oa", "origin_")
    + ", "
    + address_columns("da", "destination_")
    + " FROM orders o"
    " JOIN addresses oa ON oa.id = o.origin_address_id"
    " JOIN addresses da ON da.id = o.destination_address_id"
)


def generate_package_id() -> str:
    """Return a random 16-character lowercase hex package id."""
    return secrets.token_hex(PACKAGE_ID_LENGTH // 2)


class OrderRepository(BaseRepository[Order]):
    table_name = "orders"
    primary_key = "id"

    def __init__(
        self,
        database: Database,
        address_repo: AddressRepository,
        *,
        package_id_attempts: int = DEFAULT_PACKAGE_ID_ATTEMPTS,
        package_id_factory: Callable[[], str] = generate_package_id,
    ) -> None:
        super().__init__(database)
        self._addresses = address_repo
        self._package_id_attempts = package_id_attempts
        self._package_id_factory = package_id_factory

    def _row_to_entity(self, row: dict) -> Order:
        return Order(
            id=row["id"],
            package_id=row["package_id"],
            ship_date=row["ship_date"],
            delivery_date=row["delivery_date"],
            account_id=row["account_id"],
            origin=address_from_row(row, "origin_"),
            destination=address_from_row(row, "destination_"),
            status=OrderStatus(row["status"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def _entity_to_row(self, entity: Order) -> dict:
        return {
            "id": entity.id,
            "package_id": entity.package_id,
            "ship_date": entity.ship_date,
            "delivery_date": entity.delivery_date,
            "account_id": entity.account_id,
            "origin_address_id": entity.origin_address_id,
            "destination_address_id": entity.destination_address_id,
            "status": entity.status.value,
        }

    # -- lookups ---------------------------------------------------------------

    def find_by_id(self, id_value: int) -> Order | None:
        """Alias of :meth:`find_by_order_id` (rows always need the address join)."""
        return self.find_by_order_id(id_value)

    def find_by_order_id(self, order_id: int) -> Order | None:
        """Return the order with *order_id*, or ``None`` if there is none.

        Raises :class:`~mosdrones.core.errors.StorageFailure` when the
        lookup itself fails.
        """
        with storage_errors(f"load order {order_id}"):
            row = self._db.fetch_one(
                _SELECT_ORDERS + " WHERE o.id = %s",
                (order_id,),
                as_dict=True,
            )
        return self._row_to_entity(row) if row else None

    def find_by_package_id(self, package_id: str) -> Order | None:
        """Return the order tracked by *package_id*, or ``None``."""
        with storage_errors(f"load order for package {package_id}"):
            row = self._db.fetch_one(
                _SELECT_ORDERS + " WHERE o.package_id = %s",
                (package_id,),
                as_dict=True,
            )
        return self._row_to_entity(row) if row else None

    def list_by_account_id(self, account_id: int) -> list[Order]:
        """Return every order owned by *account_id* in insertion order."""
        with storage_errors(f"list orders for account {account_id}"):
            rows = self._db.fetch_all(
                _SELECT_ORDERS + " WHERE o.account_id = %s ORDER BY o.id",
                (account_id,),
                as_dict=True,
            )
        return [self._row_to_entity(r) for r in rows]

    def list_active(self) -> list[Order]:
        """Return every order that has not reached the terminal status."""
        with storage_errors("list active orders"):
            rows = self._db.fetch_all(
                _SELECT_ORDERS + " WHERE o.status <> %s ORDER BY o.id",
                (TERMINAL_ORDER_STATUS.value,),
                as_dict=True,
            )
        return [self._row_to_entity(r) for r in rows]

    # -- writes ----------------------------------------------------------------

    def insert(self, draft: OrderDraft) -> int:
        """Persist a new order and return its id.

        Origin and destination are written as fresh address rows on the
        same transaction as the order row, so the order can never
        reference a missing address.  The package id is regenerated on
        collision up to ``package_id_attempts`` times.

        Raises
        ------
        ValueError
            If the draft's delivery date precedes its ship date.
        PackageIdCollision
            If every generated package id was already taken.
        StorageFailure
            If any write fails; nothing is committed in that case.

        """
        ship_date = draft.ship_date or datetime.now(UTC)
        if draft.delivery_date < ship_date:
            msg = (
                f"Delivery date {draft.delivery_date.isoformat()} precedes "
                f"ship date {ship_date.isoformat()}"
            )
            raise ValueError(msg)

        with storage_errors(f"insert order for account {draft.account_id}"):
            with UnitOfWork(self._db) as uow:
                origin_id = self._addresses.insert(draft.origin, uow=uow)
                destination_id = self._addresses.insert(draft.destination, uow=uow)
                row = self._insert_with_unique_package_id(
                    uow,
                    {
                        "ship_date": ship_date,
                        "delivery_date": draft.delivery_date,
                        "account_id": draft.account_id,
                        "origin_address_id": origin_id,
                        "destination_address_id": destination_id,
                        "status": draft.status.value,
                    },
                )

        log.info(
            "Inserted order %s (package %s) for account %s",
            row["id"],
            row["package_id"],
            draft.account_id,
        )
        return row["id"]

    def _insert_with_unique_package_id(self, uow: UnitOfWork, values: dict) -> dict:
        """Insert the order row, regenerating the package id on collision."""
        for attempt in range(1, self._package_id_attempts + 1):
            package_id = self._package_id_factory()
            if len(package_id) != PACKAGE_ID_LENGTH:
                msg = f"Package id must be {PACKAGE_ID_LENGTH} characters, got {len(package_id)}"
                raise ValueError(msg)
            row = uow.insert_if_absent(
                self.table_name,
                {"package_id": package_id, **values},
                conflict_target="package_id",
            )
            if row is not None:
                return row
            log.warning(
                "Package id collision (attempt %d/%d), regenerating",
                attempt,
                self._package_id_attempts,
            )
        raise PackageIdCollision(self._package_id_attempts)

    def update_status(self, order_id: int, new_status: OrderStatus | str) -> bool:
        """Unconditionally set the status of *order_id*.

        Returns ``False`` if no order matched.  Unknown status strings
        raise :class:`ValueError` before anything is written.
        """
        status = OrderStatus(new_status)
        with storage_errors(f"update status of order {order_id}"):
            count = self._db.execute(
                "UPDATE orders SET status = %s WHERE id = %s",
                (status.value, order_id),
            )
        return count > 0

    def transition_status(
        self,
        order_id: int,
        from_status: OrderStatus,
        to_status: OrderStatus,
    ) -> bool:
        """Atomic compare-and-swap status transition.

        Returns ``False`` if the order does not exist or its current
        status did not match *from_status*.
        """
        with storage_errors(f"transition order {order_id}"):
            count = self._db.execute(
                "UPDATE orders SET status = %s WHERE id = %s AND status = %s",
                (to_status.value, order_id, from_status.value),
            )
        return count > 0
