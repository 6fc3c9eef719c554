"""Address repository."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pypgkit import BaseRepository

from mosdrones.models.address import Address
from mosdrones.repositories.base import address_from_row, storage_errors

if TYPE_CHECKING:
    from mosdrones.db.unit_of_work import UnitOfWork


class AddressRepository(BaseRepository[Address]):
    table_name = "addresses"
    primary_key = "id"

    def _row_to_entity(self, row: dict) -> Address:
        return address_from_row(row)

    def _entity_to_row(self, entity: Address) -> dict:
        row = {
            "street": entity.street,
            "unit": entity.unit,
            "city": entity.city,
            "state": entity.state,
            "postal_code": entity.postal_code,
            "country": entity.country,
        }
        if entity.id is not None:
            row["id"] = entity.id
        return row

    def get(self, address_id: int) -> Address | None:
        """Resolve an address id, or return ``None`` if it does not exist."""
        with storage_errors(f"load address {address_id}"):
            return self.find_by_id(address_id)

    def insert(self, address: Address, uow: UnitOfWork | None = None) -> int:
        """Persist *address* as a new row and return its id.

        Any ``id`` already set on *address* is ignored; a fresh row is
        always written.  When *uow* is given the row is written on the
        unit of work's transaction so it commits or rolls back together
        with the caller's other writes.
        """
        row = self._entity_to_row(address)
        row.pop("id", None)
        with storage_errors("insert address"):
            if uow is not None:
                inserted = uow.insert(self.table_name, row)
                return inserted["id"]
            return self._db.fetch_value(
                "INSERT INTO addresses (street, unit, city, state, postal_code, country) "
                "VALUES (%s, %s, %s, %s, %s, %s) RETURNING id",
                tuple(row.values()),
            )
