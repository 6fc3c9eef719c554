"""Account repository."""

from __future__ import annotations

from pypgkit import BaseRepository

from mosdrones.models.account import Account
from mosdrones.repositories.base import address_columns, address_from_row, storage_errors

_SELECT_ACCOUNT = (
    "SELECT acc.*, "
    + address_columns("addr", "home_")
    + " FROM accounts acc JOIN addresses addr ON addr.id = acc.address_id"
)


class AccountRepository(BaseRepository[Account]):
    table_name = "accounts"
    primary_key = "id"

    def _row_to_entity(self, row: dict) -> Account:
        return Account(
            id=row["id"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            email=row["email"],
            address=address_from_row(row, "home_"),
            is_admin=row.get("is_admin", False),
            created_at=row["created_at"],
        )

    def _entity_to_row(self, entity: Account) -> dict:
        return {
            "id": entity.id,
            "first_name": entity.first_name,
            "last_name": entity.last_name,
            "email": entity.email,
            "address_id": entity.address.id,
            "is_admin": entity.is_admin,
        }

    def get(self, account_id: int) -> Account | None:
        """Resolve an account and its home address, or ``None``."""
        with storage_errors(f"load account {account_id}"):
            row = self._db.fetch_one(
                _SELECT_ACCOUNT + " WHERE acc.id = %s",
                (account_id,),
                as_dict=True,
            )
        return self._row_to_entity(row) if row else None
