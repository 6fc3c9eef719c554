"""Account entity."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mosdrones.models.address import Address

# Sentinel for timestamps not yet assigned by the database.
_EPOCH = datetime(1970, 1, 1)


@dataclass(frozen=True)
class Account:
    id: int
    first_name: str
    last_name: str
    email: str
    address: Address
    is_admin: bool = False
    created_at: datetime = _EPOCH
