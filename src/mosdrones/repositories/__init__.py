"""Repository classes for the MOS Drones persistence layer.

Each repository extends :class:`pypgkit.BaseRepository` and is bound
to the :class:`pypgkit.Database` passed to its constructor.
"""

from mosdrones.repositories.account import AccountRepository
from mosdrones.repositories.address import AddressRepository
from mosdrones.repositories.order import OrderRepository

__all__ = [
    "AccountRepository",
    "AddressRepository",
    "OrderRepository",
]
