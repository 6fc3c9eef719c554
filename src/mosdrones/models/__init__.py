"""Entity models for the MOS Drones persistence layer.

All models are frozen dataclasses.  Use :func:`dataclasses.replace`
for modifications (copy-on-write).
"""

from mosdrones.models.account import Account
from mosdrones.models.address import Address
from mosdrones.models.order import Order, OrderDraft, OrderView

__all__ = [
    "Account",
    "Address",
    "Order",
    "OrderDraft",
    "OrderView",
]
