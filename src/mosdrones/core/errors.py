"""Exception hierarchy for the order core.

"Not found" on a lookup is not an error: lookups return ``None``.
:class:`StorageFailure` is reserved for the store being unreachable or
a read/write failing, so callers can always tell the two apart.
"""

from __future__ import annotations


class MosDronesError(Exception):
    """Base class for all errors raised by this package."""


class StorageFailure(MosDronesError):
    """The order store could not complete a read or write.

    Parameters
    ----------
    detail:
        Human-readable description of the failed operation.

    """

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class PackageIdCollision(StorageFailure):
    """Every generated package id collided with an existing order."""

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(
            f"Could not allocate a unique package id after {attempts} attempts",
        )


class OrderNotFound(MosDronesError):
    """An operation required an existing order and none matched."""

    def __init__(self, order_id: int) -> None:
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class InvalidTransition(MosDronesError, ValueError):
    """A status change is not permitted from the order's current status."""
