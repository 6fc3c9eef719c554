"""Service layer.

Services hold the order business rules and delegate persistence to the
repository layer.
"""

from mosdrones.services.order import CreateOrderResult, OrderService

__all__ = [
    "CreateOrderResult",
    "OrderService",
]
