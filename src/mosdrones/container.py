"""Dependency container for the order core.

Created once at startup from the typed settings and an initialised
:class:`pypgkit.Database`.

Usage::

    from mosdrones.container import Container

    c = Container(settings, db)
    view = c.order_service.find_order(42)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mosdrones.estimator.registry import load_estimator
from mosdrones.repositories import AccountRepository, AddressRepository, OrderRepository
from mosdrones.services import OrderService

if TYPE_CHECKING:
    from pypgkit import Database

    from mosdrones.config.settings import MosDronesSettings
    from mosdrones.estimator.base import DeliveryEstimator


class Container:
    """Application-wide dependency container.

    All repositories share the connection pool of *db*.  The estimator
    is loaded from ``settings.estimator`` unless one is passed in.
    """

    def __init__(
        self,
        settings: MosDronesSettings,
        db: Database,
        estimator: DeliveryEstimator | None = None,
    ) -> None:
        self.settings = settings
        self.db = db

        # Repositories
        self.addresses = AddressRepository(db)
        self.accounts = AccountRepository(db)
        self.orders = OrderRepository(
            db,
            self.addresses,
            package_id_attempts=settings.order.package_id_max_attempts,
        )

        self.estimator = estimator if estimator is not None else load_estimator(settings.estimator)

        # Services
        self.order_service = OrderService(
            self.orders,
            self.accounts,
            self.estimator,
            settings.order,
        )
