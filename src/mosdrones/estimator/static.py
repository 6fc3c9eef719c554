"""Configuration-driven delivery estimator.

Serves a fixed coverage area (a list of states and/or postal codes) and
quotes a constant lead time.  Intended for development and tests; it
knows nothing about distance, weather or fleet capacity.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from mosdrones.estimator.base import DeliveryEstimator, EstimatorError

if TYPE_CHECKING:
    from datetime import datetime

    from mosdrones.config.settings import EstimatorSettings
    from mosdrones.models.address import Address

log = logging.getLogger(__name__)


class StaticDeliveryEstimator(DeliveryEstimator):
    """Estimator backed by the ``estimator.static`` config section."""

    def __init__(self, settings: EstimatorSettings) -> None:
        super().__init__(settings)
        static = settings.static
        self._states = frozenset(s.upper() for s in static.serviceable_states)
        self._postal_codes = frozenset(static.serviceable_postal_codes)
        if not self._states and not self._postal_codes:
            msg = "Static estimator needs at least one serviceable state or postal code"
            raise EstimatorError(msg)
        if static.lead_time_hours <= 0:
            msg = f"lead_time_hours must be positive, got {static.lead_time_hours}"
            raise EstimatorError(msg)
        self._lead_time = timedelta(hours=static.lead_time_hours)

    def is_serviceable(self, destination: Address) -> bool:
        if destination.postal_code in self._postal_codes:
            return True
        serviceable = destination.state.upper() in self._states
        if not serviceable:
            log.debug(
                "Destination %s outside coverage area",
                destination.one_line(),
            )
        return serviceable

    def estimate_delivery(
        self,
        ship_date: datetime,
        origin: Address,
        destination: Address,
    ) -> datetime:
        return ship_date + self._lead_time
