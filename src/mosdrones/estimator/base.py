"""Abstract base class for delivery estimator backends.

All estimators (built-in and custom) must inherit from
:class:`DeliveryEstimator` and implement :meth:`is_serviceable` and
:meth:`estimate_delivery`.

``is_serviceable`` is always consulted first; ``estimate_delivery`` is
only called for destinations that passed it.  The returned delivery
date must not precede the ship date it was computed from.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from mosdrones.config.settings import EstimatorSettings
    from mosdrones.models.address import Address


class EstimatorError(Exception):
    """Raised by estimators on misconfiguration or estimation failure.

    Parameters
    ----------
    detail:
        Human-readable description of the failure.

    """

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class DeliveryEstimator(abc.ABC):
    """Base class for all delivery estimator implementations.

    Parameters
    ----------
    settings:
        The full ``estimator`` configuration section.

    """

    def __init__(self, settings: EstimatorSettings) -> None:
        self._settings = settings

    @abc.abstractmethod
    def is_serviceable(self, destination: Address) -> bool:
        """Return ``True`` if the platform can deliver to *destination*."""

    @abc.abstractmethod
    def estimate_delivery(
        self,
        ship_date: datetime,
        origin: Address,
        destination: Address,
    ) -> datetime:
        """Return the expected delivery time of a package.

        Parameters
        ----------
        ship_date:
            Time the package leaves *origin* (timezone-aware).
        origin:
            Pick-up address, normally the account's home address.
        destination:
            Drop-off address supplied by the requester.

        Raises
        ------
        EstimatorError
            If no estimate can be produced.

        """
