"""Delivery estimator backends.

The order service asks a :class:`DeliveryEstimator` whether a
destination is serviceable and when a package shipped now would arrive.
Backends are loaded by name from configuration, see
:func:`mosdrones.estimator.registry.load_estimator`.
"""

from mosdrones.estimator.base import DeliveryEstimator, EstimatorError
from mosdrones.estimator.registry import load_estimator

__all__ = [
    "DeliveryEstimator",
    "EstimatorError",
    "load_estimator",
]
