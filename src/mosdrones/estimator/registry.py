"""Delivery estimator registry.

Loads the configured estimator by name and returns an initialised
:class:`DeliveryEstimator` instance.  Supports the built-in ``static``
backend and custom backends via the ``ext:`` prefix.

Usage::

    from mosdrones.estimator.registry import load_estimator

    estimator = load_estimator(settings.estimator)
    if estimator.is_serviceable(destination):
        eta = estimator.estimate_delivery(now, origin, destination)
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING

from mosdrones.estimator.base import DeliveryEstimator, EstimatorError

if TYPE_CHECKING:
    from mosdrones.config.settings import EstimatorSettings

log = logging.getLogger(__name__)

# Maps config string → (module_path, class_name)
_BUILTIN_ESTIMATORS: dict[str, tuple[str, str]] = {
    "static": ("mosdrones.estimator.static", "StaticDeliveryEstimator"),
}

_REQUIRED_METHODS = ("is_serviceable", "estimate_delivery")


def load_estimator(settings: EstimatorSettings) -> DeliveryEstimator:
    """Load and return the configured delivery estimator.

    Parameters
    ----------
    settings:
        The ``estimator`` section from :class:`MosDronesSettings`.

    Raises
    ------
    EstimatorError
        If the backend cannot be loaded or rejects its configuration.

    """
    backend_name = settings.backend

    if backend_name in _BUILTIN_ESTIMATORS:
        mod_path, cls_name = _BUILTIN_ESTIMATORS[backend_name]
        cls = _import_class(mod_path, cls_name, backend_name)
    elif backend_name.startswith("ext:"):
        fqn = backend_name[4:]
        module_path, _, cls_name = fqn.rpartition(".")
        if not module_path:
            msg = (
                f"Invalid external estimator '{fqn}': must be fully "
                "qualified (e.g. 'mypackage.module.ClassName')"
            )
            raise EstimatorError(msg)
        cls = _import_class(module_path, cls_name, backend_name)
    else:
        msg = (
            f"Unknown estimator backend '{backend_name}'; "
            f"built-in options: {sorted(_BUILTIN_ESTIMATORS)}. "
            "Use 'ext:mypackage.module.ClassName' for custom backends."
        )
        raise EstimatorError(msg)

    _validate_class(cls, backend_name)
    estimator = cls(settings)
    log.info("Loaded delivery estimator: %s", backend_name)
    return estimator


def _import_class(module_path: str, cls_name: str, label: str) -> type:
    try:
        module = importlib.import_module(module_path)
        return getattr(module, cls_name)
    except (ImportError, AttributeError) as exc:
        msg = f"Failed to load estimator '{label}': {exc}"
        raise EstimatorError(msg) from exc


def _validate_class(cls: object, label: str) -> None:
    """Verify that an estimator class has the required methods."""
    if not (isinstance(cls, type) and issubclass(cls, DeliveryEstimator)):
        msg = f"Estimator '{label}' is not a subclass of DeliveryEstimator"
        raise EstimatorError(msg)

    for method_name in _REQUIRED_METHODS:
        method = getattr(cls, method_name, None)
        if method is None or getattr(method, "__isabstractmethod__", False):
            msg = f"Estimator '{label}' does not implement '{method_name}()'"
            raise EstimatorError(msg)
