"""Logging subsystem for MOS Drones.

Public API::

    from mosdrones.logging import configure_logging, operation_context

    configure_logging(settings.logging)

    with operation_context("create_order", account_id=42):
        log.info("...")  # record carries operation_id and account_id
"""

from mosdrones.logging.setup import configure_logging, operation_context

__all__ = ["configure_logging", "operation_context"]
