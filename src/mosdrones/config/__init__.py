"""Configuration subsystem for MOS Drones.

Public API::

    from mosdrones.config import get_config, MosDronesConfig

    # At startup (CLI only):
    MosDronesConfig(config_file="config.yaml", schema_file="bundled")

    # Everywhere else:
    cfg = get_config()
    attempts = cfg.settings.order.package_id_max_attempts
"""

from mosdrones.config.mosdrones_config import (
    ConfigValidationError,
    MosDronesConfig,
    get_config,
)
from mosdrones.config.settings import (
    AuditLogSettings,
    DatabaseSettings,
    EstimatorSettings,
    LoggingSettings,
    MosDronesSettings,
    OrderSettings,
    StaticEstimatorSettings,
)

__all__ = [
    "AuditLogSettings",
    "ConfigValidationError",
    "DatabaseSettings",
    "EstimatorSettings",
    "LoggingSettings",
    "MosDronesConfig",
    "MosDronesSettings",
    "OrderSettings",
    "StaticEstimatorSettings",
    "get_config",
]
