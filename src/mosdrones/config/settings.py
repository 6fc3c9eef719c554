"""Typed, frozen dataclasses for every configuration section.

This module is the **single source of truth** for default values.
JSON Schema defaults exist only for documentation; these builders
are what the application actually reads.

Access pattern::

    from mosdrones.config import get_config

    db = get_config().settings.database
    print(db.host, db.port)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DatabaseSettings:
    """PostgreSQL connection and pool settings."""

    host: str
    port: int
    database: str
    user: str
    password: str
    sslmode: str
    min_connections: int
    max_connections: int
    connection_timeout: float
    auto_setup: bool


def _build_database(data: dict | None) -> DatabaseSettings:
    d = data or {}
    return DatabaseSettings(
        host=d.get("host", "localhost"),
        port=d.get("port", 5432),
        database=d["database"],
        user=d["user"],
        password=d.get("password", ""),
        sslmode=d.get("sslmode", "prefer"),
        min_connections=d.get("min_connections", 2),
        max_connections=d.get("max_connections", 10),
        connection_timeout=d.get("connection_timeout", 30.0),
        auto_setup=d.get("auto_setup", False),
    )


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AuditLogSettings:
    """Audit log output settings (file and rotation)."""

    enabled: bool
    file: str | None
    max_file_size_bytes: int
    backup_count: int


@dataclass(frozen=True)
class LoggingSettings:
    """Application logging configuration (level, format, audit)."""

    level: str
    format: str
    audit: AuditLogSettings


def _build_logging(data: dict | None) -> LoggingSettings:
    d = data or {}
    a = d.get("audit") or {}
    return LoggingSettings(
        level=d.get("level", "INFO"),
        format=d.get("format", "json"),
        audit=AuditLogSettings(
            enabled=a.get("enabled", True),
            file=a.get("file"),
            max_file_size_bytes=a.get("max_file_size_bytes", 10485760),
            backup_count=a.get("backup_count", 5),
        ),
    )


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OrderSettings:
    """Order creation and status-transition policy."""

    package_id_max_attempts: int
    enforce_forward_transitions: bool


def _build_order(data: dict | None) -> OrderSettings:
    d = data or {}
    return OrderSettings(
        package_id_max_attempts=d.get("package_id_max_attempts", 5),
        enforce_forward_transitions=d.get("enforce_forward_transitions", True),
    )


# ---------------------------------------------------------------------------
# Delivery estimator
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StaticEstimatorSettings:
    serviceable_states: tuple[str, ...]
    serviceable_postal_codes: tuple[str, ...]
    lead_time_hours: float


@dataclass(frozen=True)
class EstimatorSettings:
    """Delivery estimator backend selection.

    ``config`` is passed through untouched to ``ext:`` backends.
    """

    backend: str
    static: StaticEstimatorSettings
    config: dict[str, Any] = field(default_factory=dict)


def _build_estimator(data: dict | None) -> EstimatorSettings:
    d = data or {}
    s = d.get("static") or {}
    return EstimatorSettings(
        backend=d.get("backend", "static"),
        static=StaticEstimatorSettings(
            serviceable_states=tuple(s.get("serviceable_states", ())),
            serviceable_postal_codes=tuple(s.get("serviceable_postal_codes", ())),
            lead_time_hours=s.get("lead_time_hours", 48.0),
        ),
        config=dict(d.get("config") or {}),
    )


# ---------------------------------------------------------------------------
# Root settings aggregate
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MosDronesSettings:
    database: DatabaseSettings
    logging: LoggingSettings
    order: OrderSettings
    estimator: EstimatorSettings


def build_settings(data: dict) -> MosDronesSettings:
    """Build the full typed settings tree from raw config data.

    Called once during :class:`MosDronesConfig` initialization after
    schema validation and environment-variable resolution.
    """
    return MosDronesSettings(
        database=_build_database(data.get("database")),
        logging=_build_logging(data.get("logging")),
        order=_build_order(data.get("order")),
        estimator=_build_estimator(data.get("estimator")),
    )
