"""MOS Drones configuration loader built on ConfigKit.

Lifecycle::

    # 1. CLI creates the singleton (once, at startup)
    MosDronesConfig(config_file="/etc/mosdrones/config.yaml", schema_file="bundled")

    # 2. Any module retrieves it afterwards
    from mosdrones.config import get_config
    cfg = get_config()
    cfg.settings.order.package_id_max_attempts

    # 3. Dynamic access, e.g. for ext: estimator options
    cfg.get("estimator.config.api_url", default="http://localhost:9000")
"""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from configkit import ConfigKit, ConfigKitMeta

from mosdrones.config.settings import MosDronesSettings, build_settings

_SCHEMA_PATH = Path(__file__).parent / "schema.json"

_ENV_RE = re.compile(
    r"^\$\{([^}:]+?)(?::-(.*))?\}$",
    re.DOTALL,
)

_CLASS_PATH_RE = re.compile(
    r"^[a-zA-Z_][a-zA-Z0-9_]*(\.[a-zA-Z_][a-zA-Z0-9_]*)+$",
)

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Module-level singleton reference
# ---------------------------------------------------------------------------
_instance: MosDronesConfig | None = None


def get_config() -> MosDronesConfig:
    """Return the initialised configuration singleton.

    Raises :class:`RuntimeError` if :class:`MosDronesConfig` has not been
    created yet (i.e. the CLI entry point has not run).
    """
    if _instance is None:
        msg = (
            "Configuration not initialised. "
            "MosDronesConfig must be created with config_file= before calling get_config()."
        )
        raise RuntimeError(msg)
    return _instance


# ---------------------------------------------------------------------------
# Validation error collector
# ---------------------------------------------------------------------------


class ConfigValidationError(Exception):
    """Raised when cross-field validation finds one or more problems."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        body = "\n".join(f"  - {e}" for e in errors)
        super().__init__(f"Configuration validation failed:\n{body}")


# ---------------------------------------------------------------------------
# Environment variable resolution
# ---------------------------------------------------------------------------


def _resolve_value(value: str, path: str) -> str:
    """Replace ``${VAR}`` or ``${VAR:-default}`` with env var value."""
    match = _ENV_RE.match(value)
    if match is None:
        return value
    var_name = match.group(1)
    fallback = match.group(2)
    resolved = os.environ.get(var_name)
    if resolved is not None:
        return resolved
    if fallback is not None:
        return fallback
    raise ConfigValidationError(
        [
            f"Environment variable '${{{var_name}}}' referenced "
            f"at '{path}' is not set and has no default",
        ],
    )


def _resolve_env_vars(data: Any, path: str = "") -> None:  # noqa: ANN401
    """Walk *data* in-place and resolve ``${VAR}``/``${VAR:-default}`` strings."""
    if isinstance(data, dict):
        entries = [(key, f"{path}.{key}" if path else key) for key in data]
    elif isinstance(data, list):
        entries = [(idx, f"{path}[{idx}]") for idx in range(len(data))]
    else:
        return
    for key, child_path in entries:
        value = data[key]
        if isinstance(value, str):
            data[key] = _resolve_value(value, child_path)
        elif isinstance(value, (dict, list)):
            _resolve_env_vars(value, child_path)


def _read_config_file(path: Path) -> dict[str, Any]:
    with path.open(encoding="utf-8") as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            return yaml.safe_load(f) or {}
        return json.load(f)


# ---------------------------------------------------------------------------
# Config class
# ---------------------------------------------------------------------------


class MosDronesConfig(ConfigKit):
    """Central configuration for the MOS Drones order core.

    Subclasses :class:`configkit.ConfigKit`.  The JSON schema is
    bundled at ``config/schema.json``; users supply only ``config_file``.

    After construction the typed settings tree is available at
    :pyattr:`settings` and the raw dict via :pyattr:`data` /
    :pymeth:`get`.
    """

    def __init__(
        self,
        *,
        config_file: str | Path,
        schema_file: str | Path | None = None,  # noqa: ARG002
    ) -> None:
        """Initialise the configuration singleton.

        Parameters
        ----------
        config_file:
            Path to the YAML/JSON configuration file.
        schema_file:
            Ignored; the bundled schema is always used.  Pass any
            non-empty value (conventionally ``"bundled"``) to satisfy the
            :class:`ConfigKitMeta` first-instantiation guard.

        """
        global _instance  # noqa: PLW0603

        super().__init__(
            config_file=config_file,
            schema_file=_SCHEMA_PATH,
        )
        self._settings: MosDronesSettings = build_settings(self.data)
        _instance = self

    # -- lifecycle overrides ------------------------------------------------

    def _load(self) -> None:
        """Load config file then resolve ``${VAR}`` env-var references.

        Runs env-var resolution **before** schema validation so that
        substituted values (e.g. ``${LOG_LEVEL:-INFO}``) are checked
        against enum constraints in the schema.
        """
        super()._load()
        _resolve_env_vars(self._data)

    # -- typed access -------------------------------------------------------

    @property
    def settings(self) -> MosDronesSettings:
        """Fully-typed, frozen settings tree."""
        return self._settings

    # -- cross-field validation ---------------------------------------------

    def additional_checks(self) -> None:
        """Semantic & cross-field validation.

        Called automatically by ConfigKit **after** schema validation
        passes.
        """
        errors: list[str] = []

        database = self.data.get("database") or {}
        estimator = self.data.get("estimator") or {}

        # -- database --
        min_conn = database.get("min_connections", 2)
        max_conn = database.get("max_connections", 10)
        if min_conn > max_conn:
            errors.append(
                f"database.min_connections ({min_conn}) must be <= "
                f"database.max_connections ({max_conn})",
            )

        # -- estimator --
        backend = estimator.get("backend", "static")
        if backend == "static":
            static = estimator.get("static") or {}
            if not static.get("serviceable_states") and not static.get(
                "serviceable_postal_codes",
            ):
                errors.append(
                    "estimator.static needs at least one of serviceable_states "
                    "or serviceable_postal_codes when estimator.backend is 'static'",
                )
        elif backend.startswith("ext:"):
            class_path = backend[4:]
            if not _CLASS_PATH_RE.match(class_path):
                errors.append(
                    f"estimator.backend '{backend}' must name a fully-qualified "
                    "class (e.g. 'ext:mypackage.module.ClassName')",
                )
        else:
            errors.append(
                f"estimator.backend must be 'static' or 'ext:<class path>' (got '{backend}')",
            )

        if errors:
            raise ConfigValidationError(errors)

    # -- helpers ------------------------------------------------------------

    def reload_settings(self) -> MosDronesSettings:
        """Re-read the config file and rebuild settings.

        Does not reset the singleton and does not swap the settings held
        by this instance; the caller decides what to do with the fresh
        :class:`MosDronesSettings` tree.
        """
        new_data = _read_config_file(self._config_path)
        _resolve_env_vars(new_data)
        return build_settings(new_data)

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton -- testing only."""
        global _instance  # noqa: PLW0603
        _instance = None
        ConfigKitMeta.reset()

    def __repr__(self) -> str:
        return f"<MosDronesConfig config_file={self._config_path}>"
