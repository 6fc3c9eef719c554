"""Database management subcommands."""

from __future__ import annotations

import json
import logging
import sys

import psycopg
from pypgkit import PyPgKitError

log = logging.getLogger(__name__)

_EXPECTED_TABLES = ("addresses", "accounts", "orders")


def run_db(config, args) -> None:
    """Handle db subcommands."""
    if args.db_command == "status":
        _db_status(config)
    else:
        sys.exit(1)


def _db_status(config) -> None:
    """Check database connectivity and that the order schema is present."""
    from mosdrones.db import init_database

    try:
        db = init_database(config.settings.database)
        db.fetch_value("SELECT 1")
        present = db.fetch_value(
            "SELECT count(*) FROM information_schema.tables "
            "WHERE table_schema = 'public' AND table_name = ANY(%s)",
            (list(_EXPECTED_TABLES),),
        )
    except (psycopg.Error, PyPgKitError) as exc:
        log.error("Database status check failed: %s", exc)
        print(json.dumps({"connected": False, "error": str(exc)}, indent=2))  # noqa: T201
        sys.exit(1)

    schema_ok = present == len(_EXPECTED_TABLES)
    print(  # noqa: T201
        json.dumps(
            {
                "connected": True,
                "schema": "ok" if schema_ok else "missing",
                "tables": f"{present}/{len(_EXPECTED_TABLES)}",
            },
            indent=2,
        ),
    )
    if not schema_ok:
        sys.exit(1)
