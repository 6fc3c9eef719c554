"""MOS Drones command-line entry point.

Usage::

    mosdrones -c /etc/mosdrones/config.yaml --validate-only
    mosdrones -c config.yaml db status
    mosdrones -c config.yaml order show 42
    mosdrones -c config.yaml order track 3f9c2a7e81d04b6a
    mosdrones -c config.yaml order list --account 7
    mosdrones -c config.yaml order active
    mosdrones -c config.yaml order create --account 7 --street "200 Oak Ave" \\
        --city Springfield --state IL --postal-code 62704
    mosdrones -c config.yaml order set-status 42 "In Transit"
    python -m mosdrones -c config.yaml order active
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from mosdrones.core.types import OrderStatus

log = logging.getLogger(__name__)


def _get_version() -> str:
    from mosdrones import __version__

    return __version__


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mosdrones",
        description="MOS Drones: delivery order management",
    )
    parser.add_argument(
        "-c",
        "--config",
        required=True,
        metavar="PATH",
        help="Path to the configuration file (YAML or JSON).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable debug output (full tracebacks, verbose logging).",
    )
    parser.add_argument(
        "--validate-only",
        action="store_true",
        default=False,
        help="Validate the configuration file and exit.",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # db
    db_parser = subparsers.add_parser("db", help="Database management")
    db_sub = db_parser.add_subparsers(dest="db_command")
    db_sub.add_parser("status", help="Check database connectivity and schema")

    # order
    order_parser = subparsers.add_parser("order", help="Order management")
    order_sub = order_parser.add_subparsers(dest="order_command")

    show = order_sub.add_parser("show", help="Show an order by id")
    show.add_argument("order_id", type=int)

    track = order_sub.add_parser("track", help="Show an order by package id")
    track.add_argument("package_id")

    list_ = order_sub.add_parser("list", help="List an account's orders")
    list_.add_argument("--account", type=int, required=True, dest="account_id")

    order_sub.add_parser("active", help="List orders not yet delivered")

    create = order_sub.add_parser("create", help="Create an order")
    create.add_argument("--account", type=int, required=True, dest="account_id")
    create.add_argument("--street", required=True)
    create.add_argument("--unit", default=None)
    create.add_argument("--city", required=True)
    create.add_argument("--state", required=True)
    create.add_argument("--postal-code", required=True, dest="postal_code")
    create.add_argument("--country", default="US")

    set_status = order_sub.add_parser("set-status", help="Change an order's status")
    set_status.add_argument("order_id", type=int)
    set_status.add_argument("status", choices=[s.value for s in OrderStatus])

    return parser


def _print_error(message: str) -> None:
    """Print a user-facing error to stderr."""
    print(f"mosdrones: error: {message}", file=sys.stderr)  # noqa: T201


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.  Parses arguments, loads config, dispatches."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    config_path = Path(args.config)
    if not config_path.is_file():
        _print_error(f"configuration file not found: {config_path}")
        sys.exit(1)

    # -- bootstrap logging early (basic stderr until config is loaded) ---
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    # -- load & validate config ---
    try:
        from mosdrones.config import ConfigValidationError, MosDronesConfig

        config = MosDronesConfig(
            config_file=str(config_path),
            schema_file="bundled",
        )
    except ConfigValidationError as exc:
        _print_error(str(exc))
        sys.exit(1)
    except (OSError, ValueError) as exc:
        if args.debug:
            raise
        _print_error(f"failed to load configuration: {exc}")
        sys.exit(1)

    from mosdrones.logging import configure_logging

    configure_logging(config.settings.logging)

    if args.validate_only:
        _print_settings_summary(config)
        sys.exit(0)

    command = args.command

    if command == "db":
        from mosdrones.cli.commands.db import run_db

        run_db(config, args)
    elif command == "order":
        from mosdrones.cli.commands.order import run_order

        run_order(config, args)
    else:
        parser.print_help(sys.stderr)
        sys.exit(1)


def _print_settings_summary(config) -> None:
    """Print a short summary of the loaded configuration."""
    s = config.settings
    print(  # noqa: T201
        f"Configuration OK\n"
        f"  database:  {s.database.user}@{s.database.host}:{s.database.port}/{s.database.database}\n"
        f"  logging:   {s.logging.level} ({s.logging.format})\n"
        f"  estimator: {s.estimator.backend}\n"
        f"  orders:    forward-only={s.order.enforce_forward_transitions}, "
        f"package-id attempts={s.order.package_id_max_attempts}",
    )
