"""Order subcommands.

Usage::

    mosdrones -c config.yaml order show <order_id>
    mosdrones -c config.yaml order track <package_id>
    mosdrones -c config.yaml order list --account <account_id>
    mosdrones -c config.yaml order active
    mosdrones -c config.yaml order create --account <id> --street ... --city ... \\
        --state ... --postal-code ...
    mosdrones -c config.yaml order set-status <order_id> <status>

Every command prints JSON to stdout and exits 1 when the order is not
found or the request was refused.
"""

from __future__ import annotations

import json
import sys

import psycopg
from pypgkit import PyPgKitError

from mosdrones.core.errors import InvalidTransition, OrderNotFound, StorageFailure
from mosdrones.estimator.base import EstimatorError
from mosdrones.models.address import Address
from mosdrones.serializers import serialize_order, serialize_result


def _emit(payload) -> None:
    print(json.dumps(payload, indent=2))  # noqa: T201


def _fail(message: str) -> None:
    print(f"mosdrones: error: {message}", file=sys.stderr)  # noqa: T201
    sys.exit(1)


def run_order(config, args, container=None) -> None:
    """Dispatch to the appropriate order sub-handler.

    *container* is built from *config* when not supplied.
    """
    sub = getattr(args, "order_command", None)
    if sub is None:
        _fail("missing order subcommand")

    if container is None:
        from mosdrones.container import Container
        from mosdrones.db import init_database

        try:
            container = Container(config.settings, init_database(config.settings.database))
        except (psycopg.Error, PyPgKitError, EstimatorError) as exc:
            _fail(f"initialisation failed: {exc}")
    service = container.order_service

    try:
        if sub == "show":
            view = service.find_order(args.order_id)
            if view is None:
                _fail(f"order {args.order_id} not found")
            _emit(serialize_order(view))
        elif sub == "track":
            view = service.track_package(args.package_id)
            if view is None:
                _fail(f"no order for package {args.package_id}")
            _emit(serialize_order(view))
        elif sub == "list":
            _emit([serialize_order(v) for v in service.list_orders_for_account(args.account_id)])
        elif sub == "active":
            _emit([serialize_order(v) for v in service.list_active_orders()])
        elif sub == "create":
            _create(service, args)
        elif sub == "set-status":
            _emit(serialize_order(service.update_status(args.order_id, args.status)))
        else:
            _fail(f"unknown order subcommand {sub!r}")
    except (OrderNotFound, InvalidTransition, StorageFailure, EstimatorError) as exc:
        _fail(str(exc))


def _create(service, args) -> None:
    destination = Address(
        street=args.street,
        unit=args.unit,
        city=args.city,
        state=args.state,
        postal_code=args.postal_code,
        country=args.country,
    )
    result = service.create_order(args.account_id, destination)
    _emit(serialize_result(result))
    if not result.created:
        sys.exit(1)
