"""Tests for the ``db`` and ``order`` CLI subcommands."""

from __future__ import annotations

import json
from argparse import Namespace
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock, patch

import psycopg
import pytest

from mosdrones.cli.commands.db import run_db
from mosdrones.cli.commands.order import run_order
from mosdrones.core.errors import InvalidTransition, OrderNotFound, StorageFailure
from mosdrones.core.types import OrderOutcome, OrderStatus
from mosdrones.models.address import Address
from mosdrones.models.order import OrderView
from mosdrones.services.order import CreateOrderResult

_SHIP = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)


def _view(order_id=42, status=OrderStatus.PENDING):
    return OrderView(
        order_id=order_id,
        package_id="0123456789abcdef",
        ship_date=_SHIP,
        delivery_date=_SHIP + timedelta(days=2),
        account_id=7,
        shipped_from=Address("100 Main St", "Springfield", "IL", "62701", id=1),
        shipped_to=Address("200 Oak Ave", "Springfield", "IL", "62704", id=2),
        status=status,
    )


def _container():
    container = MagicMock()
    return container, container.order_service


# ---------------------------------------------------------------------------
# order
# ---------------------------------------------------------------------------


class TestRunOrder:
    def test_show(self, capsys):
        container, service = _container()
        service.find_order.return_value = _view()

        run_order(None, Namespace(order_command="show", order_id=42), container)

        out = json.loads(capsys.readouterr().out)
        assert out["orderId"] == 42
        assert out["status"] == "Pending"
        service.find_order.assert_called_once_with(42)

    def test_show_missing(self, capsys):
        container, service = _container()
        service.find_order.return_value = None

        with pytest.raises(SystemExit) as exc_info:
            run_order(None, Namespace(order_command="show", order_id=9), container)

        assert exc_info.value.code == 1
        assert "order 9 not found" in capsys.readouterr().err

    def test_track(self, capsys):
        container, service = _container()
        service.track_package.return_value = _view()

        run_order(None, Namespace(order_command="track", package_id="0123456789abcdef"), container)

        assert json.loads(capsys.readouterr().out)["packageId"] == "0123456789abcdef"

    def test_track_missing(self):
        container, service = _container()
        service.track_package.return_value = None
        with pytest.raises(SystemExit):
            run_order(None, Namespace(order_command="track", package_id="x" * 16), container)

    def test_list(self, capsys):
        container, service = _container()
        service.list_orders_for_account.return_value = [_view(1), _view(2)]

        run_order(None, Namespace(order_command="list", account_id=7), container)

        assert [o["orderId"] for o in json.loads(capsys.readouterr().out)] == [1, 2]

    def test_active_empty(self, capsys):
        container, service = _container()
        service.list_active_orders.return_value = []

        run_order(None, Namespace(order_command="active"), container)

        assert json.loads(capsys.readouterr().out) == []

    def _create_args(self):
        return Namespace(
            order_command="create",
            account_id=7,
            street="200 Oak Ave",
            unit=None,
            city="Springfield",
            state="IL",
            postal_code="62704",
            country="US",
        )

    def test_create(self, capsys):
        container, service = _container()
        service.create_order.return_value = CreateOrderResult(
            OrderOutcome.CREATED,
            order_id=5,
            package_id="0123456789abcdef",
            delivery_date=_SHIP,
        )

        run_order(None, self._create_args(), container)

        account_id, destination = service.create_order.call_args[0]
        assert account_id == 7
        assert destination == Address("200 Oak Ave", "Springfield", "IL", "62704")
        out = json.loads(capsys.readouterr().out)
        assert out["outcome"] == "CREATED"
        assert out["orderId"] == 5

    def test_create_refused_exits_nonzero(self, capsys):
        container, service = _container()
        service.create_order.return_value = CreateOrderResult(OrderOutcome.OUT_OF_RANGE)

        with pytest.raises(SystemExit) as exc_info:
            run_order(None, self._create_args(), container)

        assert exc_info.value.code == 1
        assert json.loads(capsys.readouterr().out)["outcome"] == "OUT_OF_RANGE"

    def test_set_status(self, capsys):
        container, service = _container()
        service.update_status.return_value = _view(status=OrderStatus.IN_TRANSIT)

        run_order(
            None,
            Namespace(order_command="set-status", order_id=42, status="In Transit"),
            container,
        )

        service.update_status.assert_called_once_with(42, "In Transit")
        assert json.loads(capsys.readouterr().out)["status"] == "In Transit"

    @pytest.mark.parametrize(
        "error",
        [
            OrderNotFound(42),
            InvalidTransition("Invalid transition 'Delivered' -> 'Pending'"),
            StorageFailure("Failed to load order 42: down"),
        ],
    )
    def test_service_errors_exit_nonzero(self, error, capsys):
        container, service = _container()
        service.update_status.side_effect = error

        with pytest.raises(SystemExit) as exc_info:
            run_order(
                None,
                Namespace(order_command="set-status", order_id=42, status="Pending"),
                container,
            )

        assert exc_info.value.code == 1
        assert str(error) in capsys.readouterr().err

    def test_missing_subcommand(self):
        with pytest.raises(SystemExit):
            run_order(None, Namespace(order_command=None), MagicMock())

    def test_builds_container_from_config(self, capsys):
        config = MagicMock()
        with (
            patch("mosdrones.db.init_database") as init_db,
            patch("mosdrones.container.Container") as container_cls,
        ):
            container_cls.return_value.order_service.list_active_orders.return_value = []
            run_order(config, Namespace(order_command="active"))

        init_db.assert_called_once_with(config.settings.database)
        container_cls.assert_called_once_with(config.settings, init_db.return_value)

    def test_initialisation_failure(self, capsys):
        with patch("mosdrones.db.init_database", side_effect=psycopg.OperationalError("refused")):
            with pytest.raises(SystemExit):
                run_order(MagicMock(), Namespace(order_command="active"))
        assert "initialisation failed" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# db
# ---------------------------------------------------------------------------


class TestRunDb:
    def test_status_ok(self, capsys):
        db = MagicMock()
        db.fetch_value.side_effect = [1, 3]
        with patch("mosdrones.db.init_database", return_value=db):
            run_db(MagicMock(), Namespace(db_command="status"))

        out = json.loads(capsys.readouterr().out)
        assert out == {"connected": True, "schema": "ok", "tables": "3/3"}

    def test_status_missing_schema(self, capsys):
        db = MagicMock()
        db.fetch_value.side_effect = [1, 1]
        with patch("mosdrones.db.init_database", return_value=db):
            with pytest.raises(SystemExit) as exc_info:
                run_db(MagicMock(), Namespace(db_command="status"))

        assert exc_info.value.code == 1
        assert json.loads(capsys.readouterr().out)["schema"] == "missing"

    def test_status_connection_failure(self, capsys):
        with patch(
            "mosdrones.db.init_database",
            side_effect=psycopg.OperationalError("connection refused"),
        ):
            with pytest.raises(SystemExit):
                run_db(MagicMock(), Namespace(db_command="status"))

        out = json.loads(capsys.readouterr().out)
        assert out["connected"] is False
        assert "connection refused" in out["error"]

    def test_unknown_subcommand(self):
        with pytest.raises(SystemExit):
            run_db(MagicMock(), Namespace(db_command=None))
