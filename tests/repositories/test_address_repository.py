"""Unit tests for mosdrones.repositories.address.AddressRepository."""

from __future__ import annotations

from unittest.mock import MagicMock

import psycopg
import pytest

from mosdrones.core.errors import StorageFailure
from mosdrones.models.address import Address
from mosdrones.repositories.address import AddressRepository


def _row(**overrides):
    row = {
        "id": 3,
        "street": "200 Oak Ave",
        "unit": "Suite 5",
        "city": "Springfield",
        "state": "IL",
        "postal_code": "62704",
        "country": "US",
        "created_at": None,
    }
    row.update(overrides)
    return row


# ---------------------------------------------------------------------------
# Row mapping
# ---------------------------------------------------------------------------


class TestMapping:
    def test_row_to_entity(self):
        addr = AddressRepository(MagicMock())._row_to_entity(_row())
        assert addr == Address(
            street="200 Oak Ave",
            unit="Suite 5",
            city="Springfield",
            state="IL",
            postal_code="62704",
            country="US",
            id=3,
        )

    def test_missing_country_defaults_to_us(self):
        addr = AddressRepository(MagicMock())._row_to_entity(_row(country=None))
        assert addr.country == "US"

    def test_entity_to_row_omits_unset_id(self):
        row = AddressRepository(MagicMock())._entity_to_row(
            Address("1 Elm St", "Springfield", "IL", "62701"),
        )
        assert "id" not in row
        assert row["postal_code"] == "62701"


# ---------------------------------------------------------------------------
# get
# ---------------------------------------------------------------------------


class TestGet:
    def test_found(self):
        db = MagicMock()
        db.fetch_one.return_value = _row()
        assert AddressRepository(db).get(3).street == "200 Oak Ave"

    def test_missing(self):
        db = MagicMock()
        db.fetch_one.return_value = None
        assert AddressRepository(db).get(3) is None

    def test_failure(self):
        db = MagicMock()
        db.fetch_one.side_effect = psycopg.OperationalError("down")
        with pytest.raises(StorageFailure, match="load address 3"):
            AddressRepository(db).get(3)


# ---------------------------------------------------------------------------
# insert
# ---------------------------------------------------------------------------


class TestInsert:
    def test_insert_on_unit_of_work(self):
        uow = MagicMock()
        uow.insert.return_value = _row(id=40)
        repo = AddressRepository(MagicMock())

        new_id = repo.insert(Address("200 Oak Ave", "Springfield", "IL", "62704", id=3), uow=uow)

        assert new_id == 40
        table, row = uow.insert.call_args[0]
        assert table == "addresses"
        assert "id" not in row

    def test_insert_standalone(self):
        db = MagicMock()
        db.fetch_value.return_value = 41
        new_id = AddressRepository(db).insert(Address("1 Elm St", "Springfield", "IL", "62701"))

        assert new_id == 41
        sql, params = db.fetch_value.call_args[0]
        assert sql.startswith("INSERT INTO addresses")
        assert sql.endswith("RETURNING id")
        assert params == ("1 Elm St", None, "Springfield", "IL", "62701", "US")

    def test_insert_failure(self):
        uow = MagicMock()
        uow.insert.side_effect = psycopg.IntegrityError("bad")
        with pytest.raises(StorageFailure, match="insert address"):
            AddressRepository(MagicMock()).insert(
                Address("1 Elm St", "Springfield", "IL", "62701"),
                uow=uow,
            )
