"""Helpers shared by the repository classes."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

import psycopg
from pypgkit import PyPgKitError

from mosdrones.core.errors import StorageFailure
from mosdrones.models.address import Address

if TYPE_CHECKING:
    from collections.abc import Iterator

ADDRESS_COLUMNS = ("street", "unit", "city", "state", "postal_code", "country")


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Re-raise driver and PyPGKit errors as :class:`StorageFailure`.

    *action* completes the sentence "Failed to ...".
    """
    try:
        yield
    except StorageFailure:
        raise
    except (psycopg.Error, PyPgKitError) as exc:
        msg = f"Failed to {action}: {exc}"
        raise StorageFailure(msg) from exc


def address_columns(alias: str, prefix: str) -> str:
    """Return a SELECT list exposing *alias*'s address columns as ``prefix_*``."""
    cols = [f"{alias}.id AS {prefix}id"]
    cols.extend(f"{alias}.{col} AS {prefix}{col}" for col in ADDRESS_COLUMNS)
    return ", ".join(cols)


def address_from_row(row: dict, prefix: str = "") -> Address:
    """Build an :class:`Address` from a (possibly prefixed) row."""
    return Address(
        id=row[f"{prefix}id"],
        street=row[f"{prefix}street"],
        unit=row.get(f"{prefix}unit"),
        city=row[f"{prefix}city"],
        state=row[f"{prefix}state"],
        postal_code=row[f"{prefix}postal_code"],
        country=row.get(f"{prefix}country") or "US",
    )
