"""Unit of Work: atomic multi-table writes on a single transaction.

PyPGKit's :class:`BaseRepository` CRUD methods each acquire their own
connection from the pool, so multi-table writes are not atomic.  This
wrapper provides explicit transaction control for operations that span
multiple tables, such as creating an order together with its address
rows.

Usage::

    from mosdrones.db import UnitOfWork

    with UnitOfWork(db) as uow:
        address_row = uow.insert("addresses", {...})
        order_row = uow.insert_if_absent("orders", {...}, conflict_target="package_id")
        # COMMIT on clean exit; ROLLBACK on exception
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Self

from psycopg.rows import dict_row

if TYPE_CHECKING:
    from pypgkit import Database


class UnitOfWork:
    """Transaction-scoped helper for multi-table atomic writes.

    Wraps :meth:`Database.transaction` and exposes low-level SQL helpers
    that all operate on the **same connection** within a single
    transaction.  Table and column names are interpolated as given and
    must come from code, never from user input.
    """

    def __init__(self, database: Database) -> None:
        self._db = database
        self._conn = None

    # -- context manager -----------------------------------------------------

    def __enter__(self) -> Self:
        self._tx = self._db.transaction()
        self._conn = self._tx.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        try:
            self._tx.__exit__(exc_type, exc_val, exc_tb)
        finally:
            self._conn = None

    # -- helpers -------------------------------------------------------------

    def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """INSERT a single row and return the full row via RETURNING *.

        Parameters
        ----------
        table:
            Table name (unquoted).
        row:
            Column-name → value mapping.

        Returns
        -------
        dict
            The inserted row as returned by the database.

        """
        columns = list(row.keys())
        placeholders = ", ".join(["%s"] * len(columns))
        col_list = ", ".join(columns)
        sql = f"INSERT INTO {table} ({col_list}) VALUES ({placeholders}) RETURNING *"
        assert self._conn is not None, "UnitOfWork must be used as a context manager"
        with self._conn.cursor(row_factory=dict_row) as cur:
            cur.execute(sql, list(row.values()))
            return cur.fetchone()

    def insert_if_absent(
        self,
        table: str,
        row: dict[str, Any],
        conflict_target: str,
    ) -> dict[str, Any] | None:
        """INSERT a row unless it violates the unique *conflict_target*.

        Uses ``ON CONFLICT (...) DO NOTHING`` so a collision leaves the
        surrounding transaction usable.

        Returns
        -------
        dict or None
            The inserted row, or ``None`` if a row with the same
            *conflict_target* value already exists.

        """
        columns = list(row.keys())
        placeholders = ", ".join(["%s"] * len(columns))
        col_list = ", ".join(columns)
        sql = (
            f"INSERT INTO {table} ({col_list}) VALUES ({placeholders}) "
            f"ON CONFLICT ({conflict_target}) DO NOTHING "
            f"RETURNING *"
        )
        assert self._conn is not None, "UnitOfWork must be used as a context manager"
        with self._conn.cursor(row_factory=dict_row) as cur:
            cur.execute(sql, list(row.values()))
            return cur.fetchone()

    def update_where(
        self,
        table: str,
        set_values: dict[str, Any],
        where: dict[str, Any],
    ) -> dict[str, Any] | None:
        """UPDATE rows matching *where* and return the first via RETURNING *.

        Parameters
        ----------
        table:
            Table name.
        set_values:
            Column → new-value pairs for the SET clause.
        where:
            Column → value pairs for the WHERE clause (AND-joined).

        Returns
        -------
        dict or None
            The updated row, or ``None`` if no row matched.

        """
        set_parts = [f"{col} = %s" for col in set_values]
        where_parts = [f"{col} = %s" for col in where]
        sql = (
            f"UPDATE {table} "
            f"SET {', '.join(set_parts)} "
            f"WHERE {' AND '.join(where_parts)} "
            f"RETURNING *"
        )
        params = list(set_values.values()) + list(where.values())
        assert self._conn is not None, "UnitOfWork must be used as a context manager"
        with self._conn.cursor(row_factory=dict_row) as cur:
            cur.execute(sql, params)
            return cur.fetchone()

    def execute(self, sql: str, params: tuple | list | None = None) -> int:
        """Execute arbitrary SQL and return the rowcount."""
        assert self._conn is not None, "UnitOfWork must be used as a context manager"
        with self._conn.cursor() as cur:
            cur.execute(sql, params)
            return cur.rowcount

    def fetch_one(
        self,
        sql: str,
        params: tuple | list | None = None,
    ) -> dict[str, Any] | None:
        """Execute a query and return the first row as a dict, or None."""
        assert self._conn is not None, "UnitOfWork must be used as a context manager"
        with self._conn.cursor(row_factory=dict_row) as cur:
            cur.execute(sql, params)
            return cur.fetchone()

    def fetch_all(
        self,
        sql: str,
        params: tuple | list | None = None,
    ) -> list[dict[str, Any]]:
        """Execute a query and return all rows as dicts."""
        assert self._conn is not None, "UnitOfWork must be used as a context manager"
        with self._conn.cursor(row_factory=dict_row) as cur:
            cur.execute(sql, params)
            return cur.fetchall()
