"""Typed async database access over SQLite.

SQL in, dataclasses out. Repositories build on top of this; the route
provider never talks to it directly.

Connection URL format::

    sqlite:///path/to/db.sqlite    # SQLite file
    sqlite:///:memory:             # In-memory SQLite

Concurrency:
    - A single connection per ``Database``, serialized by an ``anyio.Lock``
    - The transaction's connection is tracked per task in a ContextVar
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Any

import anyio

from storefront.data._mapping import map_row, map_rows
from storefront.data._sqlite import AsyncConnection
from storefront.data._sqlite import connect as sqlite_connect
from storefront.data.errors import DataError, QueryError

logger = logging.getLogger("storefront.data")

# Set inside transaction(); query methods reuse the transaction's
# connection instead of taking the lock again.
_current_conn: ContextVar[AsyncConnection] = ContextVar("storefront_db_conn")


class Database:
    """Typed async database access.

    Usage::

        db = Database("sqlite:///shop.db")

        products = await db.fetch(Product, "SELECT * FROM products")
        product = await db.fetch_one(Product, "SELECT * FROM products WHERE slug = ?", "mug")

        async with db.transaction():
            await db.execute("INSERT INTO products (code, name, slug) VALUES (?, ?, ?)", ...)
    """

    __slots__ = ("_async_lock", "_conn", "_echo", "_lock", "_path", "url")

    def __init__(self, url: str, /, *, echo: bool = False) -> None:
        self.url = url
        self._path = _parse_sqlite_path(url)
        self._echo = echo
        self._lock = threading.Lock()
        self._async_lock: anyio.Lock | None = None  # created on first use, inside a loop
        self._conn: AsyncConnection | None = None

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    # -- Connection management --

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[AsyncConnection]:
        """Yield the connection, holding the lock unless a transaction already does."""
        current = _current_conn.get(None)
        if current is not None:
            yield current
            return

        if self._conn is None:
            await self.connect()
        if self._async_lock is None:
            self._async_lock = anyio.Lock()
        async with self._async_lock:
            assert self._conn is not None
            yield self._conn

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Execute multiple statements atomically.

        Commits on clean exit, rolls back on exception. A nested
        ``transaction()`` joins the outer one.
        """
        if _current_conn.get(None) is not None:
            yield
            return

        async with self._connection() as conn:
            token = _current_conn.set(conn)
            try:
                conn.autocommit = False
                yield
                await conn.commit()
            except BaseException:
                await conn.rollback()
                raise
            finally:
                conn.autocommit = True
                _current_conn.reset(token)

    def _log_query(self, sql: str, params: Sequence[Any], elapsed: float) -> None:
        if self._echo:
            logger.info("%6.1fms  %s  params=%r", elapsed * 1000, sql, tuple(params))

    # -- Public query API --

    async def fetch[T](self, cls: type[T], sql: str, /, *params: Any) -> list[T]:
        """Execute a query and return all rows as dataclasses."""
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                cursor = await conn.execute(sql, params)
                rows = await cursor.fetchall()
            except Exception as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, params, time.perf_counter() - t0)
        return map_rows(cls, rows)

    async def fetch_one[T](self, cls: type[T], sql: str, /, *params: Any) -> T | None:
        """Execute a query and return the first row, or ``None``."""
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                cursor = await conn.execute(sql, params)
                row = await cursor.fetchone()
            except Exception as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, params, time.perf_counter() - t0)
        return None if row is None else map_row(cls, row)

    async def fetch_val(self, sql: str, /, *params: Any) -> Any:
        """Execute a query and return the first column of the first row."""
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                cursor = await conn.execute(sql, params)
                row = await cursor.fetchone()
            except Exception as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, params, time.perf_counter() - t0)
        if row is None:
            return None
        return next(iter(row.values()))

    async def execute(self, sql: str, /, *params: Any) -> int:
        """Execute a statement and return the number of rows affected."""
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                cursor = await conn.execute(sql, params)
                return cursor.rowcount
            except Exception as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, params, time.perf_counter() - t0)

    async def execute_many(self, sql: str, params_seq: Sequence[tuple[Any, ...]], /) -> int:
        """Execute a statement once per parameter tuple."""
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                cursor = await conn.executemany(sql, params_seq)
                return cursor.rowcount
            except Exception as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, (), time.perf_counter() - t0)

    async def execute_script(self, sql: str, /) -> None:
        """Execute several ``;``-separated statements, e.g. a schema."""
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                await conn.executescript(sql)
            except Exception as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, (), time.perf_counter() - t0)

    # -- Lifecycle --

    async def connect(self) -> None:
        """Open the connection. Called automatically on first query."""
        if self._conn is not None:
            return
        conn = await sqlite_connect(self._path)
        await conn.execute("PRAGMA foreign_keys=ON")
        with self._lock:
            if self._conn is None:
                self._conn = conn
                return
        await conn.close()

    async def disconnect(self) -> None:
        """Close the connection."""
        with self._lock:
            conn, self._conn = self._conn, None
        if conn is not None:
            await conn.close()

    async def __aenter__(self) -> Database:
        await self.connect()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.disconnect()


def _parse_sqlite_path(url: str) -> str:
    """Extract the file path from a sqlite:// URL."""
    for prefix in ("sqlite:///", "sqlite://"):
        if url.startswith(prefix):
            return url[len(prefix) :]
    msg = f"Unsupported database URL: {url!r}. Supported: sqlite:///path, sqlite:///:memory:"
    raise DataError(msg)
