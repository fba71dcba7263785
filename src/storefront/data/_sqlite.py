"""Async SQLite wrapper using stdlib sqlite3 + anyio.

Runs every blocking sqlite3 call in a worker thread via
``anyio.to_thread``. The connection is opened with
``check_same_thread=False`` because consecutive calls may land on
different pool threads; ``Database`` serializes access with a lock.
"""

import sqlite3
from collections.abc import Callable, Sequence
from typing import Any

import anyio.to_thread


def _run_sync(func: Callable[..., Any], *args: Any) -> Any:
    return anyio.to_thread.run_sync(func, *args)


class AsyncCursor:
    """Async view of a ``sqlite3.Cursor``."""

    __slots__ = ("_cursor",)

    def __init__(self, cursor: sqlite3.Cursor) -> None:
        self._cursor = cursor

    @property
    def columns(self) -> list[str]:
        return [desc[0] for desc in self._cursor.description or ()]

    @property
    def rowcount(self) -> int:
        return self._cursor.rowcount

    async def fetchall(self) -> list[dict[str, Any]]:
        rows = await _run_sync(self._cursor.fetchall)
        columns = self.columns
        return [dict(zip(columns, row, strict=True)) for row in rows]

    async def fetchone(self) -> dict[str, Any] | None:
        row = await _run_sync(self._cursor.fetchone)
        if row is None:
            return None
        return dict(zip(self.columns, row, strict=True))


class AsyncConnection:
    """Async view of a ``sqlite3.Connection``."""

    __slots__ = ("_conn",)

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    @property
    def autocommit(self) -> bool:
        return bool(self._conn.autocommit)

    @autocommit.setter
    def autocommit(self, value: bool) -> None:
        self._conn.autocommit = value

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> AsyncCursor:
        cursor = await _run_sync(lambda: self._conn.execute(sql, params))
        return AsyncCursor(cursor)

    async def executemany(self, sql: str, params_seq: Sequence[Sequence[Any]]) -> AsyncCursor:
        cursor = await _run_sync(lambda: self._conn.executemany(sql, params_seq))
        return AsyncCursor(cursor)

    async def executescript(self, sql: str) -> None:
        """Run several statements at once (commits any pending transaction first)."""
        await _run_sync(lambda: self._conn.executescript(sql))

    async def commit(self) -> None:
        await _run_sync(self._conn.commit)

    async def rollback(self) -> None:
        await _run_sync(self._conn.rollback)

    async def close(self) -> None:
        await _run_sync(self._conn.close)


async def connect(path: str) -> AsyncConnection:
    """Open an autocommitting SQLite connection on a worker thread."""
    conn = await _run_sync(
        lambda: sqlite3.connect(path, autocommit=True, check_same_thread=False)
    )
    return AsyncConnection(conn)
