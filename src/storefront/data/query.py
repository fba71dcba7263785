"""Immutable SELECT builder.

Accumulates clauses through chaining methods, compiles to a SQL string
plus a parameters tuple, and executes through ``Database``. Each method
returns a new frozen ``Query``; the receiver is never mutated::

    products = await (
        Query(Product, "products")
        .where_eq("slug", "red-mug")
        .order_by("id")
        .take(1)
        .fetch(db)
    )

``.sql`` and ``.params`` show exactly what will run.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from storefront.data.database import Database


@dataclass(frozen=True, slots=True)
class Query[T]:
    """Immutable SELECT query builder.

    Column names passed to ``where_eq`` and ``order_by`` are inserted
    verbatim — callers are responsible for checking them against a known
    set (``SQLRepository`` does).
    """

    _cls: type[T]
    _table: str
    _wheres: tuple[tuple[str, tuple[object, ...]], ...] = ()
    _order: str | None = None
    _limit: int | None = None
    _offset: int | None = None

    # ── Building ─────────────────────────────────────────────────────────

    def where(self, clause: str, /, *params: object) -> Query[T]:
        """Add a WHERE clause. Multiple calls are ANDed."""
        return replace(self, _wheres=(*self._wheres, (clause, params)))

    def where_if(self, condition: object, clause: str, /, *params: object) -> Query[T]:
        """Add a WHERE clause only if ``condition`` is truthy."""
        if not condition:
            return self
        return self.where(clause, *params)

    def where_eq(self, column: str, value: object) -> Query[T]:
        """Add ``column = ?``, or ``column IS NULL`` when *value* is ``None``."""
        if value is None:
            return self.where(f"{column} IS NULL")
        return self.where(f"{column} = ?", value)

    def order_by(self, clause: str) -> Query[T]:
        """Set ORDER BY. Replaces any previous ordering."""
        return replace(self, _order=clause)

    def take(self, n: int | None) -> Query[T]:
        """Set LIMIT. ``None`` removes it."""
        return replace(self, _limit=n)

    def skip(self, n: int) -> Query[T]:
        """Set OFFSET."""
        return replace(self, _offset=n)

    # ── Compilation ──────────────────────────────────────────────────────

    @property
    def sql(self) -> str:
        parts = [f"SELECT * FROM {self._table}"]
        if self._wheres:
            parts.append("WHERE " + " AND ".join(w[0] for w in self._wheres))
        if self._order:
            parts.append(f"ORDER BY {self._order}")
        if self._limit is not None:
            parts.append(f"LIMIT {self._limit}")
        if self._offset is not None:
            if self._limit is None:
                # SQLite requires LIMIT before OFFSET
                parts.append("LIMIT -1")
            parts.append(f"OFFSET {self._offset}")
        return " ".join(parts)

    @property
    def params(self) -> tuple[object, ...]:
        return tuple(p for _, params in self._wheres for p in params)

    # ── Execution ────────────────────────────────────────────────────────

    async def fetch(self, db: Database) -> list[T]:
        return await db.fetch(self._cls, self.sql, *self.params)

    async def fetch_one(self, db: Database) -> T | None:
        return await db.fetch_one(self._cls, self.sql, *self.params)

    async def count(self, db: Database) -> int:
        """COUNT(*) over the same WHERE clauses, ignoring order and paging."""
        sql = f"SELECT COUNT(*) FROM {self._table}"
        if self._wheres:
            sql += " WHERE " + " AND ".join(w[0] for w in self._wheres)
        return int(await db.fetch_val(sql, *self.params) or 0)
