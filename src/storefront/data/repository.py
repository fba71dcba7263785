"""Entity repositories — the lookup capability the route provider consumes.

A repository answers two questions about one entity class:

- ``find_one_by(criteria)`` — the first entity whose attributes equal
  every criterion, or ``None``
- ``find_by(criteria, order_by=None, limit=None)`` — all such entities

``Repository`` is a runtime-checkable protocol; ``InMemoryRepository``
and ``SQLRepository`` are the two stock implementations.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from storefront.data._mapping import column_names
from storefront.data.query import Query
from storefront.errors import InvalidArgument

if TYPE_CHECKING:
    from storefront.data.database import Database


@runtime_checkable
class Repository[T](Protocol):
    """Lookup capability for one entity class."""

    async def find_one_by(self, criteria: Mapping[str, Any]) -> T | None: ...

    async def find_by(
        self,
        criteria: Mapping[str, Any],
        order_by: str | None = None,
        limit: int | None = None,
    ) -> list[T]: ...


def _split_order(order_by: str) -> tuple[str, bool]:
    """``"-name"`` -> ``("name", True)``; ``"name"`` -> ``("name", False)``."""
    if order_by.startswith("-"):
        return order_by[1:], True
    return order_by, False


class InMemoryRepository[T]:
    """List-backed repository. Insertion order is the natural order.

    Usage::

        products = InMemoryRepository([Product(1, "MUG", "Mug", "mug")])
        await products.find_one_by({"slug": "mug"})
    """

    __slots__ = ("_entities",)

    def __init__(self, entities: Iterable[T] = ()) -> None:
        self._entities: list[T] = list(entities)

    def add(self, entity: T) -> None:
        self._entities.append(entity)

    def __len__(self) -> int:
        return len(self._entities)

    def _matching(self, criteria: Mapping[str, Any]) -> list[T]:
        return [
            entity
            for entity in self._entities
            if all(getattr(entity, key) == value for key, value in criteria.items())
        ]

    async def find_one_by(self, criteria: Mapping[str, Any]) -> T | None:
        matches = self._matching(criteria)
        return matches[0] if matches else None

    async def find_by(
        self,
        criteria: Mapping[str, Any],
        order_by: str | None = None,
        limit: int | None = None,
    ) -> list[T]:
        matches = self._matching(criteria)
        if order_by:
            attribute, descending = _split_order(order_by)
            matches.sort(key=lambda entity: getattr(entity, attribute), reverse=descending)
        if limit is not None:
            matches = matches[:limit]
        return matches


class SQLRepository[T]:
    """Repository over one table, mapping rows to a dataclass.

    Criteria keys and ``order_by`` must name fields of *cls*; anything
    else raises ``InvalidArgument`` before a query is built.

    Usage::

        products = SQLRepository(db, Product, "products")
        await products.find_by({}, order_by="-id", limit=10)
    """

    __slots__ = ("_cls", "_columns", "_db", "_table")

    def __init__(self, db: Database, cls: type[T], table: str) -> None:
        self._db = db
        self._cls = cls
        self._table = table
        self._columns = column_names(cls)

    def _check_column(self, name: str) -> str:
        if name not in self._columns:
            msg = f"{self._cls.__name__} has no column {name!r}"
            raise InvalidArgument(msg)
        return name

    def _query(self, criteria: Mapping[str, Any]) -> Query[T]:
        query = Query(self._cls, self._table)
        for key, value in criteria.items():
            query = query.where_eq(self._check_column(key), value)
        return query

    async def find_one_by(self, criteria: Mapping[str, Any]) -> T | None:
        return await self._query(criteria).take(1).fetch_one(self._db)

    async def find_by(
        self,
        criteria: Mapping[str, Any],
        order_by: str | None = None,
        limit: int | None = None,
    ) -> list[T]:
        query = self._query(criteria)
        if order_by:
            column, descending = _split_order(order_by)
            query = query.order_by(
                f"{self._check_column(column)} {'DESC' if descending else 'ASC'}"
            )
        return await query.take(limit).fetch(self._db)

    async def count(self, criteria: Mapping[str, Any] | None = None) -> int:
        return await self._query(criteria or {}).count(self._db)
