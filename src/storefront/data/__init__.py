"""Typed async data access for storefront.

SQL in, dataclasses out. Not an ORM.

Basic usage::

    from storefront.data import Database, SQLRepository

    db = Database("sqlite:///shop.db")
    products = SQLRepository(db, Product, "products")
    mug = await products.find_one_by({"slug": "mug"})

SQLite access runs on ``anyio`` worker threads.
"""

from storefront.data.database import Database
from storefront.data.errors import DataError, QueryError
from storefront.data.query import Query
from storefront.data.repository import InMemoryRepository, Repository, SQLRepository

__all__ = [
    "DataError",
    "Database",
    "InMemoryRepository",
    "Query",
    "QueryError",
    "Repository",
    "SQLRepository",
]
