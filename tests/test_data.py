"""Tests for storefront.data — typed async database access."""

import logging
from dataclasses import dataclass

import pytest

from storefront.data import Database, DataError, QueryError
from storefront.data._mapping import column_names, map_row, map_rows
from storefront.models import Product

# -- Test models --


@dataclass(frozen=True, slots=True)
class Flag:
    id: int
    enabled: bool
    note: str | None = None


@dataclass(frozen=True, slots=True)
class Counter:
    total: int


# -- Fixtures --


@pytest.fixture
async def db(tmp_path):
    """Create a fresh SQLite database with a products table."""
    db = Database(f"sqlite:///{tmp_path / 'shop.db'}")
    await db.connect()
    await db.execute_script(
        "CREATE TABLE products ("
        "  id INTEGER PRIMARY KEY AUTOINCREMENT,"
        "  code TEXT NOT NULL UNIQUE,"
        "  name TEXT NOT NULL,"
        "  slug TEXT NOT NULL"
        ");"
    )
    yield db
    await db.disconnect()


@pytest.fixture
async def seeded_db(db):
    """Database with three products."""
    await db.execute_many(
        "INSERT INTO products (code, name, slug) VALUES (?, ?, ?)",
        [
            ("MUG", "Red mug", "red-mug"),
            ("CUP", "Blue cup", "blue-cup"),
            ("SHIRT", "Shirt", "shirt"),
        ],
    )
    return db


# =============================================================================
# URL parsing
# =============================================================================


class TestDatabaseURL:
    def test_sqlite_file(self, tmp_path) -> None:
        db = Database(f"sqlite:///{tmp_path / 'x.db'}")
        assert db.url.startswith("sqlite:///")
        assert not db.is_connected

    def test_memory(self) -> None:
        assert Database("sqlite:///:memory:").url == "sqlite:///:memory:"

    def test_unsupported_url(self) -> None:
        with pytest.raises(DataError, match="Unsupported database URL"):
            Database("postgresql://localhost/shop")


# =============================================================================
# Queries
# =============================================================================


class TestFetch:
    async def test_fetch_maps_dataclasses(self, seeded_db) -> None:
        products = await seeded_db.fetch(Product, "SELECT * FROM products ORDER BY id")
        assert products == [
            Product(1, "MUG", "Red mug", "red-mug"),
            Product(2, "CUP", "Blue cup", "blue-cup"),
            Product(3, "SHIRT", "Shirt", "shirt"),
        ]

    async def test_fetch_empty(self, db) -> None:
        assert await db.fetch(Product, "SELECT * FROM products") == []

    async def test_fetch_one(self, seeded_db) -> None:
        product = await seeded_db.fetch_one(
            Product, "SELECT * FROM products WHERE slug = ?", "blue-cup"
        )
        assert product == Product(2, "CUP", "Blue cup", "blue-cup")

    async def test_fetch_one_missing(self, seeded_db) -> None:
        assert (
            await seeded_db.fetch_one(Product, "SELECT * FROM products WHERE slug = ?", "nope")
            is None
        )

    async def test_fetch_val(self, seeded_db) -> None:
        assert await seeded_db.fetch_val("SELECT COUNT(*) FROM products") == 3

    async def test_fetch_val_no_row(self, db) -> None:
        assert await db.fetch_val("SELECT id FROM products") is None

    async def test_execute_returns_rowcount(self, seeded_db) -> None:
        changed = await seeded_db.execute("UPDATE products SET name = ? WHERE id > ?", "X", 1)
        assert changed == 2

    async def test_bad_sql_raises_query_error(self, db) -> None:
        with pytest.raises(QueryError):
            await db.fetch(Product, "SELECT * FROM missing_table")

    async def test_constraint_violation_raises_query_error(self, seeded_db) -> None:
        with pytest.raises(QueryError):
            await seeded_db.execute(
                "INSERT INTO products (code, name, slug) VALUES (?, ?, ?)", "MUG", "Dup", "dup"
            )

    async def test_connects_on_first_query(self, tmp_path) -> None:
        db = Database(f"sqlite:///{tmp_path / 'lazy.db'}")
        assert await db.fetch_val("SELECT 1") == 1
        assert db.is_connected
        await db.disconnect()
        assert not db.is_connected


class TestEcho:
    async def test_echo_logs_statements(self, tmp_path, caplog) -> None:
        db = Database(f"sqlite:///{tmp_path / 'echo.db'}", echo=True)
        with caplog.at_level(logging.INFO, logger="storefront.data"):
            await db.fetch_val("SELECT 42")
        await db.disconnect()
        assert "SELECT 42" in caplog.text

    async def test_no_echo_by_default(self, seeded_db, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="storefront.data"):
            await seeded_db.fetch_val("SELECT 1")
        assert caplog.text == ""


# =============================================================================
# Transactions
# =============================================================================


class TestTransaction:
    async def test_commit(self, seeded_db) -> None:
        async with seeded_db.transaction():
            await seeded_db.execute("DELETE FROM products WHERE code = ?", "MUG")
        assert await seeded_db.fetch_val("SELECT COUNT(*) FROM products") == 2

    async def test_rollback_on_error(self, seeded_db) -> None:
        with pytest.raises(RuntimeError):
            async with seeded_db.transaction():
                await seeded_db.execute("DELETE FROM products")
                raise RuntimeError("boom")
        assert await seeded_db.fetch_val("SELECT COUNT(*) FROM products") == 3

    async def test_nested_joins_outer(self, seeded_db) -> None:
        with pytest.raises(RuntimeError):
            async with seeded_db.transaction():
                async with seeded_db.transaction():
                    await seeded_db.execute("DELETE FROM products WHERE code = ?", "CUP")
                raise RuntimeError("boom")
        assert await seeded_db.fetch_val("SELECT COUNT(*) FROM products") == 3


class TestLifecycle:
    async def test_async_context_manager(self, tmp_path) -> None:
        async with Database(f"sqlite:///{tmp_path / 'ctx.db'}") as db:
            assert db.is_connected
        assert not db.is_connected

    async def test_connect_is_idempotent(self, db) -> None:
        await db.connect()
        assert db.is_connected


# =============================================================================
# Row mapping
# =============================================================================


class TestMapping:
    def test_map_row_ignores_extra_columns(self) -> None:
        row = {"total": 3, "extra": "ignored"}
        assert map_row(Counter, row) == Counter(3)

    def test_map_row_coerces_scalars(self) -> None:
        assert map_row(Flag, {"id": "7", "enabled": 1}) == Flag(7, True)

    def test_map_row_optional_field(self) -> None:
        assert map_row(Flag, {"id": 1, "enabled": 0, "note": None}) == Flag(1, False, None)

    def test_map_row_missing_field(self) -> None:
        with pytest.raises(TypeError):
            map_row(Flag, {"id": 1})

    def test_map_rows(self) -> None:
        rows = [{"total": 1}, {"total": "2"}]
        assert map_rows(Counter, rows) == [Counter(1), Counter(2)]

    def test_non_dataclass_rejected(self) -> None:
        with pytest.raises(TypeError, match="is not a dataclass"):
            map_row(dict, {})

    def test_column_names(self) -> None:
        assert column_names(Product) == frozenset({"id", "code", "name", "slug"})
