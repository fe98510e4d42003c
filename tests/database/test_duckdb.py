"""Tests for the DuckDB accessor against an in-memory database."""

import pytest

from schemagen.database.builder import build_schema
from schemagen.database.duckdb import DuckDBAccessor
from schemagen.database.models import get_table

duckdb = pytest.importorskip("duckdb")


@pytest.fixture
def connection():
    conn = duckdb.connect(":memory:")
    conn.execute("""
        CREATE TABLE authors (
            id INTEGER PRIMARY KEY,
            email VARCHAR UNIQUE,
            bio TEXT
        )
    """)
    conn.execute("""
        CREATE TABLE books (
            id INTEGER PRIMARY KEY,
            author_id INTEGER NOT NULL REFERENCES authors(id),
            price DECIMAL(10,2) DEFAULT 0
        )
    """)
    conn.execute("""
        CREATE TABLE book_authors (
            book_id INTEGER REFERENCES books(id),
            author_id INTEGER REFERENCES authors(id),
            PRIMARY KEY (book_id, author_id)
        )
    """)
    yield conn
    conn.close()


@pytest.fixture
def accessor(connection):
    return DuckDBAccessor(connection=connection)


class TestDuckDBAccessor:
    """Test raw metadata reads."""

    def test_table_names(self, accessor):
        assert accessor.table_names() == ["authors", "book_authors", "books"]

    def test_columns(self, accessor):
        columns = {c.name: c for c in accessor.columns("authors")}

        assert list(columns) == ["id", "email", "bio"]
        assert columns["id"].nullable is False
        assert columns["email"].unique is True
        assert columns["bio"].nullable is True
        assert columns["bio"].unique is False

    def test_primary_key(self, accessor):
        assert accessor.primary_key_info("authors").columns == ["id"]
        assert sorted(accessor.primary_key_info("book_authors").columns) == ["author_id", "book_id"]

    def test_foreign_keys(self, accessor):
        fkeys = accessor.foreign_key_info("books")

        assert len(fkeys) == 1
        assert fkeys[0].column == "author_id"
        assert fkeys[0].foreign_table == "authors"
        assert fkeys[0].foreign_column == "id"

    def test_close_keeps_injected_connection(self, accessor, connection):
        """Test that an injected connection is not closed by the accessor."""
        accessor.close()

        assert connection.execute("SELECT 1").fetchone() == (1,)


class TestDuckDBBuild:
    """Test building the enriched schema from DuckDB."""

    def test_build(self, accessor):
        tables = build_schema(accessor)
        authors = get_table(tables, "authors")
        books = get_table(tables, "books")
        book_authors = get_table(tables, "book_authors")

        assert book_authors.is_join_table
        assert not books.is_join_table
        assert books.get_column("price").type == "Optional[decimal.Decimal]"
        assert books.fkeys[0].nullable is False
        assert books.fkeys[0].foreign_column_unique is False
        assert [(r.foreign_table, r.to_join_table) for r in authors.to_many_relationships] == [
            ("book_authors", True),
            ("books", False),
        ]
