"""Tests for schema creation and teardown."""

from __future__ import annotations

import logging

import mariadb
import pytest

from modules.database import ExecutionError, SchemaManager
from modules.database.base import DatabaseConnection
from modules.database.schema import INDEXES
from tests.fakes import FakeConnection, Result, db_error


def _count(total: int) -> Result:
    return Result(rows=[{"total": total}])


@pytest.fixture
def schema(connection: DatabaseConnection) -> SchemaManager:
    return SchemaManager(connection)


def test_database_empty_when_users_table_missing(schema: SchemaManager, fake_conn: FakeConnection) -> None:
    fake_conn.on("information_schema.tables", _count(0))

    assert schema.is_database_empty() is True
    assert fake_conn.statements[0][1] == ("users",)
    assert not any("FROM users" in sql for sql in fake_conn.sql())


def test_database_empty_when_users_table_has_no_rows(schema: SchemaManager, fake_conn: FakeConnection) -> None:
    fake_conn.on("information_schema.tables", _count(1)).on("FROM users", _count(0))

    assert schema.is_database_empty() is True


def test_database_not_empty_with_rows(schema: SchemaManager, fake_conn: FakeConnection) -> None:
    fake_conn.on("information_schema.tables", _count(1)).on("FROM users", _count(5))

    assert schema.is_database_empty() is False


def test_database_empty_lookup_failure_raises(schema: SchemaManager, fake_conn: FakeConnection) -> None:
    fake_conn.on("information_schema.tables", db_error(mariadb.OperationalError, "lost connection", 2013))

    with pytest.raises(ExecutionError):
        schema.is_database_empty()


def test_initialize_database_runs_ddl_in_order(schema: SchemaManager, fake_conn: FakeConnection) -> None:
    fake_conn.on("information_schema.statistics", _count(0))

    schema.initialize_database()

    statements = [sql for sql in fake_conn.sql() if not sql.startswith("SELECT")]
    assert statements[0].startswith("CREATE TABLE IF NOT EXISTS users (")
    assert statements[1].startswith("CREATE TABLE IF NOT EXISTS products (")
    assert statements[2:6] == [
        "CREATE INDEX idx_users_email ON users(email)",
        "CREATE INDEX idx_users_username ON users(username)",
        "CREATE INDEX idx_products_category ON products(category)",
        "CREATE INDEX idx_products_price ON products(price)",
    ]
    assert statements[6].startswith("CREATE OR REPLACE VIEW user_product_summary AS")
    assert "LEFT JOIN products p ON u.id = p.id" in statements[6]
    assert statements[7].startswith("INSERT IGNORE INTO users (username, email, age, city) VALUES")
    assert "('john_doe', 'john.doe@example.com', 30, 'New York')" in statements[7]
    assert statements[8].startswith("INSERT IGNORE INTO products (name, category, price, stock_quantity) VALUES")
    assert len(statements) == 9


def test_users_table_columns(schema: SchemaManager, fake_conn: FakeConnection) -> None:
    schema.initialize_database()

    users_ddl = fake_conn.sql()[0]
    assert "username VARCHAR(50) NOT NULL UNIQUE" in users_ddl
    assert "email VARCHAR(100) NOT NULL UNIQUE" in users_ddl
    assert "updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP" in users_ddl


def test_initialize_database_skips_existing_indexes(schema: SchemaManager, fake_conn: FakeConnection) -> None:
    existing = {"idx_users_email", "idx_products_price"}
    fake_conn.on("information_schema.statistics", lambda params: _count(int(params[1] in existing)))

    schema.initialize_database()

    created = [sql for sql in fake_conn.sql() if sql.startswith("CREATE INDEX")]
    assert created == [
        "CREATE INDEX idx_users_username ON users(username)",
        "CREATE INDEX idx_products_category ON products(category)",
    ]
    lookups = [params for sql, params in fake_conn.statements if "information_schema.statistics" in sql]
    assert lookups == [(table, index) for index, table, _ in INDEXES]


def test_index_failures_are_swallowed(
    schema: SchemaManager, fake_conn: FakeConnection, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.DEBUG, logger="crudclient.database")
    fake_conn.on("CREATE INDEX idx_users_email", db_error(mariadb.OperationalError, "Duplicate key name", 1061))
    fake_conn.on("CREATE INDEX idx_products_price", db_error(mariadb.OperationalError, "Key column missing", 1072))

    schema.initialize_database()

    assert any(sql.startswith("CREATE OR REPLACE VIEW") for sql in fake_conn.sql())
    assert "Index idx_users_email already exists" in caplog.text
    assert "Could not create index idx_products_price" in caplog.text


def test_table_creation_failure_propagates(schema: SchemaManager, fake_conn: FakeConnection) -> None:
    fake_conn.on("CREATE TABLE IF NOT EXISTS products", db_error(mariadb.OperationalError, "disk full", 1021))

    with pytest.raises(ExecutionError) as excinfo:
        schema.initialize_database()

    assert "products" in excinfo.value.sql
    assert not any(sql.startswith("INSERT") for sql in fake_conn.sql())


def test_reset_schema_drops_view_before_tables(schema: SchemaManager, fake_conn: FakeConnection) -> None:
    schema.reset_schema()

    assert fake_conn.sql() == [
        "DROP VIEW IF EXISTS user_product_summary",
        "DROP TABLE IF EXISTS users",
        "DROP TABLE IF EXISTS products",
    ]


def test_sample_products_only_seeded_into_empty_table(schema: SchemaManager, fake_conn: FakeConnection) -> None:
    fake_conn.on("FROM products", _count(5))

    schema.insert_sample_data()

    assert any(sql.startswith("INSERT IGNORE INTO users") for sql in fake_conn.sql())
    assert not any(sql.startswith("INSERT IGNORE INTO products") for sql in fake_conn.sql())
