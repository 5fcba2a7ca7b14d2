"""Shared fixtures."""

from __future__ import annotations

import os
import tempfile

import pytest

# Keep log files out of the working tree; read when logging_config is imported.
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="crudclient-logs-"))

from modules.database import Database, MySqlConfig  # noqa: E402
from modules.database.base import DatabaseConnection  # noqa: E402
from tests.fakes import FakeConnection, FakeDriver  # noqa: E402


@pytest.fixture
def config() -> MySqlConfig:
    return MySqlConfig("localhost", 3306, "testdb", "root", "secret")


@pytest.fixture
def driver(monkeypatch: pytest.MonkeyPatch) -> FakeDriver:
    fake = FakeDriver()
    monkeypatch.setattr("modules.database.base.mariadb.connect", fake.connect)
    return fake


@pytest.fixture
def fake_conn(driver: FakeDriver) -> FakeConnection:
    conn = FakeConnection()
    driver.queue(conn)
    return conn


@pytest.fixture
def connection(config: MySqlConfig, fake_conn: FakeConnection) -> DatabaseConnection:
    db_connection = DatabaseConnection(config)
    db_connection.connect()
    return db_connection


@pytest.fixture
def db(config: MySqlConfig, fake_conn: FakeConnection) -> Database:
    database = Database(config, auto_connect=True)
    yield database
    database.disconnect()
