"""Fixtures for tests that talk to a real MySQL server.

Point ``MYSQL_INTEGRATION_PROPERTIES`` at a properties file (same keys as
``application.properties``) to enable them; otherwise they are skipped.
"""

from __future__ import annotations

import os
from typing import Iterator

import pytest

from modules.database import Database, DatabaseError, MySqlConfig

PROPERTIES_ENV_VAR = "MYSQL_INTEGRATION_PROPERTIES"


@pytest.fixture(scope="module")
def live_db() -> Iterator[Database]:
    path = os.getenv(PROPERTIES_ENV_VAR)
    if not path:
        pytest.skip(f"{PROPERTIES_ENV_VAR} not set")

    try:
        db = Database(MySqlConfig.from_properties(path))
        db.connect()
    except DatabaseError as e:
        pytest.skip(f"MySQL not available for testing: {e}")

    try:
        yield db
    finally:
        db.disconnect()


@pytest.fixture(scope="module")
def seeded_db(live_db: Database) -> Database:
    live_db.reset_schema()
    live_db.initialize_database()
    return live_db
