"""
Database Module - Connection Settings
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Loads the MySQL connection settings from a key=value properties file and
builds the connection string and driver arguments from them.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from dotenv import dotenv_values
from mariadb.constants import CLIENT

from modules.logging_config import get_logger
from .base import ConfigurationError

logger = get_logger('crudclient.config')

PROPERTIES_FILE = 'application.properties'
PROPERTIES_ENV_VAR = 'APP_PROPERTIES'

REQUIRED_KEYS = (
    'mysql.host',
    'mysql.port',
    'mysql.database',
    'mysql.username',
    'mysql.password',
)

URL_OPTIONS = 'useSSL=false&allowPublicKeyRetrieval=true&serverTimezone=UTC'


@dataclass(frozen=True)
class MySqlConfig:
    """
    Immutable MySQL connection settings.

    Constructing it directly performs no validation; use
    :meth:`from_properties` or :meth:`from_mapping` to load checked settings.
    """

    host: str
    port: int
    database: str
    username: str
    password: str = field(repr=False)

    @classmethod
    def from_properties(cls, path: Optional[str] = None) -> 'MySqlConfig':
        """
        Load settings from a properties file.

        Args:
            path: File to read. Defaults to ``$APP_PROPERTIES`` or
                ``application.properties`` in the working directory.

        Values are taken literally; quote any value containing `` #``.

        Raises:
            ConfigurationError: If the file is missing or a setting is invalid.
        """
        path = path or os.getenv(PROPERTIES_ENV_VAR) or PROPERTIES_FILE
        if not os.path.isfile(path):
            raise ConfigurationError(f"Unable to find {path}")

        try:
            values = dotenv_values(path, interpolate=False)
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Error loading properties file: {path}") from e

        return cls.from_mapping(values, source=path)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Optional[str]], source: str = PROPERTIES_FILE) -> 'MySqlConfig':
        """Build a validated config from ``mysql.*`` keys."""
        settings = {key: _require(values, key, source) for key in REQUIRED_KEYS}

        try:
            port = int(settings['mysql.port'])
        except ValueError as e:
            raise ConfigurationError(
                f"Property 'mysql.port' must be an integer in {source}, got '{settings['mysql.port']}'"
            ) from e
        if not 1 <= port <= 65535:
            raise ConfigurationError(f"Property 'mysql.port' out of range in {source}: {port}")

        config = cls(
            host=settings['mysql.host'],
            port=port,
            database=settings['mysql.database'],
            username=settings['mysql.username'],
            password=settings['mysql.password'],
        )
        logger.info("MySQL configuration loaded successfully")
        return config

    @property
    def jdbc_url(self) -> str:
        """Canonical connection string for this database."""
        return f"jdbc:mysql://{self.host}:{self.port}/{self.database}?{URL_OPTIONS}"

    @property
    def server_url(self) -> str:
        """Connection string for the server without selecting a database."""
        return f"jdbc:mysql://{self.host}:{self.port}?{URL_OPTIONS}"

    def connect_kwargs(self, include_database: bool = True) -> Dict[str, Any]:
        """Keyword arguments for ``mariadb.connect``."""
        kwargs: Dict[str, Any] = {
            'host': self.host,
            'port': self.port,
            'user': self.username,
            'password': self.password,
            'ssl': False,
            'init_command': "SET time_zone = '+00:00'",
            'autocommit': True,
            # Report matched rows so an UPDATE to identical values still counts
            'client_flag': CLIENT.FOUND_ROWS,
        }
        if include_database:
            kwargs['database'] = self.database
        return kwargs


def _require(values: Mapping[str, Optional[str]], key: str, source: str) -> str:
    value = values.get(key)
    if value is None or not value.strip():
        raise ConfigurationError(f"Required property '{key}' is missing or empty in {source}")
    return value.strip()
