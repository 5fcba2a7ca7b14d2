"""
Database Module - Base Components
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Exceptions, the single-handle MySQL connection and the repository base class.
"""

import mariadb
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Tuple

from modules.logging_config import DatabaseLogger

if TYPE_CHECKING:
    from .config import MySqlConfig


# Server error codes the client reacts to
ER_BAD_DB_ERROR = 1049
ER_DUP_KEYNAME = 1061
ER_DUP_ENTRY = 1062


class DatabaseError(Exception):
    """Base exception for database operations."""
    pass


class ConfigurationError(DatabaseError):
    """A required connection setting is missing or malformed."""
    pass


class DatabaseConnectionError(DatabaseError):
    """Opening or closing the connection failed, or no connection is open."""
    pass


class ExecutionError(DatabaseError):
    """A statement failed on the server."""

    def __init__(self, sql: str, message: Optional[str] = None):
        self.sql = sql
        super().__init__(message or f"Error executing SQL: {' '.join(sql.split())}")


def error_code(error: BaseException) -> Optional[int]:
    """Return the server error number behind ``error``, following the cause chain."""
    while error is not None:
        errno = getattr(error, 'errno', None)
        if isinstance(errno, int) and errno > 0:
            return errno
        error = error.__cause__
    return None


class DatabaseConnection:
    """
    Owns exactly one MySQL connection at a time.

    The handle is opened by :meth:`connect` and released by
    :meth:`disconnect`. Instances are not thread-safe; share one only behind
    external synchronization.
    """

    def __init__(self, config: 'MySqlConfig'):
        self.config = config
        self.db_logger = DatabaseLogger()
        self.logger = self.db_logger.logger
        self._conn = None

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    def connect(self) -> None:
        """Open the connection, creating the database first if the server lacks it."""
        if self._conn is not None:
            self.logger.info("MySQL connection already established")
            return

        try:
            try:
                self._conn = mariadb.connect(**self.config.connect_kwargs())
            except mariadb.Error as e:
                if not _is_unknown_database(e):
                    raise
                self.logger.info(f"Database '{self.config.database}' does not exist, attempting to create it")
                self._create_database()
                self._conn = mariadb.connect(**self.config.connect_kwargs())
        except mariadb.Error as e:
            self.db_logger.log_error("connect", e)
            raise DatabaseConnectionError(f"Failed to connect to MySQL database: {e}") from e

        self.db_logger.log_connection("open")
        self.logger.info(f"Connected to MySQL database at: {self.config.jdbc_url}")

    def _create_database(self) -> None:
        server_conn = mariadb.connect(**self.config.connect_kwargs(include_database=False))
        try:
            cursor = server_conn.cursor()
            try:
                cursor.execute(f"CREATE DATABASE {quote_identifier(self.config.database)}")
            finally:
                cursor.close()
        finally:
            server_conn.close()
        self.logger.info(f"Database '{self.config.database}' created successfully")

    def disconnect(self) -> None:
        """Close the connection if one is open."""
        if self._conn is None:
            return

        conn, self._conn = self._conn, None
        try:
            conn.close()
        except mariadb.Error as e:
            self.db_logger.log_error("disconnect", e)
            raise DatabaseConnectionError(f"Error closing MySQL connection: {e}") from e

        self.db_logger.log_connection("closed")
        self.logger.info("Disconnected from MySQL database")

    def _require_connection(self):
        if self._conn is None:
            raise DatabaseConnectionError("Not connected to MySQL database; call connect() first")
        return self._conn

    @contextmanager
    def cursor(self, dictionary: bool = False) -> Iterator[Any]:
        """Context manager yielding a cursor on the open connection."""
        cursor = self._require_connection().cursor(dictionary=dictionary)
        try:
            yield cursor
        finally:
            cursor.close()

    def execute(self, sql: str, params: Tuple = ()) -> int:
        """
        Run a statement that returns no rows and commit it.

        Returns:
            Number of affected rows.

        Raises:
            ExecutionError: If the server rejects the statement.
        """
        conn = self._require_connection()
        self.db_logger.log_query(sql, params)
        try:
            with self.cursor() as cursor:
                cursor.execute(sql, params)
                affected = cursor.rowcount
            conn.commit()
        except mariadb.Error as e:
            self._rollback(conn)
            self.db_logger.log_error("execute", e)
            raise ExecutionError(sql) from e

        self.logger.debug(f"Statement executed successfully, affected rows: {affected}")
        return max(affected or 0, 0)

    def execute_query(self, sql: str, params: Tuple = (), dictionary: bool = False):
        """
        Run a query and return its open cursor.

        The caller owns the cursor and must close it.
        """
        self.db_logger.log_query(sql, params)
        cursor = self._require_connection().cursor(dictionary=dictionary)
        try:
            cursor.execute(sql, params)
        except mariadb.Error as e:
            cursor.close()
            self.db_logger.log_error("execute_query", e)
            raise ExecutionError(sql) from e
        return cursor

    def fetch_all(self, sql: str, params: Tuple = ()) -> List[Dict[str, Any]]:
        """Run a query and return every row as a dict."""
        cursor = self.execute_query(sql, params, dictionary=True)
        try:
            rows = cursor.fetchall()
        finally:
            cursor.close()
        self.logger.debug(f"Fetch all query executed, returned {len(rows)} rows")
        return rows

    def fetch_one(self, sql: str, params: Tuple = ()) -> Optional[Dict[str, Any]]:
        """Run a query and return its first row as a dict, or None."""
        cursor = self.execute_query(sql, params, dictionary=True)
        try:
            row = cursor.fetchone()
        finally:
            cursor.close()
        self.logger.debug(f"Fetch one query executed, result: {'found' if row else 'not found'}")
        return row

    def fetch_scalar(self, sql: str, params: Tuple = ()) -> Any:
        """Run a query and return the first column of its first row."""
        row = self.fetch_one(sql, params)
        if row:
            return next(iter(row.values()))
        return None

    def health_check(self) -> bool:
        """Check database connection health."""
        try:
            return self.fetch_scalar("SELECT 1") == 1
        except DatabaseError:
            return False

    def _rollback(self, conn) -> None:
        try:
            conn.rollback()
        except mariadb.Error as e:
            self.logger.warning(f"Rollback failed: {e}")


class BaseRepository(ABC):
    """Base class for all table repositories."""

    def __init__(self, db_connection: DatabaseConnection, table_name: str):
        self.db = db_connection
        self.table = table_name
        self.logger = db_connection.logger

    @abstractmethod
    def get_all(self) -> List[Any]:
        """Get all records."""
        pass

    def count(self) -> int:
        """Get the total count of records."""
        query = f"SELECT COUNT(*) AS total FROM {self.table}"
        return int(self.db.fetch_scalar(query) or 0)


def quote_identifier(name: str) -> str:
    """Quote a schema object name with backticks."""
    return '`' + name.replace('`', '``') + '`'


def _is_unknown_database(error: mariadb.Error) -> bool:
    return error_code(error) == ER_BAD_DB_ERROR or 'Unknown database' in str(error)
