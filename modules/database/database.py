"""
Database Module - Main Database Class
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Main database interface: connection lifecycle, schema setup and the user
CRUD operations on a single MySQL connection.
"""

from typing import Dict, List, Optional, Tuple

from modules.logging_config import get_logger, log_function_call
from .base import DatabaseConnection
from .config import MySqlConfig
from .models import InsertOutcome, User
from .repositories import ProductsRepository, UserProductSummaryRepository, UsersRepository
from .schema import SchemaManager

logger = get_logger('crudclient.database')


class Database:
    """
    Main database interface for the CRUD client.

    Example:
        config = MySqlConfig('localhost', 3306, 'testdb', 'root', 'secret')

        with Database(config) as db:
            if db.is_database_empty():
                db.initialize_database()
            db.insert_user('jdoe', 'jdoe@example.com', 30, 'Boston')
            print(db.find_users_by_city('Boston'))

    One instance holds one connection and must not be used from several
    threads at once.
    """

    def __init__(self, config: Optional[MySqlConfig] = None, auto_connect: bool = False):
        """
        Args:
            config: Connection settings; loaded from ``application.properties`` when omitted
            auto_connect: Whether to open the connection immediately
        """
        self.config = config if config is not None else MySqlConfig.from_properties()

        self.connection = DatabaseConnection(self.config)
        self.logger = self.connection.logger

        self.users = UsersRepository(self.connection)
        self.products = ProductsRepository(self.connection)
        self.summaries = UserProductSummaryRepository(self.connection)

        self.schema = SchemaManager(self.connection)

        if auto_connect:
            self.connect()

    def __enter__(self) -> 'Database':
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()

    # Connection lifecycle
    def connect(self) -> None:
        self.connection.connect()

    def disconnect(self) -> None:
        self.connection.disconnect()

    @property
    def is_connected(self) -> bool:
        return self.connection.is_connected

    def execute(self, sql: str, params: Tuple = ()) -> int:
        """Run a non-query statement; returns the affected row count."""
        return self.connection.execute(sql, params)

    def execute_query(self, sql: str, params: Tuple = ()):
        """Run a query and return the open cursor. Close it when done."""
        return self.connection.execute_query(sql, params)

    def health_check(self) -> bool:
        """Check if database connection is healthy."""
        return self.connection.health_check()

    def get_server_version(self) -> str:
        return str(self.connection.fetch_scalar("SELECT VERSION() AS version"))

    # Schema
    def is_database_empty(self) -> bool:
        return self.schema.is_database_empty()

    @log_function_call(logger)
    def initialize_database(self) -> None:
        self.schema.initialize_database()

    def reset_schema(self) -> None:
        self.schema.reset_schema()

    def get_stats(self) -> Dict[str, int]:
        """Get row counts per table."""
        return {
            'users': self.users.count(),
            'products': self.products.count(),
        }

    # User CRUD
    def find_all_users(self) -> List[str]:
        return self.users.find_all_users()

    def find_users_by_city(self, city: str) -> List[str]:
        return self.users.find_users_by_city(city)

    def find_user(self, username: str) -> Optional[User]:
        return self.users.get_by_username(username)

    @log_function_call(logger, log_args=True)
    def insert_user(self, username: str, email: str, age: Optional[int], city: Optional[str]) -> bool:
        return self.users.insert_user(username, email, age, city)

    def insert_user_outcome(self, username: str, email: str, age: Optional[int], city: Optional[str]) -> InsertOutcome:
        return self.users.insert_user_outcome(username, email, age, city)

    def update_user_email(self, username: str, new_email: str) -> bool:
        return self.users.update_user_email(username, new_email)

    def delete_user(self, username: str) -> bool:
        return self.users.delete_user(username)

    def get_user_count(self) -> int:
        return self.users.count()
