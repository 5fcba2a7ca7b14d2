"""
Database Module for the CRUD client
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Single-connection MySQL client: settings, schema setup and user CRUD.
"""

__title__ = 'crudclient database'
__license__ = 'None'
__version__ = '1.0.0'

from .database import Database
from .config import MySqlConfig
from .base import (
    ConfigurationError, DatabaseConnection, DatabaseConnectionError,
    DatabaseError, ExecutionError
)
from .models import InsertOutcome, Product, User, UserProductSummary
from .repositories import ProductsRepository, UserProductSummaryRepository, UsersRepository
from .schema import SchemaManager

__all__ = [
    'Database',
    'MySqlConfig',
    'DatabaseError',
    'ConfigurationError',
    'DatabaseConnectionError',
    'ExecutionError',
    'DatabaseConnection',
    'SchemaManager',
    'UsersRepository',
    'ProductsRepository',
    'UserProductSummaryRepository',
    'InsertOutcome',
    'User',
    'Product',
    'UserProductSummary',
]
