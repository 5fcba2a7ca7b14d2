"""
Database Repositories
~~~~~~~~~~~~~~~~~~~~~

Repository classes for the users and products tables and the summary view.
"""

from typing import List, Optional

from .base import BaseRepository, DatabaseConnection, ExecutionError, ER_DUP_ENTRY, error_code
from .models import InsertOutcome, Product, User, UserProductSummary


class UsersRepository(BaseRepository):
    """Repository for users table."""

    COLUMNS = "id, username, email, age, city, created_at, updated_at"

    def __init__(self, db_connection: DatabaseConnection):
        super().__init__(db_connection, 'users')

    def get_all(self) -> List[User]:
        """Get all users ordered by username."""
        query = f"SELECT {self.COLUMNS} FROM {self.table} ORDER BY username"
        return [User.from_row(row) for row in self.db.fetch_all(query)]

    def get_by_username(self, username: str) -> Optional[User]:
        """Get a user by username."""
        query = f"SELECT {self.COLUMNS} FROM {self.table} WHERE username = ?"
        row = self.db.fetch_one(query, (username,))
        return User.from_row(row) if row else None

    def find_all_users(self) -> List[str]:
        """Summaries of every user, ordered by username."""
        query = f"SELECT username, email, age, city FROM {self.table} ORDER BY username"
        try:
            rows = self.db.fetch_all(query)
        except ExecutionError as e:
            self.logger.error(f"Error retrieving users: {e.__cause__}")
            raise
        return [User.from_row(row).summary() for row in rows]

    def find_users_by_city(self, city: str) -> List[str]:
        """Summaries (without city) of the users living in ``city``."""
        query = f"SELECT username, email, age FROM {self.table} WHERE city = ? ORDER BY username"
        try:
            rows = self.db.fetch_all(query, (city,))
        except ExecutionError as e:
            self.logger.error(f"Error finding users by city: {e.__cause__}")
            raise
        return [User.from_row(row).summary(include_city=False) for row in rows]

    def insert_user_outcome(self, username: str, email: str, age: Optional[int], city: Optional[str]) -> InsertOutcome:
        """
        Insert a user, reporting a unique-key conflict instead of raising.

        Raises:
            ExecutionError: For any failure other than a duplicate username or email.
        """
        query = f"INSERT INTO {self.table} (username, email, age, city) VALUES (?, ?, ?, ?)"
        try:
            self.db.execute(query, (username, email, age, city))
        except ExecutionError as e:
            if error_code(e) == ER_DUP_ENTRY:
                self.logger.info(f"User not inserted, username or email already taken: {username}")
                return InsertOutcome.DUPLICATE
            self.logger.error(f"Error inserting user: {e.__cause__}")
            raise
        self.logger.info(f"User inserted successfully: {username}")
        return InsertOutcome.INSERTED

    def insert_user(self, username: str, email: str, age: Optional[int], city: Optional[str]) -> bool:
        """Insert a user; False when the username or email already exists."""
        return self.insert_user_outcome(username, email, age, city) is InsertOutcome.INSERTED

    def update_user_email(self, username: str, new_email: str) -> bool:
        """Change a user's email; False when no such user exists."""
        query = f"UPDATE {self.table} SET email = ?, updated_at = CURRENT_TIMESTAMP WHERE username = ?"
        try:
            affected = self.db.execute(query, (new_email, username))
        except ExecutionError as e:
            self.logger.error(f"Error updating user email: {e.__cause__}")
            raise
        if affected:
            self.logger.info(f"User email updated successfully: {username} -> {new_email}")
        return affected > 0

    def delete_user(self, username: str) -> bool:
        """Delete a user by username; False when no such user exists."""
        query = f"DELETE FROM {self.table} WHERE username = ?"
        try:
            affected = self.db.execute(query, (username,))
        except ExecutionError as e:
            self.logger.error(f"Error deleting user: {e.__cause__}")
            raise
        if affected:
            self.logger.info(f"User deleted successfully: {username}")
        return affected > 0


class ProductsRepository(BaseRepository):
    """Repository for products table."""

    COLUMNS = "id, name, category, price, stock_quantity, created_at"

    def __init__(self, db_connection: DatabaseConnection):
        super().__init__(db_connection, 'products')

    def get_all(self) -> List[Product]:
        query = f"SELECT {self.COLUMNS} FROM {self.table} ORDER BY id"
        return [Product.from_row(row) for row in self.db.fetch_all(query)]

    def find_by_category(self, category: str) -> List[Product]:
        """Products in a category, cheapest first."""
        query = f"SELECT {self.COLUMNS} FROM {self.table} WHERE category = ? ORDER BY price, id"
        return [Product.from_row(row) for row in self.db.fetch_all(query, (category,))]


class UserProductSummaryRepository(BaseRepository):
    """Read access to the user_product_summary view."""

    def __init__(self, db_connection: DatabaseConnection):
        super().__init__(db_connection, 'user_product_summary')

    def get_all(self) -> List[UserProductSummary]:
        query = (
            f"SELECT user_id, username, email, city, product_count, total_product_value "
            f"FROM {self.table} ORDER BY user_id"
        )
        return [UserProductSummary.from_row(row) for row in self.db.fetch_all(query)]
