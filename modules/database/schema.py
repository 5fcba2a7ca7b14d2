"""
Database Module - Schema
~~~~~~~~~~~~~~~~~~~~~~~~

Creates the users/products schema, its indexes, the summary view and the
sample rows.
"""

from typing import Tuple

from .base import DatabaseConnection, ExecutionError, ER_DUP_KEYNAME, error_code


CREATE_USERS_TABLE = """
    CREATE TABLE IF NOT EXISTS users (
        id INT AUTO_INCREMENT PRIMARY KEY,
        username VARCHAR(50) NOT NULL UNIQUE,
        email VARCHAR(100) NOT NULL UNIQUE,
        age INT,
        city VARCHAR(50),
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP
    )
"""

CREATE_PRODUCTS_TABLE = """
    CREATE TABLE IF NOT EXISTS products (
        id INT AUTO_INCREMENT PRIMARY KEY,
        name VARCHAR(100) NOT NULL,
        category VARCHAR(50),
        price DECIMAL(10,2),
        stock_quantity INT DEFAULT 0,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
"""

# (index name, table, column)
INDEXES: Tuple[Tuple[str, str, str], ...] = (
    ('idx_users_email', 'users', 'email'),
    ('idx_users_username', 'users', 'username'),
    ('idx_products_category', 'products', 'category'),
    ('idx_products_price', 'products', 'price'),
)

# Joins on u.id = p.id: products carry no owner column, so this pairs rows
# that merely share a numeric id.
CREATE_SUMMARY_VIEW = """
    CREATE OR REPLACE VIEW user_product_summary AS
    SELECT
        u.id AS user_id,
        u.username,
        u.email,
        u.city,
        COUNT(p.id) AS product_count,
        COALESCE(SUM(p.price), 0) AS total_product_value
    FROM users u
    LEFT JOIN products p ON u.id = p.id
    GROUP BY u.id, u.username, u.email, u.city
"""

INSERT_SAMPLE_USERS = """
    INSERT IGNORE INTO users (username, email, age, city) VALUES
    ('john_doe', 'john.doe@example.com', 30, 'New York'),
    ('jane_smith', 'jane.smith@example.com', 25, 'Los Angeles'),
    ('bob_wilson', 'bob.wilson@example.com', 35, 'Chicago'),
    ('alice_brown', 'alice.brown@example.com', 28, 'Houston'),
    ('charlie_davis', 'charlie.davis@example.com', 32, 'Phoenix')
"""

INSERT_SAMPLE_PRODUCTS = """
    INSERT IGNORE INTO products (name, category, price, stock_quantity) VALUES
    ('Laptop', 'Electronics', 999.99, 50),
    ('Smartphone', 'Electronics', 699.99, 100),
    ('Desk Chair', 'Furniture', 199.99, 25),
    ('Coffee Maker', 'Appliances', 89.99, 75),
    ('Headphones', 'Electronics', 149.99, 60)
"""

TABLE_EXISTS_QUERY = """
    SELECT COUNT(*) AS total
    FROM information_schema.tables
    WHERE table_schema = DATABASE() AND table_name = ?
"""

INDEX_EXISTS_QUERY = """
    SELECT COUNT(*) AS total
    FROM information_schema.statistics
    WHERE table_schema = DATABASE() AND table_name = ? AND index_name = ?
"""


class SchemaManager:
    """Creates and tears down the client schema on an open connection."""

    def __init__(self, db_connection: DatabaseConnection):
        self.db = db_connection
        self.logger = db_connection.logger

    def table_exists(self, table: str) -> bool:
        return bool(self.db.fetch_scalar(TABLE_EXISTS_QUERY, (table,)))

    def index_exists(self, table: str, index: str) -> bool:
        return bool(self.db.fetch_scalar(INDEX_EXISTS_QUERY, (table, index)))

    def is_database_empty(self) -> bool:
        """True when the users table is missing or holds no rows."""
        if not self.table_exists('users'):
            return True
        return not self.db.fetch_scalar("SELECT COUNT(*) AS total FROM users")

    def initialize_database(self) -> None:
        """Create tables, indexes and the view, then load the sample rows."""
        self.logger.info("Initializing MySQL database with schema, tables, and sample data")

        self.db.execute(CREATE_USERS_TABLE)
        self.logger.info("Users table created successfully")

        self.db.execute(CREATE_PRODUCTS_TABLE)
        self.logger.info("Products table created successfully")

        for index, table, column in INDEXES:
            self._create_index(index, table, column)
        self.logger.info("Indexes created successfully")

        self.db.execute(CREATE_SUMMARY_VIEW)
        self.logger.info("View created successfully")

        self.insert_sample_data()

        self.logger.info("Database initialization completed successfully")

    def _create_index(self, index: str, table: str, column: str) -> None:
        try:
            if self.index_exists(table, index):
                self.logger.debug(f"Index {index} already exists on {table}")
                return
            self.db.execute(f"CREATE INDEX {index} ON {table}({column})")
        except ExecutionError as e:
            if error_code(e) == ER_DUP_KEYNAME:
                self.logger.debug(f"Index {index} already exists: {e.__cause__}")
            else:
                self.logger.warning(f"Could not create index {index} on {table}: {e.__cause__}")

    def insert_sample_data(self) -> None:
        self.db.execute(INSERT_SAMPLE_USERS)
        # products has no unique column for INSERT IGNORE to key on
        if not self.db.fetch_scalar("SELECT COUNT(*) AS total FROM products"):
            self.db.execute(INSERT_SAMPLE_PRODUCTS)
        self.logger.info("Sample data inserted successfully")

    def reset_schema(self) -> None:
        """Drop the view and both tables."""
        self.db.execute("DROP VIEW IF EXISTS user_product_summary")
        self.db.execute("DROP TABLE IF EXISTS users")
        self.db.execute("DROP TABLE IF EXISTS products")
        self.logger.info("Schema dropped")
