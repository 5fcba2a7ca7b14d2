"""
Database Module - Row Models
~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Plain records built from result rows.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional


class InsertOutcome(Enum):
    """Result of an insert that tolerates unique-key conflicts."""

    INSERTED = 'inserted'
    DUPLICATE = 'duplicate'


@dataclass(frozen=True)
class User:
    username: str
    email: str
    age: Optional[int] = None
    city: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'User':
        return cls(
            username=row['username'],
            email=row['email'],
            age=row.get('age'),
            city=row.get('city'),
            id=row.get('id'),
            created_at=row.get('created_at'),
            updated_at=row.get('updated_at'),
        )

    def summary(self, include_city: bool = True) -> str:
        """One-line description; a missing age reads as 0."""
        text = f"User: {self.username}, Email: {self.email}, Age: {self.age or 0}"
        if include_city:
            text += f", City: {self.city}"
        return text


@dataclass(frozen=True)
class Product:
    name: str
    category: Optional[str] = None
    price: Optional[Decimal] = None
    stock_quantity: int = 0
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'Product':
        return cls(
            name=row['name'],
            category=row.get('category'),
            price=row.get('price'),
            stock_quantity=row.get('stock_quantity') or 0,
            id=row.get('id'),
            created_at=row.get('created_at'),
        )


@dataclass(frozen=True)
class UserProductSummary:
    """A row of the ``user_product_summary`` view."""

    user_id: int
    username: str
    email: str
    city: Optional[str]
    product_count: int
    total_product_value: Decimal

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'UserProductSummary':
        return cls(
            user_id=row['user_id'],
            username=row['username'],
            email=row['email'],
            city=row.get('city'),
            product_count=int(row['product_count']),
            total_product_value=Decimal(str(row['total_product_value'])),
        )
