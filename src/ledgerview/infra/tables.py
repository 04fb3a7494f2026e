"""SQLModel tables backing the local store."""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ..models.category import Category
from ..models.transaction import Transaction


def _new_id() -> str:
    return uuid.uuid4().hex


class CategoryRow(SQLModel, table=True):
    """Stored category."""

    __tablename__: ClassVar[str] = "category"

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=32)
    name: str = Field(index=True, nullable=False, max_length=64)
    color: Optional[str] = Field(default=None, max_length=16)
    icon: Optional[str] = Field(default=None, max_length=16)
    type: str = Field(default="expense", nullable=False, max_length=16)

    def to_domain(self) -> Category:
        return Category(id=self.id, name=self.name, color=self.color, icon=self.icon, type=self.type)


class TransactionRow(SQLModel, table=True):
    """Stored transaction; ``seq`` preserves insertion order within a day."""

    __tablename__: ClassVar[str] = "transaction"

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=32)
    seq: Optional[int] = Field(default=None, index=True)
    type: str = Field(nullable=False, index=True, max_length=16)
    amount: Decimal = Field(nullable=False, max_digits=14, decimal_places=2)
    description: Optional[str] = Field(default=None, max_length=255)
    category_id: Optional[str] = Field(default=None, foreign_key="category.id", index=True)
    transaction_date: date = Field(nullable=False, index=True)

    def to_domain(self, category: Optional[CategoryRow] = None) -> Transaction:
        return Transaction(
            id=self.id,
            amount=Decimal(self.amount),
            type=self.type,
            date=self.transaction_date,
            description=self.description,
            category_id=self.category_id,
            category=category.to_domain() if category is not None else None,
        )
