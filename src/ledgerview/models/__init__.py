"""Value objects shared by the engine, controller and stores."""

from .category import Category
from .transaction import TRANSACTION_TYPES, Transaction, TransactionType, parse_amount, parse_date
from .user import User

__all__ = [
    "Category",
    "TRANSACTION_TYPES",
    "Transaction",
    "TransactionType",
    "User",
    "parse_amount",
    "parse_date",
]
