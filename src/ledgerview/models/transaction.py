"""Read-only transaction snapshots as returned by a store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping, Optional

from ..logging_config import get_logger
from .category import Category

logger = get_logger(__name__)

ZERO = Decimal("0")


class TransactionType(str, Enum):
    """Direction of a transaction; amounts themselves are never signed."""

    INCOME = "income"
    EXPENSE = "expense"


TRANSACTION_TYPES = frozenset(t.value for t in TransactionType)


def parse_amount(raw: Any) -> Optional[Decimal]:
    """Return ``raw`` as a finite Decimal, or None when it is not numeric."""

    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, Decimal):
        value = raw
    else:
        try:
            value = Decimal(str(raw).strip())
        except (InvalidOperation, ValueError):
            return None
    if not value.is_finite():
        return None
    return value


def parse_date(raw: Any) -> Optional[date]:
    """Accept a date, an ISO date string, or an ISO timestamp (date part kept)."""

    if raw is None or raw == "":
        return None
    if isinstance(raw, date):
        return raw
    text = str(raw).strip()
    return date.fromisoformat(text[:10])


@dataclass(frozen=True)
class Transaction:
    """A single recorded income or expense event.

    ``amount`` is non-negative; the sign is carried by ``type``. ``category``
    holds the category object when the store embedded it in the payload.
    """

    id: str
    amount: Decimal
    type: str
    date: Optional[date] = None
    description: Optional[str] = None
    category_id: Optional[str] = None
    category: Optional[Category] = None

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME.value

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE.value

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Transaction":
        """Build a transaction from a store JSON object.

        A non-numeric amount is kept as zero (logged) so that a single bad
        row cannot fail the whole listing.
        """

        amount = parse_amount(payload.get("amount"))
        if amount is None:
            logger.warning(
                "Malformed transaction amount treated as zero",
                extra={"transaction_id": payload.get("id"), "amount": payload.get("amount")},
            )
            amount = ZERO

        embedded = payload.get("categories") or payload.get("category")
        category = Category.from_payload(embedded) if isinstance(embedded, Mapping) else None

        category_id = payload.get("category_id")
        if category_id is None and category is not None and category.id:
            category_id = category.id

        raw_date = payload.get("transaction_date", payload.get("date"))
        try:
            when = parse_date(raw_date)
        except ValueError:
            logger.warning(
                "Malformed transaction date ignored",
                extra={"transaction_id": payload.get("id"), "date": raw_date},
            )
            when = None

        raw_id = payload.get("id")
        return cls(
            id="" if raw_id is None else str(raw_id),
            amount=amount,
            type=str(payload.get("type") or ""),
            date=when,
            description=payload.get("description"),
            category_id=None if category_id in (None, "") else str(category_id),
            category=category,
        )
