"""Form data for creating or editing a transaction."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from ..errors import ValidationFailure
from ..models.transaction import TRANSACTION_TYPES, Transaction, TransactionType, parse_amount, parse_date


@dataclass
class TransactionDraft:
    """Editable transaction fields as entered by the user."""

    type: str = TransactionType.EXPENSE.value
    amount: Any = ""
    description: str = ""
    category_id: Optional[str] = None
    transaction_date: Any = field(default_factory=date.today)

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "TransactionDraft":
        """Prefill a draft for editing an existing transaction."""

        return cls(
            type=transaction.type,
            amount=transaction.amount,
            description=transaction.description or "",
            category_id=transaction.category_id,
            transaction_date=transaction.date,
        )

    def validate(self) -> tuple[Decimal, date]:
        """Check the draft and return the parsed amount and date."""

        if self.type not in TRANSACTION_TYPES:
            raise ValidationFailure("Choose either income or expense")
        amount = parse_amount(self.amount)
        if amount is None or amount <= 0:
            raise ValidationFailure("Amount must be greater than zero")
        try:
            when = parse_date(self.transaction_date)
        except ValueError as exc:
            raise ValidationFailure("Use YYYY-MM-DD for the date") from exc
        if when is None:
            raise ValidationFailure("Please select a date")
        return amount, when

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the store's create/update body."""

        amount, when = self.validate()
        description = (self.description or "").strip()
        category_id = (str(self.category_id).strip() if self.category_id is not None else "")
        return {
            "type": self.type,
            "amount": float(amount),
            "description": description or None,
            "category_id": category_id or None,
            "transaction_date": when.isoformat(),
        }
