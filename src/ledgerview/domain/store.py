"""Transaction store protocol."""

from __future__ import annotations

from typing import Any, Mapping, Protocol

from ..models.category import Category
from ..models.transaction import Transaction


class TransactionStore(Protocol):
    """System of record for transactions and categories.

    Every call is a suspension point; implementations raise
    :class:`ledgerview.errors.StoreError` subclasses on failure.
    """

    async def list_transactions(self, params: Mapping[str, str]) -> list[Transaction]:
        """Return the transactions matching the query parameters."""
        ...

    async def create_transaction(self, payload: Mapping[str, Any]) -> Transaction:
        """Create a transaction from a wire payload."""
        ...

    async def update_transaction(
        self, transaction_id: str, changes: Mapping[str, Any]
    ) -> Transaction:
        """Apply partial changes to an existing transaction."""
        ...

    async def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction by ID."""
        ...

    async def list_categories(self) -> list[Category]:
        """List every category visible to the current user."""
        ...
