"""REST implementation of the transaction store."""

from __future__ import annotations

from typing import Any, Mapping

from ..errors import StoreError
from ..models.category import Category
from ..models.transaction import Transaction
from .http import ApiClient


def _as_list(body: Any, what: str) -> list[Mapping[str, Any]]:
    if body is None:
        return []
    if not isinstance(body, list):
        raise StoreError(f"Expected a list of {what} from the server")
    return [item for item in body if isinstance(item, Mapping)]


def _as_object(body: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(body, Mapping):
        raise StoreError(f"Expected a {what} object from the server")
    return body


class RestTransactionStore:
    """Transaction store backed by the ``/transactions`` and ``/categories`` API."""

    def __init__(self, api: ApiClient):
        self.api = api

    async def list_transactions(self, params: Mapping[str, str]) -> list[Transaction]:
        body = await self.api.arequest("GET", "/transactions", params=params)
        return [Transaction.from_payload(item) for item in _as_list(body, "transactions")]

    async def create_transaction(self, payload: Mapping[str, Any]) -> Transaction:
        body = await self.api.arequest("POST", "/transactions", json=dict(payload))
        return Transaction.from_payload(_as_object(body, "transaction"))

    async def update_transaction(
        self, transaction_id: str, changes: Mapping[str, Any]
    ) -> Transaction:
        body = await self.api.arequest("PUT", f"/transactions/{transaction_id}", json=dict(changes))
        return Transaction.from_payload(_as_object(body, "transaction"))

    async def delete_transaction(self, transaction_id: str) -> None:
        await self.api.arequest("DELETE", f"/transactions/{transaction_id}")

    async def list_categories(self) -> list[Category]:
        body = await self.api.arequest("GET", "/categories")
        return [Category.from_payload(item) for item in _as_list(body, "categories")]
