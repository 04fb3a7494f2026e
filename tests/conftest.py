"""Pytest configuration and shared fixtures for LedgerView tests.

Provides transaction/category factories, an in-memory async store double for
controller tests, and a local SQLite store for integration tests.
"""

from __future__ import annotations

import asyncio
import itertools
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional

import pytest

from ledgerview.config import TestConfig
from ledgerview.errors import NotFound, StoreError
from ledgerview.infra.database import bootstrap_database
from ledgerview.infra.local_store import SQLModelTransactionStore
from ledgerview.models import Category, Transaction
from ledgerview.services.filters import criteria_from_params

# =============================================================================
# Factories
# =============================================================================

FOOD = Category(id="c-food", name="Food", color="#f97316", icon="🍔", type="expense")
RENT = Category(id="c-rent", name="Rent", color="#6366f1", icon="🏠", type="expense")
SALARY = Category(id="c-salary", name="Salary", color="#16a34a", icon="💼", type="income")

_ids = itertools.count(1)


def make_tx(
    amount: Any,
    type: str = "expense",
    *,
    category: Optional[Category] = None,
    category_id: Optional[str] = None,
    when: Optional[date] = None,
    description: Optional[str] = None,
    id: Optional[str] = None,
) -> Transaction:
    """Build a transaction snapshot with sensible defaults."""

    if not isinstance(amount, Decimal) and isinstance(amount, (int, float)):
        amount = Decimal(str(amount))
    return Transaction(
        id=id or f"t{next(_ids)}",
        amount=amount,
        type=type,
        date=when or date(2024, 1, 15),
        description=description,
        category_id=category_id or (category.id if category else None),
        category=category,
    )


@pytest.fixture
def transaction_factory():
    """Factory for building test transactions."""

    return make_tx


@pytest.fixture
def categories() -> list[Category]:
    return [FOOD, RENT, SALARY]


# =============================================================================
# Store doubles
# =============================================================================


class FakeStore:
    """In-memory async store that records every call.

    ``fail_next[op] = error`` makes the next call to ``op`` raise ``error``.
    With ``gated=True`` each listing waits on a future the test resolves.
    """

    def __init__(self, transactions=(), categories=(), *, gated: bool = False):
        self.rows: dict[str, Transaction] = {t.id: t for t in transactions}
        self.category_rows = list(categories)
        self.calls: list[tuple[str, Any]] = []
        self.fail_next: dict[str, StoreError] = {}
        self.gated = gated
        self.pending: list[asyncio.Future] = []
        self._next_id = itertools.count(1000)

    def _maybe_fail(self, op: str) -> None:
        error = self.fail_next.pop(op, None)
        if error is not None:
            raise error

    def count(self, op: str) -> int:
        return sum(1 for name, _ in self.calls if name == op)

    def _matches(self, tx: Transaction, params: Mapping[str, str]) -> bool:
        criteria = criteria_from_params(dict(params))
        if criteria.type != "all" and tx.type != criteria.type:
            return False
        if criteria.category_id != "all" and tx.category_id != criteria.category_id:
            return False
        if criteria.start_date and (tx.date is None or tx.date < criteria.start_date):
            return False
        if criteria.end_date and (tx.date is None or tx.date > criteria.end_date):
            return False
        return True

    async def list_transactions(self, params):
        self.calls.append(("list", dict(params)))
        if self.gated:
            future = asyncio.get_running_loop().create_future()
            self.pending.append(future)
            return await future
        self._maybe_fail("list")
        return [t for t in self.rows.values() if self._matches(t, params)]

    async def create_transaction(self, payload):
        self.calls.append(("create", dict(payload)))
        self._maybe_fail("create")
        tx = make_tx(
            Decimal(str(payload["amount"])),
            payload["type"],
            category_id=payload.get("category_id"),
            when=date.fromisoformat(payload["transaction_date"]),
            description=payload.get("description"),
            id=f"t{next(self._next_id)}",
        )
        self.rows[tx.id] = tx
        return tx

    async def update_transaction(self, transaction_id, changes):
        self.calls.append(("update", (transaction_id, dict(changes))))
        self._maybe_fail("update")
        if transaction_id not in self.rows:
            raise NotFound("Transaction not found", status=404)
        tx = make_tx(
            Decimal(str(changes["amount"])),
            changes["type"],
            category_id=changes.get("category_id"),
            when=date.fromisoformat(changes["transaction_date"]),
            description=changes.get("description"),
            id=transaction_id,
        )
        self.rows[transaction_id] = tx
        return tx

    async def delete_transaction(self, transaction_id):
        self.calls.append(("delete", transaction_id))
        self._maybe_fail("delete")
        if transaction_id not in self.rows:
            raise NotFound(None, status=404)
        del self.rows[transaction_id]

    async def list_categories(self):
        self.calls.append(("categories", None))
        self._maybe_fail("categories")
        return list(self.category_rows)


@pytest.fixture
def fake_store(categories) -> FakeStore:
    return FakeStore(
        [
            make_tx(100, "income", category=SALARY, id="t-salary", when=date(2024, 1, 1)),
            make_tx(40, "expense", category_id=FOOD.id, id="t-lunch", when=date(2024, 1, 5)),
            make_tx(10, "expense", category_id=FOOD.id, id="t-snack", when=date(2024, 1, 6)),
        ],
        categories,
    )


@pytest.fixture
def notifications() -> list:
    return []


# =============================================================================
# Local SQLite store
# =============================================================================


@pytest.fixture
def test_config(tmp_path) -> TestConfig:
    return TestConfig(data_dir=tmp_path / "instance")


@pytest.fixture
def local_store(test_config) -> SQLModelTransactionStore:
    """Local store backed by a fresh in-memory database."""

    engine, session_factory = bootstrap_database(test_config)
    yield SQLModelTransactionStore(session_factory)
    engine.dispose()


def run(coro):
    """Drive a coroutine to completion from a synchronous test."""

    return asyncio.run(coro)
