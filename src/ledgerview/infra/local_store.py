"""SQLModel/SQLite implementation of the transaction store."""

from __future__ import annotations

import asyncio
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional

from sqlalchemy import func
from sqlmodel import Session, select

from ..errors import NotFound, ValidationFailure
from ..logging_config import get_logger
from ..models.category import Category
from ..models.transaction import TRANSACTION_TYPES, Transaction, parse_amount, parse_date
from ..services.filters import ALL, criteria_from_params
from .database import SessionFactory
from .tables import CategoryRow, TransactionRow

logger = get_logger(__name__)

_MUTABLE_FIELDS = {"type", "amount", "description", "category_id", "transaction_date"}

DEFAULT_CATEGORIES: list[tuple[str, str, str, str]] = [
    ("Salary", "income", "#16a34a", "💼"),
    ("Freelance", "income", "#22c55e", "🧑‍💻"),
    ("Groceries", "expense", "#f97316", "🛒"),
    ("Dining Out", "expense", "#ef4444", "🍽️"),
    ("Rent", "expense", "#6366f1", "🏠"),
    ("Utilities", "expense", "#0ea5e9", "💡"),
    ("Transportation", "expense", "#eab308", "🚌"),
    ("Entertainment", "expense", "#a855f7", "🎬"),
]


class SQLModelTransactionStore:
    """Offline store keeping transactions in a local SQLite database."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    # -- helpers -----------------------------------------------------------

    def _category_map(self, session: Session) -> dict[str, CategoryRow]:
        return {row.id: row for row in session.exec(select(CategoryRow)).all()}

    def _clean_amount(self, raw: Any) -> Decimal:
        amount = parse_amount(raw)
        if amount is None or amount <= 0:
            raise ValidationFailure("Amount must be greater than zero")
        return amount

    def _clean_type(self, raw: Any) -> str:
        value = str(raw or "")
        if value not in TRANSACTION_TYPES:
            raise ValidationFailure("Type must be income or expense")
        return value

    def _clean_date(self, raw: Any) -> date:
        try:
            value = parse_date(raw)
        except ValueError as exc:
            raise ValidationFailure("transaction_date must be YYYY-MM-DD") from exc
        if value is None:
            raise ValidationFailure("transaction_date is required")
        return value

    def _clean_category(self, session: Session, raw: Any) -> Optional[str]:
        if raw in (None, ""):
            return None
        category_id = str(raw)
        if session.get(CategoryRow, category_id) is None:
            raise ValidationFailure(f"Unknown category: {category_id}")
        return category_id

    def _apply(self, session: Session, row: TransactionRow, changes: Mapping[str, Any]) -> None:
        unknown = set(changes) - _MUTABLE_FIELDS - {"id"}
        if unknown:
            raise ValidationFailure(f"Unknown transaction fields: {', '.join(sorted(unknown))}")
        if "type" in changes:
            row.type = self._clean_type(changes["type"])
        if "amount" in changes:
            row.amount = self._clean_amount(changes["amount"])
        if "description" in changes:
            description = (changes["description"] or "").strip()
            row.description = description or None
        if "category_id" in changes:
            row.category_id = self._clean_category(session, changes["category_id"])
        if "transaction_date" in changes:
            row.transaction_date = self._clean_date(changes["transaction_date"])

    def _to_domain(self, session: Session, row: TransactionRow) -> Transaction:
        category = session.get(CategoryRow, row.category_id) if row.category_id else None
        return row.to_domain(category)

    # -- blocking bodies, run on a worker thread ------------------------------

    def _list_transactions(self, params: Mapping[str, str]) -> list[Transaction]:
        criteria = criteria_from_params(dict(params))
        with self.session_factory() as session:
            statement = select(TransactionRow)
            if criteria.type != ALL:
                statement = statement.where(TransactionRow.type == criteria.type)
            if criteria.category_id != ALL:
                statement = statement.where(TransactionRow.category_id == criteria.category_id)
            if criteria.start_date:
                statement = statement.where(TransactionRow.transaction_date >= criteria.start_date)
            if criteria.end_date:
                statement = statement.where(TransactionRow.transaction_date <= criteria.end_date)
            statement = statement.order_by(
                TransactionRow.transaction_date.desc(),  # type: ignore
                TransactionRow.seq,
            )
            rows = list(session.exec(statement).all())
            categories = self._category_map(session)
            return [row.to_domain(categories.get(row.category_id or "")) for row in rows]

    def _create_transaction(self, payload: Mapping[str, Any]) -> Transaction:
        with self.session_factory() as session:
            row = TransactionRow(
                type=self._clean_type(payload.get("type")),
                amount=self._clean_amount(payload.get("amount")),
                transaction_date=self._clean_date(payload.get("transaction_date")),
            )
            self._apply(
                session,
                row,
                {k: v for k, v in payload.items() if k in ("description", "category_id")},
            )
            current = session.exec(select(func.max(TransactionRow.seq))).one()
            row.seq = (current or 0) + 1
            session.add(row)
            session.commit()
            session.refresh(row)
            logger.info("Transaction created", extra={"transaction_id": row.id})
            return self._to_domain(session, row)

    def _update_transaction(
        self, transaction_id: str, changes: Mapping[str, Any]
    ) -> Transaction:
        with self.session_factory() as session:
            row = session.get(TransactionRow, transaction_id)
            if row is None:
                raise NotFound(f"Transaction {transaction_id} not found")
            self._apply(session, row, changes)
            session.add(row)
            session.commit()
            session.refresh(row)
            logger.info("Transaction updated", extra={"transaction_id": row.id})
            return self._to_domain(session, row)

    def _delete_transaction(self, transaction_id: str) -> None:
        with self.session_factory() as session:
            row = session.get(TransactionRow, transaction_id)
            if row is None:
                raise NotFound(f"Transaction {transaction_id} not found")
            session.delete(row)
            session.commit()
            logger.info("Transaction deleted", extra={"transaction_id": transaction_id})

    def _list_categories(self) -> list[Category]:
        with self.session_factory() as session:
            rows = session.exec(select(CategoryRow).order_by(CategoryRow.name)).all()
            return [row.to_domain() for row in rows]

    # -- TransactionStore --------------------------------------------------

    async def list_transactions(self, params: Mapping[str, str]) -> list[Transaction]:
        return await asyncio.to_thread(self._list_transactions, params)

    async def create_transaction(self, payload: Mapping[str, Any]) -> Transaction:
        return await asyncio.to_thread(self._create_transaction, payload)

    async def update_transaction(
        self, transaction_id: str, changes: Mapping[str, Any]
    ) -> Transaction:
        return await asyncio.to_thread(self._update_transaction, transaction_id, changes)

    async def delete_transaction(self, transaction_id: str) -> None:
        await asyncio.to_thread(self._delete_transaction, transaction_id)

    async def list_categories(self) -> list[Category]:
        return await asyncio.to_thread(self._list_categories)

    # -- local-only --------------------------------------------------------

    def create_category(
        self,
        name: str,
        *,
        type: str = "expense",
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> Category:
        """Create a category (the REST API manages categories server-side)."""

        with self.session_factory() as session:
            row = CategoryRow(name=name, type=self._clean_type(type), color=color, icon=icon)
            session.add(row)
            session.commit()
            session.refresh(row)
            return row.to_domain()


def ensure_default_categories(store: SQLModelTransactionStore) -> list[Category]:
    """Seed the baseline categories when the local database has none."""

    with store.session_factory() as session:
        existing = session.exec(select(CategoryRow)).first()
    if existing is None:
        for name, cat_type, color, icon in DEFAULT_CATEGORIES:
            store.create_category(name, type=cat_type, color=color, icon=icon)
        logger.info("Seeded default categories", extra={"count": len(DEFAULT_CATEGORIES)})
    with store.session_factory() as session:
        rows = session.exec(select(CategoryRow).order_by(CategoryRow.name)).all()
        return [row.to_domain() for row in rows]
