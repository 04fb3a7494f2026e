"""Financial summary derived from a transaction snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, Optional

from ..models.category import Category
from ..models.transaction import ZERO, Transaction, TransactionType, parse_amount

HUNDRED = Decimal("100")
GROUP_BY_LABEL = "label"
GROUP_BY_ID = "id"


@dataclass(frozen=True)
class CategoryTotal:
    """Expense total for one category group."""

    label: str
    total: Decimal
    color: Optional[str] = None
    icon: Optional[str] = None
    percentage_of_expenses: Decimal = ZERO
    category_id: Optional[str] = None


@dataclass(frozen=True)
class FinancialSummary:
    """Totals, balance and per-category expense breakdown for one snapshot."""

    total_income: Decimal = ZERO
    total_expenses: Decimal = ZERO
    category_breakdown: tuple[CategoryTotal, ...] = field(default_factory=tuple)

    @property
    def balance(self) -> Decimal:
        return self.total_income - self.total_expenses

    @property
    def savings_rate(self) -> Decimal:
        return savings_rate(self)


def amount_of(transaction: Any) -> Decimal:
    """Return the transaction amount, treating a malformed value as zero."""

    value = parse_amount(getattr(transaction, "amount", None))
    return ZERO if value is None else value


def percentage(part: Decimal, whole: Decimal) -> Decimal:
    """``part / whole * 100``, defined as zero when ``whole`` is zero."""

    if not whole:
        return ZERO
    return part / whole * HUNDRED


def savings_rate(summary: FinancialSummary) -> Decimal:
    """Share of income kept, as a percentage; zero when there is no income."""

    return percentage(summary.balance, summary.total_income)


def _resolve_category(
    transaction: Transaction, lookup: dict[str, Category]
) -> Optional[Category]:
    if transaction.category is not None:
        return transaction.category
    if transaction.category_id is None:
        return None
    return lookup.get(transaction.category_id)


def compute_summary(
    transactions: Iterable[Transaction],
    categories: Iterable[Category] = (),
    *,
    group_by: str = GROUP_BY_LABEL,
) -> FinancialSummary:
    """Aggregate a snapshot into a :class:`FinancialSummary`.

    Single pass over ``transactions``; neither argument is modified. Only
    categorized expenses enter the breakdown, grouped by display label by
    default (same-named categories merge) or by category id with
    ``group_by="id"``. Groups are ordered by descending total, ties keeping
    first-seen order. A merged group shows the color/icon of the last
    category seen for its label.
    """

    if group_by not in (GROUP_BY_LABEL, GROUP_BY_ID):
        raise ValueError(f"group_by must be 'label' or 'id', got {group_by!r}")

    lookup = {c.id: c for c in categories}
    income = ZERO
    expenses = ZERO
    groups: dict[str, dict[str, Any]] = {}

    for tx in transactions:
        amount = amount_of(tx)
        if tx.type == TransactionType.INCOME.value:
            income += amount
            continue
        if tx.type != TransactionType.EXPENSE.value:
            continue
        expenses += amount

        category = _resolve_category(tx, lookup)
        if category is None:
            continue
        key = category.name if group_by == GROUP_BY_LABEL else (category.id or category.name)
        group = groups.get(key)
        if group is None:
            groups[key] = {"category": category, "total": amount}
        else:
            group["total"] += amount
            # display tokens follow the latest category seen under the label
            group["category"] = category

    ordered = sorted(groups.values(), key=lambda g: g["total"], reverse=True)
    breakdown = tuple(
        CategoryTotal(
            label=g["category"].name,
            total=g["total"],
            color=g["category"].color,
            icon=g["category"].icon,
            percentage_of_expenses=percentage(g["total"], expenses),
            category_id=None if group_by == GROUP_BY_LABEL else g["category"].id,
        )
        for g in ordered
    )
    return FinancialSummary(
        total_income=income,
        total_expenses=expenses,
        category_breakdown=breakdown,
    )


def top_categories(summary: FinancialSummary, limit: int = 5) -> list[CategoryTotal]:
    """Return the top N categories from a summary breakdown."""

    return list(summary.category_breakdown[:limit])
