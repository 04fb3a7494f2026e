"""Keeps the transaction list and its summary in step with filters and mutations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Protocol

from .domain.store import TransactionStore
from .errors import StoreError, ValidationFailure
from .logging_config import get_logger
from .models.category import Category
from .models.transaction import Transaction
from .services.drafts import TransactionDraft
from .services.filters import FilterCriteria
from .services.summary import FinancialSummary, compute_summary

logger = get_logger(__name__)


class ViewState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUBMITTING = "submitting"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A single user-visible message."""

    title: str
    message: Optional[str] = None
    level: str = "info"  # info | error


Notifier = Callable[[Notification], None]


@dataclass(frozen=True)
class MutationOutcome:
    """Result of a create/update/delete request."""

    ok: bool
    error: Optional[StoreError] = None
    transaction: Optional[Transaction] = None


class RefreshPolicy(Protocol):
    """Decides how the list catches up after a successful mutation."""

    async def after_mutation(
        self, controller: "TransactionListController", kind: str, result: Optional[Transaction]
    ) -> None:
        ...


class FullRefetchPolicy:
    """Reload the whole list under the current filter after every mutation."""

    async def after_mutation(
        self, controller: "TransactionListController", kind: str, result: Optional[Transaction]
    ) -> None:
        await controller.refresh()


def _discard(_: Notification) -> None:
    return None


class TransactionListController:
    """Owns the filter, the displayed snapshot, the edit slot and the pending delete.

    The list and summary are only ever replaced by a freshly fetched snapshot;
    nothing is patched locally. Each fetch takes a sequence number and only the
    response to the most recently issued fetch is applied.
    """

    def __init__(
        self,
        store: TransactionStore,
        *,
        notifier: Optional[Notifier] = None,
        refresh_policy: Optional[RefreshPolicy] = None,
        criteria: Optional[FilterCriteria] = None,
        group_by: str = "label",
    ):
        self.store = store
        self.notifier = notifier or _discard
        self.refresh_policy: RefreshPolicy = refresh_policy or FullRefetchPolicy()
        self.criteria = criteria or FilterCriteria()
        self.group_by = group_by

        self.state = ViewState.IDLE
        self.transactions: tuple[Transaction, ...] = ()
        self.categories: tuple[Category, ...] = ()
        self.summary = FinancialSummary()
        self.last_error: Optional[StoreError] = None
        self.editing: Optional[Transaction] = None
        self.pending_delete: Optional[str] = None
        self._fetch_seq = 0

    # -- state helpers -------------------------------------------------------

    def _set_state(self, state: ViewState) -> None:
        if state is not self.state:
            logger.debug("View state change", extra={"from": self.state.value, "to": state.value})
        self.state = state

    def _notify_failure(self, title: str, error: StoreError) -> None:
        self.notifier(Notification(title=title, message=error.user_message(), level="error"))

    def acknowledge_error(self) -> None:
        """Return from ``ERROR`` to ``IDLE`` once the user has seen the failure."""

        if self.state is ViewState.ERROR:
            self._set_state(ViewState.IDLE)

    # -- fetching ------------------------------------------------------------

    async def start(self) -> bool:
        """Load categories, then the first listing for the session."""

        await self.load_categories()
        return await self.refresh()

    async def load_categories(self) -> bool:
        try:
            categories = await self.store.list_categories()
        except StoreError as exc:
            logger.warning("Category load failed", extra={"error": str(exc)})
            self._notify_failure("Could not load categories", exc)
            return False
        self.categories = tuple(categories)
        self.summary = compute_summary(self.transactions, self.categories, group_by=self.group_by)
        return True

    async def refresh(self) -> bool:
        """Fetch the list for the current filter; True when the result was applied."""

        self._fetch_seq += 1
        token = self._fetch_seq
        params = self.criteria.to_query_params()
        self._set_state(ViewState.LOADING)
        try:
            rows = await self.store.list_transactions(params)
        except StoreError as exc:
            if token != self._fetch_seq:
                logger.info("Discarding failure of superseded fetch", extra={"fetch": token})
                return False
            logger.warning("Transaction fetch failed", extra={"fetch": token, "error": str(exc)})
            self.last_error = exc
            self._set_state(ViewState.ERROR)
            self._notify_failure("Could not load transactions", exc)
            return False

        if token != self._fetch_seq:
            logger.info(
                "Discarding superseded fetch",
                extra={"fetch": token, "latest": self._fetch_seq},
            )
            return False

        self.transactions = tuple(rows)
        self.summary = compute_summary(self.transactions, self.categories, group_by=self.group_by)
        self.last_error = None
        self._set_state(ViewState.IDLE)
        return True

    async def set_filter(self, **changes: Any) -> bool:
        """Replace one or more filter axes and refetch."""

        try:
            self.criteria = self.criteria.set_filter(**changes)
        except ValidationFailure as exc:
            self._notify_failure("Invalid filter", exc)
            return False
        return await self.refresh()

    async def clear_filters(self) -> bool:
        self.criteria = FilterCriteria()
        return await self.refresh()

    def find(self, transaction_id: str) -> Optional[Transaction]:
        return next((t for t in self.transactions if t.id == transaction_id), None)

    # -- edit slot -----------------------------------------------------------

    def begin_edit(self, transaction: Transaction) -> TransactionDraft:
        """Open ``transaction`` for editing, discarding any other open edit."""

        if self.editing is not None and self.editing.id != transaction.id:
            logger.debug("Discarding open edit", extra={"transaction_id": self.editing.id})
        self.editing = transaction
        return TransactionDraft.from_transaction(transaction)

    def cancel_edit(self) -> None:
        self.editing = None

    async def submit(self, draft: TransactionDraft) -> MutationOutcome:
        """Create a transaction, or update the one in the edit slot."""

        editing = self.editing
        kind = "update" if editing is not None else "create"
        try:
            payload = draft.to_payload()
        except ValidationFailure as exc:
            self._notify_failure("Invalid transaction", exc)
            return MutationOutcome(ok=False, error=exc)

        self._set_state(ViewState.SUBMITTING)
        try:
            if editing is not None:
                result = await self.store.update_transaction(editing.id, payload)
            else:
                result = await self.store.create_transaction(payload)
        except StoreError as exc:
            logger.warning("Transaction save failed", extra={"kind": kind, "error": str(exc)})
            self._set_state(ViewState.IDLE)
            self._notify_failure("Could not save transaction", exc)
            return MutationOutcome(ok=False, error=exc)

        if self.editing is editing:
            self.editing = None
        self.notifier(
            Notification(title="Transaction updated" if editing else "Transaction created")
        )
        await self.refresh_policy.after_mutation(self, kind, result)
        return MutationOutcome(ok=True, transaction=result)

    # -- delete confirmation ---------------------------------------------------

    def request_delete(self, transaction_id: str) -> None:
        self.pending_delete = transaction_id

    def cancel_delete(self) -> None:
        self.pending_delete = None

    async def confirm_delete(self) -> MutationOutcome:
        """Issue the pending delete, even if the id has left the current list."""

        transaction_id = self.pending_delete
        if transaction_id is None:
            return MutationOutcome(ok=False)
        self.pending_delete = None

        if self.find(transaction_id) is None:
            logger.info("Deleting id absent from current list", extra={"transaction_id": transaction_id})
        self._set_state(ViewState.SUBMITTING)
        try:
            await self.store.delete_transaction(transaction_id)
        except StoreError as exc:
            logger.warning(
                "Transaction delete failed",
                extra={"transaction_id": transaction_id, "error": str(exc)},
            )
            self._set_state(ViewState.IDLE)
            self._notify_failure("Could not delete transaction", exc)
            return MutationOutcome(ok=False, error=exc)

        if self.editing is not None and self.editing.id == transaction_id:
            self.editing = None
        self.notifier(Notification(title="Transaction deleted"))
        await self.refresh_policy.after_mutation(self, "delete", None)
        return MutationOutcome(ok=True)
