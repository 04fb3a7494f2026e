"""Store-facing protocols."""

from .store import TransactionStore

__all__ = ["TransactionStore"]
