"""Ledger category definitions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class Category:
    """User-defined label applied to transactions for grouping.

    ``name`` is a display label and is not guaranteed to be unique.
    """

    id: str
    name: str
    color: Optional[str] = None
    icon: Optional[str] = None
    type: str = "expense"

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Category":
        """Build a category from a store JSON object."""

        raw_id = payload.get("id")
        return cls(
            id="" if raw_id is None else str(raw_id),
            name=str(payload.get("name") or ""),
            color=payload.get("color"),
            icon=payload.get("icon"),
            type=str(payload.get("type") or "expense"),
        )
