"""Filter criteria applied to transaction listings."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Optional

from ..errors import ValidationFailure
from ..models.transaction import TRANSACTION_TYPES, parse_date

ALL = "all"
_TYPE_ANY_VALUES = {"", "all", "any", "none"}
# category ids are store-defined, so only blank and "all" are sentinels
_CATEGORY_ANY_VALUES = {"", ALL}


def normalize_type_value(raw_value: Any) -> str:
    """Return ``income``/``expense``, or ``all`` for falsy and sentinel values."""

    if raw_value is None:
        return ALL
    lowered = str(raw_value).strip().lower()
    if lowered in _TYPE_ANY_VALUES:
        return ALL
    if lowered not in TRANSACTION_TYPES:
        raise ValidationFailure(f"Unknown transaction type filter: {raw_value!r}")
    return lowered


def normalize_category_value(raw_value: Any) -> str:
    """Return a category id, treating falsy/'all' as ``all``."""

    if raw_value is None:
        return ALL
    text = str(raw_value).strip()
    if text.lower() in _CATEGORY_ANY_VALUES:
        return ALL
    return text


def normalize_date_value(raw_value: Any) -> Optional[date]:
    """Blank means unbounded; anything else must be an ISO calendar date."""

    try:
        return parse_date(raw_value)
    except ValueError as exc:
        raise ValidationFailure(f"Use YYYY-MM-DD for dates (got {raw_value!r})") from exc


@dataclass(frozen=True)
class FilterCriteria:
    """Filters applied to the transaction list.

    ``all`` and ``None`` mean "no constraint" on an axis. Date bounds are
    inclusive and their ordering is not checked: an inverted range is passed
    through to the store unchanged.
    """

    type: str = ALL
    category_id: str = ALL
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def set_filter(self, **changes: Any) -> "FilterCriteria":
        """Return a complete copy with the given axes replaced.

        Unknown axis names raise ``TypeError``.
        """

        normalized: dict[str, Any] = {}
        for key, value in changes.items():
            if key == "type":
                normalized[key] = normalize_type_value(value)
            elif key == "category_id":
                normalized[key] = normalize_category_value(value)
            elif key in ("start_date", "end_date"):
                normalized[key] = normalize_date_value(value)
            else:
                raise TypeError(f"Unknown filter axis: {key}")
        return replace(self, **normalized)

    def to_query_params(self) -> dict[str, str]:
        """Translate the criteria into store query parameters, omitting open axes."""

        params: dict[str, str] = {}
        if self.type != ALL:
            params["type"] = self.type
        if self.category_id != ALL:
            params["category_id"] = self.category_id
        if self.start_date is not None:
            params["start_date"] = self.start_date.isoformat()
        if self.end_date is not None:
            params["end_date"] = self.end_date.isoformat()
        return params

    @property
    def is_unfiltered(self) -> bool:
        return not self.to_query_params()


def criteria_from_params(params: dict[str, str]) -> FilterCriteria:
    """Rebuild criteria from query parameters (used by the local store)."""

    return FilterCriteria().set_filter(
        type=params.get("type"),
        category_id=params.get("category_id"),
        start_date=params.get("start_date"),
        end_date=params.get("end_date"),
    )
