"""Authenticated user profile."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class User:
    """Profile returned by the auth endpoints."""

    id: str
    email: str
    name: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "User":
        return cls(
            id=str(payload.get("id", "")),
            email=str(payload.get("email") or ""),
            name=str(payload.get("name") or ""),
        )

    def to_payload(self) -> dict[str, str]:
        return {"id": self.id, "email": self.email, "name": self.name}
