"""Failures raised by transaction store clients."""

from __future__ import annotations

from typing import Optional

GENERIC_MESSAGE = "Something went wrong. Please try again."


class StoreError(Exception):
    """Base class for every failure reported by a store or auth call."""

    def __init__(self, message: Optional[str] = None, *, status: Optional[int] = None):
        super().__init__(message or self.__class__.__name__)
        self.message = message
        self.status = status

    def user_message(self, fallback: str = GENERIC_MESSAGE) -> str:
        """Return the store-provided message, or ``fallback`` when there is none."""

        return self.message or fallback


class NetworkFailure(StoreError):
    """The request could not complete."""


class ValidationFailure(StoreError):
    """Caller-supplied filter or transaction data was rejected."""


class NotFound(StoreError):
    """The mutation target no longer exists."""


class AuthFailure(StoreError):
    """The bearer token was missing, expired or rejected (HTTP 401)."""


__all__ = [
    "AuthFailure",
    "GENERIC_MESSAGE",
    "NetworkFailure",
    "NotFound",
    "StoreError",
    "ValidationFailure",
]
