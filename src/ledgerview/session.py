"""Authentication session context shared by the API client and controller."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, Optional

from .logging_config import get_logger
from .models.user import User

logger = get_logger(__name__)

SessionListener = Callable[["AuthSession"], None]


class AuthSession:
    """Holds the bearer token for one application run.

    Created on load (optionally from a persisted token file) and cleared on
    logout or whenever the store answers ``401``. Listeners are told about
    every invalidation so the front end can return to its login entry point.
    """

    def __init__(self, token_path: Optional[Path] = None):
        self.token_path = Path(token_path) if token_path else None
        self.token: Optional[str] = None
        self.user: Optional[User] = None
        self._listeners: list[SessionListener] = []

    @classmethod
    def load(cls, token_path: Optional[Path]) -> "AuthSession":
        """Restore a previously persisted token; a corrupt file is ignored."""

        session = cls(token_path)
        if session.token_path is None or not session.token_path.exists():
            return session
        try:
            data = json.loads(session.token_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable session file", extra={"error": str(exc)})
            return session
        session.token = data.get("token") or None
        user = data.get("user")
        session.user = User.from_payload(user) if isinstance(user, dict) else None
        return session

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def add_listener(self, callback: SessionListener) -> None:
        self._listeners.append(callback)

    def establish(self, token: str, user: Optional[User] = None) -> None:
        """Adopt a freshly issued token (and persist it when a path is configured)."""

        self.token = token
        self.user = user
        if self.token_path is not None:
            self.token_path.parent.mkdir(parents=True, exist_ok=True)
            payload = {"token": token, "user": user.to_payload() if user else None}
            self.token_path.write_text(json.dumps(payload), encoding="utf-8")
        logger.info("Session established", extra={"user_id": user.id if user else None})

    def invalidate(self) -> None:
        """Drop the token and user, delete the persisted copy and notify listeners."""

        had_token = self.token is not None
        self.token = None
        self.user = None
        if self.token_path is not None:
            self.token_path.unlink(missing_ok=True)
        if had_token:
            logger.info("Session invalidated")
        for listener in list(self._listeners):
            listener(self)

    def authorization_header(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}
