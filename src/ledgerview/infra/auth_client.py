"""Authentication endpoints."""

from __future__ import annotations

from typing import Any

from ..errors import AuthFailure, StoreError
from ..logging_config import get_logger
from ..models.user import User
from .http import ApiClient

logger = get_logger(__name__)


class AuthClient:
    """Login, registration and token validation against ``/auth``."""

    def __init__(self, api: ApiClient):
        self.api = api

    @property
    def session(self):
        return self.api.session

    def _adopt(self, body: Any) -> tuple[str, User]:
        if not isinstance(body, dict) or not body.get("token"):
            raise StoreError("The server did not return a token")
        user_payload = body.get("user")
        user = User.from_payload(user_payload) if isinstance(user_payload, dict) else None
        token = str(body["token"])
        self.session.establish(token, user)
        return token, user

    async def login(self, email: str, password: str) -> tuple[str, User]:
        body = await self.api.arequest(
            "POST", "/auth/login", json={"email": email, "password": password}
        )
        return self._adopt(body)

    async def register(self, name: str, email: str, password: str) -> tuple[str, User]:
        body = await self.api.arequest(
            "POST",
            "/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        return self._adopt(body)

    async def current_user(self) -> User:
        """Validate the stored token by fetching the profile it belongs to."""

        if not self.session.is_authenticated:
            raise AuthFailure("Not logged in")
        body = await self.api.arequest("GET", "/auth/me")
        if not isinstance(body, dict):
            raise StoreError("The server did not return a user")
        user = User.from_payload(body)
        self.session.user = user
        return user

    def logout(self) -> None:
        logger.info("Logging out")
        self.session.invalidate()
