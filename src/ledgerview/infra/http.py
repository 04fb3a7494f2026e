"""JSON-over-HTTP client shared by the REST store and the auth client."""

from __future__ import annotations

import asyncio
from typing import Any, Mapping, Optional

import requests

from ..errors import AuthFailure, NetworkFailure, NotFound, StoreError, ValidationFailure
from ..logging_config import get_logger
from ..session import AuthSession

logger = get_logger(__name__)

_VALIDATION_STATUSES = {400, 422}


def _server_message(response: requests.Response) -> Optional[str]:
    """Pull a human message out of an error body, if the server sent one."""

    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return None


def error_for_response(response: requests.Response) -> StoreError:
    """Map an unsuccessful response onto the store error taxonomy."""

    status = response.status_code
    message = _server_message(response)
    if status == 401:
        return AuthFailure(message, status=status)
    if status == 404:
        return NotFound(message, status=status)
    if status in _VALIDATION_STATUSES:
        return ValidationFailure(message, status=status)
    return StoreError(message, status=status)


class ApiClient:
    """Bearer-token JSON API client.

    Blocking ``requests`` calls are pushed to a worker thread so that awaiting
    them suspends the event loop instead of blocking it. A ``401`` from any
    endpoint invalidates the shared :class:`AuthSession` before raising.
    """

    def __init__(
        self,
        base_url: str,
        session: AuthSession,
        *,
        timeout: Optional[float] = None,
        http: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.timeout = timeout
        self.http = http or requests.Session()
        self.http.headers.setdefault("Content-Type", "application/json")

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, str]] = None,
        json: Any = None,
    ) -> Any:
        """Issue a request and return the decoded JSON body (None when empty)."""

        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug("API request", extra={"method": method, "url": url, "params": dict(params or {})})
        try:
            response = self.http.request(
                method,
                url,
                params=dict(params) if params else None,
                json=json,
                headers=self.session.authorization_header(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as exc:
            logger.warning("API request failed", extra={"method": method, "url": url, "error": str(exc)})
            raise NetworkFailure() from exc

        if not response.ok:
            error = error_for_response(response)
            logger.warning(
                "API request rejected",
                extra={"method": method, "url": url, "status": response.status_code},
            )
            if isinstance(error, AuthFailure):
                self.session.invalidate()
            raise error

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise StoreError("The server sent an unreadable response", status=response.status_code) from exc

    async def arequest(self, method: str, path: str, **kwargs: Any) -> Any:
        """Awaitable :meth:`request`."""

        return await asyncio.to_thread(self.request, method, path, **kwargs)
