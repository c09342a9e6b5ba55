"""
PMS backend client.

A thin wrapper over a shared `httpx.AsyncClient` that:
- forwards the caller's session cookie on every request,
- decodes JSON bodies,
- turns every non-2xx response or transport failure into a
  `BackendError` carrying a human-readable message.

The backend reports failures as `{ "message": "..." }`; that message is
surfaced verbatim.  When the body has no message (or is not JSON) the
caller-supplied fallback text is used instead.
"""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """Raised when the PMS backend rejects a request or cannot be reached.

    `status_code` is None for transport failures (DNS, refused, timeout).
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def extract_message(response: httpx.Response, fallback: str) -> str:
    """Pull `message` out of an error body, or return the fallback."""
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
    return fallback


class BackendClient:
    """Session-bound view of the backend API."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        session_token: str | None = None,
        cookie_name: str = "better-auth.session_token",
    ):
        self._http = http
        self.session_token = session_token
        self.cookie_name = cookie_name

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.session_token:
            headers["Cookie"] = f"{self.cookie_name}={self.session_token}"
        return headers

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        fallback: str = "Request failed",
    ) -> Any:
        try:
            response = await self._http.request(
                method, url, json=json, headers=self._headers(),
            )
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise BackendError(fallback) from exc

        if not response.is_success:
            message = extract_message(response, fallback)
            logger.warning(
                "%s %s returned %s: %s", method, url, response.status_code, message,
            )
            raise BackendError(message, response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise BackendError(fallback, response.status_code) from exc

    async def get(self, url: str, *, fallback: str = "Request failed") -> Any:
        return await self.request("GET", url, fallback=fallback)

    async def post(self, url: str, json: Any = None, *, fallback: str = "Request failed") -> Any:
        return await self.request("POST", url, json=json, fallback=fallback)

    async def put(self, url: str, json: Any = None, *, fallback: str = "Request failed") -> Any:
        return await self.request("PUT", url, json=json, fallback=fallback)

    async def delete(self, url: str, *, fallback: str = "Request failed") -> Any:
        return await self.request("DELETE", url, fallback=fallback)
