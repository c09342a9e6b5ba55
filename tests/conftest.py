"""
Test global configuration

- The PMS backend is never contacted: every test talks to `FakeBackend`
  through `httpx.MockTransport`.
- `FakeBackend` records every request so tests can assert on the exact
  method, path, cookie and JSON body that went upstream.
"""
from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from pms_admin.core.backend import BackendClient

BACKEND_URL = "http://backend.test"
COOKIE_NAME = "better-auth.session_token"
TOKEN = "session-abc"

USER_PERMISSIONS: dict[str, Any] = {
    "role": "user",
    "groupId": "g-1",
    "groupName": "Front Desk",
    "menus": [
        {
            "main_menu": "Team",
            "sub_menu": [
                {
                    "menu_name": "Users",
                    "url": "team-users",
                    "permissions": {"add": True, "change": False, "delete": False},
                }
            ],
        }
    ],
}

ADMIN_PERMISSIONS: dict[str, Any] = {**USER_PERMISSIONS, "role": "admin"}


class FakeBackend:
    """In-memory stand-in for the PMS backend."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def on(
        self,
        method: str,
        path: str,
        json: Any = None,
        status: int = 200,
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
    ) -> None:
        if handler is None:
            def handler(request: httpx.Request, _json=json, _status=status) -> httpx.Response:
                if _json is None:
                    return httpx.Response(_status)
                return httpx.Response(_status, json=_json)
        self.routes[(method, path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"message": f"No route {request.method} {request.url.path}"})
        return handler(request)

    def sent(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def last_json(self, method: str, path: str) -> Any:
        requests = self.sent(method, path)
        assert requests, f"no {method} {path} was sent"
        return json.loads(requests[-1].content)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
async def http_client(backend: FakeBackend):
    async with httpx.AsyncClient(
        base_url=BACKEND_URL,
        transport=httpx.MockTransport(backend),
    ) as client:
        yield client


@pytest.fixture
def client(http_client: httpx.AsyncClient) -> BackendClient:
    return BackendClient(http_client, TOKEN, COOKIE_NAME)
