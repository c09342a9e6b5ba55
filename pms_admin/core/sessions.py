"""
Dashboard sessions — per-login state held by the BFF.

A browser session (identified by the auth provider's session cookie)
owns exactly one `DashboardSession`: a backend client bound to that
cookie, the permission store, the group form being edited, and the
assistant conversation.  The store is fetched the first time the
session is seen and kept until the user refetches or signs out.

Entries are also removed when:
- the backend rejects the cookie (401/403 on the permission fetch),
- the session has been idle longer than `idle_seconds`,
- the registry is full; the least recently used entry goes first.
"""

import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field

import httpx

from pms_admin.core.backend import BackendClient
from pms_admin.rbac.store import PermissionStore
from pms_admin.screens.assistant import AssistantChat
from pms_admin.screens.groups import GroupScreen

logger = logging.getLogger(__name__)


@dataclass
class DashboardSession:
    client: BackendClient
    permissions: PermissionStore
    assistant: AssistantChat
    groups: GroupScreen
    last_seen: float = field(default=0.0)

    def close(self) -> None:
        self.permissions.clear()
        self.assistant.reset()
        self.groups.close_form()


class SessionRegistry:
    def __init__(
        self,
        http: httpx.AsyncClient,
        cookie_name: str,
        max_sessions: int = 1000,
        idle_seconds: float = 1800.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._http = http
        self._cookie_name = cookie_name
        self._max_sessions = max_sessions
        self._idle_seconds = idle_seconds
        self._clock = clock
        self._sessions: OrderedDict[str, DashboardSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, token: str) -> bool:
        return token in self._sessions

    def _create(self, token: str) -> DashboardSession:
        client = BackendClient(self._http, token, self._cookie_name)
        session = DashboardSession(
            client=client,
            permissions=PermissionStore(client),
            assistant=AssistantChat(client),
            groups=GroupScreen(client),
        )
        self._sessions[token] = session
        while len(self._sessions) > self._max_sessions:
            _, oldest = self._sessions.popitem(last=False)
            oldest.close()
            logger.info("Session registry full, evicted least recently used session")
        return session

    def _expire(self, now: float) -> None:
        # Oldest first, so stop at the first entry still in use.
        while self._sessions:
            session = next(iter(self._sessions.values()))
            if now - session.last_seen <= self._idle_seconds:
                break
            self._sessions.popitem(last=False)
            session.close()
            logger.info("Dashboard session expired after %.0fs idle", now - session.last_seen)

    async def get(self, token: str) -> DashboardSession:
        now = self._clock()
        self._expire(now)

        session = self._sessions.get(token)
        if session is None:
            session = self._create(token)
        else:
            self._sessions.move_to_end(token)
        session.last_seen = now

        await session.permissions.ensure_loaded()
        if session.permissions.is_rejected:
            # The cookie is not a live session; don't keep anything for it.
            if self._sessions.get(token) is session:
                del self._sessions[token]
            logger.info("Session cookie rejected by backend (%s)", session.permissions.error_status)
        return session

    def drop(self, token: str) -> None:
        session = self._sessions.pop(token, None)
        if session is not None:
            session.close()
            logger.info("Dashboard session dropped (%d active)", len(self._sessions))
