"""
Permission store — the session's resolved RBAC data.

One store exists per dashboard session.  It is populated from
`GET /api/me/permissions` on first use, refetched on demand, and
cleared on sign-out.  Every failure (unauthenticated, forbidden,
transport error, malformed payload) leaves the store empty, which the
rest of the dashboard reads as "no access to anything", never as an
error to retry.

Overlapping fetches are ordered by a request token: only the response
to the most recently issued fetch is kept, so a slow, older response
can never overwrite a newer one.  Callers that arrive while a fetch is
in flight wait for it to settle instead of reading the loading state.
"""

import asyncio
import logging
from enum import Enum

from pydantic import ValidationError

from pms_admin.core.backend import BackendClient, BackendError
from pms_admin.rbac import resolver
from pms_admin.schemas import PermissionSnapshot, SessionPermissions, SubMenuPermissions

logger = logging.getLogger("rbac")

PERMISSIONS_URL = "/api/me/permissions"
AUTH_FAILURE_STATUSES = (401, 403)


class StoreState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"


class PermissionStore:
    def __init__(self, client: BackendClient):
        self._client = client
        self._token = 0
        self._settled = asyncio.Event()
        self.state = StoreState.UNINITIALIZED
        self.data: SessionPermissions | None = None
        self.error_status: int | None = None

    @property
    def is_loading(self) -> bool:
        return self.state is StoreState.LOADING

    @property
    def is_admin(self) -> bool:
        return resolver.is_admin(self.data)

    @property
    def is_rejected(self) -> bool:
        """The backend refused the session cookie itself."""
        return self.state is StoreState.EMPTY and self.error_status in AUTH_FAILURE_STATUSES

    async def fetch_permissions(self) -> SessionPermissions | None:
        self._token += 1
        token = self._token
        self.state = StoreState.LOADING
        self._settled.clear()

        data: SessionPermissions | None = None
        error_status = None
        try:
            payload = await self._client.get(
                PERMISSIONS_URL, fallback="Failed to fetch permissions",
            )
            data = SessionPermissions.model_validate(payload)
        except BackendError as exc:
            logger.warning("Permission fetch failed (%s): %s", exc.status_code, exc.message)
            error_status = exc.status_code
        except ValidationError as exc:
            logger.warning("Permission payload rejected: %s", exc.error_count())
        finally:
            # Also reached on cancellation; waiters must always wake.
            if token == self._token:
                self.data = data
                self.error_status = error_status
                self.state = StoreState.READY if data is not None else StoreState.EMPTY
                self._settled.set()

        if token != self._token:
            logger.debug("Discarding stale permission response %d (latest %d)", token, self._token)
            return self.data
        return data

    async def ensure_loaded(self) -> None:
        """Fetch once; later calls are no-ops until an explicit refetch.

        A call made while a fetch is in flight waits for the latest one
        to settle.
        """
        if self.state is StoreState.UNINITIALIZED:
            await self.fetch_permissions()
        elif self.state is StoreState.LOADING:
            await self._settled.wait()

    def clear(self) -> None:
        # Bumping the token drops any fetch still in flight.
        self._token += 1
        self.data = None
        self.error_status = None
        self.state = StoreState.UNINITIALIZED
        self._settled.set()

    def has_menu_access(self, main_menu: str, sub_menu: str | None = None) -> bool:
        return resolver.has_menu_access(self.data, main_menu, sub_menu)

    def get_permissions(self, main_menu: str, sub_menu: str) -> SubMenuPermissions:
        return resolver.get_permissions(self.data, main_menu, sub_menu)

    def snapshot(self) -> PermissionSnapshot:
        data = self.data
        return PermissionSnapshot(
            state=self.state.value,
            is_loading=self.is_loading,
            is_admin=self.is_admin,
            role=data.role if data else None,
            group_id=data.group_id if data else None,
            group_name=data.group_name if data else None,
        )
