"""
CRUD screen — shared list/form flow for the admin screens.

Every admin screen follows the same shape:

    load list → open form (create OR edit) → validate → submit
              → refetch list → close form

State lives on the screen object and every failure is converted into
that state at the method that issued the request:
    • `error`      : list fetch failed; call `load()` again to retry.
    • `form_error` : validation or backend rejection; form stays open.
    • `alert`      : a delete was rejected.
`error_status` carries the HTTP status that goes with the latest failure
(400 for validation, 502 when the backend could not be reached).

Nothing is applied optimistically, so a failed mutation leaves `items`
exactly as the last successful load returned them.
"""

import logging
from typing import Any, Generic, TypeVar

from pms_admin.core.backend import BackendClient, BackendError

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT")

BAD_GATEWAY = 502


class FormValidationError(Exception):
    """A client-side field check failed; the request is never sent."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CrudScreen(Generic[ItemT]):
    form_fields: tuple[str, ...] = ()

    def __init__(self, client: BackendClient):
        self.client = client
        self.items: list[ItemT] = []
        self.is_loading = False
        self.error: str | None = None
        self.is_form_open = False
        self.editing: ItemT | None = None
        self.form_error: str | None = None
        self.is_saving = False
        self.alert: str | None = None
        self.error_status: int | None = None

    # ── Hooks ────────────────────────────────────────────────────────
    async def _fetch(self) -> list[ItemT]:
        raise NotImplementedError

    def _reset_form(self, item: ItemT | None) -> None:
        raise NotImplementedError

    def _build_body(self) -> Any:
        """Validate the form fields and return the request body."""
        raise NotImplementedError

    async def _create(self, body: Any) -> None:
        raise NotImplementedError

    async def _update(self, item: ItemT, body: Any) -> None:
        raise NotImplementedError

    async def _delete(self, item: ItemT) -> None:
        raise NotImplementedError

    # ── List ─────────────────────────────────────────────────────────
    def _fail(self, exc: BackendError) -> str:
        self.error_status = exc.status_code or BAD_GATEWAY
        return exc.message

    async def load(self) -> bool:
        self.is_loading = True
        try:
            self.items = await self._fetch()
            self.error = None
        except BackendError as exc:
            self.error = self._fail(exc)
        finally:
            self.is_loading = False
        return self.error is None

    def find(self, item_id: str) -> ItemT | None:
        return next((item for item in self.items if getattr(item, "id", None) == item_id), None)

    # ── Form ─────────────────────────────────────────────────────────
    def open_create(self) -> None:
        self.editing = None
        self._reset_form(None)
        self.form_error = None
        self.is_form_open = True

    def open_edit(self, item: ItemT) -> None:
        self.editing = item
        self._reset_form(item)
        self.form_error = None
        self.is_form_open = True

    def close_form(self) -> None:
        self.is_form_open = False
        self.editing = None
        self.form_error = None

    def fill(self, **fields: Any) -> None:
        for name, value in fields.items():
            if name not in self.form_fields:
                raise TypeError(f"{type(self).__name__} has no form field {name!r}")
            setattr(self, name, value)

    async def save(self) -> bool:
        # One in-flight save per form.
        if self.is_saving or not self.is_form_open:
            return False

        try:
            body = self._build_body()
        except FormValidationError as exc:
            self.form_error = exc.message
            self.error_status = 400
            return False

        self.is_saving = True
        self.form_error = None
        try:
            if self.editing is None:
                await self._create(body)
            else:
                await self._update(self.editing, body)
        except BackendError as exc:
            self.form_error = self._fail(exc)
            return False
        finally:
            self.is_saving = False

        self.close_form()
        await self.load()
        return True

    async def delete(self, item: ItemT) -> bool:
        try:
            await self._delete(item)
        except BackendError as exc:
            self.alert = self._fail(exc)
            return False
        self.alert = None
        await self.load()
        return True
