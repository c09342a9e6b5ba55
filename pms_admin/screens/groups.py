"""
Group screen — groups and their permission matrix.

Each dashboard session keeps one group screen, so an open form and its
matrix survive between requests while the checkboxes are edited.
"""

from typing import Any

from pms_admin.rbac.catalog import find_entry
from pms_admin.rbac.matrix import PermissionMatrix
from pms_admin.schemas import Group, GroupBody, PermissionRecord
from pms_admin.screens.base import CrudScreen, FormValidationError
from pms_admin.services import group_service


class GroupScreen(CrudScreen[Group]):
    form_fields = ("name", "description", "permissions")

    def __init__(self, client):
        super().__init__(client)
        self.name = ""
        self.description = ""
        self.matrix = PermissionMatrix()

    async def _fetch(self) -> list[Group]:
        return await group_service.list_groups(self.client)

    def _reset_form(self, group: Group | None) -> None:
        self.name = group.name if group else ""
        self.description = (group.description or "") if group else ""
        self.matrix = PermissionMatrix(group.permissions if group else ())

    def fill(self, **fields: Any) -> None:
        permissions = fields.pop("permissions", None)
        super().fill(**fields)
        if permissions is not None:
            self.matrix = PermissionMatrix(
                PermissionRecord.model_validate(p) for p in permissions
            )

    def _build_body(self) -> GroupBody:
        name = self.name.strip()
        if not name:
            raise FormValidationError("Group name is required")
        return GroupBody(
            name=name,
            description=self.description.strip() or None,
            permissions=self.matrix.records(),
        )

    async def _create(self, body: GroupBody) -> None:
        await group_service.create_group(self.client, body)

    async def _update(self, group: Group, body: GroupBody) -> None:
        await group_service.update_group(self.client, group.id, body)

    async def _delete(self, group: Group) -> None:
        await group_service.delete_group(self.client, group.id)

    # ── Matrix editing ───────────────────────────────────────────────
    def _menu_url(self, main_menu: str, sub_menu: str) -> str:
        entry = find_entry(main_menu, self.matrix.catalog)
        item = next((i for i in entry.items if i.title == sub_menu), None) if entry else None
        if item is None:
            raise LookupError(f"{main_menu} / {sub_menu} is not in the menu catalog")
        return item.url

    def toggle_permission(self, main_menu: str, sub_menu: str, field: str) -> None:
        """Flip one checkbox of the open form's matrix."""
        self.matrix.toggle(main_menu, sub_menu, self._menu_url(main_menu, sub_menu), field)

    def toggle_all_permissions(self, main_menu: str, sub_menu: str) -> None:
        self.matrix.toggle_all(main_menu, sub_menu, self._menu_url(main_menu, sub_menu))
