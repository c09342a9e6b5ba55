"""
User screen — users plus the group list used by the group picker.

Email and password are create-only: an edit never sends them.
"""

import asyncio

from pms_admin.schemas import Group, Role, User, UserCreateBody, UserUpdateBody
from pms_admin.screens.base import CrudScreen, FormValidationError
from pms_admin.services import group_service, user_service

MIN_PASSWORD_LENGTH = 6


class UserScreen(CrudScreen[User]):
    form_fields = ("name", "email", "password", "role", "group_id")

    def __init__(self, client):
        super().__init__(client)
        self.groups: list[Group] = []
        self.name = ""
        self.email = ""
        self.password = ""
        self.role = Role.USER
        self.group_id = ""

    async def _fetch(self) -> list[User]:
        users, groups = await asyncio.gather(
            user_service.list_users(self.client),
            group_service.list_groups(self.client),
        )
        self.groups = groups
        return users

    def _reset_form(self, user: User | None) -> None:
        self.name = user.name if user else ""
        self.email = user.email if user else ""
        self.password = ""
        self.role = user.role if user else Role.USER
        self.group_id = (user.group_id or "") if user else ""

    def _build_body(self) -> UserCreateBody | UserUpdateBody:
        creating = self.editing is None
        if not self.name.strip():
            raise FormValidationError("Name is required")
        if creating and not self.email.strip():
            raise FormValidationError("Email is required")
        if creating and not self.password:
            raise FormValidationError("Password is required")
        if creating and len(self.password) < MIN_PASSWORD_LENGTH:
            raise FormValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        role = Role.coerce(self.role)
        if creating:
            return UserCreateBody(
                name=self.name.strip(),
                email=self.email.strip(),
                password=self.password,
                role=role,
                group_id=self.group_id or None,
            )
        return UserUpdateBody(name=self.name.strip(), role=role, group_id=self.group_id or None)

    async def _create(self, body: UserCreateBody) -> None:
        await user_service.create_user(self.client, body)

    async def _update(self, user: User, body: UserUpdateBody) -> None:
        await user_service.update_user(self.client, user.id, body)

    async def _delete(self, user: User) -> None:
        await user_service.delete_user(self.client, user.id)
