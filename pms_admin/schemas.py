"""
Pydantic schemas for request / response serialization.

Kept in a single file for now; split per-domain when it grows.

Wire names follow the PMS backend: camelCase for entities and request
bodies (`fromRooms`, `canAdd`, `groupId`), snake_case for the
`/api/me/permissions` menu tree (`main_menu`, `sub_menu`, `menu_name`).
Python attributes are always snake_case; serialize with
`model_dump(by_alias=True)` before sending anything upstream.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Roles ────────────────────────────────────────────────────────────
class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"

    @classmethod
    def coerce(cls, value: Any) -> "Role":
        """Anything that is not exactly `admin` is an ordinary user.

        No trimming or case folding: `"Admin"` and `" admin "` are users.
        """
        if isinstance(value, Role):
            return value
        if value == cls.ADMIN.value:
            return cls.ADMIN
        return cls.USER


class MenuKey(NamedTuple):
    """Composite (main menu, sub menu) key, the unit of access."""

    main_menu: str
    sub_menu: str


# ── Session permissions (GET /api/me/permissions) ────────────────────
class SubMenuPermissions(BaseModel):
    model_config = ConfigDict(frozen=True)

    add: bool = False
    change: bool = False
    delete: bool = False


class SubMenuItem(BaseModel):
    menu_name: str
    url: str = ""
    permissions: SubMenuPermissions = Field(default_factory=SubMenuPermissions)


class MainMenu(BaseModel):
    main_menu: str
    sub_menu: list[SubMenuItem] = []


class SessionPermissions(CamelModel):
    role: Role = Role.USER
    group_id: str | None = None
    group_name: str | None = None
    menus: list[MainMenu] = []

    @field_validator("role", mode="before")
    @classmethod
    def _coerce_role(cls, value: Any) -> Role:
        return Role.coerce(value)


# ── Permission records ───────────────────────────────────────────────
class PermissionRecord(CamelModel):
    main_menu: str
    sub_menu: str
    url: str = ""
    can_add: bool = False
    can_change: bool = False
    can_delete: bool = False

    @property
    def key(self) -> MenuKey:
        return MenuKey(self.main_menu, self.sub_menu)

    @property
    def is_empty(self) -> bool:
        return not (self.can_add or self.can_change or self.can_delete)

    @property
    def is_full(self) -> bool:
        return self.can_add and self.can_change and self.can_delete


# ── Entities ─────────────────────────────────────────────────────────
class UserRef(CamelModel):
    id: str
    name: str = ""
    email: str = ""


class GroupRef(CamelModel):
    id: str
    name: str


class Group(CamelModel):
    id: str
    name: str
    description: str | None = None
    permissions: list[PermissionRecord] = []
    user_count: int = 0
    created_at: datetime | None = None

    @model_validator(mode="before")
    @classmethod
    def _flatten_count(cls, data: Any) -> Any:
        # The backend reports membership as `_count: {users: n}`.
        if isinstance(data, dict) and "userCount" not in data and "user_count" not in data:
            count = data.get("_count")
            if isinstance(count, dict) and "users" in count:
                data = {**data, "userCount": count["users"]}
        return data


class User(CamelModel):
    id: str
    name: str
    email: str
    role: Role = Role.USER
    group_id: str | None = None
    group: GroupRef | None = None
    created_at: datetime | None = None

    @field_validator("role", mode="before")
    @classmethod
    def _coerce_role(cls, value: Any) -> Role:
        return Role.coerce(value)


class Plan(CamelModel):
    id: str
    from_rooms: int
    to_rooms: int
    rate_per_room: float
    created_by: UserRef | None = None
    updated_by: UserRef | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ── Request bodies sent upstream ─────────────────────────────────────
class PlanBody(CamelModel):
    from_rooms: int
    to_rooms: int
    rate_per_room: float


class GroupBody(CamelModel):
    name: str
    description: str | None = None
    permissions: list[PermissionRecord] = []


class UserCreateBody(CamelModel):
    name: str
    email: str
    password: str
    role: Role = Role.USER
    group_id: str | None = None


class UserUpdateBody(CamelModel):
    name: str
    role: Role
    group_id: str | None


class BulkDeleteBody(BaseModel):
    ids: list[str]


# ── Form input accepted by the dashboard routes ──────────────────────
# Fields are loose: screens run the real validation and
# report it as `{message}`, the same way the browser form did.
class PlanForm(CamelModel):
    from_rooms: str | int | float | None = None
    to_rooms: str | int | float | None = None
    rate_per_room: str | int | float | None = None


class GroupForm(CamelModel):
    name: str = ""
    description: str = ""
    permissions: list[PermissionRecord] = []


class UserForm(CamelModel):
    name: str = ""
    email: str = ""
    password: str = ""
    role: Role = Role.USER
    group_id: str = ""


# ── Dashboard views ──────────────────────────────────────────────────
class SidebarItem(CamelModel):
    title: str
    url: str


class SidebarGroup(CamelModel):
    title: str
    is_active: bool = False
    items: list[SidebarItem] = []


class PermissionSnapshot(CamelModel):
    state: str
    is_loading: bool
    is_admin: bool
    role: Role | None = None
    group_id: str | None = None
    group_name: str | None = None


class PermissionCheck(CamelModel):
    main_menu: str
    sub_menu: str | None = None
    access: bool
    add: bool
    change: bool
    delete: bool


class MatrixCell(CamelModel):
    sub_menu: str
    url: str
    can_add: bool
    can_change: bool
    can_delete: bool


class MatrixSectionOut(CamelModel):
    main_menu: str
    rows: list[MatrixCell]


class GroupFormOut(CamelModel):
    is_form_open: bool
    editing_id: str | None = None
    name: str = ""
    description: str = ""
    form_error: str | None = None
    sections: list[MatrixSectionOut] = []


class GroupFormFields(CamelModel):
    name: str | None = None
    description: str | None = None


class MatrixToggleBody(CamelModel):
    main_menu: str
    sub_menu: str
    field: Literal["canAdd", "canChange", "canDelete"]


class MatrixToggleAllBody(CamelModel):
    main_menu: str
    sub_menu: str


# ── Assistant ────────────────────────────────────────────────────────
class ChatPart(BaseModel):
    text: str


class ChatMessage(BaseModel):
    role: Literal["user", "model"]
    parts: list[ChatPart]


class ChatRequest(BaseModel):
    message: str


# ── Generic ──────────────────────────────────────────────────────────
class MessageResponse(BaseModel):
    message: str
