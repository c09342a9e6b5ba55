"""
Permission resolver — answers access questions against SessionPermissions.

Every access or capability check in the dashboard goes through
`resolve_access`, which is the ONLY place the admin override lives:

- No data loaded: nothing is visible, every flag is false.
- Admin: everything is visible, every flag is true, even for pairs the
  backend never listed.
- Otherwise: a main menu is visible when it has at least one sub menu;
  a sub menu is visible when the backend listed it (the backend only
  includes entries the user may see) and carries its stored flags.

The functions are pure so they can be called from the store, the
sidebar builder, and route dependencies alike.
"""

from dataclasses import dataclass

from pms_admin.schemas import Role, SessionPermissions, SubMenuPermissions

NO_PERMISSIONS = SubMenuPermissions()
FULL_PERMISSIONS = SubMenuPermissions(add=True, change=True, delete=True)


@dataclass(frozen=True)
class Access:
    """Result of a single (main menu, sub menu) query."""

    visible: bool = False
    permissions: SubMenuPermissions = NO_PERMISSIONS


DENIED = Access()
GRANTED = Access(visible=True, permissions=FULL_PERMISSIONS)


def is_admin(data: SessionPermissions | None) -> bool:
    return data is not None and data.role is Role.ADMIN


def resolve_access(
    data: SessionPermissions | None,
    main_menu: str,
    sub_menu: str | None = None,
) -> Access:
    if data is None:
        return DENIED
    if is_admin(data):
        return GRANTED

    main_entry = next((m for m in data.menus if m.main_menu == main_menu), None)
    if main_entry is None:
        return DENIED

    # Main menu only: visible if any sub menu is.
    if not sub_menu:
        return Access(visible=bool(main_entry.sub_menu))

    sub_entry = next((s for s in main_entry.sub_menu if s.menu_name == sub_menu), None)
    if sub_entry is None:
        return DENIED
    return Access(visible=True, permissions=sub_entry.permissions)


def has_menu_access(
    data: SessionPermissions | None,
    main_menu: str,
    sub_menu: str | None = None,
) -> bool:
    return resolve_access(data, main_menu, sub_menu).visible


def get_permissions(
    data: SessionPermissions | None,
    main_menu: str,
    sub_menu: str,
) -> SubMenuPermissions:
    return resolve_access(data, main_menu, sub_menu).permissions
