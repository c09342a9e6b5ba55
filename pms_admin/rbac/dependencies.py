"""
RBAC dependencies — permission enforcement on dashboard routes.

`require_menu_permission` is a *dependency factory*: call it with the
menu pair a route belongs to and the action it performs, and it returns
a FastAPI dependency that will:

1. Resolve the caller's dashboard session (fetching permissions once).
2. Check the pair through the permission store.
3. Return 403 on failure, with NO details about what the caller holds.

Usage in a route:
    @router.get("/plans", dependencies=[Depends(require_menu_permission("Subscriptions", "Plans"))])
    async def list_plans(...): ...

Actions:
    "view"   : the sub menu is visible to the caller
    "add" / "change" / "delete" : the matching capability flag is set
"""

import logging

from fastapi import Depends, HTTPException, status

from pms_admin.core.security import get_permission_store
from pms_admin.rbac.store import PermissionStore

logger = logging.getLogger("rbac")

ACTIONS = ("view", "add", "change", "delete")


class require_menu_permission:
    """
    Dependency factory.

    Can be used as:
        Depends(require_menu_permission("Team", "Groups"))
        Depends(require_menu_permission("Team", "Groups", "delete"))
    """

    def __init__(self, main_menu: str, sub_menu: str, action: str = "view"):
        if action not in ACTIONS:
            raise ValueError(f"Unknown action {action!r}")
        self.main_menu = main_menu
        self.sub_menu = sub_menu
        self.action = action

    def allows(self, store: PermissionStore) -> bool:
        if self.action == "view":
            return store.has_menu_access(self.main_menu, self.sub_menu)
        flags = store.get_permissions(self.main_menu, self.sub_menu)
        return getattr(flags, self.action)

    async def __call__(
        self,
        store: PermissionStore = Depends(get_permission_store),
    ) -> PermissionStore:
        if not self.allows(store):
            logger.warning(
                "Permission denied: %s / %s requires %s (state=%s)",
                self.main_menu,
                self.sub_menu,
                self.action,
                store.state.value,
            )
            # Do NOT reveal what the caller holds
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return store
