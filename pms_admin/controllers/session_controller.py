"""
Session controller — permissions, sidebar and sign-out for the caller.

None of these routes are permission-guarded: they describe what the
caller may do, so an empty store yields empty answers, not 403s.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from pms_admin.core.backend import BackendError
from pms_admin.core.config import Settings
from pms_admin.core.security import (
    get_dashboard_session,
    get_permission_store,
    get_registry,
    get_session_token,
    get_settings,
)
from pms_admin.core.sessions import DashboardSession, SessionRegistry
from pms_admin.rbac import resolver
from pms_admin.rbac.navigation import build_sidebar
from pms_admin.rbac.store import PermissionStore
from pms_admin.schemas import MessageResponse, PermissionCheck, PermissionSnapshot, SidebarGroup
from pms_admin.services import auth_service

router = APIRouter(prefix="/api/ui", tags=["Session"])


@router.get("/session/permissions", response_model=PermissionSnapshot)
async def get_permissions(store: PermissionStore = Depends(get_permission_store)):
    return store.snapshot()


@router.get("/session/permissions/check", response_model=PermissionCheck)
async def check_permission(
    main_menu: str = Query(..., alias="mainMenu"),
    sub_menu: str | None = Query(None, alias="subMenu"),
    store: PermissionStore = Depends(get_permission_store),
):
    access = resolver.resolve_access(store.data, main_menu, sub_menu)
    return PermissionCheck(
        main_menu=main_menu,
        sub_menu=sub_menu,
        access=access.visible,
        add=access.permissions.add,
        change=access.permissions.change,
        delete=access.permissions.delete,
    )


@router.post("/session/permissions/refetch", response_model=PermissionSnapshot)
async def refetch_permissions(store: PermissionStore = Depends(get_permission_store)):
    """Reload permissions, e.g. after an admin edited the caller's group."""
    await store.fetch_permissions()
    return store.snapshot()


@router.get("/sidebar", response_model=list[SidebarGroup])
async def get_sidebar(
    store: PermissionStore = Depends(get_permission_store),
    settings: Settings = Depends(get_settings),
):
    return build_sidebar(store, default_title=settings.DEFAULT_MENU)


@router.post("/session/sign-out", response_model=MessageResponse)
async def sign_out(
    response: Response,
    token: str = Depends(get_session_token),
    session: DashboardSession = Depends(get_dashboard_session),
    registry: SessionRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
):
    """End the provider session, then forget everything held for it."""
    try:
        await auth_service.sign_out(session.client, settings.auth_base_url)
    except BackendError as exc:
        raise HTTPException(status_code=exc.status_code or 502, detail=exc.message)

    registry.drop(token)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return MessageResponse(message="Signed out successfully")
