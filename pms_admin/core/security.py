"""
Request-level session dependencies.

Authentication itself belongs to the external auth provider; this app
only reads the provider's session cookie off each request and uses it
to look up (or start) the matching dashboard session.

- No cookie ⇒ 401, before any backend call is made.
- An invalid or expired cookie is NOT rejected here: the backend answers
  the permission fetch with 401, the store stays empty, and every
  permission-guarded route then returns 403.
"""

from fastapi import Depends, HTTPException, Request, status

from pms_admin.core.backend import BackendClient
from pms_admin.core.config import Settings
from pms_admin.core.sessions import DashboardSession, SessionRegistry
from pms_admin.rbac.store import PermissionStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def get_session_token(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> str:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return token


async def get_dashboard_session(
    token: str = Depends(get_session_token),
    registry: SessionRegistry = Depends(get_registry),
) -> DashboardSession:
    return await registry.get(token)


def get_permission_store(
    session: DashboardSession = Depends(get_dashboard_session),
) -> PermissionStore:
    return session.permissions


def get_backend_client(
    session: DashboardSession = Depends(get_dashboard_session),
) -> BackendClient:
    return session.client
