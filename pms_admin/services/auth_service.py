"""
Auth service — the only call this app makes to the auth provider.

Sign-in, sign-up and session polling all happen between the browser and
the provider directly; the dashboard only needs to end a session.
"""

import logging

from pms_admin.core.backend import BackendClient

logger = logging.getLogger(__name__)

SIGN_OUT_PATH = "/api/auth/sign-out"


async def sign_out(client: BackendClient, auth_base_url: str) -> None:
    """End the provider session.  Raises `BackendError` when it refuses."""
    await client.post(f"{auth_base_url.rstrip('/')}{SIGN_OUT_PATH}", {}, fallback="Failed to sign out")
    logger.info("Session signed out")
