"""
User service — user CRUD.

Create and update bodies differ: email and password are only ever sent
on create, and an update always carries `groupId` (null to unassign).
"""

from pms_admin.core.backend import BackendClient
from pms_admin.schemas import User, UserCreateBody, UserUpdateBody

USERS_URL = "/api/users"


async def list_users(client: BackendClient) -> list[User]:
    body = await client.get(USERS_URL, fallback="Failed to fetch users")
    return [User.model_validate(item) for item in (body or {}).get("data", [])]


async def create_user(client: BackendClient, body: UserCreateBody) -> None:
    await client.post(
        USERS_URL,
        body.model_dump(mode="json", by_alias=True, exclude_none=True),
        fallback="Failed to create user",
    )


async def update_user(client: BackendClient, user_id: str, body: UserUpdateBody) -> None:
    await client.put(
        f"{USERS_URL}/{user_id}",
        body.model_dump(mode="json", by_alias=True),
        fallback="Failed to update user",
    )


async def delete_user(client: BackendClient, user_id: str) -> None:
    await client.delete(f"{USERS_URL}/{user_id}", fallback="Failed to delete user")
