"""
Group service — group CRUD.

Saving a group always sends its complete permission list; the backend
replaces the stored set wholesale.  Deleting a group leaves its users in
place with no group assigned.
"""

from pms_admin.core.backend import BackendClient
from pms_admin.schemas import Group, GroupBody

GROUPS_URL = "/api/groups"


def _payload(body: GroupBody) -> dict:
    # `description` is omitted, not nulled, when blank.
    return body.model_dump(by_alias=True, exclude_none=True)


async def list_groups(client: BackendClient) -> list[Group]:
    body = await client.get(GROUPS_URL, fallback="Failed to fetch groups")
    return [Group.model_validate(item) for item in (body or {}).get("data", [])]


async def create_group(client: BackendClient, body: GroupBody) -> None:
    await client.post(GROUPS_URL, _payload(body), fallback="Failed to save group")


async def update_group(client: BackendClient, group_id: str, body: GroupBody) -> None:
    await client.put(f"{GROUPS_URL}/{group_id}", _payload(body), fallback="Failed to save group")


async def delete_group(client: BackendClient, group_id: str) -> None:
    await client.delete(f"{GROUPS_URL}/{group_id}", fallback="Failed to delete group")
