"""
Plan service — subscription plan requests against the PMS backend.

Functions raise `BackendError` on any failure; screens catch it and turn
it into form or list state.
"""

from pms_admin.core.backend import BackendClient
from pms_admin.schemas import BulkDeleteBody, Plan, PlanBody

PLANS_URL = "/api/plans"


async def list_plans(client: BackendClient) -> list[Plan]:
    body = await client.get(PLANS_URL, fallback="Failed to fetch plans")
    return [Plan.model_validate(item) for item in (body or {}).get("data", [])]


async def create_plan(client: BackendClient, body: PlanBody) -> Plan:
    created = await client.post(
        PLANS_URL, body.model_dump(by_alias=True), fallback="Failed to save plan",
    )
    return Plan.model_validate(created)


async def update_plan(client: BackendClient, plan_id: str, body: PlanBody) -> Plan:
    updated = await client.put(
        f"{PLANS_URL}/{plan_id}", body.model_dump(by_alias=True), fallback="Failed to save plan",
    )
    return Plan.model_validate(updated)


async def delete_plan(client: BackendClient, plan_id: str) -> None:
    await client.delete(f"{PLANS_URL}/{plan_id}", fallback="Failed to delete plan")


async def bulk_delete_plans(client: BackendClient, ids: list[str]) -> None:
    await client.post(
        f"{PLANS_URL}/bulk-delete",
        BulkDeleteBody(ids=ids).model_dump(),
        fallback="Failed to delete plans",
    )
