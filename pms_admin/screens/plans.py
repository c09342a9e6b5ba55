"""
Plan screen — subscription plans priced per room band.

Form fields arrive as text (or numbers) and are parsed here; the body
sent upstream is always `{fromRooms: int, toRooms: int, ratePerRoom: float}`.
"""

import logging
import math
import re
from typing import Any

from pms_admin.core.backend import BackendError
from pms_admin.schemas import Plan, PlanBody
from pms_admin.screens.base import CrudScreen, FormValidationError
from pms_admin.services import plan_service

logger = logging.getLogger(__name__)


# Leading-number parsing: "12 rooms" is 12, "2.9" is 2, "abc" is nothing.
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _parse_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = _INT_PREFIX.match(str(value))
    return int(match.group(1)) if match else None


def _parse_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    match = _FLOAT_PREFIX.match(str(value))
    if match is None:
        return None
    number = float(match.group(1))
    return number if math.isfinite(number) else None


def validate_plan_form(from_rooms: Any, to_rooms: Any, rate_per_room: Any) -> PlanBody:
    start = _parse_int(from_rooms)
    if start is None or start < 1:
        raise FormValidationError("From rooms must be at least 1")
    end = _parse_int(to_rooms)
    if end is None or end < start:
        raise FormValidationError("To rooms must be >= From rooms")
    rate = _parse_float(rate_per_room)
    if rate is None or rate < 0:
        raise FormValidationError("Rate per room must be a valid number >= 0")
    return PlanBody(from_rooms=start, to_rooms=end, rate_per_room=rate)


class PlanScreen(CrudScreen[Plan]):
    form_fields = ("from_rooms", "to_rooms", "rate_per_room")

    def __init__(self, client):
        super().__init__(client)
        self.from_rooms: Any = ""
        self.to_rooms: Any = ""
        self.rate_per_room: Any = ""
        self.selected_ids: set[str] = set()
        self.is_deleting = False

    async def _fetch(self) -> list[Plan]:
        plans = await plan_service.list_plans(self.client)
        # Selection never outlives the rows it points at.
        self.selected_ids &= {plan.id for plan in plans}
        return plans

    def _reset_form(self, plan: Plan | None) -> None:
        self.from_rooms = str(plan.from_rooms) if plan else ""
        self.to_rooms = str(plan.to_rooms) if plan else ""
        self.rate_per_room = str(plan.rate_per_room) if plan else ""

    def _build_body(self) -> PlanBody:
        return validate_plan_form(self.from_rooms, self.to_rooms, self.rate_per_room)

    async def _create(self, body: PlanBody) -> None:
        await plan_service.create_plan(self.client, body)

    async def _update(self, plan: Plan, body: PlanBody) -> None:
        await plan_service.update_plan(self.client, plan.id, body)

    async def _delete(self, plan: Plan) -> None:
        await plan_service.delete_plan(self.client, plan.id)

    # ── Bulk selection ───────────────────────────────────────────────
    def toggle_selected(self, plan_id: str) -> None:
        if plan_id in self.selected_ids:
            self.selected_ids.discard(plan_id)
        else:
            self.selected_ids.add(plan_id)

    def select_all(self) -> None:
        self.selected_ids = {plan.id for plan in self.items}

    def clear_selection(self) -> None:
        self.selected_ids = set()

    async def bulk_delete(self) -> bool:
        if not self.selected_ids or self.is_deleting:
            return False

        self.is_deleting = True
        try:
            await plan_service.bulk_delete_plans(self.client, sorted(self.selected_ids))
        except BackendError as exc:
            self.alert = self._fail(exc)
            return False
        finally:
            self.is_deleting = False

        logger.info("Deleted %d plan(s)", len(self.selected_ids))
        self.alert = None
        self.clear_selection()
        await self.load()
        return True
