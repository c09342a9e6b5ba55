"""
Admin controller — plan, group and user management.

Every route uses `Depends(require_menu_permission(...))` for enforcement:
listing needs the sub menu to be visible, mutations need the matching
add / change / delete flag.

Controllers are THIN: each request builds the screen for its
collection, drives it through the same load → form → save flow the
dashboard uses, and returns the refreshed list.  Screen failures come
back as `{message}` with the status the screen recorded.  The group
form is the exception: its screen is kept on the dashboard session so
the permission matrix can be edited one checkbox at a time.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic.alias_generators import to_snake

from pms_admin.core.backend import BackendClient
from pms_admin.core.security import get_backend_client, get_dashboard_session, get_permission_store
from pms_admin.core.sessions import DashboardSession
from pms_admin.rbac.dependencies import require_menu_permission
from pms_admin.rbac.matrix import PermissionMatrix
from pms_admin.rbac.store import PermissionStore
from pms_admin.schemas import (
    BulkDeleteBody,
    Group,
    GroupForm,
    GroupFormFields,
    GroupFormOut,
    MatrixCell,
    MatrixSectionOut,
    MatrixToggleAllBody,
    MatrixToggleBody,
    Plan,
    PlanForm,
    User,
    UserForm,
)
from pms_admin.screens.base import CrudScreen
from pms_admin.screens.groups import GroupScreen
from pms_admin.screens.plans import PlanScreen
from pms_admin.screens.users import UserScreen

router = APIRouter(prefix="/api/ui", tags=["Admin"])

PLANS = ("Subscriptions", "Plans")
GROUPS = ("Team", "Groups")
USERS = ("Team", "Users")


def get_plan_screen(client: BackendClient = Depends(get_backend_client)) -> PlanScreen:
    return PlanScreen(client)


def get_group_screen(client: BackendClient = Depends(get_backend_client)) -> GroupScreen:
    return GroupScreen(client)


def get_group_form_screen(session: DashboardSession = Depends(get_dashboard_session)) -> GroupScreen:
    return session.groups


def get_user_screen(client: BackendClient = Depends(get_backend_client)) -> UserScreen:
    return UserScreen(client)


# ── Screen helpers ───────────────────────────────────────────────────
async def _load(screen: CrudScreen) -> None:
    if not await screen.load():
        raise HTTPException(status_code=screen.error_status or 502, detail=screen.error)


async def _find(screen: CrudScreen, item_id: str, noun: str):
    await _load(screen)
    item = screen.find(item_id)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{noun} not found")
    return item


async def _save(screen: CrudScreen) -> list:
    if not await screen.save():
        raise HTTPException(status_code=screen.error_status or 400, detail=screen.form_error)
    return screen.items


async def _delete(screen: CrudScreen, item) -> list:
    if not await screen.delete(item):
        raise HTTPException(status_code=screen.error_status or 400, detail=screen.alert)
    return screen.items


# ── Plans ────────────────────────────────────────────────────────────
@router.get(
    "/plans",
    response_model=list[Plan],
    dependencies=[Depends(require_menu_permission(*PLANS))],
)
async def list_plans(screen: PlanScreen = Depends(get_plan_screen)):
    await _load(screen)
    return screen.items


@router.post(
    "/plans",
    response_model=list[Plan],
    status_code=201,
    dependencies=[Depends(require_menu_permission(*PLANS, "add"))],
)
async def create_plan(body: PlanForm, screen: PlanScreen = Depends(get_plan_screen)):
    screen.open_create()
    screen.fill(**dict(body))
    return await _save(screen)


@router.put(
    "/plans/{plan_id}",
    response_model=list[Plan],
    dependencies=[Depends(require_menu_permission(*PLANS, "change"))],
)
async def update_plan(plan_id: str, body: PlanForm, screen: PlanScreen = Depends(get_plan_screen)):
    screen.open_edit(await _find(screen, plan_id, "Plan"))
    screen.fill(**dict(body))
    return await _save(screen)


@router.delete(
    "/plans/{plan_id}",
    response_model=list[Plan],
    dependencies=[Depends(require_menu_permission(*PLANS, "delete"))],
)
async def delete_plan(plan_id: str, screen: PlanScreen = Depends(get_plan_screen)):
    return await _delete(screen, await _find(screen, plan_id, "Plan"))


@router.post(
    "/plans/bulk-delete",
    response_model=list[Plan],
    dependencies=[Depends(require_menu_permission(*PLANS, "delete"))],
)
async def bulk_delete_plans(body: BulkDeleteBody, screen: PlanScreen = Depends(get_plan_screen)):
    await _load(screen)
    for plan_id in body.ids:
        if screen.find(plan_id) is not None and plan_id not in screen.selected_ids:
            screen.toggle_selected(plan_id)
    if not screen.selected_ids:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No plans selected")
    if not await screen.bulk_delete():
        raise HTTPException(status_code=screen.error_status or 400, detail=screen.alert)
    return screen.items


# ── Groups ───────────────────────────────────────────────────────────
def _matrix_out(matrix: PermissionMatrix) -> list[MatrixSectionOut]:
    return [
        MatrixSectionOut(
            main_menu=section.main_menu,
            rows=[
                MatrixCell(
                    sub_menu=row.sub_menu,
                    url=row.url,
                    can_add=row.can_add,
                    can_change=row.can_change,
                    can_delete=row.can_delete,
                )
                for row in section.rows
            ],
        )
        for section in matrix.sections()
    ]


def _form_out(screen: GroupScreen) -> GroupFormOut:
    if not screen.is_form_open:
        return GroupFormOut(is_form_open=False)
    return GroupFormOut(
        is_form_open=True,
        editing_id=screen.editing.id if screen.editing else None,
        name=screen.name,
        description=screen.description,
        form_error=screen.form_error,
        sections=_matrix_out(screen.matrix),
    )


def _open_form(screen: GroupScreen) -> GroupScreen:
    if not screen.is_form_open:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="No group form is open")
    return screen


@router.get(
    "/groups",
    response_model=list[Group],
    dependencies=[Depends(require_menu_permission(*GROUPS))],
)
async def list_groups(screen: GroupScreen = Depends(get_group_screen)):
    await _load(screen)
    return screen.items


@router.get(
    "/groups/matrix",
    response_model=list[MatrixSectionOut],
    dependencies=[Depends(require_menu_permission(*GROUPS))],
)
async def get_group_matrix(
    group_id: str | None = Query(None, alias="groupId"),
    screen: GroupScreen = Depends(get_group_screen),
):
    """Full permission grid, blank for a new group or seeded from an existing one."""
    matrix = PermissionMatrix()
    if group_id:
        matrix = PermissionMatrix((await _find(screen, group_id, "Group")).permissions)
    return _matrix_out(matrix)


# The group form lives on the session: open it, edit fields and
# checkboxes over several requests, then save it in one backend call.
@router.get(
    "/groups/form",
    response_model=GroupFormOut,
    dependencies=[Depends(require_menu_permission(*GROUPS))],
)
async def get_group_form(screen: GroupScreen = Depends(get_group_form_screen)):
    return _form_out(screen)


@router.post(
    "/groups/form",
    response_model=GroupFormOut,
    dependencies=[Depends(require_menu_permission(*GROUPS, "add"))],
)
async def open_group_create_form(screen: GroupScreen = Depends(get_group_form_screen)):
    screen.open_create()
    return _form_out(screen)


@router.post(
    "/groups/{group_id}/form",
    response_model=GroupFormOut,
    dependencies=[Depends(require_menu_permission(*GROUPS, "change"))],
)
async def open_group_edit_form(group_id: str, screen: GroupScreen = Depends(get_group_form_screen)):
    screen.open_edit(await _find(screen, group_id, "Group"))
    return _form_out(screen)


@router.patch(
    "/groups/form",
    response_model=GroupFormOut,
    dependencies=[Depends(require_menu_permission(*GROUPS))],
)
async def update_group_form(body: GroupFormFields, screen: GroupScreen = Depends(get_group_form_screen)):
    _open_form(screen).fill(**body.model_dump(exclude_none=True))
    return _form_out(screen)


@router.post(
    "/groups/form/toggle",
    response_model=GroupFormOut,
    dependencies=[Depends(require_menu_permission(*GROUPS))],
)
async def toggle_group_permission(
    body: MatrixToggleBody,
    screen: GroupScreen = Depends(get_group_form_screen),
):
    try:
        _open_form(screen).toggle_permission(body.main_menu, body.sub_menu, to_snake(body.field))
    except LookupError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu not found")
    return _form_out(screen)


@router.post(
    "/groups/form/toggle-all",
    response_model=GroupFormOut,
    dependencies=[Depends(require_menu_permission(*GROUPS))],
)
async def toggle_all_group_permissions(
    body: MatrixToggleAllBody,
    screen: GroupScreen = Depends(get_group_form_screen),
):
    try:
        _open_form(screen).toggle_all_permissions(body.main_menu, body.sub_menu)
    except LookupError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu not found")
    return _form_out(screen)


@router.post(
    "/groups/form/save",
    response_model=list[Group],
    dependencies=[Depends(require_menu_permission(*GROUPS))],
)
async def save_group_form(
    screen: GroupScreen = Depends(get_group_form_screen),
    store: PermissionStore = Depends(get_permission_store),
):
    """Create or update, whichever the form was opened for; the form stays open on failure."""
    _open_form(screen)
    await require_menu_permission(*GROUPS, "add" if screen.editing is None else "change")(store)
    return await _save(screen)


@router.delete(
    "/groups/form",
    response_model=GroupFormOut,
    dependencies=[Depends(require_menu_permission(*GROUPS))],
)
async def close_group_form(screen: GroupScreen = Depends(get_group_form_screen)):
    screen.close_form()
    return _form_out(screen)


@router.post(
    "/groups",
    response_model=list[Group],
    status_code=201,
    dependencies=[Depends(require_menu_permission(*GROUPS, "add"))],
)
async def create_group(body: GroupForm, screen: GroupScreen = Depends(get_group_screen)):
    screen.open_create()
    screen.fill(**dict(body))
    return await _save(screen)


@router.put(
    "/groups/{group_id}",
    response_model=list[Group],
    dependencies=[Depends(require_menu_permission(*GROUPS, "change"))],
)
async def update_group(group_id: str, body: GroupForm, screen: GroupScreen = Depends(get_group_screen)):
    screen.open_edit(await _find(screen, group_id, "Group"))
    screen.fill(**dict(body))
    return await _save(screen)


@router.delete(
    "/groups/{group_id}",
    response_model=list[Group],
    dependencies=[Depends(require_menu_permission(*GROUPS, "delete"))],
)
async def delete_group(group_id: str, screen: GroupScreen = Depends(get_group_screen)):
    """Members of the group stay, with no group assigned."""
    return await _delete(screen, await _find(screen, group_id, "Group"))


# ── Users ────────────────────────────────────────────────────────────
@router.get(
    "/users",
    response_model=list[User],
    dependencies=[Depends(require_menu_permission(*USERS))],
)
async def list_users(screen: UserScreen = Depends(get_user_screen)):
    await _load(screen)
    return screen.items


@router.post(
    "/users",
    response_model=list[User],
    status_code=201,
    dependencies=[Depends(require_menu_permission(*USERS, "add"))],
)
async def create_user(body: UserForm, screen: UserScreen = Depends(get_user_screen)):
    screen.open_create()
    screen.fill(**dict(body))
    return await _save(screen)


@router.put(
    "/users/{user_id}",
    response_model=list[User],
    dependencies=[Depends(require_menu_permission(*USERS, "change"))],
)
async def update_user(user_id: str, body: UserForm, screen: UserScreen = Depends(get_user_screen)):
    """Email and password in the body are ignored; they cannot be changed here."""
    screen.open_edit(await _find(screen, user_id, "User"))
    screen.fill(**dict(body))
    return await _save(screen)


@router.delete(
    "/users/{user_id}",
    response_model=list[User],
    dependencies=[Depends(require_menu_permission(*USERS, "delete"))],
)
async def delete_user(user_id: str, screen: UserScreen = Depends(get_user_screen)):
    return await _delete(screen, await _find(screen, user_id, "User"))
