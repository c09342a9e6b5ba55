import asyncio

import httpx
import pytest

from pms_admin.rbac.store import PERMISSIONS_URL, PermissionStore, StoreState
from pms_admin.schemas import SubMenuPermissions
from tests.conftest import ADMIN_PERMISSIONS, COOKIE_NAME, TOKEN, USER_PERMISSIONS


async def test_fetch_populates_store(backend, client):
    backend.on("GET", PERMISSIONS_URL, json=USER_PERMISSIONS)
    store = PermissionStore(client)
    assert store.state is StoreState.UNINITIALIZED

    data = await store.fetch_permissions()

    assert data is not None and data.group_name == "Front Desk"
    assert store.state is StoreState.READY
    assert store.is_loading is False
    assert store.is_admin is False
    assert store.has_menu_access("Team") is True
    assert store.has_menu_access("Team", "Groups") is False
    assert store.get_permissions("Team", "Users") == SubMenuPermissions(add=True)


async def test_fetch_forwards_session_cookie(backend, client):
    backend.on("GET", PERMISSIONS_URL, json=USER_PERMISSIONS)
    await PermissionStore(client).fetch_permissions()
    request = backend.sent("GET", PERMISSIONS_URL)[0]
    assert request.headers["cookie"] == f"{COOKIE_NAME}={TOKEN}"


async def test_network_error_leaves_store_empty(backend, client):
    def fail(request):
        raise httpx.ConnectError("connection refused", request=request)

    backend.on("GET", PERMISSIONS_URL, handler=fail)
    store = PermissionStore(client)

    assert await store.fetch_permissions() is None
    assert store.data is None
    assert store.is_loading is False
    assert store.state is StoreState.EMPTY
    assert store.has_menu_access("Team") is False


async def test_unauthenticated_leaves_store_empty(backend, client):
    backend.on("GET", PERMISSIONS_URL, json={"message": "Unauthorized"}, status=401)
    store = PermissionStore(client)
    await store.fetch_permissions()
    assert store.data is None
    assert store.get_permissions("Team", "Users") == SubMenuPermissions()


async def test_malformed_payload_leaves_store_empty(backend, client):
    backend.on("GET", PERMISSIONS_URL, json={"menus": "not-a-list"})
    store = PermissionStore(client)
    await store.fetch_permissions()
    assert store.data is None
    assert store.state is StoreState.EMPTY


async def test_refetch_replaces_data(backend, client):
    backend.on("GET", PERMISSIONS_URL, json=USER_PERMISSIONS)
    store = PermissionStore(client)
    await store.fetch_permissions()

    backend.on("GET", PERMISSIONS_URL, json=ADMIN_PERMISSIONS)
    await store.fetch_permissions()

    assert store.is_admin is True
    assert store.get_permissions("Reports", "Analytics").delete is True


async def test_ensure_loaded_fetches_once(backend, client):
    backend.on("GET", PERMISSIONS_URL, json=USER_PERMISSIONS)
    store = PermissionStore(client)
    await store.ensure_loaded()
    await store.ensure_loaded()
    assert len(backend.sent("GET", PERMISSIONS_URL)) == 1


async def test_stale_response_is_discarded(backend, client):
    release_first = asyncio.Event()
    calls = []

    async def respond(request):
        calls.append(request)
        if len(calls) == 1:
            await release_first.wait()
            return httpx.Response(200, json=USER_PERMISSIONS)
        return httpx.Response(200, json=ADMIN_PERMISSIONS)

    backend.on("GET", PERMISSIONS_URL, handler=respond)
    store = PermissionStore(client)

    first = asyncio.create_task(store.fetch_permissions())
    while not calls:
        await asyncio.sleep(0)
    await store.fetch_permissions()
    assert store.is_admin is True

    release_first.set()
    await first

    assert store.is_admin is True
    assert store.state is StoreState.READY


async def test_clear_resets_store(backend, client):
    backend.on("GET", PERMISSIONS_URL, json=ADMIN_PERMISSIONS)
    store = PermissionStore(client)
    await store.fetch_permissions()

    store.clear()

    assert store.data is None
    assert store.state is StoreState.UNINITIALIZED
    assert store.is_admin is False


async def test_snapshot(backend, client):
    backend.on("GET", PERMISSIONS_URL, json=USER_PERMISSIONS)
    store = PermissionStore(client)
    await store.fetch_permissions()
    snapshot = store.snapshot().model_dump(by_alias=True)
    assert snapshot == {
        "state": "ready",
        "isLoading": False,
        "isAdmin": False,
        "role": "user",
        "groupId": "g-1",
        "groupName": "Front Desk",
    }


async def test_ensure_loaded_waits_for_fetch_in_flight(backend, client):
    release = asyncio.Event()

    async def respond(request):
        await release.wait()
        return httpx.Response(200, json=USER_PERMISSIONS)

    backend.on("GET", PERMISSIONS_URL, handler=respond)
    store = PermissionStore(client)

    first = asyncio.create_task(store.ensure_loaded())
    while not backend.requests:
        await asyncio.sleep(0)
    assert store.is_loading is True

    second = asyncio.create_task(store.ensure_loaded())
    await asyncio.sleep(0)
    assert not second.done()

    release.set()
    await asyncio.gather(first, second)

    assert store.has_menu_access("Team", "Users") is True
    assert len(backend.sent("GET", PERMISSIONS_URL)) == 1


async def test_clear_releases_waiters(backend, client):
    release = asyncio.Event()

    async def respond(request):
        await release.wait()
        return httpx.Response(200, json=USER_PERMISSIONS)

    backend.on("GET", PERMISSIONS_URL, handler=respond)
    store = PermissionStore(client)

    fetch = asyncio.create_task(store.fetch_permissions())
    while not backend.requests:
        await asyncio.sleep(0)
    waiter = asyncio.create_task(store.ensure_loaded())
    await asyncio.sleep(0)

    store.clear()
    await waiter
    release.set()
    await fetch

    assert store.data is None
    assert store.state is StoreState.UNINITIALIZED


@pytest.mark.parametrize("status, rejected", [(401, True), (403, True), (500, False)])
async def test_rejection_is_recorded(backend, client, status, rejected):
    backend.on("GET", PERMISSIONS_URL, json={"message": "nope"}, status=status)
    store = PermissionStore(client)
    await store.fetch_permissions()
    assert store.error_status == status
    assert store.is_rejected is rejected
