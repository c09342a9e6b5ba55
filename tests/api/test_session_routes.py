from pms_admin.rbac.catalog import MENU_CATALOG
from pms_admin.rbac.store import PERMISSIONS_URL
from tests.conftest import ADMIN_PERMISSIONS, COOKIE_NAME, USER_PERMISSIONS


def test_health(api):
    assert api.get("/health").json() == {"status": "ok"}


def test_missing_cookie_is_401(api, backend):
    api.cookies.clear()
    response = api.get("/api/ui/sidebar")
    assert response.status_code == 401
    assert response.json() == {"message": "Not authenticated"}
    assert backend.requests == []


def test_permissions_are_fetched_once_per_session(api, backend):
    backend.on("GET", PERMISSIONS_URL, json=USER_PERMISSIONS)
    first = api.get("/api/ui/session/permissions").json()
    api.get("/api/ui/sidebar")

    assert first["isAdmin"] is False
    assert first["groupName"] == "Front Desk"
    assert len(backend.sent("GET", PERMISSIONS_URL)) == 1


def test_user_sidebar(api, backend):
    backend.on("GET", PERMISSIONS_URL, json=USER_PERMISSIONS)
    sidebar = api.get("/api/ui/sidebar").json()
    assert sidebar == [
        {"title": "Team", "isActive": False, "items": [{"title": "Users", "url": "team-users"}]},
    ]


def test_admin_sidebar(api, backend):
    backend.on("GET", PERMISSIONS_URL, json=ADMIN_PERMISSIONS)
    sidebar = api.get("/api/ui/sidebar").json()
    assert [g["title"] for g in sidebar] == [e.title for e in MENU_CATALOG]
    assert sidebar[0]["isActive"] is True


def test_unauthenticated_backend_gives_empty_sidebar(api, backend):
    backend.on("GET", PERMISSIONS_URL, json={"message": "Unauthorized"}, status=401)
    assert api.get("/api/ui/sidebar").json() == []
    assert api.get("/api/ui/session/permissions").json()["state"] == "empty"


def test_rejected_cookie_is_not_kept(api, backend):
    backend.on("GET", PERMISSIONS_URL, json={"message": "Unauthorized"}, status=401)
    for i in range(5):
        api.cookies.set(COOKIE_NAME, f"forged-{i}")
        assert api.get("/api/ui/plans").status_code == 403
    assert len(api.app.state.sessions) == 0


def test_permission_check(api, backend):
    backend.on("GET", PERMISSIONS_URL, json=USER_PERMISSIONS)
    check = api.get(
        "/api/ui/session/permissions/check", params={"mainMenu": "Team", "subMenu": "Users"},
    ).json()
    assert check == {
        "mainMenu": "Team",
        "subMenu": "Users",
        "access": True,
        "add": True,
        "change": False,
        "delete": False,
    }
    groups = api.get(
        "/api/ui/session/permissions/check", params={"mainMenu": "Team", "subMenu": "Groups"},
    ).json()
    assert groups["access"] is False


def test_refetch_picks_up_new_permissions(api, backend):
    backend.on("GET", PERMISSIONS_URL, json=USER_PERMISSIONS)
    assert api.get("/api/ui/session/permissions").json()["isAdmin"] is False

    backend.on("GET", PERMISSIONS_URL, json=ADMIN_PERMISSIONS)
    snapshot = api.post("/api/ui/session/permissions/refetch").json()
    assert snapshot["isAdmin"] is True
    assert snapshot["state"] == "ready"


def test_sign_out_drops_session(api, backend):
    backend.on("GET", PERMISSIONS_URL, json=USER_PERMISSIONS)
    backend.on("POST", "/api/auth/sign-out", json={"success": True})

    response = api.post("/api/ui/session/sign-out")
    assert response.status_code == 200
    assert response.json() == {"message": "Signed out successfully"}
    assert len(api.app.state.sessions) == 0


def test_failed_sign_out_keeps_session(api, backend):
    backend.on("GET", PERMISSIONS_URL, json=USER_PERMISSIONS)
    backend.on("POST", "/api/auth/sign-out", json={"message": "Session not found"}, status=404)

    response = api.post("/api/ui/session/sign-out")
    assert response.status_code == 404
    assert response.json() == {"message": "Session not found"}
    assert len(api.app.state.sessions) == 1


def test_assistant_chat(api, backend):
    backend.on("GET", PERMISSIONS_URL, json=USER_PERMISSIONS)
    backend.on("POST", "/api/ai/chat", json={"response": "Try the Plans page."})

    history = api.post("/api/ui/assistant/chat", json={"message": "How do I price rooms?"}).json()
    assert [m["role"] for m in history] == ["user", "model"]
    assert history[1]["parts"][0]["text"] == "Try the Plans page."
    assert len(api.get("/api/ui/assistant/messages").json()) == 2
