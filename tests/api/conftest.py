import httpx
import pytest
from fastapi.testclient import TestClient

from pms_admin.core.config import Settings
from pms_admin.main import create_app
from tests.conftest import BACKEND_URL, COOKIE_NAME, TOKEN


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, API_BASE_URL=BACKEND_URL, SESSION_COOKIE_NAME=COOKIE_NAME)


@pytest.fixture
def api(backend, settings):
    app = create_app(settings, transport=httpx.MockTransport(backend))
    with TestClient(app) as client:
        client.cookies.set(COOKIE_NAME, TOKEN)
        yield client
