"""
Application configuration.

All settings are loaded from environment variables (or a .env file).
Pydantic-settings validates and types every value at startup, so
misconfiguration fails fast instead of at runtime.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── App ──────────────────────────────────────────────────────────
    APP_NAME: str = "PMS Admin"
    DEBUG: bool = False

    # ── PMS backend ──────────────────────────────────────────────────
    # Every admin screen and the permission store talk to this API.
    API_BASE_URL: str = "http://localhost:3000"
    REQUEST_TIMEOUT_SECONDS: float = 10.0

    # ── Auth provider ────────────────────────────────────────────────
    # Empty means the auth routes are served by the PMS backend itself.
    AUTH_BASE_URL: str = ""
    SESSION_COOKIE_NAME: str = "better-auth.session_token"
    # Dashboard sessions held in memory; idle ones are dropped.
    SESSION_MAX_ENTRIES: int = 1000
    SESSION_IDLE_SECONDS: float = 1800.0

    # ── Navigation ───────────────────────────────────────────────────
    DEFAULT_MENU: str = "Dashboard"

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def auth_base_url(self) -> str:
        """Fall back to the backend URL when no separate auth host is set."""
        return self.AUTH_BASE_URL or self.API_BASE_URL


settings = Settings()
