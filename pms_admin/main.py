"""
FastAPI application factory.

Assembles the app, registers all routers, and wires up lifecycle
events.  The lifespan owns the one shared `httpx.AsyncClient` every
dashboard session talks to the PMS backend through; the session
registry is built on top of it and injected into routes via
`Depends`, never imported as a global.
"""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pms_admin.controllers.admin_controller import router as admin_router
from pms_admin.controllers.assistant_controller import router as assistant_router
from pms_admin.controllers.session_controller import router as session_router
from pms_admin.core.config import Settings, settings as default_settings
from pms_admin.core.sessions import SessionRegistry

logging.basicConfig(
    level=logging.DEBUG if default_settings.DEBUG else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        http = httpx.AsyncClient(
            base_url=settings.API_BASE_URL,
            timeout=settings.REQUEST_TIMEOUT_SECONDS,
            transport=transport,
        )
        app.state.sessions = SessionRegistry(
            http,
            settings.SESSION_COOKIE_NAME,
            max_sessions=settings.SESSION_MAX_ENTRIES,
            idle_seconds=settings.SESSION_IDLE_SECONDS,
        )
        logger.info("Backend client ready for %s", settings.API_BASE_URL)
        try:
            yield
        finally:
            await http.aclose()
            logger.info("Backend client closed.")

    app = FastAPI(
        title=settings.APP_NAME,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # ── Error shape: always {message} ────────────────────────────────
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request")
        return JSONResponse(
            status_code=422,
            content={"message": f"{field}: {message}" if field else message},
        )

    # ── Register routers ─────────────────────────────────────────────
    app.include_router(session_router)
    app.include_router(admin_router)
    app.include_router(assistant_router)

    # ── Health check ─────────────────────────────────────────────────
    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
