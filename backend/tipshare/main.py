"""
TipShare Backend: FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app(settings) wires the store, token signer and services,
       registers middleware, exception handlers and routers.
Who:   uvicorn serves the module-level `app` (uvicorn tipshare.main:app);
       tests call create_app() with their own Settings.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  [RequestID]→[Logging]→[GZip]→[CORS]  │
    │                                                     │
    │  Routes:                                            │
    │    /auth/register  /auth/login  /tips  /health      │
    │                                                     │
    │  app.state:                                         │
    │    store ─┬─ IdentityService ── TokenSigner         │
    │           └─ TipService                             │
    │                                                     │
    │  Exception Handlers:                                │
    │    Validation/Conflict→400  Unauthorized→401        │
    │    NotFound→404  Store/unexpected→500               │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tipshare import __version__
from tipshare.config import Settings, settings as default_settings
from tipshare.database import JsonFileStore
from tipshare.exceptions import (
    ConflictError,
    NotFoundError,
    StoreError,
    TipShareError,
    UnauthorizedError,
    ValidationError,
)
from tipshare.middleware.logging import RequestLoggingMiddleware
from tipshare.middleware.request_id import RequestIDMiddleware, request_id_var
from tipshare.routes import auth, health, tips
from tipshare.security import TokenSigner
from tipshare.services.auth_service import IdentityService
from tipshare.services.tip_service import TipService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s to stdout.
    Called once from the lifespan handler, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # uvicorn's own access log duplicates RequestLoggingMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: configure logging, check security settings, probe the store.
    Shutdown: log only. The store holds no open handles between requests.
    """
    app_settings: Settings = app.state.settings
    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("TipShare Backend starting up...")

    try:
        app_settings.validate_required_for_production()
    except ValueError as e:
        # The service still starts so that local development works
        logger.warning("Configuration warning: %s", str(e))

    store = app.state.store
    logger.info("Datastore: %s (%s)", store.path, store.concurrency_policy)
    if not await store.health_check():
        logger.error("Datastore is not readable; requests touching it will fail with 500")

    logger.info("Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("TipShare Backend shut down.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(request: Request, error: str, message: str) -> Dict[str, str]:
    """
    Build the ErrorResponse payload.

    The catch-all handler runs in Starlette's ServerErrorMiddleware, outside
    RequestIDMiddleware's context, so the id is also read from request.state
    (stored in the shared ASGI scope).
    """
    rid = request_id_var.get("") or getattr(request.state, "request_id", "")
    return {"error": error, "message": message, "request_id": rid}


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the ErrorResponse format.

    Handler hierarchy:
        ValidationError         → 400 validation_error
        RequestValidationError  → 400 validation_error (malformed body)
        ConflictError           → 400 conflict
        UnauthorizedError       → 401 unauthorized (+ WWW-Authenticate)
        NotFoundError           → 404 not_found
        StarletteHTTPException  → its own status (unknown route → 404)
        StoreError              → 500 server_error (details logged only)
        TipShareError (base)    → status from its ErrorKind
        Exception (fallback)    → 500 internal_server_error
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.info("Validation error: %s", exc.message)
        return JSONResponse(
            status_code=400, content=_error_body(request, "validation_error", exc.message)
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Body that is not JSON, or fields of the wrong type."""
        logger.info("Malformed request body on %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=400,
            content=_error_body(request, "validation_error", "Request body is missing or malformed"),
        )

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return JSONResponse(status_code=400, content=_error_body(request, "conflict", exc.message))

    @app.exception_handler(UnauthorizedError)
    async def handle_unauthorized(request: Request, exc: UnauthorizedError):
        return JSONResponse(
            status_code=401,
            content=_error_body(request, "unauthorized", exc.message),
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=_error_body(request, "not_found", exc.message))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(
                status_code=404, content=_error_body(request, "not_found", "page not found")
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, "http_error", str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        """Generic message to the client; path and OS error go to the log."""
        logger.error("Store error: %s | Context: %s", exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                request, "server_error", "An internal error occurred. Please try again later."
            ),
        )

    @app.exception_handler(TipShareError)
    async def handle_app_error(request: Request, exc: TipShareError):
        logger.error("Unhandled application error: %s | Context: %s", exc.message, exc.context)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, exc.kind.value, exc.message),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all. Stack trace is logged server-side only."""
        logger.error("Unexpected error: %s", str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                request,
                "internal_server_error",
                "An unexpected error occurred. Please try again later.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Overrides the module-level settings (used by tests to
                      point at a temp data file or use a distinct secret).

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="TipShare API",
        description="Share short tips with everyone; edit and delete only your own.",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Collaborators ─────────────────────────────────────────────────────
    store = JsonFileStore(
        path=app_settings.data_file,
        concurrency_policy=app_settings.store_concurrency,
        indent=app_settings.store_indent,
    )
    signer = TokenSigner(
        secret=app_settings.jwt_secret,
        ttl_seconds=app_settings.token_ttl_seconds,
    )
    app.state.settings = app_settings
    app.state.store = store
    app.state.token_signer = signer
    app.state.identity_service = IdentityService(store=store, signer=signer)
    app.state.tip_service = TipService(store=store)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(tips.router)
    app.include_router(health.router)

    return app


app = create_app()
