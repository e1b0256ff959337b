"""
Notekeep Backend: FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app(store) wires middleware, exception handlers and routes
       around an injected NoteStore; the module-level `app` uses a
       SqlNoteStore built from settings.
Who:   Served by uvicorn (`python -m notekeep` or `uvicorn notekeep.main:app`).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────────────────┐ │
    │  │  Req ID  │→│  Logging    │→│  CORS (any origin)│ │
    │  └──────────┘ └─────────────┘ └──────────────────┘ │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────────────────────────┐ ┌─────────────────┐ │
    │  │ /notes, /notes/{id} (CRUD) │ │ GET /health     │ │
    │  └────────────────────────────┘ └─────────────────┘ │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐  │
    │  │ NotFound→404 │ OperationFailed→400 │ body→400 │  │
    │  └──────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, connect the store. A connection failure
              aborts startup and the server process exits.
    Shutdown: close the store.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from notekeep import __version__
from notekeep.config import settings
from notekeep.exceptions import (
    NotFoundError,
    OperationFailedError,
    StoreConnectionError,
)
from notekeep.middleware.logging import RequestLoggingMiddleware
from notekeep.middleware.request_id import RequestIDMiddleware, request_id_var
from notekeep.routes import health, notes
from notekeep.store.base import NoteStore
from notekeep.store.sql_store import SqlNoteStore

logger = logging.getLogger(__name__)

NOT_FOUND_BODY = {"message": "Note not found"}
FAIL_BODY = {"status": "fail"}


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout.
    Called once at startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Connect the note store before serving and close it afterwards.

    Raises:
        StoreConnectionError: the store is unreachable; uvicorn aborts
            startup and exits with a non-zero status.
    """
    setup_logging()
    store: NoteStore = app.state.note_store
    logger.info("Notekeep %s starting up...", __version__)

    try:
        await store.connect()
    except StoreConnectionError as e:
        logger.error("Could not connect to the note store: %s | Context: %s", e.message, e.context)
        raise
    logger.info("Successfully connected to the note store")
    logger.info("Server is listening on port %d", settings.server_port)

    yield

    logger.info("Notekeep shutting down...")
    await store.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the API's fixed error shapes.

    Handler hierarchy:
        NotFoundError           → 404 {"message": "Note not found"}
        OperationFailedError    → 400 {"status": "fail"}
        RequestValidationError  → 400 {"status": "fail"} (malformed/invalid body)
        Exception (fallback)    → 400 {"status": "fail"}

    Details are logged server-side only.
    """

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = request_id_var.get("")
        logger.info("[%s] %s", rid, exc.message)
        return JSONResponse(status_code=404, content=NOT_FOUND_BODY)

    @app.exception_handler(OperationFailedError)
    async def handle_operation_failed(request: Request, exc: OperationFailedError):
        rid = request_id_var.get("")
        logger.error(
            "[%s] %s failed: %s | Context: %s",
            rid,
            type(exc).__name__,
            exc.message,
            exc.context,
        )
        return JSONResponse(status_code=400, content=FAIL_BODY)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        logger.warning(
            "[%s] Invalid request to %s %s: %s",
            rid,
            request.method,
            request.url.path,
            exc.errors(),
        )
        return JSONResponse(status_code=400, content=FAIL_BODY)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        # Runs outside the middleware stack, so its headers are set here
        rid = (
            getattr(request.state, "request_id", None)
            or request_id_var.get("")
            or request.headers.get("X-Request-ID", "")
        )
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=exc)
        headers = {"X-Request-ID": rid} if rid else {}
        if "*" in settings.cors_origins_list:
            headers["Access-Control-Allow-Origin"] = "*"
        return JSONResponse(status_code=400, content=FAIL_BODY, headers=headers)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(store: Optional[NoteStore] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: note persistence backend. Defaults to a SqlNoteStore for
            `settings.database_url`.

    Returns:
        A FastAPI instance whose `state.note_store` is `store`.
    """
    app = FastAPI(
        title="Notekeep API",
        description="CRUD service for notes with a process health endpoint.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.note_store = store if store is not None else SqlNoteStore(settings.database_url)

    # Added in reverse execution order: RequestID runs first, CORS last
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(notes.router)
    app.include_router(health.router)

    return app


# uvicorn imports `notekeep.main:app`
app = create_app()
