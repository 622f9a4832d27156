"""
Image Tagger Backend — FastAPI Application Factory
====================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() wires storage, the image source,
       middleware, exception handlers and routers, and returns the app.
Who:   uvicorn (`uvicorn tagger.main:app`) and the test suite, which builds
       fresh apps around its own storage and image-source stubs.
When:  Once at server startup; the returned app serves all requests.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware:  Request ID → Logging → GZip → CORS         │
    │                                                          │
    │  Routes:      /users /login  /images  /threads  /health  │
    │                                                          │
    │  app.state:   storage (memory | sql), image_source       │
    │                                                          │
    │  Exception Handlers:                                     │
    │   Validation/Conflict→400  Unauthorized→401              │
    │   Forbidden→403  NotFound→404  ImageSource→503           │
    │   Storage→500  anything else→500                         │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging → validate settings → storage.startup()
    Shutdown: storage.shutdown() (in-memory data is discarded here)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from tagger import __version__
from tagger.config import settings
from tagger.exceptions import (
    ConflictError,
    ForbiddenError,
    ImageSourceError,
    NotFoundError,
    StorageError,
    TaggerError,
    UnauthorizedError,
    ValidationError,
)
from tagger.middleware.logging import RequestLoggingMiddleware
from tagger.middleware.request_id import RequestIDMiddleware, request_id_var
from tagger.routes import health, images, threads, users
from tagger.services.image_source import ImageSource, build_image_source
from tagger.storage import Storage, build_storage

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure root logging for the whole application.

    Format: 2024-01-15T12:00:00 [INFO] tagger.services.thread_service: message
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries that log every operation at INFO/DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Start the storage backend before serving; release it after."""
    setup_logging()
    logger.info("=" * 60)
    logger.info("Image Tagger backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")

    storage: Storage = app.state.storage
    await storage.startup()
    logger.info("Storage backend: %s", storage.name)
    if storage.in_memory:
        logger.info("State is held in memory only and is discarded on restart")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Image Tagger backend shutting down...")
    await storage.shutdown()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": message,
            "code": code,
            "request_id": request_id_var.get(""),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP responses.

    Handler hierarchy:
        ValidationError / RequestValidationError → 400 validation_error
        ConflictError                            → 400 conflict
        UnauthorizedError                        → 401 unauthorized
        ForbiddenError                           → 403 forbidden
        NotFoundError                            → 404 not_found
        ImageSourceError                         → 503 image_source_unavailable
        StorageError                             → 500 storage_error
        TaggerError (base)                       → 500 server_error
        Exception (fallback)                     → 500 internal_server_error

    Every body has the shape {"error": message, "code": ..., "request_id": ...}.
    Internal details (context dicts, stack traces) are only logged.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "validation_error", exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Malformed JSON or a missing body; reported like any other bad input."""
        logger.warning("[%s] Malformed request: %s", request_id_var.get(""), exc.errors())
        return _error_response(400, "validation_error", "Request body is missing or malformed")

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return _error_response(400, "conflict", exc.message)

    @app.exception_handler(UnauthorizedError)
    async def handle_unauthorized(request: Request, exc: UnauthorizedError):
        return _error_response(401, "unauthorized", exc.message)

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(request: Request, exc: ForbiddenError):
        logger.warning("[%s] Forbidden: %s | %s", request_id_var.get(""), exc.message, exc.context)
        return _error_response(403, "forbidden", exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc.message)

    @app.exception_handler(ImageSourceError)
    async def handle_image_source_error(request: Request, exc: ImageSourceError):
        logger.error(
            "[%s] Image source error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return _error_response(503, "image_source_unavailable", exc.message)

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        logger.error(
            "[%s] Storage error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return _error_response(500, "storage_error", exc.message)

    @app.exception_handler(TaggerError)
    async def handle_tagger_error(request: Request, exc: TaggerError):
        logger.error("[%s] Unhandled application error: %s", request_id_var.get(""), exc.message)
        return _error_response(500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True
        )
        return _error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    storage: Optional[Storage] = None,
    image_source: Optional[ImageSource] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        storage:      Backend to use (default: built from settings)
        image_source: Image source to use (default: Lorem Picsum from settings)
    """
    app = FastAPI(
        title="Image Tagger API",
        description=(
            "Collaborative image annotation: generate placeholder images and pin "
            "positioned comment threads on them."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.storage = storage or build_storage()
    app.state.image_source = image_source or build_image_source()

    # Middleware executes in reverse order of addition:
    # RequestID → Logging → GZip → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(users.router)
    app.include_router(images.router)
    app.include_router(threads.router)
    app.include_router(health.router)

    return app


app = create_app()
