"""
Admit Portal - Main Application Entry Point

This module builds and configures the FastAPI application including:
- Database and (optional) Redis connections
- Session store and upload storage
- Page routing and the /uploads static mount
- Exception handlers that render every error page
- Health check endpoint
"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from admit_portal.api import api_router
from admit_portal.core.config import Settings, get_settings
from admit_portal.core.database import close_db, create_engine, create_session_maker, init_db
from admit_portal.core.errors import (
    GENERIC_ERROR_MESSAGE,
    AuthRequiredError,
    ErrorResult,
    PortalError,
)
from admit_portal.core.logging import configure_logging
from admit_portal.core.redis import close_redis, init_redis
from admit_portal.core.sessions import MemorySessionStore, RedisSessionStore
from admit_portal.core.storage import LocalUploadStorage, build_storage
from admit_portal.core.templating import build_templates
from admit_portal.modules.applications.helpers import RegistrationIdGenerator

logger = logging.getLogger(__name__)


def _loop_exception_handler(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    """Log failures in background tasks without stopping the server."""
    exc = context.get("exception")
    logger.error(f"Unhandled asynchronous error: {context.get('message')}", exc_info=exc)


def _excepthook(exc_type, exc, tb) -> None:
    logger.critical("Uncaught exception, shutting down", exc_info=(exc_type, exc, tb))
    # The interpreter still exits non-zero after the default hook runs
    sys.__excepthook__(exc_type, exc, tb)


def _render_error(request: Request, result: ErrorResult) -> HTMLResponse:
    templates = request.app.state.templates
    return templates.TemplateResponse(
        request,
        "error.html",
        {"error": result},
        status_code=result.status_code,
    )


def _register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(AuthRequiredError)
    async def auth_required_handler(_request: Request, exc: AuthRequiredError):
        return RedirectResponse(url=exc.login_url, status_code=status.HTTP_303_SEE_OTHER)

    @app.exception_handler(PortalError)
    async def portal_error_handler(request: Request, exc: PortalError):
        if exc.status_code >= 500:
            logger.error(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
        return _render_error(request, exc.to_result(hide_internal=settings.is_production))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Malformed request to {request.url.path}: {exc.errors()}")
        return _render_error(
            request,
            ErrorResult(kind="validation", message="Invalid request", status_code=400),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            message = "Page not found"
            kind = "not_found"
        else:
            message = str(exc.detail)
            kind = "http"
        return _render_error(
            request,
            ErrorResult(kind=kind, message=message, status_code=exc.status_code),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        message = GENERIC_ERROR_MESSAGE
        if not settings.is_production and str(exc):
            message = str(exc)
        return _render_error(
            request,
            ErrorResult(kind="unexpected", message=message, status_code=500),
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application.

    Everything request handlers need (settings, templates, storage, session
    store, database sessions) is placed on ``app.state``.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan manager.

        Handles startup and shutdown of:
        - Database engine
        - Session store (Redis when configured)
        """
        # Startup
        configure_logging(settings.log_level)
        asyncio.get_running_loop().set_exception_handler(_loop_exception_handler)
        logger.info(f"Starting {settings.app_name} in {settings.python_env} mode...")

        engine = create_engine(settings.database_url, echo=settings.database_echo)
        try:
            await init_db(engine, create_tables=settings.auto_create_tables)
            logger.info("[OK] Database connected")
        except Exception as e:
            logger.error(f"[FAIL] Database connection failed: {e}")
            await close_db(engine)
            raise
        app.state.engine = engine
        app.state.session_maker = create_session_maker(engine)

        redis_client = None
        if settings.redis_url:
            try:
                redis_client = await init_redis(settings.redis_url)
                logger.info("[OK] Redis connected")
            except Exception as e:
                logger.error(f"[FAIL] Redis connection failed: {e}")
                if settings.is_production:
                    await close_db(engine)
                    raise
        if redis_client is not None:
            app.state.sessions = RedisSessionStore(
                redis_client, settings.secret_key, settings.session_ttl_seconds
            )
        else:
            logger.info("Using in-memory session store")
            app.state.sessions = MemorySessionStore(
                settings.secret_key, settings.session_ttl_seconds
            )

        yield  # Application runs here

        # Shutdown
        logger.info(f"Shutting down {settings.app_name}...")
        await close_redis(redis_client)
        await close_db(engine)
        logger.info("[OK] Cleanup complete")

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.templates = build_templates()
    app.state.storage = build_storage(settings)
    app.state.registration_ids = RegistrationIdGenerator(settings.registration_prefix)

    _register_exception_handlers(app, settings)
    app.include_router(api_router)

    if isinstance(app.state.storage, LocalUploadStorage):
        upload_root = Path(settings.upload_dir)
        upload_root.mkdir(parents=True, exist_ok=True)
        app.mount(
            settings.upload_url_prefix,
            StaticFiles(directory=upload_root),
            name="uploads",
        )

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint for container orchestration."""
        return {"status": "healthy"}

    return app


app = create_app()


def main() -> None:
    """Run the portal with uvicorn on the configured port."""
    settings = get_settings()
    configure_logging(settings.log_level)
    sys.excepthook = _excepthook
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
