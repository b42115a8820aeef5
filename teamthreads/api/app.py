"""FastAPI application factory with async lifespan management."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncEngine

from teamthreads.db.engine import get_engine
from teamthreads.errors import TeamThreadsError
from teamthreads.observability import configure_logging
from teamthreads.settings import load_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage FastAPI application lifespan (startup and shutdown).

    Loads settings, configures logging and creates the database engine (if
    database_url is configured). Resources are stored in app.state for
    access by routes and dependencies.

    Args:
        app: FastAPI application instance.

    Yields:
        None during the application runtime (between startup and shutdown).
    """
    settings = load_settings()
    app.state.settings = settings
    configure_logging(settings, app)
    logger.info("app_startup: initializing resources")

    # Every route past /health needs a verified bearer token
    if not settings.jwt_secret_key:
        raise RuntimeError(
            "JWT_SECRET_KEY must be set in environment or .env file. "
            "Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(64))\""
        )

    engine: Optional[AsyncEngine] = None
    if settings.database_url:
        try:
            engine = await get_engine(
                database_url=settings.database_url,
                pool_size=settings.database_pool_size,
                pool_overflow=settings.database_pool_overflow,
            )
            app.state.engine = engine
            logger.info(f"db_engine_initialized: dialect={engine.dialect.name}")
        except Exception as e:
            logger.exception(f"db_engine_init_error: error={str(e)}")
            app.state.engine = None
    else:
        app.state.engine = None
        logger.info("db_engine_skipped: database_url not configured")

    logger.info("app_startup_complete: resources initialized")
    yield

    logger.info("app_shutdown: cleaning up resources")
    if engine is not None:
        try:
            await engine.dispose()
            logger.info("db_engine_disposed: connection pool closed")
        except Exception as e:
            logger.warning(f"db_engine_dispose_error: error={str(e)}")

    logger.info("app_shutdown_complete: all resources cleaned up")


async def _domain_error_handler(request: Request, exc: TeamThreadsError) -> JSONResponse:
    from teamthreads.api.middleware.error_handler import domain_error_response

    request_id = getattr(request.state, "request_id", None)
    logger.warning(
        f"domain_error: path={request.url.path}, code={exc.code}, "
        f"status={exc.http_status}, request_id={request_id}"
    )
    return domain_error_response(exc, request_id)


def create_app() -> FastAPI:
    """Create and configure FastAPI application instance.

    Returns:
        Configured FastAPI application with lifespan, CORS, routes, and middleware.
    """
    settings = load_settings()

    # Interactive docs and the schema endpoint are not served in production
    docs_enabled = settings.app_env.lower() != "production"

    app = FastAPI(
        title="Team Threads API",
        version="0.1.0",
        description="Team-scoped authorization and threaded messaging",
        lifespan=lifespan,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )

    # Starlette executes middleware in LIFO order (last registered = first to run).
    # Execution order: CORS -> ErrorHandler -> RequestContext

    from teamthreads.api.middleware.request_context import RequestContextMiddleware

    app.add_middleware(RequestContextMiddleware)

    from teamthreads.api.middleware.error_handler import error_handling_middleware

    app.middleware("http")(error_handling_middleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Domain errors raised in routes are rendered here, before they unwind the
    # middleware stack; the error middleware stays the catch-all.
    app.add_exception_handler(TeamThreadsError, _domain_error_handler)

    from teamthreads.api.routers import (
        health_router,
        me_router,
        messages_router,
        threads_router,
    )

    app.include_router(health_router, tags=["health"])
    app.include_router(me_router, tags=["me"])
    app.include_router(threads_router, tags=["threads"])
    app.include_router(messages_router, tags=["messages"])

    logger.info(
        f"app_created: title=Team Threads API, version=0.1.0, routers=4, env={settings.app_env}, "
        "middleware=cors,error_handler,request_context"
    )
    return app
