"""
AI Hub API Server

Entry point for the FastAPI application.
"""

from __future__ import annotations

from typing import Optional

import redis.asyncio as redis
import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from aihub import __version__
from aihub.api.auth import router as auth_router
from aihub.api.v1 import router as api_v1_router
from aihub.core.config import DatabaseConfig, Settings, get_settings
from aihub.core.database import Database, create_database
from aihub.core.errors import register_error_handlers
from aihub.core.logging import configure_logging
from aihub.core.middleware import (
    RouteFilterPolicy,
    SecurityHeadersMiddleware,
    SessionCookieGateMiddleware,
)
from aihub.core.redis import close_redis, create_redis

log = structlog.get_logger()


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    redis_client: Optional[redis.Redis] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    if database is None:
        database = create_database(DatabaseConfig.from_settings(settings))
    if redis_client is None and settings.session_backend == "redis":
        redis_client = create_redis(settings.redis_url)

    app = FastAPI(
        title="AI Hub",
        description="Multi-tenant AI assistant platform.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.settings = settings
    app.state.database = database
    app.state.redis = redis_client
    app.dependency_overrides[get_settings] = lambda: settings

    register_error_handlers(app)

    # Middleware (order matters: last added is outermost)
    app.add_middleware(
        SessionCookieGateMiddleware,
        policy=RouteFilterPolicy.from_settings(settings),
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization", "X-Org-Id"],
    )

    # Auth routes (public)
    app.include_router(auth_router, prefix="/api/auth", tags=["Authentication"])

    # API routes
    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get("/health", tags=["System"])
    async def health_check():
        """Liveness check endpoint."""
        return {"status": "ok"}

    @app.get("/ready", tags=["System"])
    async def readiness_check():
        """Readiness check endpoint: the database must answer."""
        try:
            async with database.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            log.warning("ready.database_unavailable", error=str(exc))
            return JSONResponse(status_code=503, content={"status": "unavailable"})
        return {"status": "ready"}

    @app.on_event("startup")
    async def on_startup():
        configure_logging(settings.log_level, settings.log_format)
        log.info(
            "AI Hub starting",
            environment=settings.environment,
            session_backend=settings.session_backend,
        )

    @app.on_event("shutdown")
    async def on_shutdown():
        log.info("AI Hub shutting down")
        await database.dispose()
        await close_redis(redis_client)

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "aihub.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level,
    )
