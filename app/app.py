"""
FastAPI Application Entry Point
-------------------------------
Application factory and the default application instance.
Registers routers, middleware, error handlers and lifecycle handlers.

The database manager, Redis manager and reference-data cache are created once
per process and handed to ``create_app``; tests pass their own.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from app.core import logger_setup  # noqa: F401  (configures loguru on import)
from app.core.cache import ReferenceDataCache
from app.core.config_manager import settings
from app.core.database_connection import DatabaseManager, db_manager
from app.core.exceptions import ConfigurationError, register_exception_handlers
from app.core.redis_connection import RedisManager, redis_manager
from app.core.startup_diagnostics import (
    display_service_info,
    report_startup_failure,
    verify_database_connectivity,
    verify_redis_connectivity,
    verify_signing_secret,
)
from app.api import health_endpoints
from app.api.auth_endpoints import router as auth_router
from app.api.reference_data_endpoints import (
    build_reference_data_controllers,
    build_reference_data_router,
)


def _build_lifespan(
    database_manager: DatabaseManager, redis: Optional[RedisManager]
):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Verify configuration and dependencies, then serve; clean up on exit."""
        logger.info(f"Starting {settings.app_name} v{settings.app_version}")
        logger.info(f"Debug mode: {settings.debug}")

        secret_status = verify_signing_secret()
        if secret_status.status == "failed":
            report_startup_failure([secret_status])
            raise ConfigurationError(secret_status.error_message)

        if not database_manager.is_initialized:
            await database_manager.initialize()
        postgres_status = await verify_database_connectivity(database_manager)
        if postgres_status.status == "failed":
            report_startup_failure([postgres_status])
            await database_manager.close()
            raise ConfigurationError("PostgreSQL is not reachable")
        logger.info("[SUCCESS] PostgreSQL connected and ready")

        if redis is not None:
            if not redis.is_initialized:
                redis.initialize()
            redis_status = await verify_redis_connectivity(redis)
            if redis_status.status == "connected":
                logger.info("[SUCCESS] Redis connected and ready")
            else:
                logger.warning(
                    f"[DEGRADED] Redis: {redis_status.error_message}. Reference data will not be cached"
                )

        display_service_info()
        logger.info("[SUCCESS] Application startup complete")

        yield

        logger.info("Shutting down application")
        try:
            await database_manager.close()
            if redis is not None:
                await redis.close()
            logger.info("Application shutdown complete")
        except Exception as e:
            logger.error(f"Shutdown error: {e}")

    return lifespan


def create_app(
    database_manager: Optional[DatabaseManager] = None,
    redis: Optional[RedisManager] = None,
    cache: Optional[ReferenceDataCache] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        database_manager: Storage manager (defaults to the process-wide one)
        redis: Redis manager backing the cache (defaults to the process-wide
            one when caching is enabled)
        cache: Reference-data cache; built over ``redis`` when caching is
            enabled and none is given

    Returns:
        FastAPI: Configured application
    """
    database_manager = database_manager or db_manager
    if settings.cache_enabled:
        redis = redis or redis_manager
        cache = cache or ReferenceDataCache(redis)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Multi-tenant dealer reference data and session API",
        lifespan=_build_lifespan(database_manager, redis),
        debug=settings.debug,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        swagger_ui_parameters={"displayRequestDuration": True},
    )
    app.state.database_manager = database_manager
    app.state.redis_manager = redis
    app.state.cache = cache

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    controllers = build_reference_data_controllers(database_manager, cache)
    app.state.reference_data_controllers = controllers

    app.include_router(health_endpoints.router)
    app.include_router(auth_router)
    app.include_router(build_reference_data_router(controllers))

    @app.get("/")
    async def root():
        """Root endpoint with basic information."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "status": "running",
            "docs": "/api/docs",
            "redoc": "/api/redoc",
            "openapi": "/api/openapi.json",
        }

    return app


# Default application used by uvicorn ("app.app:app")
app = create_app()
