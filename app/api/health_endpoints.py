"""
Health Check Endpoints
---------------------
Health monitoring endpoints for the service and its dependencies.
Provides status checks for PostgreSQL and Redis.
"""

from datetime import datetime, timezone
from fastapi import APIRouter, Request
from loguru import logger

from app.models.response_models import HealthStatus, DependencyHealth
from app.core.config_manager import settings


router = APIRouter(prefix="/api/v1/health", tags=["Health"])


@router.get("/", response_model=HealthStatus)
async def health_check():
    """
    Basic health check endpoint.
    Returns service status and version information.

    Returns:
        HealthStatus: Service health status
    """
    logger.debug("Health check requested")

    return HealthStatus(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=settings.app_version,
    )


@router.get("/dependencies", response_model=DependencyHealth, status_code=200)
async def check_dependencies(request: Request):
    """
    Check health of all service dependencies.
    Tests connectivity to PostgreSQL and Redis.

    Always answers 200; an unreachable component turns the overall status to
    'unhealthy' and is reported individually.

    Returns:
        DependencyHealth: Health status of each infrastructure component
    """
    logger.debug("Dependency health check requested")

    postgresql_healthy = await _check_database(request)
    redis_healthy = await _check_redis(request)

    all_healthy = postgresql_healthy and redis_healthy
    status = "healthy" if all_healthy else "unhealthy"

    if not all_healthy:
        logger.warning(
            f"Infrastructure health check detected issues: "
            f"postgresql={postgresql_healthy}, redis={redis_healthy}"
        )
    else:
        logger.info("All infrastructure components healthy")

    return DependencyHealth(
        postgresql=postgresql_healthy,
        redis=redis_healthy,
        status=status,
        timestamp=datetime.now(timezone.utc),
    )


async def _check_database(request: Request) -> bool:
    """
    Check PostgreSQL database connectivity.

    Returns:
        bool: True if database is accessible
    """
    database_manager = getattr(request.app.state, "database_manager", None)
    if database_manager is None:
        return False
    return await database_manager.ping()


async def _check_redis(request: Request) -> bool:
    """
    Check Redis connectivity.

    Returns:
        bool: True if Redis is accessible
    """
    redis_manager = getattr(request.app.state, "redis_manager", None)
    if redis_manager is None:
        return False
    try:
        return await redis_manager.ping()
    except Exception as e:
        logger.error(f"Redis health check failed: {e}")
        return False
