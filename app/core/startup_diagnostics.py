"""
Startup Diagnostics
-------------------
Pre-flight checks run by the application lifespan: signing secret, PostgreSQL
and Redis. Each check reports a ServiceStatus; failures of required services
stop startup, an unreachable Redis only disables caching.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from loguru import logger

from app.core.config_manager import settings
from app.core.database_connection import DatabaseManager
from app.core.redis_connection import RedisManager


@dataclass
class ServiceStatus:
    """Track service connection status with detailed error information."""

    name: str
    status: str  # "connected", "failed", "skipped"
    required: bool = True
    error_message: Optional[str] = None
    suggestion: Optional[str] = None
    connection_details: Optional[Dict[str, str]] = None


def report_startup_failure(failed_services: List[ServiceStatus]) -> None:
    """Log every failed check with its suggestion."""
    for service in failed_services:
        details = ""
        if service.connection_details:
            details = ", ".join(
                f"{key}={value}" for key, value in service.connection_details.items()
            )
        logger.critical(
            f"[FATAL ERROR] {service.name}: {service.error_message}"
            + (f" ({details})" if details else "")
        )
        if service.suggestion:
            logger.critical(f">> Suggestion: {service.suggestion}")


def display_service_info() -> None:
    """Log the service endpoints once startup has succeeded."""
    local_api_base = f"http://localhost:{settings.fastapi_port}"
    logger.info(f"Main API:          {local_api_base}/")
    logger.info(f"API Documentation: {local_api_base}/api/docs")
    logger.info(f"Health Check:      {local_api_base}/api/v1/health/")
    logger.info(
        f"PostgreSQL:        {settings.database_host}:{settings.database_port}/{settings.database_name}"
    )
    logger.info(f"Redis:             {settings.redis_host}:{settings.redis_port}/{settings.redis_db}")


def verify_signing_secret() -> ServiceStatus:
    """Session tokens cannot be issued or checked without JWT_SECRET_KEY."""
    if not settings.jwt_secret_key:
        return ServiceStatus(
            name="JWT signing secret",
            status="failed",
            error_message="JWT_SECRET_KEY environment variable is required",
            suggestion="Set JWT_SECRET_KEY in the environment or .env file",
        )
    return ServiceStatus(name="JWT signing secret", status="connected")


async def verify_database_connectivity(database_manager: DatabaseManager) -> ServiceStatus:
    """Verify database connectivity with detailed error reporting."""
    details = {
        "host": settings.database_host,
        "port": str(settings.database_port),
        "database": settings.database_name,
    }
    if await database_manager.ping():
        return ServiceStatus(
            name="PostgreSQL", status="connected", connection_details=details
        )
    return ServiceStatus(
        name="PostgreSQL",
        status="failed",
        error_message="Connection test query failed",
        suggestion="Check database configuration in .env file and verify credentials",
        connection_details=details,
    )


async def verify_redis_connectivity(redis_manager: RedisManager) -> ServiceStatus:
    """Verify Redis connectivity. Redis only backs the cache, so it is optional."""
    details = {
        "host": settings.redis_host,
        "port": str(settings.redis_port),
        "database": str(settings.redis_db),
    }
    if await redis_manager.ping():
        return ServiceStatus(
            name="Redis", status="connected", required=False, connection_details=details
        )
    return ServiceStatus(
        name="Redis",
        status="failed",
        required=False,
        error_message="Redis server did not respond to ping",
        suggestion=f"Start Redis or check if it's running on {settings.redis_host}:{settings.redis_port}",
        connection_details=details,
    )
