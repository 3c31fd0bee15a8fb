"""
Unit Tests for Startup Diagnostics
==================================
Unit tests for the pre-flight checks and the application lifespan that runs
them.

Test Coverage:
- ServiceStatus dataclass
- Failure reporting and service info logging
- Signing secret, database and Redis verification
- Lifespan: fatal configuration errors, degraded Redis, shutdown cleanup
"""

import pytest
from unittest.mock import patch, MagicMock, AsyncMock
from fastapi.testclient import TestClient

from app.app import create_app
from app.core.config_manager import settings
from app.core.exceptions import ConfigurationError
from app.core.startup_diagnostics import (
    ServiceStatus,
    display_service_info,
    report_startup_failure,
    verify_database_connectivity,
    verify_redis_connectivity,
    verify_signing_secret,
)


def pinging(result: bool, initialized: bool = True):
    manager = MagicMock()
    manager.is_initialized = initialized
    manager.initialize = AsyncMock()
    manager.ping = AsyncMock(return_value=result)
    manager.close = AsyncMock()
    return manager


class TestServiceStatus:
    def test_service_status_basic_creation(self):
        service = ServiceStatus(name="TestService", status="connected")

        assert service.required is True
        assert service.error_message is None
        assert service.suggestion is None
        assert service.connection_details is None


class TestReporting:
    @patch("app.core.startup_diagnostics.logger")
    def test_report_startup_failure(self, mock_logger):
        report_startup_failure(
            [
                ServiceStatus(
                    name="PostgreSQL",
                    status="failed",
                    error_message="Connection test query failed",
                    suggestion="Check credentials",
                    connection_details={"host": "db", "port": "5432"},
                )
            ]
        )

        messages = [call.args[0] for call in mock_logger.critical.call_args_list]
        assert messages == [
            "[FATAL ERROR] PostgreSQL: Connection test query failed (host=db, port=5432)",
            ">> Suggestion: Check credentials",
        ]

    @patch("app.core.startup_diagnostics.logger")
    def test_display_service_info(self, mock_logger):
        display_service_info()

        messages = " ".join(call.args[0] for call in mock_logger.info.call_args_list)
        assert "/api/docs" in messages
        assert "/api/v1/health/" in messages
        assert settings.database_name in messages


class TestVerification:
    def test_signing_secret_present(self):
        assert verify_signing_secret().status == "connected"

    def test_signing_secret_missing(self):
        with patch.object(settings, "jwt_secret_key", None):
            status = verify_signing_secret()

        assert status.status == "failed"
        assert status.error_message == "JWT_SECRET_KEY environment variable is required"

    async def test_database_connected(self):
        status = await verify_database_connectivity(pinging(True))

        assert status.status == "connected"
        assert status.connection_details["database"] == settings.database_name

    async def test_database_failed(self):
        status = await verify_database_connectivity(pinging(False))

        assert status.status == "failed"
        assert status.required is True
        assert status.suggestion

    async def test_redis_is_optional(self):
        connected = await verify_redis_connectivity(pinging(True))
        failed = await verify_redis_connectivity(pinging(False))

        assert connected.status == "connected"
        assert failed.status == "failed"
        assert failed.required is False


# ============================================================================
# LIFESPAN
# ============================================================================


class TestLifespan:
    """Startup checks run when the application starts serving."""

    def test_missing_secret_stops_startup(self):
        database_manager = pinging(True)
        app = create_app(database_manager=database_manager)

        with patch.object(settings, "jwt_secret_key", None):
            with pytest.raises(ConfigurationError, match="JWT_SECRET_KEY"):
                with TestClient(app):
                    pass

        database_manager.ping.assert_not_awaited()

    def test_unreachable_database_stops_startup(self):
        database_manager = pinging(False)
        app = create_app(database_manager=database_manager)

        with pytest.raises(ConfigurationError, match="PostgreSQL is not reachable"):
            with TestClient(app):
                pass

        database_manager.close.assert_awaited_once()

    def test_uninitialized_database_is_initialized(self):
        database_manager = pinging(True, initialized=False)
        app = create_app(database_manager=database_manager)

        with TestClient(app):
            pass

        database_manager.initialize.assert_awaited_once_with()

    def test_unreachable_redis_degrades(self):
        database_manager = pinging(True)
        redis_manager = pinging(False, initialized=False)
        redis_manager.initialize = MagicMock()
        app = create_app(database_manager=database_manager, redis=redis_manager)

        with TestClient(app) as client:
            assert client.get("/").json()["status"] == "running"

        redis_manager.initialize.assert_called_once_with()
        database_manager.close.assert_awaited_once()
        redis_manager.close.assert_awaited_once()

    def test_initialized_redis_is_reused(self):
        redis_manager = pinging(True)
        redis_manager.initialize = MagicMock()
        app = create_app(database_manager=pinging(True), redis=redis_manager)

        with TestClient(app):
            pass

        redis_manager.initialize.assert_not_called()
        redis_manager.ping.assert_awaited_once()
