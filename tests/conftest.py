"""
Pytest configuration for the dealer backend tests.
Sets up the Python path, test environment defaults and common fixtures.

Storage-backed tests run against an in-memory SQLite database created from the
same table metadata the service uses against PostgreSQL.
"""

import os
import sys
from pathlib import Path
from uuid import uuid4

import pytest

# Add the project root to Python path for all tests
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set up test environment variables before app.core.config_manager is imported
os.environ.setdefault("DATABASE_HOST", "localhost")
os.environ.setdefault("DATABASE_PORT", "5432")
os.environ.setdefault("DATABASE_NAME", "carobar_test")
os.environ.setdefault("DATABASE_USER", "myuser")
os.environ.setdefault("DATABASE_PASSWORD", "mypassword")
os.environ.setdefault("REDIS_HOST", "localhost")
os.environ.setdefault("REDIS_PORT", "6379")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-dealer-backend")
os.environ.setdefault("CACHE_ENABLED", "false")
os.environ.setdefault("DEBUG", "true")

from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.auth.jwt_utils import create_access_token, create_refresh_token  # noqa: E402
from app.auth.models import UserIdentity  # noqa: E402
from app.core.database_connection import DatabaseManager  # noqa: E402
from app.db.tables import metadata  # noqa: E402


# ============================================================================
# STORAGE FIXTURES
# ============================================================================


@pytest.fixture
async def database_manager():
    """DatabaseManager bound to a fresh in-memory SQLite schema."""
    manager = DatabaseManager()
    await manager.initialize(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with manager.engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield manager

    await manager.close()


# ============================================================================
# IDENTITY FIXTURES FOR TESTING
# ============================================================================


@pytest.fixture
def company_a() -> str:
    return str(uuid4())


@pytest.fixture
def company_b() -> str:
    return str(uuid4())


def build_identity(company_id: str, role_id: str = "CU", user_id: str = "staff1") -> UserIdentity:
    """Identity for a user of the given company and role."""
    role_names = {"SA": "Super Admin", "CA": "Company Manager", "CU": "Company User"}
    return UserIdentity(
        user_id=user_id,
        user_name=f"{user_id.title()} Tester",
        email=f"{user_id}@example.com",
        company_id=company_id,
        company_name="Carobar Motors",
        role_id=role_id,
        role_name=role_names.get(role_id, role_id),
    )


@pytest.fixture
def token_for():
    """
    Factory returning a signed access token.

    Usage:
        token = token_for(company_id, "CA")
    """

    def _token_for(company_id: str, role_id: str = "CU", user_id: str = "staff1") -> str:
        return create_access_token(build_identity(company_id, role_id, user_id))

    return _token_for


@pytest.fixture
def auth_headers(token_for):
    """Factory returning Bearer headers for a company and role."""

    def _auth_headers(company_id: str, role_id: str = "CU", user_id: str = "staff1") -> dict:
        return {"Authorization": f"Bearer {token_for(company_id, role_id, user_id)}"}

    return _auth_headers


@pytest.fixture
def refresh_token_for():
    def _refresh_token_for(company_id: str, user_id: str = "staff1") -> str:
        return create_refresh_token(user_id, company_id)

    return _refresh_token_for


# ============================================================================
# APPLICATION FIXTURES
# ============================================================================


@pytest.fixture
def app(database_manager):
    """Application wired to the SQLite database manager, without a cache."""
    from app.app import create_app

    return create_app(database_manager=database_manager)


@pytest.fixture
async def client(app):
    """HTTP client calling the application in process."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://testserver"
    ) as http_client:
        yield http_client
