"""
Authentication Module
---------------------
Cookie/Bearer JWT sessions with role-based access control for the dealer backend.

Core Components:
- roles: Role enum, named role sets and role helpers
- models: Identity and token payload models
- jwt_utils: Token service (create, verify, refresh)
- dependencies: Request guards for endpoint protection

Usage:
    from app.auth import protect, ALL_ROLES

    list_banks = protect(list_handler, required_roles=ALL_ROLES)
"""

from app.auth.dependencies import (
    AuthGuard,
    get_auth_user,
    protect,
    require_admin_only,
    require_admin_or_manager,
    require_any_user,
    require_role,
)
from app.auth.jwt_utils import (
    create_access_token,
    create_refresh_token,
    get_token_expiration_seconds,
    parse_token_lifetime,
    refresh_access_token,
    verify_token,
)
from app.auth.models import AuthTokenPayload, RefreshTokenPayload, UserIdentity
from app.auth.roles import (
    ADMIN_ONLY,
    ALL_ROLES,
    COMPANY_USERS,
    MANAGEMENT,
    PUBLIC_ROLES,
    Role,
)

__all__ = [
    # Guards
    "AuthGuard",
    "get_auth_user",
    "protect",
    "require_admin_only",
    "require_admin_or_manager",
    "require_any_user",
    "require_role",
    # Token service
    "create_access_token",
    "create_refresh_token",
    "get_token_expiration_seconds",
    "parse_token_lifetime",
    "refresh_access_token",
    "verify_token",
    # Models
    "AuthTokenPayload",
    "RefreshTokenPayload",
    "UserIdentity",
    # Roles
    "Role",
    "ALL_ROLES",
    "ADMIN_ONLY",
    "MANAGEMENT",
    "COMPANY_USERS",
    "PUBLIC_ROLES",
]
