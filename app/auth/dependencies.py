"""
Authentication Middleware
-------------------------
Request guards that verify the session token, resolve the caller's identity and
enforce per-operation role allow-lists.

The token is read from the ``token`` cookie first and from an
``Authorization: Bearer`` header second. Guards can be used two ways:

    # wrap an async handler taking the request
    list_banks = protect(handler, required_roles=ALL_ROLES)

    # or as a FastAPI dependency
    @router.get("/me")
    async def me(user: AuthTokenPayload = Depends(require_any_user)):
        ...
"""

from functools import wraps
from typing import Any, Awaitable, Callable, Iterable, Optional

from fastapi import Request
from fastapi.security.utils import get_authorization_scheme_param
from loguru import logger

from app.auth.jwt_utils import verify_token
from app.auth.models import AuthTokenPayload
from app.auth.roles import ADMIN_ONLY, ALL_ROLES, MANAGEMENT, Role, has_role
from app.core.config_manager import settings
from app.core.exceptions import (
    AuthenticationRequired,
    ConfigurationError,
    PermissionDenied,
)

Handler = Callable[[Request], Awaitable[Any]]


def extract_token(request: Request) -> Optional[str]:
    """
    Find the session token on a request.

    Returns:
        The token from the session cookie, else from a Bearer Authorization
        header, else None
    """
    token = request.cookies.get(settings.access_token_cookie_name)
    if token:
        return token

    scheme, param = get_authorization_scheme_param(
        request.headers.get("Authorization")
    )
    if scheme.lower() == "bearer" and param:
        return param
    return None


def authenticate(
    request: Request, required_roles: Optional[Iterable[Role]] = None
) -> AuthTokenPayload:
    """
    Verify the request's access token and check the caller's role.

    Args:
        request: Incoming request
        required_roles: Allowed roles; empty or None allows any authenticated user

    Returns:
        AuthTokenPayload: The caller's identity, also stored on ``request.state.user``

    Raises:
        AuthenticationRequired: Missing, invalid, expired or non-access token
        PermissionDenied: Role not in the allow-list
    """
    path = request.url.path
    token = extract_token(request)
    if not token:
        logger.warning(f"Missing session token on {request.method} {path}")
        raise AuthenticationRequired("Authentication required")

    payload = verify_token(token)
    if payload is None:
        logger.warning(f"Invalid or expired token on {request.method} {path}")
        raise AuthenticationRequired("Invalid or expired token")

    if payload.token_type != "access":
        logger.warning(
            f"Refresh token presented for authorization by user {payload.user_id} on {path}"
        )
        raise AuthenticationRequired("Invalid or expired token")

    if required_roles and not has_role(payload.role_id, required_roles):
        logger.warning(
            f"Access denied for user {payload.user_id} "
            f"(company {payload.company_id}, role {payload.role_id}) on {request.method} {path}"
        )
        raise PermissionDenied("You do not have permission to access this resource")

    request.state.user = payload
    logger.debug(
        f"Access granted for user {payload.user_id} with role {payload.role_id} on {path}"
    )
    return payload


def protect(
    handler: Handler,
    *,
    public: bool = False,
    required_roles: Optional[Iterable[Role]] = None,
) -> Handler:
    """
    Wrap a request handler with authentication and role checks.

    The wrapped handler is only invoked once the caller is authenticated and
    authorized; on failure the guard raises and the handler never runs.

    Args:
        handler: ``async def handler(request)``
        public: Skip authentication entirely
        required_roles: Allowed roles; empty or None allows any authenticated user

    Returns:
        The guarded handler
    """
    if public:
        return handler

    roles = frozenset(required_roles) if required_roles else frozenset()

    @wraps(handler)
    async def guarded(request: Request) -> Any:
        authenticate(request, roles)
        return await handler(request)

    return guarded


def get_auth_user(request: Request) -> Optional[AuthTokenPayload]:
    """
    Return the caller's identity if the request carries a valid access token.

    Never raises; anything short of a valid access token yields None.
    """
    user = getattr(request.state, "user", None)
    if isinstance(user, AuthTokenPayload):
        return user

    token = extract_token(request)
    if not token:
        return None
    try:
        payload = verify_token(token)
    except ConfigurationError as e:
        logger.error(f"Cannot resolve user on {request.url.path}: {e}")
        return None
    if payload is None or payload.token_type != "access":
        return None
    return payload


class AuthGuard:
    """
    Reusable role guard.

    Instances work as FastAPI dependencies (``Depends(guard)``) and can wrap
    plain handlers with ``guard.wrap(handler)``.
    """

    def __init__(self, allowed_roles: Optional[Iterable[Role]] = None):
        self.allowed_roles = frozenset(allowed_roles) if allowed_roles else frozenset()

    async def __call__(self, request: Request) -> AuthTokenPayload:
        return authenticate(request, self.allowed_roles)

    def wrap(self, handler: Handler) -> Handler:
        return protect(handler, required_roles=self.allowed_roles)


def require_role(roles: Iterable[Role]) -> AuthGuard:
    """Build a guard allowing exactly the given roles."""
    return AuthGuard(roles)


require_any_user = AuthGuard(ALL_ROLES)
"""
Allow any authenticated dealer user (admin, manager or staff).
"""

require_admin_only = AuthGuard(ADMIN_ONLY)
"""
Allow super administrators only.
"""

require_admin_or_manager = AuthGuard(MANAGEMENT)
"""
Allow administrators and company managers.
"""
