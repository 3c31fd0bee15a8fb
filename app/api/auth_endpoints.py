"""
Session Endpoints
-----------------
Login, token refresh, logout and token verification for dealer users.

Tokens travel in HTTP-only cookies: ``token`` holds the access token and
``refresh_token`` the seven day refresh token. The login response also returns
the access token in the body for API clients that send it as a Bearer header.
"""

from typing import Optional

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse
from loguru import logger

from app.auth.dependencies import extract_token
from app.auth.jwt_utils import (
    REFRESH_TOKEN_LIFETIME,
    create_access_token,
    create_refresh_token,
    get_token_expiration_seconds,
    parse_token_lifetime,
    refresh_access_token,
    verify_token,
)
from app.auth.models import (
    AuthLoginRequest,
    AuthLoginResponse,
    AuthTokenRefreshRequest,
)
from app.core.config_manager import settings
from app.core.exceptions import (
    ApplicationError,
    AuthenticationRequired,
    InternalFailure,
    NotFound,
)
from app.models.response_models import MessageResponse
from app.psql_db_services.users_service import UsersService
from app.utils.password_hashing import PasswordHasher

# ============================================================================
# ROUTER INITIALIZATION
# ============================================================================

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


def _users_service(request: Request) -> UsersService:
    return UsersService(request.app.state.database_manager)


def _set_cookie(response: Response, name: str, value: str, max_age: int) -> None:
    response.set_cookie(
        key=name,
        value=value,
        max_age=max_age,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
        path="/",
    )


def _clear_cookie(response: Response, name: str) -> None:
    response.delete_cookie(
        key=name,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
        path="/",
    )


# ============================================================================
# AUTHENTICATION ENDPOINTS
# ============================================================================


@router.post(
    "/login",
    response_model=AuthLoginResponse,
    summary="Authenticate a dealer user",
    description="""
    Authenticate with company id, user id and password.
    Sets the access and refresh token cookies and returns the user's identity.
    """,
)
async def login(credentials: AuthLoginRequest, request: Request, response: Response):
    """
    Authenticate a user and start a session.

    Args:
        credentials: Company id, user id and password

    Returns:
        AuthLoginResponse: Access token, identity and message

    Raises:
        NotFound: Unknown user for this company
        AuthenticationRequired: Wrong password, or user or company inactive
    """
    logger.info(
        f"Login attempt for user {credentials.user_id} (company {credentials.company_id})"
    )
    users_service = _users_service(request)

    try:
        user = await users_service.get_login_user(
            credentials.user_id, credentials.company_id
        )
        if user is None:
            logger.warning(f"User {credentials.user_id} not found")
            raise NotFound("User not found")

        if not PasswordHasher.verify_password(
            credentials.password, user["password_hash"]
        ):
            logger.error(f"Incorrect password for user {credentials.user_id}")
            raise AuthenticationRequired("Invalid credentials")

        if not user.get("is_active") or not user.get("company_is_active"):
            logger.error(f"User {credentials.user_id} or company inactive")
            raise AuthenticationRequired("Invalid credentials")

        identity = users_service.to_identity(user)
        access_token = create_access_token(identity)
        refresh_token = create_refresh_token(identity.user_id, identity.company_id)
        await users_service.record_login(identity.user_id, identity.company_id)

    except ApplicationError:
        raise
    except Exception as e:
        logger.exception(f"Login error: {e}")
        raise InternalFailure("An unexpected error occurred. Please try again later.")

    _set_cookie(
        response,
        settings.access_token_cookie_name,
        access_token,
        get_token_expiration_seconds(),
    )
    _set_cookie(
        response,
        settings.refresh_token_cookie_name,
        refresh_token,
        parse_token_lifetime(REFRESH_TOKEN_LIFETIME),
    )

    logger.info(f"User {identity.user_id} logged in successfully")
    return AuthLoginResponse(token=access_token, user=identity)


@router.post(
    "/refresh",
    response_model=MessageResponse,
    summary="Exchange a refresh token for a new access token",
)
async def refresh(
    request: Request,
    response: Response,
    body: Optional[AuthTokenRefreshRequest] = None,
):
    """
    Issue a new access token from the refresh token cookie (or request body).

    The identity embedded in the new token is re-read from storage, so name,
    role and company changes made since login take effect.

    Raises:
        AuthenticationRequired: Missing, invalid or expired refresh token, or
            the user is no longer active
    """
    refresh_token = request.cookies.get(settings.refresh_token_cookie_name) or (
        body.refresh_token if body else None
    )
    if not refresh_token:
        raise AuthenticationRequired("Refresh token required")

    payload = verify_token(refresh_token)
    if payload is None or payload.token_type != "refresh":
        raise AuthenticationRequired("Invalid or expired refresh token")

    try:
        identity = await _users_service(request).get_identity(
            payload.user_id, payload.company_id
        )
    except Exception as e:
        logger.exception(f"Token refresh error: {e}")
        raise InternalFailure("An error occurred while refreshing the token")

    if identity is None:
        logger.warning(
            f"Refresh rejected: user {payload.user_id} is missing or inactive"
        )
        raise AuthenticationRequired("Invalid or expired refresh token")

    access_token = refresh_access_token(refresh_token, identity)
    if access_token is None:
        raise AuthenticationRequired("Invalid or expired refresh token")

    _set_cookie(
        response,
        settings.access_token_cookie_name,
        access_token,
        get_token_expiration_seconds(),
    )
    logger.info(f"Access token refreshed for user {identity.user_id}")
    return MessageResponse(message="Token refreshed successfully")


@router.post("/logout", response_model=MessageResponse, summary="End the session")
async def logout(response: Response):
    """Expire both session cookies. Tokens are not revoked server side."""
    _clear_cookie(response, settings.access_token_cookie_name)
    _clear_cookie(response, settings.refresh_token_cookie_name)
    logger.info("User logged out successfully")
    return MessageResponse(message="Logged out successfully")


@router.get("/verify", summary="Return the identity behind the session token")
async def verify(request: Request):
    """
    Verify the caller's access token.

    Returns:
        ``{"user": identity}`` for a valid access token. Otherwise a 401 that
        also clears the access token cookie.
    """
    token = extract_token(request)
    if not token:
        raise AuthenticationRequired("Authentication required")

    payload = verify_token(token)
    if payload is None or payload.token_type != "access":
        logger.error("Invalid or expired token")
        result = JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error": "Invalid or expired token"},
        )
        _clear_cookie(result, settings.access_token_cookie_name)
        return result

    logger.info(f"Token verified for user: {payload.user_name}")
    return {"user": payload.identity().model_dump()}
