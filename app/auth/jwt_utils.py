"""
JWT Utilities
-------------
Token service for dealer sessions: access token creation, refresh token
creation, verification and refresh.

All tokens are HS256-signed with the shared ``JWT_SECRET_KEY``. Verification
never raises for a bad token; callers get ``None`` and the reason is logged.
Only a missing signing secret is treated as fatal.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from jose import ExpiredSignatureError, JWTError, jwt
from loguru import logger
from pydantic import ValidationError

from app.auth.models import AuthTokenPayload, RefreshTokenPayload, UserIdentity
from app.core.config_manager import settings
from app.core.exceptions import ConfigurationError, ValidationFailed

REFRESH_TOKEN_LIFETIME = "7d"

_LIFETIME_PATTERN = re.compile(r"^(\d+)([dhms])$")
_UNIT_SECONDS = {"d": 86400, "h": 3600, "m": 60, "s": 1}

# Used when a refresh happens without a canonical identity lookup
REFRESH_FALLBACKS = {
    "user_name": "User",
    "email": "",
    "company_name": "Company",
    "role_id": "CU",
    "role_name": "Company User",
}

TokenPayload = Union[AuthTokenPayload, RefreshTokenPayload]


def _signing_key() -> str:
    if not settings.jwt_secret_key:
        logger.critical("JWT_SECRET_KEY is not configured")
        raise ConfigurationError("JWT_SECRET_KEY environment variable is required")
    return settings.jwt_secret_key


def parse_token_lifetime(value: Union[str, int]) -> int:
    """
    Convert a token lifetime into seconds.

    Args:
        value: A duration string such as "1d", "2h", "30m" or "60s", or a
            positive integer number of seconds

    Returns:
        int: Lifetime in seconds

    Raises:
        ValidationFailed: If the value is not a positive integer or a valid
            duration string
    """
    if isinstance(value, bool):
        raise ValidationFailed(f"Invalid token lifetime: {value!r}")
    if isinstance(value, int):
        if value <= 0:
            raise ValidationFailed(
                f"Invalid token lifetime: {value}. Must be a positive number of seconds"
            )
        return value
    if isinstance(value, str):
        match = _LIFETIME_PATTERN.match(value)
        if match and int(match.group(1)) > 0:
            return int(match.group(1)) * _UNIT_SECONDS[match.group(2)]
    raise ValidationFailed(
        f"Invalid token lifetime: {value!r}. Use a format like '1d', '2h', '30m', '60s' or a number of seconds"
    )


def get_token_expiration_seconds() -> int:
    """
    Get the default access token lifetime in seconds.

    Returns:
        Number of seconds until a freshly issued access token expires
    """
    return parse_token_lifetime(settings.token_expiry)


def _encode(claims: dict, lifetime_seconds: int) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        **claims,
        "iat": now,
        "exp": now + timedelta(seconds=lifetime_seconds),
    }
    return jwt.encode(payload, _signing_key(), algorithm=settings.jwt_algorithm)


def create_access_token(
    identity: UserIdentity, expires_in: Optional[Union[str, int]] = None
) -> str:
    """
    Create a signed access token carrying the full identity.

    Args:
        identity: Authenticated user's identity
        expires_in: Optional lifetime override (duration string or seconds)

    Returns:
        JWT access token string

    Raises:
        ValidationFailed: If expires_in is malformed
        ConfigurationError: If no signing secret is configured
    """
    lifetime = (
        parse_token_lifetime(expires_in)
        if expires_in is not None
        else get_token_expiration_seconds()
    )
    claims = {**identity.model_dump(), "token_type": "access"}

    token = _encode(claims, lifetime)
    logger.info(
        f"Access token created for user {identity.user_id} "
        f"(company {identity.company_id}, role {identity.role_id}), expires in {lifetime}s"
    )
    return token


def create_refresh_token(user_id: str, company_id: str) -> str:
    """
    Create a refresh token with a fixed seven day lifetime.

    Only the user and company ids are embedded; names and role are looked up
    again when the token is exchanged.

    Raises:
        ConfigurationError: If no signing secret is configured
    """
    claims = {"user_id": user_id, "company_id": company_id, "token_type": "refresh"}
    token = _encode(claims, parse_token_lifetime(REFRESH_TOKEN_LIFETIME))
    logger.info(f"Refresh token created for user {user_id} (company {company_id})")
    return token


def verify_token(token: str) -> Optional[TokenPayload]:
    """
    Verify a token's signature and expiry and decode its payload.

    Args:
        token: JWT token string

    Returns:
        AuthTokenPayload or RefreshTokenPayload depending on ``token_type``,
        or None if the token is expired, tampered with or malformed

    Raises:
        ConfigurationError: If no signing secret is configured
    """
    key = _signing_key()
    try:
        claims = jwt.decode(token, key, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        logger.info("Token verification failed: token expired")
        return None
    except JWTError as e:
        logger.error(f"Token verification failed: {e}")
        return None

    try:
        if claims.get("token_type") == "refresh":
            payload = RefreshTokenPayload(**claims)
        else:
            payload = AuthTokenPayload(**claims)
    except ValidationError as e:
        logger.error(f"Token verification failed: malformed claims ({e.error_count()} errors)")
        return None

    logger.debug(f"Token verified for user {payload.user_id} ({payload.token_type})")
    return payload


def refresh_access_token(
    refresh_token: str, identity: Optional[UserIdentity] = None
) -> Optional[str]:
    """
    Exchange a refresh token for a new access token.

    Args:
        refresh_token: Refresh token issued at login
        identity: Canonical identity re-read from storage. It must belong to
            the same user and company as the refresh token.

    Returns:
        A new access token, or None if the refresh token is invalid, is not a
        refresh token, or does not match the supplied identity
    """
    payload = verify_token(refresh_token)
    if payload is None:
        return None
    if payload.token_type != "refresh":
        logger.error(
            f"Refresh rejected for user {payload.user_id}: token type is {payload.token_type}"
        )
        return None

    if identity is not None:
        if (
            identity.user_id != payload.user_id
            or str(identity.company_id).lower() != str(payload.company_id).lower()
        ):
            logger.error(
                f"Refresh rejected: identity {identity.user_id}/{identity.company_id} "
                f"does not match token {payload.user_id}/{payload.company_id}"
            )
            return None
    else:
        identity = UserIdentity(
            user_id=payload.user_id,
            company_id=payload.company_id,
            **REFRESH_FALLBACKS,
        )

    logger.info(f"Access token refreshed for user {payload.user_id}")
    return create_access_token(identity)
