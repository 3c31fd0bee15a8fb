"""
Authentication Models
---------------------
Pydantic models for session tokens and the login/refresh endpoints.
Defines the identity carried in access tokens and the request/response bodies.
"""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserIdentity(BaseModel):
    """
    The authenticated user's identity.

    Built from the login lookup (user joined with company and role) and embedded
    in every access token. Only non-sensitive fields belong here.
    """

    user_id: str = Field(..., min_length=1, description="User's login identifier")
    user_name: str = Field(..., description="Display name")
    email: str = Field(default="", description="Email address")
    company_id: str = Field(..., min_length=1, description="Tenant identifier")
    company_name: str = Field(..., description="Tenant display name")
    role_id: str = Field(..., description="Role code: SA, CA or CU")
    role_name: str = Field(..., description="Role description")

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "jdoe",
                "user_name": "John Doe",
                "email": "jdoe@example.com",
                "company_id": "550e8400-e29b-41d4-a716-446655440000",
                "company_name": "Carobar Motors",
                "role_id": "CA",
                "role_name": "Company Manager",
            }
        }


class AuthTokenPayload(UserIdentity):
    """
    Decoded access token.

    Identity claims plus issue/expiry times and the token type marker.
    """

    model_config = ConfigDict(extra="ignore")

    token_type: Literal["access"] = Field(..., description="Always 'access'")
    iat: datetime = Field(..., description="Token issued at timestamp")
    exp: datetime = Field(..., description="Token expiration timestamp")

    def identity(self) -> UserIdentity:
        return UserIdentity(**self.model_dump(include=set(UserIdentity.model_fields)))


class RefreshTokenPayload(BaseModel):
    """Decoded refresh token: only enough to find the user again."""

    model_config = ConfigDict(extra="ignore")

    user_id: str = Field(..., min_length=1)
    company_id: str = Field(..., min_length=1)
    token_type: Literal["refresh"]
    iat: datetime
    exp: datetime


class AuthLoginRequest(BaseModel):
    """
    Request model for user login.

    Users are unique per company, so the company id is part of the credentials.
    """

    company_id: str = Field(..., min_length=1, description="Tenant identifier")
    user_id: str = Field(..., min_length=1, max_length=50, description="Login name")
    password: str = Field(..., min_length=1, description="User's password")

    @field_validator("company_id")
    @classmethod
    def validate_company_id(cls, v: str) -> str:
        """Company ids are UUIDs; normalize to the canonical lowercase form."""
        try:
            return str(UUID(v))
        except ValueError:
            raise ValueError("company_id must be a valid UUID")

    class Config:
        json_schema_extra = {
            "example": {
                "company_id": "550e8400-e29b-41d4-a716-446655440000",
                "user_id": "jdoe",
                "password": "SecurePass123",
            }
        }


class AuthTokenRefreshRequest(BaseModel):
    """Refresh request body, used when the refresh cookie is not available."""

    refresh_token: Optional[str] = Field(default=None, description="Refresh token")


class AuthLoginResponse(BaseModel):
    token: str = Field(..., description="Access token (also set as a cookie)")
    user: UserIdentity
    message: str = "Login successful"
