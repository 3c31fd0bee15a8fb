"""
Configuration Manager
--------------------
Centralized configuration management using Pydantic Settings.
All application settings are loaded from environment variables with validation.
"""

import re
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class ApplicationSettings(BaseSettings):
    """Main application configuration settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application metadata
    app_name: str = Field(
        default="Carobar Dealer Backend", description="Application name"
    )
    app_version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: str = Field(default="logs", description="Directory for rotating log files")
    log_rotation: str = Field(default="100 MB", description="Log file rotation size")
    log_retention: str = Field(default="14 days", description="How long rotated logs are kept")

    # FastAPI server configuration
    fastapi_host: str = Field(default="0.0.0.0", description="FastAPI host")
    fastapi_port: int = Field(default=8000, description="FastAPI port")

    # PostgreSQL database configuration
    database_host: str = Field(default="localhost", description="PostgreSQL host")
    database_port: int = Field(default=5432, description="PostgreSQL port")
    database_user: str = Field(default="myuser", description="PostgreSQL user")
    database_password: str = Field(
        default="mypassword", description="PostgreSQL password"
    )
    database_name: str = Field(
        default="carobar", description="PostgreSQL database name"
    )
    database_pool_size: int = Field(default=20, description="Connection pool size")
    database_max_overflow: int = Field(
        default=10, description="Max overflow connections"
    )

    # Redis configuration
    redis_host: str = Field(default="localhost", description="Redis host")
    redis_port: int = Field(default=6379, description="Redis port")
    redis_db: int = Field(default=0, description="Redis database number")
    redis_password: Optional[str] = Field(default=None, description="Redis password")
    redis_max_connections: int = Field(default=50, description="Redis max connections")

    # JWT configuration
    jwt_secret_key: Optional[str] = Field(
        default=None, description="Shared secret used to sign session tokens"
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    token_expiry: str = Field(
        default="1h", description="Default access token lifetime (e.g. 1d, 2h, 30m)"
    )

    # Browser origins allowed to send session cookies
    cors_allow_origins: List[str] = Field(
        default=["http://localhost:3000"], description="CORS allowed origins"
    )

    # Session cookies
    access_token_cookie_name: str = Field(
        default="token", description="Cookie carrying the access token"
    )
    refresh_token_cookie_name: str = Field(
        default="refresh_token", description="Cookie carrying the refresh token"
    )
    cookie_secure: bool = Field(
        default=False, description="Mark session cookies as HTTPS only"
    )

    # Reference data caching
    cache_enabled: bool = Field(
        default=True, description="Cache reference data lists in Redis"
    )
    cache_ttl_seconds: int = Field(default=300, description="Cache TTL in seconds")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is acceptable."""
        valid_levels = ["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v_upper

    @field_validator("token_expiry")
    @classmethod
    def validate_token_expiry(cls, v: str) -> str:
        """Validate the default token lifetime uses the duration format."""
        if not re.fullmatch(r"\d+[dhms]", v):
            raise ValueError(
                f"Invalid token expiry '{v}'. Use a format like '1d', '2h', '30m', or '60s'"
            )
        return v

    @field_validator("cache_ttl_seconds")
    @classmethod
    def validate_cache_ttl(cls, v: int) -> int:
        """Validate cache TTL is positive."""
        if v <= 0:
            raise ValueError("Cache TTL must be a positive number of seconds")
        return v

    @property
    def database_url(self) -> str:
        """Construct async PostgreSQL database URL."""
        return (
            f"postgresql+asyncpg://{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    @property
    def log_file_path(self) -> str:
        """Daily log file named after the application, e.g. ``logs/carobar_dealer_backend_2024-01-31.log``."""
        slug = re.sub(r"[^a-z0-9]+", "_", self.app_name.lower()).strip("_")
        return f"{self.log_dir}/{slug}_{{time:YYYY-MM-DD}}.log"

    @property
    def redis_url(self) -> str:
        """Construct Redis URL."""
        if self.redis_password:
            return f"redis://:{self.redis_password}@{self.redis_host}:{self.redis_port}/{self.redis_db}"
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"


# Global settings instance
settings = ApplicationSettings()
