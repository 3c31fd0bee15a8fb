"""
Base Database Service
--------------------
Base class for the database services with session management, validation
helpers and operation logging.

This base class provides:
- SQLAlchemy session management through the injected DatabaseManager
- Transaction handling with automatic rollback
- Consistent error logging
- Validation helpers
"""

from typing import Any, AsyncGenerator, Dict, Optional
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from sqlalchemy.engine import RowMapping
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from app.core.database_connection import DatabaseManager, db_manager


class BaseDatabaseService:
    """
    Base class for all database service classes.

    Provides shared functionality for database operations including:
    - SQLAlchemy session management
    - Transaction handling with commit/rollback
    - Common validation utilities
    """

    def __init__(self, database_manager: Optional[DatabaseManager] = None):
        """
        Initialize the database service with a database manager.

        Args:
            database_manager: DatabaseManager instance. Defaults to the
                process-wide manager.
        """
        self.database_manager = database_manager or db_manager
        self._service_name = self.__class__.__name__

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get a SQLAlchemy session with automatic commit/rollback.

        Yields:
            AsyncSession: SQLAlchemy session; everything executed in the block
                is one transaction

        Example:
            async with self.get_session() as session:
                result = await session.execute(select(ref_users))
                users = result.mappings().all()
        """
        async with self.database_manager.get_session() as session:
            yield session

    @staticmethod
    def utc_now() -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def row_to_dict(row: Optional[RowMapping]) -> Optional[Dict[str, Any]]:
        return dict(row) if row is not None else None

    # ========================================================================
    # VALIDATION UTILITIES
    # ========================================================================

    def validate_string_not_empty(
        self, string_value: str, parameter_name: str = "string"
    ) -> None:
        """
        Validate that a string is not None or empty.

        Args:
            string_value: String to validate
            parameter_name: Name of the parameter for error messages

        Raises:
            ValueError: If string is None or empty
        """
        if not string_value or not isinstance(string_value, str):
            raise ValueError(f"{parameter_name} must be a non-empty string")
        if not string_value.strip():
            raise ValueError(f"{parameter_name} cannot be only whitespace")

    # ========================================================================
    # UTILITY METHODS
    # ========================================================================

    def log_operation(
        self,
        operation_type: str,
        entity_identifier: Any,
        success: bool = True,
        additional_context: Optional[str] = None,
    ) -> None:
        """
        Log database operations for monitoring and debugging.

        Args:
            operation_type: Type of operation (e.g., "CREATE", "UPDATE", "DELETE")
            entity_identifier: Identifier of the entity being operated on
            success: Whether the operation was successful
            additional_context: Optional additional context information
        """
        log_level = "info" if success else "error"
        status = "succeeded" if success else "failed"

        message = (
            f"{self._service_name}: {operation_type} operation {status} "
            f"for entity: {entity_identifier}"
        )

        if additional_context:
            message += f" - {additional_context}"

        getattr(logger, log_level)(message)
