"""
Database Connection Manager
---------------------------
Manages PostgreSQL database connections with SQLAlchemy async engine.
One manager is created per process and handed to the application factory,
the reference-data controllers and the services that need storage.
"""

from typing import Any, AsyncGenerator, Optional
from contextlib import asynccontextmanager

from loguru import logger
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config_manager import settings


class DatabaseManager:
    """
    Manages the SQLAlchemy async engine and hands out transactional sessions.

    Every ``get_session()`` block is one transaction: it commits when the block
    exits normally and rolls back when any exception escapes it. Reference-data
    renames and default-flag clearing rely on this to stay atomic.
    """

    def __init__(self):
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    async def initialize(
        self, database_url: Optional[str] = None, **engine_options: Any
    ) -> None:
        """
        Initialize SQLAlchemy async engine.

        Args:
            database_url: Optional URL override (defaults to the PostgreSQL URL
                built from settings)
            **engine_options: Extra keyword arguments for create_async_engine.
                When given they replace the PostgreSQL pool defaults.
        """
        if self._engine is not None:
            logger.warning("Database engine already initialized")
            return

        url = database_url or settings.database_url
        if not engine_options:
            engine_options = {
                "pool_size": settings.database_pool_size,
                "max_overflow": settings.database_max_overflow,
                "pool_pre_ping": True,
                "pool_recycle": 3600,
                "pool_timeout": 30,
            }

        logger.info(
            f"Initializing database connection to {settings.database_host}:{settings.database_port}"
            if database_url is None
            else "Initializing database connection from explicit URL"
        )

        try:
            self._engine = create_async_engine(url, echo=False, **engine_options)
            self._sessionmaker = async_sessionmaker(
                bind=self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
            logger.info(
                "SQLAlchemy async engine and sessionmaker initialized successfully"
            )
        except Exception as e:
            logger.error(f"Error initializing SQLAlchemy engine: {e}")
            raise

    async def close(self) -> None:
        """Dispose the SQLAlchemy engine."""
        if self._engine is not None:
            logger.info("Disposing SQLAlchemy engine")
            await self._engine.dispose()
            self._engine = None
            self._sessionmaker = None
            logger.info("SQLAlchemy engine disposed")

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self._engine

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get a SQLAlchemy async session from the sessionmaker.

        Yields:
            AsyncSession: Active SQLAlchemy session with automatic
                         commit on success or rollback on exception

        Raises:
            RuntimeError: If database not initialized

        Example:
            async with db_manager.get_session() as session:
                result = await session.execute(select(ref_country))
                rows = result.mappings().all()
        """
        if not self._sessionmaker:
            raise RuntimeError("Database not initialized. Call initialize() first.")

        session = self._sessionmaker()
        try:
            yield session
            await session.commit()
            logger.debug("Session committed successfully")
        except Exception as e:
            await session.rollback()
            logger.warning(f"Session rolled back due to error: {e}")
            raise
        finally:
            await session.close()
            logger.debug("Session closed and returned to pool")

    async def ping(self) -> bool:
        """
        Check database connectivity.

        Returns:
            bool: True if a trivial query succeeds, False otherwise
        """
        if self._sessionmaker is None:
            return False
        try:
            async with self.get_session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database ping failed: {e}")
            return False


# Process-wide database manager, injected into the app factory at startup
db_manager = DatabaseManager()
