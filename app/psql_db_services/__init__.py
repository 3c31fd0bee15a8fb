"""
Database Services Package
-------------------------
Database services for the dealer backend.

This package provides:
- Base service class with session management and logging helpers
- Generic reference-data storage operations
- User lookups for login and token refresh
"""

from app.psql_db_services.base_service import BaseDatabaseService
from app.psql_db_services.reference_data_service import ReferenceDataService
from app.psql_db_services.users_service import UsersService

__all__ = [
    "BaseDatabaseService",
    "ReferenceDataService",
    "UsersService",
]
