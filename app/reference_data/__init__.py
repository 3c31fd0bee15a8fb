"""
Reference Data
--------------
Generic CRUD controller and the per-entity configurations built on it.
"""

from app.reference_data.controller import (
    AllowedRoles,
    PrimaryKeyConfig,
    ReferenceDataConfig,
    ReferenceDataController,
    create_reference_data_controller,
)

__all__ = [
    "AllowedRoles",
    "PrimaryKeyConfig",
    "ReferenceDataConfig",
    "ReferenceDataController",
    "create_reference_data_controller",
]
