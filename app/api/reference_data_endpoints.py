"""
Reference Data Endpoints
------------------------
Mounts one CRUD router per reference-data entity:

    /api/v1/banks, /api/v1/counterparties, /api/v1/countries,
    /api/v1/vehicle-types, /api/v1/locations, /api/v1/colors,
    /api/v1/makers, /api/v1/fuel-types (read only)
"""

from typing import Dict, Iterable, Optional

from fastapi import APIRouter
from loguru import logger

from app.core.cache import ReferenceDataCache
from app.core.database_connection import DatabaseManager
from app.reference_data.controller import (
    ReferenceDataConfig,
    ReferenceDataController,
    create_reference_data_controller,
)
from app.reference_data.entities import REFERENCE_ENTITIES


def build_reference_data_controllers(
    database_manager: DatabaseManager,
    cache: Optional[ReferenceDataCache] = None,
    entities: Iterable[ReferenceDataConfig] = REFERENCE_ENTITIES,
) -> Dict[str, ReferenceDataController]:
    """
    Create a controller per entity, keyed by its URL path segment.

    Args:
        database_manager: Storage manager shared by all controllers
        cache: Optional list cache
        entities: Entity configurations to expose

    Returns:
        dict: path -> controller
    """
    controllers = {
        config.path: create_reference_data_controller(config, database_manager, cache)
        for config in entities
    }
    logger.info(f"Reference data controllers ready: {', '.join(controllers)}")
    return controllers


def build_reference_data_router(
    controllers: Dict[str, ReferenceDataController],
) -> APIRouter:
    """Combine the per-entity routers into one router."""
    router = APIRouter()
    for controller in controllers.values():
        router.include_router(controller.build_router())
    return router
