"""
Reference Data Controller
-------------------------
Declarative CRUD controller shared by every reference-data entity.

A ``ReferenceDataConfig`` describes one entity (table, schema, natural key,
ordering, role allow-lists, key transform). ``create_reference_data_controller``
turns it into four guarded request handlers (list, create, update, delete)
and an APIRouter exposing them.

Request flow for every operation:
    auth guard (token + role) -> body/query validation -> tenant-scoped
    storage call -> JSON response

Role checks always run before the storage layer is touched.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Type

from fastapi import APIRouter, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel, ValidationError
from sqlalchemy import Table

from app.auth.dependencies import Handler, protect
from app.auth.models import AuthTokenPayload
from app.auth.roles import ALL_ROLES, RoleSet
from app.core.cache import ReferenceDataCache
from app.core.database_connection import DatabaseManager
from app.core.exceptions import (
    ApplicationError,
    InternalFailure,
    ValidationFailed,
    validation_details,
)
from app.models.response_models import ErrorResponse
from app.psql_db_services.reference_data_service import ReferenceDataService


# ============================================================================
# CONFIGURATION
# ============================================================================


@dataclass(frozen=True)
class PrimaryKeyConfig:
    """Natural key of an entity; combined with company_id it is unique."""

    field: str
    composite_name: str
    url_param_name: Optional[str] = None

    @property
    def param_name(self) -> str:
        return self.url_param_name or self.field


@dataclass(frozen=True)
class AllowedRoles:
    """Per-operation role allow-lists. None leaves the operation unexposed."""

    read: Optional[RoleSet] = ALL_ROLES
    create: Optional[RoleSet] = ALL_ROLES
    update: Optional[RoleSet] = ALL_ROLES
    delete: Optional[RoleSet] = ALL_ROLES


@dataclass(frozen=True)
class ReferenceDataConfig:
    table: Table
    entity_label: str
    response_key: str
    record_key: str
    schema: Type[BaseModel]
    primary_key: PrimaryKeyConfig
    path: str
    order_by: Optional[List[Tuple[str, str]]] = None
    allowed_roles: AllowedRoles = field(default_factory=AllowedRoles)
    value_transform: Optional[Callable[[str], str]] = None
    tenant_scoped: bool = True
    default_flag: Optional[str] = None
    references: Sequence[Tuple[Table, str]] = ()

    def transform(self, value: Any) -> str:
        text = str(value)
        return self.value_transform(text) if self.value_transform else text


def trim(value: str) -> str:
    return value.strip()


def trim_upper(value: str) -> str:
    return value.strip().upper()


ERROR_RESPONSES = {
    code: {"model": ErrorResponse} for code in (400, 401, 403, 404, 409, 500)
}


# ============================================================================
# CONTROLLER
# ============================================================================


class ReferenceDataController:
    """
    Guarded CRUD handlers for one reference-data entity.

    Each public handler is an ``async def handler(request)`` already wrapped by
    the auth guard for its operation, or None when the operation is not
    exposed for this entity.
    """

    def __init__(
        self,
        config: ReferenceDataConfig,
        database_manager: DatabaseManager,
        cache: Optional[ReferenceDataCache] = None,
    ):
        self.config = config
        self.cache = cache
        self.service = ReferenceDataService(
            table=config.table,
            key_field=config.primary_key.field,
            entity_label=config.entity_label,
            database_manager=database_manager,
            tenant_scoped=config.tenant_scoped,
            order_by=config.order_by,
            default_flag=config.default_flag,
            references=config.references,
        )

        roles = config.allowed_roles
        self.list: Optional[Handler] = self._guard(self._list, roles.read)
        self.create: Optional[Handler] = self._guard(self._create, roles.create)
        self.update: Optional[Handler] = self._guard(self._update, roles.update)
        self.delete: Optional[Handler] = self._guard(self._delete, roles.delete)

    @staticmethod
    def _guard(handler: Handler, roles: Optional[RoleSet]) -> Optional[Handler]:
        if roles is None:
            return None
        return protect(handler, required_roles=roles)

    # ------------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------------

    def _company_id(self, user: AuthTokenPayload) -> Optional[str]:
        return user.company_id if self.config.tenant_scoped else None

    def cache_key(self, company_id: Optional[str]) -> str:
        return f"reference:{self.config.table.name}:{company_id or 'global'}"

    async def _invalidate(self, company_id: Optional[str]) -> None:
        if self.cache is not None:
            await self.cache.invalidate(self.cache_key(company_id))

    @staticmethod
    async def _json_body(request: Request) -> Dict[str, Any]:
        try:
            body = await request.json()
        except ValueError:
            raise ValidationFailed("Request body must be valid JSON")
        if not isinstance(body, dict):
            raise ValidationFailed("Request body must be a JSON object")
        return body

    def _validate(self, data: Any) -> Dict[str, Any]:
        """
        Validate a record against the entity schema and normalize its key.

        Returns:
            dict: Validated values with the key passed through the transform

        Raises:
            ValidationFailed: Schema violation or a key that is blank after
                the transform
        """
        if not isinstance(data, dict):
            raise ValidationFailed(
                f"{self.config.entity_label} record must be a JSON object"
            )
        try:
            record = self.config.schema.model_validate(data)
        except ValidationError as e:
            raise ValidationFailed(
                "Validation failed", details=validation_details(e.errors())
            )

        values = record.model_dump()
        key_field = self.config.primary_key.field
        values[key_field] = self._key(values[key_field], key_field)
        return values

    def _key(self, raw: Any, name: str) -> str:
        if raw is None:
            raise ValidationFailed(f"{name} is required")
        key = self.config.transform(raw)
        if not key:
            raise ValidationFailed(f"{name} cannot be blank")
        return key

    def _split_update_body(self, body: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
        """Return ``(current_key, new_values)`` from a flat or old/new body."""
        key_field = self.config.primary_key.field
        if "old" in body or "new" in body:
            old, new = body.get("old"), body.get("new")
            if old is None or new is None:
                raise ValidationFailed("Both old and new records are required")
            new_values = self._validate(new)
            old_key = old.get(key_field) if isinstance(old, dict) else old
            if old_key is None:
                raise ValidationFailed(
                    f"{key_field} is required in both old and new records"
                )
            return self._key(old_key, key_field), new_values

        values = self._validate(body)
        return values[key_field], values

    # ------------------------------------------------------------------------
    # operations
    # ------------------------------------------------------------------------

    async def _list(self, request: Request) -> JSONResponse:
        """List the caller's records: ``200 {response_key: [...]}``."""
        user: AuthTokenPayload = request.state.user
        company_id = self._company_id(user)
        logger.info(
            f"GET {request.url.path} - Fetching {self.config.response_key} for company {company_id}"
        )

        async def fetch() -> List[Dict[str, Any]]:
            return jsonable_encoder(await self.service.list_records(company_id))

        try:
            if self.cache is not None:
                records = await self.cache.get_or_fetch(self.cache_key(company_id), fetch)
            else:
                records = await fetch()
        except ApplicationError:
            raise
        except Exception as e:
            logger.exception(f"Error fetching {self.config.response_key}: {e}")
            raise InternalFailure(f"Failed to fetch {self.config.response_key}") from e

        logger.info(f"Found {len(records)} {self.config.response_key} for company {company_id}")
        return JSONResponse({self.config.response_key: records})

    async def _create(self, request: Request) -> JSONResponse:
        """Create a record: ``201 {message, record_key: record}``."""
        user: AuthTokenPayload = request.state.user
        company_id = self._company_id(user)
        label = self.config.entity_label
        logger.info(f"POST {request.url.path} - Creating new {label.lower()}")

        values = self._validate(await self._json_body(request))
        try:
            record = await self.service.create_record(company_id, values, user.user_id)
        except ApplicationError:
            raise
        except Exception as e:
            logger.exception(f"Error creating {label.lower()}: {e}")
            raise InternalFailure(f"Failed to create {label.lower()}") from e

        await self._invalidate(company_id)
        return JSONResponse(
            status_code=status.HTTP_201_CREATED,
            content={
                "message": f"{label} created successfully",
                self.config.record_key: jsonable_encoder(record),
            },
        )

    async def _update(self, request: Request) -> JSONResponse:
        """Update or rename a record: ``200 {message, record_key: record}``."""
        user: AuthTokenPayload = request.state.user
        company_id = self._company_id(user)
        label = self.config.entity_label
        logger.info(f"PUT {request.url.path} - Updating {label.lower()}")

        current_key, values = self._split_update_body(await self._json_body(request))
        try:
            record = await self.service.update_record(
                company_id, current_key, values, user.user_id
            )
        except ApplicationError:
            raise
        except Exception as e:
            logger.exception(f"Error updating {label.lower()}: {e}")
            raise InternalFailure(f"Failed to update {label.lower()}") from e

        await self._invalidate(company_id)
        return JSONResponse(
            {
                "message": f"{label} updated successfully",
                self.config.record_key: jsonable_encoder(record),
            }
        )

    async def _delete(self, request: Request) -> JSONResponse:
        """Delete an unreferenced record: ``200 {message}``."""
        user: AuthTokenPayload = request.state.user
        company_id = self._company_id(user)
        label = self.config.entity_label
        param = self.config.primary_key.param_name
        logger.info(f"DELETE {request.url.path} - Deleting {label.lower()}")

        raw = request.query_params.get(param)
        if raw is None or not raw.strip():
            raise ValidationFailed(f"{param} parameter is required")
        key = self._key(raw, param)

        try:
            await self.service.delete_record(company_id, key)
        except ApplicationError:
            raise
        except Exception as e:
            logger.exception(f"Error deleting {label.lower()}: {e}")
            raise InternalFailure(f"Failed to delete {label.lower()}") from e

        await self._invalidate(company_id)
        return JSONResponse({"message": f"{label} deleted successfully"})

    # ------------------------------------------------------------------------
    # routing
    # ------------------------------------------------------------------------

    def build_router(self) -> APIRouter:
        """
        Expose the configured operations under ``/api/v1/<path>``.

        GET lists, POST creates, PUT updates and DELETE deletes with the key
        in the query string. Operations without allowed roles get no route.
        """
        router = APIRouter(
            prefix=f"/api/v1/{self.config.path}",
            tags=[self.config.entity_label],
        )
        routes = [
            ("GET", self.list, status.HTTP_200_OK),
            ("POST", self.create, status.HTTP_201_CREATED),
            ("PUT", self.update, status.HTTP_200_OK),
            ("DELETE", self.delete, status.HTTP_200_OK),
        ]
        for method, endpoint, status_code in routes:
            if endpoint is None:
                continue
            router.add_api_route(
                "",
                endpoint,
                methods=[method],
                status_code=status_code,
                responses=ERROR_RESPONSES,
                name=f"{method.lower()}_{self.config.path.replace('-', '_')}",
            )
        return router


def create_reference_data_controller(
    config: ReferenceDataConfig,
    database_manager: DatabaseManager,
    cache: Optional[ReferenceDataCache] = None,
) -> ReferenceDataController:
    """
    Build the CRUD controller for one reference-data entity.

    Args:
        config: Entity description
        database_manager: Storage manager shared by the process
        cache: Optional list cache; the controller works without one

    Returns:
        ReferenceDataController with guarded handlers and a router builder
    """
    logger.debug(
        f"Creating reference data controller for {config.entity_label} ({config.table.name})"
    )
    return ReferenceDataController(config, database_manager, cache)
