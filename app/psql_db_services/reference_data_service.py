"""
Reference Data Storage Operations
---------------------------------
Generic CRUD over a reference-data table keyed by ``(company_id, <key>)``.

Every public method runs in exactly one session, so the steps of a rename
(conflict check, default clearing, delete, insert) commit or roll back
together. Tenant-scoped tables always carry the ``company_id`` predicate.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import Table, and_, delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from app.core.database_connection import DatabaseManager
from app.core.exceptions import Conflict, NotFound
from app.psql_db_services.base_service import BaseDatabaseService

AUDIT_FIELDS = ("created_at", "created_by", "updated_at", "updated_by")


class ReferenceDataService(BaseDatabaseService):
    """
    Storage operations for one reference-data table.

    Args:
        table: Bound SQLAlchemy table
        key_field: Natural key column combined with company_id
        entity_label: Human readable entity name used in messages
        database_manager: Injected DatabaseManager
        tenant_scoped: Filter and stamp rows by company_id
        order_by: ``(column, "asc"|"desc")`` pairs for listing
        default_flag: Boolean column that is true for at most one row per company
        references: ``(table, column)`` pairs that point at this table's key
    """

    def __init__(
        self,
        table: Table,
        key_field: str,
        entity_label: str,
        database_manager: Optional[DatabaseManager] = None,
        tenant_scoped: bool = True,
        order_by: Optional[Sequence[Tuple[str, str]]] = None,
        default_flag: Optional[str] = None,
        references: Sequence[Tuple[Table, str]] = (),
    ):
        super().__init__(database_manager)
        self.table = table
        self.key_field = key_field
        self.entity_label = entity_label
        self.tenant_scoped = tenant_scoped
        self.order_by = list(order_by or [(key_field, "asc")])
        self.default_flag = default_flag
        self.references = list(references)
        self._service_name = f"ReferenceDataService[{table.name}]"

    # ========================================================================
    # QUERY HELPERS
    # ========================================================================

    def _scope(self, company_id: Optional[str]) -> list:
        if self.tenant_scoped:
            return [self.table.c.company_id == company_id]
        return []

    def _key_filter(self, company_id: Optional[str], key: str):
        return and_(*self._scope(company_id), self.table.c[self.key_field] == key)

    def _ordering(self) -> list:
        clauses = []
        for field, direction in self.order_by:
            column = self.table.c[field]
            clauses.append(column.desc() if direction == "desc" else column.asc())
        return clauses

    def _columns_only(self, values: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in values.items() if k in self.table.c}

    def _has_audit_columns(self) -> bool:
        return all(field in self.table.c for field in AUDIT_FIELDS)

    async def _fetch(
        self, session: AsyncSession, company_id: Optional[str], key: str
    ) -> Optional[Dict[str, Any]]:
        result = await session.execute(
            select(self.table).where(self._key_filter(company_id, key))
        )
        return self.row_to_dict(result.mappings().one_or_none())

    async def _insert(self, session: AsyncSession, values: Dict[str, Any]) -> None:
        try:
            await session.execute(insert(self.table).values(**values))
        except IntegrityError as e:
            logger.warning(f"{self._service_name}: insert rejected by database: {e.orig}")
            raise Conflict(
                f"{self.entity_label} already exists for this company"
            ) from e

    async def _clear_default(
        self, session: AsyncSession, company_id: Optional[str], keep_key: str
    ) -> None:
        flag = self.table.c[self.default_flag]
        result = await session.execute(
            update(self.table)
            .where(
                and_(
                    *self._scope(company_id),
                    flag.is_(True),
                    self.table.c[self.key_field] != keep_key,
                )
            )
            .values({self.default_flag: False})
        )
        if result.rowcount:
            logger.info(
                f"{self._service_name}: cleared {self.default_flag} on "
                f"{result.rowcount} record(s) for company {company_id}"
            )

    def _wants_default(self, values: Dict[str, Any]) -> bool:
        return bool(self.default_flag and values.get(self.default_flag) is True)

    # ========================================================================
    # OPERATIONS
    # ========================================================================

    async def list_records(self, company_id: Optional[str]) -> List[Dict[str, Any]]:
        """
        List all records visible to a company, in the configured order.

        Args:
            company_id: Tenant id (ignored for global tables)

        Returns:
            List of row dictionaries
        """
        async with self.get_session() as session:
            result = await session.execute(
                select(self.table)
                .where(*self._scope(company_id))
                .order_by(*self._ordering())
            )
            records = [dict(row) for row in result.mappings().all()]

        logger.debug(
            f"{self._service_name}: found {len(records)} records for company {company_id}"
        )
        return records

    async def create_record(
        self, company_id: Optional[str], values: Dict[str, Any], user_id: str
    ) -> Dict[str, Any]:
        """
        Insert a new record stamped with tenant and audit fields.

        Args:
            company_id: Tenant id
            values: Validated field values, key already transformed
            user_id: Acting user, recorded as creator and last updater

        Returns:
            The stored record

        Raises:
            Conflict: A record with the same key already exists
        """
        key = values[self.key_field]
        row = self._columns_only(values)
        if self.tenant_scoped:
            row["company_id"] = company_id
        if self._has_audit_columns():
            now = self.utc_now()
            row.update(
                created_at=now, created_by=user_id, updated_at=now, updated_by=user_id
            )

        async with self.get_session() as session:
            if await self._fetch(session, company_id, key) is not None:
                raise Conflict(f"{self.entity_label} already exists for this company")

            if self._wants_default(row):
                await self._clear_default(session, company_id, key)

            await self._insert(session, row)
            record = await self._fetch(session, company_id, key)

        self.log_operation("CREATE", key, additional_context=f"company {company_id}")
        return record

    async def update_record(
        self,
        company_id: Optional[str],
        current_key: str,
        values: Dict[str, Any],
        user_id: str,
    ) -> Dict[str, Any]:
        """
        Update a record, renaming its key if the new values carry a different one.

        A rename is a delete of the old row and an insert of the new one in the
        same transaction; the original creator and creation time are kept.

        Args:
            company_id: Tenant id
            current_key: Key of the record being updated, already transformed
            values: Validated replacement values, key already transformed
            user_id: Acting user, recorded as last updater

        Returns:
            The stored record after the update

        Raises:
            NotFound: No record with current_key
            Conflict: The new key is already used by another record
                or the old key is still referenced by other rows
        """
        new_key = values[self.key_field]
        row = self._columns_only(values)
        for field in AUDIT_FIELDS:
            row.pop(field, None)
        row.pop("company_id", None)
        in_use_message = (
            f"This {self.entity_label.lower()} is used in transactions and cannot be renamed"
        )

        async with self.get_session() as session:
            existing = await self._fetch(session, company_id, current_key)
            if existing is None:
                raise NotFound(f"{self.entity_label} does not exist")

            renaming = new_key != current_key
            if renaming and await self._fetch(session, company_id, new_key) is not None:
                raise Conflict(
                    f"New {self.entity_label.lower()} already exists for this company"
                )
            if renaming and await self.count_references(session, company_id, current_key) > 0:
                raise Conflict(in_use_message)

            if self._wants_default(row):
                await self._clear_default(session, company_id, new_key)

            audit = {}
            if self._has_audit_columns():
                audit = {"updated_at": self.utc_now(), "updated_by": user_id}

            if renaming:
                try:
                    await session.execute(
                        delete(self.table).where(
                            self._key_filter(company_id, current_key)
                        )
                    )
                except IntegrityError as e:
                    logger.warning(
                        f"{self._service_name}: rename of {current_key} rejected by database: {e.orig}"
                    )
                    raise Conflict(in_use_message) from e
                replacement = {**row, **audit}
                if self.tenant_scoped:
                    replacement["company_id"] = company_id
                if self._has_audit_columns():
                    replacement["created_at"] = existing.get("created_at")
                    replacement["created_by"] = existing.get("created_by")
                await self._insert(session, replacement)
            else:
                await session.execute(
                    update(self.table)
                    .where(self._key_filter(company_id, current_key))
                    .values(**row, **audit)
                )

            record = await self._fetch(session, company_id, new_key)

        self.log_operation(
            "UPDATE",
            f"{current_key} -> {new_key}" if renaming else new_key,
            additional_context=f"company {company_id}",
        )
        return record

    async def count_references(
        self, session: AsyncSession, company_id: Optional[str], key: str
    ) -> int:
        """Count rows in dependent tables that point at this key."""
        total = 0
        for ref_table, column in self.references:
            conditions = [ref_table.c[column] == key]
            if self.tenant_scoped:
                conditions.append(ref_table.c.company_id == company_id)
            result = await session.execute(
                select(func.count()).select_from(ref_table).where(*conditions)
            )
            count = result.scalar_one()
            if count:
                logger.debug(
                    f"{self._service_name}: {key} referenced {count} time(s) by {ref_table.name}.{column}"
                )
            total += count
        return total

    async def delete_record(self, company_id: Optional[str], key: str) -> None:
        """
        Delete a record that nothing references.

        Raises:
            NotFound: No record with this key
            Conflict: The record is referenced by other rows
        """
        in_use_message = (
            f"This {self.entity_label.lower()} is used in transactions and cannot be deleted"
        )
        async with self.get_session() as session:
            if await self._fetch(session, company_id, key) is None:
                raise NotFound(f"{self.entity_label} does not exist")

            if await self.count_references(session, company_id, key) > 0:
                raise Conflict(in_use_message)

            try:
                await session.execute(
                    delete(self.table).where(self._key_filter(company_id, key))
                )
            except IntegrityError as e:
                logger.warning(
                    f"{self._service_name}: delete of {key} rejected by database: {e.orig}"
                )
                raise Conflict(in_use_message) from e

        self.log_operation("DELETE", key, additional_context=f"company {company_id}")
