"""
Users Service
-------------
Database service for dealer users: login lookups, canonical identity reads and
last-login bookkeeping.

Users are unique per company, so every lookup takes both the user id and the
company id. Company and role details are joined in so the caller gets the full
identity in one query.
"""

from typing import Any, Dict, Optional

from sqlalchemy import and_, select, update
from loguru import logger

from app.auth.models import UserIdentity
from app.core.database_connection import DatabaseManager
from app.db.tables import ref_companies, ref_roles, ref_users
from app.psql_db_services.base_service import BaseDatabaseService


class UsersService(BaseDatabaseService):
    """Read access to ``ref_users`` joined with companies and roles."""

    def __init__(self, database_manager: Optional[DatabaseManager] = None):
        super().__init__(database_manager)

    def _user_query(self, user_id: str, company_id: str):
        return (
            select(
                ref_users.c.user_id,
                ref_users.c.company_id,
                ref_users.c.first_name,
                ref_users.c.last_name,
                ref_users.c.email,
                ref_users.c.password_hash,
                ref_users.c.is_active,
                ref_users.c.role_name.label("role_id"),
                ref_roles.c.description.label("role_description"),
                ref_companies.c.company_name,
                ref_companies.c.is_active.label("company_is_active"),
            )
            .select_from(
                ref_users.join(
                    ref_companies, ref_users.c.company_id == ref_companies.c.company_id
                ).outerjoin(ref_roles, ref_users.c.role_name == ref_roles.c.role_name)
            )
            .where(
                and_(ref_users.c.user_id == user_id, ref_users.c.company_id == company_id)
            )
        )

    async def get_login_user(
        self, user_id: str, company_id: str
    ) -> Optional[Dict[str, Any]]:
        """
        Fetch a user together with company and role details.

        Args:
            user_id: Login name
            company_id: Tenant id

        Returns:
            Row dictionary including ``password_hash``, ``company_name``,
            ``company_is_active`` and ``role_description``, or None
        """
        self.validate_string_not_empty(user_id, "user_id")
        try:
            async with self.get_session() as session:
                result = await session.execute(self._user_query(user_id, company_id))
                return self.row_to_dict(result.mappings().one_or_none())
        except Exception as e:
            logger.error(f"Error fetching user {user_id} for company {company_id}: {e}")
            raise

    @staticmethod
    def to_identity(user: Dict[str, Any]) -> UserIdentity:
        """Build the token identity from a login row."""
        user_name = f"{user.get('first_name') or ''} {user.get('last_name') or ''}".strip()
        return UserIdentity(
            user_id=user["user_id"],
            user_name=user_name or user["user_id"],
            email=user.get("email") or "",
            company_id=str(user["company_id"]),
            company_name=user.get("company_name") or "",
            role_id=user.get("role_id") or "",
            role_name=user.get("role_description") or user.get("role_id") or "",
        )

    async def get_identity(
        self, user_id: str, company_id: str
    ) -> Optional[UserIdentity]:
        """
        Read the canonical identity of an active user in an active company.

        Returns:
            UserIdentity, or None if the user is missing or either the user or
            the company is inactive
        """
        user = await self.get_login_user(user_id, company_id)
        if user is None or not user.get("is_active") or not user.get("company_is_active"):
            return None
        return self.to_identity(user)

    async def record_login(self, user_id: str, company_id: str) -> None:
        """Stamp ``last_login_date`` after a successful login."""
        async with self.get_session() as session:
            await session.execute(
                update(ref_users)
                .where(
                    and_(
                        ref_users.c.user_id == user_id,
                        ref_users.c.company_id == company_id,
                    )
                )
                .values(last_login_date=self.utc_now())
            )
        self.log_operation("LOGIN", user_id, additional_context=f"company {company_id}")
