"""
Role Model
----------
Closed set of dealer roles and the named role sets used by endpoint allow-lists.

Roles are compared by set membership only. There is no rank between them, so a
manager is not implicitly allowed what staff can do unless a set says so.
"""

from enum import Enum
from typing import FrozenSet, Iterable, Optional


class Role(str, Enum):
    """User roles as stored in ``ref_users.role_id`` and carried in tokens."""

    ADMIN = "SA"
    MANAGER = "CA"
    STAFF = "CU"
    PUBLIC = "PUBLIC"


RoleSet = FrozenSet[Role]

ALL_ROLES: RoleSet = frozenset({Role.ADMIN, Role.MANAGER, Role.STAFF})
ADMIN_ONLY: RoleSet = frozenset({Role.ADMIN})
MANAGEMENT: RoleSet = frozenset({Role.ADMIN, Role.MANAGER})
COMPANY_USERS: RoleSet = frozenset({Role.MANAGER, Role.STAFF})
PUBLIC_ROLES: RoleSet = frozenset({Role.ADMIN, Role.MANAGER, Role.STAFF, Role.PUBLIC})

# Display descriptors, keyed by role code
ROLE_DESCRIPTORS = {
    Role.ADMIN: {"name": "ADMIN", "description": "Super administrator"},
    Role.MANAGER: {"name": "COMPANY MANAGER", "description": "Company administrator"},
    Role.STAFF: {"name": "COMPANY STAFF", "description": "Company user"},
    Role.PUBLIC: {"name": "PUBLIC", "description": "Unauthenticated access"},
}


def parse_role(value: str) -> Optional[Role]:
    """Return the Role for a stored role code, or None if it is unknown."""
    try:
        return Role(value)
    except ValueError:
        return None


def has_role(role: Optional[str], allowed: Optional[Iterable[Role]]) -> bool:
    """
    Check a role code against an allow-list.

    Args:
        role: Role code from a token (e.g. "SA")
        allowed: Allowed roles; an empty or missing list allows every role

    Returns:
        bool: True if the role is permitted
    """
    if not allowed:
        return True
    parsed = parse_role(role) if role is not None else None
    return parsed is not None and parsed in set(allowed)


def is_admin(role: Optional[str]) -> bool:
    return role == Role.ADMIN.value


def is_company_manager(role: Optional[str]) -> bool:
    return role == Role.MANAGER.value


def belongs_to_company(user_company_id: Optional[str], company_id: Optional[str]) -> bool:
    """True when both ids are present and refer to the same company."""
    if not user_company_id or not company_id:
        return False
    return str(user_company_id).lower() == str(company_id).lower()
