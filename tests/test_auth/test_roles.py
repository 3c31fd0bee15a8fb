"""
Role Model Tests
----------------
Test role codes, named role sets and membership helpers.
"""

import pytest

from app.auth.roles import (
    ADMIN_ONLY,
    ALL_ROLES,
    COMPANY_USERS,
    MANAGEMENT,
    PUBLIC_ROLES,
    ROLE_DESCRIPTORS,
    Role,
    belongs_to_company,
    has_role,
    is_admin,
    is_company_manager,
    parse_role,
)


class TestRoleSets:
    def test_role_codes(self):
        assert Role.ADMIN.value == "SA"
        assert Role.MANAGER.value == "CA"
        assert Role.STAFF.value == "CU"

    def test_named_sets(self):
        assert ALL_ROLES == {Role.ADMIN, Role.MANAGER, Role.STAFF}
        assert ADMIN_ONLY == {Role.ADMIN}
        assert MANAGEMENT == {Role.ADMIN, Role.MANAGER}
        assert COMPANY_USERS == {Role.MANAGER, Role.STAFF}
        assert Role.PUBLIC in PUBLIC_ROLES
        assert Role.PUBLIC not in ALL_ROLES

    def test_every_role_has_descriptor(self):
        assert set(ROLE_DESCRIPTORS) == set(Role)


class TestRoleHelpers:
    def test_parse_role(self):
        assert parse_role("CA") is Role.MANAGER
        assert parse_role("admin") is None

    @pytest.mark.parametrize(
        "role,allowed,expected",
        [
            ("SA", MANAGEMENT, True),
            ("CA", MANAGEMENT, True),
            ("CU", MANAGEMENT, False),
            ("CU", ALL_ROLES, True),
            ("SA", COMPANY_USERS, False),
            ("XX", ALL_ROLES, False),
            (None, ALL_ROLES, False),
            ("CU", None, True),
            ("CU", frozenset(), True),
        ],
    )
    def test_has_role(self, role, allowed, expected):
        assert has_role(role, allowed) is expected

    def test_no_role_hierarchy(self):
        # an admin is only allowed where a set names it
        assert has_role("SA", {Role.STAFF}) is False

    def test_is_admin_and_manager(self):
        assert is_admin("SA") and not is_admin("CA")
        assert is_company_manager("CA") and not is_company_manager("CU")

    def test_belongs_to_company(self):
        company_id = "550e8400-e29b-41d4-a716-446655440000"
        assert belongs_to_company(company_id, company_id.upper())
        assert not belongs_to_company(company_id, "other")
        assert not belongs_to_company(None, company_id)
        assert not belongs_to_company(company_id, "")
