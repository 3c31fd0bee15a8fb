"""
Auth Middleware Tests
---------------------
Test token extraction, request guards and role allow-lists.
"""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from fastapi import Depends, FastAPI, Request
from fastapi.testclient import TestClient

from app.auth.dependencies import (
    AuthGuard,
    authenticate,
    extract_token,
    get_auth_user,
    protect,
    require_admin_only,
    require_admin_or_manager,
    require_any_user,
    require_role,
)
from app.auth.models import AuthTokenPayload
from app.auth.roles import ADMIN_ONLY, MANAGEMENT, Role
from app.core.exceptions import (
    AuthenticationRequired,
    PermissionDenied,
    register_exception_handlers,
)


def make_request(headers=None, cookies=None, path="/api/v1/colors") -> Request:
    """Build a bare Starlette request for calling guards directly."""
    raw_headers = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    if cookies:
        cookie = "; ".join(f"{k}={v}" for k, v in cookies.items())
        raw_headers.append((b"cookie", cookie.encode()))
    scope = {
        "type": "http",
        "method": "GET",
        "path": path,
        "headers": raw_headers,
        "query_string": b"",
    }
    return Request(scope)


# ============================================================================
# TOKEN EXTRACTION
# ============================================================================


class TestExtractToken:
    def test_cookie_token(self):
        request = make_request(cookies={"token": "cookie-token"})
        assert extract_token(request) == "cookie-token"

    def test_bearer_header(self):
        request = make_request(headers={"Authorization": "Bearer header-token"})
        assert extract_token(request) == "header-token"

    def test_cookie_wins_over_header(self):
        request = make_request(
            headers={"Authorization": "Bearer header-token"},
            cookies={"token": "cookie-token"},
        )
        assert extract_token(request) == "cookie-token"

    def test_non_bearer_scheme_ignored(self):
        request = make_request(headers={"Authorization": "Basic dXNlcjpwYXNz"})
        assert extract_token(request) is None

    def test_no_token(self):
        assert extract_token(make_request()) is None


# ============================================================================
# AUTHENTICATE
# ============================================================================


class TestAuthenticate:
    """Test the core guard used by every protected handler."""

    def test_valid_token_sets_request_user(self, token_for, company_a):
        request = make_request(cookies={"token": token_for(company_a, "CA")})

        payload = authenticate(request, MANAGEMENT)

        assert isinstance(payload, AuthTokenPayload)
        assert payload.company_id == company_a
        assert request.state.user is payload

    def test_missing_token(self):
        with pytest.raises(AuthenticationRequired) as exc_info:
            authenticate(make_request())
        assert exc_info.value.message == "Authentication required"
        assert exc_info.value.status_code == 401

    def test_invalid_token(self):
        request = make_request(headers={"Authorization": "Bearer garbage"})
        with pytest.raises(AuthenticationRequired) as exc_info:
            authenticate(request)
        assert exc_info.value.message == "Invalid or expired token"

    def test_refresh_token_not_accepted(self, refresh_token_for, company_a):
        request = make_request(cookies={"token": refresh_token_for(company_a)})
        with pytest.raises(AuthenticationRequired) as exc_info:
            authenticate(request)
        assert exc_info.value.message == "Invalid or expired token"

    def test_role_not_allowed(self, token_for, company_a):
        request = make_request(cookies={"token": token_for(company_a, "CU")})
        with pytest.raises(PermissionDenied) as exc_info:
            authenticate(request, MANAGEMENT)
        assert exc_info.value.status_code == 403
        assert not hasattr(request.state, "user")

    def test_empty_roles_allow_any_authenticated_user(self, token_for, company_a):
        request = make_request(cookies={"token": token_for(company_a, "CU")})
        assert authenticate(request, None).role_id == "CU"
        assert authenticate(request, frozenset()).role_id == "CU"

    def test_unknown_role_code_denied(self, token_for, company_a):
        request = make_request(cookies={"token": token_for(company_a, "XX")})
        with pytest.raises(PermissionDenied):
            authenticate(request, ADMIN_ONLY)


# ============================================================================
# PROTECT
# ============================================================================


class TestProtect:
    """Test wrapping handlers with the guard."""

    async def test_handler_runs_after_successful_check(self, token_for, company_a):
        handler = AsyncMock(return_value="ok")
        guarded = protect(handler, required_roles=MANAGEMENT)
        request = make_request(cookies={"token": token_for(company_a, "SA")})

        assert await guarded(request) == "ok"
        handler.assert_awaited_once_with(request)
        assert request.state.user.role_id == "SA"

    async def test_handler_not_called_without_token(self):
        handler = AsyncMock()
        guarded = protect(handler, required_roles=MANAGEMENT)

        with pytest.raises(AuthenticationRequired):
            await guarded(make_request())
        handler.assert_not_awaited()

    async def test_handler_not_called_for_wrong_role(self, token_for, company_a):
        handler = AsyncMock()
        guarded = protect(handler, required_roles=ADMIN_ONLY)
        request = make_request(cookies={"token": token_for(company_a, "CA")})

        with pytest.raises(PermissionDenied):
            await guarded(request)
        handler.assert_not_awaited()

    async def test_public_handler_is_not_wrapped(self):
        async def handler(request):
            return "public"

        assert protect(handler, public=True) is handler
        assert await protect(handler, public=True)(make_request()) == "public"

    def test_wrapper_keeps_handler_name(self):
        async def list_colors(request):
            return None

        assert protect(list_colors).__name__ == "list_colors"


# ============================================================================
# GET AUTH USER
# ============================================================================


class TestGetAuthUser:
    def test_returns_identity_for_valid_token(self, token_for, company_a):
        request = make_request(headers={"Authorization": f"Bearer {token_for(company_a)}"})
        user = get_auth_user(request)
        assert user is not None
        assert user.company_id == company_a

    def test_returns_none_without_token(self):
        assert get_auth_user(make_request()) is None

    def test_returns_none_for_invalid_token(self):
        assert get_auth_user(make_request(cookies={"token": "garbage"})) is None

    def test_returns_none_for_refresh_token(self, refresh_token_for, company_a):
        request = make_request(cookies={"token": refresh_token_for(company_a)})
        assert get_auth_user(request) is None

    def test_prefers_already_authenticated_user(self, token_for, company_a):
        request = make_request(cookies={"token": token_for(company_a, "CA")})
        payload = authenticate(request)
        assert get_auth_user(request) is payload


# ============================================================================
# GUARDS AS FASTAPI DEPENDENCIES
# ============================================================================


@pytest.fixture
def guarded_app():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/anyone")
    async def anyone(user: AuthTokenPayload = Depends(require_any_user)):
        return {"user_id": user.user_id}

    @app.get("/managers")
    async def managers(user: AuthTokenPayload = Depends(require_admin_or_manager)):
        return {"role": user.role_id}

    @app.get("/admins")
    async def admins(user: AuthTokenPayload = Depends(require_admin_only)):
        return {"role": user.role_id}

    async def wrapped(request: Request):
        return {"company": request.state.user.company_id}

    app.add_api_route("/wrapped", require_role([Role.MANAGER]).wrap(wrapped), methods=["GET"])
    return app


class TestAuthGuards:
    def test_guard_roles(self):
        assert require_admin_only.allowed_roles == ADMIN_ONLY
        assert require_admin_or_manager.allowed_roles == MANAGEMENT
        assert AuthGuard().allowed_roles == frozenset()

    def test_any_user_dependency(self, guarded_app, auth_headers, company_a):
        client = TestClient(guarded_app)
        response = client.get("/anyone", headers=auth_headers(company_a, "CU"))
        assert response.status_code == 200
        assert response.json() == {"user_id": "staff1"}

    def test_missing_token_is_401(self, guarded_app):
        client = TestClient(guarded_app)
        response = client.get("/anyone")
        assert response.status_code == 401
        assert response.json() == {"error": "Authentication required"}

    def test_wrong_role_is_403(self, guarded_app, auth_headers, company_a):
        client = TestClient(guarded_app)
        response = client.get("/admins", headers=auth_headers(company_a, "CA"))
        assert response.status_code == 403
        assert response.json() == {
            "error": "You do not have permission to access this resource"
        }

    def test_manager_dependency(self, guarded_app, auth_headers, company_a):
        client = TestClient(guarded_app)
        assert client.get("/managers", headers=auth_headers(company_a, "CA")).status_code == 200
        assert client.get("/managers", headers=auth_headers(company_a, "CU")).status_code == 403

    def test_wrapped_handler(self, guarded_app, auth_headers):
        client = TestClient(guarded_app)
        company_id = str(uuid4())
        response = client.get("/wrapped", headers=auth_headers(company_id, "CA"))
        assert response.status_code == 200
        assert response.json() == {"company": company_id}

        assert client.get("/wrapped", headers=auth_headers(company_id, "SA")).status_code == 403
