"""End-to-end tests for the auth endpoints and the edge gate."""

import pytest
import structlog

from moments.core.modules.session.transport import AUTH_COOKIE_NAME
from moments.web.error_handlers import NO_CACHE_HEADERS


def assert_no_cache(response):
    for name, value in NO_CACHE_HEADERS.items():
        assert response.headers[name] == value


class TestLoginFlow:
    """Login, use the session, log out."""

    def test_protected_api_requires_session(self, client):
        response = client.get("/api/moments")
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Unauthorized, please log in", "code": "UNAUTHORIZED"}
        assert_no_cache(response)

    def test_login_sets_cookie_and_unlocks_api(self, client, password):
        response = client.post("/api/auth/login", json={"password": password})
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Login successful"}
        assert AUTH_COOKIE_NAME in response.cookies
        set_cookie = response.headers["set-cookie"]
        assert "HttpOnly" in set_cookie
        assert "Max-Age=3600" in set_cookie
        assert_no_cache(response)

        assert client.get("/api/moments").status_code == 200
        status = client.get("/api/auth/status").json()
        assert status == {"success": True, "authenticated": True, "authEnabled": True, "passwordConfigured": True}

    def test_wrong_password(self, client):
        response = client.post("/api/auth/login", json={"password": "wrong"})
        assert response.status_code == 401
        assert response.json()["message"] == "Incorrect password"
        assert "set-cookie" not in response.headers

    @pytest.mark.parametrize("body", [{}, {"password": ""}])
    def test_missing_password(self, client, body):
        response = client.post("/api/auth/login", json=body)
        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Password is required", "code": "BAD_REQUEST"}

    def test_malformed_body(self, client):
        response = client.post("/api/auth/login", content=b"not json", headers={"Content-Type": "application/json"})
        assert response.status_code == 400
        assert response.json()["code"] == "BAD_REQUEST"

    def test_logout_revokes_cookie(self, logged_in_client):
        response = logged_in_client.post("/api/auth/logout")
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Logout successful"}
        assert "Max-Age=0" in response.headers["set-cookie"]
        assert AUTH_COOKIE_NAME not in logged_in_client.cookies
        assert logged_in_client.get("/api/moments").status_code == 401

    def test_logout_is_idempotent(self, client):
        """Test that logging out without a session, twice, still succeeds."""
        for _ in range(2):
            response = client.post("/api/auth/logout")
            assert response.status_code == 200
            assert response.json()["success"] is True
        assert AUTH_COOKIE_NAME not in client.cookies


class TestSessionExpiry:
    def test_session_expires_after_lifetime(self, logged_in_client, clock):
        clock.advance(3600)
        assert logged_in_client.get("/api/moments").status_code == 200
        clock.advance(1)
        assert logged_in_client.get("/api/moments").status_code == 401

    def test_status_clears_stale_cookie(self, logged_in_client, clock):
        """Test that status reports an expired session and removes its cookie."""
        clock.advance(3601)
        response = logged_in_client.get("/api/auth/status")
        assert response.json()["authenticated"] is False
        assert "Max-Age=0" in response.headers["set-cookie"]

    def test_tampered_cookie_is_rejected(self, logged_in_client):
        token = logged_in_client.cookies[AUTH_COOKIE_NAME]
        logged_in_client.cookies.clear()
        logged_in_client.cookies.set(AUTH_COOKIE_NAME, token[:-2] + ("AA" if not token.endswith("AA") else "BB"))
        assert logged_in_client.get("/api/moments").status_code == 401


class TestFrameworkErrors:
    """Router-level HTTP errors use the standard error body."""

    def test_unknown_api_route(self, logged_in_client):
        response = logged_in_client.get("/api/nope")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Not Found", "code": "NOT_FOUND"}
        assert_no_cache(response)

    def test_wrong_method(self, client):
        response = client.get("/api/auth/login")
        assert response.status_code == 405
        assert response.json()["code"] == "BAD_REQUEST"
        assert "POST" in response.headers["allow"]


class TestStatus:
    def test_anonymous(self, client):
        response = client.get("/api/auth/status", params={"_": "12345"})
        assert response.status_code == 200
        assert response.json() == {"success": True, "authenticated": False, "authEnabled": True, "passwordConfigured": True}
        assert_no_cache(response)
        assert "set-cookie" not in response.headers


class TestNavigation:
    """Non-API paths are never blocked for a missing session."""

    def test_unauthenticated_page_passes_gate(self, client):
        # No page route exists, so passing the gate surfaces as the router's 404
        response = client.get("/journal")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Not Found", "code": "NOT_FOUND"}

    def test_public_paths_pass(self, client):
        assert client.get("/health").json() == {"status": "healthy"}
        assert client.get("/api/health").json() == {"status": "healthy", "store_connected": True}
        assert client.get("/openapi.json").status_code == 200

    def test_request_context_bound_for_logging(self, client, app_instance, monkeypatch):
        """Test that log calls during a request carry its method and path."""
        seen = {}

        async def check_health():
            seen.update(structlog.contextvars.get_contextvars())
            return True

        monkeypatch.setattr(app_instance, "check_health", check_health)
        client.get("/api/health")
        assert seen == {"method": "GET", "path": "/api/health"}

    def test_gate_failure(self, client, app_instance, monkeypatch):
        """Test that a failing gate is a 500 for API requests and a pass for pages."""

        async def broken(connection=None):
            raise RuntimeError("boom")

        monkeypatch.setattr(app_instance, "is_authenticated", broken)
        response = client.get("/api/moments")
        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Server error", "code": "SERVER_ERROR"}
        assert client.get("/journal").status_code == 404


class TestUnconfigured:
    """Without an access password the system is closed."""

    @pytest.fixture
    def closed_client(self, make_config, make_client):
        return make_client(make_config(auth_password=None))

    def test_api_is_configuration_error(self, closed_client):
        response = closed_client.get("/api/moments")
        assert response.status_code == 500
        assert response.json()["code"] == "CONFIGURATION_ERROR"
        assert "MOMENTS_AUTH_PASSWORD" in response.json()["message"]

    def test_page_is_html_error(self, closed_client):
        response = closed_client.get("/journal")
        assert response.status_code == 500
        assert response.headers["content-type"].startswith("text/html")
        assert "Configuration error" in response.text

    def test_login_is_configuration_error(self, closed_client):
        response = closed_client.post("/api/auth/login", json={"password": ""})
        assert response.status_code == 500
        assert response.json()["code"] == "CONFIGURATION_ERROR"

    def test_status_reports_unconfigured(self, closed_client):
        body = closed_client.get("/api/auth/status").json()
        assert body["success"] is False
        assert body["authenticated"] is False
        assert body["authEnabled"] is True
        assert body["passwordConfigured"] is False
        assert "MOMENTS_AUTH_PASSWORD" in body["message"]

    def test_logout_still_succeeds(self, closed_client):
        assert closed_client.post("/api/auth/logout").status_code == 200

    def test_public_and_static_paths_unaffected(self, closed_client):
        assert closed_client.get("/health").status_code == 200
        assert closed_client.get("/uploads/images/missing.png").status_code == 404


class TestClientTokenTransport:
    @pytest.fixture
    def token_client(self, make_config, make_client):
        return make_client(make_config(session_transport="client_token"))

    def test_login_returns_token_usable_as_bearer(self, token_client, password):
        token = token_client.post("/api/auth/login", json={"password": password}).json()["token"]
        token_client.cookies.clear()
        assert token_client.get("/api/moments").status_code == 401
        assert token_client.get("/api/moments", headers={"Authorization": f"Bearer {token}"}).status_code == 200

    def test_verify_token(self, token_client, password, clock):
        token = token_client.post("/api/auth/login", json={"password": password}).json()["token"]
        assert token_client.post("/api/auth/verify-token", json={"token": token}).json() == {"success": True, "valid": True}
        clock.advance(3601)
        assert token_client.post("/api/auth/verify-token", json={"token": token}).json()["valid"] is False

    def test_stale_bearer_does_not_clear_valid_cookie(self, token_client, password):
        """Test that status keeps a valid session cookie when the Bearer copy is stale."""
        token_client.post("/api/auth/login", json={"password": password})
        response = token_client.get("/api/auth/status", headers={"Authorization": "Bearer stale.token.here"})
        assert response.json()["authenticated"] is False
        assert "set-cookie" not in response.headers
        assert AUTH_COOKIE_NAME in token_client.cookies
        assert token_client.get("/api/auth/status").json()["authenticated"] is True

    def test_verify_token_requires_token(self, token_client):
        response = token_client.post("/api/auth/verify-token", json={})
        assert response.status_code == 400
        assert response.json()["message"] == "Token is required"

    def test_verify_token_unavailable_with_cookie_transport(self, client):
        response = client.post("/api/auth/verify-token", json={"token": "x"})
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"
