"""Tests for the authentication gate."""

import pytest
from starlette.requests import Request

from moments.core.core import Core
from moments.core.modules.session.context import bind_connection
from moments.core.modules.session.transport import AUTH_COOKIE_NAME
from moments.errors import AuthenticationError, ConfigurationError


def make_request(cookie: str | None = None) -> Request:
    headers = [(b"cookie", f"{AUTH_COOKIE_NAME}={cookie}".encode())] if cookie is not None else []
    return Request({"type": "http", "method": "GET", "path": "/api/moments", "headers": headers, "query_string": b""})


class TestIsAuthenticated:
    @pytest.fixture(autouse=True)
    def setup(self, core, clock):
        self.access = core.services.access
        self.tokens = core.services.token
        self.clock = clock

    def test_valid_cookie(self):
        assert self.access.is_authenticated(make_request(self.tokens.issue()))

    def test_no_cookie(self):
        assert not self.access.is_authenticated(make_request())

    def test_garbage_cookie(self):
        assert not self.access.is_authenticated(make_request("garbage"))

    def test_expired_cookie(self):
        token = self.tokens.issue()
        self.clock.advance(3601)
        assert not self.access.is_authenticated(make_request(token))

    def test_ambient_request_matches_explicit(self):
        """Test that the gate gives the same verdict for the bound request."""
        request = make_request(self.tokens.issue())
        with bind_connection(request):
            assert self.access.is_authenticated() == self.access.is_authenticated(request)

    def test_ensure_authenticated_raises(self):
        with pytest.raises(AuthenticationError):
            self.access.ensure_authenticated(make_request())


class TestUnconfiguredGate:
    def test_gate_raises_configuration_error(self, make_config, clock):
        """Test that an unconfigured system is closed even with a correctly signed cookie."""
        core = Core(make_config(auth_password=None), clock)
        token = core.services.token.issue()
        with pytest.raises(ConfigurationError):
            core.services.access.is_authenticated(make_request(token))
