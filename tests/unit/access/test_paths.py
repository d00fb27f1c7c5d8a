"""Tests for request path classification."""

import pytest

from moments.core.modules.access.paths import PathClass, PathRule, classify_path, is_api_path


class TestClassifyPath:
    @pytest.mark.parametrize(
        "path",
        [
            "/api/auth/login",
            "/api/auth/logout",
            "/api/auth/status",
            "/api/auth/verify-token",
            "/api/health",
            "/health",
            "/docs",
            "/docs/oauth2-redirect",
            "/api/auth/status/",
            "/api/auth/login/",
            "/api/health/",
            "/redoc",
            "/openapi.json",
            "/favicon.ico",
            "/robots.txt",
            "/sitemap.xml",
        ],
    )
    def test_public_paths(self, path):
        assert classify_path(path) == PathClass.PUBLIC

    @pytest.mark.parametrize("path", ["/images/a.png", "/icons/x.svg", "/uploads/images/1.jpg", "/static/app.js"])
    def test_static_paths(self, path):
        assert classify_path(path) == PathClass.STATIC

    @pytest.mark.parametrize(
        "path",
        [
            "/",
            "/api/moments",
            "/api/moments/abc",
            "/api/upload/image",
            "/api/auth/login/extra",
            "/docsx",
            "/redocs",
            "/api/auth",
            "/images",
            "/uploadsx/file",
            "/anything/else",
        ],
    )
    def test_everything_else_is_protected(self, path):
        """Test that exact rules do not leak to longer paths and unknown paths are protected."""
        assert classify_path(path) == PathClass.PROTECTED

    def test_trailing_slash_on_public_path_reaches_router(self, client):
        """Test that a slash-suffixed public path passes the gate to the slash redirect."""
        response = client.get("/api/auth/status/", follow_redirects=False)
        assert response.status_code == 307
        assert response.headers["location"].endswith("/api/auth/status")

    def test_first_matching_rule_wins(self):
        rules = (
            PathRule("/a/", PathClass.STATIC, prefix=True),
            PathRule("/a/b", PathClass.PUBLIC),
        )
        assert classify_path("/a/b", rules) == PathClass.STATIC


class TestIsApiPath:
    @pytest.mark.parametrize(("path", "expected"), [("/api/moments", True), ("/api", True), ("/apix", False), ("/", False)])
    def test_api_prefix(self, path, expected):
        assert is_api_path(path) is expected
