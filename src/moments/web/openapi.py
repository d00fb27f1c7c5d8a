from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

from moments.core.modules.session.transport import AUTH_COOKIE_NAME

PUBLIC_ENDPOINTS = {
    ("POST", "/api/auth/login"),
    ("POST", "/api/auth/logout"),
    ("GET", "/api/auth/status"),
    ("POST", "/api/auth/verify-token"),
    ("GET", "/api/health"),
    ("GET", "/health"),
}


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="Moments API",
            version="0.1.0",
            summary="Private journal of short moments behind a single access password",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "AuthTokenCookie": {
                "type": "apiKey",
                "in": "cookie",
                "name": AUTH_COOKIE_NAME,
                "description": "Session token set by login",
            },
            "BearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "description": "Client-held session token, accepted with the client token transport",
            },
        }

        openapi_schema["security"] = [
            {"AuthTokenCookie": []},
            {"BearerAuth": []},
        ]

        for path, path_item in openapi_schema["paths"].items():
            for method, operation in path_item.items():
                if (method.upper(), path) in PUBLIC_ENDPOINTS:
                    operation["security"] = []

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    success: bool = Field(False, description="Always false for errors")
    message: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Machine-readable error code")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"success": False, "message": "Unauthorized, please log in", "code": "UNAUTHORIZED"},
                {"success": False, "message": "Moment 'abc' not found", "code": "NOT_FOUND"},
                {"success": False, "message": "Password is required", "code": "BAD_REQUEST"},
            ]
        }
    }
