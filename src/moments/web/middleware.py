"""Edge gate applied to every request before it reaches a route."""

import structlog
from structlog.contextvars import bound_contextvars
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import HTMLResponse, Response
from starlette.types import ASGIApp

from moments.app import App
from moments.core.modules.access.paths import PathClass, classify_path, is_api_path
from moments.core.modules.credential.service import NOT_CONFIGURED_MESSAGE
from moments.core.modules.session.context import bind_connection
from moments.web.error_handlers import ErrorCode, create_json_error_response

logger = structlog.get_logger(__name__)

CONFIGURATION_ERROR_PAGE = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Configuration error</title></head>
<body>
<h1>Configuration error</h1>
<p>The access password is not configured. Set MOMENTS_AUTH_PASSWORD and restart the server.</p>
</body>
</html>
"""


class AuthGateMiddleware(BaseHTTPMiddleware):
    """Classifies each request path and enforces the session gate.

    Public and static paths always pass. For protected paths an unconfigured
    system answers 500; an unauthenticated API request answers 401, while
    navigational requests pass so the UI can show its login form. The request
    is also bound as the ambient connection for handlers that read the session
    without it.
    """

    def __init__(self, app: ASGIApp, app_instance: App) -> None:
        super().__init__(app)
        self._app = app_instance

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        with bind_connection(request), bound_contextvars(method=request.method, path=request.url.path):
            return await self._gate(request, call_next)

    async def _gate(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if classify_path(path) != PathClass.PROTECTED:
            return await call_next(request)

        api = is_api_path(path)

        if not self._app.is_auth_configured():
            logger.error("auth_not_configured")
            if api:
                return create_json_error_response(500, NOT_CONFIGURED_MESSAGE, ErrorCode.CONFIGURATION_ERROR)
            return HTMLResponse(CONFIGURATION_ERROR_PAGE, status_code=500)

        try:
            authenticated = await self._app.is_authenticated(request)
        except Exception:
            logger.exception("auth_gate_failed")
            if api:
                return create_json_error_response(500, "Server error", ErrorCode.SERVER_ERROR)
            return await call_next(request)

        if not authenticated and api:
            logger.info("unauthorized_request")
            return create_json_error_response(401, "Unauthorized, please log in", ErrorCode.UNAUTHORIZED)

        return await call_next(request)
