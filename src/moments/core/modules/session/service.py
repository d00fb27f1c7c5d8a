import structlog
from starlette.requests import HTTPConnection
from starlette.responses import Response

from moments.config import Config
from moments.core.core import Service
from moments.core.modules.session.context import current_connection
from moments.core.modules.session.transport import SessionTransport, create_session_transport
from moments.core.modules.token.models import AuthToken

logger = structlog.get_logger(__name__)


class SessionService(Service):
    """Binds session tokens to clients through the configured transport."""

    def __init__(self, config: Config) -> None:
        super().__init__(config)
        self._transport = create_session_transport(config)

    @property
    def transport(self) -> SessionTransport:
        return self._transport

    def start_session(self, response: Response) -> AuthToken:
        """Issue a fresh token and attach it to the response."""
        token_service = self.core.services.token
        auth_token = token_service.issue()
        self._transport.attach(response, auth_token, max_age=token_service.lifetime)
        logger.info("session_started", transport=type(self._transport).__name__)
        return auth_token

    def end_session(self, response: Response) -> None:
        """Delete the session cookie. Deleting an absent cookie is fine."""
        self._transport.clear(response)
        logger.info("session_ended")

    def current_token(self, connection: HTTPConnection | None = None) -> AuthToken | None:
        """Read the token from the given request, or from the ambient one when omitted."""
        if connection is None:
            connection = current_connection()
        if connection is None:
            return None
        value = self._transport.read(connection)
        return AuthToken(value) if value else None

    def current_cookie_token(self, connection: HTTPConnection | None = None) -> AuthToken | None:
        """Read only the session cookie, ignoring any client-held copy."""
        if connection is None:
            connection = current_connection()
        if connection is None:
            return None
        value = self._transport.read_cookie(connection)
        return AuthToken(value) if value else None
