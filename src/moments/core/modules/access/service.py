from starlette.requests import HTTPConnection

from moments.core.core import Service
from moments.errors import AuthenticationError


class AccessService(Service):
    def is_authenticated(self, connection: HTTPConnection | None = None) -> bool:
        """Whether the request (explicit or ambient) carries a currently valid session.

        Raises ConfigurationError when no access password is configured: an
        unconfigured system is closed, never open.
        """
        self.core.services.credential.ensure_configured()
        auth_token = self.core.services.session.current_token(connection)
        if auth_token is None:
            return False
        return self.core.services.token.verify(auth_token)

    def ensure_authenticated(self, connection: HTTPConnection | None = None) -> None:
        """Raise AuthenticationError unless the request is authenticated."""
        if not self.is_authenticated(connection):
            raise AuthenticationError
