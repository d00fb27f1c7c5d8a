"""Session transports: how the session token travels between client and server."""

from abc import ABC, abstractmethod

from fastapi.security.utils import get_authorization_scheme_param
from starlette.requests import HTTPConnection
from starlette.responses import Response

from moments.config import Config

AUTH_COOKIE_NAME = "auth-token"


class SessionTransport(ABC):
    """Strategy for persisting and reading the session token.

    Every transport keeps the token in an http-only cookie; subclasses decide
    where else a token may be read from and whether the raw token is handed
    to the client.
    """

    exposes_token: bool = False

    def __init__(self, secure: bool, cookie_name: str = AUTH_COOKIE_NAME) -> None:
        self.secure = secure
        self.cookie_name = cookie_name

    def attach(self, response: Response, token: str, max_age: int) -> None:
        response.set_cookie(
            key=self.cookie_name,
            value=token,
            max_age=max_age,
            path="/",
            secure=self.secure,
            httponly=True,
            samesite="lax",
        )

    def clear(self, response: Response) -> None:
        response.delete_cookie(
            key=self.cookie_name,
            path="/",
            secure=self.secure,
            httponly=True,
            samesite="lax",
        )

    def read_cookie(self, connection: HTTPConnection) -> str | None:
        return connection.cookies.get(self.cookie_name) or None

    @abstractmethod
    def read(self, connection: HTTPConnection) -> str | None:
        """Return the raw token carried by the request, if any."""


class CookieTransport(SessionTransport):
    """Server cookie only; the client never sees the token."""

    def read(self, connection: HTTPConnection) -> str | None:
        return self.read_cookie(connection)


class ClientTokenTransport(SessionTransport):
    """Cookie plus a client-held copy sent back as a Bearer token.

    The token is echoed in the login response so the client can keep it in
    local storage and check it out of band through the verify-token endpoint.
    """

    exposes_token = True

    def read(self, connection: HTTPConnection) -> str | None:
        # Check Bearer token first (preferred)
        scheme, credentials = get_authorization_scheme_param(connection.headers.get("Authorization"))
        if scheme.lower() == "bearer" and credentials:
            return credentials
        return self.read_cookie(connection)


def create_session_transport(config: Config) -> SessionTransport:
    if config.session_transport == "client_token":
        return ClientTokenTransport(secure=config.production)
    return CookieTransport(secure=config.production)
