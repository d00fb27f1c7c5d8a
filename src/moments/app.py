from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from starlette.requests import HTTPConnection
from starlette.responses import Response

from moments.config import Config
from moments.core.core import Clock, Core
from moments.core.modules.access.models import AuthStatus
from moments.core.modules.credential.service import NOT_CONFIGURED_MESSAGE
from moments.core.modules.moment.models import Moment, MomentCreate, MomentFilter, MomentList, MomentStatus, MomentUpdate, TagCount
from moments.core.modules.token.models import AuthToken
from moments.core.modules.upload.models import MediaKind, UploadBatch, UploadInfo, UploadResult
from moments.errors import AuthenticationError, NotFoundError, ValidationError
from moments.utils import epoch_seconds

logger = structlog.get_logger(__name__)


class App:
    """Facade for all application operations, checks the session before delegating to Core."""

    def __init__(self, config: Config, clock: Clock = epoch_seconds) -> None:
        self._core = Core(config, clock)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    # === Auth ===
    def is_auth_configured(self) -> bool:
        """Whether an access password is configured."""
        return self._core.services.credential.is_configured()

    @property
    def exposes_token(self) -> bool:
        """Whether the session transport hands the raw token to the client."""
        return self._core.services.session.transport.exposes_token

    @property
    def max_upload_size(self) -> int:
        """Largest accepted upload in bytes."""
        return self._core.config.max_file_size

    async def is_authenticated(self, connection: HTTPConnection | None = None) -> bool:
        """Gate verdict for the given request, or the ambient one when omitted."""
        return self._core.services.access.is_authenticated(connection)

    async def login(self, password: str, response: Response) -> AuthToken:
        """Check the password and start a session on the response."""
        credential = self._core.services.credential
        credential.ensure_configured()
        if not password:
            raise ValidationError("Password is required")
        if not credential.verify(password):
            logger.info("login_failed")
            raise AuthenticationError("Incorrect password")
        return self._core.services.session.start_session(response)

    async def logout(self, response: Response) -> None:
        """End the session. Succeeds whether or not a session exists."""
        self._core.services.session.end_session(response)

    async def get_auth_status(self, response: Response) -> AuthStatus:
        """Report authentication state for the ambient request.

        A session cookie that no longer verifies is cleared from the response so
        the client stops sending it. A stale client-held token never clears a
        valid cookie.
        """
        if not self.is_auth_configured():
            return AuthStatus(
                success=False, authenticated=False, auth_enabled=True, password_configured=False, message=NOT_CONFIGURED_MESSAGE
            )

        authenticated = self._core.services.access.is_authenticated()
        session = self._core.services.session
        cookie_token = session.current_cookie_token()
        if cookie_token is not None and not self._core.services.token.verify(cookie_token):
            session.end_session(response)
        return AuthStatus(success=True, authenticated=authenticated, auth_enabled=True, password_configured=True)

    async def verify_token(self, token: str) -> bool:
        """Verify a client-held token passed out of band."""
        if not self.exposes_token:
            raise NotFoundError("Token verification is not enabled")
        self._core.services.credential.ensure_configured()
        if not token:
            raise ValidationError("Token is required")
        return self._core.services.token.verify(token)

    async def check_health(self) -> bool:
        """Whether the document store is reachable."""
        return await self._core.store.ping()

    # === Moments ===
    async def get_moments(
        self,
        connection: HTTPConnection,
        page_size: int = 10,
        cursor: str | None = None,
        moment_filter: MomentFilter | None = None,
    ) -> MomentList:
        """Get a page of moments, newest first, optionally filtered."""
        self._ensure_authenticated(connection)
        return await self._core.services.moment.list_moments(page_size, cursor, moment_filter)

    async def get_moment(self, connection: HTTPConnection, moment_id: str) -> Moment:
        self._ensure_authenticated(connection)
        return await self._core.services.moment.get_moment(moment_id)

    async def create_moment(self, connection: HTTPConnection, data: MomentCreate) -> Moment:
        self._ensure_authenticated(connection)
        return await self._core.services.moment.create_moment(data)

    async def update_moment(self, connection: HTTPConnection, moment_id: str, data: MomentUpdate) -> Moment:
        """Update specific moment fields (partial update)."""
        self._ensure_authenticated(connection)
        return await self._core.services.moment.update_moment(moment_id, data)

    async def delete_moment(self, connection: HTTPConnection, moment_id: str) -> None:
        self._ensure_authenticated(connection)
        await self._core.services.moment.delete_moment(moment_id)

    async def toggle_favorite(self, connection: HTTPConnection, moment_id: str) -> Moment:
        self._ensure_authenticated(connection)
        return await self._core.services.moment.toggle_favorite(moment_id)

    async def search_moments(self, connection: HTTPConnection, query: str) -> list[Moment]:
        self._ensure_authenticated(connection)
        return await self._core.services.moment.search_moments(query)

    async def get_moments_by_status(self, connection: HTTPConnection, status: MomentStatus) -> list[Moment]:
        self._ensure_authenticated(connection)
        return await self._core.services.moment.get_moments_by_status(status)

    async def get_moments_by_tag(self, connection: HTTPConnection, tag: str) -> list[Moment]:
        self._ensure_authenticated(connection)
        return await self._core.services.moment.get_moments_by_tag(tag)

    async def get_favorited_moments(self, connection: HTTPConnection) -> list[Moment]:
        self._ensure_authenticated(connection)
        return await self._core.services.moment.get_favorited_moments()

    async def get_tags(self, connection: HTTPConnection) -> list[TagCount]:
        self._ensure_authenticated(connection)
        return await self._core.services.moment.get_tags()

    # === Uploads ===
    async def get_upload_info(self, connection: HTTPConnection) -> UploadInfo:
        self._ensure_authenticated(connection)
        return self._core.services.upload.get_upload_info()

    async def upload_file(self, connection: HTTPConnection, filename: str, content: bytes, kind: MediaKind) -> UploadResult:
        self._ensure_authenticated(connection)
        return await self._core.services.upload.upload_file(filename, content, kind)

    async def upload_images(self, connection: HTTPConnection, files: list[tuple[str, bytes]]) -> UploadBatch:
        self._ensure_authenticated(connection)
        return await self._core.services.upload.upload_images(files)

    # === Private helpers ===
    def _ensure_authenticated(self, connection: HTTPConnection) -> None:
        """Raises AuthenticationError (or ConfigurationError) unless the request has a valid session."""
        self._core.services.access.ensure_authenticated(connection)
