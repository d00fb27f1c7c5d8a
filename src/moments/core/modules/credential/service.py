import secrets

import structlog

from moments.config import Config
from moments.core.core import Service
from moments.errors import ConfigurationError

logger = structlog.get_logger(__name__)

NOT_CONFIGURED_MESSAGE = "Access password is not configured, set MOMENTS_AUTH_PASSWORD"


class CredentialService(Service):
    """Holds the shared access password read once from config."""

    def __init__(self, config: Config) -> None:
        super().__init__(config)
        self._secret = config.auth_password or None

    def is_configured(self) -> bool:
        return self._secret is not None

    def ensure_configured(self) -> None:
        """Raise ConfigurationError when no access password is set."""
        if self._secret is None:
            raise ConfigurationError(NOT_CONFIGURED_MESSAGE)

    def verify(self, candidate: str) -> bool:
        """Exact, case-sensitive comparison against the configured password.

        Raises ConfigurationError when no password is configured, so an
        unconfigured system can never be mistaken for a wrong password.
        """
        if self._secret is None:
            raise ConfigurationError(NOT_CONFIGURED_MESSAGE)
        return secrets.compare_digest(candidate.encode("utf-8"), self._secret.encode("utf-8"))

    async def on_start(self) -> None:
        if self._secret is None:
            logger.warning("access_password_not_configured")
