import binascii

import jwt
import structlog
from jwt.utils import base64url_decode, base64url_encode

from moments.config import Config
from moments.core.core import Service
from moments.core.modules.token.models import AuthToken, TokenClaims
from moments.errors import ConfigurationError

logger = structlog.get_logger(__name__)

ALGORITHM = "HS256"
DEVELOPMENT_SIGNING_KEY = "moments-development-signing-key-do-not-deploy"

# Expiry is checked against the injected clock, not by PyJWT
_DECODE_OPTIONS = {"require": ["iat", "exp"], "verify_exp": False, "verify_iat": False}


def resolve_signing_key(config: Config) -> str:
    """Return the configured signing key, falling back to a development key outside production."""
    if config.jwt_secret:
        return config.jwt_secret
    if config.production:
        raise ConfigurationError("Session signing key is not configured, set MOMENTS_JWT_SECRET")
    logger.warning("jwt_secret_not_configured", fallback="development signing key")
    return DEVELOPMENT_SIGNING_KEY


def has_canonical_signature(token: str) -> bool:
    """Check that the signature segment is in canonical unpadded base64url form.

    Lenient base64 decoding ignores stray characters and trailing bits, so
    several strings can decode to the same signature bytes.
    """
    signature = token.rpartition(".")[2]
    try:
        return base64url_encode(base64url_decode(signature)).decode("ascii") == signature
    except (binascii.Error, ValueError):
        return False


class TokenService(Service):
    """Issues and verifies signed, time-limited session tokens."""

    def __init__(self, config: Config) -> None:
        super().__init__(config)
        self._signing_key = resolve_signing_key(config)
        self._lifetime = config.session_lifetime

    @property
    def lifetime(self) -> int:
        """Session lifetime in seconds."""
        return self._lifetime

    def issue(self) -> AuthToken:
        issued_at = self.core.clock()
        claims = TokenClaims(authenticated=True, issued_at=issued_at, expires_at=issued_at + self._lifetime)
        return AuthToken(jwt.encode(claims.to_payload(), self._signing_key, algorithm=ALGORITHM))

    def decode(self, token: str) -> TokenClaims | None:
        """Return the claims of a currently valid token, None for anything else.

        Fails closed on a bad signature, malformed input, missing claims, a
        false authenticated flag, or a clock past the expiry. Never raises.
        """
        if not has_canonical_signature(token):
            return None
        try:
            payload = jwt.decode(token, self._signing_key, algorithms=[ALGORITHM], options=_DECODE_OPTIONS)
            claims = TokenClaims.model_validate(payload)
        except (jwt.InvalidTokenError, ValueError, TypeError):
            return None

        if not claims.authenticated:
            return None
        if self.core.clock() > claims.expires_at:
            return None
        return claims

    def verify(self, token: str) -> bool:
        return self.decode(token) is not None
