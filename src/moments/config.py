from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

SessionTransportName = Literal["cookie", "client_token"]


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    host: str = "127.0.0.1"
    port: int = 3000
    debug: bool = False
    production: bool = False  # Enables Secure cookies and requires jwt_secret
    auth_password: str | None = None  # Shared access password; unset means the system is not configured
    jwt_secret: str | None = None  # HMAC key for session tokens
    session_expire_hours: float = Field(default=24, gt=0)
    session_transport: SessionTransportName = "cookie"
    cors_origins: list[str] = []
    database_url: str | None = None  # MongoDB URL, e.g. mongodb://localhost/moments; in-process store when unset
    uploads_path: str = "./uploads"  # Directory for uploaded images and videos
    max_file_size: int = 10 * 1024 * 1024
    allowed_image_extensions: list[str] = ["jpg", "jpeg", "png", "gif", "webp"]
    allowed_video_extensions: list[str] = ["mp4", "mov", "avi", "mkv"]

    model_config = {
        "env_file": [".env"],
        "env_prefix": "MOMENTS_",
        "extra": "ignore",
        "frozen": True,
    }

    @property
    def session_lifetime(self) -> int:
        """Session lifetime in whole seconds, never below one."""
        return max(1, round(self.session_expire_hours * 3600))
