from pydantic import BaseModel, Field


class AuthStatus(BaseModel):
    """Authentication state reported to the client before it decides to show a login form."""

    success: bool = Field(..., description="False when the system is not configured")
    authenticated: bool = Field(..., description="Whether the request carries a valid session")
    auth_enabled: bool = Field(..., serialization_alias="authEnabled", description="Always true; access is never open")
    password_configured: bool = Field(..., serialization_alias="passwordConfigured")
    message: str | None = None
