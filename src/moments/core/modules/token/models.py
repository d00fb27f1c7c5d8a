"""Session token models."""

from typing import NewType

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt

AuthToken = NewType("AuthToken", str)


class TokenClaims(BaseModel):
    """Claims carried by a session token. Timestamps are Unix epoch seconds."""

    model_config = ConfigDict(populate_by_name=True)

    authenticated: StrictBool
    issued_at: StrictInt = Field(alias="iat")
    expires_at: StrictInt = Field(alias="exp")

    def to_payload(self) -> dict[str, bool | int]:
        return self.model_dump(by_alias=True)
