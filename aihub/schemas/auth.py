"""Identity, session and sign-in schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

BCRYPT_MAX_BYTES = 72


class Identity(BaseModel):
    """An authenticated user as seen by the authorization layer."""

    id: str
    email: str
    name: Optional[str] = None
    email_verified: bool = False
    image: Optional[str] = None

    model_config = {"from_attributes": True}


class SessionRecord(BaseModel):
    """What a session store hands back for a token."""

    token: str
    identity: Identity
    expires_at: datetime
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    name: str = Field(min_length=1, max_length=200)

    @field_validator("password")
    @classmethod
    def _fits_bcrypt(cls, value: str) -> str:
        if len(value.encode()) > BCRYPT_MAX_BYTES:
            raise ValueError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")
        return value


class SignInRequest(BaseModel):
    email: EmailStr
    password: str


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class SessionInfo(BaseModel):
    expires_at: datetime
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class AuthResponse(BaseModel):
    user: Identity
    session: SessionInfo


class MeResponse(BaseModel):
    user: Identity
    has_organizations: bool
    requires_organization: bool
