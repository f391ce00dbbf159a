"""Organization and membership schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from aihub.core.roles import Role

SLUG_PATTERN = r"^[a-z0-9][a-z0-9-]*[a-z0-9]$"


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class OrgCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Organization display name")
    slug: str = Field(
        ...,
        min_length=2,
        max_length=50,
        pattern=SLUG_PATTERN,
        description="URL-safe org identifier",
    )


class OrgUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=2, max_length=50, pattern=SLUG_PATTERN)


class MemberAddRequest(BaseModel):
    """Add an existing user to the org by email."""
    email: EmailStr
    role: Role = Role.MEMBER


class MemberUpdateRequest(BaseModel):
    role: Role


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class OrgResponse(BaseModel):
    id: uuid.UUID
    name: str
    slug: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class OrgListItem(BaseModel):
    id: uuid.UUID
    name: str
    slug: str
    role: Role  # the requesting user's role in this org


class OrgListResponse(BaseModel):
    data: list[OrgListItem]


class MemberResponse(BaseModel):
    user_id: str
    email: str
    name: Optional[str] = None
    role: Role
    joined_at: datetime


class MemberListResponse(BaseModel):
    data: list[MemberResponse]
