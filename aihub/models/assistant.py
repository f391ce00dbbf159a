"""Assistant model (org-scoped)."""

from enum import Enum
from typing import Optional
import uuid

from sqlmodel import Field, SQLModel

from .base import JSONType, TimestampMixin, UUIDMixin, enum_type


class AssistantStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ARCHIVED = "archived"


class Assistant(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "assistants"

    org_id: uuid.UUID = Field(foreign_key="orgs.id", ondelete="CASCADE", nullable=False, index=True)
    name: str = Field(nullable=False)
    description: Optional[str] = None
    system_prompt: Optional[str] = None
    status: AssistantStatus = Field(
        default=AssistantStatus.ACTIVE,
        nullable=False,
        index=True,
        sa_type=enum_type(AssistantStatus, "assistant_status"),
    )
    config: Optional[dict] = Field(default=None, sa_type=JSONType)
    created_by: Optional[str] = Field(default=None, foreign_key="users.id", ondelete="SET NULL")
