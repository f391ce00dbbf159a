"""Tool model (org-scoped)."""

from typing import Optional
import uuid

from sqlmodel import Field, SQLModel

from .base import JSONType, TimestampMixin, UUIDMixin


class Tool(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "tools"

    org_id: uuid.UUID = Field(foreign_key="orgs.id", ondelete="CASCADE", nullable=False, index=True)
    name: str = Field(nullable=False)
    type: str = Field(nullable=False, index=True)  # e.g. http | function | retrieval
    description: Optional[str] = None
    config: dict = Field(default_factory=dict, sa_type=JSONType, nullable=False)
    enabled: bool = Field(default=True, nullable=False)
    created_by: Optional[str] = Field(default=None, foreign_key="users.id", ondelete="SET NULL")
