"""Knowledge-base entry model (org-scoped)."""

from typing import Optional
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import JSONType, TimestampMixin, UUIDMixin


class KnowledgeEntry(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "kb"

    org_id: uuid.UUID = Field(foreign_key="orgs.id", ondelete="CASCADE", nullable=False, index=True)
    name: str = Field(nullable=False)
    description: Optional[str] = None
    content: Optional[str] = None
    # "metadata" is reserved on declarative classes.
    meta: Optional[dict] = Field(default=None, sa_column=sa.Column("metadata", JSONType, nullable=True))
    created_by: Optional[str] = Field(default=None, foreign_key="users.id", ondelete="SET NULL")
