"""Log entry model (org-scoped, append-only)."""

from datetime import datetime
from enum import Enum
from typing import Optional
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import JSONType, UUIDMixin, enum_type, utcnow


class LogLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    DEBUG = "debug"


class LogEntry(UUIDMixin, SQLModel, table=True):
    __tablename__ = "logs"

    org_id: uuid.UUID = Field(foreign_key="orgs.id", ondelete="CASCADE", nullable=False, index=True)
    assistant_id: Optional[uuid.UUID] = Field(
        default=None, foreign_key="assistants.id", ondelete="SET NULL", index=True
    )
    level: LogLevel = Field(
        default=LogLevel.INFO,
        nullable=False,
        index=True,
        sa_type=enum_type(LogLevel, "log_level"),
    )
    message: str = Field(nullable=False)
    meta: Optional[dict] = Field(default=None, sa_column=sa.Column("metadata", JSONType, nullable=True))
    created_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        index=True,
        sa_column_kwargs={"server_default": sa.func.now()},
        sa_type=sa.DateTime(timezone=True),
    )
