"""User-Organization membership."""

import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from aihub.core.roles import Role

from .base import TimestampMixin, UUIDMixin, enum_type


class Membership(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "org_memberships"
    __table_args__ = (
        sa.UniqueConstraint("user_id", "org_id", name="uq_org_memberships_user_org"),
        sa.Index("org_memberships_user_org_idx", "user_id", "org_id"),
    )

    user_id: str = Field(foreign_key="users.id", ondelete="CASCADE", nullable=False, index=True)
    org_id: uuid.UUID = Field(foreign_key="orgs.id", ondelete="CASCADE", nullable=False, index=True)
    role: Role = Field(
        default=Role.MEMBER,
        nullable=False,
        sa_type=enum_type(Role, "user_role"),
    )
