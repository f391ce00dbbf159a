"""Organization model."""

from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class Organization(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "orgs"

    name: str = Field(nullable=False)
    slug: str = Field(unique=True, nullable=False, index=True)
