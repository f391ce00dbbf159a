"""User (identity) model."""

import secrets
from typing import Optional

from sqlmodel import Field, SQLModel

from .base import TimestampMixin


def generate_user_id() -> str:
    return secrets.token_hex(16)


class User(TimestampMixin, SQLModel, table=True):
    __tablename__ = "users"

    id: str = Field(default_factory=generate_user_id, primary_key=True)
    email: str = Field(unique=True, index=True, nullable=False)
    name: Optional[str] = None
    email_verified: bool = Field(default=False, nullable=False)
    image: Optional[str] = None
    password_hash: Optional[str] = Field(default=None)  # bcrypt hash for email/password login
