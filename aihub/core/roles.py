"""
Organization roles and their privilege order.

    owner > admin > member
"""

from __future__ import annotations

from enum import Enum
from typing import Union


class Role(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"

    @property
    def rank(self) -> int:
        return ROLE_ORDER.index(self) + 1


# Least to most privileged; rank is position + 1 (member=1, admin=2, owner=3).
ROLE_ORDER: list[Role] = [
    Role.MEMBER,
    Role.ADMIN,
    Role.OWNER,
]


def satisfies(actual: Union[Role, str], required: Union[Role, str]) -> bool:
    """True when ``actual`` is at least as privileged as ``required``.

    Raises ValueError for anything outside the role enumeration.
    """
    return Role(actual).rank >= Role(required).rank
