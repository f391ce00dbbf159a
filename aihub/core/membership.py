"""
Membership lookup: the user's role in an organization, read fresh per call.
"""

from __future__ import annotations

import uuid
from typing import Optional, Union

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from aihub.models.membership import Membership

log = structlog.get_logger()


def parse_org_id(org_id: Union[str, uuid.UUID]) -> Optional[uuid.UUID]:
    """Coerce an org id to a UUID; anything unparseable is None."""
    if isinstance(org_id, uuid.UUID):
        return org_id
    try:
        return uuid.UUID(str(org_id).strip())
    except ValueError:
        return None


async def lookup_membership(
    session: AsyncSession,
    user_id: str,
    org_id: Union[str, uuid.UUID],
) -> Optional[Membership]:
    """Return the membership tying ``user_id`` to ``org_id``, if any.

    A malformed org id matches nothing. If the (user, org) uniqueness is ever
    violated the most recently created row wins and the duplicate is logged.
    """
    if not user_id or not org_id:
        raise ValueError("user_id and org_id are required")

    org_uuid = parse_org_id(org_id)
    if org_uuid is None:
        return None

    result = await session.execute(
        select(Membership)
        .where(Membership.user_id == user_id, Membership.org_id == org_uuid)
        .order_by(Membership.created_at.desc(), Membership.id)
    )
    rows = result.scalars().all()
    if not rows:
        return None

    if len(rows) > 1:
        log.warning(
            "membership.duplicate",
            user_id=user_id,
            org_id=str(org_uuid),
            count=len(rows),
            kept=str(rows[0].id),
        )
    return rows[0]


async def has_organizations(session: AsyncSession, user_id: str) -> bool:
    """True if the user belongs to at least one organization."""
    result = await session.execute(
        select(Membership.id).where(Membership.user_id == user_id).limit(1)
    )
    return result.first() is not None
