"""
Member management: adding users to an org and changing or revoking their role.

Rules enforced on top of the route guards:
- nobody can grant a role above their own
- nobody can change or remove a member ranked above them
- an org always keeps at least one owner
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import structlog
from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from aihub.core.roles import Role, satisfies
from aihub.models.membership import Membership
from aihub.models.user import User
from aihub.schemas.organizations import MemberAddRequest, MemberUpdateRequest

log = structlog.get_logger()


def _member_info(user: User, membership: Membership) -> dict:
    return {
        "user_id": user.id,
        "email": user.email,
        "name": user.name,
        "role": membership.role,
        "joined_at": membership.created_at,
    }


async def list_members(org_id: uuid.UUID, session: AsyncSession) -> list[dict]:
    """List all members of an org with their role."""
    result = await session.execute(
        select(User, Membership)
        .join(Membership, Membership.user_id == User.id)
        .where(Membership.org_id == org_id)
        .order_by(Membership.created_at)
    )
    return [_member_info(user, m) for user, m in result.all()]


async def _get_member(
    org_id: uuid.UUID, user_id: str, session: AsyncSession
) -> tuple[User, Membership]:
    result = await session.execute(
        select(User, Membership)
        .join(Membership, Membership.user_id == User.id)
        .where(Membership.org_id == org_id, Membership.user_id == user_id)
    )
    row = result.first()
    if not row:
        raise HTTPException(status_code=404, detail="Member not found in this org")
    return row[0], row[1]


async def _owner_count(org_id: uuid.UUID, session: AsyncSession) -> int:
    result = await session.execute(
        select(func.count())
        .select_from(Membership)
        .where(Membership.org_id == org_id, Membership.role == Role.OWNER)
    )
    return result.scalar_one()


def _check_can_manage(actor: Membership, target: Membership) -> None:
    if not satisfies(actor.role, target.role):
        raise HTTPException(
            status_code=403, detail="Cannot manage a member with a higher role"
        )


def _check_can_grant(actor: Membership, role: Role) -> None:
    if not satisfies(actor.role, role):
        raise HTTPException(
            status_code=403, detail="Cannot grant a role above your own"
        )


async def add_member(
    org_id: uuid.UUID,
    req: MemberAddRequest,
    actor: Membership,
    session: AsyncSession,
) -> dict:
    """Add an existing user (by email) to the org."""
    _check_can_grant(actor, req.role)

    result = await session.execute(select(User).where(User.email == req.email.lower()))
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=404, detail="No user with that email")

    existing = await session.execute(
        select(Membership.id).where(
            Membership.org_id == org_id, Membership.user_id == user.id
        )
    )
    if existing.first() is not None:
        raise HTTPException(status_code=409, detail="User is already a member of this org")

    membership = Membership(user_id=user.id, org_id=org_id, role=req.role)
    session.add(membership)
    await session.flush()

    log.info("member.added", user_id=user.id, org_id=str(org_id), role=req.role.value)
    return _member_info(user, membership)


async def update_member_role(
    org_id: uuid.UUID,
    user_id: str,
    req: MemberUpdateRequest,
    actor: Membership,
    session: AsyncSession,
) -> dict:
    """Change a member's role."""
    user, membership = await _get_member(org_id, user_id, session)
    _check_can_manage(actor, membership)
    _check_can_grant(actor, req.role)

    if membership.role == Role.OWNER and req.role != Role.OWNER:
        if await _owner_count(org_id, session) <= 1:
            raise HTTPException(status_code=409, detail="An organization needs at least one owner")

    membership.role = req.role
    membership.updated_at = datetime.now(timezone.utc)
    session.add(membership)
    await session.flush()

    log.info("member.role_changed", user_id=user_id, org_id=str(org_id), role=req.role.value)
    return _member_info(user, membership)


async def remove_member(
    org_id: uuid.UUID,
    user_id: str,
    actor: Membership,
    session: AsyncSession,
) -> None:
    """Remove a member. Access is revoked from their next request on."""
    _, membership = await _get_member(org_id, user_id, session)
    _check_can_manage(actor, membership)

    if membership.role == Role.OWNER and await _owner_count(org_id, session) <= 1:
        raise HTTPException(status_code=409, detail="An organization needs at least one owner")

    await session.delete(membership)
    await session.flush()
    log.info("member.removed", user_id=user_id, org_id=str(org_id))
