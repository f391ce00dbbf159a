"""
Organization service: business logic for org CRUD.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import structlog
from fastapi import HTTPException
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from aihub.core.roles import Role
from aihub.models.membership import Membership
from aihub.models.organization import Organization
from aihub.schemas.organizations import OrgCreateRequest, OrgUpdateRequest

log = structlog.get_logger()


async def list_user_orgs(user_id: str, session: AsyncSession) -> list[dict]:
    """List all orgs a user belongs to, with their role."""
    result = await session.execute(
        select(Organization, Membership.role)
        .join(Membership, Membership.org_id == Organization.id)
        .where(Membership.user_id == user_id)
        .order_by(Organization.name)
    )
    return [
        {"id": org.id, "name": org.name, "slug": org.slug, "role": role}
        for org, role in result.all()
    ]


async def _ensure_slug_free(slug: str, session: AsyncSession) -> None:
    existing = await session.execute(
        select(Organization.id).where(Organization.slug == slug)
    )
    if existing.first() is not None:
        raise HTTPException(status_code=409, detail="Org slug already taken")


async def create_org(
    req: OrgCreateRequest,
    creator_id: str,
    session: AsyncSession,
) -> Organization:
    """Create an org and make the creator its owner."""
    await _ensure_slug_free(req.slug, session)

    org = Organization(name=req.name, slug=req.slug)
    session.add(org)
    await session.flush()

    session.add(Membership(user_id=creator_id, org_id=org.id, role=Role.OWNER))
    await session.flush()

    log.info("org.created", org_id=str(org.id), slug=req.slug, creator=creator_id)
    return org


async def get_org(org_id: uuid.UUID, session: AsyncSession) -> Organization:
    """Get an org by id; raises 404 if it no longer exists."""
    org = await session.get(Organization, org_id)
    if not org:
        raise HTTPException(status_code=404, detail="Organization not found")
    return org


async def update_org(
    org: Organization,
    req: OrgUpdateRequest,
    session: AsyncSession,
) -> Organization:
    """Rename an org or change its slug."""
    if req.slug is not None and req.slug != org.slug:
        await _ensure_slug_free(req.slug, session)
        org.slug = req.slug

    if req.name is not None:
        org.name = req.name

    org.updated_at = datetime.now(timezone.utc)
    session.add(org)
    await session.flush()

    log.info("org.updated", org_id=str(org.id), slug=org.slug)
    return org


async def delete_org(org: Organization, session: AsyncSession) -> None:
    """Delete an org. Memberships and org-scoped resources cascade in the database."""
    org_id = org.id
    await session.execute(delete(Organization).where(Organization.id == org_id))
    await session.flush()
    log.info("org.deleted", org_id=str(org_id), slug=org.slug)
