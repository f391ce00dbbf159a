"""
Current-user endpoint.

GET /api/v1/me: The signed-in user and whether they still need an organization
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from aihub.core.database import get_session
from aihub.core.guards import GuardContext, identity_guard
from aihub.core.membership import has_organizations
from aihub.schemas.auth import MeResponse

router = APIRouter()


@router.get("/me", response_model=MeResponse, tags=["Users"])
async def get_me(
    ctx: GuardContext = Depends(identity_guard()),
    session: AsyncSession = Depends(get_session),
):
    """Users without any organization are sent to create one first."""
    has_orgs = await has_organizations(session, ctx.user_id)
    return MeResponse(
        user=ctx.identity,
        has_organizations=has_orgs,
        requires_organization=not has_orgs,
    )
