"""
Organization API endpoints.

GET    /api/v1/orgs           : List orgs for the signed-in user
POST   /api/v1/orgs           : Create a new org (creator becomes owner)
GET    /api/v1/orgs/current   : Get the request's org (member)
PATCH  /api/v1/orgs/current   : Rename / re-slug the org (admin)
DELETE /api/v1/orgs/current   : Delete the org and everything in it (owner)

"Current" is the org named by the orgId query param, x-org-id header or
orgId body field.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from aihub.core.database import get_session
from aihub.core.guards import GuardContext, identity_guard, org_guard
from aihub.core.roles import Role
from aihub.schemas.organizations import (
    OrgCreateRequest,
    OrgListResponse,
    OrgResponse,
    OrgUpdateRequest,
)
from aihub.services import organizations as org_service

router = APIRouter(prefix="/orgs", tags=["Organizations"])


@router.get("", response_model=OrgListResponse)
async def list_orgs(
    ctx: GuardContext = Depends(identity_guard()),
    session: AsyncSession = Depends(get_session),
):
    """List orgs the signed-in user belongs to."""
    items = await org_service.list_user_orgs(ctx.user_id, session)
    return OrgListResponse(data=items)


@router.post("", response_model=OrgResponse, status_code=201)
async def create_org(
    body: OrgCreateRequest,
    ctx: GuardContext = Depends(identity_guard()),
    session: AsyncSession = Depends(get_session),
):
    org = await org_service.create_org(body, ctx.user_id, session)
    return OrgResponse.model_validate(org)


@router.get("/current", response_model=OrgResponse)
async def get_current_org(
    ctx: GuardContext = Depends(org_guard(Role.MEMBER)),
    session: AsyncSession = Depends(get_session),
):
    org = await org_service.get_org(ctx.membership.org_id, session)
    return OrgResponse.model_validate(org)


@router.patch("/current", response_model=OrgResponse)
async def update_current_org(
    body: OrgUpdateRequest,
    ctx: GuardContext = Depends(org_guard(Role.ADMIN)),
    session: AsyncSession = Depends(get_session),
):
    org = await org_service.get_org(ctx.membership.org_id, session)
    org = await org_service.update_org(org, body, session)
    return OrgResponse.model_validate(org)


@router.delete("/current", status_code=204)
async def delete_current_org(
    ctx: GuardContext = Depends(org_guard(Role.OWNER)),
    session: AsyncSession = Depends(get_session),
):
    org = await org_service.get_org(ctx.membership.org_id, session)
    await org_service.delete_org(org, session)
