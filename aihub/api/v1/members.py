"""
Member management endpoints, scoped to the request's org.

GET    /api/v1/members            : List members (member)
POST   /api/v1/members            : Add an existing user by email (admin)
PATCH  /api/v1/members/{user_id}  : Change a member's role (admin)
DELETE /api/v1/members/{user_id}  : Remove a member (admin)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from aihub.core.database import get_session
from aihub.core.guards import GuardContext, org_guard
from aihub.core.roles import Role
from aihub.schemas.organizations import (
    MemberAddRequest,
    MemberListResponse,
    MemberResponse,
    MemberUpdateRequest,
)
from aihub.services import members as member_service

router = APIRouter(prefix="/members", tags=["Members"])


@router.get("", response_model=MemberListResponse)
async def list_members(
    ctx: GuardContext = Depends(org_guard(Role.MEMBER)),
    session: AsyncSession = Depends(get_session),
):
    items = await member_service.list_members(ctx.membership.org_id, session)
    return MemberListResponse(data=items)


@router.post("", response_model=MemberResponse, status_code=201)
async def add_member(
    body: MemberAddRequest,
    ctx: GuardContext = Depends(org_guard(Role.ADMIN)),
    session: AsyncSession = Depends(get_session),
):
    return await member_service.add_member(
        ctx.membership.org_id, body, ctx.membership, session
    )


@router.patch("/{user_id}", response_model=MemberResponse)
async def update_member(
    user_id: str,
    body: MemberUpdateRequest,
    ctx: GuardContext = Depends(org_guard(Role.ADMIN)),
    session: AsyncSession = Depends(get_session),
):
    return await member_service.update_member_role(
        ctx.membership.org_id, user_id, body, ctx.membership, session
    )


@router.delete("/{user_id}", status_code=204)
async def remove_member(
    user_id: str,
    ctx: GuardContext = Depends(org_guard(Role.ADMIN)),
    session: AsyncSession = Depends(get_session),
):
    await member_service.remove_member(
        ctx.membership.org_id, user_id, ctx.membership, session
    )
