"""
Knowledge-base endpoints.

GET    /api/v1/kb             : List entries (member)
POST   /api/v1/kb             : Add an entry (member)
DELETE /api/v1/kb/{entry_id}  : Remove an entry (admin)
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from aihub.core.database import get_session
from aihub.core.guards import GuardContext, org_guard
from aihub.core.roles import Role
from aihub.schemas.resources import (
    KnowledgeCreateRequest,
    KnowledgeListResponse,
    KnowledgeResponse,
)
from aihub.services import knowledge as kb_service

router = APIRouter(prefix="/kb", tags=["Knowledge base"])


@router.get("", response_model=KnowledgeListResponse)
async def list_entries(
    ctx: GuardContext = Depends(org_guard(Role.MEMBER)),
    session: AsyncSession = Depends(get_session),
):
    items = await kb_service.list_entries(ctx.membership.org_id, session)
    return KnowledgeListResponse(data=[KnowledgeResponse.model_validate(e) for e in items])


@router.post("", response_model=KnowledgeResponse, status_code=201)
async def create_entry(
    body: KnowledgeCreateRequest,
    ctx: GuardContext = Depends(org_guard(Role.MEMBER)),
    session: AsyncSession = Depends(get_session),
):
    entry = await kb_service.create_entry(ctx.membership.org_id, body, ctx.user_id, session)
    return KnowledgeResponse.model_validate(entry)


@router.delete("/{entry_id}", status_code=204)
async def delete_entry(
    entry_id: uuid.UUID,
    ctx: GuardContext = Depends(org_guard(Role.ADMIN)),
    session: AsyncSession = Depends(get_session),
):
    await kb_service.delete_entry(ctx.membership.org_id, entry_id, session)
