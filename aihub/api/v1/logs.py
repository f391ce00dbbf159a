"""
Assistant activity log endpoints.

GET  /api/v1/logs  : Recent entries, newest first (member)
POST /api/v1/logs  : Append an entry (member)
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from aihub.core.database import get_session
from aihub.core.guards import GuardContext, org_guard
from aihub.core.roles import Role
from aihub.models.log_entry import LogLevel
from aihub.schemas.resources import LogCreateRequest, LogListResponse, LogResponse
from aihub.services import logs as log_service

router = APIRouter(prefix="/logs", tags=["Logs"])


@router.get("", response_model=LogListResponse)
async def list_logs(
    level: Optional[LogLevel] = None,
    assistant_id: Optional[uuid.UUID] = None,
    limit: int = Query(default=log_service.DEFAULT_LIMIT, ge=1, le=1000),
    ctx: GuardContext = Depends(org_guard(Role.MEMBER)),
    session: AsyncSession = Depends(get_session),
):
    items = await log_service.list_logs(
        ctx.membership.org_id,
        session,
        level=level,
        assistant_id=assistant_id,
        limit=limit,
    )
    return LogListResponse(data=[LogResponse.model_validate(e) for e in items])


@router.post("", response_model=LogResponse, status_code=201)
async def append_log(
    body: LogCreateRequest,
    ctx: GuardContext = Depends(org_guard(Role.MEMBER)),
    session: AsyncSession = Depends(get_session),
):
    entry = await log_service.append_log(ctx.membership.org_id, body, session)
    return LogResponse.model_validate(entry)
