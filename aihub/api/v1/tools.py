"""
Tool endpoints.

GET    /api/v1/tools            : List (member), ?enabled_only=true to filter
POST   /api/v1/tools            : Create (admin)
GET    /api/v1/tools/{tool_id}  : Detail (member)
PATCH  /api/v1/tools/{tool_id}  : Update / enable / disable (admin)
DELETE /api/v1/tools/{tool_id}  : Delete (admin)
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from aihub.core.database import get_session
from aihub.core.guards import GuardContext, org_guard
from aihub.core.roles import Role
from aihub.schemas.resources import (
    ToolCreateRequest,
    ToolListResponse,
    ToolResponse,
    ToolUpdateRequest,
)
from aihub.services import tools as tool_service

router = APIRouter(prefix="/tools", tags=["Tools"])


@router.get("", response_model=ToolListResponse)
async def list_tools(
    enabled_only: bool = False,
    ctx: GuardContext = Depends(org_guard(Role.MEMBER)),
    session: AsyncSession = Depends(get_session),
):
    items = await tool_service.list_tools(ctx.membership.org_id, session, enabled_only)
    return ToolListResponse(data=[ToolResponse.model_validate(t) for t in items])


@router.post("", response_model=ToolResponse, status_code=201)
async def create_tool(
    body: ToolCreateRequest,
    ctx: GuardContext = Depends(org_guard(Role.ADMIN)),
    session: AsyncSession = Depends(get_session),
):
    tool = await tool_service.create_tool(ctx.membership.org_id, body, ctx.user_id, session)
    return ToolResponse.model_validate(tool)


@router.get("/{tool_id}", response_model=ToolResponse)
async def get_tool(
    tool_id: uuid.UUID,
    ctx: GuardContext = Depends(org_guard(Role.MEMBER)),
    session: AsyncSession = Depends(get_session),
):
    tool = await tool_service.get_tool(ctx.membership.org_id, tool_id, session)
    return ToolResponse.model_validate(tool)


@router.patch("/{tool_id}", response_model=ToolResponse)
async def update_tool(
    tool_id: uuid.UUID,
    body: ToolUpdateRequest,
    ctx: GuardContext = Depends(org_guard(Role.ADMIN)),
    session: AsyncSession = Depends(get_session),
):
    tool = await tool_service.get_tool(ctx.membership.org_id, tool_id, session)
    tool = await tool_service.update_tool(tool, body, session)
    return ToolResponse.model_validate(tool)


@router.delete("/{tool_id}", status_code=204)
async def delete_tool(
    tool_id: uuid.UUID,
    ctx: GuardContext = Depends(org_guard(Role.ADMIN)),
    session: AsyncSession = Depends(get_session),
):
    tool = await tool_service.get_tool(ctx.membership.org_id, tool_id, session)
    await tool_service.delete_tool(tool, session)
