"""Tool service."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import structlog
from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from aihub.models.tool import Tool
from aihub.schemas.resources import ToolCreateRequest, ToolUpdateRequest

log = structlog.get_logger()


async def list_tools(
    org_id: uuid.UUID, session: AsyncSession, enabled_only: bool = False
) -> list[Tool]:
    query = select(Tool).where(Tool.org_id == org_id)
    if enabled_only:
        query = query.where(Tool.enabled.is_(True))
    result = await session.execute(query.order_by(Tool.name))
    return list(result.scalars().all())


async def get_tool(org_id: uuid.UUID, tool_id: uuid.UUID, session: AsyncSession) -> Tool:
    result = await session.execute(
        select(Tool).where(Tool.id == tool_id, Tool.org_id == org_id)
    )
    tool = result.scalar_one_or_none()
    if not tool:
        raise HTTPException(status_code=404, detail="Tool not found")
    return tool


async def create_tool(
    org_id: uuid.UUID,
    req: ToolCreateRequest,
    created_by: str,
    session: AsyncSession,
) -> Tool:
    tool = Tool(
        org_id=org_id,
        name=req.name,
        type=req.type,
        description=req.description,
        config=req.config,
        enabled=req.enabled,
        created_by=created_by,
    )
    session.add(tool)
    await session.flush()
    log.info("tool.created", tool_id=str(tool.id), org_id=str(org_id), type=req.type)
    return tool


async def update_tool(tool: Tool, req: ToolUpdateRequest, session: AsyncSession) -> Tool:
    for field, value in req.model_dump(exclude_unset=True).items():
        setattr(tool, field, value)
    tool.updated_at = datetime.now(timezone.utc)
    session.add(tool)
    await session.flush()
    log.info("tool.updated", tool_id=str(tool.id), enabled=tool.enabled)
    return tool


async def delete_tool(tool: Tool, session: AsyncSession) -> None:
    await session.delete(tool)
    await session.flush()
    log.info("tool.deleted", tool_id=str(tool.id), org_id=str(tool.org_id))
