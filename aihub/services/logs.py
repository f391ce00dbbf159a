"""Assistant activity log service (append-only)."""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from aihub.models.assistant import Assistant
from aihub.models.log_entry import LogEntry, LogLevel
from aihub.schemas.resources import LogCreateRequest

DEFAULT_LIMIT = 100


async def list_logs(
    org_id: uuid.UUID,
    session: AsyncSession,
    *,
    level: Optional[LogLevel] = None,
    assistant_id: Optional[uuid.UUID] = None,
    limit: int = DEFAULT_LIMIT,
) -> list[LogEntry]:
    """Newest first."""
    query = select(LogEntry).where(LogEntry.org_id == org_id)
    if level is not None:
        query = query.where(LogEntry.level == level)
    if assistant_id is not None:
        query = query.where(LogEntry.assistant_id == assistant_id)
    result = await session.execute(
        query.order_by(LogEntry.created_at.desc()).limit(limit)
    )
    return list(result.scalars().all())


async def append_log(
    org_id: uuid.UUID, req: LogCreateRequest, session: AsyncSession
) -> LogEntry:
    if req.assistant_id is not None:
        result = await session.execute(
            select(Assistant.id).where(
                Assistant.id == req.assistant_id, Assistant.org_id == org_id
            )
        )
        if result.first() is None:
            raise HTTPException(status_code=404, detail="Assistant not found")

    entry = LogEntry(
        org_id=org_id,
        assistant_id=req.assistant_id,
        level=req.level,
        message=req.message,
        meta=req.metadata,
    )
    session.add(entry)
    await session.flush()
    return entry
