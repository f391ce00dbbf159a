"""Knowledge-base service."""

from __future__ import annotations

import uuid

import structlog
from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from aihub.models.knowledge import KnowledgeEntry
from aihub.schemas.resources import KnowledgeCreateRequest

log = structlog.get_logger()


async def list_entries(org_id: uuid.UUID, session: AsyncSession) -> list[KnowledgeEntry]:
    result = await session.execute(
        select(KnowledgeEntry)
        .where(KnowledgeEntry.org_id == org_id)
        .order_by(KnowledgeEntry.created_at.desc())
    )
    return list(result.scalars().all())


async def create_entry(
    org_id: uuid.UUID,
    req: KnowledgeCreateRequest,
    created_by: str,
    session: AsyncSession,
) -> KnowledgeEntry:
    entry = KnowledgeEntry(
        org_id=org_id,
        name=req.name,
        description=req.description,
        content=req.content,
        meta=req.metadata,
        created_by=created_by,
    )
    session.add(entry)
    await session.flush()
    log.info("kb.created", entry_id=str(entry.id), org_id=str(org_id))
    return entry


async def delete_entry(
    org_id: uuid.UUID, entry_id: uuid.UUID, session: AsyncSession
) -> None:
    result = await session.execute(
        select(KnowledgeEntry).where(
            KnowledgeEntry.id == entry_id, KnowledgeEntry.org_id == org_id
        )
    )
    entry = result.scalar_one_or_none()
    if not entry:
        raise HTTPException(status_code=404, detail="Knowledge entry not found")
    await session.delete(entry)
    await session.flush()
    log.info("kb.deleted", entry_id=str(entry_id), org_id=str(org_id))
