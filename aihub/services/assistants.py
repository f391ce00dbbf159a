"""
Assistant service: org-scoped CRUD.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from aihub.models.assistant import Assistant, AssistantStatus
from aihub.schemas.resources import AssistantCreateRequest, AssistantUpdateRequest

log = structlog.get_logger()


async def list_assistants(
    org_id: uuid.UUID,
    session: AsyncSession,
    status: Optional[AssistantStatus] = None,
) -> list[Assistant]:
    query = select(Assistant).where(Assistant.org_id == org_id)
    if status is not None:
        query = query.where(Assistant.status == status)
    result = await session.execute(query.order_by(Assistant.created_at.desc()))
    return list(result.scalars().all())


async def get_assistant(
    org_id: uuid.UUID, assistant_id: uuid.UUID, session: AsyncSession
) -> Assistant:
    """Fetch an assistant, scoped to the org. Other orgs' assistants are 404."""
    result = await session.execute(
        select(Assistant).where(
            Assistant.id == assistant_id, Assistant.org_id == org_id
        )
    )
    assistant = result.scalar_one_or_none()
    if not assistant:
        raise HTTPException(status_code=404, detail="Assistant not found")
    return assistant


async def create_assistant(
    org_id: uuid.UUID,
    req: AssistantCreateRequest,
    created_by: str,
    session: AsyncSession,
) -> Assistant:
    assistant = Assistant(
        org_id=org_id,
        name=req.name,
        description=req.description,
        system_prompt=req.system_prompt,
        config=req.config,
        created_by=created_by,
    )
    session.add(assistant)
    await session.flush()
    log.info("assistant.created", assistant_id=str(assistant.id), org_id=str(org_id))
    return assistant


async def update_assistant(
    assistant: Assistant,
    req: AssistantUpdateRequest,
    session: AsyncSession,
) -> Assistant:
    for field, value in req.model_dump(exclude_unset=True).items():
        setattr(assistant, field, value)
    assistant.updated_at = datetime.now(timezone.utc)
    session.add(assistant)
    await session.flush()
    log.info("assistant.updated", assistant_id=str(assistant.id), status=assistant.status)
    return assistant


async def delete_assistant(assistant: Assistant, session: AsyncSession) -> None:
    await session.delete(assistant)
    await session.flush()
    log.info("assistant.deleted", assistant_id=str(assistant.id), org_id=str(assistant.org_id))
