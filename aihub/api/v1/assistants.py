"""
Assistant endpoints.

GET    /api/v1/assistants                 : List (member), optional ?status=
POST   /api/v1/assistants                 : Create (admin)
GET    /api/v1/assistants/{assistant_id}  : Detail (member)
PATCH  /api/v1/assistants/{assistant_id}  : Update (admin)
DELETE /api/v1/assistants/{assistant_id}  : Delete (admin)
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from aihub.core.database import get_session
from aihub.core.guards import GuardContext, org_guard
from aihub.core.roles import Role
from aihub.models.assistant import AssistantStatus
from aihub.schemas.resources import (
    AssistantCreateRequest,
    AssistantListResponse,
    AssistantResponse,
    AssistantUpdateRequest,
)
from aihub.services import assistants as assistant_service

router = APIRouter(prefix="/assistants", tags=["Assistants"])


@router.get("", response_model=AssistantListResponse)
async def list_assistants(
    status: Optional[AssistantStatus] = None,
    ctx: GuardContext = Depends(org_guard(Role.MEMBER)),
    session: AsyncSession = Depends(get_session),
):
    items = await assistant_service.list_assistants(ctx.membership.org_id, session, status)
    return AssistantListResponse(
        data=[AssistantResponse.model_validate(a) for a in items]
    )


@router.post("", response_model=AssistantResponse, status_code=201)
async def create_assistant(
    body: AssistantCreateRequest,
    ctx: GuardContext = Depends(org_guard(Role.ADMIN)),
    session: AsyncSession = Depends(get_session),
):
    assistant = await assistant_service.create_assistant(
        ctx.membership.org_id, body, ctx.user_id, session
    )
    return AssistantResponse.model_validate(assistant)


@router.get("/{assistant_id}", response_model=AssistantResponse)
async def get_assistant(
    assistant_id: uuid.UUID,
    ctx: GuardContext = Depends(org_guard(Role.MEMBER)),
    session: AsyncSession = Depends(get_session),
):
    assistant = await assistant_service.get_assistant(
        ctx.membership.org_id, assistant_id, session
    )
    return AssistantResponse.model_validate(assistant)


@router.patch("/{assistant_id}", response_model=AssistantResponse)
async def update_assistant(
    assistant_id: uuid.UUID,
    body: AssistantUpdateRequest,
    ctx: GuardContext = Depends(org_guard(Role.ADMIN)),
    session: AsyncSession = Depends(get_session),
):
    assistant = await assistant_service.get_assistant(
        ctx.membership.org_id, assistant_id, session
    )
    assistant = await assistant_service.update_assistant(assistant, body, session)
    return AssistantResponse.model_validate(assistant)


@router.delete("/{assistant_id}", status_code=204)
async def delete_assistant(
    assistant_id: uuid.UUID,
    ctx: GuardContext = Depends(org_guard(Role.ADMIN)),
    session: AsyncSession = Depends(get_session),
):
    assistant = await assistant_service.get_assistant(
        ctx.membership.org_id, assistant_id, session
    )
    await assistant_service.delete_assistant(assistant, session)
