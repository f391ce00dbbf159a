"""Assistant, knowledge-base, tool and log schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from aihub.models.assistant import AssistantStatus
from aihub.models.log_entry import LogLevel


# ---------------------------------------------------------------------------
# Assistants
# ---------------------------------------------------------------------------

class AssistantCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    system_prompt: Optional[str] = None
    config: Optional[dict[str, Any]] = None


class AssistantUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    system_prompt: Optional[str] = None
    status: Optional[AssistantStatus] = None
    config: Optional[dict[str, Any]] = None


class AssistantResponse(BaseModel):
    id: uuid.UUID
    org_id: uuid.UUID
    name: str
    description: Optional[str] = None
    system_prompt: Optional[str] = None
    status: AssistantStatus
    config: Optional[dict[str, Any]] = None
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AssistantListResponse(BaseModel):
    data: list[AssistantResponse]


# ---------------------------------------------------------------------------
# Knowledge base
# ---------------------------------------------------------------------------

class KnowledgeCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    content: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None


class KnowledgeResponse(BaseModel):
    id: uuid.UUID
    org_id: uuid.UUID
    name: str
    description: Optional[str] = None
    content: Optional[str] = None
    metadata: Optional[dict[str, Any]] = Field(default=None, validation_alias="meta")
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class KnowledgeListResponse(BaseModel):
    data: list[KnowledgeResponse]


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------

class ToolCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    type: str = Field(min_length=1, max_length=50)
    description: Optional[str] = None
    config: dict[str, Any] = Field(default_factory=dict)
    enabled: bool = True


class ToolUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    config: Optional[dict[str, Any]] = None
    enabled: Optional[bool] = None


class ToolResponse(BaseModel):
    id: uuid.UUID
    org_id: uuid.UUID
    name: str
    type: str
    description: Optional[str] = None
    config: dict[str, Any]
    enabled: bool
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ToolListResponse(BaseModel):
    data: list[ToolResponse]


# ---------------------------------------------------------------------------
# Logs
# ---------------------------------------------------------------------------

class LogCreateRequest(BaseModel):
    message: str = Field(min_length=1)
    level: LogLevel = LogLevel.INFO
    assistant_id: Optional[uuid.UUID] = None
    metadata: Optional[dict[str, Any]] = None


class LogResponse(BaseModel):
    id: uuid.UUID
    org_id: uuid.UUID
    assistant_id: Optional[uuid.UUID] = None
    level: LogLevel
    message: str
    metadata: Optional[dict[str, Any]] = Field(default=None, validation_alias="meta")
    created_at: datetime

    model_config = {"from_attributes": True}


class LogListResponse(BaseModel):
    data: list[LogResponse]
