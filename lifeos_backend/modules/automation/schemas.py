"""Schemas for the n8n automation module."""

from datetime import date, datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class TriggerType(str, Enum):
    CRON = "cron"
    WEBHOOK = "webhook"


# ----- RAG -----


class RagQueryRequest(BaseModel):
    query: str = Field(..., min_length=1, max_length=4000)
    chat_id: str | None = Field(None, max_length=120)


class RagSource(BaseModel):
    title: str


class RagAnswer(BaseModel):
    content: str
    sources: list[RagSource] = Field(default_factory=list)


# ----- Meeting Minutes -----


class ActionItemSuggestion(BaseModel):
    """An action item extracted from a meeting transcript."""

    title: str
    description: str | None = None
    assigned_to: str | None = None
    due_date: date | None = None
    priority: int = Field(default=2, ge=1, le=4)


class MeetingProcessingResult(BaseModel):
    summary: str | None = None
    action_items: list[ActionItemSuggestion] = Field(default_factory=list)


class MeetingMinutesPayload(BaseModel):
    """Body sent to the ``process-meeting-minutes`` webhook."""

    meeting_id: UUID
    meeting_title: str
    meeting_date: datetime | None = None
    attendees: list[dict[str, Any]] | None = None
    transcript: str


# ----- Workflows -----


class WorkflowSpec(BaseModel):
    """A workflow the deployment is expected to provide."""

    name: str
    area: str
    type: TriggerType
    schedule: str | None = None


class N8nWorkflow(BaseModel):
    id: str
    name: str
    active: bool = False
    nodes: list[dict[str, Any]] = Field(default_factory=list)

    class Config:
        coerce_numbers_to_str = True


class N8nExecution(BaseModel):
    id: str
    finished: bool = False
    mode: str | None = None
    started_at: datetime | None = Field(None, alias="startedAt")
    stopped_at: datetime | None = Field(None, alias="stoppedAt")
    workflow_id: str | None = Field(None, alias="workflowId")
    data: dict[str, Any] | None = None

    class Config:
        populate_by_name = True
        coerce_numbers_to_str = True

    @property
    def error_message(self) -> str | None:
        """Error recorded in the execution's result data, if any."""
        error = ((self.data or {}).get("resultData") or {}).get("error")
        if isinstance(error, dict):
            return error.get("message")
        return None


class WorkflowCheck(BaseModel):
    expected: int
    deployed: int
    missing: list[WorkflowSpec]
    unexpected: list[str]


class ServiceStatus(BaseModel):
    name: str
    url: str
    available: bool
