"""Automation API routes: document Q&A and n8n workflow operations."""

from typing import Any

from fastapi import APIRouter, Body, Query

from ...config import settings
from ..auth.dependencies import CurrentUser
from ..commons import BaseResponse
from . import services
from .client import is_service_available
from .dependencies import ApiClient, WebhookClient
from .schemas import (
    N8nExecution,
    N8nWorkflow,
    RagAnswer,
    RagQueryRequest,
    ServiceStatus,
    WorkflowCheck,
    WorkflowSpec,
)
from .workflows import all_expected, check_workflows

router = APIRouter(prefix="/automation", tags=["Automation"])


@router.post("/rag-query", response_model=BaseResponse[RagAnswer])
async def rag_query(
    data: RagQueryRequest,
    current_user: CurrentUser,
    client: WebhookClient,
):
    """Ask a question against the indexed documents."""
    answer = await services.rag_query(client, data.query, data.chat_id)
    return BaseResponse(success=True, data=answer)


@router.get("/workflows", response_model=BaseResponse[list[N8nWorkflow]])
async def list_workflows(current_user: CurrentUser, client: ApiClient):
    """Get the workflows deployed in n8n."""
    workflows = await client.list_workflows()
    return BaseResponse(success=True, data=workflows)


@router.get("/workflows/expected", response_model=BaseResponse[list[WorkflowSpec]])
async def list_expected_workflows(current_user: CurrentUser):
    """Get the catalogue of workflows a complete deployment provides."""
    return BaseResponse(success=True, data=all_expected())


@router.get("/workflows/check", response_model=BaseResponse[WorkflowCheck])
async def check_deployed_workflows(current_user: CurrentUser, client: ApiClient):
    """Compare the deployed workflows with the catalogue."""
    result = check_workflows(await client.list_workflows())
    return BaseResponse(success=True, data=result)


@router.get("/workflows/{workflow_id}", response_model=BaseResponse[N8nWorkflow])
async def get_workflow(workflow_id: str, current_user: CurrentUser, client: ApiClient):
    """Get a single workflow."""
    workflow = await client.get_workflow(workflow_id)
    return BaseResponse(success=True, data=workflow)


@router.post(
    "/workflows/{workflow_id}/execute", response_model=BaseResponse[N8nExecution]
)
async def execute_workflow(
    workflow_id: str,
    current_user: CurrentUser,
    client: ApiClient,
    data: dict[str, Any] | None = Body(None),
):
    """Run a workflow manually."""
    execution = await client.execute_workflow(workflow_id, data)
    return BaseResponse(
        success=True, message="Workflow execution started", data=execution
    )


@router.get("/executions", response_model=BaseResponse[list[N8nExecution]])
async def list_executions(
    current_user: CurrentUser,
    client: ApiClient,
    workflow_id: str | None = Query(None),
):
    """Get recent executions, optionally of one workflow."""
    executions = await client.list_executions(workflow_id)
    return BaseResponse(success=True, data=executions)


@router.get("/status", response_model=BaseResponse[list[ServiceStatus]])
async def get_service_status(current_user: CurrentUser):
    """Probe the external services Life OS depends on."""
    targets = [("n8n", settings.n8n_url)]
    if settings.supabase_url:
        targets.append(("supabase", settings.supabase_url))

    statuses = [
        ServiceStatus(name=name, url=url, available=await is_service_available(url))
        for name, url in targets
    ]
    return BaseResponse(success=True, data=statuses)
