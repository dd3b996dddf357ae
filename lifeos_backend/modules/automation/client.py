"""
HTTP clients for n8n.

``N8nWebhookClient`` posts to production webhooks; ``N8nApiClient`` talks to
the n8n public REST API. Both open a short-lived ``httpx.AsyncClient`` per
call and raise ``ExternalServiceError`` on transport errors or non-2xx
responses.
"""

from typing import Any

import httpx

from ...config import settings
from ...core.exceptions import ExternalServiceError, ResourceNotFoundError
from ...core.logging import get_logger
from .schemas import N8nExecution, N8nWorkflow

logger = get_logger(__name__)

SERVICE_NAME = "n8n"
AVAILABILITY_TIMEOUT_SECONDS = 2.0


def _decode(response: httpx.Response) -> dict[str, Any]:
    """JSON body of a response; plain text is wrapped as ``{"response": text}``."""
    try:
        body = response.json()
    except ValueError:
        return {"response": response.text}
    if isinstance(body, dict):
        return body
    return {"response": body}


class N8nWebhookClient:
    """Client for n8n production webhooks under ``n8n_webhook_url``."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.n8n_webhook_url).rstrip("/")
        self.timeout = timeout or settings.n8n_timeout_seconds
        self.transport = transport
        self.headers = {"Content-Type": "application/json"}

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def trigger(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST ``payload`` to the webhook at ``path`` and return its answer."""
        url = self.url_for(path)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.post(url, json=payload, headers=self.headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"n8n webhook '{path}' answered {e.response.status_code}",
                extra={"webhook": path, "status_code": e.response.status_code},
            )
            raise ExternalServiceError(
                SERVICE_NAME,
                f"webhook {path}",
                details={"status_code": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"n8n webhook '{path}' unreachable: {e}")
            raise ExternalServiceError(
                SERVICE_NAME, f"webhook {path}", details={"reason": str(e)}
            ) from e

        return _decode(response)


class N8nApiClient:
    """Client for the n8n REST API (``/api/v1``), authenticated by API key."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.n8n_url).rstrip("/")
        self.timeout = timeout or settings.n8n_timeout_seconds
        self.transport = transport
        self.headers = {
            "Content-Type": "application/json",
            "X-N8N-API-KEY": api_key if api_key is not None else settings.n8n_api_key,
        }

    async def list_workflows(self) -> list[N8nWorkflow]:
        body = await self._request("GET", "/workflows", "list workflows")
        return [N8nWorkflow.model_validate(w) for w in body.get("data") or []]

    async def get_workflow(self, workflow_id: str) -> N8nWorkflow:
        body = await self._request(
            "GET",
            f"/workflows/{workflow_id}",
            "get workflow",
            resource=("n8n workflow", workflow_id),
        )
        return N8nWorkflow.model_validate(body)

    async def execute_workflow(
        self, workflow_id: str, data: dict[str, Any] | None = None
    ) -> N8nExecution:
        body = await self._request(
            "POST",
            f"/workflows/{workflow_id}/execute",
            "execute workflow",
            resource=("n8n workflow", workflow_id),
            json=data or {},
        )
        return N8nExecution.model_validate(body)

    async def list_executions(self, workflow_id: str | None = None) -> list[N8nExecution]:
        params = {"workflowId": workflow_id} if workflow_id else None
        body = await self._request(
            "GET", "/executions", "list executions", params=params
        )
        return [N8nExecution.model_validate(e) for e in body.get("data") or []]

    async def _request(
        self,
        method: str,
        endpoint: str,
        operation: str,
        resource: tuple[str, str] | None = None,
        **kwargs,
    ) -> dict[str, Any]:
        """Call the API; a 404 on a named ``resource`` raises ResourceNotFoundError."""
        url = f"{self.base_url}/api/v1{endpoint}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.request(
                    method, url, headers=self.headers, **kwargs
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            if resource is not None and e.response.status_code == 404:
                logger.warning(f"n8n API {operation}: {resource[0]} {resource[1]} not found")
                raise ResourceNotFoundError(*resource) from e
            logger.error(
                f"n8n API {operation} failed with {e.response.status_code}",
                extra={"endpoint": endpoint, "status_code": e.response.status_code},
            )
            raise ExternalServiceError(
                SERVICE_NAME,
                operation,
                details={"status_code": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"n8n API {operation} failed: {e}")
            raise ExternalServiceError(
                SERVICE_NAME, operation, details={"reason": str(e)}
            ) from e

        return _decode(response)


async def is_service_available(
    url: str, transport: httpx.AsyncBaseTransport | None = None
) -> bool:
    """HEAD ``url``; any answer below 500 counts as available."""
    try:
        async with httpx.AsyncClient(
            timeout=AVAILABILITY_TIMEOUT_SECONDS, transport=transport
        ) as client:
            response = await client.head(url)
    except httpx.HTTPError as e:
        logger.warning(f"Service at {url} unavailable: {e}")
        return False
    return response.status_code < 500
