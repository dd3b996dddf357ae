"""FastAPI dependencies for the n8n clients."""

from typing import Annotated

from fastapi import Depends

from .client import N8nApiClient, N8nWebhookClient


def get_webhook_client() -> N8nWebhookClient:
    return N8nWebhookClient()


def get_api_client() -> N8nApiClient:
    return N8nApiClient()


WebhookClient = Annotated[N8nWebhookClient, Depends(get_webhook_client)]
ApiClient = Annotated[N8nApiClient, Depends(get_api_client)]
