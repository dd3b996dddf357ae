"""n8n automation module for Life OS."""

from .client import N8nApiClient, N8nWebhookClient, is_service_available
from .routers import router
from .workflows import EXPECTED_WORKFLOWS, check_workflows

__all__ = [
    # Clients
    "N8nWebhookClient",
    "N8nApiClient",
    "is_service_available",
    # Workflows
    "EXPECTED_WORKFLOWS",
    "check_workflows",
    # Router
    "router",
]
