"""Telegram webhook route."""

import hmac

from fastapi import APIRouter, Header, Request
from pydantic import ValidationError as PydanticValidationError

from ...config import settings
from ...core.logging import get_logger
from ..automation.dependencies import WebhookClient
from . import services
from .schemas import HandleStatus, Update, WebhookResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/telegram", tags=["Telegram"])


def secret_matches(received: str | None, expected: str | None = None) -> bool:
    """Compare the webhook secret header; no configured secret accepts all."""
    expected = settings.telegram_webhook_secret if expected is None else expected
    if not expected:
        return True
    return received is not None and hmac.compare_digest(
        received.encode(), expected.encode()
    )


@router.post("/webhook", response_model=WebhookResponse)
async def telegram_webhook(
    request: Request,
    client: WebhookClient,
    secret_token: str | None = Header(None, alias="X-Telegram-Bot-Api-Secret-Token"),
):
    """Receive a bot update.

    Always answers 200 so Telegram does not redeliver the update; the
    outcome is reported in the body.
    """
    if not secret_matches(secret_token):
        logger.warning("Telegram webhook called with an invalid secret token")
        return WebhookResponse(ok=False, status=HandleStatus.UNAUTHORIZED)

    try:
        update = Update.model_validate(await request.json())
    except (ValueError, PydanticValidationError):
        logger.warning("Ignoring malformed Telegram update")
        return WebhookResponse(ok=False, status=HandleStatus.IGNORED)

    result = await services.handle_update(update, client)
    return WebhookResponse.from_result(result)
