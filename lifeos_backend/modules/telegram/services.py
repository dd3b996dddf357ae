"""Telegram update handling: allow-list, validation and n8n forwarding."""

from collections.abc import Iterable

from ...config import settings
from ...core.exceptions import ExternalServiceError, ValidationError
from ...core.logging import get_logger
from ..automation.client import N8nWebhookClient
from . import commands
from .schemas import (
    HandleResult,
    HandleStatus,
    IntentType,
    Message,
    TelegramIntent,
    Update,
)

logger = get_logger(__name__)

TELEGRAM_WEBHOOK = "process-telegram-message"
FAILURE_REPLY = "Das hat leider nicht geklappt. Bitte versuche es später erneut."


def is_chat_allowed(chat_id: int, allowed_chat_ids: Iterable[int] | None = None) -> bool:
    """An empty allow-list admits every chat."""
    if allowed_chat_ids is None:
        allowed_chat_ids = settings.telegram_allowed_chat_ids
    allowed = list(allowed_chat_ids)
    return not allowed or chat_id in allowed


def is_view_request(message: Message) -> bool:
    parsed = commands.parse_command(message)
    return parsed is not None and (
        parsed.command in commands.VIEW_COMMANDS
        or parsed.command in commands.LOCAL_COMMANDS
    )


def build_intent(message: Message) -> TelegramIntent | HandleResult:
    """Turn a message into an n8n intent, or a local result when it needs none."""
    base = {
        "chat_id": message.chat.id,
        "message_id": message.message_id,
        "user_id": message.from_user.id if message.from_user else None,
        "username": message.from_user.username if message.from_user else None,
    }

    if message.voice is not None:
        return TelegramIntent(type=IntentType.VOICE, voice=message.voice, **base)

    parsed = commands.parse_command(message)
    if parsed is None:
        text = (message.text or "").strip()
        if not text:
            return HandleResult(status=HandleStatus.IGNORED, chat_id=message.chat.id)
        return TelegramIntent(type=IntentType.TEXT, text=text, **base)

    if parsed.command in commands.LOCAL_COMMANDS:
        return HandleResult(
            status=HandleStatus.REPLIED,
            chat_id=message.chat.id,
            reply=commands.help_text(),
        )

    try:
        data = commands.validate_arguments(parsed.command, parsed.args)
    except ValidationError as e:
        return HandleResult(
            status=HandleStatus.REJECTED, chat_id=message.chat.id, reply=e.message
        )

    return TelegramIntent(
        type=IntentType.COMMAND,
        command=parsed.command,
        args=parsed.args,
        data=data,
        text=message.text,
        **base,
    )


async def handle_update(
    update: Update,
    client: N8nWebhookClient,
    allowed_chat_ids: Iterable[int] | None = None,
) -> HandleResult:
    """Process one Telegram update.

    Bot senders, updates without a message and chats outside the allow-list
    are not forwarded. Invalid commands are answered directly. Edits are
    only answered when they ask for a view; the original message already
    captured its data.
    """
    message = update.message or update.edited_message
    if message is None:
        return HandleResult(status=HandleStatus.IGNORED)

    chat_id = message.chat.id
    if update.message is None and not is_view_request(message):
        return HandleResult(status=HandleStatus.IGNORED, chat_id=chat_id)

    if message.from_user is not None and message.from_user.is_bot:
        return HandleResult(status=HandleStatus.IGNORED, chat_id=chat_id)

    if not is_chat_allowed(chat_id, allowed_chat_ids):
        logger.warning(f"Rejected Telegram update from chat {chat_id}")
        return HandleResult(status=HandleStatus.UNAUTHORIZED, chat_id=chat_id)

    outcome = build_intent(message)
    if isinstance(outcome, HandleResult):
        return outcome

    try:
        body = await client.trigger(TELEGRAM_WEBHOOK, outcome.model_dump(mode="json"))
    except ExternalServiceError as e:
        logger.error(f"Forwarding Telegram update {update.update_id} failed: {e.message}")
        return HandleResult(
            status=HandleStatus.FAILED,
            chat_id=chat_id,
            reply=FAILURE_REPLY,
            intent=outcome,
        )

    reply = body.get("reply") if isinstance(body, dict) else None
    return HandleResult(
        status=HandleStatus.FORWARDED,
        chat_id=chat_id,
        reply=reply if isinstance(reply, str) and reply.strip() else None,
        intent=outcome,
    )
