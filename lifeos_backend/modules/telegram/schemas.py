"""Telegram Bot API update models and handler results."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class User(BaseModel):
    id: int
    is_bot: bool = False
    first_name: str = ""
    last_name: str | None = None
    username: str | None = None
    language_code: str | None = None


class Chat(BaseModel):
    id: int
    type: str = "private"
    title: str | None = None
    username: str | None = None


class Voice(BaseModel):
    file_id: str
    file_unique_id: str | None = None
    duration: int = 0
    mime_type: str | None = None
    file_size: int | None = None


class MessageEntity(BaseModel):
    type: str
    offset: int
    length: int


class Message(BaseModel):
    message_id: int
    from_user: User | None = Field(None, alias="from")
    chat: Chat
    date: int
    text: str | None = None
    voice: Voice | None = None
    entities: list[MessageEntity] | None = None

    class Config:
        populate_by_name = True


class Update(BaseModel):
    update_id: int
    message: Message | None = None
    edited_message: Message | None = None
    callback_query: dict[str, Any] | None = None


class ParsedCommand(BaseModel):
    command: str
    args: str = ""


class IntentType(str, Enum):
    COMMAND = "command"
    VOICE = "voice"
    TEXT = "text"


class HandleStatus(str, Enum):
    FORWARDED = "forwarded"
    REPLIED = "replied"
    REJECTED = "rejected"
    IGNORED = "ignored"
    UNAUTHORIZED = "unauthorized"
    FAILED = "failed"


class TelegramIntent(BaseModel):
    """What the n8n message workflow receives for one message."""

    type: IntentType
    chat_id: int
    message_id: int
    user_id: int | None = None
    username: str | None = None
    command: str | None = None
    args: str | None = None
    data: dict[str, Any] | None = None
    text: str | None = None
    voice: Voice | None = None


class HandleResult(BaseModel):
    status: HandleStatus
    chat_id: int | None = None
    reply: str | None = None
    intent: TelegramIntent | None = None


class WebhookResponse(BaseModel):
    """Webhook answer; with ``method`` set Telegram delivers ``text`` as a reply."""

    ok: bool = True
    status: HandleStatus
    method: str | None = None
    chat_id: int | None = None
    text: str | None = None

    @classmethod
    def from_result(cls, result: HandleResult) -> "WebhookResponse":
        if result.reply and result.chat_id is not None:
            return cls(
                status=result.status,
                method="sendMessage",
                chat_id=result.chat_id,
                text=result.reply,
            )
        return cls(status=result.status)
