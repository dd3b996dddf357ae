"""n8n-backed features: document Q&A and meeting minutes processing."""

import re
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ...core.exceptions import ExternalServiceError
from ...core.logging import get_logger
from .client import N8nWebhookClient
from .schemas import MeetingMinutesPayload, MeetingProcessingResult, RagAnswer, RagSource

logger = get_logger(__name__)

RAG_WEBHOOK = "rag-query"
MEETING_MINUTES_WEBHOOK = "process-meeting-minutes"

NO_ANSWER = "Keine Antwort erhalten."
SOURCES_MARKER = "**Quellen**"
_DECORATIONS = (":mag: **Dokumentensuche**\n\n", "\n\n---\n:page_facing_up: ")
_BULLET = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s*")


def parse_rag_response(body: dict[str, Any]) -> RagAnswer:
    """Split the workflow's markdown answer into content and sources."""
    content = body.get("response") or NO_ANSWER
    if not isinstance(content, str):
        content = str(content)

    sources: list[RagSource] = []
    if SOURCES_MARKER in content:
        answer, _, source_block = content.partition(SOURCES_MARKER)
        for decoration in _DECORATIONS:
            answer = answer.replace(decoration, "")
        content = answer.strip()

        for line in source_block.splitlines():
            title = _BULLET.sub("", line).strip().strip(":").strip()
            if title:
                sources.append(RagSource(title=title))

    return RagAnswer(content=content, sources=sources)


async def rag_query(
    client: N8nWebhookClient, query: str, chat_id: str | None = None
) -> RagAnswer:
    """Ask the document index a question."""
    body = await client.trigger(RAG_WEBHOOK, {"query": query, "chat_id": chat_id})
    return parse_rag_response(body)


async def process_meeting_minutes(
    client: N8nWebhookClient, payload: MeetingMinutesPayload
) -> MeetingProcessingResult:
    """Have n8n summarise a transcript and extract action items."""
    body = await client.trigger(
        MEETING_MINUTES_WEBHOOK, payload.model_dump(mode="json")
    )
    try:
        result = MeetingProcessingResult.model_validate(body)
    except PydanticValidationError as e:
        logger.error(f"Unexpected answer from {MEETING_MINUTES_WEBHOOK}: {e}")
        raise ExternalServiceError(
            "n8n", f"webhook {MEETING_MINUTES_WEBHOOK}", details={"reason": str(e)}
        ) from e
    logger.info(
        f"Meeting {payload.meeting_id} processed with "
        f"{len(result.action_items)} action items"
    )
    return result
