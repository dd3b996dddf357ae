"""Tests for the Telegram bot: command parsing, validation and forwarding."""

import json

import httpx
import pytest

from lifeos_backend.core.exceptions import ValidationError
from lifeos_backend.main import app
from lifeos_backend.modules.automation.client import N8nWebhookClient
from lifeos_backend.modules.automation.dependencies import get_webhook_client
from lifeos_backend.modules.telegram import commands, services
from lifeos_backend.modules.telegram.routers import secret_matches
from lifeos_backend.modules.telegram.schemas import (
    HandleStatus,
    IntentType,
    Message,
    Update,
)

ALLOWED_CHAT = 4242


def message(text=None, chat_id=ALLOWED_CHAT, **extra):
    payload = {
        "message_id": 10,
        "from": {"id": 99, "is_bot": False, "first_name": "Max", "username": "max"},
        "chat": {"id": chat_id, "type": "private"},
        "date": 1792137600,
        "text": text,
    }
    payload.update(extra)
    return payload


def update(**kwargs):
    return Update.model_validate({"update_id": 1, "message": message(**kwargs)})


def n8n(handler):
    return N8nWebhookClient(
        base_url="http://n8n.test/webhook", transport=httpx.MockTransport(handler)
    )


def failing_handler(request):
    raise AssertionError("n8n must not be called")


class TestParseCommand:
    def test_bot_command_entity(self):
        msg = Message.model_validate(
            message(
                "/Task@LifeOsBot Steuern machen",
                entities=[{"type": "bot_command", "offset": 0, "length": 15}],
            )
        )

        parsed = commands.parse_command(msg)

        assert parsed.command == "task"
        assert parsed.args == "Steuern machen"

    def test_prefix_without_entities(self):
        parsed = commands.parse_command(Message.model_validate(message("/expense 12,50 essen")))

        assert parsed.command == "expense"
        assert parsed.args == "12,50 essen"

    @pytest.mark.parametrize("text", ["Hallo", "", None, "kein /befehl"])
    def test_no_command(self, text):
        assert commands.parse_command(Message.model_validate(message(text))) is None

    def test_sender_alias(self):
        msg = Message.model_validate(message("hi"))

        assert msg.from_user.username == "max"


class TestValidateArguments:
    @pytest.mark.parametrize(
        "command, args, expected",
        [
            ("task", "Steuern machen", {"text": "Steuern machen"}),
            ("expense", "12,50 essen gehen", {"amount": 12.5, "category": "essen gehen"}),
            ("expense", "€7.999", {"amount": 8.0, "category": "sonstiges"}),
            ("weight", "82,4kg", {"weight": 82.4}),
            ("mood", "7", {"mood": 7}),
            ("water", "500", {"water_ml": 500}),
            ("today", "", {}),
        ],
    )
    def test_valid(self, command, args, expected):
        assert commands.validate_arguments(command, args) == expected

    @pytest.mark.parametrize(
        "command, args, message_part",
        [
            ("task", "  ", "Bitte gib einen Text an"),
            ("expense", "", "Betrag fehlt"),
            ("expense", "abc essen", "Ungültiger Betrag"),
            ("expense", "-5 essen", "größer als 0"),
            ("expense", "nan", "Ungültiger Betrag"),
            ("weight", "350", "zwischen 20 und 300"),
            ("weight", "schwer", "Ungültiges Gewicht"),
            ("mood", "11", "1 bis 10"),
            ("mood", "7.5", "1 bis 10"),
            ("water", "0", "positive ganze Zahl"),
            ("water", "20000", "positive ganze Zahl"),
            ("networth", "jetzt", "erwartet keine Argumente"),
            ("foo", "", "Unbekannter Befehl: /foo"),
        ],
    )
    def test_invalid(self, command, args, message_part):
        with pytest.raises(ValidationError) as exc_info:
            commands.validate_arguments(command, args)

        assert message_part in exc_info.value.message


def test_help_lists_every_command():
    text = commands.help_text()

    for name in list(commands.CAPTURE_COMMANDS) + list(commands.VIEW_COMMANDS):
        assert f"/{name}" in text


@pytest.mark.parametrize(
    "chat_id, allowed, expected",
    [(4242, [4242], True), (1, [4242], False), (1, [], True)],
)
def test_is_chat_allowed(chat_id, allowed, expected):
    assert services.is_chat_allowed(chat_id, allowed) is expected


class TestHandleUpdate:
    async def test_forwards_valid_command(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"reply": "Aufgabe gespeichert."})

        result = await services.handle_update(
            update(text="/task Steuern machen"), n8n(handler), [ALLOWED_CHAT]
        )

        assert result.status == HandleStatus.FORWARDED
        assert result.reply == "Aufgabe gespeichert."
        assert seen["path"] == "/webhook/process-telegram-message"
        assert seen["body"]["type"] == "command"
        assert seen["body"]["command"] == "task"
        assert seen["body"]["data"] == {"text": "Steuern machen"}
        assert seen["body"]["chat_id"] == ALLOWED_CHAT
        assert seen["body"]["username"] == "max"

    async def test_forwards_voice_message(self):
        def handler(request):
            body = json.loads(request.content)
            assert body["type"] == "voice"
            assert body["voice"]["file_id"] == "voice-1"
            return httpx.Response(200, text="")

        result = await services.handle_update(
            update(voice={"file_id": "voice-1", "duration": 4}),
            n8n(handler),
            [ALLOWED_CHAT],
        )

        assert result.status == HandleStatus.FORWARDED
        assert result.intent.type == IntentType.VOICE
        assert result.reply is None

    async def test_forwards_free_text(self):
        def handler(request):
            return httpx.Response(200, json={})

        result = await services.handle_update(
            update(text="Wie viel habe ich diesen Monat ausgegeben?"),
            n8n(handler),
            [ALLOWED_CHAT],
        )

        assert result.intent.type == IntentType.TEXT

    async def test_rejects_invalid_arguments_without_forwarding(self):
        result = await services.handle_update(
            update(text="/mood super"), n8n(failing_handler), [ALLOWED_CHAT]
        )

        assert result.status == HandleStatus.REJECTED
        assert "1 bis 10" in result.reply

    async def test_help_is_answered_locally(self):
        result = await services.handle_update(
            update(text="/help"), n8n(failing_handler), [ALLOWED_CHAT]
        )

        assert result.status == HandleStatus.REPLIED
        assert "/expense" in result.reply

    async def test_unknown_chat(self):
        result = await services.handle_update(
            update(text="/today", chat_id=1), n8n(failing_handler), [ALLOWED_CHAT]
        )

        assert result.status == HandleStatus.UNAUTHORIZED
        assert result.reply is None

    async def test_bot_sender_ignored(self):
        upd = Update.model_validate(
            {
                "update_id": 2,
                "message": message(
                    "/today", **{"from": {"id": 1, "is_bot": True, "first_name": "Bot"}}
                ),
            }
        )

        result = await services.handle_update(upd, n8n(failing_handler), [ALLOWED_CHAT])

        assert result.status == HandleStatus.IGNORED

    async def test_update_without_message(self):
        upd = Update.model_validate({"update_id": 3, "callback_query": {"id": "x"}})

        result = await services.handle_update(upd, n8n(failing_handler), [ALLOWED_CHAT])

        assert result.status == HandleStatus.IGNORED

    async def test_n8n_failure_replies_with_apology(self):
        def handler(request):
            return httpx.Response(500)

        result = await services.handle_update(
            update(text="/networth"), n8n(handler), [ALLOWED_CHAT]
        )

        assert result.status == HandleStatus.FAILED
        assert result.reply == services.FAILURE_REPLY


@pytest.mark.parametrize(
    "received, expected, matches",
    [("abc", "abc", True), ("abc", "abd", False), (None, "abc", False), (None, "", True)],
)
def test_secret_matches(received, expected, matches):
    assert secret_matches(received, expected) is matches


class TestWebhookRoute:
    @pytest.fixture
    def forward_to(self, client):
        def _install(handler):
            app.dependency_overrides[get_webhook_client] = lambda: n8n(handler)

        return _install

    async def test_wrong_secret(self, client, forward_to):
        forward_to(failing_handler)

        response = await client.post(
            "/api/telegram/webhook",
            json={"update_id": 1, "message": message("/today")},
            headers={"X-Telegram-Bot-Api-Secret-Token": "wrong"},
        )

        assert response.status_code == 200
        assert response.json()["ok"] is False
        assert response.json()["status"] == "unauthorized"

    async def test_reply_is_sent_as_webhook_response(self, client, forward_to):
        forward_to(lambda request: httpx.Response(200, json={"reply": "Netto: 250.000 €"}))

        response = await client.post(
            "/api/telegram/webhook",
            json={"update_id": 1, "message": message("/networth")},
            headers={"X-Telegram-Bot-Api-Secret-Token": "telegram-secret"},
        )

        body = response.json()
        assert response.status_code == 200
        assert body["status"] == "forwarded"
        assert body["method"] == "sendMessage"
        assert body["chat_id"] == ALLOWED_CHAT
        assert body["text"] == "Netto: 250.000 €"

    async def test_malformed_update(self, client, forward_to):
        forward_to(failing_handler)

        response = await client.post(
            "/api/telegram/webhook",
            json={"message": "nope"},
            headers={"X-Telegram-Bot-Api-Secret-Token": "telegram-secret"},
        )

        assert response.status_code == 200
        assert response.json()["status"] == "ignored"


class TestEditedMessages:
    async def test_edited_capture_is_not_forwarded_again(self):
        calls = []

        def handler(request):
            calls.append(json.loads(request.content))
            return httpx.Response(200, json={})

        client = n8n(handler)
        original = await services.handle_update(
            update(text="/task Steuern machen"), client, [ALLOWED_CHAT]
        )
        edited = await services.handle_update(
            Update.model_validate(
                {"update_id": 2, "edited_message": message("/task Steuern erledigen")}
            ),
            client,
            [ALLOWED_CHAT],
        )

        assert original.status == HandleStatus.FORWARDED
        assert edited.status == HandleStatus.IGNORED
        assert len(calls) == 1

    async def test_edited_free_text_is_ignored(self):
        result = await services.handle_update(
            Update.model_validate({"update_id": 3, "edited_message": message("Notiz")}),
            n8n(failing_handler),
            [ALLOWED_CHAT],
        )

        assert result.status == HandleStatus.IGNORED

    async def test_edited_view_command_is_answered(self):
        def handler(request):
            return httpx.Response(200, json={"reply": "3 offene Einträge"})

        result = await services.handle_update(
            Update.model_validate({"update_id": 4, "edited_message": message("/inbox")}),
            n8n(handler),
            [ALLOWED_CHAT],
        )

        assert result.status == HandleStatus.FORWARDED
        assert result.reply == "3 offene Einträge"


def test_non_ascii_secret_is_a_mismatch():
    assert secret_matches("geheimé", "telegram-secret") is False
    assert secret_matches("geheimé", "geheimé") is True


async def test_webhook_with_non_ascii_secret_header(client):
    app.dependency_overrides[get_webhook_client] = lambda: n8n(failing_handler)

    response = await client.post(
        "/api/telegram/webhook",
        json={"update_id": 1, "message": message("/today")},
        headers={"X-Telegram-Bot-Api-Secret-Token": "geheimé".encode("latin-1")},
    )

    assert response.status_code == 200
    assert response.json()["status"] == "unauthorized"
