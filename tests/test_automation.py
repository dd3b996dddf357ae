"""Tests for the n8n clients, RAG answer parsing and the workflow catalogue."""

import json
from uuid import uuid4

import httpx
import pytest

from lifeos_backend.core.exceptions import ExternalServiceError, ResourceNotFoundError
from lifeos_backend.modules.automation import services
from lifeos_backend.modules.automation.client import (
    N8nApiClient,
    N8nWebhookClient,
    is_service_available,
)
from lifeos_backend.modules.automation.schemas import (
    MeetingMinutesPayload,
    N8nExecution,
    N8nWorkflow,
)
from lifeos_backend.modules.automation.workflows import all_expected, check_workflows


def webhook_client(handler):
    return N8nWebhookClient(
        base_url="http://n8n.test/webhook/", transport=httpx.MockTransport(handler)
    )


class TestWebhookClient:
    async def test_posts_json_payload(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"ok": True})

        body = await webhook_client(handler).trigger("/rag-query", {"query": "Miete?"})

        assert body == {"ok": True}
        assert seen == {
            "url": "http://n8n.test/webhook/rag-query",
            "method": "POST",
            "body": {"query": "Miete?"},
        }

    async def test_plain_text_answer_is_wrapped(self):
        def handler(request):
            return httpx.Response(200, text="Alles erledigt")

        body = await webhook_client(handler).trigger("rag-query", {})

        assert body == {"response": "Alles erledigt"}

    async def test_list_answer_is_wrapped(self):
        def handler(request):
            return httpx.Response(200, json=[1, 2])

        assert await webhook_client(handler).trigger("x", {}) == {"response": [1, 2]}

    async def test_error_status_raises(self):
        def handler(request):
            return httpx.Response(404, json={"message": "webhook not registered"})

        with pytest.raises(ExternalServiceError) as exc_info:
            await webhook_client(handler).trigger("rag-query", {})

        assert exc_info.value.status_code == 502
        assert exc_info.value.details == {"status_code": 404}

    async def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ExternalServiceError):
            await webhook_client(handler).trigger("rag-query", {})


class TestApiClient:
    async def test_sends_api_key_and_parses_workflows(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["key"] = request.headers.get("X-N8N-API-KEY")
            return httpx.Response(
                200,
                json={"data": [{"id": 7, "name": "[Wealth] create-daily-snapshot",
                                "active": True}]},
            )

        client = N8nApiClient(
            base_url="http://n8n.test", api_key="secret",
            transport=httpx.MockTransport(handler),
        )
        workflows = await client.list_workflows()

        assert seen == {"url": "http://n8n.test/api/v1/workflows", "key": "secret"}
        assert workflows[0].id == "7"
        assert workflows[0].active is True

    async def test_executions_filtered_by_workflow(self):
        seen = {}

        def handler(request):
            seen["params"] = dict(request.url.params)
            return httpx.Response(
                200,
                json={"data": [{"id": "1", "finished": False, "workflowId": "7",
                                "data": {"resultData": {"error": {"message": "timeout"}}}}]},
            )

        client = N8nApiClient(
            base_url="http://n8n.test", api_key="k", transport=httpx.MockTransport(handler)
        )
        executions = await client.list_executions("7")

        assert seen["params"] == {"workflowId": "7"}
        assert executions[0].workflow_id == "7"
        assert executions[0].error_message == "timeout"

    async def test_unauthorized_raises(self):
        def handler(request):
            return httpx.Response(401)

        client = N8nApiClient(
            base_url="http://n8n.test", api_key="bad", transport=httpx.MockTransport(handler)
        )

        with pytest.raises(ExternalServiceError):
            await client.get_workflow("7")

    async def test_execute_workflow_posts_data(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200, json={"id": 91, "finished": True, "workflowId": "7", "mode": "manual"}
            )

        client = N8nApiClient(
            base_url="http://n8n.test", api_key="k", transport=httpx.MockTransport(handler)
        )
        execution = await client.execute_workflow("7", {"date": "2026-10-17"})

        assert seen == {
            "url": "http://n8n.test/api/v1/workflows/7/execute",
            "method": "POST",
            "body": {"date": "2026-10-17"},
        }
        assert execution.id == "91"
        assert execution.finished is True
        assert execution.workflow_id == "7"

    async def test_execute_workflow_without_data_sends_empty_object(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "92"})

        client = N8nApiClient(
            base_url="http://n8n.test", api_key="k", transport=httpx.MockTransport(handler)
        )
        execution = await client.execute_workflow("7")

        assert seen["body"] == {}
        assert execution.finished is False

    @pytest.mark.parametrize("call", ["get_workflow", "execute_workflow"])
    async def test_unknown_workflow_is_not_found(self, call):
        def handler(request):
            return httpx.Response(404, json={"message": "Not Found"})

        client = N8nApiClient(
            base_url="http://n8n.test", api_key="k", transport=httpx.MockTransport(handler)
        )

        with pytest.raises(ResourceNotFoundError) as exc_info:
            await getattr(client, call)("missing")

        assert exc_info.value.status_code == 404
        assert exc_info.value.identifier == "missing"

    async def test_missing_list_endpoint_stays_an_upstream_failure(self):
        def handler(request):
            return httpx.Response(404)

        client = N8nApiClient(
            base_url="http://n8n.test", api_key="k", transport=httpx.MockTransport(handler)
        )

        with pytest.raises(ExternalServiceError):
            await client.list_workflows()


def test_execution_without_error():
    assert N8nExecution(id="1").error_message is None


@pytest.mark.parametrize(
    "status_code, expected", [(200, True), (404, True), (503, False)]
)
async def test_is_service_available(status_code, expected):
    transport = httpx.MockTransport(lambda request: httpx.Response(status_code))

    assert await is_service_available("http://n8n.test", transport=transport) is expected


async def test_unreachable_service_is_unavailable():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    transport = httpx.MockTransport(handler)

    assert await is_service_available("http://n8n.test", transport=transport) is False


class TestRagParsing:
    def test_answer_with_sources(self):
        body = {
            "response": (
                ":mag: **Dokumentensuche**\n\n"
                "Die Kaltmiete beträgt 750 €.\n\n---\n:page_facing_up: "
                "**Quellen**:\n- Mietvertrag.pdf\n2. Nebenkosten 2025.pdf\n"
            )
        }

        answer = services.parse_rag_response(body)

        assert answer.content == "Die Kaltmiete beträgt 750 €."
        assert [s.title for s in answer.sources] == [
            "Mietvertrag.pdf",
            "Nebenkosten 2025.pdf",
        ]

    def test_answer_without_sources(self):
        answer = services.parse_rag_response({"response": "Keine Dokumente gefunden."})

        assert answer.content == "Keine Dokumente gefunden."
        assert answer.sources == []

    def test_missing_answer(self):
        answer = services.parse_rag_response({})

        assert answer.content == services.NO_ANSWER

    async def test_rag_query_calls_webhook(self):
        def handler(request):
            assert request.url.path == "/webhook/rag-query"
            assert json.loads(request.content) == {"query": "Wann endet die Zinsbindung?",
                                                   "chat_id": None}
            return httpx.Response(200, json={"response": "2031."})

        answer = await services.rag_query(
            webhook_client(handler), "Wann endet die Zinsbindung?"
        )

        assert answer.content == "2031."


async def test_meeting_minutes_rejects_malformed_answer():
    def handler(request):
        return httpx.Response(200, json={"action_items": [{"priority": 9}]})

    with pytest.raises(ExternalServiceError):
        await services.process_meeting_minutes(
            webhook_client(handler),
            MeetingMinutesPayload(meeting_id=uuid4(), meeting_title="Jour fixe",
                                  transcript="Notizen"),
        )


class TestWorkflowCheck:
    def test_catalogue_size(self):
        assert len(all_expected()) == 21

    def test_all_deployed(self):
        deployed = [
            N8nWorkflow(id=str(i), name=f"[Life OS] {spec.name}")
            for i, spec in enumerate(all_expected())
        ]

        check = check_workflows(deployed)

        assert check.missing == []
        assert check.unexpected == []
        assert check.deployed == 21

    def test_missing_and_unexpected(self):
        deployed = [
            N8nWorkflow(id="1", name="create-daily-snapshot"),
            N8nWorkflow(id="2", name="my experiment"),
        ]

        check = check_workflows(deployed)

        assert check.expected == 21
        assert len(check.missing) == 20
        assert "create-daily-snapshot" not in [s.name for s in check.missing]
        assert check.unexpected == ["my experiment"]
