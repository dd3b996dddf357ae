"""End-to-end tests through the FastAPI app."""

import uuid

import httpx

from lifeos_backend.main import app
from lifeos_backend.modules.automation.client import N8nWebhookClient
from lifeos_backend.modules.automation.dependencies import get_webhook_client


async def test_health_check(client):
    response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["env"] == "test"


class TestAuthentication:
    async def test_missing_token(self, client):
        response = await client.get("/api/inbox")

        assert response.status_code == 401

    async def test_token_with_wrong_secret(self, client, user_id, bearer):
        headers = bearer(user_id, secret="not-the-secret-used-by-this-test-suite")

        response = await client.get(
            "/api/inbox", headers=headers
        )

        assert response.status_code == 401

    async def test_expired_token(self, client, user_id, bearer):
        headers = bearer(user_id, expires_in=-60)

        response = await client.get(
            "/api/inbox", headers=headers
        )

        assert response.status_code == 401

    async def test_wrong_audience(self, client, user_id, bearer):
        headers = bearer(user_id, audience="anon")

        response = await client.get(
            "/api/inbox", headers=headers
        )

        assert response.status_code == 401

    async def test_unauthenticated_error_envelope(self, client):
        response = await client.get("/api/inbox")

        body = response.json()
        assert response.headers["www-authenticate"] == "Bearer"
        assert body["success"] is False
        assert body["message"] == "Not authenticated"
        assert body["data"] is None

    async def test_anonymous_role_is_forbidden(self, client, user_id, bearer):
        headers = bearer(user_id, role="anon")

        response = await client.get("/api/inbox", headers=headers)

        assert response.status_code == 403
        assert response.json()["message"] == (
            "Permission denied: cannot access Life OS data"
        )
        assert "www-authenticate" not in response.headers

    async def test_service_role_is_accepted(self, client, user_id, bearer):
        headers = bearer(user_id, role="service_role")

        response = await client.get("/api/inbox", headers=headers)

        assert response.status_code == 200

    async def test_me_returns_token_subject(self, client, user_id, auth_headers):
        response = await client.get("/api/auth/me", headers=auth_headers)

        data = response.json()["data"]
        assert response.status_code == 200
        assert data["id"] == str(user_id)
        assert data["email"] == "test@example.com"


class TestInboxApi:
    async def test_create_and_list(self, client, auth_headers):
        created = await client.post(
            "/api/inbox",
            json={"title": "  Handwerker anrufen ", "priority": 2},
            headers=auth_headers,
        )

        assert created.status_code == 200
        body = created.json()
        assert body["success"] is True
        assert body["data"]["title"] == "Handwerker anrufen"
        assert body["data"]["status"] == "inbox"

        listed = await client.get("/api/inbox", headers=auth_headers)

        page = listed.json()["data"]
        assert page["total"] == 1
        assert page["items"][0]["id"] == body["data"]["id"]

    async def test_blank_title_rejected(self, client, auth_headers):
        response = await client.post(
            "/api/inbox", json={"title": "   "}, headers=auth_headers
        )

        assert response.status_code == 422

    async def test_items_are_scoped_to_their_owner(self, client, auth_headers, bearer):
        created = await client.post(
            "/api/inbox", json={"title": "Privat"}, headers=auth_headers
        )
        item_id = created.json()["data"]["id"]
        other = bearer(uuid.uuid4())

        response = await client.get(f"/api/inbox/{item_id}", headers=other)

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "message": f"Inbox item with ID {item_id} not found",
            "error": f"Inbox item with ID {item_id} not found",
            "data": None,
        }


async def test_goal_progress_endpoint(client, auth_headers):
    created = await client.post(
        "/api/goals",
        json={"title": "Notgroschen", "timeframe": "yearly", "target_value": 10000},
        headers=auth_headers,
    )
    goal_id = created.json()["data"]["id"]

    response = await client.put(
        f"/api/goals/{goal_id}/progress",
        json={"current_value": 2500},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["data"]["progress_percent"] == 25.0


async def test_meeting_processing_endpoint(client, auth_headers):
    def handler(request):
        return httpx.Response(
            200,
            json={"summary": "Kurz.", "action_items": [{"title": "Angebot prüfen"}]},
        )

    app.dependency_overrides[get_webhook_client] = lambda: N8nWebhookClient(
        base_url="http://n8n.test/webhook", transport=httpx.MockTransport(handler)
    )
    created = await client.post(
        "/api/meetings",
        json={"title": "Bankgespräch", "start_time": "2026-10-16T10:00:00Z"},
        headers=auth_headers,
    )
    meeting_id = created.json()["data"]["id"]

    response = await client.post(
        f"/api/meetings/{meeting_id}/process",
        json={"transcript": "Zinsangebot besprochen."},
        headers=auth_headers,
    )

    data = response.json()["data"]
    assert response.status_code == 200
    assert data["meeting"]["summary"] == "Kurz."
    assert [a["extracted_text"] for a in data["action_items"]] == ["Angebot prüfen"]


async def test_action_item_status_syncs_inbox_task(client, auth_headers):
    def handler(request):
        return httpx.Response(
            200,
            json={"summary": "Kurz.", "action_items": [{"title": "Exposé anfordern"}]},
        )

    app.dependency_overrides[get_webhook_client] = lambda: N8nWebhookClient(
        base_url="http://n8n.test/webhook", transport=httpx.MockTransport(handler)
    )
    created = await client.post(
        "/api/meetings",
        json={"title": "Maklertermin", "start_time": "2026-10-16T10:00:00Z"},
        headers=auth_headers,
    )
    processed = await client.post(
        f"/api/meetings/{created.json()['data']['id']}/process",
        json={"transcript": "Neues Objekt in Gohlis."},
        headers=auth_headers,
    )
    action_item = processed.json()["data"]["action_items"][0]

    completed = await client.patch(
        f"/api/meetings/action-items/{action_item['id']}",
        json={"status": "completed"},
        headers=auth_headers,
    )
    task = await client.get(
        f"/api/inbox/{action_item['inbox_item_id']}", headers=auth_headers
    )

    assert completed.status_code == 200
    assert completed.json()["data"]["status"] == "completed"
    assert task.json()["data"]["status"] == "done"
    assert task.json()["data"]["completed_at"] is not None

    await client.patch(
        f"/api/meetings/action-items/{action_item['id']}",
        json={"status": "pending"},
        headers=auth_headers,
    )
    task = await client.get(
        f"/api/inbox/{action_item['inbox_item_id']}", headers=auth_headers
    )

    assert task.json()["data"]["status"] == "inbox"
    assert task.json()["data"]["completed_at"] is None


async def test_unknown_action_item(client, auth_headers):
    response = await client.patch(
        f"/api/meetings/action-items/{uuid.uuid4()}",
        json={"status": "completed"},
        headers=auth_headers,
    )

    assert response.status_code == 404


async def test_rag_query_upstream_failure(client, auth_headers):
    app.dependency_overrides[get_webhook_client] = lambda: N8nWebhookClient(
        base_url="http://n8n.test/webhook",
        transport=httpx.MockTransport(lambda request: httpx.Response(503)),
    )

    response = await client.post(
        "/api/automation/rag-query", json={"query": "Miete?"}, headers=auth_headers
    )

    assert response.status_code == 502
    assert response.json()["success"] is False


async def test_dashboard_today(client, auth_headers):
    response = await client.get("/api/dashboard/today", headers=auth_headers)

    data = response.json()["data"]
    assert response.status_code == 200
    assert data["quick_stats"]["net_worth"] == 0
    assert data["tasks"] == []
    assert data["insights"] == []


async def test_real_estate_portfolio(client, auth_headers, make_property, make_unit, make_loan):
    prop = await make_property()
    await make_unit(prop.id)
    await make_loan(prop.id)

    response = await client.get("/api/real-estate/portfolio", headers=auth_headers)

    data = response.json()["data"]
    assert response.status_code == 200
    assert data["total_property_value"] == 500000
    assert data["total_loan_balance"] == 250000


async def test_real_estate_portfolio_empty(client, auth_headers):
    response = await client.get("/api/real-estate/portfolio", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["data"] is None
