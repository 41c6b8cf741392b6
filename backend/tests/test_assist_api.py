"""
NoteAssist Backend — AI Assist and Health API Tests
=====================================================

What:  HTTP-level tests for /notes/ai/* and /health.
How:   The app is built around a FakeProvider, so no Gemini calls are made.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from noteassist.exceptions import ConfigurationError, ProviderBlockedError, ProviderError
from noteassist.services.assist_service import SUMMARY_FALLBACK


class TestSummarizeEndpoint:
    @pytest.mark.asyncio
    async def test_summarize(self, test_client, fake_provider):
        fake_provider.reply = '{"summary": "A plan for the week."}'

        response = await test_client.post("/notes/ai/summarize", json={"content": "Mon: gym. Tue: code."})

        assert response.status_code == 200
        assert response.json() == {"summary": "A plan for the week."}

    @pytest.mark.asyncio
    async def test_unparsable_reply_returns_fallback(self, test_client, fake_provider):
        fake_provider.reply = "Sorry, here is a summary without JSON."

        response = await test_client.post("/notes/ai/summarize", json={"content": "text"})

        assert response.status_code == 200
        assert response.json()["summary"] == SUMMARY_FALLBACK

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"content": ""}, {"content": "   "}])
    async def test_empty_content_is_400(self, test_client, fake_provider, body):
        response = await test_client.post("/notes/ai/summarize", json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert fake_provider.calls == []

    @pytest.mark.asyncio
    async def test_blocked_reply_is_503_with_message(self, test_client, fake_provider):
        fake_provider.error = ProviderBlockedError()

        response = await test_client.post("/notes/ai/summarize", json={"content": "text"})

        assert response.status_code == 503
        body = response.json()
        assert body["error"] == "provider_blocked"
        assert "safety filters" in body["message"]

    @pytest.mark.asyncio
    async def test_provider_failure_is_503(self, test_client, fake_provider):
        fake_provider.error = ProviderError(context={"call_id": "abc"})

        response = await test_client.post("/notes/ai/summarize", json={"content": "text"})

        assert response.status_code == 503
        body = response.json()
        assert body["error"] == "provider_error"
        assert "details" not in body

    @pytest.mark.asyncio
    async def test_missing_api_key_is_generic_500(self, test_client, fake_provider):
        fake_provider.error = ConfigurationError(context={"setting": "GEMINI_API_KEY"})

        response = await test_client.post("/notes/ai/summarize", json={"content": "text"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "GEMINI_API_KEY" not in response.text

    @pytest.mark.asyncio
    async def test_unexpected_error_is_500_with_request_id_header(self, test_app, fake_provider):
        fake_provider.error = RuntimeError("boom")
        transport = ASGITransport(app=test_app, raise_app_exceptions=False)

        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post(
                "/notes/ai/summarize",
                json={"content": "text"},
                headers={"X-Request-ID": "rid-1"},
            )

        assert response.status_code == 500
        assert response.headers["X-Request-ID"] == "rid-1"
        body = response.json()
        assert body["error"] == "internal_server_error"
        assert body["request_id"] == "rid-1"
        assert "boom" not in response.text


class TestFixGrammarEndpoint:
    @pytest.mark.asyncio
    async def test_fix_grammar(self, test_client, fake_provider):
        fake_provider.reply = (
            '```json\n{"fixedContent": "She goes home.", "corrections": '
            '[{"original": "go", "corrected": "goes", "reason": "agreement"}]}\n```'
        )

        response = await test_client.post("/notes/ai/fix-grammar", json={"content": "She go home."})

        assert response.status_code == 200
        assert response.json() == {
            "fixedContent": "She goes home.",
            "corrections": [{"original": "go", "corrected": "goes", "reason": "agreement"}],
        }

    @pytest.mark.asyncio
    async def test_unparsable_reply_echoes_content(self, test_client, fake_provider):
        fake_provider.reply = "not json"

        response = await test_client.post("/notes/ai/fix-grammar", json={"content": "She go home."})

        assert response.json() == {"fixedContent": "She go home.", "corrections": []}


class TestAutoTagEndpoint:
    @pytest.mark.asyncio
    async def test_auto_tag_caps_at_five(self, test_client, fake_provider):
        fake_provider.reply = '{"tags": ["a", "b", "c", "d", "e", "f"]}'

        response = await test_client.post(
            "/notes/ai/auto-tag", json={"title": "Recipes", "content": "Pasta and bread"}
        )

        assert response.status_code == 200
        assert response.json() == {"tags": ["a", "b", "c", "d", "e"]}

    @pytest.mark.asyncio
    async def test_both_empty_is_400(self, test_client, fake_provider):
        response = await test_client.post("/notes/ai/auto-tag", json={"title": "", "content": ""})

        assert response.status_code == 400
        assert fake_provider.calls == []


class TestHealthEndpoint:
    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["ai_provider"] == "available"

    @pytest.mark.asyncio
    async def test_degraded_when_provider_unavailable(self, test_client, fake_provider):
        fake_provider.healthy = False

        response = await test_client.get("/health")

        body = response.json()
        assert body["status"] == "degraded"
        assert body["ai_provider"] == "unavailable"

    @pytest.mark.asyncio
    async def test_health_needs_no_identity(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
