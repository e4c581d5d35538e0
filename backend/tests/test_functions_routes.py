"""
NeuroNotes Backend: AI Function Route Tests
=============================================

What:  HTTP-level tests for /functions/v1/suggest-tags and
       /functions/v1/summarize-note.
How:   The app runs in-process through ASGITransport; the gateway service
       singleton is patched so no upstream call is made.

What we test:
    ✅ OPTIONS preflight answers 200 with CORS headers and an empty body
    ✅ Success bodies are {"tags": [...]} / {"summary": "..."}
    ✅ 429 / 402 keep their status and fixed messages
    ✅ Malformed body → 400, missing key → 500
    ✅ Unexpected exceptions → 500 with the exception text
"""

from unittest.mock import AsyncMock, patch

import pytest

from neuronotes.exceptions import (
    AICreditsExhaustedError,
    AIGatewayError,
    AIRateLimitError,
    ConfigurationError,
)

SERVICE = "neuronotes.routes.functions.ai_gateway_service"


def assert_cors(response):
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["access-control-allow-headers"] == (
        "authorization, x-client-info, apikey, content-type"
    )


class TestPreflight:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/functions/v1/suggest-tags", "/functions/v1/summarize-note"])
    async def test_options_returns_cors_headers(self, test_client, path):
        with patch(SERVICE) as mock_service:
            response = await test_client.options(path)

        assert response.status_code == 200
        assert response.content == b""
        assert_cors(response)
        mock_service.suggest_tags.assert_not_called()
        mock_service.summarize_note.assert_not_called()


class TestSuggestTagsRoute:

    @pytest.mark.asyncio
    async def test_success(self, test_client):
        with patch(SERVICE) as mock_service:
            mock_service.suggest_tags = AsyncMock(return_value=["food", "shopping", "list"])
            response = await test_client.post(
                "/functions/v1/suggest-tags",
                json={"title": "Groceries", "content": "milk, eggs, bread"},
            )

        assert response.status_code == 200
        assert response.json() == {"tags": ["food", "shopping", "list"]}
        assert_cors(response)
        mock_service.suggest_tags.assert_awaited_once_with("Groceries", "milk, eggs, bread")

    @pytest.mark.asyncio
    async def test_rate_limited(self, test_client):
        with patch(SERVICE) as mock_service:
            mock_service.suggest_tags = AsyncMock(side_effect=AIRateLimitError())
            response = await test_client.post(
                "/functions/v1/suggest-tags", json={"title": "t", "content": "c"}
            )

        assert response.status_code == 429
        assert response.json() == {"error": "Rate limit exceeded. Please try again later."}
        assert_cors(response)

    @pytest.mark.asyncio
    async def test_credits_exhausted(self, test_client):
        with patch(SERVICE) as mock_service:
            mock_service.suggest_tags = AsyncMock(side_effect=AICreditsExhaustedError())
            response = await test_client.post(
                "/functions/v1/suggest-tags", json={"title": "t", "content": "c"}
            )

        assert response.status_code == 402
        assert response.json() == {
            "error": "AI credits exhausted. Please add credits to your workspace."
        }

    @pytest.mark.asyncio
    async def test_gateway_error_is_generic(self, test_client):
        with patch(SERVICE) as mock_service:
            mock_service.suggest_tags = AsyncMock(side_effect=AIGatewayError())
            response = await test_client.post(
                "/functions/v1/suggest-tags", json={"title": "t", "content": "c"}
            )

        assert response.status_code == 500
        assert response.json() == {"error": "AI gateway error"}

    @pytest.mark.asyncio
    async def test_missing_api_key(self, test_client):
        error = ConfigurationError(message="AI_GATEWAY_API_KEY is not configured")
        with patch(SERVICE) as mock_service:
            mock_service.suggest_tags = AsyncMock(side_effect=error)
            response = await test_client.post(
                "/functions/v1/suggest-tags", json={"title": "t", "content": "c"}
            )

        assert response.status_code == 500
        assert response.json() == {"error": "AI_GATEWAY_API_KEY is not configured"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [b"not json", b"{}", b'{"title": "only a title"}', b"[1, 2]"],
    )
    async def test_malformed_body(self, test_client, body):
        with patch(SERVICE) as mock_service:
            response = await test_client.post(
                "/functions/v1/suggest-tags",
                content=body,
                headers={"Content-Type": "application/json"},
            )

        assert response.status_code == 400
        assert "error" in response.json()
        assert_cors(response)
        mock_service.suggest_tags.assert_not_called()

    @pytest.mark.asyncio
    async def test_unexpected_exception_message(self, test_client):
        with patch(SERVICE) as mock_service:
            mock_service.suggest_tags = AsyncMock(side_effect=RuntimeError("kaboom"))
            response = await test_client.post(
                "/functions/v1/suggest-tags", json={"title": "t", "content": "c"}
            )

        assert response.status_code == 500
        assert response.json() == {"error": "kaboom"}

    @pytest.mark.asyncio
    async def test_unexpected_exception_without_message(self, test_client):
        with patch(SERVICE) as mock_service:
            mock_service.suggest_tags = AsyncMock(side_effect=RuntimeError())
            response = await test_client.post(
                "/functions/v1/suggest-tags", json={"title": "t", "content": "c"}
            )

        assert response.status_code == 500
        assert response.json() == {"error": "Unknown error"}


class TestSummarizeRoute:

    @pytest.mark.asyncio
    async def test_success(self, test_client):
        with patch(SERVICE) as mock_service:
            mock_service.summarize_note = AsyncMock(return_value="Buy milk and eggs.")
            response = await test_client.post(
                "/functions/v1/summarize-note", json={"content": "milk, eggs"}
            )

        assert response.status_code == 200
        assert response.json() == {"summary": "Buy milk and eggs."}
        assert_cors(response)

    @pytest.mark.asyncio
    async def test_failed_summary(self, test_client):
        with patch(SERVICE) as mock_service:
            mock_service.summarize_note = AsyncMock(
                side_effect=AIGatewayError(message="Failed to generate summary")
            )
            response = await test_client.post(
                "/functions/v1/summarize-note", json={"content": "x"}
            )

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate summary"}

    @pytest.mark.asyncio
    async def test_missing_content(self, test_client):
        response = await test_client.post("/functions/v1/summarize-note", json={})

        assert response.status_code == 400
