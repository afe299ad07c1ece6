"""Unit tests for the Gemini client."""

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from nexus.services.gateway.client import GeminiClient
from nexus.services.gateway.exceptions import GatewayError


def _reply(text_parts, status_code=200):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = "error body"
    resp.json.return_value = {
        "candidates": [{"content": {"parts": [{"text": t} for t in text_parts]}}]
    }
    return resp


@pytest.fixture
def client():
    return GeminiClient(api_key="g-key", model="gemini-test", base_url="https://api.test/v1beta/")


@pytest.fixture
def http():
    with patch("nexus.services.gateway.client.httpx.AsyncClient") as MockClient:
        mock_client = AsyncMock()
        MockClient.return_value.__aenter__ = AsyncMock(return_value=mock_client)
        MockClient.return_value.__aexit__ = AsyncMock(return_value=False)
        yield mock_client


@pytest.mark.unit
class TestBuildPayload:
    def test_plain(self):
        payload = GeminiClient.build_payload("hello")
        assert payload["contents"][0]["parts"][0]["text"] == "hello"
        assert "generationConfig" not in payload
        assert "tools" not in payload

    def test_json_and_search(self):
        payload = GeminiClient.build_payload("hello", json_mode=True, search=True)
        assert payload["generationConfig"]["responseMimeType"] == "application/json"
        assert payload["tools"] == [{"google_search": {}}]


@pytest.mark.unit
class TestExtractText:
    def test_joins_parts(self):
        data = {"candidates": [{"content": {"parts": [{"text": "a"}, {"text": "b"}]}}]}
        assert GeminiClient.extract_text(data) == "ab"

    def test_no_candidates(self):
        assert GeminiClient.extract_text({}) == ""
        assert GeminiClient.extract_text({"candidates": [{}]}) == ""


@pytest.mark.unit
class TestGenerate:
    def test_endpoint(self, client):
        assert client.endpoint == "https://api.test/v1beta/models/gemini-test:generateContent"

    @pytest.mark.asyncio
    async def test_returns_text(self, client, http):
        http.post = AsyncMock(return_value=_reply(["[", "]"]))

        text = await client.generate("prompt", json_mode=True, search=True)

        assert text == "[]"
        kwargs = http.post.call_args[1]
        assert kwargs["headers"]["x-goog-api-key"] == "g-key"
        assert kwargs["json"]["tools"] == [{"google_search": {}}]

    @pytest.mark.asyncio
    async def test_missing_key(self, http):
        client = GeminiClient(api_key="", model="m", base_url="https://api.test")
        client.api_key = None

        with pytest.raises(GatewayError, match="GEMINI_API_KEY"):
            await client.generate("prompt")

    @pytest.mark.asyncio
    async def test_quota_exceeded(self, client, http):
        http.post = AsyncMock(return_value=_reply([], status_code=429))

        with pytest.raises(GatewayError, match="quota"):
            await client.generate("prompt")

    @pytest.mark.asyncio
    async def test_api_error(self, client, http):
        http.post = AsyncMock(return_value=_reply([], status_code=500))

        with pytest.raises(GatewayError, match="500"):
            await client.generate("prompt")

    @pytest.mark.asyncio
    async def test_network_error(self, client, http):
        http.post = AsyncMock(side_effect=httpx.ReadTimeout("timed out"))

        with pytest.raises(GatewayError, match="request failed"):
            await client.generate("prompt")
