"""Unit tests for the provider clients, using httpx.MockTransport."""
import json
import random

import httpx
import pytest

from core.exceptions import EmbeddingError, ProviderError, ProviderResponseError, RateLimitedError
from domain.rag.embedding.client import JinaEmbeddingClient, OpenAIEmbeddingClient, VoyageEmbeddingClient


def _embeddings_body(texts, shuffle=False, tokens=42):
    data = [{"object": "embedding", "embedding": [float(i), float(len(t))], "index": i} for i, t in enumerate(texts)]
    if shuffle:
        random.Random(7).shuffle(data)
    return {"object": "list", "data": data, "model": "m", "usage": {"prompt_tokens": tokens, "total_tokens": tokens}}


def _make_client(client_cls, handler):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return client_cls(
        api_key="test_key",
        api_url="https://embeddings.test/v1/embeddings",
        model="test-model",
        http_client=http_client,
    )


class RecordingHandler:
    """MockTransport handler that stores request payloads."""

    def __init__(self, status_code=200, body=None, shuffle=False):
        self.status_code = status_code
        self.body = body
        self.shuffle = shuffle
        self.payloads = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.payloads.append(payload)
        if self.status_code != 200:
            return httpx.Response(self.status_code, text=self.body or "error")
        body = self.body if self.body is not None else _embeddings_body(payload["input"], self.shuffle)
        return httpx.Response(200, json=body)


class TestPayloads:
    """Each provider builds its own request shape."""

    @pytest.mark.asyncio
    async def test_openai_payload_omits_role(self):
        handler = RecordingHandler()
        client = _make_client(OpenAIEmbeddingClient, handler)

        await client.embed(["a", "b"], role="query")

        assert handler.payloads == [{"input": ["a", "b"], "model": "test-model"}]
        await client.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", ["document", "query"])
    async def test_voyage_passes_input_type(self, role):
        handler = RecordingHandler()
        client = _make_client(VoyageEmbeddingClient, handler)

        await client.embed(["a"], role=role)

        assert handler.payloads[0]["input_type"] == role
        assert handler.payloads[0]["model"] == "test-model"
        await client.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role,task", [("document", "retrieval.passage"), ("query", "retrieval.query")])
    async def test_jina_maps_role_to_task(self, role, task):
        handler = RecordingHandler()
        client = _make_client(JinaEmbeddingClient, handler)

        await client.embed(["a"], role=role)

        assert handler.payloads[0]["task"] == task
        assert handler.payloads[0]["input"] == ["a"]
        await client.close()


class TestResponseHandling:
    """Parsing, ordering and error translation."""

    @pytest.mark.asyncio
    async def test_resorts_by_provider_index(self):
        texts = [f"text-{i}" * (i + 1) for i in range(8)]
        client = _make_client(OpenAIEmbeddingClient, RecordingHandler(shuffle=True))

        result = await client.embed(texts)

        assert [v[0] for v in result.vectors] == [float(i) for i in range(8)]
        assert [v[1] for v in result.vectors] == [float(len(t)) for t in texts]
        assert result.tokens_used == 42
        assert result.latency_ms >= 0.0
        assert result.num_calls == 1

    @pytest.mark.asyncio
    async def test_429_raises_rate_limited(self):
        handler = RecordingHandler(status_code=429, body='{"error": "rate limit exceeded"}')
        client = _make_client(VoyageEmbeddingClient, handler)

        with pytest.raises(RateLimitedError) as exc_info:
            await client.embed(["a"])

        assert exc_info.value.status_code == 429
        assert exc_info.value.provider == "Voyage AI"
        assert "rate limit exceeded" in exc_info.value.body

    @pytest.mark.asyncio
    async def test_401_raises_provider_error(self):
        client = _make_client(OpenAIEmbeddingClient, RecordingHandler(status_code=401, body="invalid api key"))

        with pytest.raises(ProviderError) as exc_info:
            await client.embed(["a"])

        assert not isinstance(exc_info.value, RateLimitedError)
        assert exc_info.value.status_code == 401
        assert "401" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_malformed_body_raises_response_error(self):
        client = _make_client(OpenAIEmbeddingClient, RecordingHandler(body={"unexpected": True}))

        with pytest.raises(ProviderResponseError):
            await client.embed(["a"])

    @pytest.mark.asyncio
    async def test_non_json_body_raises_response_error(self):
        def handler(request):
            return httpx.Response(200, text="<html>oops</html>")

        client = _make_client(OpenAIEmbeddingClient, handler)

        with pytest.raises(ProviderResponseError):
            await client.embed(["a"])

    @pytest.mark.asyncio
    async def test_missing_index_raises_response_error(self):
        body = {"data": [{"embedding": [0.1], "index": 0}, {"embedding": [0.2], "index": 5}], "usage": {"total_tokens": 1}}
        client = _make_client(OpenAIEmbeddingClient, RecordingHandler(body=body))

        with pytest.raises(ProviderResponseError):
            await client.embed(["a", "b"])

    @pytest.mark.asyncio
    async def test_count_mismatch_raises_response_error(self):
        body = {"data": [{"embedding": [0.1], "index": 0}], "usage": {"total_tokens": 1}}
        client = _make_client(OpenAIEmbeddingClient, RecordingHandler(body=body))

        with pytest.raises(ProviderResponseError):
            await client.embed(["a", "b"])

    @pytest.mark.asyncio
    async def test_transport_error_raises_provider_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = _make_client(OpenAIEmbeddingClient, handler)

        with pytest.raises(ProviderError, match="connection refused"):
            await client.embed(["a"])

    @pytest.mark.asyncio
    async def test_empty_input_makes_no_request(self):
        handler = RecordingHandler()
        client = _make_client(OpenAIEmbeddingClient, handler)

        with pytest.raises(EmbeddingError, match="must not be empty"):
            await client.embed([])

        assert handler.payloads == []


class TestInitialization:
    """Client construction."""

    def test_missing_api_key(self):
        with pytest.raises(EmbeddingError, match="API key not set"):
            OpenAIEmbeddingClient(api_key="", api_url="https://x", model="m")

    @pytest.mark.asyncio
    async def test_default_http_client_has_auth_header(self):
        client = VoyageEmbeddingClient(api_key="pa-secret", api_url="https://x", model="voyage-3.5")

        http_client = await client._get_client()

        assert http_client.headers["Authorization"] == "Bearer pa-secret"
        await client.close()
        assert client._client is None
