"""
Abstract base class for embedding provider clients
"""

import time
import logging
from abc import ABC, abstractmethod
from typing import List, Dict, Any, Optional

import httpx
from pydantic import ValidationError

from core.exceptions import (
    EmbeddingError,
    ProviderError,
    ProviderResponseError,
    RateLimitedError,
)
from domain.rag.embedding.types import BatchEmbeddingResult, EmbeddingResponse, EmbeddingRole

logger = logging.getLogger(__name__)


class BaseEmbeddingClient(ABC):
    """
    Async client for an OpenAI-compatible `/embeddings` endpoint.
    
    One `embed()` call is exactly one HTTP request. Retries live in the
    batch processor, not here.
    """

    provider: str = "base"
    
    def __init__(
        self,
        api_key: str,
        api_url: str,
        model: str,
        timeout: float = 60,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        if not api_key:
            raise EmbeddingError(f"{self.provider} API key not set")

        self.api_key = api_key
        self.api_url = api_url
        self.model = model
        self.timeout = timeout

        # Connection pool
        self._client: Optional[httpx.AsyncClient] = http_client
    

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                }
            )
        return self._client


    @abstractmethod
    def _build_payload(self, texts: List[str], role: EmbeddingRole) -> Dict[str, Any]:
        """
        Build the provider-specific request body.

        Args:
            texts: Texts to embed
            role: "document" or "query"

        Returns:
            JSON-serializable request payload
        """
        pass


    def _raise_for_status(self, response: httpx.Response) -> None:
        """Translate a non-2xx response into a typed provider error."""
        if response.is_success:
            return

        body = response.text
        message = f"{self.provider} API error {response.status_code}: {body[:500]}"
        if response.status_code == 429:
            raise RateLimitedError(message, self.provider, response.status_code, body)
        raise ProviderError(message, self.provider, response.status_code, body)


    def _parse_response(self, response: httpx.Response, expected: int) -> EmbeddingResponse:
        """Parse the body into the strict response shape and check indices."""
        try:
            parsed = EmbeddingResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise ProviderResponseError(
                f"{self.provider} returned a malformed embeddings response: {e}",
                self.provider,
                response.status_code,
                response.text[:500],
            ) from e

        indices = sorted(item.index for item in parsed.data)
        if indices != list(range(expected)):
            raise ProviderResponseError(
                f"{self.provider} returned indices {indices[:10]}... for {expected} inputs",
                self.provider,
                response.status_code,
            )
        return parsed


    async def embed(self, texts: List[str], role: EmbeddingRole = "document") -> BatchEmbeddingResult:
        """
        Embed a list of texts in a single request.
        
        Args:
            texts: Texts to embed
            role: "document" for corpus passages, "query" for search queries
            
        Returns:
            BatchEmbeddingResult with vectors in input order
            
        Raises:
            RateLimitedError: Provider answered 429
            ProviderError: Any other HTTP or transport failure
            ProviderResponseError: Unparseable response body
        """
        if not texts:
            raise EmbeddingError("texts list must not be empty")

        client = await self._get_client()
        payload = self._build_payload(texts, role)

        start = time.perf_counter()
        try:
            response = await client.post(self.api_url, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"{self.provider} request failed: {e}")
            raise ProviderError(f"{self.provider} request failed: {e}", self.provider) from e
        latency_ms = (time.perf_counter() - start) * 1000

        self._raise_for_status(response)
        parsed = self._parse_response(response, expected=len(texts))

        # Providers do not guarantee input order
        ordered = sorted(parsed.data, key=lambda item: item.index)
        return BatchEmbeddingResult(
            vectors=[item.embedding for item in ordered],
            tokens_used=parsed.usage.total_tokens,
            latency_ms=latency_ms,
        )
    

    async def close(self):
        """Close HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.model!r})"
