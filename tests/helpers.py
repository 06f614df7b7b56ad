"""Test doubles shared across test modules."""
from typing import Dict, List, Optional

from core.exceptions import RateLimitedError
from domain.rag.embedding.types import BatchEmbeddingResult


class FakeEmbeddingClient:
    """In-memory client: looks vectors up by text, records every call."""

    def __init__(
        self,
        vectors: Dict[str, List[float]],
        provider: str = "Fake",
        model: str = "fake-embed-1",
        fail_on_role: Optional[str] = None,
        rate_limit_failures: int = 0,
    ):
        self.vectors = vectors
        self.provider = provider
        self.model = model
        self.fail_on_role = fail_on_role
        self.rate_limit_failures = rate_limit_failures
        self.calls: List[tuple] = []
        self.closed = False

    async def embed(self, texts, role="document"):
        self.calls.append((list(texts), role))
        if self.rate_limit_failures > 0:
            self.rate_limit_failures -= 1
            raise RateLimitedError("429 rate limit exceeded", self.provider, 429)
        if self.fail_on_role == role:
            raise RateLimitedError("429 rate limit exceeded", self.provider, 429)
        return BatchEmbeddingResult(
            vectors=[self.vectors[t] for t in texts],
            tokens_used=len(texts) * 10,
            latency_ms=100.0,
        )

    async def close(self):
        self.closed = True


class RecordingSleep:
    """Awaitable sleep replacement that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
