"""
Embedding service - embeds corpus chunks and queries for one provider
"""

import logging
from typing import List

from domain.rag.embedding.base import BaseEmbeddingClient
from domain.rag.embedding.batch_processor import BatchProcessor
from domain.rag.embedding.types import BatchEmbeddingResult
from services.base import BaseService
from core.exceptions import BenchmarkRunError, BenchmarkException

logger = logging.getLogger(__name__)


class EmbeddingService(BaseService):
    """
    Orchestrates embedding generation for both documents and queries.
    
    Any failure is re-raised as BenchmarkRunError tagged with the phase
    ("document" or "query") so callers know which step broke.
    """
    
    def __init__(self, client: BaseEmbeddingClient, batch_processor: BatchProcessor):
        self.client = client
        self.batch_processor = batch_processor
    

    async def embed_documents(self, texts: List[str]) -> BatchEmbeddingResult:
        """Embed corpus chunks with role="document"."""
        return await self._embed(texts, phase="document")


    async def embed_queries(self, texts: List[str]) -> BatchEmbeddingResult:
        """Embed queries with role="query", batched like documents."""
        return await self._embed(texts, phase="query")


    async def _embed(self, texts: List[str], phase: str) -> BatchEmbeddingResult:
        provider = self.client.provider
        logger.info(f"{provider}: embedding {len(texts)} {phase} texts")
        try:
            result = await self.batch_processor.embed_in_batches(
                self.client, texts, role=phase, label=phase
            )
        except BenchmarkException as e:
            logger.error(f"{provider}: {phase} embedding failed: {e}")
            raise BenchmarkRunError(provider, phase, e) from e

        logger.info(
            f"{provider}: {phase} embedded: {len(result.vectors)} vectors, "
            f"{result.tokens_used} tokens, {result.latency_ms:.0f}ms total"
        )
        return result
