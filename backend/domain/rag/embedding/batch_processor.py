"""
Batch processing utilities for embeddings
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional
from tqdm import tqdm

from core.exceptions import DimensionMismatchError, EmbeddingError
from domain.rag.embedding.base import BaseEmbeddingClient
from domain.rag.embedding.types import BatchEmbeddingResult, EmbeddingRole
from utils.retry import RetryPolicy, retry_with_backoff

logger = logging.getLogger(__name__)


class BatchProcessor:
    """Sequential fixed-size batching with rate-limit backoff and progress tracking"""
    
    def __init__(
        self,
        batch_size: int = 10,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        show_progress: bool = True,
    ):
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.batch_size = batch_size
        self.retry_policy = retry_policy or RetryPolicy()
        self.sleep = sleep
        self.show_progress = show_progress
    
    def split(self, texts: List[str]) -> List[List[str]]:
        """Split texts into ceil(len/batch_size) order-preserving batches."""
        return [texts[i:i + self.batch_size] for i in range(0, len(texts), self.batch_size)]
    
    async def embed_in_batches(
        self,
        client: BaseEmbeddingClient,
        texts: List[str],
        role: EmbeddingRole,
        label: str = "texts",
    ) -> BatchEmbeddingResult:
        """
        Embed texts batch by batch, one request in flight at a time.
        
        Args:
            client: Provider client (one HTTP call per batch)
            texts: Texts to embed
            role: "document" or "query"
            label: Name used in progress and log messages
            
        Returns:
            Merged BatchEmbeddingResult; vectors[i] belongs to texts[i]
        """
        if not texts:
            raise EmbeddingError("texts list must not be empty")

        batches = self.split(texts)
        total_batches = len(batches)
        all_vectors: List[List[float]] = []
        total_tokens = 0
        total_latency = 0.0

        progress = tqdm(total=total_batches, desc=f"{client.provider} {label}", disable=not self.show_progress)
        try:
            for batch_num, batch in enumerate(batches, start=1):
                batch_label = f"{label} batch {batch_num}/{total_batches}"
                result = await retry_with_backoff(
                    lambda batch=batch: client.embed(batch, role),
                    self.retry_policy,
                    label=batch_label,
                    sleep=self.sleep,
                )
                self._check_batch(result, batch, all_vectors, batch_label)

                all_vectors.extend(result.vectors)
                total_tokens += result.tokens_used
                total_latency += result.latency_ms
                progress.update(1)
                logger.info(f"{client.provider}: {batch_label} done ({result.latency_ms:.0f}ms)")
        finally:
            progress.close()

        return BatchEmbeddingResult(
            vectors=all_vectors,
            tokens_used=total_tokens,
            latency_ms=total_latency,
            num_calls=total_batches,
        )
    
    @staticmethod
    def _check_batch(
        result: BatchEmbeddingResult,
        batch: List[str],
        previous: List[List[float]],
        label: str,
    ) -> None:
        """Every batch must return one vector per text, all of one dimension."""
        if len(result.vectors) != len(batch):
            raise EmbeddingError(f"{label}: expected {len(batch)} vectors, got {len(result.vectors)}")

        expected_dim = len(previous[0]) if previous else result.dimensions
        for vector in result.vectors:
            if len(vector) != expected_dim:
                raise DimensionMismatchError(
                    f"{label}: got a {len(vector)}-d vector, expected {expected_dim}-d"
                )
