"""
Benchmark service - runs the retrieval benchmark per provider
"""

import asyncio
import logging
from typing import List, Optional, Sequence, Tuple

from core.exceptions import BenchmarkException, ProviderTimeoutError
from domain.evaluation.evaluator import Evaluator
from domain.evaluation.ground_truth import FixtureSet
from domain.evaluation.types import BenchmarkResult
from domain.rag.embedding.base import BaseEmbeddingClient
from domain.rag.embedding.batch_processor import BatchProcessor
from services.base import BaseService
from services.embedding_service import EmbeddingService

logger = logging.getLogger(__name__)


class BenchmarkService(BaseService):
    """
    Runs fixtures -> embeddings -> ranking -> metrics for each provider.
    
    Providers run one after another. A provider either completes and yields a
    BenchmarkResult, or fails and contributes nothing.
    """
    
    def __init__(self, fixtures: FixtureSet, batch_processor: BatchProcessor, top_k: int = 5):
        self.fixtures = fixtures
        self.batch_processor = batch_processor
        self.evaluator = Evaluator(fixtures, top_k=top_k)
    
    async def run(self, client: BaseEmbeddingClient) -> BenchmarkResult:
        """
        Benchmark a single provider.
        
        Args:
            client: Provider client
            
        Returns:
            BenchmarkResult for the provider
            
        Raises:
            BenchmarkRunError: Document or query embedding failed
        """
        logger.info(f"Benchmarking: {client.provider} ({client.model})")
        embedding_service = EmbeddingService(client, self.batch_processor)

        # Documents complete before queries start; scoring needs both
        doc_result = await embedding_service.embed_documents(self.fixtures.chunk_texts)
        query_result = await embedding_service.embed_queries(self.fixtures.query_texts)

        return self.evaluator.evaluate(client.provider, client.model, doc_result, query_result)
    
    async def run_all(
        self,
        clients: Sequence[BaseEmbeddingClient],
        keep_going: bool = False,
        timeout: Optional[float] = None,
    ) -> Tuple[List[BenchmarkResult], List[BenchmarkException]]:
        """
        Benchmark providers sequentially.
        
        Args:
            clients: Provider clients, in report order
            keep_going: Continue with the next provider after a failure
            timeout: Optional deadline in seconds for each provider run
            
        Returns:
            (completed results, errors of failed providers)
            
        Raises:
            BenchmarkException: First provider failure when keep_going is False
        """
        results: List[BenchmarkResult] = []
        errors: List[BenchmarkException] = []
        try:
            for client in clients:
                try:
                    results.append(await self._run_with_deadline(client, timeout))
                except BenchmarkException as e:
                    logger.error(f"{client.provider}: benchmark aborted: {e}")
                    if not keep_going:
                        raise
                    errors.append(e)
        finally:
            for client in clients:
                await client.close()
        return results, errors

    async def _run_with_deadline(self, client: BaseEmbeddingClient, timeout: Optional[float]) -> BenchmarkResult:
        if timeout is None:
            return await self.run(client)
        try:
            return await asyncio.wait_for(self.run(client), timeout=timeout)
        except asyncio.TimeoutError as e:
            raise ProviderTimeoutError(client.provider, timeout) from e
