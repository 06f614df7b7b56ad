"""
Evaluation orchestrator: vectors in, BenchmarkResult out
"""

import logging
from typing import List, Sequence

from core.exceptions import DimensionMismatchError
from domain.evaluation.ground_truth import FixtureSet, TestQuery
from domain.evaluation.metrics import (
    first_hit_rank,
    mean_reciprocal_rank,
    recall_at_k,
    reciprocal_rank,
    tag_breakdown,
)
from domain.evaluation.types import BenchmarkResult, QueryDetail
from domain.rag.embedding.types import BatchEmbeddingResult
from domain.rag.retrieval.similarity import rank_chunks

logger = logging.getLogger(__name__)


class Evaluator:
    """Scores every query against the full corpus and aggregates IR metrics"""
    
    def __init__(self, fixtures: FixtureSet, top_k: int = 5):
        self.fixtures = fixtures
        self.top_k = top_k
    
    def evaluate_query(
        self,
        query: TestQuery,
        query_vector: Sequence[float],
        doc_vectors: Sequence[Sequence[float]],
    ) -> QueryDetail:
        """
        Rank the corpus for a single query.
        
        Args:
            query: Test query with ground truth
            query_vector: Embedding of the query text
            doc_vectors: Corpus embeddings, aligned with fixtures.chunks
            
        Returns:
            QueryDetail with top-k matches and hit statistics
        """
        ranking = rank_chunks(query_vector, doc_vectors, self.fixtures.chunks)
        rank = first_hit_rank(ranking, query.expected_chunk_ids)
        
        return QueryDetail(
            query_id=query.id,
            query=query.query,
            expected_chunk_ids=query.expected_chunk_ids,
            tags=query.tags,
            top_matches=ranking[:self.top_k],
            first_hit_rank=rank,
            reciprocal_rank=reciprocal_rank(rank),
            correct_in_top1=rank is not None and rank <= 1,
            correct_in_top3=rank is not None and rank <= 3,
            correct_in_top5=rank is not None and rank <= 5,
        )
    
    def evaluate(
        self,
        provider: str,
        model: str,
        doc_result: BatchEmbeddingResult,
        query_result: BatchEmbeddingResult,
    ) -> BenchmarkResult:
        """
        Evaluate all queries and fold them into a BenchmarkResult.
        
        Args:
            provider: Provider display name
            model: Embedding model name
            doc_result: Embeddings of every corpus chunk
            query_result: Embeddings of every query
            
        Returns:
            BenchmarkResult for this provider
        """
        queries = self.fixtures.queries
        if len(doc_result.vectors) != len(self.fixtures.chunks):
            raise ValueError(f"Expected {len(self.fixtures.chunks)} document vectors, got {len(doc_result.vectors)}")
        if len(query_result.vectors) != len(queries):
            raise ValueError(f"Expected {len(queries)} query vectors, got {len(query_result.vectors)}")
        if doc_result.dimensions != query_result.dimensions:
            raise DimensionMismatchError(
                f"{provider}: document vectors are {doc_result.dimensions}-d, "
                f"query vectors are {query_result.dimensions}-d"
            )

        details: List[QueryDetail] = [
            self.evaluate_query(query, query_vector, doc_result.vectors)
            for query, query_vector in zip(queries, query_result.vectors)
        ]
        ranks = [d.first_hit_rank for d in details]

        num_calls = doc_result.num_calls + query_result.num_calls
        result = BenchmarkResult(
            provider=provider,
            model=model,
            total_queries=len(queries),
            recall1=recall_at_k(ranks, 1),
            recall3=recall_at_k(ranks, 3),
            recall5=recall_at_k(ranks, 5),
            mrr=mean_reciprocal_rank(ranks),
            avg_latency_ms=(doc_result.latency_ms + query_result.latency_ms) / num_calls,
            total_tokens=doc_result.tokens_used + query_result.tokens_used,
            tag_breakdown=tag_breakdown(ranks, [q.tags for q in queries], k=5),
            query_details=details,
        )
        logger.info(f"{provider}: MRR={result.mrr:.3f} Recall@5={result.recall5:.3f} over {len(queries)} queries")
        return result
