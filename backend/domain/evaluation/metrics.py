"""
Evaluation metrics: first-hit rank, reciprocal rank, Recall@k, MRR, tag breakdown
"""

from typing import Collection, Dict, List, Optional, Sequence

from domain.evaluation.types import TagStats
from domain.rag.retrieval.types import QueryScore


def first_hit_rank(ranking: Sequence[QueryScore], expected_ids: Collection[str]) -> Optional[int]:
    """
    1-based position of the first expected chunk in the ranking.
    
    Args:
        ranking: Full corpus ranking, best first
        expected_ids: Chunk ids considered correct
        
    Returns:
        Rank of the first hit, or None if no expected chunk is ranked
    """
    for rank, scored in enumerate(ranking, start=1):
        if scored.chunk_id in expected_ids:
            return rank
    return None


def reciprocal_rank(rank: Optional[int]) -> float:
    """1/rank for a positive rank, else 0.0"""
    if rank is None or rank < 1:
        return 0.0
    return 1.0 / rank


def recall_at_k(ranks: Sequence[Optional[int]], k: int) -> float:
    """
    Compute Recall@k over a query set.
    
    Args:
        ranks: First-hit rank per query (None for no hit)
        k: Cutoff value
        
    Returns:
        Fraction of queries with a hit at rank <= k (0.0 to 1.0)
    """
    if not ranks:
        return 0.0
    hits = sum(1 for rank in ranks if rank is not None and rank <= k)
    return hits / len(ranks)


def mean_reciprocal_rank(ranks: Sequence[Optional[int]]) -> float:
    """
    Compute Mean Reciprocal Rank (MRR).
    
    Returns:
        MRR score (0.0 to 1.0)
    """
    if not ranks:
        return 0.0
    return sum(reciprocal_rank(rank) for rank in ranks) / len(ranks)


def tag_breakdown(
    ranks: Sequence[Optional[int]],
    query_tags: Sequence[Collection[str]],
    k: int = 5,
) -> Dict[str, TagStats]:
    """
    Recompute Recall@k and MRR per tag.
    
    A query with several tags counts towards every one of them.
    
    Args:
        ranks: First-hit rank per query
        query_tags: Tags per query, aligned with ranks
        k: Recall cutoff
        
    Returns:
        Mapping tag -> TagStats, sorted by tag name
    """
    if len(ranks) != len(query_tags):
        raise ValueError(f"{len(ranks)} ranks for {len(query_tags)} queries")

    buckets: Dict[str, List[Optional[int]]] = {}
    for rank, tags in zip(ranks, query_tags):
        for tag in set(tags):
            buckets.setdefault(tag, []).append(rank)

    return {
        tag: TagStats(
            recall5=recall_at_k(bucket, k),
            mrr=mean_reciprocal_rank(bucket),
            count=len(bucket),
        )
        for tag, bucket in sorted(buckets.items())
    }
