"""
Vector similarity and ranking
"""

from domain.rag.retrieval.similarity import cosine_similarity, cosine_similarities, rank_chunks
from domain.rag.retrieval.types import QueryScore

__all__ = [
    "cosine_similarity",
    "cosine_similarities",
    "rank_chunks",
    "QueryScore",
]
