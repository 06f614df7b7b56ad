"""
Similarity functions (cosine) and corpus ranking
"""

import numpy as np
from typing import List, Sequence, TYPE_CHECKING

from core.exceptions import DimensionMismatchError
from domain.rag.retrieval.types import QueryScore

if TYPE_CHECKING:
    from domain.evaluation.ground_truth import ContentChunk


def cosine_similarity(vec1: Sequence[float], vec2: Sequence[float]) -> float:
    """
    Compute cosine similarity between two vectors.
    
    Returns 0.0 when either vector has zero magnitude.
    
    Raises:
        DimensionMismatchError: If the vectors differ in length
    """
    if len(vec1) != len(vec2):
        raise DimensionMismatchError(f"Cannot compare {len(vec1)}-d and {len(vec2)}-d vectors")

    vec1_np = np.asarray(vec1, dtype=float)
    vec2_np = np.asarray(vec2, dtype=float)
    
    dot_product = np.dot(vec1_np, vec2_np)
    norm1 = np.linalg.norm(vec1_np)
    norm2 = np.linalg.norm(vec2_np)
    
    if norm1 == 0 or norm2 == 0:
        return 0.0
    
    # Clip float noise so the result stays in [-1, 1]
    return float(np.clip(dot_product / (norm1 * norm2), -1.0, 1.0))


def cosine_similarities(query_vector: Sequence[float], matrix: Sequence[Sequence[float]]) -> np.ndarray:
    """
    Cosine similarity of one vector against every row of a matrix (vectorized).
    
    Rows with zero magnitude score 0.0.
    """
    ragged = [i for i, row in enumerate(matrix) if len(row) != len(query_vector)]
    if ragged:
        raise DimensionMismatchError(
            f"Cannot compare a {len(query_vector)}-d query against corpus row {ragged[0]} "
            f"of length {len(matrix[ragged[0]])}"
        )

    query_arr = np.asarray(query_vector, dtype=float)  # Shape: [d]
    matrix_arr = np.asarray(matrix, dtype=float)  # Shape: [N, d]

    if matrix_arr.ndim != 2 or matrix_arr.shape[1] != query_arr.shape[0]:
        raise DimensionMismatchError(
            f"Cannot compare a {query_arr.shape[0]}-d query against corpus of shape {matrix_arr.shape}"
        )

    query_norm = np.linalg.norm(query_arr)
    row_norms = np.linalg.norm(matrix_arr, axis=1)
    denominators = row_norms * query_norm

    scores = np.zeros(matrix_arr.shape[0])
    nonzero = denominators > 0
    scores[nonzero] = (matrix_arr[nonzero] @ query_arr) / denominators[nonzero]
    return np.clip(scores, -1.0, 1.0)


def rank_chunks(
    query_vector: Sequence[float],
    corpus_vectors: Sequence[Sequence[float]],
    chunks: Sequence["ContentChunk"],
) -> List[QueryScore]:
    """
    Score every corpus chunk against a query and sort by score (descending).
    
    Args:
        query_vector: Query embedding
        corpus_vectors: One embedding per chunk, same order as chunks
        chunks: Corpus chunks
        
    Returns:
        Full ranking over the corpus; equal scores keep corpus order
    """
    if len(corpus_vectors) != len(chunks):
        raise ValueError(f"{len(corpus_vectors)} vectors for {len(chunks)} chunks")
    if not chunks:
        return []

    scores = cosine_similarities(query_vector, corpus_vectors)
    ranking = [
        QueryScore(chunk_id=chunk.id, topic=chunk.topic, score=float(score))
        for chunk, score in zip(chunks, scores)
    ]
    # sorted() is stable, ties stay in corpus order
    return sorted(ranking, key=lambda s: s.score, reverse=True)
