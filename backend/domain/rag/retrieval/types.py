"""
Retrieval data types
"""

from pydantic import BaseModel


class QueryScore(BaseModel):
    """
    Similarity of one corpus chunk to one query.
    
    A ranking is a List[QueryScore] sorted by score, highest first.
    """
    chunk_id: str
    topic: str
    score: float  # cosine similarity in [-1, 1]
