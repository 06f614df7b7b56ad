"""
Embedding data types
"""

from typing import List, Literal
from pydantic import BaseModel, ConfigDict

# Asymmetric providers encode documents and queries differently
EmbeddingRole = Literal["document", "query"]


class EmbeddingItem(BaseModel):
    """One entry of a provider's `data` array"""
    embedding: List[float]
    index: int


class EmbeddingUsage(BaseModel):
    """Token accounting reported by the provider"""
    total_tokens: int = 0


class EmbeddingResponse(BaseModel):
    """Provider HTTP response body, shared by all supported providers"""
    model_config = ConfigDict(extra="ignore")

    data: List[EmbeddingItem]
    usage: EmbeddingUsage = EmbeddingUsage()


class BatchEmbeddingResult(BaseModel):
    """
    Normalized result of embedding a list of texts.
    
    vectors[i] is the embedding of input text i.
    """
    vectors: List[List[float]]
    tokens_used: int = 0
    latency_ms: float = 0.0
    num_calls: int = 1

    @property
    def dimensions(self) -> int:
        return len(self.vectors[0]) if self.vectors else 0
