"""
Embedding provider clients and batching
"""

from domain.rag.embedding.base import BaseEmbeddingClient
from domain.rag.embedding.client import (
    OpenAIEmbeddingClient,
    VoyageEmbeddingClient,
    JinaEmbeddingClient,
)
from domain.rag.embedding.batch_processor import BatchProcessor
from domain.rag.embedding.factory import create_embedding_clients
from domain.rag.embedding.types import BatchEmbeddingResult, EmbeddingResponse, EmbeddingRole

__all__ = [
    "BaseEmbeddingClient",
    "OpenAIEmbeddingClient",
    "VoyageEmbeddingClient",
    "JinaEmbeddingClient",
    "BatchProcessor",
    "create_embedding_clients",
    "BatchEmbeddingResult",
    "EmbeddingResponse",
    "EmbeddingRole",
]
