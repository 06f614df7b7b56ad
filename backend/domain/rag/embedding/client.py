"""
Embedding provider clients: OpenAI, Voyage AI, Jina AI
"""

from typing import List, Dict, Any

from domain.rag.embedding.base import BaseEmbeddingClient
from domain.rag.embedding.types import EmbeddingRole

# Jina task names for asymmetric retrieval
JINA_TASKS: Dict[str, str] = {
    "document": "retrieval.passage",
    "query": "retrieval.query",
}


class OpenAIEmbeddingClient(BaseEmbeddingClient):
    """OpenAI embeddings are symmetric, so the role is not sent"""

    provider = "OpenAI"

    def _build_payload(self, texts: List[str], role: EmbeddingRole) -> Dict[str, Any]:
        return {"input": texts, "model": self.model}


class VoyageEmbeddingClient(BaseEmbeddingClient):
    """Voyage AI client; passes the role through as `input_type`"""

    provider = "Voyage AI"

    def _build_payload(self, texts: List[str], role: EmbeddingRole) -> Dict[str, Any]:
        return {"input": texts, "model": self.model, "input_type": role}


class JinaEmbeddingClient(BaseEmbeddingClient):
    """Async client for Jina Embedding API"""

    provider = "Jina AI"

    def _build_payload(self, texts: List[str], role: EmbeddingRole) -> Dict[str, Any]:
        return {
            "model": self.model,
            "task": JINA_TASKS[role],
            "truncate": True,
            "input": texts,
        }
