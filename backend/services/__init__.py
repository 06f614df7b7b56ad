"""
Service layer (benchmark orchestration)
"""

from services.base import BaseService
from services.embedding_service import EmbeddingService
from services.benchmark_service import BenchmarkService

__all__ = [
    "BaseService",
    "EmbeddingService",
    "BenchmarkService",
]
