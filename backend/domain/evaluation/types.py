"""
Evaluation result types
"""

from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict

from domain.rag.retrieval.types import QueryScore


class TagStats(BaseModel):
    """Metrics restricted to the queries carrying one tag"""
    model_config = ConfigDict(frozen=True)

    recall5: float
    mrr: float
    count: int


class QueryDetail(BaseModel):
    """Per-query outcome for one provider"""
    model_config = ConfigDict(frozen=True)

    query_id: str
    query: str
    expected_chunk_ids: Tuple[str, ...]
    tags: Tuple[str, ...] = ()
    top_matches: List[QueryScore]
    first_hit_rank: Optional[int] = None
    reciprocal_rank: float
    correct_in_top1: bool
    correct_in_top3: bool
    correct_in_top5: bool


class BenchmarkResult(BaseModel):
    """Aggregate outcome of one provider over the full query set"""
    model_config = ConfigDict(frozen=True)

    provider: str
    model: str
    total_queries: int
    recall1: float
    recall3: float
    recall5: float
    mrr: float
    avg_latency_ms: float
    total_tokens: int
    tag_breakdown: Dict[str, TagStats]
    query_details: List[QueryDetail]

    def detail_for(self, query_id: str) -> Optional[QueryDetail]:
        for detail in self.query_details:
            if detail.query_id == query_id:
                return detail
        return None


class Verdict(BaseModel):
    """Head-to-head outcome of two providers"""
    is_draw: bool
    mrr_delta_pct: Optional[float] = None  # (first - second) / second, in percent; None when second is 0
    winner: Optional[str] = None
    loser: Optional[str] = None
    notation_mrr: Optional[Tuple[float, float]] = None  # (winner, loser)
