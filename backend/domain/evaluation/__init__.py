"""
Evaluation system
"""

from domain.evaluation.metrics import (
    first_hit_rank,
    reciprocal_rank,
    recall_at_k,
    mean_reciprocal_rank,
    tag_breakdown,
)
from domain.evaluation.evaluator import Evaluator
from domain.evaluation.ground_truth import ContentChunk, TestQuery, FixtureSet, load_fixtures
from domain.evaluation.reporter import EvaluationReporter
from domain.evaluation.types import BenchmarkResult, QueryDetail, TagStats, Verdict

__all__ = [
    "first_hit_rank",
    "reciprocal_rank",
    "recall_at_k",
    "mean_reciprocal_rank",
    "tag_breakdown",
    "Evaluator",
    "ContentChunk",
    "TestQuery",
    "FixtureSet",
    "load_fixtures",
    "EvaluationReporter",
    "BenchmarkResult",
    "QueryDetail",
    "TagStats",
    "Verdict",
]
