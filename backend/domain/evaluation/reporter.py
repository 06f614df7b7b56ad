"""
Comparative report generation
"""

import json
import math
import logging
from typing import Callable, List, Optional, Sequence, Tuple

from domain.evaluation.types import BenchmarkResult, QueryDetail, Verdict

logger = logging.getLogger(__name__)

HEAVY_RULE = "━" * 70
LIGHT_RULE = "  " + "─" * 66
COLUMN_WIDTH = 20

# Symbol-heavy STEM queries, the class that matters most for tutoring
NOTATION_TAG = "notation"


def _pct(value: float, digits: int = 1) -> str:
    return f"{value * 100:.{digits}f}%"


def relative_delta(a: float, b: float) -> float:
    """(a - b) / b; 0.0 when both are zero, +/-inf when only b is zero."""
    if b == 0:
        if a == 0:
            return 0.0
        return float("inf") if a > 0 else float("-inf")
    return (a - b) / b


class EvaluationReporter:
    """Generate comparative evaluation reports"""
    
    def __init__(self, rr_delta_threshold: float = 0.3, draw_threshold: float = 0.03):
        self.rr_delta_threshold = rr_delta_threshold
        self.draw_threshold = draw_threshold

    # ------------------------
    # Analysis
    # ------------------------

    def is_imperfect(self, details: Sequence[QueryDetail]) -> bool:
        """A query is flagged when any provider misses rank 1 or providers disagree."""
        if any(d.reciprocal_rank < 1.0 or not d.correct_in_top5 for d in details):
            return True
        if len(details) > 1:
            rrs = [d.reciprocal_rank for d in details]
            return max(rrs) - min(rrs) > self.rr_delta_threshold
        return False

    def imperfect_queries(self, results: Sequence[BenchmarkResult]) -> List[Tuple[QueryDetail, List[QueryDetail]]]:
        """Return (reference detail, per-provider details) for every flagged query."""
        if not results:
            return []
        flagged = []
        for reference in results[0].query_details:
            details = [r.detail_for(reference.query_id) for r in results]
            details = [d for d in details if d is not None]
            if self.is_imperfect(details):
                flagged.append((reference, details))
        return flagged

    def compare(self, results: Sequence[BenchmarkResult]) -> Optional[Verdict]:
        """
        Head-to-head verdict; only defined for exactly two providers.
        
        A relative MRR difference below draw_threshold is a draw, otherwise the
        higher MRR wins and the notation-tag MRRs are reported alongside.
        """
        if len(results) != 2:
            return None

        first, second = results
        delta = relative_delta(first.mrr, second.mrr)
        if abs(delta) < self.draw_threshold:
            return Verdict(is_draw=True, mrr_delta_pct=delta * 100)

        winner, loser = (first, second) if delta > 0 else (second, first)
        delta_pct = delta * 100 if math.isfinite(delta) else None
        notation = None
        winner_notation = winner.tag_breakdown.get(NOTATION_TAG)
        loser_notation = loser.tag_breakdown.get(NOTATION_TAG)
        if winner_notation and loser_notation:
            notation = (winner_notation.mrr, loser_notation.mrr)

        return Verdict(
            is_draw=False,
            mrr_delta_pct=delta_pct,
            winner=winner.provider,
            loser=loser.provider,
            notation_mrr=notation,
        )

    # ------------------------
    # Rendering
    # ------------------------

    def render(self, results: Sequence[BenchmarkResult], corpus_size: Optional[int] = None) -> str:
        """
        Render the full text report.
        
        Args:
            results: One BenchmarkResult per completed provider
            corpus_size: Number of corpus chunks, shown in the header
            
        Returns:
            Report text
        """
        lines: List[str] = []
        lines += self._render_header(results, corpus_size)
        if results:
            lines += self._render_overall(results)
            lines += self._render_tags(results)
            lines += self._render_imperfect(results)
            lines += self._render_summary(results)
        lines += ["", HEAVY_RULE, ""]
        return "\n".join(lines)

    def render_json(self, results: Sequence[BenchmarkResult]) -> str:
        """Machine-readable report: raw results plus the verdict."""
        verdict = self.compare(results)
        data = {
            "results": [r.model_dump(mode="json") for r in results],
            "verdict": verdict.model_dump(mode="json") if verdict else None,
        }
        return json.dumps(data, indent=2, default=str, allow_nan=False)

    def print_console(self, results: Sequence[BenchmarkResult], corpus_size: Optional[int] = None):
        """Print results to console"""
        print(self.render(results, corpus_size))

    def _row(self, label: str, width: int, values: Sequence[str]) -> str:
        return f"  {label.ljust(width)} " + " ".join(v.ljust(COLUMN_WIDTH) for v in values)

    def _render_header(self, results: Sequence[BenchmarkResult], corpus_size: Optional[int]) -> List[str]:
        lines = ["", HEAVY_RULE, "  EMBEDDING BENCHMARK RESULTS: Tutoring Content", HEAVY_RULE, ""]
        if corpus_size is not None:
            lines.append(f"  Content chunks: {corpus_size}")
        if results:
            lines.append(f"  Test queries: {results[0].total_queries}")
            lines.append(f"  Providers: {', '.join(r.provider for r in results)}")
        else:
            lines.append("  No provider results to report.")
        return lines

    def _render_overall(self, results: Sequence[BenchmarkResult]) -> List[str]:
        metrics: List[Tuple[str, Callable[[BenchmarkResult], str]]] = [
            ("Model", lambda r: r.model),
            ("Recall@1", lambda r: _pct(r.recall1)),
            ("Recall@3", lambda r: _pct(r.recall3)),
            ("Recall@5", lambda r: _pct(r.recall5)),
            ("MRR", lambda r: f"{r.mrr:.3f}"),
            ("Avg Latency", lambda r: f"{r.avg_latency_ms:.0f}ms"),
            ("Total Tokens", lambda r: f"{r.total_tokens:,}"),
        ]
        lines = ["", "  Overall Metrics:", LIGHT_RULE]
        lines.append(self._row("Metric", 22, [r.provider for r in results]))
        lines.append(LIGHT_RULE)
        for label, getter in metrics:
            lines.append(self._row(label, 22, [getter(r) for r in results]))
        return lines

    def _render_tags(self, results: Sequence[BenchmarkResult]) -> List[str]:
        lines = ["", "  Tag Breakdown (Recall@5 / MRR):", LIGHT_RULE]
        lines.append(f"  {'Tag'.ljust(16)} {'Count'.ljust(7)} " + " ".join(r.provider.ljust(COLUMN_WIDTH) for r in results))

        all_tags = sorted({tag for r in results for tag in r.tag_breakdown})
        for tag in all_tags:
            count = next((r.tag_breakdown[tag].count for r in results if tag in r.tag_breakdown), 0)
            values = []
            for r in results:
                stats = r.tag_breakdown.get(tag)
                values.append(f"{_pct(stats.recall5, 0)} / {stats.mrr:.3f}" if stats else "N/A")
            lines.append(f"  {tag.ljust(16)} {str(count).ljust(7)} " + " ".join(v.ljust(COLUMN_WIDTH) for v in values))
        return lines

    def _render_imperfect(self, results: Sequence[BenchmarkResult]) -> List[str]:
        lines = ["", "  Imperfect Rankings (correct answer not #1):", LIGHT_RULE]
        flagged = self.imperfect_queries(results)
        if not flagged:
            lines.append("  All queries returned correct result at position #1!")
            return lines

        for reference, details in flagged:
            expected = set(reference.expected_chunk_ids)
            lines.append("")
            lines.append(f'  Query: "{reference.query}"')
            lines.append(f"  Expected: {', '.join(reference.expected_chunk_ids)}")
            lines.append(f"  Tags: {', '.join(reference.tags)}")
            for result, detail in zip(results, details):
                lines.append(
                    f"  {result.provider}: {self._status(detail)} "
                    f"(RR={detail.reciprocal_rank:.3f}), Top {len(detail.top_matches)}:"
                )
                for match in detail.top_matches:
                    marker = " <<<" if match.chunk_id in expected else ""
                    lines.append(f"      {match.chunk_id.ljust(30)} {match.score:.4f} ({match.topic}){marker}")
        return lines

    @staticmethod
    def _status(detail: QueryDetail) -> str:
        if not detail.correct_in_top5 or detail.first_hit_rank is None:
            return "MISS"
        return f"#{detail.first_hit_rank}"

    def _render_summary(self, results: Sequence[BenchmarkResult]) -> List[str]:
        verdict = self.compare(results)
        if verdict is None:
            return []

        lines = ["", HEAVY_RULE, "  SUMMARY", HEAVY_RULE]
        if verdict.is_draw:
            lines.append(f"  Result: DRAW, MRR difference is <{self.draw_threshold * 100:.0f}% ({verdict.mrr_delta_pct:.1f}%)")
            lines.append("  Recommendation: Choose based on cost, ecosystem, or latency")
            return lines

        by_name = {r.provider: r for r in results}
        winner, loser = by_name[verdict.winner], by_name[verdict.loser]
        lines.append(f"  Winner: {winner.provider} ({winner.model})")
        better = f"{abs(verdict.mrr_delta_pct):.1f}% better" if verdict.mrr_delta_pct is not None else "n/a, loser MRR is 0"
        lines.append(f"  MRR: {winner.mrr:.3f} vs {loser.mrr:.3f} ({better})")
        lines.append(f"  Recall@5: {_pct(winner.recall5)} vs {_pct(loser.recall5)}")
        if verdict.notation_mrr:
            winner_mrr, loser_mrr = verdict.notation_mrr
            lines.append(f"  Math/Notation MRR: {winner_mrr:.3f} vs {loser_mrr:.3f} (critical for STEM tutoring)")
        return lines
