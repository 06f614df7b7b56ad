"""
Embedding benchmark CLI: compare retrieval quality of embedding providers

Usage:
    OPENAI_API_KEY=sk-... VOYAGE_API_KEY=pa-... python backend/main.py
"""

import sys
import asyncio
import logging
import argparse
from pathlib import Path
from typing import List, Optional

from core.config import settings
from core.exceptions import BenchmarkException, ConfigurationError, FixtureIntegrityError
from domain.evaluation.ground_truth import load_fixtures
from domain.evaluation.reporter import EvaluationReporter
from domain.rag.embedding.batch_processor import BatchProcessor
from domain.rag.embedding.factory import ENV_VARS, create_embedding_clients
from services.benchmark_service import BenchmarkService
from utils.retry import RetryPolicy

logger = logging.getLogger(__name__)


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compare retrieval quality of embedding providers on labeled tutoring content"
    )
    parser.add_argument(
        "--provider",
        action="append",
        dest="providers",
        help="Restrict the run to a provider (openai, voyage, jina); repeatable"
    )
    parser.add_argument(
        "--batch-size",
        type=positive_int,
        default=settings.embedding_batch_size,
        help="Texts per embedding request"
    )
    parser.add_argument("--corpus", type=Path, help="Corpus fixture JSON")
    parser.add_argument("--queries", type=Path, help="Query fixture JSON")
    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Report format written to stdout"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=settings.provider_run_timeout,
        help="Deadline in seconds for each provider run"
    )
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Report the remaining providers when one fails (exit code stays non-zero)"
    )
    parser.add_argument("--no-progress", action="store_true", help="Disable progress bars")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    return parser


async def run_benchmark(args: argparse.Namespace) -> int:
    """Run the benchmark and print the report. Returns the process exit code."""
    try:
        fixtures = load_fixtures(args.corpus, args.queries)
        clients = create_embedding_clients(settings, args.providers)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        print(
            f"Error: {e}\n\n"
            f"Set at least one of {ENV_VARS}. You can run with just one key to test a single provider.",
            file=sys.stderr,
        )
        return 1
    except FixtureIntegrityError as e:
        logger.error(f"Fixture error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.info(f"Content chunks: {len(fixtures.chunks)}, test queries: {len(fixtures.queries)}")
    logger.info(f"Providers: {', '.join(c.provider for c in clients)}")

    batch_processor = BatchProcessor(
        batch_size=args.batch_size,
        retry_policy=RetryPolicy(
            max_retries=settings.retry_max_retries,
            initial_delay=settings.retry_initial_delay,
            growth_factor=settings.retry_growth_factor,
        ),
        show_progress=not args.no_progress,
    )
    service = BenchmarkService(fixtures, batch_processor, top_k=settings.report_top_k)

    try:
        results, errors = await service.run_all(clients, keep_going=args.keep_going, timeout=args.timeout)
    except BenchmarkException as e:
        print(f"Benchmark failed: {e}", file=sys.stderr)
        return 1

    reporter = EvaluationReporter(
        rr_delta_threshold=settings.report_rr_delta_threshold,
        draw_threshold=settings.report_draw_threshold,
    )
    if args.format == "json":
        print(reporter.render_json(results))
    else:
        reporter.print_console(results, corpus_size=len(fixtures.chunks))

    for error in errors:
        print(f"Benchmark failed: {error}", file=sys.stderr)
    return 1 if errors else 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(run_benchmark(args))


def run():
    """Console script entry point"""
    sys.exit(main())


if __name__ == "__main__":
    run()
