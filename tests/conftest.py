"""Shared fixtures for the benchmark test suite."""
from typing import Dict, List

import pytest

from domain.evaluation.ground_truth import ContentChunk, FixtureSet, TestQuery as LabeledQuery
from tests.helpers import RecordingSleep


@pytest.fixture
def small_fixtures() -> FixtureSet:
    chunks = [
        ContentChunk(id="alg", subject="Mathematics", topic="Algebra", content="alg text", tags=("math",)),
        ContentChunk(id="bio", subject="Biology", topic="Cells", content="bio text", tags=("stem",)),
        ContentChunk(id="his", subject="History", topic="WWI", content="his text", tags=("humanities",)),
    ]
    queries = [
        LabeledQuery(id="q-alg", query="solve x", expected_chunk_ids=("alg",), tags=("direct", "notation")),
        LabeledQuery(id="q-his", query="war causes", expected_chunk_ids=("his",), tags=("paraphrase",)),
    ]
    return FixtureSet(chunks, queries)


@pytest.fixture
def small_vectors() -> Dict[str, List[float]]:
    # q-alg hits at rank 1; q-his ranks bio, alg, his -> first hit at rank 3
    return {
        "alg text": [1.0, 0.0, 0.0],
        "bio text": [0.0, 1.0, 0.0],
        "his text": [0.0, 0.0, 1.0],
        "solve x": [1.0, 0.1, 0.0],
        "war causes": [0.5, 0.9, 0.2],
    }


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
