"""
Ground truth fixtures: labeled corpus chunks and test queries
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, ValidationError

from core.config import settings
from core.exceptions import FixtureIntegrityError

logger = logging.getLogger(__name__)


class ContentChunk(BaseModel):
    """A labeled reference passage"""
    model_config = ConfigDict(frozen=True)

    id: str
    subject: str
    topic: str
    content: str
    tags: Tuple[str, ...] = ()


class TestQuery(BaseModel):
    """A probe query with the chunk ids that count as a correct answer"""
    model_config = ConfigDict(frozen=True)

    id: str
    query: str
    expected_chunk_ids: Tuple[str, ...]
    tags: Tuple[str, ...] = ()


class FixtureSet:
    """
    Immutable corpus + query set, validated on construction.
    
    Raises FixtureIntegrityError on duplicate ids, queries without expected
    chunks, or expected ids that do not exist in the corpus.
    """

    def __init__(self, chunks: List[ContentChunk], queries: List[TestQuery]):
        self.chunks: Tuple[ContentChunk, ...] = tuple(chunks)
        self.queries: Tuple[TestQuery, ...] = tuple(queries)
        self._chunks_by_id: Dict[str, ContentChunk] = {c.id: c for c in self.chunks}
        self.validate()

    def validate(self):
        """Check referential integrity of the fixtures"""
        if not self.chunks:
            raise FixtureIntegrityError("Corpus is empty")
        if not self.queries:
            raise FixtureIntegrityError("Query set is empty")

        if len(self._chunks_by_id) != len(self.chunks):
            raise FixtureIntegrityError(f"Duplicate chunk ids: {_duplicates(c.id for c in self.chunks)}")

        query_ids = [q.id for q in self.queries]
        if len(set(query_ids)) != len(query_ids):
            raise FixtureIntegrityError(f"Duplicate query ids: {_duplicates(query_ids)}")

        for query in self.queries:
            if not query.expected_chunk_ids:
                raise FixtureIntegrityError(f"Query {query.id} has no expected chunk ids")
            missing = [cid for cid in query.expected_chunk_ids if cid not in self._chunks_by_id]
            if missing:
                raise FixtureIntegrityError(
                    f"Query {query.id} expects unknown chunk id(s): {', '.join(missing)}"
                )

    def get_chunk(self, chunk_id: str) -> Optional[ContentChunk]:
        return self._chunks_by_id.get(chunk_id)

    @property
    def chunk_texts(self) -> List[str]:
        return [c.content for c in self.chunks]

    @property
    def query_texts(self) -> List[str]:
        return [q.query for q in self.queries]


def _duplicates(ids) -> str:
    seen, dupes = set(), []
    for i in ids:
        if i in seen and i not in dupes:
            dupes.append(i)
        seen.add(i)
    return ", ".join(dupes)


def _read_json_list(file_path: Path) -> list:
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise FixtureIntegrityError(f"Cannot read fixture file {file_path}: {e}") from e
    if not isinstance(data, list):
        raise FixtureIntegrityError(f"Fixture file {file_path} must contain a JSON list")
    return data


def load_fixtures(
    corpus_path: Optional[Path] = None,
    queries_path: Optional[Path] = None,
) -> FixtureSet:
    """
    Load and validate corpus and query fixtures from JSON files.
    
    Args:
        corpus_path: JSON list of chunks (defaults to settings.corpus_path)
        queries_path: JSON list of queries (defaults to settings.queries_path)
        
    Returns:
        Validated FixtureSet
    """
    corpus_path = Path(corpus_path or settings.corpus_path)
    queries_path = Path(queries_path or settings.queries_path)

    try:
        chunks = [ContentChunk.model_validate(c) for c in _read_json_list(corpus_path)]
        queries = [TestQuery.model_validate(q) for q in _read_json_list(queries_path)]
    except ValidationError as e:
        raise FixtureIntegrityError(f"Invalid fixture record: {e}") from e

    fixtures = FixtureSet(chunks, queries)
    logger.info(f"Loaded {len(fixtures.chunks)} chunks from {corpus_path} and {len(fixtures.queries)} queries from {queries_path}")
    return fixtures
