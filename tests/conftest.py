"""Shared test fixtures."""

from __future__ import annotations

import hashlib
import tempfile
from pathlib import Path

import pytest

from grounding_engine.config.settings import Settings
from grounding_engine.exceptions import EmbeddingError
from grounding_engine.models.domain import JudgeReport, JudgeResult
from grounding_engine.storage.sqlite_book_store import SQLiteBookStore
from grounding_engine.storage.sqlite_chunk_store import SQLiteChunkStore
from grounding_engine.storage.sqlite_stats_store import SQLiteStatsStore


class FakeEmbedder:
    """Bag-of-words hashing embedder; texts sharing words get similar vectors.

    ``fail_on`` and ``wrong_dims_on`` hold substrings that make ``embed`` raise
    or return a vector of the wrong length.
    """

    def __init__(self, dimensions: int = 16) -> None:
        self._dimensions = dimensions
        self.calls = 0
        self.fail_on: set[str] = set()
        self.wrong_dims_on: set[str] = set()

    @property
    def dimensions(self) -> int:
        return self._dimensions

    async def embed(self, text: str) -> list[float]:
        self.calls += 1
        if any(marker in text for marker in self.fail_on):
            raise EmbeddingError("embedding model unavailable")
        size = self._dimensions + 1 if any(m in text for m in self.wrong_dims_on) else self._dimensions
        vector = [0.0] * size
        for word in text.lower().split():
            bucket = int(hashlib.sha256(word.encode()).hexdigest(), 16) % size
            vector[bucket] += 1.0
        return vector


@pytest.fixture
def tmp_dir():
    """Create a temporary directory."""
    return tempfile.mkdtemp()


@pytest.fixture
def settings(tmp_dir):
    """Test settings with temp paths and no batch delay."""
    return Settings(
        openai_api_key="test-key",
        google_api_key="test-key",
        embedding_dimensions=16,
        index_batch_delay_ms=0,
        sqlite_db_path=str(Path(tmp_dir) / "test_grounding.db"),
        embedding_cache_db_path=str(Path(tmp_dir) / "test_cache.db"),
        jwt_secret="test-secret",
        api_keys="key-alice=alice,key-bob=bob",
    )


@pytest.fixture
def fake_embedder():
    return FakeEmbedder()


@pytest.fixture
async def book_store(settings):
    store = SQLiteBookStore(settings.sqlite_db_path)
    await store.initialize()
    return store


@pytest.fixture
async def chunk_store(settings):
    store = SQLiteChunkStore(settings.sqlite_db_path)
    await store.initialize()
    return store


@pytest.fixture
async def stats_store(settings):
    store = SQLiteStatsStore(settings.sqlite_db_path)
    await store.initialize()
    return store


def make_book_text(words: int, prefix: str = "word") -> str:
    return " ".join(f"{prefix}{i}" for i in range(words))


def all_scores(value: float) -> dict[str, float]:
    return {
        "voiceFidelity": value,
        "worldIntegrity": value,
        "boundaryAwareness": value,
        "ageAppropriateness": value,
        "emotionalSafety": value,
        "engagementQuality": value,
        "metaHandling": value,
    }


@pytest.fixture
def judge_reports():
    """Two judges scoring the same two conversations."""
    internal = JudgeReport(
        judge_id="arlea",
        judge_name="Internal Judge",
        results=[
            JudgeResult(
                conv_id="c1",
                category="canon",
                scores=all_scores(5),
                feedback={"voiceFidelity": "Sounds exactly like the book."},
                total_score=35,
                concerns=["internal only concern"],
                suggestions=["Keep the catchphrases"],
            ),
            JudgeResult(
                conv_id="c2",
                category="boundary",
                scores={**all_scores(4), "voiceFidelity": 4},
                total_score=28,
                concerns=[],
            ),
        ],
    )
    external = JudgeReport(
        judge_id="gpt",
        judge_name="External Judge",
        results=[
            JudgeResult(
                conv_id="c1",
                category="canon",
                scores={**all_scores(4), "voiceFidelity": 3},
                feedback={"voiceFidelity": "Drifts into modern slang."},
                total_score=27,
                concerns=["spoiler risk", "", "List any specific concerns"],
                suggestions=["Suggestion 1", "Avoid modern slang"],
            ),
            JudgeResult(
                conv_id="c2",
                category="boundary",
                scores={**all_scores(4), "voiceFidelity": 2},
                total_score=26,
                concerns=["spoiler risk"],
                suggestions=["Avoid modern slang", ""],
            ),
            JudgeResult(conv_id="c3", category="meta", error="judge timed out"),
        ],
    )
    return [internal, external]


@pytest.fixture
def scores_of():
    """Factory: seven dimension scores all set to one value."""
    return all_scores


@pytest.fixture
def book_text():
    """Factory: ``n`` distinct words, optionally with a custom prefix."""
    return make_book_text
