"""Linear-scan cosine-similarity search over a book's active chunks."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from grounding_engine.exceptions import DimensionMismatchError
from grounding_engine.models.domain import RetrievedPassage
from grounding_engine.observability.logger import get_logger
from grounding_engine.observability.metrics import log_retrieval_metrics
from grounding_engine.protocols.stores import ChunkStore

logger = get_logger("similarity")


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """dot(a, b) / (|a| * |b|); 0.0 when either vector has zero norm."""
    if len(a) != len(b):
        raise DimensionMismatchError(f"Vectors must have same dimension ({len(a)} != {len(b)})")
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    sq_a = float(np.dot(va, va))
    sq_b = float(np.dot(vb, vb))
    if sq_a == 0.0 or sq_b == 0.0:
        return 0.0
    # sqrt of the product keeps cosine(v, v) exactly 1.0
    return float(np.dot(va, vb)) / float(np.sqrt(sq_a * sq_b))


class SimilarityRetriever:
    def __init__(self, chunk_store: ChunkStore, threshold: float = 0.3) -> None:
        self._chunk_store = chunk_store
        self._threshold = threshold

    async def search(
        self,
        book_id: str,
        query_embedding: Sequence[float],
        top_k: int = 5,
    ) -> list[RetrievedPassage]:
        """Top ``top_k`` passages above the similarity threshold, most similar first.

        An empty list means "no additional context", never an error.
        """
        chunks = await self._chunk_store.get_active_chunks(book_id)
        if not chunks or top_k <= 0:
            return []

        scored = [
            RetrievedPassage(
                content=chunk.content,
                similarity=cosine_similarity(query_embedding, chunk.embedding),
                chunk_index=chunk.chunk_index,
            )
            for chunk in chunks
        ]
        scored.sort(key=lambda p: p.similarity, reverse=True)
        results = [p for p in scored if p.similarity > self._threshold][:top_k]

        log_retrieval_metrics(
            book_id=book_id,
            candidates=len(chunks),
            returned=len(results),
            top_similarities=[p.similarity for p in results],
        )
        return results
