"""Embedding indexer: chunk -> embed (batched, rate-limited) -> store -> swap generation.

A re-index writes its chunks under a fresh generation and only then points the
book at it, so retrieval keeps serving the previous generation until the swap.
"""

from __future__ import annotations

import asyncio
import time
from datetime import datetime, timezone

from grounding_engine.chunking.word_chunker import WordWindowChunker
from grounding_engine.exceptions import (
    DimensionMismatchError,
    GroundingEngineError,
    InternalError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from grounding_engine.models.domain import Chunk, IndexingResult
from grounding_engine.observability.logger import get_logger
from grounding_engine.observability.metrics import log_indexing_metrics
from grounding_engine.protocols.embedder import Embedder
from grounding_engine.protocols.stores import BookStore, ChunkStore

logger = get_logger("indexer")


class EmbeddingIndexer:
    def __init__(
        self,
        book_store: BookStore,
        chunk_store: ChunkStore,
        chunker: WordWindowChunker,
        embedder: Embedder,
        batch_size: int = 10,
        batch_delay_ms: int = 500,
        min_content_chars: int = 100,
    ) -> None:
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self._book_store = book_store
        self._chunk_store = chunk_store
        self._chunker = chunker
        self._embedder = embedder
        self._batch_size = batch_size
        self._batch_delay_s = batch_delay_ms / 1000
        self._min_content_chars = min_content_chars

    async def reindex(self, book_id: str, content: str, author_id: str) -> IndexingResult:
        """Replace the indexed content of ``book_id`` with ``content``.

        Raises ValidationError, NotFoundError or PermissionDeniedError before any
        write; anything unexpected surfaces as InternalError.
        """
        if not book_id or not content:
            raise ValidationError("Book ID and content are required.")
        if len(content) < self._min_content_chars:
            raise ValidationError(
                f"Content must be at least {self._min_content_chars} characters."
            )

        try:
            return await self._reindex(book_id, content, author_id)
        except GroundingEngineError:
            raise
        except Exception as e:
            logger.exception("reindex_failed", book_id=book_id)
            raise InternalError(f"Failed to process book content: {e}") from e

    async def _reindex(self, book_id: str, content: str, author_id: str) -> IndexingResult:
        start = time.monotonic()

        book = await self._book_store.get_book(book_id)
        if book is None:
            raise NotFoundError("Book not found.")
        if book.author_id != author_id:
            raise PermissionDeniedError("You can only upload content to your own books.")

        fragments = self._chunker.chunk(content)
        if not fragments or not any(f.strip() for f in fragments):
            raise ValidationError("Could not extract meaningful content from the text.")
        logger.info("content_chunked", book_id=book_id, total_chunks=len(fragments))

        generation = await self._book_store.allocate_generation(book_id)

        processed = 0
        batches = 0
        for offset in range(0, len(fragments), self._batch_size):
            batch = fragments[offset : offset + self._batch_size]
            chunks = await asyncio.gather(
                *(
                    self._embed_fragment(book_id, generation, offset + i, fragment)
                    for i, fragment in enumerate(batch)
                )
            )
            stored = [c for c in chunks if c is not None]
            await self._chunk_store.save_chunks(stored)
            processed += len(stored)
            batches += 1

            if offset + self._batch_size < len(fragments):
                await asyncio.sleep(self._batch_delay_s)

        activated = await self._book_store.activate_generation(
            book_id,
            generation,
            chunk_count=processed,
            content_length=len(content),
            updated_at=datetime.now(timezone.utc),
        )
        if activated:
            removed = await self._chunk_store.delete_superseded(book_id)
            logger.info("generation_activated", book_id=book_id, generation=generation, removed=removed)
        else:
            # A newer re-index finished first; this generation is already stale.
            await self._chunk_store.delete_generation(book_id, generation)
            logger.warning("generation_superseded", book_id=book_id, generation=generation)

        log_indexing_metrics(
            book_id=book_id,
            generation=generation,
            total_chunks=len(fragments),
            chunks_processed=processed,
            batches=batches,
            duration_ms=(time.monotonic() - start) * 1000,
        )
        return IndexingResult(
            book_id=book_id,
            chunks_processed=processed,
            total_chunks=len(fragments),
            generation=generation,
        )

    async def _embed_fragment(
        self, book_id: str, generation: int, chunk_index: int, fragment: str
    ) -> Chunk | None:
        """Embed one fragment; a failed fragment is logged and skipped, never retried."""
        try:
            embedding = await self._embedder.embed(fragment)
            if len(embedding) != self._embedder.dimensions:
                raise DimensionMismatchError(
                    f"expected {self._embedder.dimensions} dimensions, got {len(embedding)}"
                )
        except Exception as e:
            logger.warning(
                "chunk_embedding_failed",
                book_id=book_id,
                chunk_index=chunk_index,
                error_type=type(e).__name__,
                error=str(e),
            )
            return None
        return Chunk(
            book_id=book_id,
            chunk_index=chunk_index,
            content=fragment,
            embedding=list(embedding),
            word_count=WordWindowChunker.word_count(fragment),
            generation=generation,
        )
