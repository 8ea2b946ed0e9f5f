"""Build the book-passage section a chat prompt is grounded on."""

from __future__ import annotations

from grounding_engine.exceptions import DimensionMismatchError, TransientError
from grounding_engine.models.domain import Book, RetrievedPassage
from grounding_engine.observability.logger import get_logger
from grounding_engine.protocols.embedder import Embedder
from grounding_engine.retrieval.similarity import SimilarityRetriever

logger = get_logger("grounding")

CONTEXT_HEADER = "## RELEVANT BOOK PASSAGES"
CONTEXT_INTRO = "These passages from the book may bear on the conversation:"
CONTEXT_FOOTER = (
    "Let them inform the reply while staying in character. "
    "Quote them only where it reads naturally."
)


def format_passages(passages: list[RetrievedPassage]) -> str:
    if not passages:
        return ""
    body = "\n\n".join(f"[Passage {i}]: {p.content}" for i, p in enumerate(passages, start=1))
    return f"\n{CONTEXT_HEADER}\n{CONTEXT_INTRO}\n\n{body}\n\n{CONTEXT_FOOTER}"


class GroundingContextBuilder:
    def __init__(
        self,
        embedder: Embedder,
        retriever: SimilarityRetriever,
        top_k: int = 5,
    ) -> None:
        self._embedder = embedder
        self._retriever = retriever
        self._top_k = top_k

    async def retrieve(
        self, book: Book, message: str, top_k: int | None = None
    ) -> list[RetrievedPassage]:
        """Passages for ``message``; empty when the book has no content or retrieval fails."""
        if not book.has_content or not message.strip():
            return []
        try:
            query_embedding = await self._embedder.embed(message)
            passages = await self._retriever.search(
                book.book_id, query_embedding, top_k or self._top_k
            )
        except (TransientError, DimensionMismatchError) as e:
            logger.warning("grounding_unavailable", book_id=book.book_id, error=str(e))
            return []
        if passages:
            logger.info(
                "grounding_found",
                book_id=book.book_id,
                passages=len(passages),
                query_preview=message[:50],
            )
        return passages

    async def build(self, book: Book, message: str) -> str:
        return format_passages(await self.retrieve(book, message))
