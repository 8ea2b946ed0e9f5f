"""Book endpoints: registration, content indexing and grounding context."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from grounding_engine.api.auth import current_author, verify_token
from grounding_engine.api.dependencies import (
    get_book_store,
    get_context_builder,
    get_indexer,
)
from grounding_engine.api.rate_limiter import index_rate_limit, rate_limit
from grounding_engine.exceptions import NotFoundError
from grounding_engine.indexing.indexer import EmbeddingIndexer
from grounding_engine.models.schemas import (
    ContextRequest,
    ContextResponse,
    IndexRequest,
    IndexResponse,
    PassageOut,
)
from grounding_engine.retrieval.grounding import GroundingContextBuilder, format_passages
from grounding_engine.storage.sqlite_book_store import SQLiteBookStore

router = APIRouter(prefix="/books", tags=["books"])


class BookCreateRequest(BaseModel):
    book_id: str
    title: str = ""


class BookResponse(BaseModel):
    book_id: str
    author_id: str
    title: str
    has_content: bool
    chunk_count: int


@router.post("", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
async def register_book(
    body: BookCreateRequest,
    book_store: SQLiteBookStore = Depends(get_book_store),
    auth: dict = Depends(rate_limit),
) -> BookResponse:
    book = await book_store.create_book(body.book_id, current_author(auth), body.title)
    return BookResponse(
        book_id=book.book_id,
        author_id=book.author_id,
        title=book.title,
        has_content=book.has_content,
        chunk_count=book.index.chunk_count,
    )


@router.post("/{book_id}/content", response_model=IndexResponse)
async def upload_content(
    book_id: str,
    body: IndexRequest,
    indexer: EmbeddingIndexer = Depends(get_indexer),
    auth: dict = Depends(index_rate_limit),
) -> IndexResponse:
    """Replace the book's indexed content. Only the book's author may do this."""
    result = await indexer.reindex(book_id, body.content, current_author(auth))
    return IndexResponse(
        success=True,
        chunks_processed=result.chunks_processed,
        total_chunks=result.total_chunks,
    )


@router.post("/{book_id}/context", response_model=ContextResponse)
async def grounding_context(
    book_id: str,
    body: ContextRequest,
    book_store: SQLiteBookStore = Depends(get_book_store),
    builder: GroundingContextBuilder = Depends(get_context_builder),
    _auth: dict = Depends(verify_token),
) -> ContextResponse:
    book = await book_store.get_book(book_id)
    if book is None:
        raise NotFoundError("Book not found.")

    passages = await builder.retrieve(book, body.message, top_k=body.top_k)
    return ContextResponse(
        book_id=book_id,
        context=format_passages(passages),
        passages=[PassageOut(**asdict(p)) for p in passages],
    )
