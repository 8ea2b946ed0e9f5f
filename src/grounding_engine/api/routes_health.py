"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from grounding_engine.api.dependencies import get_book_store, get_chunk_store, get_settings
from grounding_engine.config.settings import Settings
from grounding_engine.models.schemas import HealthResponse
from grounding_engine.storage.sqlite_book_store import SQLiteBookStore
from grounding_engine.storage.sqlite_chunk_store import SQLiteChunkStore

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(
    book_store: SQLiteBookStore = Depends(get_book_store),
    chunk_store: SQLiteChunkStore = Depends(get_chunk_store),
    settings: Settings = Depends(get_settings),
) -> HealthResponse:
    return HealthResponse(
        status="ok",
        book_count=await book_store.count_books(),
        chunk_count=await chunk_store.count_chunks(),
        embedding_provider=settings.embedding_provider,
    )
