"""Protocols for the durable book, chunk and stats stores."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Protocol

from grounding_engine.models.domain import Book, CharacterStats, Chunk


class BookStore(Protocol):
    async def get_book(self, book_id: str) -> Book | None: ...

    async def allocate_generation(self, book_id: str) -> int: ...

    async def activate_generation(
        self,
        book_id: str,
        generation: int,
        chunk_count: int,
        content_length: int,
        updated_at: datetime,
    ) -> bool: ...


class ChunkStore(Protocol):
    async def save_chunks(self, chunks: list[Chunk]) -> None: ...

    async def get_active_chunks(self, book_id: str) -> list[Chunk]: ...

    async def delete_superseded(self, book_id: str) -> int: ...

    async def delete_generation(self, book_id: str, generation: int) -> int: ...


class StatsStore(Protocol):
    async def get_stats(self, character_id: str) -> CharacterStats | None: ...

    async def save_stats(self, stats: CharacterStats) -> None: ...

    async def update_stats(
        self, character_id: str, apply: Callable[[CharacterStats], CharacterStats]
    ) -> CharacterStats: ...
