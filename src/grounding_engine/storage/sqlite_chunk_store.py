"""SQLite-backed chunk store. Chunks are grouped by (book, generation)."""

from __future__ import annotations

import json
from datetime import datetime

import aiosqlite

from grounding_engine.models.domain import Chunk
from grounding_engine.storage.migrations import initialize_db


class SQLiteChunkStore:
    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    async def initialize(self) -> None:
        await initialize_db(self._db_path)

    async def save_chunks(self, chunks: list[Chunk]) -> None:
        if not chunks:
            return
        async with aiosqlite.connect(self._db_path) as db:
            await db.executemany(
                "INSERT OR REPLACE INTO chunks "
                "(book_id, generation, chunk_index, content, embedding, word_count, created_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?)",
                [
                    (
                        c.book_id,
                        c.generation,
                        c.chunk_index,
                        c.content,
                        json.dumps(c.embedding),
                        c.word_count,
                        c.created_at.isoformat(),
                    )
                    for c in chunks
                ],
            )
            await db.commit()

    async def get_active_chunks(self, book_id: str) -> list[Chunk]:
        """Chunks of the book's active generation, in chunk order."""
        async with aiosqlite.connect(self._db_path) as db:
            db.row_factory = aiosqlite.Row
            async with db.execute(
                "SELECT c.* FROM chunks c "
                "JOIN books b ON b.book_id = c.book_id AND b.active_generation = c.generation "
                "WHERE c.book_id = ? ORDER BY c.chunk_index",
                (book_id,),
            ) as cursor:
                rows = await cursor.fetchall()
                return [self._row_to_chunk(row) for row in rows]

    async def get_generation_chunks(self, book_id: str, generation: int) -> list[Chunk]:
        async with aiosqlite.connect(self._db_path) as db:
            db.row_factory = aiosqlite.Row
            async with db.execute(
                "SELECT * FROM chunks WHERE book_id = ? AND generation = ? ORDER BY chunk_index",
                (book_id, generation),
            ) as cursor:
                rows = await cursor.fetchall()
                return [self._row_to_chunk(row) for row in rows]

    async def delete_superseded(self, book_id: str) -> int:
        """Drop generations older than the active one. In-flight newer generations survive."""
        async with aiosqlite.connect(self._db_path) as db:
            cursor = await db.execute(
                "DELETE FROM chunks WHERE book_id = ? AND generation < "
                "(SELECT active_generation FROM books WHERE book_id = ?)",
                (book_id, book_id),
            )
            await db.commit()
            return cursor.rowcount

    async def delete_generation(self, book_id: str, generation: int) -> int:
        async with aiosqlite.connect(self._db_path) as db:
            cursor = await db.execute(
                "DELETE FROM chunks WHERE book_id = ? AND generation = ?",
                (book_id, generation),
            )
            await db.commit()
            return cursor.rowcount

    async def count_chunks(self) -> int:
        """Chunks currently served by retrieval across all books."""
        async with aiosqlite.connect(self._db_path) as db:
            async with db.execute(
                "SELECT COUNT(*) FROM chunks c "
                "JOIN books b ON b.book_id = c.book_id AND b.active_generation = c.generation"
            ) as cursor:
                row = await cursor.fetchone()
                return row[0] if row else 0

    @staticmethod
    def _row_to_chunk(row: aiosqlite.Row) -> Chunk:
        return Chunk(
            book_id=row["book_id"],
            chunk_index=row["chunk_index"],
            content=row["content"],
            embedding=json.loads(row["embedding"]),
            word_count=row["word_count"],
            generation=row["generation"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
