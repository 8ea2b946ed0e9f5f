"""SQLite-backed book store: ownership, index metadata and the active generation pointer."""

from __future__ import annotations

from datetime import datetime, timezone

import aiosqlite

from grounding_engine.exceptions import AlreadyExistsError, NotFoundError
from grounding_engine.models.domain import Book, BookIndexMetadata
from grounding_engine.storage.migrations import initialize_db


class SQLiteBookStore:
    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    async def initialize(self) -> None:
        await initialize_db(self._db_path)

    async def create_book(self, book_id: str, author_id: str, title: str = "") -> Book:
        created_at = datetime.now(timezone.utc)
        async with aiosqlite.connect(self._db_path) as db:
            try:
                await db.execute(
                    "INSERT INTO books (book_id, author_id, title, created_at) VALUES (?, ?, ?, ?)",
                    (book_id, author_id, title, created_at.isoformat()),
                )
            except aiosqlite.IntegrityError as e:
                raise AlreadyExistsError(f"Book {book_id} already exists.") from e
            await db.commit()
        return Book(
            book_id=book_id,
            author_id=author_id,
            title=title,
            index=BookIndexMetadata(book_id=book_id),
            created_at=created_at,
        )

    async def get_book(self, book_id: str) -> Book | None:
        async with aiosqlite.connect(self._db_path) as db:
            db.row_factory = aiosqlite.Row
            async with db.execute("SELECT * FROM books WHERE book_id = ?", (book_id,)) as cursor:
                row = await cursor.fetchone()
                if row is None:
                    return None
                return self._row_to_book(row)

    async def allocate_generation(self, book_id: str) -> int:
        """Reserve a fresh generation number for a re-index of ``book_id``.

        The increment and read run in one write transaction, so concurrent jobs
        never share a generation.
        """
        async with aiosqlite.connect(self._db_path) as db:
            await db.execute("BEGIN IMMEDIATE")
            await db.execute(
                "UPDATE books SET latest_generation = latest_generation + 1 WHERE book_id = ?",
                (book_id,),
            )
            async with db.execute(
                "SELECT latest_generation FROM books WHERE book_id = ?", (book_id,)
            ) as cursor:
                row = await cursor.fetchone()
            await db.commit()
        if row is None:
            raise NotFoundError(f"Book {book_id} not found.")
        return row[0]

    async def activate_generation(
        self,
        book_id: str,
        generation: int,
        chunk_count: int,
        content_length: int,
        updated_at: datetime,
    ) -> bool:
        """Point retrieval at ``generation`` and record its index metadata in one update.

        Returns False when a newer generation is already active.
        """
        async with aiosqlite.connect(self._db_path) as db:
            cursor = await db.execute(
                "UPDATE books SET active_generation = ?, has_content = 1, chunk_count = ?, "
                "content_length = ?, content_updated_at = ? "
                "WHERE book_id = ? AND active_generation < ?",
                (
                    generation,
                    chunk_count,
                    content_length,
                    updated_at.isoformat(),
                    book_id,
                    generation,
                ),
            )
            await db.commit()
            return cursor.rowcount == 1

    async def count_books(self) -> int:
        async with aiosqlite.connect(self._db_path) as db:
            async with db.execute("SELECT COUNT(*) FROM books") as cursor:
                row = await cursor.fetchone()
                return row[0] if row else 0

    @staticmethod
    def _row_to_book(row: aiosqlite.Row) -> Book:
        updated_at = row["content_updated_at"]
        return Book(
            book_id=row["book_id"],
            author_id=row["author_id"],
            title=row["title"],
            index=BookIndexMetadata(
                book_id=row["book_id"],
                has_content=bool(row["has_content"]),
                chunk_count=row["chunk_count"],
                content_length=row["content_length"],
                content_updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
                active_generation=row["active_generation"],
            ),
            created_at=datetime.fromisoformat(row["created_at"]),
        )
