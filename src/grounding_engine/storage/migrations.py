"""Idempotent database schema creation."""

from __future__ import annotations

import aiosqlite

BOOKS_TABLE = """
CREATE TABLE IF NOT EXISTS books (
    book_id TEXT PRIMARY KEY,
    author_id TEXT NOT NULL,
    title TEXT NOT NULL DEFAULT '',
    has_content INTEGER NOT NULL DEFAULT 0,
    chunk_count INTEGER NOT NULL DEFAULT 0,
    content_length INTEGER NOT NULL DEFAULT 0,
    content_updated_at TEXT,
    active_generation INTEGER NOT NULL DEFAULT 0,
    latest_generation INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL
)
"""

CHUNKS_TABLE = """
CREATE TABLE IF NOT EXISTS chunks (
    book_id TEXT NOT NULL,
    generation INTEGER NOT NULL,
    chunk_index INTEGER NOT NULL,
    content TEXT NOT NULL,
    embedding TEXT NOT NULL,
    word_count INTEGER NOT NULL,
    created_at TEXT NOT NULL,
    PRIMARY KEY (book_id, generation, chunk_index),
    FOREIGN KEY (book_id) REFERENCES books(book_id)
)
"""

CHARACTER_STATS_TABLE = """
CREATE TABLE IF NOT EXISTS character_stats (
    character_id TEXT PRIMARY KEY,
    total_evals INTEGER NOT NULL DEFAULT 0,
    dimensions TEXT NOT NULL DEFAULT '{}',
    last_eval_at TEXT
)
"""


async def initialize_db(db_path: str) -> None:
    async with aiosqlite.connect(db_path) as db:
        await db.execute(BOOKS_TABLE)
        await db.execute(CHUNKS_TABLE)
        await db.execute(CHARACTER_STATS_TABLE)
        await db.commit()
