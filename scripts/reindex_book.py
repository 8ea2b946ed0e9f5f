"""Register (optionally) and re-index a book from a text file."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from grounding_engine.chunking.word_chunker import WordWindowChunker
from grounding_engine.config.settings import Settings
from grounding_engine.embeddings.factory import create_embedder
from grounding_engine.exceptions import GroundingEngineError
from grounding_engine.indexing.indexer import EmbeddingIndexer
from grounding_engine.observability.logger import setup_logging
from grounding_engine.storage.sqlite_book_store import SQLiteBookStore
from grounding_engine.storage.sqlite_chunk_store import SQLiteChunkStore


async def main(args: argparse.Namespace) -> int:
    settings = Settings()
    setup_logging(settings.log_level, settings.log_json)
    Path(settings.sqlite_db_path).parent.mkdir(parents=True, exist_ok=True)

    book_store = SQLiteBookStore(settings.sqlite_db_path)
    await book_store.initialize()
    chunk_store = SQLiteChunkStore(settings.sqlite_db_path)
    await chunk_store.initialize()

    if args.register and await book_store.get_book(args.book_id) is None:
        await book_store.create_book(args.book_id, args.author_id, args.title)
        print(f"Registered book {args.book_id} for author {args.author_id}")

    content = Path(args.file).read_text(encoding="utf-8")
    indexer = EmbeddingIndexer(
        book_store=book_store,
        chunk_store=chunk_store,
        chunker=WordWindowChunker(
            chunk_size=settings.chunk_size,
            overlap=settings.chunk_overlap,
            min_chunk_chars=settings.min_chunk_chars,
        ),
        embedder=create_embedder(settings),
        batch_size=settings.index_batch_size,
        batch_delay_ms=settings.index_batch_delay_ms,
        min_content_chars=settings.min_content_chars,
    )

    try:
        result = await indexer.reindex(args.book_id, content, args.author_id)
    except GroundingEngineError as e:
        print(f"Re-index failed ({e.code}): {e}", file=sys.stderr)
        return 1

    print(
        f"Indexed {result.chunks_processed}/{result.total_chunks} chunks "
        f"(generation {result.generation})"
    )
    if result.failed_chunks:
        print(f"{result.failed_chunks} chunks failed to embed and were skipped")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Re-index a book's content")
    parser.add_argument("book_id")
    parser.add_argument("file", help="Plain-text file with the book content")
    parser.add_argument("--author-id", required=True, help="Author performing the upload")
    parser.add_argument("--register", action="store_true", help="Create the book if missing")
    parser.add_argument("--title", default="")
    sys.exit(asyncio.run(main(parser.parse_args())))
