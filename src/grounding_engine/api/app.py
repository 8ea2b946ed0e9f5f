"""FastAPI application factory with lifespan management."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from grounding_engine.api.auth import router as auth_router
from grounding_engine.api.errors import register_error_handlers
from grounding_engine.api.middleware import RequestContextMiddleware
from grounding_engine.api.rate_limiter import SlidingWindowRateLimiter
from grounding_engine.api.routes_books import router as books_router
from grounding_engine.api.routes_evaluation import router as evaluation_router
from grounding_engine.api.routes_health import router as health_router
from grounding_engine.chunking.word_chunker import WordWindowChunker
from grounding_engine.config.settings import Settings
from grounding_engine.embeddings.factory import create_embedder, create_query_embedder
from grounding_engine.evaluation.aggregator import ScoreAggregator
from grounding_engine.evaluation.classifier import EvaluationClassifier
from grounding_engine.evaluation.drift import DriftMonitor, DriftTracker
from grounding_engine.evaluation.runner import EvaluationRunner
from grounding_engine.indexing.indexer import EmbeddingIndexer
from grounding_engine.observability.logger import get_logger, setup_logging
from grounding_engine.protocols.embedder import Embedder
from grounding_engine.retrieval.grounding import GroundingContextBuilder
from grounding_engine.retrieval.similarity import SimilarityRetriever
from grounding_engine.storage.sqlite_book_store import SQLiteBookStore
from grounding_engine.storage.sqlite_chunk_store import SQLiteChunkStore
from grounding_engine.storage.sqlite_stats_store import SQLiteStatsStore

logger = get_logger("app")


def create_app(settings: Settings | None = None, embedder: Embedder | None = None) -> FastAPI:
    """Build the app. ``embedder`` replaces the configured provider (tests, local runs)."""
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level, settings.log_json)

        for path in [settings.sqlite_db_path, settings.embedding_cache_db_path]:
            Path(path).parent.mkdir(parents=True, exist_ok=True)

        # Storage
        book_store = SQLiteBookStore(settings.sqlite_db_path)
        await book_store.initialize()
        chunk_store = SQLiteChunkStore(settings.sqlite_db_path)
        await chunk_store.initialize()
        stats_store = SQLiteStatsStore(settings.sqlite_db_path)
        await stats_store.initialize()

        # Embedding: documents are embedded once, queries go through the cache
        index_embedder = embedder or create_embedder(settings)
        query_embedder = await create_query_embedder(settings, index_embedder)

        indexer = EmbeddingIndexer(
            book_store=book_store,
            chunk_store=chunk_store,
            chunker=WordWindowChunker(
                chunk_size=settings.chunk_size,
                overlap=settings.chunk_overlap,
                min_chunk_chars=settings.min_chunk_chars,
            ),
            embedder=index_embedder,
            batch_size=settings.index_batch_size,
            batch_delay_ms=settings.index_batch_delay_ms,
            min_content_chars=settings.min_content_chars,
        )
        context_builder = GroundingContextBuilder(
            embedder=query_embedder,
            retriever=SimilarityRetriever(chunk_store, threshold=settings.similarity_threshold),
            top_k=settings.search_top_k,
        )

        # Evaluation
        evaluation_runner = EvaluationRunner(
            classifier=EvaluationClassifier.from_settings(settings),
            tracker=DriftTracker(stats_store, DriftMonitor.from_settings(settings)),
        )

        app.state.book_store = book_store
        app.state.chunk_store = chunk_store
        app.state.indexer = indexer
        app.state.context_builder = context_builder
        app.state.aggregator = ScoreAggregator(settings)
        app.state.evaluation_runner = evaluation_runner
        app.state.rate_limiter = SlidingWindowRateLimiter()

        logger.info(
            "startup_complete",
            books=await book_store.count_books(),
            chunks=await chunk_store.count_chunks(),
            embedding_provider=settings.embedding_provider,
        )

        yield

        logger.info("shutdown_complete")

    app = FastAPI(
        title="Grounding Engine",
        version="1.0.0",
        description="Book-grounded retrieval and character evaluation scoring",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.add_middleware(RequestContextMiddleware)
    register_error_handlers(app)
    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(books_router)
    app.include_router(evaluation_router)
    return app
