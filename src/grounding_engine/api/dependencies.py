"""FastAPI dependency injection helpers."""

from __future__ import annotations

from fastapi import Request

from grounding_engine.config.settings import Settings
from grounding_engine.evaluation.aggregator import ScoreAggregator
from grounding_engine.evaluation.runner import EvaluationRunner
from grounding_engine.indexing.indexer import EmbeddingIndexer
from grounding_engine.retrieval.grounding import GroundingContextBuilder
from grounding_engine.storage.sqlite_book_store import SQLiteBookStore
from grounding_engine.storage.sqlite_chunk_store import SQLiteChunkStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_book_store(request: Request) -> SQLiteBookStore:
    return request.app.state.book_store


def get_chunk_store(request: Request) -> SQLiteChunkStore:
    return request.app.state.chunk_store


def get_indexer(request: Request) -> EmbeddingIndexer:
    return request.app.state.indexer


def get_context_builder(request: Request) -> GroundingContextBuilder:
    return request.app.state.context_builder


def get_aggregator(request: Request) -> ScoreAggregator:
    return request.app.state.aggregator


def get_evaluation_runner(request: Request) -> EvaluationRunner:
    return request.app.state.evaluation_runner
