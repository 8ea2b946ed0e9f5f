"""Build the configured embedder."""

from __future__ import annotations

from grounding_engine.config.settings import Settings
from grounding_engine.embeddings.cache import EmbeddingCache
from grounding_engine.embeddings.cached_embedder import CachedEmbedder
from grounding_engine.embeddings.gemini_embedder import GeminiEmbedder
from grounding_engine.embeddings.openai_embedder import OpenAIEmbedder
from grounding_engine.exceptions import ConfigurationError
from grounding_engine.protocols.embedder import Embedder


def create_embedder(settings: Settings) -> Embedder:
    if settings.embedding_provider == "gemini":
        if not settings.google_api_key:
            raise ConfigurationError("GROUNDING_GOOGLE_API_KEY is not configured")
        return GeminiEmbedder(
            api_key=settings.google_api_key,
            model=settings.embedding_model,
            dimensions=settings.embedding_dimensions,
        )
    if not settings.openai_api_key:
        raise ConfigurationError("GROUNDING_OPENAI_API_KEY is not configured")
    return OpenAIEmbedder(
        api_key=settings.openai_api_key,
        model=settings.embedding_model,
        dimensions=settings.embedding_dimensions,
    )


async def create_query_embedder(settings: Settings, embedder: Embedder) -> Embedder:
    """Query-side embedder: the indexing embedder behind a cache when enabled."""
    if not settings.embedding_cache_enabled:
        return embedder
    cache = EmbeddingCache(settings.embedding_cache_db_path)
    await cache.initialize()
    return CachedEmbedder(delegate=embedder, cache=cache, model=settings.embedding_model)
