"""Caching wrapper around an Embedder that stores results in SQLite."""

from __future__ import annotations

from grounding_engine.embeddings.cache import EmbeddingCache
from grounding_engine.observability.logger import get_logger
from grounding_engine.protocols.embedder import Embedder

logger = get_logger("cached_embedder")


class CachedEmbedder:
    """Wraps any Embedder, checks EmbeddingCache first, calls delegate on a miss.

    Failures of the delegate are not cached.
    """

    def __init__(self, delegate: Embedder, cache: EmbeddingCache, model: str) -> None:
        self._delegate = delegate
        self._cache = cache
        self._model = model

    @property
    def dimensions(self) -> int:
        return self._delegate.dimensions

    async def embed(self, text: str) -> list[float]:
        cached = await self._cache.get(self._model, text)
        if cached is not None:
            logger.debug("embed_cache_hit", chars=len(text))
            return cached

        embedding = await self._delegate.embed(text)
        await self._cache.put(self._model, text, embedding)
        logger.debug("embed_cache_miss", chars=len(text))
        return embedding
