"""OpenAI embedding provider."""

from __future__ import annotations

from openai import AsyncOpenAI

from grounding_engine.exceptions import EmbeddingError
from grounding_engine.observability.logger import get_logger

logger = get_logger("embeddings")


class OpenAIEmbedder:
    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-small",
        dimensions: int = 1536,
    ) -> None:
        self._client = AsyncOpenAI(api_key=api_key)
        self._model = model
        self._dimensions = dimensions

    @property
    def model(self) -> str:
        return self._model

    @property
    def dimensions(self) -> int:
        return self._dimensions

    async def embed(self, text: str) -> list[float]:
        try:
            response = await self._client.embeddings.create(input=[text], model=self._model)
            embedding = response.data[0].embedding
        except Exception as e:
            raise EmbeddingError(f"OpenAI embedding failed ({len(text)} chars): {e}") from e
        logger.debug("embedded_text", chars=len(text), model=self._model)
        return embedding
