"""Google Gemini embedding provider using the google-genai SDK."""

from __future__ import annotations

from google import genai
from google.genai import types

from grounding_engine.exceptions import EmbeddingError
from grounding_engine.observability.logger import get_logger

logger = get_logger("gemini_embeddings")


class GeminiEmbedder:
    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-004",
        dimensions: int = 768,
    ) -> None:
        self._client = genai.Client(api_key=api_key)
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
            response = await self._client.aio.models.embed_content(
                model=self._model,
                contents=text,
                config=types.EmbedContentConfig(output_dimensionality=self._dimensions),
            )
        except Exception as e:
            raise EmbeddingError(f"Gemini embedding failed ({len(text)} chars): {e}") from e
        if not response.embeddings or response.embeddings[0].values is None:
            raise EmbeddingError("Gemini returned no embedding values")
        logger.debug("embedded_text", chars=len(text), model=self._model)
        return list(response.embeddings[0].values)
