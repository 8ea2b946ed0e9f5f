"""Word-window chunker: overlapping fixed-size windows over normalized text."""

from __future__ import annotations

import re

from grounding_engine.exceptions import ConfigurationError

_EXCESS_NEWLINES = re.compile(r"\n{3,}")


def normalize_text(text: str) -> str:
    """CRLF -> LF, collapse 3+ newlines to a paragraph break, trim."""
    return _EXCESS_NEWLINES.sub("\n\n", text.replace("\r\n", "\n")).strip()


def chunk_text(
    text: str,
    chunk_size: int = 400,
    overlap: int = 50,
    min_chunk_chars: int = 50,
) -> list[str]:
    """Split text into windows of ``chunk_size`` words advancing by ``chunk_size - overlap``.

    Text of at most ``chunk_size`` words comes back as one chunk equal to the
    normalized text. Windows whose trimmed length is ``min_chunk_chars`` or less
    are dropped.
    """
    if chunk_size <= 0:
        raise ConfigurationError(f"chunk_size must be positive, got {chunk_size}")
    if overlap < 0 or overlap >= chunk_size:
        raise ConfigurationError(
            f"overlap must be in [0, chunk_size), got overlap={overlap} chunk_size={chunk_size}"
        )

    cleaned = normalize_text(text)
    words = cleaned.split()

    if len(words) <= chunk_size:
        return [cleaned]

    step = chunk_size - overlap
    chunks: list[str] = []
    for start in range(0, len(words), step):
        window = " ".join(words[start : start + chunk_size]).strip()
        if len(window) > min_chunk_chars:
            chunks.append(window)
    return chunks


class WordWindowChunker:
    def __init__(
        self,
        chunk_size: int = 400,
        overlap: int = 50,
        min_chunk_chars: int = 50,
    ) -> None:
        if overlap >= chunk_size:
            raise ConfigurationError(
                f"overlap ({overlap}) must be smaller than chunk_size ({chunk_size})"
            )
        self._chunk_size = chunk_size
        self._overlap = overlap
        self._min_chunk_chars = min_chunk_chars

    def chunk(self, text: str) -> list[str]:
        return chunk_text(
            text,
            chunk_size=self._chunk_size,
            overlap=self._overlap,
            min_chunk_chars=self._min_chunk_chars,
        )

    @staticmethod
    def word_count(fragment: str) -> int:
        return len(fragment.split())
