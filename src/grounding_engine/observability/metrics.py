"""Metric recording helpers: one structured log record per job or call."""

from __future__ import annotations

from grounding_engine.observability.logger import get_logger

logger = get_logger("metrics")


def log_indexing_metrics(
    book_id: str,
    generation: int,
    total_chunks: int,
    chunks_processed: int,
    batches: int,
    duration_ms: float,
) -> None:
    logger.info(
        "indexing_metrics",
        book_id=book_id,
        generation=generation,
        total_chunks=total_chunks,
        chunks_processed=chunks_processed,
        chunks_failed=total_chunks - chunks_processed,
        batches=batches,
        duration_ms=round(duration_ms, 2),
    )


def log_retrieval_metrics(
    book_id: str,
    candidates: int,
    returned: int,
    top_similarities: list[float],
) -> None:
    logger.info(
        "retrieval_metrics",
        book_id=book_id,
        candidates=candidates,
        returned=returned,
        top_similarities=[round(s, 4) for s in top_similarities[:5]],
    )


def log_evaluation_metrics(
    total_score: float,
    passed: bool,
    rating: str,
    definition_hash: str | None = None,
    alerts: int = 0,
) -> None:
    logger.info(
        "evaluation_metrics",
        total_score=total_score,
        passed=passed,
        rating=rating,
        definition_hash=definition_hash,
        alerts=alerts,
    )
