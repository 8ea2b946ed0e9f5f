"""Evaluation result classification: total score, pass gate, rating band."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from grounding_engine.config.constants import (
    DIMENSION_KEYS,
    MAX_DIMENSION_SCORE,
    MIN_DIMENSION_SCORE,
)
from grounding_engine.config.settings import Settings
from grounding_engine.exceptions import ConfigurationError, ValidationError
from grounding_engine.models.domain import EvaluationResult
from grounding_engine.observability.logger import get_logger

logger = get_logger("classifier")


@dataclass(frozen=True)
class RatingBands:
    """Inclusive lower bounds of each rating; anything below needs_work is not_ready."""

    excellent: float = 32
    good: float = 28
    acceptable: float = 21
    needs_work: float = 14

    def __post_init__(self) -> None:
        if not self.excellent >= self.good >= self.acceptable >= self.needs_work:
            raise ConfigurationError(
                "Rating bands must be non-increasing: "
                f"excellent={self.excellent} good={self.good} "
                f"acceptable={self.acceptable} needs_work={self.needs_work}"
            )

    @classmethod
    def from_settings(cls, settings: Settings) -> RatingBands:
        return cls(
            excellent=settings.rating_excellent_min,
            good=settings.rating_good_min,
            acceptable=settings.rating_acceptable_min,
            needs_work=settings.rating_needs_work_min,
        )

    def rate(self, total_score: float) -> str:
        if total_score >= self.excellent:
            return "excellent"
        if total_score >= self.good:
            return "good"
        if total_score >= self.acceptable:
            return "acceptable"
        if total_score >= self.needs_work:
            return "needs_work"
        return "not_ready"


class EvaluationClassifier:
    def __init__(
        self,
        pass_threshold: float = 28,
        bands: RatingBands | None = None,
        dimension_count: int = len(DIMENSION_KEYS),
    ) -> None:
        self._pass_threshold = pass_threshold
        self._bands = bands or RatingBands()
        self._dimension_count = dimension_count

    @classmethod
    def from_settings(cls, settings: Settings) -> EvaluationClassifier:
        return cls(
            pass_threshold=settings.pass_threshold,
            bands=RatingBands.from_settings(settings),
        )

    def classify(
        self,
        scores: Mapping[str, float],
        suggestions: Sequence[str] | None = None,
        feedback: Mapping[str, str] | None = None,
    ) -> EvaluationResult:
        self._check_scores(scores)
        total = sum(scores.values())
        unknown = set(scores) - set(DIMENSION_KEYS)
        if unknown:
            logger.debug("nonstandard_dimensions", dimensions=sorted(unknown))
        return EvaluationResult(
            scores=dict(scores),
            total_score=total,
            passed=total >= self._pass_threshold,
            rating=self._bands.rate(total),
            suggestions=list(suggestions or ()),
            feedback=dict(feedback or {}),
        )

    def _check_scores(self, scores: Mapping[str, float]) -> None:
        if len(scores) != self._dimension_count:
            raise ValidationError(
                f"Expected {self._dimension_count} dimension scores, got {len(scores)}."
            )
        for dim, value in scores.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValidationError(f"Score for {dim} must be a number.")
            if not MIN_DIMENSION_SCORE <= value <= MAX_DIMENSION_SCORE:
                raise ValidationError(
                    f"Score for {dim} must be between {MIN_DIMENSION_SCORE} and "
                    f"{MAX_DIMENSION_SCORE}, got {value}."
                )
