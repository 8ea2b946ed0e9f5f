"""Evaluation run: classify one run, fingerprint the character, update its stats."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from grounding_engine.evaluation.classifier import EvaluationClassifier
from grounding_engine.evaluation.drift import DriftTracker
from grounding_engine.hashing.definition_hash import definition_hash
from grounding_engine.models.domain import EvaluationRun
from grounding_engine.observability.metrics import log_evaluation_metrics


class EvaluationRunner:
    def __init__(self, classifier: EvaluationClassifier, tracker: DriftTracker | None = None) -> None:
        self._classifier = classifier
        self._tracker = tracker

    async def run(
        self,
        scores: Mapping[str, float],
        suggestions: Sequence[str] | None = None,
        feedback: Mapping[str, str] | None = None,
        character: Mapping | None = None,
        character_id: str | None = None,
    ) -> EvaluationRun:
        """Classification always happens; hashing and drift only when their inputs are given."""
        result = self._classifier.classify(scores, suggestions, feedback)
        run = EvaluationRun(result=result)

        if character is not None:
            run.definition_hash = definition_hash(character)
        if character_id and self._tracker is not None:
            run.stats, run.alerts = await self._tracker.record(character_id, result.scores)

        log_evaluation_metrics(
            total_score=result.total_score,
            passed=result.passed,
            rating=result.rating,
            definition_hash=run.definition_hash,
            alerts=len(run.alerts),
        )
        return run
