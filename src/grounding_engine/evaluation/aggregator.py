"""Multi-judge score aggregation: dimension averages, heatmap variance, concerns, insights."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal

from grounding_engine.config.constants import (
    DIMENSION_KEYS,
    SEVERITY_FLOOR,
    SEVERITY_LADDER,
    SUGGESTION_TEMPLATE_MARKER,
)
from grounding_engine.config.settings import Settings
from grounding_engine.models.domain import (
    BatchSummary,
    DimensionInsight,
    HeatmapRow,
    JudgeFeedback,
    JudgeReport,
    LowScorer,
)


def round_score(value: float, places: int = 1) -> float:
    """Round half away from zero on the exact binary value, as score labels display it.

    4.25 is exact and rounds to 4.3; 4.35 is stored just below and rounds to 4.3.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def dimension_averages(
    report: JudgeReport, dimensions: Sequence[str] = DIMENSION_KEYS
) -> dict[str, float]:
    """Per-dimension mean over the results that scored that dimension.

    Results missing a dimension are ignored for it; an unscored dimension is 0.
    """
    totals = dict.fromkeys(dimensions, 0.0)
    counts = dict.fromkeys(dimensions, 0)
    for result in report.results:
        if not result.scores:
            continue
        for dim in dimensions:
            score = result.scores.get(dim)
            if score is not None:
                totals[dim] += score
                counts[dim] += 1
    return {
        dim: round_score(totals[dim] / counts[dim]) if counts[dim] else 0.0
        for dim in dimensions
    }


def severity_for(score: float) -> str:
    for floor, label in SEVERITY_LADDER:
        if score >= floor:
            return label
    return SEVERITY_FLOOR


def build_heatmap(
    reports: Sequence[JudgeReport],
    dimensions: Sequence[str] = DIMENSION_KEYS,
    variance_threshold: float = 1.0,
    attention_threshold: float = 4.0,
) -> list[HeatmapRow]:
    """One row per dimension with every judge's average.

    A row is high-variance when max - min of the judge averages exceeds
    ``variance_threshold`` (strictly).
    """
    averages = {report.judge_id: dimension_averages(report, dimensions) for report in reports}
    rows: list[HeatmapRow] = []
    for dim in dimensions:
        judge_averages = {judge_id: avgs[dim] for judge_id, avgs in averages.items()}
        values = list(judge_averages.values())
        # averages carry one decimal; rounding removes float noise at the boundary
        spread = round(max(values) - min(values), 4) if values else 0.0
        mean = sum(values) / len(values) if values else 0.0
        rows.append(
            HeatmapRow(
                dimension=dim,
                judge_averages=judge_averages,
                severities={j: severity_for(v) for j, v in judge_averages.items()},
                spread=spread,
                mean=round(mean, 4),
                high_variance=spread > variance_threshold,
                needs_attention=bool(values) and mean < attention_threshold,
            )
        )
    return rows


def aggregate_concerns(
    reports: Iterable[JudgeReport],
    exclude_judge_id: str | None = None,
    placeholder: str = "List any specific concerns",
) -> set[str]:
    """Distinct concerns raised by every judge except ``exclude_judge_id``."""
    concerns: set[str] = set()
    for report in reports:
        if report.judge_id == exclude_judge_id:
            continue
        for result in report.results:
            concerns.update(result.concerns or ())
    concerns.discard("")
    concerns.discard(placeholder)
    return concerns


def dimension_insights(
    reports: Sequence[JudgeReport],
    dimension: str,
    low_score_threshold: float = 3.0,
    max_suggestions: int = 5,
) -> DimensionInsight:
    judge_feedback: list[JudgeFeedback] = []
    low_scorers: list[LowScorer] = []
    suggestions: list[str] = []

    for report in reports:
        first_feedback = None
        for result in report.results:
            if first_feedback is None and result.feedback and result.feedback.get(dimension):
                first_feedback = result.feedback[dimension]
            score = (result.scores or {}).get(dimension)
            if score and score <= low_score_threshold:
                low_scorers.append(
                    LowScorer(conv_id=result.conv_id, category=result.category, score=score)
                )
            suggestions.extend(result.suggestions or ())
        judge_feedback.append(
            JudgeFeedback(
                judge_id=report.judge_id,
                judge_name=report.judge_name,
                average=dimension_averages(report, (dimension,))[dimension],
                feedback=first_feedback,
            )
        )

    # dict.fromkeys keeps first-seen order while deduplicating
    distinct = [
        s for s in dict.fromkeys(suggestions) if s and SUGGESTION_TEMPLATE_MARKER not in s
    ]
    return DimensionInsight(
        dimension=dimension,
        judge_feedback=judge_feedback,
        low_scorers=low_scorers,
        suggestions=distinct[:max_suggestions],
    )


def summarize_batch(report: JudgeReport) -> BatchSummary:
    scored = [r for r in report.results if r.error is None and r.total_score is not None]
    average = sum(r.total_score for r in scored) / len(scored) if scored else 0.0
    return BatchSummary(
        judge_id=report.judge_id,
        scored_count=len(scored),
        error_count=sum(1 for r in report.results if r.error is not None),
        average_total=round(average, 2),
    )


class ScoreAggregator:
    """Settings-bound facade over the aggregation functions."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def averages(self, report: JudgeReport) -> dict[str, float]:
        return dimension_averages(report)

    def heatmap(self, reports: Sequence[JudgeReport]) -> list[HeatmapRow]:
        return build_heatmap(
            reports,
            variance_threshold=self._settings.variance_threshold,
            attention_threshold=self._settings.attention_threshold,
        )

    def concerns(
        self, reports: Sequence[JudgeReport], exclude_judge_id: str | None = None
    ) -> set[str]:
        return aggregate_concerns(
            reports,
            exclude_judge_id=exclude_judge_id or self._settings.primary_judge_id,
            placeholder=self._settings.concern_placeholder,
        )

    def insights(self, reports: Sequence[JudgeReport], dimension: str) -> DimensionInsight:
        return dimension_insights(
            reports,
            dimension,
            low_score_threshold=self._settings.low_score_threshold,
            max_suggestions=self._settings.max_insight_suggestions,
        )
