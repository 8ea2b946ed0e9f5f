"""Evaluation endpoints: classification, multi-judge reports, insights, regression."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends

from grounding_engine.api.dependencies import (
    get_aggregator,
    get_evaluation_runner,
    get_settings,
)
from grounding_engine.api.rate_limiter import rate_limit
from grounding_engine.config.settings import Settings
from grounding_engine.evaluation.aggregator import ScoreAggregator, summarize_batch
from grounding_engine.evaluation.regression import compare_to_baseline, summarize_regression
from grounding_engine.evaluation.runner import EvaluationRunner
from grounding_engine.models.schemas import (
    AlertOut,
    BatchSummaryOut,
    ClassifyRequest,
    ClassifyResponse,
    HeatmapRowOut,
    InsightsRequest,
    InsightsResponse,
    RegressionRequest,
    RegressionResponse,
    ReportRequest,
    ReportResponse,
)

router = APIRouter(prefix="/evaluations", tags=["evaluations"])


@router.post("/classify", response_model=ClassifyResponse)
async def classify(
    body: ClassifyRequest,
    runner: EvaluationRunner = Depends(get_evaluation_runner),
    _auth: dict = Depends(rate_limit),
) -> ClassifyResponse:
    run = await runner.run(
        body.scores,
        suggestions=body.suggestions,
        feedback=body.feedback,
        character=body.character.model_dump() if body.character else None,
        character_id=body.character_id,
    )
    return ClassifyResponse(
        total_score=run.result.total_score,
        passed=run.result.passed,
        rating=run.result.rating,
        suggestions=run.result.suggestions,
        definition_hash=run.definition_hash,
        alerts=[AlertOut(**asdict(a)) for a in run.alerts],
    )


@router.post("/report", response_model=ReportResponse)
async def report(
    body: ReportRequest,
    aggregator: ScoreAggregator = Depends(get_aggregator),
    _auth: dict = Depends(rate_limit),
) -> ReportResponse:
    reports = [r.to_domain() for r in body.reports]
    return ReportResponse(
        averages={r.judge_id: aggregator.averages(r) for r in reports},
        heatmap=[HeatmapRowOut(**asdict(row)) for row in aggregator.heatmap(reports)],
        concerns=sorted(aggregator.concerns(reports, body.exclude_judge_id)),
        batches=[BatchSummaryOut(**asdict(summarize_batch(r))) for r in reports],
    )


@router.post("/insights", response_model=InsightsResponse)
async def insights(
    body: InsightsRequest,
    aggregator: ScoreAggregator = Depends(get_aggregator),
    _auth: dict = Depends(rate_limit),
) -> InsightsResponse:
    insight = aggregator.insights([r.to_domain() for r in body.reports], body.dimension)
    return InsightsResponse(**asdict(insight))


@router.post("/regression", response_model=RegressionResponse)
async def regression(
    body: RegressionRequest,
    settings: Settings = Depends(get_settings),
    _auth: dict = Depends(rate_limit),
) -> RegressionResponse:
    tolerance = body.tolerance if body.tolerance is not None else settings.regression_tolerance
    summary = summarize_regression(
        compare_to_baseline(g.golden_id, g.baseline, g.new, tolerance) for g in body.results
    )
    return RegressionResponse(**asdict(summary))
