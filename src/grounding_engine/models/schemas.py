"""Pydantic models for API request/response serialization."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from grounding_engine.models.domain import JudgeReport, JudgeResult


class IndexRequest(BaseModel):
    content: str


class IndexResponse(BaseModel):
    success: bool
    chunks_processed: int
    total_chunks: int


class ContextRequest(BaseModel):
    message: str
    top_k: int | None = Field(default=None, ge=1, le=50)


class PassageOut(BaseModel):
    content: str
    similarity: float
    chunk_index: int


class ContextResponse(BaseModel):
    book_id: str
    context: str
    passages: list[PassageOut]


class CharacterIn(BaseModel):
    name: str | None = None
    role: str | None = None
    personality: str | None = None
    instructions: str | None = None
    knowledge: list[str] | str | None = None
    voice: str | None = None


class ClassifyRequest(BaseModel):
    scores: dict[str, float]
    suggestions: list[str] = Field(default_factory=list)
    feedback: dict[str, str] = Field(default_factory=dict)
    character: CharacterIn | None = None
    character_id: str | None = None


class AlertOut(BaseModel):
    dimension: str
    type: Literal["drift_drop", "safety_risk"]
    value: float
    previous_average: float | None = None
    delta: float | None = None


class ClassifyResponse(BaseModel):
    total_score: float
    passed: bool
    rating: Literal["excellent", "good", "acceptable", "needs_work", "not_ready"]
    suggestions: list[str]
    definition_hash: str | None = None
    alerts: list[AlertOut] = Field(default_factory=list)


class JudgeResultIn(BaseModel):
    conv_id: str
    category: str = ""
    scores: dict[str, float] | None = None
    feedback: dict[str, str] | None = None
    total_score: float | None = None
    concerns: list[str] | None = None
    suggestions: list[str] | None = None
    verdict: str | None = None
    error: str | None = None


class JudgeReportIn(BaseModel):
    judge_id: str
    judge_name: str = ""
    results: list[JudgeResultIn] = Field(default_factory=list)

    def to_domain(self) -> JudgeReport:
        return JudgeReport(
            judge_id=self.judge_id,
            judge_name=self.judge_name or self.judge_id,
            results=[JudgeResult(**r.model_dump()) for r in self.results],
        )


class ReportRequest(BaseModel):
    reports: list[JudgeReportIn]
    exclude_judge_id: str | None = None


class HeatmapRowOut(BaseModel):
    dimension: str
    judge_averages: dict[str, float]
    severities: dict[str, str]
    spread: float
    mean: float
    high_variance: bool
    needs_attention: bool


class BatchSummaryOut(BaseModel):
    judge_id: str
    scored_count: int
    error_count: int
    average_total: float


class ReportResponse(BaseModel):
    averages: dict[str, dict[str, float]]
    heatmap: list[HeatmapRowOut]
    concerns: list[str]
    batches: list[BatchSummaryOut]


class InsightsRequest(BaseModel):
    reports: list[JudgeReportIn]
    dimension: str


class JudgeFeedbackOut(BaseModel):
    judge_id: str
    judge_name: str
    average: float
    feedback: str | None = None


class LowScorerOut(BaseModel):
    conv_id: str
    category: str
    score: float


class InsightsResponse(BaseModel):
    dimension: str
    judge_feedback: list[JudgeFeedbackOut]
    low_scorers: list[LowScorerOut]
    suggestions: list[str]


class GoldenResult(BaseModel):
    golden_id: str
    baseline: dict[str, float]
    new: dict[str, float]


class RegressionRequest(BaseModel):
    results: list[GoldenResult]
    tolerance: float | None = Field(default=None, ge=0)


class DimensionComparisonOut(BaseModel):
    baseline: float
    new: float
    delta: float
    passed: bool


class RegressionComparisonOut(BaseModel):
    golden_id: str
    passed: bool
    baseline_total: float
    new_total: float
    dimensions: dict[str, DimensionComparisonOut]


class RegressionResponse(BaseModel):
    total_golden: int
    passed: int
    all_passed: bool
    results: list[RegressionComparisonOut]


class HealthResponse(BaseModel):
    status: str
    book_count: int
    chunk_count: int
    embedding_provider: str
