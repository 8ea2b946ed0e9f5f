"""Core domain objects used throughout the system."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Chunk:
    book_id: str
    chunk_index: int
    content: str
    embedding: list[float]
    word_count: int
    generation: int = 0
    created_at: datetime = field(default_factory=_utcnow)


@dataclass
class BookIndexMetadata:
    book_id: str
    has_content: bool = False
    chunk_count: int = 0
    content_length: int = 0
    content_updated_at: datetime | None = None
    active_generation: int = 0


@dataclass
class Book:
    book_id: str
    author_id: str
    title: str
    index: BookIndexMetadata
    created_at: datetime = field(default_factory=_utcnow)

    @property
    def has_content(self) -> bool:
        return self.index.has_content


@dataclass
class IndexingResult:
    book_id: str
    chunks_processed: int
    total_chunks: int
    generation: int

    @property
    def failed_chunks(self) -> int:
        return self.total_chunks - self.chunks_processed


@dataclass
class RetrievedPassage:
    content: str
    similarity: float
    chunk_index: int


@dataclass(frozen=True)
class CharacterDefinition:
    """The behavior-relevant subset of a character record."""

    name: str = ""
    role: str = ""
    personality: str = ""
    instructions: str = ""
    knowledge: tuple[str, ...] | str = ()
    voice: str = ""

    @classmethod
    def from_record(cls, record: Mapping) -> CharacterDefinition:
        """Single defaulting point: missing or empty fields become "" / ().

        A non-empty knowledge string is kept as a string and serializes as one.
        """
        knowledge = record.get("knowledge") or ()
        if not isinstance(knowledge, str):
            knowledge = tuple(str(k) for k in knowledge)
        return cls(
            name=str(record.get("name") or ""),
            role=str(record.get("role") or ""),
            personality=str(record.get("personality") or ""),
            instructions=str(record.get("instructions") or ""),
            knowledge=knowledge,
            voice=str(record.get("voice") or ""),
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "role": self.role,
            "personality": self.personality,
            "instructions": self.instructions,
            "knowledge": self.knowledge if isinstance(self.knowledge, str) else list(self.knowledge),
            "voice": self.voice,
        }


@dataclass
class JudgeResult:
    conv_id: str
    category: str
    scores: dict[str, float] | None = None
    feedback: dict[str, str] | None = None
    total_score: float | None = None
    concerns: list[str] | None = None
    suggestions: list[str] | None = None
    verdict: str | None = None
    error: str | None = None


@dataclass
class JudgeReport:
    judge_id: str
    judge_name: str
    results: list[JudgeResult] = field(default_factory=list)


@dataclass
class EvaluationResult:
    scores: dict[str, float]
    total_score: float
    passed: bool
    rating: str
    suggestions: list[str]
    feedback: dict[str, str] = field(default_factory=dict)


@dataclass
class HeatmapRow:
    dimension: str
    judge_averages: dict[str, float]
    severities: dict[str, str]
    spread: float
    mean: float
    high_variance: bool
    needs_attention: bool


@dataclass
class JudgeFeedback:
    judge_id: str
    judge_name: str
    average: float
    feedback: str | None


@dataclass
class LowScorer:
    conv_id: str
    category: str
    score: float


@dataclass
class DimensionInsight:
    dimension: str
    judge_feedback: list[JudgeFeedback]
    low_scorers: list[LowScorer]
    suggestions: list[str]


@dataclass
class BatchSummary:
    judge_id: str
    scored_count: int
    error_count: int
    average_total: float


@dataclass
class DimensionStats:
    count: int = 0
    average: float = 0.0
    last_value: float = 0.0


@dataclass
class CharacterStats:
    character_id: str
    total_evals: int = 0
    dimensions: dict[str, DimensionStats] = field(default_factory=dict)
    last_eval_at: datetime | None = None


@dataclass
class GovernanceAlert:
    dimension: str
    type: str  # "drift_drop", "safety_risk"
    value: float
    previous_average: float | None = None
    delta: float | None = None


@dataclass
class DimensionComparison:
    baseline: float
    new: float
    delta: float
    passed: bool


@dataclass
class RegressionComparison:
    golden_id: str
    passed: bool
    baseline_total: float
    new_total: float
    dimensions: dict[str, DimensionComparison]


@dataclass
class RegressionSummary:
    total_golden: int
    passed: int
    all_passed: bool
    results: list[RegressionComparison]


@dataclass
class EvaluationRun:
    result: EvaluationResult
    definition_hash: str | None = None
    stats: CharacterStats | None = None
    alerts: list[GovernanceAlert] = field(default_factory=list)
