"""Rolling per-dimension evaluation stats and governance alerts.

Each new evaluation folds into a cumulative moving average per dimension. A
``drift_drop`` alert fires when a score falls more than the configured delta
below an established average; a ``safety_risk`` alert fires when a safety
dimension scores under its floor.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone

from grounding_engine.config.settings import Settings
from grounding_engine.models.domain import CharacterStats, DimensionStats, GovernanceAlert
from grounding_engine.observability.logger import get_logger
from grounding_engine.protocols.stores import StatsStore

logger = get_logger("drift")


class DriftMonitor:
    def __init__(
        self,
        drop_threshold: float = 1.0,
        min_history: int = 3,
        safety_dimensions: frozenset[str] = frozenset(),
        safety_min_score: float = 4.0,
    ) -> None:
        self._drop_threshold = drop_threshold
        self._min_history = min_history
        self._safety_dimensions = safety_dimensions
        self._safety_min_score = safety_min_score

    @classmethod
    def from_settings(cls, settings: Settings) -> DriftMonitor:
        return cls(
            drop_threshold=settings.drift_drop_threshold,
            min_history=settings.drift_min_history,
            safety_dimensions=settings.safety_dimension_set,
            safety_min_score=settings.safety_min_score,
        )

    def update(
        self,
        stats: CharacterStats,
        scores: Mapping[str, float],
        evaluated_at: datetime | None = None,
    ) -> tuple[CharacterStats, list[GovernanceAlert]]:
        """Fold ``scores`` into ``stats``. Returns new stats and the alerts raised."""
        dimensions = dict(stats.dimensions)
        alerts: list[GovernanceAlert] = []

        for dim, value in scores.items():
            current = dimensions.get(dim, DimensionStats())
            old_avg = current.average

            if current.count > self._min_history and old_avg - value > self._drop_threshold:
                alerts.append(
                    GovernanceAlert(
                        dimension=dim,
                        type="drift_drop",
                        value=value,
                        previous_average=round(old_avg, 2),
                        delta=round(old_avg - value, 2),
                    )
                )
            if dim in self._safety_dimensions and value < self._safety_min_score:
                alerts.append(GovernanceAlert(dimension=dim, type="safety_risk", value=value))

            new_avg = (old_avg * current.count + value) / (current.count + 1)
            dimensions[dim] = DimensionStats(
                count=current.count + 1,
                average=round(new_avg, 2),
                last_value=value,
            )

        updated = CharacterStats(
            character_id=stats.character_id,
            total_evals=stats.total_evals + 1,
            dimensions=dimensions,
            last_eval_at=evaluated_at or datetime.now(timezone.utc),
        )
        return updated, alerts


class DriftTracker:
    """Loads, updates and persists a character's rolling stats."""

    def __init__(self, store: StatsStore, monitor: DriftMonitor) -> None:
        self._store = store
        self._monitor = monitor

    async def record(
        self, character_id: str, scores: Mapping[str, float]
    ) -> tuple[CharacterStats, list[GovernanceAlert]]:
        alerts: list[GovernanceAlert] = []

        def apply(stats: CharacterStats) -> CharacterStats:
            updated, raised = self._monitor.update(stats, scores)
            alerts[:] = raised
            return updated

        updated = await self._store.update_stats(character_id, apply)
        if alerts:
            logger.warning(
                "governance_alerts",
                character_id=character_id,
                alerts=[f"{a.type}:{a.dimension}" for a in alerts],
            )
        return updated, alerts
