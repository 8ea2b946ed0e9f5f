"""SQLite-backed rolling evaluation stats per character."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import asdict
from datetime import datetime

import aiosqlite

from grounding_engine.models.domain import CharacterStats, DimensionStats
from grounding_engine.storage.migrations import initialize_db

SELECT_STATS = "SELECT * FROM character_stats WHERE character_id = ?"
UPSERT_STATS = (
    "INSERT OR REPLACE INTO character_stats "
    "(character_id, total_evals, dimensions, last_eval_at) VALUES (?, ?, ?, ?)"
)


class SQLiteStatsStore:
    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    async def initialize(self) -> None:
        await initialize_db(self._db_path)

    async def get_stats(self, character_id: str) -> CharacterStats | None:
        async with aiosqlite.connect(self._db_path) as db:
            db.row_factory = aiosqlite.Row
            async with db.execute(SELECT_STATS, (character_id,)) as cursor:
                row = await cursor.fetchone()
                return self._row_to_stats(row) if row is not None else None

    async def save_stats(self, stats: CharacterStats) -> None:
        async with aiosqlite.connect(self._db_path) as db:
            await db.execute(UPSERT_STATS, self._stats_params(stats))
            await db.commit()

    async def update_stats(
        self,
        character_id: str,
        apply: Callable[[CharacterStats], CharacterStats],
    ) -> CharacterStats:
        """Read, transform and write a character's stats in one write transaction.

        Concurrent updates of the same character serialize on the database lock,
        so none is lost. A character without stats starts from empty ones.
        """
        async with aiosqlite.connect(self._db_path) as db:
            db.row_factory = aiosqlite.Row
            await db.execute("BEGIN IMMEDIATE")
            async with db.execute(SELECT_STATS, (character_id,)) as cursor:
                row = await cursor.fetchone()
            current = self._row_to_stats(row) if row is not None else CharacterStats(character_id)
            updated = apply(current)
            await db.execute(UPSERT_STATS, self._stats_params(updated))
            await db.commit()
        return updated

    @staticmethod
    def _stats_params(stats: CharacterStats) -> tuple:
        return (
            stats.character_id,
            stats.total_evals,
            json.dumps({k: asdict(v) for k, v in stats.dimensions.items()}),
            stats.last_eval_at.isoformat() if stats.last_eval_at else None,
        )

    @staticmethod
    def _row_to_stats(row: aiosqlite.Row) -> CharacterStats:
        last_eval_at = row["last_eval_at"]
        return CharacterStats(
            character_id=row["character_id"],
            total_evals=row["total_evals"],
            dimensions={
                key: DimensionStats(**value) for key, value in json.loads(row["dimensions"]).items()
            },
            last_eval_at=datetime.fromisoformat(last_eval_at) if last_eval_at else None,
        )
