"""Use case for scoring a listing of user records."""
from __future__ import annotations

from typing import Protocol, Sequence

import pandas as pd

from src.core.entities import ClassificationTier, ScoredUser, UserRecord
from src.infrastructure.classification.engagement import score_band
from src.utils.logger import logger

SCORE_COLUMNS: tuple[str, ...] = (
    "ID",
    "Nombre",
    "Apellidos",
    "Cédula",
    "Correo",
    "Último acceso",
    "Puntaje",
    "Nivel",
    "Clasificación",
)


class UserRecordSource(Protocol):
    def list_users(self) -> list[UserRecord]:
        ...


class Scorer(Protocol):
    def score(self, record: UserRecord) -> int:
        ...

    def tier_for(self, score: int) -> ClassificationTier:
        ...


class ScoreUsersUseCase:
    """Fetch user records and attach their engagement score and tier."""

    def __init__(self, source: UserRecordSource, scorer: Scorer) -> None:
        self._source = source
        self._scorer = scorer

    def execute(self) -> list[ScoredUser]:
        records = self._source.list_users()
        logger.info("Scoring {} users", len(records))
        return self.score_records(records)

    def score_records(self, records: Sequence[UserRecord]) -> list[ScoredUser]:
        scored: list[ScoredUser] = []
        for record in records:
            score = self._scorer.score(record)
            scored.append(
                ScoredUser(
                    record=record,
                    score=score,
                    tier=self._scorer.tier_for(score),
                    band=score_band(score),
                )
            )
        return scored

    @staticmethod
    def to_frame(scored: Sequence[ScoredUser]) -> pd.DataFrame:
        rows = [
            {
                "ID": item.record.user_id or "",
                "Nombre": item.record.given_name,
                "Apellidos": item.record.family_name,
                "Cédula": item.record.national_id or "",
                "Correo": item.record.email,
                "Último acceso": item.record.last_access or "",
                "Puntaje": item.score,
                "Nivel": item.band,
                "Clasificación": item.tier.value,
            }
            for item in scored
        ]
        return pd.DataFrame(rows, columns=list(SCORE_COLUMNS))


__all__ = ["SCORE_COLUMNS", "ScoreUsersUseCase"]
