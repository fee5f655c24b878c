"""Tests for the ScoreUsersUseCase orchestration."""
from __future__ import annotations

from src.core.entities import ClassificationTier, UserRecord
from src.infrastructure.classification.engagement import EngagementScorer
from src.use_cases.score_users import SCORE_COLUMNS, ScoreUsersUseCase


class StubSource:
    def __init__(self, records: list[UserRecord]) -> None:
        self.records = records
        self.calls = 0

    def list_users(self) -> list[UserRecord]:
        self.calls += 1
        return self.records


def test_use_case_scores_every_record() -> None:
    source = StubSource(
        [
            UserRecord(given_name="Ana", family_name="Lopez", email="ana@gmail.com", user_id="1"),
            UserRecord(given_name="Jo", family_name="Li", email="jo@yahoo.com", user_id="2"),
            UserRecord(given_name="Maximiliano", family_name="Gonzalez", email="max@gmail.com"),
        ]
    )
    use_case = ScoreUsersUseCase(source, EngagementScorer())

    scored = use_case.execute()

    assert source.calls == 1
    assert [item.score for item in scored] == [50, 20, 60]
    assert [item.tier for item in scored] == [
        ClassificationTier.LUCHADOR,
        ClassificationTier.OLVIDADO,
        ClassificationTier.HECHICERO,
    ]
    assert [item.band for item in scored] == ["alto", "bajo", "alto"]


def test_to_frame_uses_spanish_headers() -> None:
    use_case = ScoreUsersUseCase(StubSource([]), EngagementScorer())
    scored = use_case.score_records(
        [UserRecord(given_name="Ana", family_name="Lopez", email="ana@hotmail.com", national_id="001")]
    )

    frame = use_case.to_frame(scored)

    assert list(frame.columns) == list(SCORE_COLUMNS)
    row = frame.iloc[0]
    assert row["Puntaje"] == 30
    assert row["Nivel"] == "medio"
    assert row["Clasificación"] == "Explorador"
    assert row["Cédula"] == "001"


def test_to_frame_with_no_users_is_empty() -> None:
    frame = ScoreUsersUseCase.to_frame([])

    assert frame.empty
    assert list(frame.columns) == list(SCORE_COLUMNS)
