"""Unit tests for engagement scoring and the score ladders."""
from __future__ import annotations

import pytest

from src.core.entities import ClassificationTier, UserRecord
from src.infrastructure.classification.engagement import (
    EmailDomainRule,
    EngagementScorer,
    score_band,
    score_user,
    tier_for_score,
)


def make_record(given: str = "", family: str = "", email: str = "") -> UserRecord:
    return UserRecord(given_name=given, family_name=family, email=email)


@pytest.mark.parametrize(
    ("given", "family", "expected"),
    [
        ("Ab", "", 0),  # "Ab" -> 2
        ("Ab", "c", 0),  # "Ab c" -> 4
        ("Jo", "Li", 10),  # "Jo Li" -> 5
        ("Ana", "Lopez", 10),  # 9
        ("Ana", "Lopezz", 10),  # 10
        ("Ana", "Lopezzz", 20),  # 11
        ("", "", 0),
    ],
)
def test_name_points_step_function(given: str, family: str, expected: int) -> None:
    assert EngagementScorer().name_points(make_record(given, family)) == expected


def test_internal_whitespace_counts_towards_name_length() -> None:
    record = make_record("  A", "B  ")

    assert record.full_name == "A B"
    assert EngagementScorer().name_points(record) == 0


@pytest.mark.parametrize(
    ("email", "expected"),
    [
        ("a@GMAIL.com", 40),
        ("a@gmail.com", 40),
        ("a@hotmail.com", 20),
        ("a@yahoo.com", 10),
        ("a@", 10),
        ("sin-arroba", 10),
        ("", 10),
    ],
)
def test_email_points_by_domain(email: str, expected: int) -> None:
    assert EngagementScorer().email_points(make_record(email=email)) == expected


def test_concrete_scenario_ana_lopez() -> None:
    score = score_user(make_record("Ana", "Lopez", "ana@gmail.com"))

    assert score == 50
    assert tier_for_score(score) is ClassificationTier.LUCHADOR
    assert score_band(score) == "alto"


def test_concrete_scenario_jo_li() -> None:
    score = score_user(make_record("Jo", "Li", "jo@yahoo.com"))

    assert score == 20
    assert tier_for_score(score) is ClassificationTier.OLVIDADO
    assert score_band(score) == "bajo"


@pytest.mark.parametrize(
    ("score", "expected"),
    [
        (60, ClassificationTier.HECHICERO),
        (59, ClassificationTier.LUCHADOR),
        (40, ClassificationTier.LUCHADOR),
        (39, ClassificationTier.EXPLORADOR),
        (30, ClassificationTier.EXPLORADOR),
        (29, ClassificationTier.OLVIDADO),
        (0, ClassificationTier.OLVIDADO),
    ],
)
def test_score_ladder_never_yields_new(score: int, expected: ClassificationTier) -> None:
    assert tier_for_score(score) is expected


def test_maximum_score_is_sixty() -> None:
    assert score_user(make_record("Maximiliano", "Gonzalez", "max@gmail.com")) == 60


def test_score_band_thresholds() -> None:
    assert score_band(50) == "alto"
    assert score_band(49) == "medio"
    assert score_band(30) == "medio"
    assert score_band(29) == "bajo"


def test_record_from_mapping_tolerates_missing_fields() -> None:
    record = UserRecord.from_mapping({"nombre": None, "correoElectronico": "x@hotmail.com"})

    assert record.given_name == ""
    assert record.family_name == ""
    assert score_user(record) == 20


def test_scorer_from_config_overrides_rules() -> None:
    scorer = EngagementScorer.from_config(
        {
            "email_domains": [{"suffix": "@Empresa.do", "points": 50}],
            "default_domain_points": 5,
            "score_tiers": [{"tier": "Hechicero", "min": 55}],
        }
    )

    assert scorer.email_points(make_record(email="ceo@empresa.do")) == 50
    assert scorer.email_points(make_record(email="ceo@gmail.com")) == 5
    assert scorer.tier_for(55) is ClassificationTier.HECHICERO
    assert scorer.tier_for(54) is ClassificationTier.OLVIDADO


def test_scorer_rejects_new_tier_in_score_ladder() -> None:
    with pytest.raises(ValueError):
        EngagementScorer(score_tiers=[(10, ClassificationTier.NUEVO)])


def test_scorer_from_config_rejects_unknown_tier() -> None:
    with pytest.raises(ValueError):
        EngagementScorer.from_config({"score_tiers": [{"tier": "Mago", "min": 10}]})


def test_domain_rules_are_case_insensitive() -> None:
    scorer = EngagementScorer(domain_rules=[EmailDomainRule(suffix="@OUTLOOK.COM", points=30)])

    assert scorer.email_points(make_record(email="Someone@Outlook.com")) == 30


def test_directly_built_record_with_none_fields_is_scored() -> None:
    assert score_user(UserRecord("Ana", None, None)) == 10  # type: ignore[arg-type]
    assert score_user(UserRecord("Ana", None, "a@yahoo.com")) == 10  # type: ignore[arg-type]

    record = UserRecord(None, None, None)  # type: ignore[arg-type]
    assert record.full_name == ""
    assert score_user(record) == 10


def test_name_length_counts_utf16_code_units() -> None:
    scorer = EngagementScorer()

    # "Jo 😀" is 4 code points but 5 UTF-16 units.
    assert scorer.name_points(make_record("Jo", "😀")) == 10
    # "Ana Lo 😀😀" is 9 code points but 11 UTF-16 units.
    assert scorer.name_points(make_record("Ana", "Lo 😀😀")) == 20
    assert scorer.name_points(make_record("José", "Peña")) == 10
