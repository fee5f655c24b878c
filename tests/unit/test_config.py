"""Unit tests for configuration loading and builders."""
from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from src.core.entities import ClassificationTier, UserRecord
from src.utils.config import (
    build_engagement_scorer,
    build_recency_classifier,
    get_api_timeout,
    get_log_level,
    get_path,
    get_users_url,
    load_config,
)

ROOT = Path(__file__).resolve().parents[2]


def test_default_config_matches_built_in_rules(fixed_now: datetime) -> None:
    config = load_config(ROOT / "configs" / "config.yaml")

    scorer = build_engagement_scorer(config)
    classifier = build_recency_classifier(config)

    record = UserRecord(given_name="Ana", family_name="Lopez", email="ana@gmail.com")
    assert scorer.score(record) == 50
    assert scorer.tier_for(50) is ClassificationTier.LUCHADOR
    assert classifier.classify(fixed_now - timedelta(hours=168), reference_time=fixed_now) is (
        ClassificationTier.EXPLORADOR
    )
    assert get_users_url(config) == "http://localhost:5145/api/User"
    assert get_log_level(config) == "INFO"
    assert get_path(config, "session_store") == Path("data/session_store.json")


def test_empty_config_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")

    config = load_config(path)

    assert build_engagement_scorer(config).score(UserRecord("Jo", "Li", "jo@yahoo.com")) == 20
    assert build_recency_classifier(config).thresholds.luchador_hours == 48
    assert get_users_url(config) is None
    assert get_api_timeout(config) == 10.0
    assert get_path(config, "users_csv") is None


def test_config_must_be_a_mapping(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("- uno\n- dos\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(path)


def test_recency_overrides_are_applied(tmp_path: Path, fixed_now: datetime) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        "classification:\n  recency:\n    hechicero_hours: 2\n",
        encoding="utf-8",
    )

    classifier = build_recency_classifier(load_config(path))

    assert classifier.classify(fixed_now - timedelta(hours=3), reference_time=fixed_now) is (
        ClassificationTier.LUCHADOR
    )
