"""YAML configuration loading and component builders."""
from __future__ import annotations

from pathlib import Path
from typing import Optional, TypedDict, cast

import yaml

from src.infrastructure.classification.engagement import EngagementScorer
from src.infrastructure.classification.recency import RecencyClassifier, RecencyThresholds


class PathsConfig(TypedDict, total=False):
    session_store: str
    users_csv: str


class ApiConfig(TypedDict, total=False):
    users_url: str
    timeout: float


class RecencyConfig(TypedDict, total=False):
    hechicero_hours: float
    luchador_hours: float
    explorador_hours: float


class EmailDomainEntry(TypedDict, total=False):
    suffix: str
    points: int


class ScoreTierEntry(TypedDict, total=False):
    tier: str
    min: int


class EngagementConfig(TypedDict, total=False):
    email_domains: list[EmailDomainEntry]
    default_domain_points: int
    long_name_length: int
    short_name_length: int
    long_name_points: int
    medium_name_points: int
    score_tiers: list[ScoreTierEntry]


class ClassificationConfig(TypedDict, total=False):
    recency: RecencyConfig
    engagement: EngagementConfig


class LoggingConfig(TypedDict, total=False):
    level: str


class AppConfig(TypedDict, total=False):
    paths: PathsConfig
    api: ApiConfig
    classification: ClassificationConfig
    logging: LoggingConfig


def load_config(path: Path) -> AppConfig:
    with Path(path).open("r", encoding="utf-8") as file:
        data = yaml.safe_load(file)

    if data is None:
        return AppConfig()
    if not isinstance(data, dict):
        raise ValueError("The configuration file must contain a mapping at the top level.")

    return cast(AppConfig, data)


def _classification_section(config: AppConfig) -> ClassificationConfig:
    section = config.get("classification", {})
    return cast(ClassificationConfig, section if isinstance(section, dict) else {})


def build_recency_classifier(config: AppConfig) -> RecencyClassifier:
    recency_config = _classification_section(config).get("recency")
    if isinstance(recency_config, dict) and recency_config:
        return RecencyClassifier(thresholds=RecencyThresholds.from_config(recency_config))
    return RecencyClassifier()


def build_engagement_scorer(config: AppConfig) -> EngagementScorer:
    engagement_config = _classification_section(config).get("engagement")
    if isinstance(engagement_config, dict) and engagement_config:
        return EngagementScorer.from_config(engagement_config)
    return EngagementScorer()


def get_log_level(config: AppConfig) -> str:
    logging_config = cast(LoggingConfig, config.get("logging", {}))
    level = logging_config.get("level") if isinstance(logging_config, dict) else None
    return str(level).upper() if level else "INFO"


def get_users_url(config: AppConfig) -> Optional[str]:
    api_config = cast(ApiConfig, config.get("api", {}))
    url = api_config.get("users_url") if isinstance(api_config, dict) else None
    if url is None:
        return None

    text_url = str(url).strip()
    return text_url or None


def get_api_timeout(config: AppConfig) -> float:
    api_config = cast(ApiConfig, config.get("api", {}))
    timeout = api_config.get("timeout") if isinstance(api_config, dict) else None
    if isinstance(timeout, (int, float)) and timeout > 0:
        return float(timeout)
    return 10.0


def get_path(config: AppConfig, key: str) -> Optional[Path]:
    paths = cast(PathsConfig, config.get("paths", {}))
    value = paths.get(key) if isinstance(paths, dict) else None  # type: ignore[misc]
    if not value:
        return None
    return Path(str(value))


__all__ = [
    "AppConfig",
    "build_engagement_scorer",
    "build_recency_classifier",
    "get_api_timeout",
    "get_log_level",
    "get_path",
    "get_users_url",
    "load_config",
]
