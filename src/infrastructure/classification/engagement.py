"""Engagement scoring of user records from name length and email domain."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from src.core.entities import ClassificationTier, EngagementScore, UserRecord
from src.utils.logger import logger


@dataclass(frozen=True)
class EmailDomainRule:
    """Points awarded when the lowercased address ends with ``suffix``."""

    suffix: str
    points: int

    def matches(self, email: str) -> bool:
        return email.endswith(self.suffix)


def _utf16_length(text: str) -> int:
    """Length in UTF-16 code units, as measured by the web client."""

    return len(text.encode("utf-16-le", errors="surrogatepass")) // 2


DEFAULT_DOMAIN_RULES: tuple[EmailDomainRule, ...] = (
    EmailDomainRule(suffix="@gmail.com", points=40),
    EmailDomainRule(suffix="@hotmail.com", points=20),
)

DEFAULT_SCORE_TIERS: tuple[tuple[int, ClassificationTier], ...] = (
    (60, ClassificationTier.HECHICERO),
    (40, ClassificationTier.LUCHADOR),
    (30, ClassificationTier.EXPLORADOR),
)

DEFAULT_SCORE_BANDS: tuple[tuple[int, str], ...] = (
    (50, "alto"),
    (30, "medio"),
)


class EngagementScorer:
    """Additive scorer with a separate score to tier ladder."""

    def __init__(
        self,
        domain_rules: Sequence[EmailDomainRule] = DEFAULT_DOMAIN_RULES,
        default_domain_points: int = 10,
        long_name_length: int = 10,
        short_name_length: int = 5,
        long_name_points: int = 20,
        medium_name_points: int = 10,
        score_tiers: Sequence[tuple[int, ClassificationTier]] = DEFAULT_SCORE_TIERS,
    ) -> None:
        if short_name_length > long_name_length:
            raise ValueError(
                f"short_name_length ({short_name_length}) cannot exceed long_name_length ({long_name_length})."
            )
        if any(tier is ClassificationTier.NUEVO for _, tier in score_tiers):
            raise ValueError("The score ladder cannot produce the 'Nuevo' tier.")

        self._domain_rules = tuple(
            EmailDomainRule(suffix=rule.suffix.lower(), points=rule.points) for rule in domain_rules
        )
        self._default_domain_points = default_domain_points
        self._long_name_length = long_name_length
        self._short_name_length = short_name_length
        self._long_name_points = long_name_points
        self._medium_name_points = medium_name_points
        self._score_tiers = tuple(sorted(score_tiers, key=lambda entry: entry[0], reverse=True))

    @classmethod
    def from_config(cls, config: Mapping[str, object]) -> "EngagementScorer":
        """Build a scorer from the ``classification.engagement`` section."""

        kwargs: dict[str, object] = {}
        rules_config = config.get("email_domains")
        if isinstance(rules_config, list) and rules_config:
            rules: list[EmailDomainRule] = []
            for entry in rules_config:
                if not isinstance(entry, Mapping):
                    continue
                suffix = entry.get("suffix")
                points = entry.get("points")
                if not isinstance(suffix, str) or not suffix.strip():
                    raise ValueError("Each email domain rule must define a non-empty 'suffix'.")
                if not isinstance(points, int):
                    raise ValueError(f"Email domain rule '{suffix}' must define integer 'points'.")
                rules.append(EmailDomainRule(suffix=suffix.strip(), points=points))
            kwargs["domain_rules"] = rules

        tiers_config = config.get("score_tiers")
        if isinstance(tiers_config, list) and tiers_config:
            tiers: list[tuple[int, ClassificationTier]] = []
            for entry in tiers_config:
                if not isinstance(entry, Mapping):
                    continue
                label = entry.get("tier")
                minimum = entry.get("min")
                try:
                    tier = ClassificationTier(label)
                except ValueError as exc:
                    raise ValueError(f"Unknown classification tier '{label}'.") from exc
                if not isinstance(minimum, int):
                    raise ValueError(f"Score tier '{label}' must define an integer 'min'.")
                tiers.append((minimum, tier))
            kwargs["score_tiers"] = tiers

        for key in (
            "default_domain_points",
            "long_name_length",
            "short_name_length",
            "long_name_points",
            "medium_name_points",
        ):
            value = config.get(key)
            if isinstance(value, int):
                kwargs[key] = value

        return cls(**kwargs)  # type: ignore[arg-type]

    def name_points(self, record: UserRecord) -> int:
        length = _utf16_length(record.full_name)
        if length > self._long_name_length:
            return self._long_name_points
        if length >= self._short_name_length:
            return self._medium_name_points
        return 0

    def email_points(self, record: UserRecord) -> int:
        email = record.email.lower()
        for rule in self._domain_rules:
            if rule.matches(email):
                return rule.points
        return self._default_domain_points

    def score(self, record: UserRecord) -> EngagementScore:
        name_points = self.name_points(record)
        email_points = self.email_points(record)
        total = name_points + email_points
        logger.debug(
            "Scored '{}' <{}>: name={} email={} total={}",
            record.full_name,
            record.email,
            name_points,
            email_points,
            total,
        )
        return total

    def tier_for(self, score: EngagementScore) -> ClassificationTier:
        for minimum, tier in self._score_tiers:
            if score >= minimum:
                return tier
        return ClassificationTier.OLVIDADO


def score_band(score: EngagementScore, bands: Sequence[tuple[int, str]] = DEFAULT_SCORE_BANDS) -> str:
    """Coarse label used to highlight scores in listings."""

    for minimum, label in bands:
        if score >= minimum:
            return label
    return "bajo"


_DEFAULT_SCORER = EngagementScorer()


def score_user(record: UserRecord) -> EngagementScore:
    return _DEFAULT_SCORER.score(record)


def tier_for_score(score: EngagementScore) -> ClassificationTier:
    return _DEFAULT_SCORER.tier_for(score)


__all__ = [
    "DEFAULT_DOMAIN_RULES",
    "DEFAULT_SCORE_BANDS",
    "DEFAULT_SCORE_TIERS",
    "EmailDomainRule",
    "EngagementScorer",
    "score_band",
    "score_user",
    "tier_for_score",
]
