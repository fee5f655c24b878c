"""Recency-based classification of users from their previous login."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Mapping, Optional

from src.core.entities import ClassificationTier
from src.utils.logger import logger
from src.utils.timestamps import InvalidTimestamp, TimestampLike, ensure_aware, parse_timestamp, utc_now

_HOUR = timedelta(hours=1)


@dataclass(frozen=True)
class RecencyThresholds:
    """Inclusive upper bounds, in hours, of the recency tiers."""

    hechicero_hours: float = 12.0
    luchador_hours: float = 48.0
    explorador_hours: float = 7 * 24.0

    def __post_init__(self) -> None:
        if not self.hechicero_hours < self.luchador_hours < self.explorador_hours:
            raise ValueError(
                "Recency thresholds must be strictly increasing: "
                f"{self.hechicero_hours} < {self.luchador_hours} < {self.explorador_hours}."
            )

    @classmethod
    def from_config(cls, config: Mapping[str, object]) -> "RecencyThresholds":
        defaults = cls()
        values: dict[str, float] = {}
        for key, default in (
            ("hechicero_hours", defaults.hechicero_hours),
            ("luchador_hours", defaults.luchador_hours),
            ("explorador_hours", defaults.explorador_hours),
        ):
            raw = config.get(key)
            values[key] = float(raw) if isinstance(raw, (int, float)) else default
        return cls(**values)

    def ladder(self) -> tuple[tuple[float, ClassificationTier], ...]:
        return (
            (self.hechicero_hours, ClassificationTier.HECHICERO),
            (self.luchador_hours, ClassificationTier.LUCHADOR),
            (self.explorador_hours, ClassificationTier.EXPLORADOR),
        )


class RecencyClassifier:
    """Map the time elapsed since the previous login onto a tier."""

    def __init__(
        self,
        thresholds: RecencyThresholds | None = None,
        now_provider: Callable[[], datetime] | None = None,
    ) -> None:
        self._thresholds = thresholds or RecencyThresholds()
        self._now_provider = now_provider or utc_now

    @property
    def thresholds(self) -> RecencyThresholds:
        return self._thresholds

    def classify(
        self,
        previous_login: TimestampLike,
        reference_time: Optional[datetime] = None,
    ) -> ClassificationTier:
        """Return the tier for ``previous_login`` as seen at ``reference_time``.

        Without a previous login the user is ``Nuevo``. Future timestamps give a
        negative elapsed time and land in the first tier. Unparseable strings are
        never in any window and therefore classify as ``Olvidado``.
        """

        try:
            last_login = parse_timestamp(previous_login)
        except InvalidTimestamp:
            logger.warning("Malformed previous login {!r}; classifying as Olvidado", previous_login)
            return ClassificationTier.OLVIDADO

        if last_login is None:
            return ClassificationTier.NUEVO

        now = ensure_aware(reference_time or self._now_provider())
        elapsed_hours = self.elapsed_hours(last_login, now)
        for upper_bound, tier in self._thresholds.ladder():
            if elapsed_hours <= upper_bound:
                logger.debug("{:.2f} hours since last login -> {}", elapsed_hours, tier.value)
                return tier
        logger.debug("{:.2f} hours since last login -> Olvidado", elapsed_hours)
        return ClassificationTier.OLVIDADO

    @staticmethod
    def elapsed_hours(previous_login: datetime, now: datetime) -> float:
        return (ensure_aware(now) - ensure_aware(previous_login)) / _HOUR


def classify_by_recency(
    previous_login: TimestampLike,
    now: Optional[datetime] = None,
) -> ClassificationTier:
    """Classify with the default thresholds, reading the clock when ``now`` is omitted."""

    return RecencyClassifier().classify(previous_login, reference_time=now)


__all__ = ["RecencyClassifier", "RecencyThresholds", "classify_by_recency"]
