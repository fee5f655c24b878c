"""Explicit selection between the recency and engagement tier ladders."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from src.core.entities import ClassificationTier, UserRecord
from src.infrastructure.classification.engagement import EngagementScorer
from src.infrastructure.classification.recency import RecencyClassifier
from src.utils.timestamps import TimestampLike


class ClassificationStrategy(str, Enum):
    RECENCY = "recencia"
    ENGAGEMENT = "participacion"


class TierClassifier:
    """Dispatch to the ladder named by the caller.

    The two ladders are independent: only ``RECENCY`` can yield ``Nuevo`` and
    their thresholds are not reconciled.
    """

    def __init__(
        self,
        recency: RecencyClassifier | None = None,
        engagement: EngagementScorer | None = None,
    ) -> None:
        self._recency = recency or RecencyClassifier()
        self._engagement = engagement or EngagementScorer()

    def classify(
        self,
        strategy: ClassificationStrategy | str,
        *,
        previous_login: TimestampLike = None,
        record: Optional[UserRecord] = None,
        reference_time: Optional[datetime] = None,
    ) -> ClassificationTier:
        selected = ClassificationStrategy(strategy)
        if selected is ClassificationStrategy.RECENCY:
            return self._recency.classify(previous_login, reference_time=reference_time)

        if record is None:
            raise ValueError("The engagement strategy requires a user record.")
        return self._engagement.tier_for(self._engagement.score(record))


__all__ = ["ClassificationStrategy", "TierClassifier"]
