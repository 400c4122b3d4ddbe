from __future__ import annotations

from enum import Enum

from fire_tracker.config import NEARBY_THRESHOLD_MILES


class AlertTier(str, Enum):
    NEARBY = "nearby"
    MONITORING = "monitoring"


def classify(distance_miles: float, threshold_miles: float = NEARBY_THRESHOLD_MILES) -> AlertTier:
    """NEARBY strictly below the threshold, MONITORING at or beyond it."""
    if distance_miles < threshold_miles:
        return AlertTier.NEARBY
    return AlertTier.MONITORING
