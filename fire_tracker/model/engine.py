from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence

from fire_tracker.config import NEARBY_THRESHOLD_MILES
from fire_tracker.model.alerts import AlertTier, classify
from fire_tracker.model.hazards import (
    ComputationStats,
    EvacuationZone,
    FireIncident,
    FireProximity,
    Position,
    ZoneProximity,
)
from fire_tracker.model.proximity import nearest_fire, nearest_zone

logger = logging.getLogger(__name__)


class CycleState(str, Enum):
    NOT_YET_EVALUATED = "not_yet_evaluated"
    EVALUATED = "evaluated"


@dataclass(frozen=True)
class ProximityReport:
    fire_state: CycleState = CycleState.NOT_YET_EVALUATED
    zone_state: CycleState = CycleState.NOT_YET_EVALUATED
    nearest_fire: Optional[FireProximity] = None
    nearest_zone: Optional[ZoneProximity] = None
    stats: Optional[ComputationStats] = None
    alert: Optional[AlertTier] = None
    threshold_miles: float = NEARBY_THRESHOLD_MILES
    generation: int = 0


def evaluate_cycle(
    position: Optional[Position],
    fires: Optional[Sequence[FireIncident]],
    zones: Optional[Sequence[EvacuationZone]],
    threshold_miles: float = NEARBY_THRESHOLD_MILES,
) -> ProximityReport:
    """
    Run one full evaluation. A category is left NOT_YET_EVALUATED when there
    is no position or its collection has not been loaded (None); an empty
    collection is evaluated and yields no result.
    """
    if position is None:
        return ProximityReport(threshold_miles=threshold_miles)

    fire_state = CycleState.NOT_YET_EVALUATED
    fire_result = None
    if fires is not None:
        fire_state = CycleState.EVALUATED
        fire_result = nearest_fire(position, fires)

    zone_state = CycleState.NOT_YET_EVALUATED
    zone_result = None
    stats = None
    if zones is not None:
        zone_state = CycleState.EVALUATED
        zone_result, stats = nearest_zone(position, zones, fires or ())

    alert = classify(zone_result.distance_miles, threshold_miles) if zone_result else None

    return ProximityReport(
        fire_state=fire_state,
        zone_state=zone_state,
        nearest_fire=fire_result,
        nearest_zone=zone_result,
        stats=stats,
        alert=alert,
        threshold_miles=threshold_miles,
    )


class ProximityTracker:
    """
    Keeps the most recent report and discards results from cycles that were
    overtaken by a newer one before they finished.
    """

    def __init__(self, threshold_miles: float = NEARBY_THRESHOLD_MILES):
        self.threshold_miles = threshold_miles
        self._lock = threading.Lock()
        self._counter = itertools.count(1)
        self._latest_generation = 0
        self._report: Optional[ProximityReport] = None

    @property
    def latest(self) -> Optional[ProximityReport]:
        return self._report

    def begin(self) -> int:
        with self._lock:
            self._latest_generation = next(self._counter)
            return self._latest_generation

    def publish(self, generation: int, report: ProximityReport) -> Optional[ProximityReport]:
        """Store a cycle's report. Returns what was stored, or None if the cycle is stale."""
        with self._lock:
            if generation < self._latest_generation:
                logger.info(
                    "Discarding stale cycle %d (latest is %d)",
                    generation,
                    self._latest_generation,
                )
                return None

            # Stats only change when a cycle actually scanned zones.
            if report.stats is None and self._report is not None:
                report = replace(report, stats=self._report.stats)
            self._report = replace(report, generation=generation)
            return self._report

    def refresh(
        self,
        position: Optional[Position],
        fires: Optional[Sequence[FireIncident]],
        zones: Optional[Sequence[EvacuationZone]],
        threshold_miles: Optional[float] = None,
        generation: Optional[int] = None,
    ) -> Optional[ProximityReport]:
        """
        Evaluate and publish. Pass the token from `begin()` when inputs were
        loaded after the cycle started. Returns None if a newer cycle
        superseded this one.
        """
        if generation is None:
            generation = self.begin()
        threshold = threshold_miles if threshold_miles is not None else self.threshold_miles
        report = evaluate_cycle(position, fires, zones, threshold)
        return self.publish(generation, report)
