from __future__ import annotations

import logging
import time
from typing import Iterable, List, Optional, Sequence, Tuple, TypeVar

from fire_tracker.features.geo import LonLat, boundary_points, haversine_miles, nearest_vertex
from fire_tracker.model.hazards import (
    ComputationStats,
    EvacuationZone,
    FireIncident,
    FireProximity,
    Position,
    ZoneProximity,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def select_nearest(candidates: Iterable[Tuple[T, float]]) -> Optional[Tuple[T, float]]:
    """
    Return the (candidate, distance) pair with the smallest distance.

    Ties keep the first pair seen, so input order is the tie-break. Callers
    are expected to skip evaluation for empty collections; None is returned
    if they don't.
    """
    best: Optional[Tuple[T, float]] = None

    for candidate, distance in candidates:
        if best is None or distance < best[1]:
            best = (candidate, distance)

    return best


def nearest_fire(position: Position, fires: Sequence[FireIncident]) -> Optional[FireProximity]:
    if not fires:
        return None

    best = select_nearest(
        (fire, haversine_miles(position.lat, position.lon, fire.lat, fire.lon))
        for fire in fires
    )
    if best is None:
        return None
    fire, distance = best
    return FireProximity(fire=fire, distance_miles=distance)


def nearest_causal_fire(point: LonLat, fires: Sequence[FireIncident]) -> Optional[FireIncident]:
    """Nearest non-final fire to a (lon, lat) point, by reported coordinates."""
    lon, lat = point
    best = select_nearest(
        (fire, haversine_miles(lat, lon, fire.reported_lat, fire.reported_lon))
        for fire in fires
        if not fire.is_final
    )
    return best[0] if best else None


def nearest_zone(
    position: Position,
    zones: Sequence[EvacuationZone],
    fires: Sequence[FireIncident] = (),
) -> Tuple[Optional[ZoneProximity], Optional[ComputationStats]]:
    """
    Find the evacuation zone whose closest boundary vertex is nearest the
    observer, then link it to the nearest non-final fire from that vertex.

    Returns (result, stats). Both are None when `zones` is empty. Zones
    without vertices are counted in stats but can never be selected.
    """
    if not zones:
        return None, None

    start = time.perf_counter()
    total_points = 0

    scored: List[Tuple[Tuple[EvacuationZone, LonLat], float]] = []
    for zone in zones:
        points = boundary_points(zone.boundary)
        total_points += len(points)

        closest = nearest_vertex(position.lat, position.lon, points)
        if closest is None:
            continue
        distance, vertex = closest
        scored.append(((zone, vertex), distance))

    result: Optional[ZoneProximity] = None
    best = select_nearest(scored)
    if best is not None:
        (zone, closest_point), distance = best
        associated = None
        if fires and closest_point is not None:
            associated = nearest_causal_fire(closest_point, fires)
        result = ZoneProximity(
            zone=zone,
            distance_miles=distance,
            closest_point=closest_point,
            associated_fire=associated,
        )

    elapsed_ms = (time.perf_counter() - start) * 1000.0
    stats = ComputationStats(total_points=total_points, computation_ms=elapsed_ms)
    logger.debug(
        "Scanned %d boundary points across %d zones in %.1fms",
        total_points,
        len(zones),
        elapsed_ms,
    )
    return result, stats
