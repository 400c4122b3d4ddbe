from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence, Tuple

EARTH_RADIUS_MILES = 3958.8

LonLat = Tuple[float, float]


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two coordinates in statute miles."""
    lat1_r = math.radians(lat1)
    lon1_r = math.radians(lon1)
    lat2_r = math.radians(lat2)
    lon2_r = math.radians(lon2)

    dlat = lat2_r - lat1_r
    dlon = lon2_r - lon1_r

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlon / 2) ** 2
    )
    # Rounding can push a slightly outside [0, 1] near antipodes.
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def boundary_points(ring: Optional[Sequence[LonLat]]) -> List[LonLat]:
    """Vertices of a zone ring as stored, in order. Missing rings yield []."""
    if not ring:
        return []
    return [(float(lon), float(lat)) for lon, lat in ring]


def nearest_vertex(
    lat: float, lon: float, ring: Iterable[LonLat]
) -> Optional[Tuple[float, LonLat]]:
    """Return (distance_miles, (lon, lat)) for the closest vertex of a ring."""
    best: Optional[Tuple[float, LonLat]] = None

    for p_lon, p_lat in ring:
        d = haversine_miles(lat, lon, p_lat, p_lon)
        if best is None or d < best[0]:
            best = (d, (p_lon, p_lat))

    return best
