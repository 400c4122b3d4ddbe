from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

LonLat = Tuple[float, float]


@dataclass(frozen=True)
class Position:
    lat: float
    lon: float


@dataclass(frozen=True)
class FireIncident:
    """
    A fire incident. `lat`/`lon` come from the feature geometry and drive
    observer distance; `reported_lat`/`reported_lon` come from the incident
    properties and drive zone association. The two may differ.
    """

    name: str
    lat: float
    lon: float
    reported_lat: float
    reported_lon: float
    is_active: bool = True
    is_final: bool = False
    incident_id: Optional[str] = None
    location: Optional[str] = None
    county: Optional[str] = None
    acres_burned: Optional[float] = None
    percent_contained: Optional[float] = None
    started: Any = None
    updated: Any = None

    @classmethod
    def from_feature(cls, feature: Dict) -> "FireIncident":
        """Build from a GeoJSON Point feature. Raises ValueError on bad coordinates."""
        geometry = feature.get("geometry") or {}
        props = feature.get("properties") or {}
        coords = geometry.get("coordinates") or []
        if len(coords) < 2:
            raise ValueError("fire feature has no point coordinates")

        lon, lat = float(coords[0]), float(coords[1])
        reported_lat = _float_or_none(props.get("Latitude"))
        reported_lon = _float_or_none(props.get("Longitude"))

        return cls(
            name=props.get("Name") or "",
            lat=lat,
            lon=lon,
            reported_lat=reported_lat if reported_lat is not None else lat,
            reported_lon=reported_lon if reported_lon is not None else lon,
            is_active=bool(props.get("IsActive", True)),
            is_final=bool(props.get("Final", False)),
            incident_id=props.get("UniqueId"),
            location=props.get("Location"),
            county=props.get("County"),
            acres_burned=_float_or_none(props.get("AcresBurned")),
            percent_contained=_float_or_none(props.get("PercentContained")),
            started=props.get("Started"),
            updated=props.get("Updated"),
        )


@dataclass(frozen=True)
class EvacuationZone:
    zone_id: str
    status: str
    boundary: Tuple[LonLat, ...] = ()
    status_reason: Optional[str] = None
    last_updated: Any = None
    county_name: Optional[str] = None

    @classmethod
    def from_feature(cls, feature: Dict) -> "EvacuationZone":
        props = feature.get("properties") or {}
        return cls(
            zone_id=str(props.get("zone_id") or ""),
            status=props.get("zone_status") or "",
            boundary=_outer_ring(feature.get("geometry")),
            status_reason=props.get("zone_status_reason"),
            last_updated=props.get("last_updated"),
            county_name=props.get("county_name"),
        )


@dataclass(frozen=True)
class FireProximity:
    fire: FireIncident
    distance_miles: float


@dataclass(frozen=True)
class ZoneProximity:
    zone: EvacuationZone
    distance_miles: float
    closest_point: LonLat
    associated_fire: Optional[FireIncident] = None


@dataclass(frozen=True)
class ComputationStats:
    total_points: int
    computation_ms: float


@dataclass(frozen=True)
class HazardSnapshot:
    """Hazard collections as loaded for one cycle; None means not loaded yet."""

    fires: Optional[Tuple[FireIncident, ...]] = None
    zones: Optional[Tuple[EvacuationZone, ...]] = None
    errors: Tuple[str, ...] = field(default_factory=tuple)


def _outer_ring(geometry: Optional[Dict]) -> Tuple[LonLat, ...]:
    if not geometry:
        return ()

    coords = geometry.get("coordinates") or []
    geom_type = geometry.get("type")
    if geom_type == "MultiPolygon":
        coords = coords[0] if coords else []
    elif geom_type != "Polygon":
        return ()

    ring = coords[0] if coords else []
    return tuple((float(p[0]), float(p[1])) for p in ring if len(p) >= 2)


def _float_or_none(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
