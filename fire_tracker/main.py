from __future__ import annotations

import logging
from typing import Dict, List, Optional

import requests
from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from fire_tracker.features.timestamps import format_date, format_timestamp
from fire_tracker.ingest.air_quality import fetch_air_quality
from fire_tracker.ingest.calfire import fetch_fires
from fire_tracker.ingest.evacuations import fetch_evacuation_zones
from fire_tracker.model.engine import ProximityReport, ProximityTracker
from fire_tracker.model.hazards import (
    ComputationStats,
    EvacuationZone,
    FireIncident,
    FireProximity,
    HazardSnapshot,
    Position,
    ZoneProximity,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="California Fire Tracker API", version="0.1.0")

tracker = ProximityTracker()


class ProximityRequest(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)
    threshold_miles: Optional[float] = Field(default=None, gt=0, description="Overrides the nearby threshold")


@app.get("/health")
def health() -> Dict:
    return {"ok": True}


@app.get("/fires")
def fires() -> Dict:
    try:
        items = fetch_fires()
    except (requests.RequestException, ValueError) as exc:
        logger.error("Fire feed failed: %s", exc)
        raise HTTPException(status_code=502, detail=f"Failed to fetch fire data: {exc}")
    return {"count": len(items), "fires": [_fire_payload(f) for f in items]}


@app.get("/evacuations")
def evacuations() -> Dict:
    try:
        zones = fetch_evacuation_zones()
    except (requests.RequestException, ValueError) as exc:
        logger.error("Evacuation feed failed: %s", exc)
        raise HTTPException(status_code=502, detail=f"Failed to fetch evacuation data: {exc}")
    return {"count": len(zones), "zones": [_zone_payload(z, include_boundary=True) for z in zones]}


@app.get("/air-quality")
def air_quality(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
) -> List[Dict]:
    try:
        observations = fetch_air_quality(lat=lat, lon=lng)
    except (requests.RequestException, ValueError) as exc:
        logger.error("Air quality lookup failed: %s", exc)
        raise HTTPException(status_code=502, detail=f"Failed to fetch air quality data: {exc}")
    if not observations:
        raise HTTPException(status_code=404, detail="No air quality data available for this location")
    return observations


@app.get("/proximity")
def proximity(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
) -> Dict:
    return _run_proximity(Position(lat=lat, lon=lon))


@app.post("/proximity")
def proximity_with_options(req: ProximityRequest) -> Dict:
    return _run_proximity(Position(lat=req.lat, lon=req.lon), req.threshold_miles)


def _run_proximity(position: Position, threshold_miles: Optional[float] = None) -> Dict:
    # Take the token before fetching so a slow fetch can't outrank a newer request.
    generation = tracker.begin()
    snapshot = load_hazards()
    report = tracker.refresh(
        position,
        snapshot.fires,
        snapshot.zones,
        threshold_miles=threshold_miles,
        generation=generation,
    )
    if report is None:
        raise HTTPException(status_code=409, detail="Superseded by a newer refresh")

    payload = report_payload(report)
    payload["position"] = {"lat": position.lat, "lon": position.lon}
    payload["fire_count"] = len(snapshot.fires) if snapshot.fires is not None else None
    payload["zone_count"] = len(snapshot.zones) if snapshot.zones is not None else None
    payload["errors"] = list(snapshot.errors)
    return payload


def load_hazards() -> HazardSnapshot:
    """Fetch both feeds; a failing feed leaves its collection unloaded."""
    errors = []

    fire_items: Optional[List[FireIncident]] = None
    try:
        fire_items = fetch_fires()
    except (requests.RequestException, ValueError) as exc:
        logger.error("Fire feed failed: %s", exc)
        errors.append("Failed to fetch fire data")

    zone_items: Optional[List[EvacuationZone]] = None
    try:
        zone_items = fetch_evacuation_zones()
    except (requests.RequestException, ValueError) as exc:
        logger.error("Evacuation feed failed: %s", exc)
        errors.append("Failed to fetch evacuation data")

    return HazardSnapshot(
        fires=tuple(fire_items) if fire_items is not None else None,
        zones=tuple(zone_items) if zone_items is not None else None,
        errors=tuple(errors),
    )


def report_payload(report: ProximityReport) -> Dict:
    return {
        "generation": report.generation,
        "fire_state": report.fire_state.value,
        "zone_state": report.zone_state.value,
        "nearest_fire": _fire_proximity_payload(report.nearest_fire),
        "nearest_zone": _zone_proximity_payload(report.nearest_zone),
        "stats": _stats_payload(report.stats),
        "alert": report.alert.value if report.alert else None,
        "threshold_miles": report.threshold_miles,
    }


def _fire_payload(fire: FireIncident) -> Dict:
    return {
        "id": fire.incident_id,
        "name": fire.name,
        "lat": fire.lat,
        "lon": fire.lon,
        "is_final": fire.is_final,
        "location": fire.location,
        "county": fire.county,
        "acres_burned": fire.acres_burned,
        "percent_contained": fire.percent_contained,
        "started": format_date(fire.started),
    }


def _zone_payload(zone: EvacuationZone, include_boundary: bool = False) -> Dict:
    payload = {
        "zone_id": zone.zone_id,
        "status": zone.status,
        "status_reason": zone.status_reason,
        "county": zone.county_name,
        "last_updated": format_timestamp(zone.last_updated),
        "point_count": len(zone.boundary),
    }
    if include_boundary:
        payload["boundary"] = [list(p) for p in zone.boundary]
    return payload


def _fire_proximity_payload(result: Optional[FireProximity]) -> Optional[Dict]:
    if result is None:
        return None
    return {
        "fire": _fire_payload(result.fire),
        "distance_miles": round(result.distance_miles, 3),
    }


def _zone_proximity_payload(result: Optional[ZoneProximity]) -> Optional[Dict]:
    if result is None:
        return None
    lon, lat = result.closest_point
    return {
        "zone": _zone_payload(result.zone),
        "distance_miles": round(result.distance_miles, 3),
        "closest_point": {"lat": lat, "lon": lon},
        "associated_fire": _fire_payload(result.associated_fire) if result.associated_fire else None,
    }


def _stats_payload(stats: Optional[ComputationStats]) -> Optional[Dict]:
    if stats is None:
        return None
    return {
        "total_points": stats.total_points,
        "computation_ms": round(stats.computation_ms, 1),
    }


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(app, host="127.0.0.1", port=8000)
