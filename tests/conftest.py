import pytest
import requests

from fire_tracker.ingest.cache import clear_cache
from fire_tracker.model.hazards import EvacuationZone, FireIncident


@pytest.fixture(autouse=True)
def _empty_cache():
    clear_cache()
    yield
    clear_cache()


def make_fire(name, lat, lon, is_final=False, reported=None):
    reported_lat, reported_lon = reported if reported else (lat, lon)
    return FireIncident(
        name=name,
        lat=lat,
        lon=lon,
        reported_lat=reported_lat,
        reported_lon=reported_lon,
        is_final=is_final,
    )


def make_zone(zone_id, boundary, status="Evacuation Order", reason=None, last_updated=None):
    return EvacuationZone(
        zone_id=zone_id,
        status=status,
        boundary=tuple(boundary),
        status_reason=reason,
        last_updated=last_updated,
    )


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")
