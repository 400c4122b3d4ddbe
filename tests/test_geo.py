import pytest

from fire_tracker.features.geo import boundary_points, haversine_miles, nearest_vertex

SAN_FRANCISCO = (37.7749, -122.4194)
LOS_ANGELES = (34.0522, -118.2437)


def test_sf_to_la_distance():
    assert haversine_miles(*SAN_FRANCISCO, *LOS_ANGELES) == pytest.approx(347, abs=2)


@pytest.mark.parametrize(
    "a,b",
    [
        (SAN_FRANCISCO, LOS_ANGELES),
        ((0.0, 0.0), (0.0, 180.0)),
        ((89.9, 10.0), (-89.9, -170.0)),
        ((-33.86, 151.21), (51.5, -0.12)),
    ],
)
def test_distance_is_symmetric(a, b):
    assert haversine_miles(*a, *b) == pytest.approx(haversine_miles(*b, *a))


def test_same_point_is_zero():
    assert haversine_miles(34.1, -118.2, 34.1, -118.2) == 0.0


def test_antipodal_points_do_not_raise():
    d = haversine_miles(0.0, 0.0, 0.0, 180.0)
    assert d == pytest.approx(3958.8 * 3.141592653589793, rel=1e-9)


def test_boundary_points_keeps_literal_ring():
    ring = [(-118.0, 34.0), (-118.1, 34.1), (-118.0, 34.0)]
    assert boundary_points(ring) == ring
    assert boundary_points(()) == []
    assert boundary_points(None) == []


def test_nearest_vertex_returns_lon_lat_of_closest():
    ring = [(-118.05, 34.08), (-118.10, 34.12)]
    distance, vertex = nearest_vertex(34.10, -118.20, ring)
    assert vertex == (-118.10, 34.12)
    assert distance == pytest.approx(haversine_miles(34.10, -118.20, 34.12, -118.10))


def test_nearest_vertex_empty_ring():
    assert nearest_vertex(34.0, -118.0, []) is None
