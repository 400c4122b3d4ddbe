import itertools

import pytest

from conftest import make_fire, make_zone
from fire_tracker.features.geo import haversine_miles
from fire_tracker.model.alerts import AlertTier, classify
from fire_tracker.model.hazards import ComputationStats, Position
from fire_tracker.model.proximity import (
    nearest_causal_fire,
    nearest_fire,
    nearest_zone,
    select_nearest,
)

ORIGIN = Position(lat=0.0, lon=0.0)


def test_select_nearest_keeps_first_of_equal_distances():
    assert select_nearest([("a", 2.0), ("b", 1.0), ("c", 1.0)]) == ("b", 1.0)


def test_select_nearest_empty():
    assert select_nearest([]) is None


def test_nearest_fire_without_fires():
    assert nearest_fire(ORIGIN, []) is None


def test_nearest_fire_picks_closest():
    near = make_fire("Near", 0.1, 0.1)
    far = make_fire("Far", 1.0, 1.0)
    result = nearest_fire(ORIGIN, [far, near])
    assert result.fire is near
    assert result.distance_miles == pytest.approx(haversine_miles(0.0, 0.0, 0.1, 0.1))


def test_nearest_fire_ignores_final_flag():
    final = make_fire("Final", 0.01, 0.0, is_final=True)
    other = make_fire("Other", 1.0, 0.0)
    assert nearest_fire(ORIGIN, [other, final]).fire is final


def test_equidistant_fires_resolve_to_first_in_input_order():
    fires = [
        make_fire("East", 0.0, 1.0),
        make_fire("West", 0.0, -1.0),
        make_fire("North", 1.0, 0.0),
        make_fire("South", -1.0, 0.0),
    ]
    for ordering in itertools.permutations(fires):
        assert nearest_fire(ORIGIN, list(ordering)).fire is ordering[0]


def test_nearest_zone_without_zones():
    assert nearest_zone(ORIGIN, [], [make_fire("A", 0.0, 0.0)]) == (None, None)


def test_total_points_counts_every_vertex_including_empty_zones():
    zones = [
        make_zone("A", [(0.1, 0.1), (0.2, 0.2), (0.3, 0.3)]),
        make_zone("Empty", []),
        make_zone("B", [(1.0, 1.0), (1.0, 1.0)]),
    ]
    result, stats = nearest_zone(ORIGIN, zones)
    assert isinstance(stats, ComputationStats)
    assert stats.total_points == 5
    assert stats.computation_ms >= 0
    assert result.zone.zone_id == "A"


def test_zone_without_vertices_never_wins():
    result, stats = nearest_zone(ORIGIN, [make_zone("Empty", []), make_zone("Far", [(5.0, 5.0)])])
    assert result.zone.zone_id == "Far"
    assert stats.total_points == 1


def test_only_empty_zones_yield_no_result_but_stats():
    result, stats = nearest_zone(ORIGIN, [make_zone("Empty", [])])
    assert result is None
    assert stats.total_points == 0


def test_zone_distance_uses_vertices_not_edges():
    # The edge between the two vertices passes right over the origin.
    zone = make_zone("Wide", [(-1.0, 0.0), (1.0, 0.0)])
    result, _ = nearest_zone(ORIGIN, [zone])
    assert result.distance_miles == pytest.approx(haversine_miles(0.0, 0.0, 0.0, 1.0))
    assert result.closest_point == (-1.0, 0.0)


def test_equidistant_zones_resolve_to_first():
    east = make_zone("East", [(1.0, 0.0)])
    west = make_zone("West", [(-1.0, 0.0)])
    assert nearest_zone(ORIGIN, [east, west])[0].zone is east
    assert nearest_zone(ORIGIN, [west, east])[0].zone is west


def test_associated_fire_is_searched_from_closest_vertex():
    # Fire near the user but far from the zone; fire near the zone but far from the user.
    near_user = make_fire("Near user", 0.0, 0.05)
    near_zone = make_fire("Near zone", 2.0, 2.1)
    zone = make_zone("Z", [(2.0, 2.0), (3.0, 3.0)])
    result, _ = nearest_zone(ORIGIN, [zone], [near_user, near_zone])
    assert result.closest_point == (2.0, 2.0)
    assert result.associated_fire is near_zone


def test_no_fires_means_no_association():
    result, _ = nearest_zone(ORIGIN, [make_zone("Z", [(1.0, 1.0)])], [])
    assert result.associated_fire is None


def test_causal_fire_excludes_final_fires():
    final_close = make_fire("Closed", 0.0, 0.001, is_final=True)
    open_far = make_fire("Open", 0.0, 2.0)
    assert nearest_causal_fire((0.0, 0.0), [final_close, open_far]) is open_far


def test_causal_fire_none_when_all_final():
    assert nearest_causal_fire((0.0, 0.0), [make_fire("Closed", 0.0, 0.0, is_final=True)]) is None


def test_causal_fire_uses_reported_coordinates():
    # Geometry puts A closer, reported coordinates put B closer.
    a = make_fire("A", 0.0, 0.1, reported=(0.0, 3.0))
    b = make_fire("B", 0.0, 0.5, reported=(0.0, 0.2))
    assert nearest_causal_fire((0.0, 0.0), [a, b]) is b
    assert nearest_fire(ORIGIN, [a, b]).fire is a


def test_end_to_end_scenario():
    observer = Position(lat=34.10, lon=-118.20)
    fire = make_fire("Test Fire", 34.00, -118.00)
    zone = make_zone("LAC-0001", [(-118.05, 34.08), (-118.10, 34.12)])

    result, stats = nearest_zone(observer, [zone], [fire])

    expected = min(
        haversine_miles(34.10, -118.20, 34.08, -118.05),
        haversine_miles(34.10, -118.20, 34.12, -118.10),
    )
    assert result.distance_miles == pytest.approx(expected)
    assert result.closest_point == (-118.10, 34.12)
    assert result.associated_fire is fire
    assert stats.total_points == 2
    for threshold in (1.0, 5.0):
        expected_tier = AlertTier.NEARBY if expected < threshold else AlertTier.MONITORING
        assert classify(result.distance_miles, threshold) == expected_tier
    assert classify(result.distance_miles, 1.0) == AlertTier.MONITORING
