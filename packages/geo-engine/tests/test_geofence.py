import pytest

from geo_engine.distance import haversine_distance_meters
from geo_engine.geofence import bounding_box_around, is_point_inside_radius, is_within_latitude_limit
from geo_engine.models import GeoPoint


def test_point_inside_radius() -> None:
    center = GeoPoint(lat=33.5731, lng=-7.5898)
    nearby = GeoPoint(lat=33.5736, lng=-7.5894)
    assert is_point_inside_radius(center, nearby, radius_meters=100)


def test_point_outside_radius() -> None:
    center = GeoPoint(lat=33.5731, lng=-7.5898)
    far = GeoPoint(lat=33.6, lng=-7.5)
    assert not is_point_inside_radius(center, far, radius_meters=100)


def test_negative_radius_raises() -> None:
    center = GeoPoint(lat=33.5731, lng=-7.5898)
    with pytest.raises(ValueError):
        is_point_inside_radius(center, center, radius_meters=-1)


def test_bounding_box_contains_circle_edge() -> None:
    center = GeoPoint(lat=33.5731, lng=-7.5898)
    box = bounding_box_around(center, radius_meters=5_000)
    east = GeoPoint(lat=center.lat, lng=box.max_lng - 1e-6)
    north = GeoPoint(lat=box.max_lat - 1e-6, lng=center.lng)

    assert box.contains(center)
    assert haversine_distance_meters(center, east) == pytest.approx(5_000, rel=0.01)
    assert haversine_distance_meters(center, north) == pytest.approx(5_000, rel=0.01)
    assert not box.contains(GeoPoint(lat=center.lat + 0.1, lng=center.lng))


def test_bounding_box_is_clamped_to_valid_ranges() -> None:
    box = bounding_box_around(GeoPoint(lat=89.99, lng=179.99), radius_meters=50_000)
    assert box.max_lat == 90.0
    assert box.max_lng == 180.0
    assert box.min_lat >= -90.0


def test_latitude_limit() -> None:
    tangier = GeoPoint(lat=35.7595, lng=-5.8340)
    tarifa = GeoPoint(lat=36.0143, lng=-5.6044)
    assert is_within_latitude_limit(tangier, 35.92)
    assert not is_within_latitude_limit(tarifa, 35.92)
    assert is_within_latitude_limit(tarifa, None)
