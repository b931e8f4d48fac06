import pytest

from geo_engine.distance import haversine_distance_km, haversine_distance_meters
from geo_engine.models import GeoPoint


def test_haversine_distance_is_zero_for_same_point() -> None:
    point = GeoPoint(lat=33.5731, lng=-7.5898)
    assert haversine_distance_km(point, point) == 0.0
    assert haversine_distance_meters(point, point) == 0.0


def test_haversine_distance_is_symmetric() -> None:
    casablanca = GeoPoint(lat=33.5731, lng=-7.5898)
    rabat = GeoPoint(lat=34.0209, lng=-6.8416)
    assert haversine_distance_km(casablanca, rabat) == pytest.approx(haversine_distance_km(rabat, casablanca))


def test_one_degree_of_latitude_is_about_111_km() -> None:
    south = GeoPoint(lat=33.0, lng=-7.0)
    north = GeoPoint(lat=34.0, lng=-7.0)
    assert haversine_distance_km(south, north) == pytest.approx(111.19, rel=0.01)


def test_haversine_distance_between_cities() -> None:
    casablanca = GeoPoint(lat=33.5731, lng=-7.5898)
    rabat = GeoPoint(lat=34.0209, lng=-6.8416)
    distance = haversine_distance_km(casablanca, rabat)
    assert 85 < distance < 90
    assert haversine_distance_meters(casablanca, rabat) == pytest.approx(distance * 1000)
