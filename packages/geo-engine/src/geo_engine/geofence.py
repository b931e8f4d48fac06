from __future__ import annotations

import math

from geo_engine.distance import haversine_distance_meters
from geo_engine.models import BoundingBox, GeoPoint

METERS_PER_DEGREE_LAT = 111_320.0


def is_point_inside_radius(center: GeoPoint, point: GeoPoint, radius_meters: float) -> bool:
    if radius_meters < 0:
        raise ValueError("radius_meters must be >= 0")
    return haversine_distance_meters(center, point) <= radius_meters


def bounding_box_around(center: GeoPoint, radius_meters: float) -> BoundingBox:
    """Smallest lat/lng rectangle that contains the circle around ``center``.

    The box over-approximates the circle, so callers still need an exact
    distance check on whatever it lets through.
    """
    if radius_meters < 0:
        raise ValueError("radius_meters must be >= 0")
    delta_lat = radius_meters / METERS_PER_DEGREE_LAT
    cos_lat = math.cos(math.radians(center.lat))
    if cos_lat < 1e-6:
        delta_lng = 180.0
    else:
        delta_lng = min(180.0, radius_meters / (METERS_PER_DEGREE_LAT * cos_lat))
    return BoundingBox(
        min_lat=max(-90.0, center.lat - delta_lat),
        max_lat=min(90.0, center.lat + delta_lat),
        min_lng=max(-180.0, center.lng - delta_lng),
        max_lng=min(180.0, center.lng + delta_lng),
    )


def is_within_latitude_limit(point: GeoPoint, max_lat: float | None) -> bool:
    if max_lat is None:
        return True
    return point.lat <= max_lat
