"""Geo engine core package."""

from geo_engine.distance import EARTH_RADIUS_KM, haversine_distance_km, haversine_distance_meters
from geo_engine.geofence import bounding_box_around, is_point_inside_radius, is_within_latitude_limit
from geo_engine.models import BoundingBox, GeoPoint

__all__ = [
    "BoundingBox",
    "EARTH_RADIUS_KM",
    "GeoPoint",
    "bounding_box_around",
    "haversine_distance_km",
    "haversine_distance_meters",
    "is_point_inside_radius",
    "is_within_latitude_limit",
]
