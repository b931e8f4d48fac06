from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from facility_search.core.models import ProviderPlace
from facility_search.core.text import normalize_facility_name, normalize_text
from facility_search.providers.base import UNNAMED_FACILITY
from geo_engine.distance import haversine_distance_meters

_MERGEABLE_FIELDS = ("address", "phone", "website", "opening_hours", "wheelchair")
_UNNAMED = normalize_text(UNNAMED_FACILITY)


def merge_by_place_id(places: Iterable[ProviderPlace]) -> list[ProviderPlace]:
    """Drop repeated provider ids, keeping the first occurrence."""
    seen: set[str] = set()
    merged: list[ProviderPlace] = []
    for place in places:
        if place.place_id in seen:
            continue
        seen.add(place.place_id)
        merged.append(place)
    return merged


def is_same_facility(
    left: ProviderPlace,
    right: ProviderPlace,
    threshold_meters: float,
    prefixes: Iterable[str] = (),
) -> bool:
    left_name = normalize_facility_name(left.name, prefixes)
    right_name = normalize_facility_name(right.name, prefixes)
    if not left_name or not right_name or _UNNAMED in (left_name, right_name):
        return False
    if left_name not in right_name and right_name not in left_name:
        return False
    return haversine_distance_meters(left.point, right.point) <= threshold_meters


def suppress_near_duplicates(
    places: Iterable[ProviderPlace],
    threshold_meters: float,
    prefixes: Iterable[str] = (),
) -> list[ProviderPlace]:
    """Collapse records of one facility reported under different ids.

    The first record wins; optional fields it lacks are filled from the
    records merged into it.
    """
    prefixes = tuple(prefixes)
    kept: list[ProviderPlace] = []
    for place in places:
        for index, existing in enumerate(kept):
            if is_same_facility(existing, place, threshold_meters, prefixes):
                kept[index] = _fill_missing(existing, place)
                break
        else:
            kept.append(place)
    return kept


def _fill_missing(primary: ProviderPlace, secondary: ProviderPlace) -> ProviderPlace:
    changes = {
        name: getattr(secondary, name)
        for name in _MERGEABLE_FIELDS
        if not getattr(primary, name) and getattr(secondary, name)
    }
    if secondary.emergency and not primary.emergency:
        changes["emergency"] = True
    return replace(primary, **changes) if changes else primary

