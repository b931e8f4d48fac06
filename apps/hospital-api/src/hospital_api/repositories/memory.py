from __future__ import annotations

import itertools
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from devkit.timezone import now_utc
from geo_engine.distance import haversine_distance_meters
from geo_engine.geofence import bounding_box_around
from geo_engine.models import GeoPoint

from hospital_api.repositories.base import (
    DEFAULT_PAGE_LIMIT,
    Hospital,
    HospitalChanges,
    HospitalFilters,
    HospitalRepository,
    NearbyHospital,
    NewHospital,
)


class InMemoryHospitalRepository(HospitalRepository):
    """Process-local store used when no DATABASE_URL is configured."""

    def __init__(self, clock: Callable[[], datetime] = now_utc) -> None:
        self._items: dict[int, Hospital] = {}
        self._ids = itertools.count(1)
        self._clock = clock

    async def create(self, data: NewHospital) -> Hospital:
        now = self._clock()
        hospital = Hospital(
            id=next(self._ids),
            name=data.name,
            type=data.type,
            status=data.status,
            latitude=data.latitude,
            longitude=data.longitude,
            created_at=now,
            updated_at=now,
        )
        self._items[hospital.id] = hospital
        return hospital

    async def find_by_id(self, hospital_id: int) -> Hospital | None:
        return self._items.get(hospital_id)

    async def find_all(
        self,
        filters: HospitalFilters | None = None,
        limit: int = DEFAULT_PAGE_LIMIT,
        offset: int = 0,
    ) -> list[Hospital]:
        matched = self._filtered(filters)
        matched.sort(key=lambda item: (item.created_at, item.id), reverse=True)
        return matched[offset : offset + limit]

    async def find_nearby(
        self,
        point: GeoPoint,
        radius_meters: float,
        filters: HospitalFilters | None = None,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> list[NearbyHospital]:
        box = bounding_box_around(point, radius_meters)
        nearby: list[NearbyHospital] = []
        for hospital in self._filtered(filters):
            if not box.contains(hospital.point):
                continue
            distance = haversine_distance_meters(point, hospital.point)
            if distance <= radius_meters:
                nearby.append(NearbyHospital(hospital=hospital, distance_meters=round(distance)))
        nearby.sort(key=lambda item: item.distance_meters)
        return nearby[:limit]

    async def update(self, hospital_id: int, changes: HospitalChanges) -> Hospital | None:
        current = self._items.get(hospital_id)
        if current is None:
            return None
        values = {
            name: value
            for name, value in (
                ("name", changes.name),
                ("type", changes.type),
                ("status", changes.status),
                ("latitude", changes.latitude),
                ("longitude", changes.longitude),
            )
            if value is not None
        }
        updated = replace(current, updated_at=self._clock(), **values)
        self._items[hospital_id] = updated
        return updated

    async def delete(self, hospital_id: int) -> bool:
        return self._items.pop(hospital_id, None) is not None

    async def count(self, filters: HospitalFilters | None = None) -> int:
        return len(self._filtered(filters))

    def _filtered(self, filters: HospitalFilters | None) -> list[Hospital]:
        active = filters or HospitalFilters()
        return [item for item in self._items.values() if active.matches(item)]
