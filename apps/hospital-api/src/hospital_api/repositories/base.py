from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from geo_engine.models import GeoPoint

DEFAULT_PAGE_LIMIT = 20


@dataclass(frozen=True)
class Hospital:
    id: int
    name: str
    type: str
    status: str
    latitude: float
    longitude: float
    created_at: datetime
    updated_at: datetime

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(lat=self.latitude, lng=self.longitude)


@dataclass(frozen=True)
class NewHospital:
    name: str
    type: str
    status: str
    latitude: float
    longitude: float


@dataclass(frozen=True)
class HospitalChanges:
    name: str | None = None
    type: str | None = None
    status: str | None = None
    latitude: float | None = None
    longitude: float | None = None


@dataclass(frozen=True)
class HospitalFilters:
    type: str | None = None
    status: str | None = None

    def matches(self, hospital: Hospital) -> bool:
        if self.type and hospital.type != self.type:
            return False
        if self.status and hospital.status != self.status:
            return False
        return True


@dataclass(frozen=True)
class NearbyHospital:
    hospital: Hospital
    distance_meters: float


class HospitalRepository(ABC):
    """Persistence contract for hospitals.

    Every call is its own unit of work; nothing spans two calls.
    """

    async def connect(self) -> None:
        return None

    async def close(self) -> None:
        return None

    @abstractmethod
    async def create(self, data: NewHospital) -> Hospital:
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, hospital_id: int) -> Hospital | None:
        raise NotImplementedError

    @abstractmethod
    async def find_all(
        self,
        filters: HospitalFilters | None = None,
        limit: int = DEFAULT_PAGE_LIMIT,
        offset: int = 0,
    ) -> list[Hospital]:
        """Newest first (`created_at` desc, then `id` desc)."""
        raise NotImplementedError

    @abstractmethod
    async def find_nearby(
        self,
        point: GeoPoint,
        radius_meters: float,
        filters: HospitalFilters | None = None,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> list[NearbyHospital]:
        """Hospitals within `radius_meters`, closest first, distance rounded to the meter."""
        raise NotImplementedError

    @abstractmethod
    async def update(self, hospital_id: int, changes: HospitalChanges) -> Hospital | None:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, hospital_id: int) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def count(self, filters: HospitalFilters | None = None) -> int:
        raise NotImplementedError
