from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from geo_engine.models import GeoPoint


class FacilityCategory(str, Enum):
    HOSPITAL = "hospital"
    CLINIC = "clinic"
    DOCTOR = "doctor"
    PHARMACY = "pharmacy"
    LABORATORY = "laboratory"
    OTHER = "other"


SEARCHABLE_CATEGORIES: tuple[FacilityCategory, ...] = (
    FacilityCategory.HOSPITAL,
    FacilityCategory.CLINIC,
    FacilityCategory.DOCTOR,
    FacilityCategory.PHARMACY,
    FacilityCategory.LABORATORY,
)


def parse_categories(values: list[str] | tuple[str, ...] | None) -> frozenset[FacilityCategory]:
    if not values:
        return frozenset()
    parsed: set[FacilityCategory] = set()
    for value in values:
        try:
            category = FacilityCategory(value.strip().lower())
        except ValueError as exc:
            allowed = ", ".join(item.value for item in SEARCHABLE_CATEGORIES)
            raise ValueError(f"unsupported category '{value}', supported: {allowed}") from exc
        if category is FacilityCategory.OTHER:
            raise ValueError("category 'other' cannot be searched for")
        parsed.add(category)
    return frozenset(parsed)


@dataclass(frozen=True)
class ReferencePoint:
    lat: float
    lng: float
    name: str
    status: str | None = None

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lng=self.lng)


@dataclass(frozen=True)
class ProviderPlace:
    place_id: str
    name: str
    lat: float
    lng: float
    provider_types: tuple[str, ...] = ()
    address: str | None = None
    phone: str | None = None
    website: str | None = None
    opening_hours: str | None = None
    wheelchair: str | None = None
    emergency: bool = False
    tags: dict[str, str] = field(default_factory=dict)

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lng=self.lng)


@dataclass(frozen=True)
class ProviderPage:
    places: list[ProviderPlace]
    next_page_token: str | None = None


@dataclass(frozen=True)
class MedicalFacility:
    id: str
    name: str
    type: FacilityCategory
    lat: float
    lng: float
    distance: float
    phone: str | None = None
    address: str | None = None
    website: str | None = None
    opening_hours: str | None = None
    wheelchair: str | None = None
    emergency: bool = False
    specialty: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "lat": self.lat,
            "lng": self.lng,
            "distance": round(self.distance, 3),
            "phone": self.phone,
            "address": self.address,
            "website": self.website,
            "opening_hours": self.opening_hours,
            "wheelchair": self.wheelchair,
            "emergency": self.emergency,
            "specialty": self.specialty,
        }


@dataclass(frozen=True)
class SearchOutcome:
    reference: ReferencePoint
    radius_meters: float
    facilities: list[MedicalFacility]
    failed_tokens: list[str] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return bool(self.failed_tokens)
