from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from hospital_api.repositories.base import Hospital, NearbyHospital

MAX_NEARBY_RADIUS_METERS = 100_000


class HospitalType(str, Enum):
    GENERAL = "Générale"
    SPECIALIZED = "Spécialisée"
    MULTIDISCIPLINARY_CLINIC = "Clinique Multidisciplinaire"
    ONCOLOGY_CLINIC = "Clinique d’Oncologie"
    BEAUTY_CLINIC = "Clinique de Beauté et d’Esthétique"
    NEPHROLOGY_CLINIC = "Clinique Néphrologique"
    OPHTHALMOLOGY_CLINIC = "Clinique d’Ophtalmologie"
    UNIVERSITY = "Universitaire"


class HospitalStatus(str, Enum):
    ACTIVE = "Active"
    UNDER_CONSTRUCTION = "En construction"
    UNDER_STUDY = "En étude"


class Coordinate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


def _lift_flat_coordinates(data: Any) -> Any:
    """Accept the legacy form body, which sends `lat`/`lng` at the top level."""
    if not isinstance(data, dict) or "location" in data:
        return data
    if "lat" not in data and "lng" not in data:
        return data
    lifted = {key: value for key, value in data.items() if key not in {"lat", "lng"}}
    lifted["location"] = {"latitude": data.get("lat"), "longitude": data.get("lng")}
    return lifted


class HospitalCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=100)
    type: HospitalType = HospitalType.GENERAL
    status: HospitalStatus = HospitalStatus.ACTIVE
    location: Coordinate

    @model_validator(mode="before")
    @classmethod
    def lift_flat_coordinates(cls, data: Any) -> Any:
        return _lift_flat_coordinates(data)


class HospitalUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=100)
    type: HospitalType | None = None
    status: HospitalStatus | None = None
    location: Coordinate | None = None

    @model_validator(mode="before")
    @classmethod
    def lift_flat_coordinates(cls, data: Any) -> Any:
        return _lift_flat_coordinates(data)


class HospitalItem(BaseModel):
    id: int
    name: str
    type: str
    status: str
    location: Coordinate
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, hospital: Hospital) -> "HospitalItem":
        return cls(
            id=hospital.id,
            name=hospital.name,
            type=hospital.type,
            status=hospital.status,
            location=Coordinate(latitude=hospital.latitude, longitude=hospital.longitude),
            created_at=hospital.created_at,
            updated_at=hospital.updated_at,
        )


class NearbyHospitalItem(HospitalItem):
    distance: float

    @classmethod
    def from_nearby(cls, nearby: NearbyHospital) -> "NearbyHospitalItem":
        base = HospitalItem.from_entity(nearby.hospital)
        return cls(**base.model_dump(), distance=nearby.distance_meters)
