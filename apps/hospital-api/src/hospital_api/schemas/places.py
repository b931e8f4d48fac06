from __future__ import annotations

from pydantic import BaseModel, Field


class ReferencePointItem(BaseModel):
    name: str
    lat: float
    lng: float
    status: str | None = None
    hospital_id: int | None = None


class FacilityItem(BaseModel):
    id: str
    name: str
    type: str
    lat: float
    lng: float
    distance: float = Field(description="kilometers from the reference point")
    phone: str | None = None
    address: str | None = None
    website: str | None = None
    opening_hours: str | None = None
    wheelchair: str | None = None
    emergency: bool = False
    specialty: str | None = None
