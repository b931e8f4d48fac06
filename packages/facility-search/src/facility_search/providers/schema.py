"""Response schemas for the external place-search providers.

Payloads are validated here before any field reaches the classifier.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class _ProviderModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class GoogleLatLng(_ProviderModel):
    lat: float
    lng: float


class GoogleGeometry(_ProviderModel):
    location: GoogleLatLng


class GooglePlaceResult(_ProviderModel):
    place_id: str
    name: str | None = None
    geometry: GoogleGeometry
    types: list[str] = Field(default_factory=list)
    vicinity: str | None = None
    formatted_address: str | None = None
    international_phone_number: str | None = None
    website: str | None = None


class GooglePlacesResponse(_ProviderModel):
    status: str
    results: list[GooglePlaceResult] = Field(default_factory=list)
    next_page_token: str | None = None
    error_message: str | None = None


class OverpassCenter(_ProviderModel):
    lat: float
    lon: float


class OverpassNode(_ProviderModel):
    type: Literal["node"]
    id: int
    lat: float
    lon: float
    tags: dict[str, str] = Field(default_factory=dict)

    @property
    def coordinates(self) -> tuple[float, float] | None:
        return self.lat, self.lon


class OverpassWay(_ProviderModel):
    type: Literal["way", "relation"]
    id: int
    center: OverpassCenter | None = None
    tags: dict[str, str] = Field(default_factory=dict)

    @property
    def coordinates(self) -> tuple[float, float] | None:
        if self.center is None:
            return None
        return self.center.lat, self.center.lon


OverpassElement = Annotated[Union[OverpassNode, OverpassWay], Field(discriminator="type")]


class OverpassResponse(_ProviderModel):
    elements: list[OverpassElement]
