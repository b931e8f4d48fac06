from __future__ import annotations

import itertools
import logging
from collections.abc import Sequence

import httpx

from facility_search.core.metrics import InMemorySearchMetricsCollector
from facility_search.core.models import FacilityCategory, ProviderPage, ProviderPlace
from facility_search.providers.base import UNNAMED_FACILITY, BaseProviderAdapter, ClientFactory
from facility_search.providers.schema import OverpassNode, OverpassResponse, OverpassWay
from geo_engine.models import GeoPoint

logger = logging.getLogger(__name__)

DEFAULT_OVERPASS_ENDPOINTS: tuple[str, ...] = (
    "https://overpass-api.de/api/interpreter",
    "https://overpass.kumi.systems/api/interpreter",
    "https://maps.mail.ru/osm/tools/overpass/api/interpreter",
)

# healthcare=laboratory is queried once, with the "laboratory" token
HEALTHCARE_LABORATORY_TOKEN = "laboratory"
NAME_TAGS = ("name", "name:fr", "name:ar", "brand", "operator")


def build_overpass_query(center: GeoPoint, radius_meters: float, amenity: str) -> str:
    """Overpass QL for one amenity around a point; ways are returned with a center."""
    around = f"(around:{int(round(radius_meters))},{center.lat},{center.lng})"
    selectors = [
        f'node["amenity"="{amenity}"]{around};',
        f'way["amenity"="{amenity}"]{around};',
    ]
    if amenity == HEALTHCARE_LABORATORY_TOKEN:
        selectors.append(f'node["healthcare"="laboratory"]{around};')
        selectors.append(f'way["healthcare"="laboratory"]{around};')
    body = "\n  ".join(selectors)
    return f"[out:json][timeout:25];\n(\n  {body}\n);\nout center;"


def format_address(tags: dict[str, str]) -> str | None:
    street = tags.get("addr:street")
    if not street:
        return None
    address = f"{tags.get('addr:housenumber', '')} {street}".strip()
    city = tags.get("addr:city")
    if city:
        address = f"{address}, {city}"
    return address


class OverpassAdapter(BaseProviderAdapter):
    provider_name = "overpass"
    max_pages = 1
    # public mirrors allow two concurrent slots per client address
    max_concurrent_requests = 2
    category_tokens = {
        FacilityCategory.HOSPITAL: ("hospital",),
        FacilityCategory.CLINIC: ("clinic",),
        FacilityCategory.DOCTOR: ("doctors", "dentist"),
        FacilityCategory.PHARMACY: ("pharmacy",),
        FacilityCategory.LABORATORY: ("laboratory", "medical_laboratory"),
    }

    def __init__(
        self,
        endpoints: Sequence[str] = DEFAULT_OVERPASS_ENDPOINTS,
        request_timeout_seconds: float = 30.0,
        metrics: InMemorySearchMetricsCollector | None = None,
        client_factory: ClientFactory | None = None,
    ) -> None:
        if not endpoints:
            raise ValueError("at least one overpass endpoint is required")
        super().__init__(
            request_timeout_seconds=request_timeout_seconds,
            metrics=metrics,
            client_factory=client_factory,
        )
        self._endpoints = tuple(endpoints)
        self._endpoint_cycle = itertools.cycle(self._endpoints)

    def next_endpoint(self) -> str:
        return next(self._endpoint_cycle)

    async def fetch_page(
        self,
        center: GeoPoint,
        radius_meters: float,
        type_token: str,
        page_token: str | None = None,
    ) -> ProviderPage:
        endpoint = self.next_endpoint()
        query = build_overpass_query(center, radius_meters, type_token)
        context = f"amenity={type_token}, endpoint={endpoint}"

        async def _request(client: httpx.AsyncClient) -> httpx.Response:
            return await client.post(endpoint, data={"data": query})

        response = await self._send(_request, context)
        payload = self._parse(response, OverpassResponse)

        places: list[ProviderPlace] = []
        skipped = 0
        for element in payload.elements:
            place = self._to_place(element)
            if place is None:
                skipped += 1
                continue
            places.append(place)
        logger.debug(
            "provider_page_parsed",
            extra={"provider": self.provider_name, "type_token": type_token, "count": len(places), "skipped": skipped},
        )
        return ProviderPage(places=places)

    @staticmethod
    def _to_place(element: OverpassNode | OverpassWay) -> ProviderPlace | None:
        tags = element.tags
        coordinates = element.coordinates
        if not tags or coordinates is None:
            return None
        name = next((tags[key] for key in NAME_TAGS if tags.get(key)), UNNAMED_FACILITY)
        provider_types = tuple(value for value in (tags.get("amenity"), tags.get("healthcare")) if value)
        return ProviderPlace(
            place_id=f"{element.type}/{element.id}",
            name=name,
            lat=coordinates[0],
            lng=coordinates[1],
            provider_types=provider_types,
            address=format_address(tags),
            phone=tags.get("phone") or tags.get("contact:phone"),
            website=tags.get("website") or tags.get("contact:website"),
            opening_hours=tags.get("opening_hours"),
            wheelchair=tags.get("wheelchair"),
            emergency=tags.get("emergency") == "yes",
            tags=dict(tags),
        )
