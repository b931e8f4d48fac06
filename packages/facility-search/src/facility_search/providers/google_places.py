from __future__ import annotations

import logging

import httpx

from facility_search.core.exceptions import ProviderClientError, ProviderTemporaryError
from facility_search.core.metrics import InMemorySearchMetricsCollector
from facility_search.core.models import FacilityCategory, ProviderPage, ProviderPlace
from facility_search.providers.base import UNNAMED_FACILITY, BaseProviderAdapter, ClientFactory
from facility_search.providers.schema import GooglePlaceResult, GooglePlacesResponse
from geo_engine.models import GeoPoint

logger = logging.getLogger(__name__)

NEARBY_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"

_SUCCESS_STATUSES = {"OK", "ZERO_RESULTS"}
_TEMPORARY_STATUSES = {"OVER_QUERY_LIMIT", "UNKNOWN_ERROR"}

# Google place types that carry a specialty, expressed as the OSM tags the
# specialty fallback understands
_SPECIALTY_TYPE_TAGS = {
    "dentist": ("amenity", "dentist"),
    "physiotherapist": ("healthcare", "physiotherapist"),
}


class GooglePlacesAdapter(BaseProviderAdapter):
    provider_name = "google_places"
    max_pages = 3
    page_token_delay_seconds = 2.0
    category_tokens = {
        FacilityCategory.HOSPITAL: ("hospital",),
        FacilityCategory.CLINIC: ("hospital", "doctor"),
        FacilityCategory.DOCTOR: ("doctor", "dentist"),
        FacilityCategory.PHARMACY: ("pharmacy",),
        FacilityCategory.LABORATORY: ("health",),
    }

    def __init__(
        self,
        api_key: str,
        region: str = "ma",
        base_url: str = NEARBY_SEARCH_URL,
        request_timeout_seconds: float = 30.0,
        metrics: InMemorySearchMetricsCollector | None = None,
        client_factory: ClientFactory | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("google places api key is required")
        super().__init__(
            request_timeout_seconds=request_timeout_seconds,
            metrics=metrics,
            client_factory=client_factory,
        )
        self._api_key = api_key
        self._region = region
        self._base_url = base_url

    async def fetch_page(
        self,
        center: GeoPoint,
        radius_meters: float,
        type_token: str,
        page_token: str | None = None,
    ) -> ProviderPage:
        if page_token:
            params = {"pagetoken": page_token, "key": self._api_key}
        else:
            params = {
                "location": f"{center.lat},{center.lng}",
                "radius": str(int(round(radius_meters))),
                "type": type_token,
                "region": self._region,
                "key": self._api_key,
            }
        context = f"type={type_token}, continuation={page_token is not None}"

        async def _request(client: httpx.AsyncClient) -> httpx.Response:
            return await client.get(self._base_url, params=params)

        response = await self._send(_request, context)
        payload = self._parse(response, GooglePlacesResponse)
        self._check_status(payload, context, is_continuation=page_token is not None)

        places = [self._to_place(result) for result in payload.results]
        logger.debug(
            "provider_page_parsed",
            extra={"provider": self.provider_name, "type_token": type_token, "count": len(places)},
        )
        return ProviderPage(places=places, next_page_token=payload.next_page_token or None)

    def _check_status(self, payload: GooglePlacesResponse, context: str, is_continuation: bool) -> None:
        status = payload.status
        if status in _SUCCESS_STATUSES:
            return
        detail = payload.error_message or status
        self._record_http_error(status)
        # a fresh next_page_token is rejected until the provider activates it
        if status in _TEMPORARY_STATUSES or (status == "INVALID_REQUEST" and is_continuation):
            raise ProviderTemporaryError(f"{self.provider_name} status {status}: {detail}, {context}")
        raise ProviderClientError(f"{self.provider_name} status {status}: {detail}, {context}")

    @staticmethod
    def _to_place(result: GooglePlaceResult) -> ProviderPlace:
        location = result.geometry.location
        return ProviderPlace(
            place_id=result.place_id,
            name=result.name or UNNAMED_FACILITY,
            lat=location.lat,
            lng=location.lng,
            provider_types=tuple(result.types),
            address=result.vicinity or result.formatted_address,
            phone=result.international_phone_number,
            website=result.website,
            tags=_specialty_tags(result.types),
        )


def _specialty_tags(types: list[str]) -> dict[str, str]:
    tags: dict[str, str] = {}
    for place_type in types:
        tag = _SPECIALTY_TYPE_TAGS.get(place_type)
        if tag:
            tags.setdefault(*tag)
    return tags
