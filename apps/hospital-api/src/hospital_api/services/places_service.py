from __future__ import annotations

import logging

from facility_search.core.models import ReferencePoint, SearchOutcome
from facility_search.search.service import FacilitySearchService

from hospital_api.errors import ApiError
from hospital_api.repositories.base import HospitalRepository

logger = logging.getLogger(__name__)

MAP_POINT_NAME = "Point sélectionné"


class PlacesService:
    """Runs facility searches around a stored hospital or a free map point."""

    def __init__(self, search_service: FacilitySearchService, repository: HospitalRepository) -> None:
        self._search_service = search_service
        self._repository = repository

    async def resolve_reference(
        self,
        hospital_id: int | None,
        latitude: float | None,
        longitude: float | None,
    ) -> ReferencePoint:
        if hospital_id is not None:
            hospital = await self._repository.find_by_id(hospital_id)
            if hospital is None:
                logger.warning("places_reference_not_found", extra={"hospital_id": hospital_id})
                raise ApiError("NOT_FOUND", f"Hospital {hospital_id} not found", 404)
            return ReferencePoint(
                lat=hospital.latitude,
                lng=hospital.longitude,
                name=hospital.name,
                status=hospital.status,
            )
        if latitude is None or longitude is None:
            raise ApiError(
                "VALIDATION_ERROR",
                "Provide hospital_id or both latitude and longitude",
                400,
                fields={"latitude": "required without hospital_id", "longitude": "required without hospital_id"},
            )
        return ReferencePoint(lat=latitude, lng=longitude, name=MAP_POINT_NAME)

    async def search(
        self,
        reference: ReferencePoint,
        radius_km: float,
        categories: list[str],
    ) -> SearchOutcome:
        return await self._search_service.search(reference, radius_km * 1000.0, categories)

    @property
    def provider_name(self) -> str:
        return self._search_service.provider_name
