from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from facility_search.core.exceptions import SearchFailedError
from facility_search.core.models import SEARCHABLE_CATEGORIES

from hospital_api.dependencies import get_api_metrics, get_places_service
from hospital_api.errors import ApiError
from hospital_api.observability import HospitalApiMetrics
from hospital_api.response import success_response
from hospital_api.schemas.places import FacilityItem, ReferencePointItem
from hospital_api.services.places_service import PlacesService

router = APIRouter(prefix="/api/places", tags=["places"])
logger = logging.getLogger(__name__)

SEARCHABLE = tuple(category.value for category in SEARCHABLE_CATEGORIES)


@router.get("/search")
async def search_places(
    latitude: float | None = Query(default=None, ge=-90, le=90),
    longitude: float | None = Query(default=None, ge=-180, le=180),
    hospital_id: int | None = Query(default=None, ge=1),
    radius_km: float = Query(default=5.0, gt=0, le=50),
    category: list[str] = Query(default=[]),
    service: PlacesService = Depends(get_places_service),
    metrics: HospitalApiMetrics = Depends(get_api_metrics),
) -> dict:
    unknown = sorted({value for value in category if value not in SEARCHABLE})
    if unknown:
        raise ApiError(
            "VALIDATION_ERROR",
            f"Unsupported category: {', '.join(unknown)}",
            400,
            fields={"category": f"must be one of {', '.join(SEARCHABLE)}"},
        )
    reference = await service.resolve_reference(hospital_id, latitude, longitude)
    try:
        outcome = await service.search(reference, radius_km, category)
    except SearchFailedError as exc:
        metrics.observe_search(service.provider_name, "failed")
        raise ApiError("SEARCH_FAILED", exc.reason, 502) from exc

    metrics.observe_search(
        service.provider_name,
        "partial" if outcome.is_partial else "ok",
        len(outcome.facilities),
    )
    if outcome.is_partial:
        logger.warning("places_search_partial", extra={"failed_tokens": outcome.failed_tokens})
    reference_item = ReferencePointItem(
        name=reference.name,
        lat=reference.lat,
        lng=reference.lng,
        status=reference.status,
        hospital_id=hospital_id,
    )
    data = [FacilityItem(**facility.to_dict()).model_dump() for facility in outcome.facilities]
    meta = {
        "count": len(data),
        "radius_km": radius_km,
        "provider": service.provider_name,
        "reference": reference_item.model_dump(),
        "failed_tokens": outcome.failed_tokens,
    }
    return success_response(data, meta=meta)
