from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from geo_engine.models import GeoPoint

from hospital_api.dependencies import get_hospital_service
from hospital_api.repositories.base import HospitalFilters
from hospital_api.response import success_response
from hospital_api.schemas.hospital import (
    MAX_NEARBY_RADIUS_METERS,
    HospitalCreateRequest,
    HospitalStatus,
    HospitalType,
    HospitalUpdateRequest,
)
from hospital_api.services.hospital_service import HospitalService

router = APIRouter(prefix="/api/hospitals", tags=["hospitals"])
legacy_router = APIRouter(prefix="/api/add/hospitals", tags=["hospitals"])


def _filters(type: HospitalType | None, status: HospitalStatus | None) -> HospitalFilters:
    return HospitalFilters(
        type=type.value if type else None,
        status=status.value if status else None,
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_hospital(
    body: HospitalCreateRequest,
    service: HospitalService = Depends(get_hospital_service),
) -> dict:
    created = await service.create_hospital(body)
    return success_response(created.model_dump(mode="json"), meta={})


@legacy_router.post("/", status_code=status.HTTP_201_CREATED)
async def create_hospital_from_form(
    body: HospitalCreateRequest,
    service: HospitalService = Depends(get_hospital_service),
) -> dict:
    created = await service.create_hospital(body)
    return success_response(created.model_dump(mode="json"), meta={})


@router.get("")
async def list_hospitals(
    type: HospitalType | None = None,
    status: HospitalStatus | None = None,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    service: HospitalService = Depends(get_hospital_service),
) -> dict:
    items, total = await service.list_hospitals(_filters(type, status), limit=limit, offset=offset)
    meta = {"total": total, "limit": limit, "offset": offset, "has_more": offset + len(items) < total}
    return success_response([item.model_dump(mode="json") for item in items], meta=meta)


@router.get("/count")
async def count_hospitals(
    type: HospitalType | None = None,
    status: HospitalStatus | None = None,
    service: HospitalService = Depends(get_hospital_service),
) -> dict:
    total = await service.count_hospitals(_filters(type, status))
    return success_response({"count": total}, meta={})


@router.get("/nearby")
async def nearby_hospitals(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    radius: float = Query(default=5000, gt=0, le=MAX_NEARBY_RADIUS_METERS),
    type: HospitalType | None = None,
    status: HospitalStatus | None = None,
    limit: int = Query(default=20, ge=1, le=100),
    service: HospitalService = Depends(get_hospital_service),
) -> dict:
    items = await service.find_nearby(
        GeoPoint(lat=latitude, lng=longitude),
        radius,
        _filters(type, status),
        limit=limit,
    )
    meta = {"count": len(items), "radius": radius}
    return success_response([item.model_dump(mode="json") for item in items], meta=meta)


@router.get("/{hospital_id}")
async def get_hospital(
    hospital_id: int,
    service: HospitalService = Depends(get_hospital_service),
) -> dict:
    item = await service.get_hospital(hospital_id)
    return success_response(item.model_dump(mode="json"), meta={})


@router.put("/{hospital_id}")
async def update_hospital(
    hospital_id: int,
    body: HospitalUpdateRequest,
    service: HospitalService = Depends(get_hospital_service),
) -> dict:
    item = await service.update_hospital(hospital_id, body)
    return success_response(item.model_dump(mode="json"), meta={})


@router.delete("/{hospital_id}")
async def delete_hospital(
    hospital_id: int,
    service: HospitalService = Depends(get_hospital_service),
) -> dict:
    deleted = await service.delete_hospital(hospital_id)
    return success_response({"deleted": deleted}, meta={})
