from __future__ import annotations

import logging

from geo_engine.models import GeoPoint

from hospital_api.errors import ApiError
from hospital_api.repositories.base import HospitalChanges, HospitalFilters, HospitalRepository, NewHospital
from hospital_api.schemas.hospital import (
    HospitalCreateRequest,
    HospitalItem,
    HospitalUpdateRequest,
    NearbyHospitalItem,
)

logger = logging.getLogger(__name__)


def _not_found(hospital_id: int) -> ApiError:
    return ApiError("NOT_FOUND", f"Hospital {hospital_id} not found", 404)


class HospitalService:
    def __init__(self, repository: HospitalRepository) -> None:
        self._repository = repository

    async def create_hospital(self, body: HospitalCreateRequest) -> HospitalItem:
        created = await self._repository.create(
            NewHospital(
                name=body.name,
                type=body.type.value,
                status=body.status.value,
                latitude=body.location.latitude,
                longitude=body.location.longitude,
            )
        )
        logger.info("hospital_created", extra={"hospital_id": created.id, "hospital_type": created.type})
        return HospitalItem.from_entity(created)

    async def get_hospital(self, hospital_id: int) -> HospitalItem:
        hospital = await self._repository.find_by_id(hospital_id)
        if hospital is None:
            raise _not_found(hospital_id)
        return HospitalItem.from_entity(hospital)

    async def list_hospitals(
        self,
        filters: HospitalFilters,
        limit: int,
        offset: int,
    ) -> tuple[list[HospitalItem], int]:
        rows = await self._repository.find_all(filters, limit=limit, offset=offset)
        total = await self._repository.count(filters)
        return [HospitalItem.from_entity(row) for row in rows], total

    async def count_hospitals(self, filters: HospitalFilters) -> int:
        return await self._repository.count(filters)

    async def find_nearby(
        self,
        point: GeoPoint,
        radius_meters: float,
        filters: HospitalFilters,
        limit: int,
    ) -> list[NearbyHospitalItem]:
        rows = await self._repository.find_nearby(point, radius_meters, filters, limit=limit)
        return [NearbyHospitalItem.from_nearby(row) for row in rows]

    async def update_hospital(self, hospital_id: int, body: HospitalUpdateRequest) -> HospitalItem:
        changes = HospitalChanges(
            name=body.name,
            type=body.type.value if body.type else None,
            status=body.status.value if body.status else None,
            latitude=body.location.latitude if body.location else None,
            longitude=body.location.longitude if body.location else None,
        )
        updated = await self._repository.update(hospital_id, changes)
        if updated is None:
            raise _not_found(hospital_id)
        logger.info(
            "hospital_updated",
            extra={"hospital_id": hospital_id, "fields": sorted(body.model_dump(exclude_none=True))},
        )
        return HospitalItem.from_entity(updated)

    async def delete_hospital(self, hospital_id: int) -> bool:
        deleted = await self._repository.delete(hospital_id)
        if not deleted:
            raise _not_found(hospital_id)
        logger.info("hospital_deleted", extra={"hospital_id": hospital_id})
        return True
