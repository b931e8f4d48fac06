from __future__ import annotations

from devkit.config import ServiceSettings
from devkit.db import AsyncDatabaseManager

from hospital_api.repositories.base import (
    Hospital,
    HospitalChanges,
    HospitalFilters,
    HospitalRepository,
    NearbyHospital,
    NewHospital,
)
from hospital_api.repositories.memory import InMemoryHospitalRepository
from hospital_api.repositories.sql import SqlHospitalRepository


def build_hospital_repository(settings: ServiceSettings) -> HospitalRepository:
    if not settings.DATABASE_URL:
        return InMemoryHospitalRepository()
    db = AsyncDatabaseManager(
        settings.DATABASE_URL,
        pool_min_size=settings.DB_POOL_MIN_SIZE,
        pool_max_size=settings.DB_POOL_MAX_SIZE,
    )
    return SqlHospitalRepository(db, create_tables=settings.DB_AUTO_CREATE_TABLES)


__all__ = [
    "Hospital",
    "HospitalChanges",
    "HospitalFilters",
    "HospitalRepository",
    "InMemoryHospitalRepository",
    "NearbyHospital",
    "NewHospital",
    "SqlHospitalRepository",
    "build_hospital_repository",
]
