from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from devkit.db import AsyncDatabaseManager, Base, create_all_tables
from devkit.timezone import now_utc
from geo_engine.distance import haversine_distance_meters
from geo_engine.geofence import bounding_box_around
from geo_engine.models import GeoPoint
from sqlalchemy import DateTime, Index, Integer, Numeric, Select, String, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column

from hospital_api.repositories.base import (
    DEFAULT_PAGE_LIMIT,
    Hospital,
    HospitalChanges,
    HospitalFilters,
    HospitalRepository,
    NearbyHospital,
    NewHospital,
)

logger = logging.getLogger(__name__)


class HospitalORM(Base):
    __tablename__ = "hospitals"
    __table_args__ = (Index("idx_hospitals_lat_lng", "lat", "lng"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    lat: Mapped[float] = mapped_column(Numeric(10, 7, asdecimal=False), nullable=False)
    lng: Mapped[float] = mapped_column(Numeric(11, 7, asdecimal=False), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


def _apply_filters(statement: Select, filters: HospitalFilters | None) -> Select:
    if filters is None:
        return statement
    if filters.type:
        statement = statement.where(HospitalORM.type == filters.type)
    if filters.status:
        statement = statement.where(HospitalORM.status == filters.status)
    return statement


def _as_utc(value: datetime) -> datetime:
    # SQLite drops the offset on read
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SqlHospitalRepository(HospitalRepository):
    def __init__(
        self,
        db: AsyncDatabaseManager,
        *,
        create_tables: bool = False,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self._db = db
        self._create_tables = create_tables
        self._clock = clock

    async def connect(self) -> None:
        await self._db.connect()
        if self._create_tables:
            await create_all_tables(self._db.engine, Base.metadata)
            logger.info("hospital_tables_ensured")

    async def close(self) -> None:
        await self._db.disconnect()

    async def create(self, data: NewHospital) -> Hospital:
        now = self._clock()

        async def _run(session: AsyncSession) -> Hospital:
            row = HospitalORM(
                name=data.name,
                type=data.type,
                status=data.status,
                lat=data.latitude,
                lng=data.longitude,
                created_at=now,
                updated_at=now,
            )
            session.add(row)
            await session.flush()
            return self._to_entity(row)

        return await self._db.run_with_session(_run)

    async def find_by_id(self, hospital_id: int) -> Hospital | None:
        async def _run(session: AsyncSession) -> Hospital | None:
            row = await session.get(HospitalORM, hospital_id)
            return self._to_entity(row) if row else None

        return await self._db.run_with_session(_run)

    async def find_all(
        self,
        filters: HospitalFilters | None = None,
        limit: int = DEFAULT_PAGE_LIMIT,
        offset: int = 0,
    ) -> list[Hospital]:
        async def _run(session: AsyncSession) -> list[Hospital]:
            statement = _apply_filters(select(HospitalORM), filters)
            statement = statement.order_by(HospitalORM.created_at.desc(), HospitalORM.id.desc())
            rows = (await session.scalars(statement.offset(offset).limit(limit))).all()
            return [self._to_entity(row) for row in rows]

        return await self._db.run_with_session(_run)

    async def find_nearby(
        self,
        point: GeoPoint,
        radius_meters: float,
        filters: HospitalFilters | None = None,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> list[NearbyHospital]:
        box = bounding_box_around(point, radius_meters)

        async def _run(session: AsyncSession) -> list[Hospital]:
            statement = select(HospitalORM).where(
                HospitalORM.lat.between(box.min_lat, box.max_lat),
                HospitalORM.lng.between(box.min_lng, box.max_lng),
            )
            rows = (await session.scalars(_apply_filters(statement, filters))).all()
            return [self._to_entity(row) for row in rows]

        candidates = await self._db.run_with_session(_run)
        nearby: list[NearbyHospital] = []
        for hospital in candidates:
            distance = haversine_distance_meters(point, hospital.point)
            if distance <= radius_meters:
                nearby.append(NearbyHospital(hospital=hospital, distance_meters=round(distance)))
        nearby.sort(key=lambda item: item.distance_meters)
        return nearby[:limit]

    async def update(self, hospital_id: int, changes: HospitalChanges) -> Hospital | None:
        now = self._clock()

        async def _run(session: AsyncSession) -> Hospital | None:
            row = await session.get(HospitalORM, hospital_id)
            if row is None:
                return None
            if changes.name is not None:
                row.name = changes.name
            if changes.type is not None:
                row.type = changes.type
            if changes.status is not None:
                row.status = changes.status
            if changes.latitude is not None:
                row.lat = changes.latitude
            if changes.longitude is not None:
                row.lng = changes.longitude
            row.updated_at = now
            await session.flush()
            return self._to_entity(row)

        return await self._db.run_with_session(_run)

    async def delete(self, hospital_id: int) -> bool:
        async def _run(session: AsyncSession) -> bool:
            result = await session.execute(delete(HospitalORM).where(HospitalORM.id == hospital_id))
            return bool(result.rowcount)

        return await self._db.run_with_session(_run)

    async def count(self, filters: HospitalFilters | None = None) -> int:
        async def _run(session: AsyncSession) -> int:
            statement = _apply_filters(select(func.count()).select_from(HospitalORM), filters)
            return int((await session.scalar(statement)) or 0)

        return await self._db.run_with_session(_run)

    @staticmethod
    def _to_entity(row: HospitalORM) -> Hospital:
        return Hospital(
            id=row.id,
            name=row.name,
            type=row.type,
            status=row.status,
            latitude=float(row.lat),
            longitude=float(row.lng),
            created_at=_as_utc(row.created_at),
            updated_at=_as_utc(row.updated_at),
        )
