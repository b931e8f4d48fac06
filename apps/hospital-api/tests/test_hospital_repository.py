from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from devkit.db import AsyncDatabaseManager
from geo_engine.models import GeoPoint
from hospital_api.repositories import (
    HospitalChanges,
    HospitalFilters,
    InMemoryHospitalRepository,
    NewHospital,
    SqlHospitalRepository,
)

CASABLANCA = GeoPoint(lat=33.5731, lng=-7.5898)


class TickingClock:
    def __init__(self) -> None:
        self._now = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now


def _new(name: str, lat: float = 33.5731, lng: float = -7.5898, **extra) -> NewHospital:
    values = {"type": "Générale", "status": "Active"}
    values.update(extra)
    return NewHospital(name=name, latitude=lat, longitude=lng, **values)


@pytest_asyncio.fixture(params=["memory", "sql"])
async def repository(request, tmp_path):
    clock = TickingClock()
    if request.param == "memory":
        repo = InMemoryHospitalRepository(clock=clock)
    else:
        pytest.importorskip("aiosqlite")
        db = AsyncDatabaseManager(f"sqlite+aiosqlite:///{tmp_path / 'hospitals.db'}")
        repo = SqlHospitalRepository(db, create_tables=True, clock=clock)
    await repo.connect()
    yield repo
    await repo.close()


@pytest.mark.asyncio
async def test_create_then_find_by_id(repository) -> None:
    created = await repository.create(_new("Hôpital Test"))
    found = await repository.find_by_id(created.id)

    assert found is not None
    assert found.name == "Hôpital Test"
    assert found.latitude == pytest.approx(33.5731, abs=1e-6)
    assert found.longitude == pytest.approx(-7.5898, abs=1e-6)
    assert found.created_at == found.updated_at


@pytest.mark.asyncio
async def test_ids_are_unique(repository) -> None:
    first = await repository.create(_new("A"))
    second = await repository.create(_new("B"))

    assert first.id != second.id


@pytest.mark.asyncio
async def test_find_by_id_returns_none_for_missing(repository) -> None:
    assert await repository.find_by_id(999) is None


@pytest.mark.asyncio
async def test_find_all_orders_newest_first_and_pages(repository) -> None:
    for name in ("first", "second", "third"):
        await repository.create(_new(name))

    page = await repository.find_all(limit=2, offset=0)
    rest = await repository.find_all(limit=2, offset=2)

    assert [item.name for item in page] == ["third", "second"]
    assert [item.name for item in rest] == ["first"]


@pytest.mark.asyncio
async def test_filters_apply_to_find_all_and_count(repository) -> None:
    await repository.create(_new("A", type="Spécialisée"))
    await repository.create(_new("B", status="En construction"))
    await repository.create(_new("C"))

    specialized = await repository.find_all(HospitalFilters(type="Spécialisée"))

    assert [item.name for item in specialized] == ["A"]
    assert await repository.count(HospitalFilters(status="En construction")) == 1
    assert await repository.count(HospitalFilters(type="Générale", status="Active")) == 1
    assert await repository.count() == 3


@pytest.mark.asyncio
async def test_update_changes_only_given_fields(repository) -> None:
    created = await repository.create(_new("Hôpital Test"))

    updated = await repository.update(created.id, HospitalChanges(status="En étude"))

    assert updated is not None
    assert updated.status == "En étude"
    assert updated.name == "Hôpital Test"
    assert updated.latitude == pytest.approx(33.5731, abs=1e-6)
    assert updated.updated_at > created.updated_at
    assert updated.created_at == created.created_at


@pytest.mark.asyncio
async def test_update_missing_returns_none(repository) -> None:
    assert await repository.update(42, HospitalChanges(name="x")) is None


@pytest.mark.asyncio
async def test_delete_reports_whether_a_row_was_removed(repository) -> None:
    created = await repository.create(_new("Hôpital Test"))

    assert await repository.delete(created.id) is True
    assert await repository.delete(created.id) is False
    assert await repository.find_by_id(created.id) is None


@pytest.mark.asyncio
async def test_find_nearby_filters_by_radius_and_sorts(repository) -> None:
    await repository.create(_new("Rabat", lat=34.0209, lng=-6.8416))
    await repository.create(_new("Near", lat=33.5800, lng=-7.5898))
    await repository.create(_new("Here", lat=33.5731, lng=-7.5898))

    nearby = await repository.find_nearby(CASABLANCA, radius_meters=5000)

    assert [item.hospital.name for item in nearby] == ["Here", "Near"]
    assert nearby[0].distance_meters == 0
    assert 700 < nearby[1].distance_meters < 800
    assert nearby[1].distance_meters == round(nearby[1].distance_meters)


@pytest.mark.asyncio
async def test_find_nearby_respects_filters_and_limit(repository) -> None:
    await repository.create(_new("A", lat=33.574, lng=-7.59, status="En étude"))
    await repository.create(_new("B", lat=33.575, lng=-7.59))
    await repository.create(_new("C", lat=33.576, lng=-7.59))

    active = await repository.find_nearby(CASABLANCA, 5000, HospitalFilters(status="Active"), limit=1)

    assert [item.hospital.name for item in active] == ["B"]
