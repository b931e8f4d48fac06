from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from time import perf_counter
from typing import TypeVar

from facility_search.classification.classifier import classify_facility
from facility_search.classification.rules import DEFAULT_RULES, ClassifierRules
from facility_search.classification.specialty import specialty_from_tags
from facility_search.core.exceptions import SearchFailedError
from facility_search.core.metrics import InMemorySearchMetricsCollector
from facility_search.core.models import (
    FacilityCategory,
    MedicalFacility,
    ProviderPlace,
    ReferencePoint,
    SearchOutcome,
    parse_categories,
)
from facility_search.providers.base import BaseProviderAdapter
from facility_search.providers.paged import FetchOutcome, PagedFetcher
from facility_search.search.config import SearchConfig
from facility_search.search.dedup import merge_by_place_id, suppress_near_duplicates
from geo_engine.distance import haversine_distance_km
from geo_engine.geofence import is_within_latitude_limit

R = TypeVar("R")
logger = logging.getLogger(__name__)


class FacilitySearchService:
    def __init__(
        self,
        adapter: BaseProviderAdapter,
        config: SearchConfig | None = None,
        rules: ClassifierRules = DEFAULT_RULES,
        metrics: InMemorySearchMetricsCollector | None = None,
        sleep_fn: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._adapter = adapter
        self._config = config or SearchConfig()
        self._rules = rules
        self._metrics = metrics
        self._sleep = sleep_fn

    @property
    def provider_name(self) -> str:
        return self._adapter.provider_name

    @property
    def metrics(self) -> InMemorySearchMetricsCollector | None:
        return self._metrics

    async def search(
        self,
        reference: ReferencePoint,
        radius_meters: float,
        categories: Iterable[FacilityCategory | str] = (),
    ) -> SearchOutcome:
        if radius_meters <= 0:
            raise ValueError("radius_meters must be > 0")
        requested = parse_categories([getattr(value, "value", value) for value in categories])
        tokens = self._adapter.type_tokens_for(requested)

        logger.info(
            "search_started",
            extra={
                "provider": self._adapter.provider_name,
                "reference": reference.name,
                "radius_meters": radius_meters,
                "tokens": tokens,
            },
        )
        started = perf_counter()
        outcomes = await self._time_async("fetch", lambda: self._fetch_tokens(reference, radius_meters, tokens))
        failures = [outcome for outcome in outcomes if outcome.failed]
        collected = [place for outcome in outcomes for place in outcome.places]

        if failures and len(failures) == len(outcomes) and not collected:
            self._increment_search("failed")
            reason = "; ".join(f"{outcome.type_token}: {outcome.error}" for outcome in failures)
            logger.error(
                "search_failed",
                extra={"provider": self._adapter.provider_name, "failed_tokens": [o.type_token for o in failures]},
            )
            raise SearchFailedError(
                f"all provider queries failed ({reason})",
                failed_tokens=[outcome.type_token for outcome in failures],
            )

        facilities = self._time_sync("aggregate", lambda: self._aggregate(reference, collected, requested))
        self._observe("search_total", (perf_counter() - started) * 1000.0)
        failed_tokens = [outcome.type_token for outcome in failures]
        self._increment_search("partial" if failed_tokens else "ok")
        if self._metrics:
            self._metrics.add_results("collected", len(collected))
            self._metrics.add_results("returned", len(facilities))
        logger.info(
            "search_completed",
            extra={
                "provider": self._adapter.provider_name,
                "collected": len(collected),
                "returned": len(facilities),
                "failed_tokens": failed_tokens,
            },
        )
        return SearchOutcome(
            reference=reference,
            radius_meters=radius_meters,
            facilities=facilities,
            failed_tokens=failed_tokens,
        )

    async def _fetch_tokens(
        self,
        reference: ReferencePoint,
        radius_meters: float,
        tokens: list[str],
    ) -> list[FetchOutcome]:
        limit = self._config.max_concurrency
        if self._adapter.max_concurrent_requests:
            limit = min(limit, self._adapter.max_concurrent_requests)
        semaphore = asyncio.Semaphore(limit)
        fetcher = PagedFetcher(
            self._adapter,
            max_retries=self._config.max_retries,
            base_delay_seconds=self._config.retry_base_delay_seconds,
            request_timeout_seconds=self._config.request_timeout_seconds,
            sleep_fn=self._sleep,
            metrics=self._metrics,
        )

        async def _fetch(token: str) -> FetchOutcome:
            async with semaphore:
                return await fetcher.fetch_all(reference.point, radius_meters, token)

        return list(await asyncio.gather(*(_fetch(token) for token in tokens)))

    def _aggregate(
        self,
        reference: ReferencePoint,
        places: list[ProviderPlace],
        requested: frozenset[FacilityCategory],
    ) -> list[MedicalFacility]:
        unique = merge_by_place_id(places)
        in_area = [place for place in unique if is_within_latitude_limit(place.point, self._config.max_latitude)]
        distinct = suppress_near_duplicates(
            in_area,
            threshold_meters=self._config.duplicate_distance_meters,
            prefixes=self._config.name_prefixes,
        )
        facilities: list[MedicalFacility] = []
        for place in distinct:
            category = classify_facility(place.provider_types, place.name, place.address, rules=self._rules)
            if requested and category not in requested:
                continue
            facilities.append(self._to_facility(reference, place, category))
        facilities.sort(key=lambda facility: facility.distance)
        return facilities

    @staticmethod
    def _to_facility(reference: ReferencePoint, place: ProviderPlace, category: FacilityCategory) -> MedicalFacility:
        return MedicalFacility(
            id=place.place_id,
            name=place.name,
            type=category,
            lat=place.lat,
            lng=place.lng,
            distance=haversine_distance_km(reference.point, place.point),
            phone=place.phone,
            address=place.address,
            website=place.website,
            opening_hours=place.opening_hours,
            wheelchair=place.wheelchair,
            emergency=place.emergency,
            specialty=specialty_from_tags(place.tags),
        )

    async def _time_async(self, stage: str, action: Callable[[], Awaitable[R]]) -> R:
        started = perf_counter()
        result = await action()
        self._observe(stage, (perf_counter() - started) * 1000.0)
        return result

    def _time_sync(self, stage: str, action: Callable[[], R]) -> R:
        started = perf_counter()
        result = action()
        self._observe(stage, (perf_counter() - started) * 1000.0)
        return result

    def _observe(self, stage: str, duration_ms: float) -> None:
        if self._metrics:
            self._metrics.observe_stage_duration(stage, duration_ms)

    def _increment_search(self, status: str) -> None:
        if self._metrics:
            self._metrics.increment_search(status)
