from __future__ import annotations

from devkit.config import ServiceSettings

from facility_search.core.metrics import InMemorySearchMetricsCollector
from facility_search.providers.base import ClientFactory
from facility_search.providers.factory import build_provider_adapter
from facility_search.search.config import SearchConfig
from facility_search.search.service import FacilitySearchService


def search_config_from_settings(settings: ServiceSettings) -> SearchConfig:
    return SearchConfig(
        max_latitude=settings.SEARCH_MAX_LATITUDE,
        duplicate_distance_meters=settings.SEARCH_DUPLICATE_DISTANCE_METERS,
        max_retries=settings.SEARCH_MAX_RETRIES,
        retry_base_delay_seconds=settings.SEARCH_RETRY_BASE_DELAY_SECONDS,
        request_timeout_seconds=settings.SEARCH_REQUEST_TIMEOUT_SECONDS,
    )


def build_search_service(
    settings: ServiceSettings,
    provider_name: str | None = None,
    metrics: InMemorySearchMetricsCollector | None = None,
    client_factory: ClientFactory | None = None,
) -> FacilitySearchService:
    adapter = build_provider_adapter(
        provider_name or settings.PLACES_PROVIDER,
        api_key=settings.GOOGLE_PLACES_API_KEY,
        region=settings.GOOGLE_PLACES_REGION,
        endpoints=settings.overpass_endpoints,
        request_timeout_seconds=settings.SEARCH_REQUEST_TIMEOUT_SECONDS,
        metrics=metrics,
        client_factory=client_factory,
    )
    return FacilitySearchService(adapter, config=search_config_from_settings(settings), metrics=metrics)
