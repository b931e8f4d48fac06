from __future__ import annotations

from collections.abc import Sequence

from facility_search.core.metrics import InMemorySearchMetricsCollector
from facility_search.providers.base import BaseProviderAdapter, ClientFactory
from facility_search.providers.google_places import GooglePlacesAdapter
from facility_search.providers.overpass import DEFAULT_OVERPASS_ENDPOINTS, OverpassAdapter

SUPPORTED_PROVIDERS = ("google_places", "overpass")


def build_provider_adapter(
    provider_name: str,
    *,
    api_key: str | None = None,
    region: str = "ma",
    endpoints: Sequence[str] = DEFAULT_OVERPASS_ENDPOINTS,
    request_timeout_seconds: float = 30.0,
    metrics: InMemorySearchMetricsCollector | None = None,
    client_factory: ClientFactory | None = None,
) -> BaseProviderAdapter:
    if provider_name == "google_places":
        return GooglePlacesAdapter(
            api_key=api_key or "",
            region=region,
            request_timeout_seconds=request_timeout_seconds,
            metrics=metrics,
            client_factory=client_factory,
        )
    if provider_name == "overpass":
        return OverpassAdapter(
            endpoints=endpoints,
            request_timeout_seconds=request_timeout_seconds,
            metrics=metrics,
            client_factory=client_factory,
        )
    supported = ", ".join(SUPPORTED_PROVIDERS)
    raise ValueError(f"unsupported provider '{provider_name}', supported: {supported}")
