"""Place-search provider adapters."""

from facility_search.providers.base import BaseProviderAdapter
from facility_search.providers.factory import build_provider_adapter
from facility_search.providers.google_places import GooglePlacesAdapter
from facility_search.providers.overpass import OverpassAdapter
from facility_search.providers.paged import FetchOutcome, FetchState, PagedFetcher

__all__ = [
    "BaseProviderAdapter",
    "FetchOutcome",
    "FetchState",
    "GooglePlacesAdapter",
    "OverpassAdapter",
    "PagedFetcher",
    "build_provider_adapter",
]
