from facility_search.search.config import NORTHERN_MOROCCO_MAX_LATITUDE, SearchConfig
from facility_search.search.dedup import merge_by_place_id, suppress_near_duplicates
from facility_search.search.factory import build_search_service, search_config_from_settings
from facility_search.search.service import FacilitySearchService

__all__ = [
    "FacilitySearchService",
    "NORTHERN_MOROCCO_MAX_LATITUDE",
    "SearchConfig",
    "build_search_service",
    "merge_by_place_id",
    "search_config_from_settings",
    "suppress_near_duplicates",
]
