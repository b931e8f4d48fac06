"""Nearby medical facility search over external place providers."""

from facility_search.classification import classify_facility, normalize_specialty
from facility_search.core.exceptions import SearchFailedError
from facility_search.core.models import FacilityCategory, MedicalFacility, ReferencePoint, SearchOutcome
from facility_search.search import FacilitySearchService, SearchConfig, build_search_service

__all__ = [
    "FacilityCategory",
    "FacilitySearchService",
    "MedicalFacility",
    "ReferencePoint",
    "SearchConfig",
    "SearchFailedError",
    "SearchOutcome",
    "build_search_service",
    "classify_facility",
    "normalize_specialty",
]
