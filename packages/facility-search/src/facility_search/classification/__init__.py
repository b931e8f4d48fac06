"""Facility category classifier and specialty labels."""

from facility_search.classification.classifier import classify_facility
from facility_search.classification.rules import DEFAULT_RULES, ClassifierRules
from facility_search.classification.specialty import SPECIALTY_LABELS, normalize_specialty, specialty_from_tags

__all__ = [
    "ClassifierRules",
    "DEFAULT_RULES",
    "SPECIALTY_LABELS",
    "classify_facility",
    "normalize_specialty",
    "specialty_from_tags",
]
