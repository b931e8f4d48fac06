from __future__ import annotations

from collections.abc import Iterable

from facility_search.classification.rules import DEFAULT_RULES, ClassifierRules
from facility_search.core.models import FacilityCategory
from facility_search.core.text import contains_keyword, normalize_text


def classify_facility(
    provider_types: Iterable[str],
    name: str | None,
    address: str | None = None,
    rules: ClassifierRules = DEFAULT_RULES,
) -> FacilityCategory:
    """Map a provider place to one facility category.

    Rules are evaluated in priority order and the first match wins. Exclusions
    run first so that a mosque tagged `health` never reaches the medical checks.
    """
    types = {value.strip().lower() for value in provider_types if value and value.strip()}
    name_text = normalize_text(name)
    text = " ".join(part for part in (name_text, normalize_text(address)) if part)

    if types & set(rules.non_medical_types):
        return FacilityCategory.OTHER
    if contains_keyword(text, rules.non_medical_keywords) and not contains_keyword(
        text, rules.medical_override_keywords
    ):
        return FacilityCategory.OTHER

    if contains_keyword(name_text, rules.clinic_keywords):
        return FacilityCategory.CLINIC

    if types & set(rules.hospital_types) or contains_keyword(name_text, rules.hospital_keywords):
        return FacilityCategory.HOSPITAL

    if types & set(rules.pharmacy_types):
        if contains_keyword(text, rules.hardware_store_keywords):
            return FacilityCategory.OTHER
        return FacilityCategory.PHARMACY
    if contains_keyword(name_text, rules.pharmacy_keywords) and not contains_keyword(
        text, rules.hardware_store_keywords
    ):
        return FacilityCategory.PHARMACY

    if types & set(rules.laboratory_types) or contains_keyword(name_text, rules.laboratory_keywords):
        return FacilityCategory.LABORATORY

    false_positive = bool(types & set(rules.doctor_false_positive_types))
    if types & set(rules.doctor_types):
        return FacilityCategory.OTHER if false_positive else FacilityCategory.DOCTOR

    if types & set(rules.clinic_types):
        return FacilityCategory.CLINIC
    if types & set(rules.generic_health_types) and not false_positive:
        return FacilityCategory.DOCTOR

    return FacilityCategory.OTHER
