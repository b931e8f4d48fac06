from __future__ import annotations

from dataclasses import dataclass, fields, replace

from facility_search.core.text import normalize_text


@dataclass(frozen=True)
class ClassifierRules:
    """Keyword and provider-type lists driving `classify_facility`.

    Keywords are compared against normalized text (lowercase, no accents), so
    lists may be written with or without diacritics. Provider types are compared
    lowercase.
    """

    non_medical_types: tuple[str, ...] = ()
    non_medical_keywords: tuple[str, ...] = ()
    medical_override_keywords: tuple[str, ...] = ()
    clinic_keywords: tuple[str, ...] = ()
    hospital_types: tuple[str, ...] = ()
    hospital_keywords: tuple[str, ...] = ()
    pharmacy_types: tuple[str, ...] = ()
    pharmacy_keywords: tuple[str, ...] = ()
    hardware_store_keywords: tuple[str, ...] = ()
    laboratory_types: tuple[str, ...] = ()
    laboratory_keywords: tuple[str, ...] = ()
    doctor_types: tuple[str, ...] = ()
    doctor_false_positive_types: tuple[str, ...] = ()
    clinic_types: tuple[str, ...] = ()
    generic_health_types: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for item in fields(self):
            values = getattr(self, item.name)
            if item.name.endswith("_types"):
                normalized = tuple(value.strip().lower() for value in values if value.strip())
            else:
                normalized = tuple(text for text in (normalize_text(value) for value in values) if text)
            object.__setattr__(self, item.name, normalized)

    def extend(self, **extra: list[str] | tuple[str, ...]) -> "ClassifierRules":
        known = {item.name for item in fields(self)}
        unknown = sorted(set(extra) - known)
        if unknown:
            raise ValueError(f"unknown classifier rule lists: {', '.join(unknown)}")
        changes = {name: tuple(getattr(self, name)) + tuple(values) for name, values in extra.items()}
        return replace(self, **changes)


DEFAULT_RULES = ClassifierRules(
    non_medical_types=(
        "place_of_worship",
        "mosque",
        "church",
        "synagogue",
        "hindu_temple",
        "restaurant",
        "cafe",
        "bar",
        "meal_takeaway",
        "meal_delivery",
        "bakery",
        "school",
        "primary_school",
        "secondary_school",
        "university",
        "hardware_store",
        "home_goods_store",
        "car_repair",
        "gas_station",
        "supermarket",
        "clothing_store",
    ),
    non_medical_keywords=(
        "mosquee",
        "mosque",
        "masjid",
        "eglise",
        "church",
        "restaurant",
        "cafe",
        "snack",
        "ecole",
        "school",
        "lycee",
        "college",
        "مسجد",
        "مطعم",
        "مدرسة",
    ),
    medical_override_keywords=(
        "pharmacie",
        "pharmacy",
        "clinique",
        "polyclinique",
        "clinic",
        "laboratoire",
        "laboratory",
        "labo",
        "docteur",
        "doctor",
        "dr",
        "medecin",
        "medical",
        "medicale",
        "hopital",
        "hospital",
        "sante",
        "dentiste",
        "dentaire",
        "صيدلية",
        "مصحة",
        "مستشفى",
        "طبيب",
    ),
    clinic_keywords=(
        "clinique",
        "polyclinique",
        "clinic",
        "polyclinic",
        "medical center",
        "medical centre",
        "centre medical",
        "centre de sante",
        "مصحة",
    ),
    hospital_types=("hospital",),
    hospital_keywords=(
        "hopital",
        "hospital",
        "chu",
        "centre hospitalier",
        "مستشفى",
    ),
    pharmacy_types=("pharmacy",),
    pharmacy_keywords=("pharmacie", "pharmacy", "صيدلية"),
    hardware_store_keywords=(
        "droguerie",
        "quincaillerie",
        "hardware",
        "bricolage",
        "peinture",
    ),
    laboratory_types=("laboratory", "medical_laboratory"),
    laboratory_keywords=(
        "laboratoire",
        "laboratory",
        "labo",
        "analyses medicales",
        "مختبر",
    ),
    doctor_types=("doctor", "doctors", "dentist"),
    doctor_false_positive_types=("bank", "atm", "finance", "lodging", "hotel", "school"),
    clinic_types=("clinic",),
    generic_health_types=("health", "healthcare", "physiotherapist", "medical"),
)
