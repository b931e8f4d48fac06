from __future__ import annotations

from collections.abc import Mapping

SPECIALTY_LABELS: dict[str, str] = {
    "general": "Médecine Générale",
    "general_practice": "Médecine Générale",
    "cardiology": "Cardiologie",
    "pediatrics": "Pédiatrie",
    "paediatrics": "Pédiatrie",
    "gynaecology": "Gynécologie",
    "gynecology": "Gynécologie",
    "dermatology": "Dermatologie",
    "ophthalmology": "Ophtalmologie",
    "neurology": "Neurologie",
    "psychiatry": "Psychiatrie",
    "dentist": "Dentiste",
    "orthodontics": "Orthodontie",
    "surgery": "Chirurgie",
    "radiology": "Radiologie",
    "physiotherapy": "Kinésithérapie",
    "ent": "ORL",
    "otolaryngology": "ORL",
    "gastroenterology": "Gastro-entérologie",
    "urology": "Urologie",
    "nephrology": "Néphrologie",
    "pulmonology": "Pneumologie",
    "rheumatology": "Rhumatologie",
    "oncology": "Oncologie",
    "psychotherapy": "Psychothérapie",
    "podiatry": "Podologie",
    "analysis": "Analyses Médicales",
}

SPECIALTY_TAG_KEYS = ("healthcare:speciality", "medical_specialty")

# (tag, value) -> label, checked in order when no explicit specialty tag exists
_TAG_FALLBACKS: tuple[tuple[str, str, str], ...] = (
    ("amenity", "dentist", "Dentiste"),
    ("healthcare", "physiotherapist", "Kinésithérapie"),
    ("healthcare", "podiatrist", "Podologie"),
    ("healthcare", "psychotherapist", "Psychothérapie"),
    ("healthcare", "laboratory", "Analyses Médicales"),
    ("healthcare", "medical_laboratory", "Analyses Médicales"),
)


def normalize_specialty(raw: str | None) -> str:
    """Return the display label for a raw specialty token.

    Unknown tokens are returned lowercased with the first letter capitalized.
    """
    clean = (raw or "").strip().lower()
    label = SPECIALTY_LABELS.get(clean)
    if label:
        return label
    return clean[:1].upper() + clean[1:]


def specialty_from_tags(tags: Mapping[str, str]) -> str | None:
    for key in SPECIALTY_TAG_KEYS:
        raw = tags.get(key)
        if raw:
            first = raw.split(";")[0]
            if first.strip():
                return normalize_specialty(first)
    for key, value, label in _TAG_FALLBACKS:
        if tags.get(key) == value:
            return label
    return None
