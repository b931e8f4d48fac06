from __future__ import annotations

import pytest

from facility_search.classification import normalize_specialty, specialty_from_tags


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("cardiology", "Cardiologie"),
        ("  Cardiology ", "Cardiologie"),
        ("general_practice", "Médecine Générale"),
        ("paediatrics", "Pédiatrie"),
        ("ent", "ORL"),
        ("acupuncture", "Acupuncture"),
        ("", ""),
    ],
)
def test_normalize_specialty(raw: str, expected: str) -> None:
    assert normalize_specialty(raw) == expected


def test_normalize_specialty_accepts_none() -> None:
    assert normalize_specialty(None) == ""


def test_specialty_from_tags_uses_first_of_multiple_values() -> None:
    assert specialty_from_tags({"healthcare:speciality": "ophthalmology;surgery"}) == "Ophtalmologie"


def test_specialty_from_tags_reads_medical_specialty() -> None:
    assert specialty_from_tags({"medical_specialty": "urology"}) == "Urologie"


@pytest.mark.parametrize(
    ("tags", "expected"),
    [
        ({"amenity": "dentist"}, "Dentiste"),
        ({"healthcare": "physiotherapist"}, "Kinésithérapie"),
        ({"healthcare": "podiatrist"}, "Podologie"),
        ({"healthcare": "psychotherapist"}, "Psychothérapie"),
        ({"healthcare": "laboratory"}, "Analyses Médicales"),
        ({"amenity": "pharmacy"}, None),
        ({}, None),
    ],
)
def test_specialty_from_tags_fallbacks(tags: dict[str, str], expected: str | None) -> None:
    assert specialty_from_tags(tags) == expected
