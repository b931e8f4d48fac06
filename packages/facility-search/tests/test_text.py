from facility_search.core.text import contains_keyword, normalize_facility_name, normalize_text


def test_normalize_text_strips_accents_and_punctuation() -> None:
    assert normalize_text("  Hôpital  Cheikh-Khalifa ") == "hopital cheikh khalifa"


def test_normalize_text_handles_empty_values() -> None:
    assert normalize_text(None) == ""
    assert normalize_text("") == ""


def test_contains_keyword_matches_phrases() -> None:
    assert contains_keyword("le centre medical agdal", ["centre medical"])
    assert not contains_keyword("centremedical", ["centre medical"])


def test_normalize_facility_name_drops_prefix_words() -> None:
    assert normalize_facility_name("Pharmacie Ibn Sina", ["pharmacie"]) == "ibn sina"
