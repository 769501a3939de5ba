import pytest

from inputs_api.services.formatting import first_letter_label, to_title_case


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("extra therapeutic_factors-b", "Extra Therapeutic Factors B"),
        ("clinical outcome in patient", "Clinical Outcome In Patient"),
        ("SLEEP quality", "Sleep Quality"),
        ("cbt", "Cbt"),
        ("multi   space__and--dash", "Multi Space And Dash"),
    ],
)
def test_to_title_case(raw, expected):
    assert to_title_case(raw) == expected


def test_to_title_case_empty_string():
    assert to_title_case("") == ""


def test_first_letter_label_only_touches_first_character():
    assert first_letter_label("treatment") == "Treatment"
    assert first_letter_label("clinical outcome") == "Clinical outcome"
    assert first_letter_label("") == ""
