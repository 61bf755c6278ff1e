from decimal import Decimal

import pytest

from app.services.grading import derive_grade, parse_score
from app.services.results import ErrorKind


@pytest.mark.parametrize("total, letter, gpa", [
    (100, "A", "5.00"),
    (80, "A", "5.00"),
    (79.99, "B", "4.00"),
    (70, "B", "4.00"),
    (69.99, "C", "3.00"),
    (60, "C", "3.00"),
    (59.99, "D", "2.00"),
    (50, "D", "2.00"),
    (49.99, "E", "1.00"),
    (40, "E", "1.00"),
    (39.99, "F", "0.00"),
    (0, "F", "0.00"),
])
def test_grade_bands_boundaries(total, letter, gpa):
    details = derive_grade(total, None)
    assert details.letter_grade == letter
    assert details.gpa == gpa


def test_total_is_sum_to_two_places():
    assert derive_grade(35, 38).total_score == "73.00"
    assert derive_grade(12.5, 40.25).total_score == "52.75"
    assert derive_grade(Decimal("29.99"), Decimal("50.01")).total_score == "80.00"


def test_missing_components_count_as_zero():
    assert derive_grade(None, None).total_score == "0.00"
    assert derive_grade(None, None).letter_grade == "F"
    assert derive_grade(None, 45).total_score == "45.00"
    assert derive_grade(30, None).letter_grade == "F"


def test_letters_never_improve_as_total_drops():
    order = "ABCDEF"
    previous = 0
    for hundredths in range(10000, -1, -25):
        letter = derive_grade(Decimal(hundredths) / 100, None).letter_grade
        assert order.index(letter) >= previous
        previous = order.index(letter)


def test_end_to_end_example_grade():
    details = derive_grade(35, 38)
    assert (details.total_score, details.letter_grade, details.gpa) == ("73.00", "B", "4.00")


@pytest.mark.parametrize("raw, expected", [
    ("35", Decimal("35")),
    (" 72.5 ", Decimal("72.5")),
    (0, Decimal("0")),
    ("100", Decimal("100")),
    (None, None),
    ("", None),
])
def test_parse_score_accepts(raw, expected):
    result = parse_score(raw, "CAT score")
    assert result.ok
    assert result.value == expected


@pytest.mark.parametrize("raw", ["-1", "100.01", "abc", "NaN", "inf"])
def test_parse_score_rejects(raw):
    result = parse_score(raw, "CAT score")
    assert not result.ok
    assert result.kind is ErrorKind.VALIDATION
    assert "CAT score" in result.message


def test_parse_score_custom_upper_bound():
    assert parse_score("20", "Score", upper=20).ok
    assert not parse_score("21", "Score", upper=20).ok


@pytest.mark.parametrize("raw, total, letter", [
    ("39.995", "40.00", "E"),
    ("79.995", "80.00", "A"),
    ("39.994", "39.99", "F"),
])
def test_band_uses_the_rounded_total(raw, total, letter):
    details = derive_grade(raw, None)
    assert (details.total_score, details.letter_grade) == (total, letter)


def test_components_are_rounded_before_summing():
    details = derive_grade("19.995", "19.995")
    assert (details.total_score, details.letter_grade) == ("40.00", "E")


def test_parse_score_rounds_to_two_places():
    assert str(parse_score("39.995", "CAT score").value) == "40.00"
    assert parse_score("100.004", "CAT score").value == Decimal("100.00")
    assert not parse_score("100.005", "CAT score").ok
    assert parse_score("1e30", "CAT score").kind is ErrorKind.VALIDATION
