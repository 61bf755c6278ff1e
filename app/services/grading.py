from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from .results import Err, ErrorKind, Ok

# (inclusive lower bound on total, letter, gpa), evaluated top-down
GRADE_BANDS = (
    (Decimal("80"), "A", "5.00"),
    (Decimal("70"), "B", "4.00"),
    (Decimal("60"), "C", "3.00"),
    (Decimal("50"), "D", "2.00"),
    (Decimal("40"), "E", "1.00"),
)
FAIL_BAND = ("F", "0.00")

MIN_SCORE = Decimal("0")
MAX_SCORE = Decimal("100")
TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class GradeDetails:
    total_score: str
    letter_grade: str
    gpa: str


def quantize(value):
    return Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def to_fixed(value):
    """Format a number as a two-decimal string, as stored in Numeric(5, 2) columns."""
    return str(quantize(value))


def derive_grade(cat_score, exam_score):
    """Derive total, letter and GPA from the two raw score components.

    A missing component counts as zero. Each component is rounded to two
    places before summing, so the band is chosen from the same total that is
    stored. The three derived fields are always produced together so that
    they never disagree.
    """
    total = quantize(str(cat_score or 0)) + quantize(str(exam_score or 0))
    letter, gpa = FAIL_BAND
    for lower, band_letter, band_gpa in GRADE_BANDS:
        if total >= lower:
            letter, gpa = band_letter, band_gpa
            break
    return GradeDetails(total_score=to_fixed(total), letter_grade=letter, gpa=gpa)


def parse_score(value, field, upper=MAX_SCORE):
    """Parse a form value into a Decimal in [0, upper].

    ``None`` and blank strings mean "not provided" and yield ``Ok(None)``.
    Scores are rounded to two places before the range check.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return Ok(None)
    try:
        score = Decimal(str(value).strip())
        if score.is_finite():
            score = quantize(score)
    except InvalidOperation:
        return Err(ErrorKind.VALIDATION, f"{field} must be a number.")
    if not score.is_finite() or score < MIN_SCORE or score > Decimal(upper):
        return Err(ErrorKind.VALIDATION, f"{field} must be a number between 0 and {upper}.")
    return Ok(score)
