from decimal import Decimal

import pytest

from app.extensions import db
from app.models import Grade
from app.services import enrollment, grades
from app.services.results import ErrorKind

from conftest import as_principal


@pytest.fixture()
def alice_in_algorithms(ctx, campus):
    return enrollment.create_enrollment(as_principal(campus.alice_user),
                                        campus.alice, campus.algorithms).value.id


def test_lecturer_grades_enrollment(campus, alice_in_algorithms):
    result = grades.create_grade(as_principal(campus.lecturer), alice_in_algorithms, "35", "38")
    assert result.ok
    grade = db.session.get(Grade, result.value.id)
    assert grade.total_score == Decimal("73.00")
    assert grade.letter_grade == "B"
    assert grade.gpa == Decimal("4.00")
    assert grade.cat_score == Decimal("35.00")


def test_end_to_end_enroll_then_grade(ctx, campus):
    enrolled = enrollment.create_enrollment(as_principal(campus.alice_user), campus.alice, campus.algorithms)
    assert enrolled.value.semester_id == campus.sem2
    graded = grades.create_grade(as_principal(campus.lecturer), enrolled.value.id, 35, 38)
    assert (f"{graded.value.total_score:.2f}", graded.value.letter_grade,
            f"{graded.value.gpa:.2f}") == ("73.00", "B", "4.00")


def test_other_lecturer_cannot_grade(campus, alice_in_algorithms):
    result = grades.create_grade(as_principal(campus.other_lecturer), alice_in_algorithms, 10, 10)
    assert result.kind is ErrorKind.FORBIDDEN
    assert Grade.query.count() == 0


def test_student_cannot_grade_themselves(campus, alice_in_algorithms):
    result = grades.create_grade(as_principal(campus.alice_user), alice_in_algorithms, 40, 60)
    assert result.kind is ErrorKind.FORBIDDEN


def test_timetabled_lecturer_can_grade(ctx, campus):
    enrolled = enrollment.create_enrollment(as_principal(campus.registrar), campus.bob, campus.databases)
    result = grades.create_grade(as_principal(campus.timetabled), enrolled.value.id, 20, 25)
    assert result.ok
    assert result.value.letter_grade == "E"


def test_out_of_range_score_rejected(campus, alice_in_algorithms):
    result = grades.create_grade(as_principal(campus.admin), alice_in_algorithms, "101", "20")
    assert result.kind is ErrorKind.VALIDATION
    assert Grade.query.count() == 0


def test_one_grade_per_enrollment(campus, alice_in_algorithms):
    admin = as_principal(campus.admin)
    assert grades.create_grade(admin, alice_in_algorithms, 10, 10).ok
    again = grades.create_grade(admin, alice_in_algorithms, 50, 50)
    assert again.kind is ErrorKind.ALREADY_EXISTS
    assert Grade.query.count() == 1


def test_missing_enrollment(ctx, campus):
    assert grades.create_grade(as_principal(campus.admin), 4242, 1, 1).kind is ErrorKind.NOT_FOUND
    assert grades.create_grade(as_principal(campus.admin), None, 1, 1).kind is ErrorKind.VALIDATION


def test_update_recomputes_all_derived_fields(campus, alice_in_algorithms):
    lecturer = as_principal(campus.lecturer)
    grade_id = grades.create_grade(lecturer, alice_in_algorithms, 35, 38).value.id
    result = grades.update_grade(lecturer, grade_id, exam_score="50")
    assert result.ok
    grade = db.session.get(Grade, grade_id)
    assert grade.cat_score == Decimal("35.00")
    assert grade.exam_score == Decimal("50.00")
    assert grade.total_score == Decimal("85.00")
    assert (grade.letter_grade, grade.gpa) == ("A", Decimal("5.00"))


def test_update_without_scores(campus, alice_in_algorithms):
    lecturer = as_principal(campus.lecturer)
    grade_id = grades.create_grade(lecturer, alice_in_algorithms, 35, 38).value.id
    assert grades.update_grade(lecturer, grade_id).kind is ErrorKind.VALIDATION
    assert grades.update_grade(lecturer, grade_id, cat_score="-5").kind is ErrorKind.VALIDATION
    assert db.session.get(Grade, grade_id).total_score == Decimal("73.00")


def test_update_by_other_lecturer_forbidden(campus, alice_in_algorithms):
    grade_id = grades.create_grade(as_principal(campus.lecturer), alice_in_algorithms, 35, 38).value.id
    result = grades.update_grade(as_principal(campus.other_lecturer), grade_id, cat_score=40)
    assert result.kind is ErrorKind.FORBIDDEN


def test_delete_grade(campus, alice_in_algorithms):
    grade_id = grades.create_grade(as_principal(campus.lecturer), alice_in_algorithms, 35, 38).value.id
    assert grades.delete_grade(as_principal(campus.alice_user), grade_id).kind is ErrorKind.FORBIDDEN
    assert grades.delete_grade(as_principal(campus.admin), grade_id).ok
    assert db.session.get(Grade, grade_id) is None
    assert grades.delete_grade(as_principal(campus.admin), grade_id).kind is ErrorKind.NOT_FOUND


def test_grade_visibility(campus, alice_in_algorithms):
    grades.create_grade(as_principal(campus.lecturer), alice_in_algorithms, 35, 38)
    for user_id in (campus.alice_user, campus.hod, campus.registrar, campus.admin):
        rows = grades.grades_for_student(as_principal(user_id), campus.alice).value
        assert [r["course"].code for r in rows] == ["CS201"]
    for user_id in (campus.bob_user, campus.hod_math, campus.lecturer):
        assert grades.grades_for_student(as_principal(user_id), campus.alice).kind is ErrorKind.FORBIDDEN


def test_hod_sees_own_department_only(campus, alice_in_algorithms):
    grades.create_grade(as_principal(campus.lecturer), alice_in_algorithms, 35, 38)
    assert len(grades.grades_for_department(as_principal(campus.hod)).value) == 1
    assert grades.grades_for_department(as_principal(campus.hod_math)).value == []
    assert grades.grades_for_department(as_principal(campus.hod_math), campus.cs).kind is ErrorKind.FORBIDDEN


def test_department_listing_needs_a_department(ctx, campus):
    admin = as_principal(campus.admin)
    result = grades.grades_for_department(admin)
    assert result.kind is ErrorKind.VALIDATION
    assert grades.grades_for_department(admin, campus.cs).value == []


@pytest.mark.parametrize("raw, cat, letter, gpa", [
    ("39.995", "40.00", "E", "1.00"),
    ("79.995", "80.00", "A", "5.00"),
])
def test_stored_grade_fields_agree_after_rounding(campus, alice_in_algorithms, raw, cat, letter, gpa):
    result = grades.create_grade(as_principal(campus.lecturer), alice_in_algorithms, raw, None)
    grade = db.session.get(Grade, result.value.id)
    assert grade.cat_score == Decimal(cat)
    assert grade.total_score == Decimal(cat)
    assert (grade.letter_grade, grade.gpa) == (letter, Decimal(gpa))
