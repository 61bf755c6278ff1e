from app.extensions import db
from app.models import Course, Student
from app.services.permissions import (
    Principal, Role, has_role, is_head_of, is_lecturer_of, is_self, require,
    taught_course_ids,
)
from app.services.results import ErrorKind

from conftest import as_principal


def test_has_role_is_case_insensitive():
    p = Principal(user_id=1, role="Admin")
    assert has_role(p, [Role.ADMIN])
    assert has_role(p, ["ADMIN", "registrar"])
    assert not has_role(p, [Role.STUDENT])


def test_has_role_without_principal():
    assert not has_role(None, [Role.ADMIN])


def test_principal_carries_department(ctx, campus):
    assert as_principal(campus.hod).department_id == campus.cs
    assert as_principal(campus.alice_user).department_id == campus.cs
    assert as_principal(campus.admin).department_id is None


def test_is_self(ctx, campus):
    alice = db.session.get(Student, campus.alice)
    assert is_self(as_principal(campus.alice_user), alice)
    assert not is_self(as_principal(campus.bob_user), alice)
    assert not is_self(as_principal(campus.admin), alice)


def test_is_lecturer_of_course_lecturer(ctx, campus):
    algorithms = db.session.get(Course, campus.algorithms)
    assert is_lecturer_of(as_principal(campus.lecturer), algorithms)
    assert not is_lecturer_of(as_principal(campus.other_lecturer), algorithms)


def test_is_lecturer_of_via_timetable(ctx, campus):
    databases = db.session.get(Course, campus.databases)
    assert is_lecturer_of(as_principal(campus.timetabled), databases)
    assert not is_lecturer_of(as_principal(campus.lecturer), databases)


def test_is_head_of(ctx, campus):
    assert is_head_of(as_principal(campus.hod), campus.cs)
    assert not is_head_of(as_principal(campus.hod), campus.maths)
    assert not is_head_of(as_principal(campus.lecturer), campus.cs)


def test_require_kinds():
    assert require(None, [Role.ADMIN]).kind is ErrorKind.UNAUTHORIZED
    student = Principal(user_id=5, role=Role.STUDENT)
    denied = require(student, [Role.ADMIN], lambda: False, "do that")
    assert denied.kind is ErrorKind.FORBIDDEN
    assert "do that" in denied.message
    assert require(student, [Role.ADMIN], lambda: True).ok
    assert require(Principal(user_id=1, role=Role.ADMIN), [Role.ADMIN]).ok


def test_taught_course_ids_matches_is_lecturer_of(ctx, campus):
    for user_id in (campus.lecturer, campus.timetabled, campus.other_lecturer):
        p = as_principal(user_id)
        listed = set(db.session.scalars(taught_course_ids(p)))
        expected = {c.id for c in Course.query.all() if is_lecturer_of(p, c)}
        assert listed == expected
    assert set(db.session.scalars(taught_course_ids(as_principal(campus.timetabled)))) == {campus.databases}


def test_timetable_links_semester(ctx, campus):
    databases = db.session.get(Course, campus.databases)
    [slot] = databases.timetables
    assert slot.semester.id == campus.sem2
