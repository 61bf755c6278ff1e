import logging
from decimal import Decimal

from ..extensions import db
from ..models import Course, Enrollment, Grade, Student
from . import audit, hooks
from .common import insert_unique
from .grading import derive_grade, parse_score, quantize
from .permissions import Role, is_head_of, is_lecturer_of, is_self, require
from .results import Err, ErrorKind, Ok

logger = logging.getLogger(__name__)


def _apply_scores(grade, cat_score, exam_score):
    grade.cat_score = quantize(cat_score) if cat_score is not None else None
    grade.exam_score = quantize(exam_score) if exam_score is not None else None
    details = derive_grade(cat_score, exam_score)
    grade.total_score = Decimal(details.total_score)
    grade.letter_grade = details.letter_grade
    grade.gpa = Decimal(details.gpa)


def _parse_both(cat_score, exam_score):
    cat = parse_score(cat_score, "CAT score")
    if not cat.ok:
        return cat, None
    exam = parse_score(exam_score, "Exam score")
    if not exam.ok:
        return exam, None
    return cat, exam


def _notify(grade, action):
    hooks.notify("grade", action, grade_id=grade.id, enrollment_id=grade.enrollment_id,
                 student_id=grade.enrollment.student_id)


def create_grade(principal, enrollment_id, cat_score=None, exam_score=None):
    """Grade an enrollment. Only admins and the course's lecturer may do so."""
    if principal is None:
        return Err(ErrorKind.UNAUTHORIZED, "Unauthorized: You must be logged in.")
    if not enrollment_id:
        return Err(ErrorKind.VALIDATION, "Enrollment ID is required for grade creation.")
    enrollment = db.session.get(Enrollment, enrollment_id)
    if enrollment is None:
        return Err(ErrorKind.NOT_FOUND, "Enrollment not found.")
    allowed = require(principal, [Role.ADMIN], lambda: is_lecturer_of(principal, enrollment.course),
                      "create grades for this enrollment")
    if not allowed.ok:
        return allowed

    cat, exam = _parse_both(cat_score, exam_score)
    if not cat.ok:
        return cat
    if not exam.ok:
        return exam

    grade = Grade(enrollment_id=enrollment.id)
    _apply_scores(grade, cat.value, exam.value)
    inserted = insert_unique(grade, "A grade already exists for this enrollment. Please update it instead.")
    if not inserted.ok:
        return inserted
    audit.log_action(principal, "create", "grade", grade.id,
                     f"Graded enrollment {enrollment_id}: {grade.total_score} ({grade.letter_grade})")
    db.session.commit()
    _notify(grade, "create")
    return Ok(grade)


def update_grade(principal, grade_id, cat_score=None, exam_score=None):
    """Change one or both raw scores; omitted scores keep their stored value.

    The derived fields are recomputed from the resulting pair every time.
    """
    if principal is None:
        return Err(ErrorKind.UNAUTHORIZED, "Unauthorized: You must be logged in.")
    grade = db.session.get(Grade, grade_id)
    if grade is None:
        return Err(ErrorKind.NOT_FOUND, "Grade not found.")
    allowed = require(principal, [Role.ADMIN],
                      lambda: is_lecturer_of(principal, grade.enrollment.course),
                      "update this grade")
    if not allowed.ok:
        return allowed
    cat, exam = _parse_both(cat_score, exam_score)
    if not cat.ok:
        return cat
    if not exam.ok:
        return exam
    if cat.value is None and exam.value is None:
        return Err(ErrorKind.VALIDATION, "No fields to update.")
    new_cat = cat.value if cat.value is not None else grade.cat_score
    new_exam = exam.value if exam.value is not None else grade.exam_score

    _apply_scores(grade, new_cat, new_exam)
    audit.log_action(principal, "update", "grade", grade.id,
                     f"Regraded enrollment {grade.enrollment_id}: {grade.total_score} ({grade.letter_grade})")
    db.session.commit()
    _notify(grade, "update")
    return Ok(grade)


def delete_grade(principal, grade_id):
    if principal is None:
        return Err(ErrorKind.UNAUTHORIZED, "Unauthorized: You must be logged in.")
    grade = db.session.get(Grade, grade_id)
    if grade is None:
        return Err(ErrorKind.NOT_FOUND, "Grade not found.")
    allowed = require(principal, [Role.ADMIN],
                      lambda: is_lecturer_of(principal, grade.enrollment.course),
                      "delete this grade")
    if not allowed.ok:
        return allowed
    ids = dict(grade_id=grade.id, enrollment_id=grade.enrollment_id,
               student_id=grade.enrollment.student_id)
    db.session.delete(grade)
    audit.log_action(principal, "delete", "grade", ids["grade_id"],
                     f"Deleted grade of enrollment {ids['enrollment_id']}")
    db.session.commit()
    hooks.notify("grade", "delete", **ids)
    return Ok(ids)


def grades_for_student(principal, student_id):
    """Graded courses of one student.

    Visible to admins and registrars, the HOD of the student's department and
    the student themselves.
    """
    student = db.session.get(Student, student_id)
    allowed = require(principal, [Role.ADMIN, Role.REGISTRAR],
                      lambda: student is not None and (is_head_of(principal, student.department_id)
                                                       or is_self(principal, student)),
                      "view these grades")
    if not allowed.ok:
        return allowed
    if student is None:
        return Err(ErrorKind.NOT_FOUND, "Student not found.")
    rows = (db.session.query(Grade, Enrollment, Course)
            .join(Enrollment, Grade.enrollment_id == Enrollment.id)
            .join(Course, Enrollment.course_id == Course.id)
            .filter(Enrollment.student_id == student.id)
            .order_by(Course.name).all())
    return Ok([{"grade": g, "enrollment": e, "course": c} for g, e, c in rows])


def grades_for_department(principal, department_id=None):
    """Every grade of students in a department; HODs see only their own."""
    if principal is not None and department_id is None:
        department_id = principal.department_id
    allowed = require(principal, [Role.ADMIN, Role.REGISTRAR],
                      lambda: is_head_of(principal, department_id),
                      "view grades in this department")
    if not allowed.ok:
        return allowed
    if department_id is None:
        return Err(ErrorKind.VALIDATION, "A department is required.")
    rows = (db.session.query(Grade, Enrollment, Course, Student)
            .join(Enrollment, Grade.enrollment_id == Enrollment.id)
            .join(Course, Enrollment.course_id == Course.id)
            .join(Student, Enrollment.student_id == Student.id)
            .filter(Student.department_id == department_id)
            .order_by(Student.last_name, Course.name).all())
    return Ok([{"grade": g, "enrollment": e, "course": c, "student": s} for g, e, c, s in rows])
