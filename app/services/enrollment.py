"""Enrollment eligibility and creation.

An enrollment row is the unit of access control for course content: a student
may list or submit course materials, assignments and quizzes only while an
enrollment links them to the course.
"""
import logging

from sqlalchemy import func, select

from ..extensions import db
from ..models import Assignment, Course, CourseMaterial, Enrollment, Quiz, Student
from . import audit, hooks
from .common import current_student, insert_unique
from .permissions import Role, is_self, require
from .results import Err, ErrorKind, Ok

logger = logging.getLogger(__name__)

MANAGERS = (Role.ADMIN, Role.REGISTRAR)


def check_eligibility(student, course):
    """Whether ``student`` may enroll in ``course`` this term.

    The course must belong to the student's program and run in the student's
    current semester.
    """
    if student.current_semester_id is None:
        return Err(ErrorKind.INCOMPLETE_PROFILE,
                   "Your profile is incomplete: no current semester is set.")
    if course.program_id != student.program_id:
        return Err(ErrorKind.VALIDATION, "This course is not offered in your program.")
    if course.semester_id != student.current_semester_id:
        return Err(ErrorKind.VALIDATION, "This course is not offered in your current semester.")
    return Ok(course)


def create_enrollment(principal, student_id, course_id):
    student = db.session.get(Student, student_id) if student_id else None
    allowed = require(principal, MANAGERS, lambda: is_self(principal, student),
                      "create enrollments")
    if not allowed.ok:
        return allowed
    if student is None:
        return Err(ErrorKind.NOT_FOUND, "Student not found.")
    course = db.session.get(Course, course_id) if course_id else None
    if course is None:
        return Err(ErrorKind.NOT_FOUND, "Course not found.")

    eligible = check_eligibility(student, course)
    if not eligible.ok:
        logger.info("student %s not eligible for course %s: %s",
                    student.id, course.id, eligible.message)
        return eligible

    # course.semester_id equals the student's current semester at this point
    enrollment = Enrollment(student_id=student.id, course_id=course.id,
                            semester_id=course.semester_id)
    inserted = insert_unique(enrollment, "This student is already enrolled in this course.")
    if not inserted.ok:
        return inserted
    audit.log_action(principal, "create", "enrollment", enrollment.id,
                     f"Enrolled student {student.id} in course {course.code}")
    db.session.commit()
    hooks.notify("enrollment", "create", enrollment_id=enrollment.id,
                 student_id=student.id, course_id=course.id)
    return Ok(enrollment)


def delete_enrollment(principal, enrollment_id):
    allowed = require(principal, MANAGERS, action="delete enrollments")
    if not allowed.ok:
        return allowed
    enrollment = db.session.get(Enrollment, enrollment_id)
    if enrollment is None:
        return Err(ErrorKind.NOT_FOUND, "Enrollment not found.")
    ids = dict(enrollment_id=enrollment.id, student_id=enrollment.student_id,
               course_id=enrollment.course_id)
    db.session.delete(enrollment)
    audit.log_action(principal, "delete", "enrollment", ids["enrollment_id"],
                     f"Deleted enrollment of student {ids['student_id']} in course {ids['course_id']}")
    db.session.commit()
    hooks.notify("enrollment", "delete", **ids)
    return Ok(ids)


def find_enrollment(student_id, course_id):
    return Enrollment.query.filter_by(student_id=student_id, course_id=course_id).one_or_none()


def can_access_course_content(student_id, course_id):
    """True iff the student holds an enrollment in the course, whatever its semester."""
    return find_enrollment(student_id, course_id) is not None


def available_courses(principal):
    """Courses of the student's program and current semester not yet taken."""
    found = current_student(principal)
    if not found.ok:
        return found
    student = found.value
    if student.current_semester_id is None:
        return Ok([])
    taken = select(Enrollment.course_id).where(Enrollment.student_id == student.id)
    courses = (Course.query
               .filter(Course.program_id == student.program_id,
                       Course.semester_id == student.current_semester_id,
                       Course.id.not_in(taken))
               .order_by(Course.code).all())
    return Ok(courses)


def _count(model, course_id):
    return (db.session.query(func.count(model.id))
            .filter(model.course_id == course_id).scalar())


def enrolled_courses(principal):
    """The student's current-semester courses with content counts."""
    found = current_student(principal)
    if not found.ok:
        return found
    student = found.value
    enrollments = (Enrollment.query.join(Course)
                   .filter(Enrollment.student_id == student.id,
                           Enrollment.semester_id == student.current_semester_id)
                   .order_by(Course.code).all())
    rows = []
    for en in enrollments:
        c = en.course
        rows.append({
            "course": c,
            "enrollment": en,
            "materials_count": _count(CourseMaterial, c.id),
            "assignments_count": _count(Assignment, c.id),
            "quizzes_count": _count(Quiz, c.id),
        })
    return Ok(rows)
