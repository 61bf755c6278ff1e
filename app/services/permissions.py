"""Role checks and the relationship predicates actions compose them with.

Roles are compared case-insensitively. A relationship predicate answers one
question about the principal and a loaded resource ("is this the lecturer of
that course?") so that no action has to re-derive the foreign-key chain.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import or_, select

from ..models import Course, Staff, Timetable
from .results import Err, ErrorKind, Ok

logger = logging.getLogger(__name__)


class Role:
    ADMIN = "admin"
    REGISTRAR = "registrar"
    HOD = "hod"
    BURSAR = "bursar"
    LECTURER = "lecturer"
    STUDENT = "student"

    ALL = (ADMIN, REGISTRAR, HOD, BURSAR, LECTURER, STUDENT)


def normalize_role(role):
    return (role or "").strip().lower()


@dataclass(frozen=True)
class Principal:
    user_id: int
    role: str
    department_id: Optional[int] = None

    @classmethod
    def from_user(cls, user):
        if user is None or not getattr(user, "is_authenticated", False):
            return None
        department_id = None
        if user.staff is not None:
            department_id = user.staff.department_id
        elif user.student is not None:
            department_id = user.student.department_id
        return cls(user_id=user.id, role=normalize_role(user.role), department_id=department_id)


def has_role(principal, allowed_roles):
    if principal is None:
        return False
    return normalize_role(principal.role) in {normalize_role(r) for r in allowed_roles}


def is_self(principal, student):
    """The principal is the student who owns the record."""
    return (principal is not None and student is not None
            and has_role(principal, [Role.STUDENT]) and student.user_id == principal.user_id)


def is_lecturer_of(principal, course):
    """The principal teaches the course, either as its lecturer or on its timetable."""
    if principal is None or course is None or not has_role(principal, [Role.LECTURER]):
        return False
    if course.lecturer is not None and course.lecturer.user_id == principal.user_id:
        return True
    return any(t.lecturer is not None and t.lecturer.user_id == principal.user_id
               for t in course.timetables)


def taught_course_ids(principal):
    """SELECT of the course ids for which ``is_lecturer_of`` holds.

    The same course-or-timetable rule, expressed as a subquery for list views.
    """
    staff_ids = select(Staff.id).where(Staff.user_id == principal.user_id)
    timetabled = select(Timetable.course_id).where(Timetable.lecturer_id.in_(staff_ids))
    return select(Course.id).where(or_(Course.lecturer_id.in_(staff_ids), Course.id.in_(timetabled)))


def is_head_of(principal, department_id):
    return (principal is not None and department_id is not None
            and has_role(principal, [Role.HOD]) and principal.department_id == department_id)


def is_author_of(principal, staff):
    """The principal is the staff member who created a material, assignment or quiz."""
    return principal is not None and staff is not None and staff.user_id == principal.user_id


def require(principal, roles=(), predicate=None, action="perform this action"):
    """Admit the principal by role or by relationship.

    ``predicate`` is a zero-argument callable evaluated only when the role
    check fails.
    """
    if principal is None:
        return Err(ErrorKind.UNAUTHORIZED, "Unauthorized: You must be logged in.")
    if has_role(principal, roles):
        return Ok(principal)
    if predicate is not None and predicate():
        return Ok(principal)
    logger.info("user %s (%s) denied: %s", principal.user_id, principal.role, action)
    return Err(ErrorKind.FORBIDDEN, f"Unauthorized: You do not have permission to {action}.")
