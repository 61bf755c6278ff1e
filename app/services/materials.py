import logging

from sqlalchemy import func

from ..extensions import db
from ..models import Course, CourseMaterial, MaterialView
from . import hooks
from .common import current_student, insert_unique
from .enrollment import can_access_course_content
from .permissions import Role, require, taught_course_ids
from .results import Err, ErrorKind, Ok

logger = logging.getLogger(__name__)

VIEWED = "viewed"


def record_material_view(principal, material_id):
    """Record that the student opened a material, at most once per (material, student).

    Returns ``Ok({"recorded": True})`` for the first view and
    ``Ok({"recorded": False})`` for every later one.
    """
    found = current_student(principal)
    if not found.ok:
        return found
    student = found.value
    material = db.session.get(CourseMaterial, material_id)
    if material is None or not can_access_course_content(student.id, material.course_id):
        return Err(ErrorKind.NOT_FOUND, "Material not found or unauthorized access.")

    view = MaterialView(material_id=material.id, student_id=student.id, interaction_type=VIEWED)
    inserted = insert_unique(view, "Material already viewed.")
    if not inserted.ok:
        return Ok({"recorded": False})
    db.session.commit()
    hooks.notify("material_view", "create", material_id=material.id, student_id=student.id)
    return Ok({"recorded": True})


def course_materials(principal, course_id):
    """Materials of an enrolled course, newest first, each with a ``viewed`` flag."""
    found = current_student(principal)
    if not found.ok:
        return found
    student = found.value
    if not can_access_course_content(student.id, course_id):
        return Err(ErrorKind.FORBIDDEN, "Not enrolled in this course.")
    viewed_ids = {
        mid for (mid,) in db.session.query(MaterialView.material_id)
        .join(CourseMaterial)
        .filter(CourseMaterial.course_id == course_id, MaterialView.student_id == student.id)
    }
    materials = (CourseMaterial.query.filter_by(course_id=course_id)
                 .order_by(CourseMaterial.uploaded_at.desc(), CourseMaterial.id.desc()).all())
    return Ok([{"material": m, "viewed": m.id in viewed_ids} for m in materials])


def material_view_stats(principal):
    """View counts per material for the courses the lecturer teaches or is timetabled for."""
    allowed = require(principal, [Role.LECTURER, Role.ADMIN], action="view material statistics")
    if not allowed.ok:
        return allowed
    q = (db.session.query(CourseMaterial, Course, func.count(MaterialView.id))
         .join(Course, CourseMaterial.course_id == Course.id)
         .outerjoin(MaterialView, MaterialView.material_id == CourseMaterial.id))
    if principal.role != Role.ADMIN:
        q = q.filter(Course.id.in_(taught_course_ids(principal)))
    rows = (q.group_by(CourseMaterial.id, Course.id)
            .order_by(Course.code, CourseMaterial.title).all())
    return Ok([{"material": m, "course": c, "views": n} for m, c, n in rows])
