"""Course content authoring: materials, assignments and quizzes.

Content of a course may be written by admins and by anyone ``is_lecturer_of``
admits for that course. Editing or deleting an item is also open to the staff
member who created it.
"""
import logging
from datetime import datetime, timezone

from flask import current_app

from ..extensions import db
from ..models import Assignment, Course, CourseMaterial, Quiz, Staff
from ..storage import FileTooLarge
from . import audit, hooks
from .permissions import Role, is_author_of, is_lecturer_of, require
from .results import Err, ErrorKind, Ok

logger = logging.getLogger(__name__)

MATERIAL_FOLDER = "course-materials"
ASSIGNMENT_FOLDER = "assignments"
QUIZ_FOLDER = "quizzes"

MATERIAL_TYPES = ("notes", "presentation", "video")


def parse_when(value, field):
    """Parse an ISO 8601 date-time; naive values are taken as UTC."""
    if isinstance(value, datetime):
        when = value
    else:
        try:
            when = datetime.fromisoformat((value or "").strip())
        except ValueError:
            return Err(ErrorKind.VALIDATION, f"{field} must be an ISO 8601 date and time.")
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return Ok(when)


def parse_total_marks(value):
    try:
        marks = int(str(value).strip())
    except (TypeError, ValueError):
        marks = 0
    if marks <= 0:
        return Err(ErrorKind.VALIDATION, "Total marks must be a positive whole number.")
    return Ok(marks)


def _blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def _staff_of(principal):
    return Staff.query.filter_by(user_id=principal.user_id).one_or_none()


def _authoring_course(principal, course_id, action):
    if principal is None:
        return Err(ErrorKind.UNAUTHORIZED, "Unauthorized: You must be logged in.")
    course = db.session.get(Course, course_id) if course_id else None
    if course is None:
        return Err(ErrorKind.NOT_FOUND, "Course not found.")
    allowed = require(principal, [Role.ADMIN], lambda: is_lecturer_of(principal, course), action)
    if not allowed.ok:
        return allowed
    return Ok(course)


def _editable(principal, item, author, label, action):
    if principal is None:
        return Err(ErrorKind.UNAUTHORIZED, "Unauthorized: You must be logged in.")
    if item is None:
        return Err(ErrorKind.NOT_FOUND, f"{label} not found.")
    return require(principal, [Role.ADMIN],
                   lambda: is_author_of(principal, author) or is_lecturer_of(principal, item.course),
                   action)


def _upload(file, folder, storage):
    """Store an optional attachment and return its public URL (or None)."""
    if file is None or not getattr(file, "filename", None):
        return Ok(None)
    storage = storage if storage is not None else current_app.extensions["storage"]
    try:
        key = storage.upload(file, folder)
    except FileTooLarge as e:
        return Err(ErrorKind.VALIDATION, str(e))
    return Ok(storage.public_url(key))


def _created(principal, item, table, description):
    db.session.add(item)
    db.session.flush()
    audit.log_action(principal, "create", table, item.id, description)
    db.session.commit()
    hooks.notify(table, "create", **{f"{table}_id": item.id, "course_id": item.course_id})
    return Ok(item)


def _updated(principal, item, table, description):
    audit.log_action(principal, "update", table, item.id, description)
    db.session.commit()
    hooks.notify(table, "update", **{f"{table}_id": item.id, "course_id": item.course_id})
    return Ok(item)


def _deleted(principal, item, table):
    ids = {f"{table}_id": item.id, "course_id": item.course_id}
    db.session.delete(item)
    audit.log_action(principal, "delete", table, item.id,
                     f"Deleted {table} {item.id} of course {item.course_id}")
    db.session.commit()
    hooks.notify(table, "delete", **ids)
    return Ok(ids)


def upload_material(principal, course_id, title, material_type, file=None, file_url=None,
                    storage=None):
    """Publish a material to a course, from an uploaded file or an existing URL."""
    found = _authoring_course(principal, course_id, "upload materials for this course")
    if not found.ok:
        return found
    course = found.value
    if _blank(title):
        return Err(ErrorKind.VALIDATION, "Title is required.")
    material_type = (material_type or "").strip().lower()
    if material_type not in MATERIAL_TYPES:
        return Err(ErrorKind.VALIDATION,
                   f"Material type must be one of: {', '.join(MATERIAL_TYPES)}.")
    uploaded = _upload(file, MATERIAL_FOLDER, storage)
    if not uploaded.ok:
        return uploaded
    url = uploaded.value or (file_url or "").strip()
    if not url:
        return Err(ErrorKind.VALIDATION, "A file or file URL is required.")

    material = CourseMaterial(course_id=course.id, uploaded_by=_staff_of(principal),
                              title=title.strip(), type=material_type, file_url=url)
    return _created(principal, material, "course_material",
                    f"Uploaded material '{material.title}' to {course.code}")


def delete_material(principal, material_id):
    material = db.session.get(CourseMaterial, material_id)
    allowed = _editable(principal, material, material and material.uploaded_by,
                        "Material", "delete this material")
    if not allowed.ok:
        return allowed
    return _deleted(principal, material, "course_material")


def create_assignment(principal, course_id, title, due_date, description=None, file=None,
                      storage=None):
    found = _authoring_course(principal, course_id, "create assignments for this course")
    if not found.ok:
        return found
    course = found.value
    if _blank(title):
        return Err(ErrorKind.VALIDATION, "Title is required.")
    due = parse_when(due_date, "Due date")
    if not due.ok:
        return due
    uploaded = _upload(file, ASSIGNMENT_FOLDER, storage)
    if not uploaded.ok:
        return uploaded

    assignment = Assignment(course_id=course.id, assigned_by=_staff_of(principal),
                            title=title.strip(), description=description or None,
                            file_url=uploaded.value, due_date=due.value)
    return _created(principal, assignment, "assignment",
                    f"Created assignment '{assignment.title}' in {course.code}")


def update_assignment(principal, assignment_id, title=None, description=None, due_date=None,
                      file=None, storage=None):
    """Change the given fields of an assignment; omitted fields keep their value."""
    assignment = db.session.get(Assignment, assignment_id)
    allowed = _editable(principal, assignment, assignment and assignment.assigned_by,
                        "Assignment", "update this assignment")
    if not allowed.ok:
        return allowed
    changes = {}
    if not _blank(title):
        changes["title"] = title.strip()
    if description is not None:
        changes["description"] = description or None
    if not _blank(due_date):
        due = parse_when(due_date, "Due date")
        if not due.ok:
            return due
        changes["due_date"] = due.value
    uploaded = _upload(file, ASSIGNMENT_FOLDER, storage)
    if not uploaded.ok:
        return uploaded
    if uploaded.value:
        changes["file_url"] = uploaded.value
    if not changes:
        return Err(ErrorKind.VALIDATION, "No fields to update.")

    for field, value in changes.items():
        setattr(assignment, field, value)
    return _updated(principal, assignment, "assignment",
                    f"Updated {', '.join(sorted(changes))} of assignment {assignment.id}")


def delete_assignment(principal, assignment_id):
    assignment = db.session.get(Assignment, assignment_id)
    allowed = _editable(principal, assignment, assignment and assignment.assigned_by,
                        "Assignment", "delete this assignment")
    if not allowed.ok:
        return allowed
    return _deleted(principal, assignment, "assignment")


def create_quiz(principal, course_id, title, total_marks, quiz_date, instructions=None,
                file=None, storage=None):
    found = _authoring_course(principal, course_id, "create quizzes for this course")
    if not found.ok:
        return found
    course = found.value
    if _blank(title):
        return Err(ErrorKind.VALIDATION, "Title is required.")
    marks = parse_total_marks(total_marks)
    if not marks.ok:
        return marks
    when = parse_when(quiz_date, "Quiz date")
    if not when.ok:
        return when
    uploaded = _upload(file, QUIZ_FOLDER, storage)
    if not uploaded.ok:
        return uploaded

    quiz = Quiz(course_id=course.id, created_by=_staff_of(principal), title=title.strip(),
                instructions=instructions or None, file_url=uploaded.value,
                total_marks=marks.value, quiz_date=when.value)
    return _created(principal, quiz, "quiz", f"Created quiz '{quiz.title}' in {course.code}")


def update_quiz(principal, quiz_id, title=None, instructions=None, total_marks=None,
                quiz_date=None):
    """Change the given fields of a quiz; omitted fields keep their value.

    Lowering ``total_marks`` below an existing score is rejected.
    """
    quiz = db.session.get(Quiz, quiz_id)
    allowed = _editable(principal, quiz, quiz and quiz.created_by, "Quiz", "update this quiz")
    if not allowed.ok:
        return allowed
    changes = {}
    if not _blank(title):
        changes["title"] = title.strip()
    if instructions is not None:
        changes["instructions"] = instructions or None
    if not _blank(total_marks):
        marks = parse_total_marks(total_marks)
        if not marks.ok:
            return marks
        top = max((s.score for s in quiz.submissions if s.score is not None), default=None)
        if top is not None and top > marks.value:
            return Err(ErrorKind.VALIDATION,
                       f"Total marks cannot be lower than an existing score of {top}.")
        changes["total_marks"] = marks.value
    if not _blank(quiz_date):
        when = parse_when(quiz_date, "Quiz date")
        if not when.ok:
            return when
        changes["quiz_date"] = when.value
    if not changes:
        return Err(ErrorKind.VALIDATION, "No fields to update.")

    for field, value in changes.items():
        setattr(quiz, field, value)
    return _updated(principal, quiz, "quiz",
                    f"Updated {', '.join(sorted(changes))} of quiz {quiz.id}")


def delete_quiz(principal, quiz_id):
    quiz = db.session.get(Quiz, quiz_id)
    allowed = _editable(principal, quiz, quiz and quiz.created_by, "Quiz", "delete this quiz")
    if not allowed.ok:
        return allowed
    return _deleted(principal, quiz, "quiz")
