"""Assignment and quiz submissions.

Every submission call stores a new row; earlier rows are kept as history.
"Submitted" for display means at least one row exists, and the submission
shown is the latest one (greatest ``submitted_at``, ties broken by id).
"""
import logging

from flask import current_app
from sqlalchemy import or_

from ..extensions import db
from ..models import Assignment, AssignmentSubmission, Quiz, QuizSubmission, Staff
from ..storage import FileTooLarge
from . import audit, hooks
from .common import current_student
from .enrollment import can_access_course_content
from .grading import parse_score
from .permissions import Role, is_author_of, is_lecturer_of, require, taught_course_ids
from .results import Err, ErrorKind, Ok

logger = logging.getLogger(__name__)

ASSIGNMENT_FOLDER = "assignment-submissions"
QUIZ_FOLDER = "quiz-submissions"


def _storage(storage):
    return storage if storage is not None else current_app.extensions["storage"]


def _submit(principal, model, item_id, file, folder, submission_model, fk, storage):
    found = current_student(principal)
    if not found.ok:
        return found
    student = found.value
    item = db.session.get(model, item_id)
    label = model.__tablename__.capitalize()
    if item is None or not can_access_course_content(student.id, item.course_id):
        logger.info("student %s refused %s %s", student.id, model.__tablename__, item_id)
        return Err(ErrorKind.NOT_FOUND, f"{label} not found or unauthorized access.")
    if file is None or not getattr(file, "filename", None):
        return Err(ErrorKind.VALIDATION, "No file provided.")

    storage = _storage(storage)
    try:
        key = storage.upload(file, folder)
    except FileTooLarge as e:
        return Err(ErrorKind.VALIDATION, str(e))

    submission = submission_model(student_id=student.id, file_url=storage.public_url(key),
                                  **{fk: item.id})
    db.session.add(submission)
    db.session.flush()
    audit.log_action(principal, "submit", submission_model.__tablename__, submission.id,
                     f"{label} {item.id} submitted by student {student.id}")
    db.session.commit()
    hooks.notify(submission_model.__tablename__, "create", submission_id=submission.id,
                 course_id=item.course_id, student_id=student.id)
    return Ok(submission)


def submit_assignment(principal, assignment_id, file, storage=None):
    return _submit(principal, Assignment, assignment_id, file, ASSIGNMENT_FOLDER,
                   AssignmentSubmission, "assignment_id", storage)


def submit_quiz(principal, quiz_id, file, storage=None):
    return _submit(principal, Quiz, quiz_id, file, QUIZ_FOLDER,
                   QuizSubmission, "quiz_id", storage)


def delete_submission(principal, submission_id):
    """Withdraw one of the student's own assignment submissions."""
    found = current_student(principal)
    if not found.ok:
        return found
    student = found.value
    submission = db.session.get(AssignmentSubmission, submission_id)
    if submission is None or submission.student_id != student.id:
        return Err(ErrorKind.NOT_FOUND, "Submission not found or unauthorized access.")
    ids = dict(submission_id=submission.id, assignment_id=submission.assignment_id,
               student_id=student.id)
    db.session.delete(submission)
    audit.log_action(principal, "delete", "assignment_submission", ids["submission_id"],
                     f"Withdrew submission for assignment {ids['assignment_id']}")
    db.session.commit()
    hooks.notify("assignment_submission", "delete", **ids)
    return Ok(ids)


def latest_submission(submission_model, fk_column, item_id, student_id):
    return (submission_model.query
            .filter(fk_column == item_id, submission_model.student_id == student_id)
            .order_by(submission_model.submitted_at.desc(), submission_model.id.desc())
            .first())


def _status(principal, course_id, model, order_column, submission_model, fk_column):
    found = current_student(principal)
    if not found.ok:
        return found
    student = found.value
    if not can_access_course_content(student.id, course_id):
        return Err(ErrorKind.FORBIDDEN, "Not enrolled in this course.")
    items = model.query.filter_by(course_id=course_id).order_by(order_column.desc()).all()
    rows = []
    for item in items:
        latest = latest_submission(submission_model, fk_column, item.id, student.id)
        rows.append({"item": item, "submitted": latest is not None, "submission": latest})
    return Ok(rows)


def assignment_status(principal, course_id):
    return _status(principal, course_id, Assignment, Assignment.due_date,
                   AssignmentSubmission, AssignmentSubmission.assignment_id)


def quiz_status(principal, course_id):
    return _status(principal, course_id, Quiz, Quiz.quiz_date,
                   QuizSubmission, QuizSubmission.quiz_id)


def grade_submission(principal, submission_id, grade, remarks=None):
    """Grade an assignment submission.

    Allowed for the assignment's author, a lecturer of its course and admins.
    """
    if principal is None:
        return Err(ErrorKind.UNAUTHORIZED, "Unauthorized: You must be logged in.")
    submission = db.session.get(AssignmentSubmission, submission_id)
    if submission is None:
        return Err(ErrorKind.NOT_FOUND, "Submission not found.")
    assignment = submission.assignment
    allowed = require(principal, [Role.ADMIN],
                      lambda: (is_author_of(principal, assignment.assigned_by)
                               or is_lecturer_of(principal, assignment.course)),
                      "grade this submission")
    if not allowed.ok:
        return allowed
    parsed = parse_score(grade, "Grade")
    if not parsed.ok:
        return parsed
    if parsed.value is None:
        return Err(ErrorKind.VALIDATION, "Grade is required.")

    submission.grade = parsed.value
    submission.remarks = remarks or None
    audit.log_action(principal, "grade", "assignment_submission", submission.id,
                     f"Graded submission {submission.id}: {parsed.value}")
    db.session.commit()
    hooks.notify("assignment_submission", "update", submission_id=submission.id,
                 student_id=submission.student_id)
    return Ok(submission)


def score_quiz_submission(principal, submission_id, score, feedback=None):
    """Score a quiz submission out of the quiz's total marks."""
    if principal is None:
        return Err(ErrorKind.UNAUTHORIZED, "Unauthorized: You must be logged in.")
    submission = db.session.get(QuizSubmission, submission_id)
    if submission is None:
        return Err(ErrorKind.NOT_FOUND, "Submission not found.")
    quiz = submission.quiz
    allowed = require(principal, [Role.ADMIN],
                      lambda: (is_author_of(principal, quiz.created_by)
                               or is_lecturer_of(principal, quiz.course)),
                      "score this submission")
    if not allowed.ok:
        return allowed
    parsed = parse_score(score, "Score", upper=quiz.total_marks)
    if not parsed.ok:
        return parsed
    if parsed.value is None:
        return Err(ErrorKind.VALIDATION, "Score is required.")

    submission.score = parsed.value
    submission.feedback = feedback or None
    audit.log_action(principal, "grade", "quiz_submission", submission.id,
                     f"Scored quiz submission {submission.id}: {parsed.value}/{quiz.total_marks}")
    db.session.commit()
    hooks.notify("quiz_submission", "update", submission_id=submission.id,
                 student_id=submission.student_id)
    return Ok(submission)


def submissions_for_lecturer(principal, course_id=None):
    """Latest-first assignment submissions the principal may grade.

    Covers assignments the principal set and those in courses they teach.
    """
    allowed = require(principal, [Role.LECTURER, Role.ADMIN], action="view submissions")
    if not allowed.ok:
        return allowed
    q = AssignmentSubmission.query.join(Assignment)
    if principal.role != Role.ADMIN:
        authored = Assignment.assigned_by.has(Staff.user_id == principal.user_id)
        q = q.filter(or_(authored, Assignment.course_id.in_(taught_course_ids(principal))))
    if course_id:
        q = q.filter(Assignment.course_id == course_id)
    return Ok(q.order_by(AssignmentSubmission.submitted_at.desc(),
                         AssignmentSubmission.id.desc()).all())
