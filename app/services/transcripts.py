import logging
from decimal import Decimal

from ..extensions import db
from ..models import Course, Enrollment, Grade, Semester, Student, Transcript
from . import audit, hooks
from .common import insert_unique
from .grading import to_fixed
from .permissions import Role, is_self, require
from .results import Err, ErrorKind, Ok

logger = logging.getLogger(__name__)

ISSUERS = (Role.ADMIN, Role.REGISTRAR)


def semester_gpa(enrollments):
    """Mean grade GPA over a semester's enrollments; an ungraded course counts as 0."""
    if not enrollments:
        return Decimal("0.00")
    total = sum((e.grade.gpa if e.grade is not None and e.grade.gpa is not None else Decimal(0))
                for e in enrollments)
    return Decimal(to_fixed(Decimal(total) / len(enrollments)))


def cumulative_gpa(rows):
    """Credit-weighted GPA over ``(credits, gpa)`` pairs of graded courses."""
    credits = sum(Decimal(c) for c, _ in rows)
    if not credits:
        return Decimal("0.00")
    points = sum(Decimal(c) * Decimal(g) for c, g in rows)
    return Decimal(to_fixed(points / credits))


def generate_transcript(principal, student_id, semester_id):
    allowed = require(principal, ISSUERS, action="generate transcripts")
    if not allowed.ok:
        return allowed
    student = db.session.get(Student, student_id)
    if student is None:
        return Err(ErrorKind.NOT_FOUND, "Student not found.")
    if db.session.get(Semester, semester_id) is None:
        return Err(ErrorKind.NOT_FOUND, "Semester not found.")

    enrollments = Enrollment.query.filter_by(student_id=student.id, semester_id=semester_id).all()
    graded = (db.session.query(Course.credits, Grade.gpa)
              .join(Enrollment, Enrollment.course_id == Course.id)
              .join(Grade, Grade.enrollment_id == Enrollment.id)
              .filter(Enrollment.student_id == student.id, Grade.gpa.isnot(None))
              .all())
    transcript = Transcript(student_id=student.id, semester_id=semester_id,
                            gpa=semester_gpa(enrollments), cgpa=cumulative_gpa(graded))
    inserted = insert_unique(transcript, "A transcript already exists for this student and semester.")
    if not inserted.ok:
        return inserted
    audit.log_action(principal, "create", "transcript", transcript.id,
                     f"Transcript for student {student.id}, semester {semester_id}: GPA {transcript.gpa}")
    db.session.commit()
    hooks.notify("transcript", "create", transcript_id=transcript.id, student_id=student.id)
    return Ok(transcript)


def finalize_transcript(principal, transcript_id, file_url):
    allowed = require(principal, ISSUERS, action="finalize transcripts")
    if not allowed.ok:
        return allowed
    if not (file_url or "").strip():
        return Err(ErrorKind.VALIDATION, "A file URL is required to finalize a transcript.")
    transcript = db.session.get(Transcript, transcript_id)
    if transcript is None:
        return Err(ErrorKind.NOT_FOUND, "Transcript not found.")
    transcript.file_url = file_url.strip()
    audit.log_action(principal, "update", "transcript", transcript.id, "Finalized transcript")
    db.session.commit()
    hooks.notify("transcript", "update", transcript_id=transcript.id,
                 student_id=transcript.student_id)
    return Ok(transcript)


def pending_transcripts(principal):
    allowed = require(principal, ISSUERS, action="view pending transcripts")
    if not allowed.ok:
        return allowed
    return Ok(Transcript.query.filter(Transcript.file_url.is_(None))
              .order_by(Transcript.generated_date.desc(), Transcript.id.desc()).all())


def transcripts_for_student(principal, student_id):
    """A student's transcripts in semester order; registrars, admins and the student may look."""
    student = db.session.get(Student, student_id)
    allowed = require(principal, ISSUERS, lambda: is_self(principal, student), "view transcripts")
    if not allowed.ok:
        return allowed
    if student is None:
        return Err(ErrorKind.NOT_FOUND, "Student not found.")
    return Ok(Transcript.query.join(Semester, Transcript.semester_id == Semester.id)
              .filter(Transcript.student_id == student.id)
              .order_by(Semester.start_date, Transcript.id).all())
