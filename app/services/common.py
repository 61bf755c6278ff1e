import logging

from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import Student
from .results import Err, ErrorKind, Ok

logger = logging.getLogger(__name__)


def current_student(principal):
    """Resolve the student record behind a principal."""
    if principal is None:
        return Err(ErrorKind.UNAUTHORIZED, "Unauthorized: You must be logged in.")
    student = Student.query.filter_by(user_id=principal.user_id).one_or_none()
    if student is None:
        return Err(ErrorKind.NOT_FOUND, "Student record not found.")
    return Ok(student)


def insert_unique(obj, conflict_message):
    """Add ``obj`` and flush, mapping a uniqueness violation to ALREADY_EXISTS.

    The unique constraint is the only duplicate detection; there is no
    pre-insert lookup to race against. The insert runs inside a savepoint so
    a conflict discards only ``obj``, not other pending work.
    """
    try:
        with db.session.begin_nested():
            db.session.add(obj)
    except IntegrityError:
        logger.info("duplicate %s rejected", type(obj).__tablename__)
        return Err(ErrorKind.ALREADY_EXISTS, conflict_message)
    return Ok(obj)
