from flask import request
from flask_login import login_required

from ...services import enrollment, grades, transcripts
from ...services.permissions import Role
from ..auth.routes import role_required
from .. import current_principal, respond, serializers
from . import bp

MANAGERS = (Role.REGISTRAR, Role.ADMIN)

@bp.post("/enrollments")
@login_required
@role_required(*MANAGERS)
def create_enrollment():
    return respond(enrollment.create_enrollment(current_principal(),
                                                request.form.get("student_id", type=int),
                                                request.form.get("course_id", type=int)),
                   serializers.enrollment, status=201)

@bp.post("/enrollments/<int:enrollment_id>/delete")
@login_required
@role_required(*MANAGERS)
def delete_enrollment(enrollment_id):
    return respond(enrollment.delete_enrollment(current_principal(), enrollment_id), lambda ids: ids)

@bp.get("/students/<int:student_id>/grades")
@login_required
@role_required(*MANAGERS)
def student_grades(student_id):
    return respond(grades.grades_for_student(current_principal(), student_id),
                   lambda rows: [serializers.graded_course(r) for r in rows])

@bp.get("/students/<int:student_id>/transcripts")
@login_required
@role_required(*MANAGERS)
def student_transcripts(student_id):
    return respond(transcripts.transcripts_for_student(current_principal(), student_id),
                   lambda items: [serializers.transcript(t) for t in items])

@bp.post("/transcripts")
@login_required
@role_required(*MANAGERS)
def generate_transcript():
    return respond(transcripts.generate_transcript(current_principal(),
                                                   request.form.get("student_id", type=int),
                                                   request.form.get("semester_id", type=int)),
                   serializers.transcript, status=201)

@bp.post("/transcripts/<int:transcript_id>/finalize")
@login_required
@role_required(*MANAGERS)
def finalize_transcript(transcript_id):
    return respond(transcripts.finalize_transcript(current_principal(), transcript_id,
                                                   request.form.get("file_url")),
                   serializers.transcript)

@bp.get("/transcripts/pending")
@login_required
@role_required(*MANAGERS)
def pending_transcripts():
    return respond(transcripts.pending_transcripts(current_principal()),
                   lambda items: [serializers.transcript(t) for t in items])
