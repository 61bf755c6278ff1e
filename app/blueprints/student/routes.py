from flask import request
from flask_login import login_required

from ...services import enrollment, finance, grades, materials, submissions, transcripts
from ...services.common import current_student
from ...services.permissions import Role
from ..auth.routes import role_required
from .. import current_principal, respond, serializers
from . import bp

@bp.get("/courses")
@login_required
@role_required(Role.STUDENT)
def my_courses():
    return respond(enrollment.enrolled_courses(current_principal()),
                   lambda rows: [serializers.enrolled_course(r) for r in rows])

@bp.get("/courses/available")
@login_required
@role_required(Role.STUDENT)
def available_courses():
    return respond(enrollment.available_courses(current_principal()),
                   lambda items: [serializers.course(c) for c in items])

@bp.post("/courses/<int:course_id>/enroll")
@login_required
@role_required(Role.STUDENT)
def enroll(course_id):
    p = current_principal()
    found = current_student(p)
    if not found.ok:
        return respond(found, None)
    return respond(enrollment.create_enrollment(p, found.value.id, course_id),
                   serializers.enrollment, status=201)

@bp.get("/courses/<int:course_id>/materials")
@login_required
@role_required(Role.STUDENT)
def course_materials(course_id):
    return respond(materials.course_materials(current_principal(), course_id),
                   lambda rows: [serializers.material(r) for r in rows])

@bp.post("/materials/<int:material_id>/view")
@login_required
@role_required(Role.STUDENT)
def view_material(material_id):
    return respond(materials.record_material_view(current_principal(), material_id),
                   lambda value: value)

@bp.get("/courses/<int:course_id>/assignments")
@login_required
@role_required(Role.STUDENT)
def course_assignments(course_id):
    return respond(submissions.assignment_status(current_principal(), course_id),
                   lambda rows: [serializers.assignment_status(r) for r in rows])

@bp.get("/courses/<int:course_id>/quizzes")
@login_required
@role_required(Role.STUDENT)
def course_quizzes(course_id):
    return respond(submissions.quiz_status(current_principal(), course_id),
                   lambda rows: [serializers.quiz_status(r) for r in rows])

@bp.post("/assignments/<int:assignment_id>/submit")
@login_required
@role_required(Role.STUDENT)
def submit_assignment(assignment_id):
    return respond(submissions.submit_assignment(current_principal(), assignment_id,
                                                 request.files.get("file")),
                   serializers.assignment_submission, status=201)

@bp.post("/quizzes/<int:quiz_id>/submit")
@login_required
@role_required(Role.STUDENT)
def submit_quiz(quiz_id):
    return respond(submissions.submit_quiz(current_principal(), quiz_id,
                                           request.files.get("file")),
                   serializers.quiz_submission, status=201)

@bp.get("/me/grades")
@login_required
@role_required(Role.STUDENT)
def my_grades():
    p = current_principal()
    found = current_student(p)
    if not found.ok:
        return respond(found, None)
    return respond(grades.grades_for_student(p, found.value.id),
                   lambda rows: [serializers.graded_course(r) for r in rows])

@bp.post("/submissions/<int:submission_id>/delete")
@login_required
@role_required(Role.STUDENT)
def withdraw_submission(submission_id):
    return respond(submissions.delete_submission(current_principal(), submission_id), lambda ids: ids)

@bp.get("/me/transcripts")
@login_required
@role_required(Role.STUDENT)
def my_transcripts():
    p = current_principal()
    found = current_student(p)
    if not found.ok:
        return respond(found, None)
    return respond(transcripts.transcripts_for_student(p, found.value.id),
                   lambda items: [serializers.transcript(t) for t in items])

@bp.get("/fees")
@login_required
@role_required(Role.STUDENT)
def my_fees():
    return respond(finance.fee_structures(current_principal()),
                   lambda items: [serializers.fee_structure(f) for f in items])
