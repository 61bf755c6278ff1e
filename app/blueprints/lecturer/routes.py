from flask import request
from flask_login import login_required

from ...services import content, finance, grades, materials, submissions
from ...services.permissions import Role
from ..auth.routes import role_required
from .. import current_principal, respond, serializers
from . import bp

@bp.post("/grades")
@login_required
@role_required(Role.LECTURER)
def create_grade():
    return respond(grades.create_grade(current_principal(),
                                       request.form.get("enrollment_id", type=int),
                                       request.form.get("cat_score"),
                                       request.form.get("exam_score")),
                   serializers.grade, status=201)

@bp.post("/grades/<int:grade_id>")
@login_required
@role_required(Role.LECTURER)
def update_grade(grade_id):
    return respond(grades.update_grade(current_principal(), grade_id,
                                       request.form.get("cat_score"),
                                       request.form.get("exam_score")),
                   serializers.grade)

@bp.post("/grades/<int:grade_id>/delete")
@login_required
@role_required(Role.LECTURER)
def delete_grade(grade_id):
    return respond(grades.delete_grade(current_principal(), grade_id), lambda ids: ids)

@bp.get("/submissions")
@login_required
@role_required(Role.LECTURER)
def my_submissions():
    return respond(submissions.submissions_for_lecturer(current_principal(),
                                                        request.args.get("course_id", type=int)),
                   lambda items: [serializers.assignment_submission(s) for s in items])

@bp.post("/submissions/<int:submission_id>/grade")
@login_required
@role_required(Role.LECTURER)
def grade_submission(submission_id):
    return respond(submissions.grade_submission(current_principal(), submission_id,
                                                request.form.get("grade"),
                                                request.form.get("remarks")),
                   serializers.assignment_submission)

@bp.post("/quiz-submissions/<int:submission_id>/score")
@login_required
@role_required(Role.LECTURER)
def score_quiz(submission_id):
    return respond(submissions.score_quiz_submission(current_principal(), submission_id,
                                                     request.form.get("score"),
                                                     request.form.get("feedback")),
                   serializers.quiz_submission)

@bp.get("/material-views")
@login_required
@role_required(Role.LECTURER)
def material_views():
    return respond(materials.material_view_stats(current_principal()),
                   lambda rows: [serializers.material_stat(r) for r in rows])

@bp.post("/courses/<int:course_id>/materials")
@login_required
@role_required(Role.LECTURER)
def upload_material(course_id):
    return respond(content.upload_material(current_principal(), course_id,
                                           request.form.get("title"),
                                           request.form.get("type"),
                                           file=request.files.get("file"),
                                           file_url=request.form.get("file_url")),
                   serializers.course_material, status=201)

@bp.post("/materials/<int:material_id>/delete")
@login_required
@role_required(Role.LECTURER)
def delete_material(material_id):
    return respond(content.delete_material(current_principal(), material_id), lambda ids: ids)

@bp.post("/courses/<int:course_id>/assignments")
@login_required
@role_required(Role.LECTURER)
def create_assignment(course_id):
    return respond(content.create_assignment(current_principal(), course_id,
                                             request.form.get("title"),
                                             request.form.get("due_date"),
                                             description=request.form.get("description"),
                                             file=request.files.get("file")),
                   serializers.assignment, status=201)

@bp.post("/assignments/<int:assignment_id>")
@login_required
@role_required(Role.LECTURER)
def update_assignment(assignment_id):
    return respond(content.update_assignment(current_principal(), assignment_id,
                                             title=request.form.get("title"),
                                             description=request.form.get("description"),
                                             due_date=request.form.get("due_date"),
                                             file=request.files.get("file")),
                   serializers.assignment)

@bp.post("/assignments/<int:assignment_id>/delete")
@login_required
@role_required(Role.LECTURER)
def delete_assignment(assignment_id):
    return respond(content.delete_assignment(current_principal(), assignment_id), lambda ids: ids)

@bp.post("/courses/<int:course_id>/quizzes")
@login_required
@role_required(Role.LECTURER)
def create_quiz(course_id):
    return respond(content.create_quiz(current_principal(), course_id,
                                       request.form.get("title"),
                                       request.form.get("total_marks"),
                                       request.form.get("quiz_date"),
                                       instructions=request.form.get("instructions"),
                                       file=request.files.get("file")),
                   serializers.quiz, status=201)

@bp.post("/quizzes/<int:quiz_id>")
@login_required
@role_required(Role.LECTURER)
def update_quiz(quiz_id):
    return respond(content.update_quiz(current_principal(), quiz_id,
                                       title=request.form.get("title"),
                                       instructions=request.form.get("instructions"),
                                       total_marks=request.form.get("total_marks"),
                                       quiz_date=request.form.get("quiz_date")),
                   serializers.quiz)

@bp.post("/quizzes/<int:quiz_id>/delete")
@login_required
@role_required(Role.LECTURER)
def delete_quiz(quiz_id):
    return respond(content.delete_quiz(current_principal(), quiz_id), lambda ids: ids)

@bp.get("/salaries")
@login_required
@role_required(Role.LECTURER)
def my_salaries():
    return respond(finance.staff_salaries(current_principal()),
                   lambda items: [serializers.staff_salary(s) for s in items])
