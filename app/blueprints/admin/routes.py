from flask import jsonify, request
from flask_login import login_required

from ...services import audit, grades
from ...services.permissions import Role
from ..auth.routes import role_required
from .. import current_principal, respond, serializers
from . import bp

@bp.post("/grades")
@login_required
@role_required(Role.ADMIN)
def create_grade():
    return respond(grades.create_grade(current_principal(),
                                       request.form.get("enrollment_id", type=int),
                                       request.form.get("cat_score"),
                                       request.form.get("exam_score")),
                   serializers.grade, status=201)

@bp.post("/grades/<int:grade_id>")
@login_required
@role_required(Role.ADMIN)
def update_grade(grade_id):
    return respond(grades.update_grade(current_principal(), grade_id,
                                       request.form.get("cat_score"),
                                       request.form.get("exam_score")),
                   serializers.grade)

@bp.post("/grades/<int:grade_id>/delete")
@login_required
@role_required(Role.ADMIN)
def delete_grade(grade_id):
    return respond(grades.delete_grade(current_principal(), grade_id), lambda ids: ids)

@bp.get("/departments/<int:department_id>/grades")
@login_required
@role_required(Role.ADMIN)
def department_grades(department_id):
    return respond(grades.grades_for_department(current_principal(), department_id),
                   lambda rows: [serializers.graded_course(r) for r in rows])

@bp.get("/logs")
@login_required
@role_required(Role.ADMIN)
def logs():
    limit = min(max(request.args.get("limit", type=int) or 100, 1), 500)
    return jsonify([serializers.user_log(log) for log in audit.recent_logs(limit)])
