from flask_login import login_required

from ...services import grades
from ...services.permissions import Role
from ..auth.routes import role_required
from .. import current_principal, respond, serializers
from . import bp

@bp.get("/grades")
@login_required
@role_required(Role.HOD)
def department_grades():
    return respond(grades.grades_for_department(current_principal()),
                   lambda rows: [serializers.graded_course(r) for r in rows])

@bp.get("/students/<int:student_id>/grades")
@login_required
@role_required(Role.HOD)
def student_grades(student_id):
    return respond(grades.grades_for_student(current_principal(), student_id),
                   lambda rows: [serializers.graded_course(r) for r in rows])
