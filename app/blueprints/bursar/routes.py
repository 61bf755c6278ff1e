from flask import request
from flask_login import login_required

from ...services import finance
from ...services.permissions import Role
from ..auth.routes import role_required
from .. import current_principal, respond, serializers
from . import bp

FEE_MANAGERS = (Role.BURSAR, Role.ADMIN, Role.REGISTRAR)
SALARY_MANAGERS = (Role.BURSAR, Role.ADMIN)

@bp.get("/fee-structures")
@login_required
@role_required(*FEE_MANAGERS)
def list_fee_structures():
    return respond(finance.fee_structures(current_principal()),
                   lambda items: [serializers.fee_structure(f) for f in items])

@bp.post("/fee-structures")
@login_required
@role_required(*FEE_MANAGERS)
def create_fee_structure():
    return respond(finance.create_fee_structure(current_principal(),
                                                request.form.get("program_id", type=int),
                                                request.form.get("semester_id", type=int),
                                                request.form.get("total_amount"),
                                                request.form.get("description")),
                   serializers.fee_structure, status=201)

@bp.post("/fee-structures/<int:fee_structure_id>")
@login_required
@role_required(*FEE_MANAGERS)
def update_fee_structure(fee_structure_id):
    return respond(finance.update_fee_structure(current_principal(), fee_structure_id,
                                                request.form.get("total_amount"),
                                                request.form.get("description")),
                   serializers.fee_structure)

@bp.post("/fee-structures/<int:fee_structure_id>/delete")
@login_required
@role_required(*FEE_MANAGERS)
def delete_fee_structure(fee_structure_id):
    return respond(finance.delete_fee_structure(current_principal(), fee_structure_id), lambda ids: ids)

@bp.get("/salaries")
@login_required
@role_required(*SALARY_MANAGERS)
def list_salaries():
    return respond(finance.staff_salaries(current_principal(),
                                          request.args.get("staff_id", type=int)),
                   lambda items: [serializers.staff_salary(s) for s in items])

@bp.post("/salaries")
@login_required
@role_required(*SALARY_MANAGERS)
def create_salary():
    return respond(finance.create_staff_salary(current_principal(),
                                               request.form.get("staff_id", type=int),
                                               request.form.get("amount"),
                                               request.form.get("payment_date"),
                                               request.form.get("status"),
                                               request.form.get("description")),
                   serializers.staff_salary, status=201)

@bp.post("/salaries/<int:salary_id>")
@login_required
@role_required(*SALARY_MANAGERS)
def update_salary(salary_id):
    return respond(finance.update_staff_salary(current_principal(), salary_id,
                                               request.form.get("amount"),
                                               request.form.get("payment_date"),
                                               request.form.get("status"),
                                               request.form.get("description")),
                   serializers.staff_salary)

@bp.post("/salaries/<int:salary_id>/delete")
@login_required
@role_required(*SALARY_MANAGERS)
def delete_salary(salary_id):
    return respond(finance.delete_staff_salary(current_principal(), salary_id), lambda ids: ids)
