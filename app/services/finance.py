"""Fee structures per (program, semester) and staff salary records.

Bursars and admins manage both. Registrars may also manage fee structures.
Students see the fee structures of their own program, and staff members see
their own salary records.
"""
import logging
from datetime import date
from decimal import Decimal, InvalidOperation

from ..extensions import db
from ..models import FeeStructure, Program, Semester, Staff, StaffSalary
from . import audit, hooks
from .common import current_student, insert_unique
from .grading import quantize
from .permissions import Role, has_role, require
from .results import Err, ErrorKind, Ok

logger = logging.getLogger(__name__)

FEE_MANAGERS = (Role.ADMIN, Role.BURSAR, Role.REGISTRAR)
SALARY_MANAGERS = (Role.ADMIN, Role.BURSAR)


def parse_amount(value, field="Amount"):
    try:
        amount = quantize(str(value).strip())
    except InvalidOperation:
        amount = Decimal(0)
    if not amount.is_finite() or amount <= 0:
        return Err(ErrorKind.VALIDATION, f"{field} must be a positive number.")
    return Ok(amount)


def parse_date(value, field):
    if isinstance(value, date):
        return Ok(value)
    try:
        return Ok(date.fromisoformat((value or "").strip()))
    except ValueError:
        return Err(ErrorKind.VALIDATION, f"{field} must be a date (YYYY-MM-DD).")


def _blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def create_fee_structure(principal, program_id, semester_id, total_amount, description=None):
    allowed = require(principal, FEE_MANAGERS, action="create fee structures")
    if not allowed.ok:
        return allowed
    if not program_id or not semester_id or _blank(total_amount):
        return Err(ErrorKind.VALIDATION, "Missing required fields for fee structure creation.")
    if db.session.get(Program, program_id) is None:
        return Err(ErrorKind.NOT_FOUND, "Program not found.")
    if db.session.get(Semester, semester_id) is None:
        return Err(ErrorKind.NOT_FOUND, "Semester not found.")
    amount = parse_amount(total_amount, "Total amount")
    if not amount.ok:
        return amount

    fee = FeeStructure(program_id=program_id, semester_id=semester_id,
                       total_amount=amount.value, description=description or None)
    inserted = insert_unique(fee, "A fee structure for this program and semester already exists.")
    if not inserted.ok:
        return inserted
    audit.log_action(principal, "create", "fee_structure", fee.id,
                     f"Fee structure for program {program_id}, semester {semester_id}: {fee.total_amount}")
    db.session.commit()
    hooks.notify("fee_structure", "create", fee_structure_id=fee.id, program_id=program_id)
    return Ok(fee)


def update_fee_structure(principal, fee_structure_id, total_amount=None, description=None):
    allowed = require(principal, FEE_MANAGERS, action="update fee structures")
    if not allowed.ok:
        return allowed
    fee = db.session.get(FeeStructure, fee_structure_id)
    if fee is None:
        return Err(ErrorKind.NOT_FOUND, "Fee structure not found.")
    if _blank(total_amount) and description is None:
        return Err(ErrorKind.VALIDATION, "No fields to update.")
    if not _blank(total_amount):
        amount = parse_amount(total_amount, "Total amount")
        if not amount.ok:
            return amount
        fee.total_amount = amount.value
    if description is not None:
        fee.description = description or None
    audit.log_action(principal, "update", "fee_structure", fee.id,
                     f"Fee structure {fee.id}: {fee.total_amount}")
    db.session.commit()
    hooks.notify("fee_structure", "update", fee_structure_id=fee.id, program_id=fee.program_id)
    return Ok(fee)


def delete_fee_structure(principal, fee_structure_id):
    allowed = require(principal, FEE_MANAGERS, action="delete fee structures")
    if not allowed.ok:
        return allowed
    fee = db.session.get(FeeStructure, fee_structure_id)
    if fee is None:
        return Err(ErrorKind.NOT_FOUND, "Fee structure not found.")
    ids = dict(fee_structure_id=fee.id, program_id=fee.program_id)
    db.session.delete(fee)
    audit.log_action(principal, "delete", "fee_structure", ids["fee_structure_id"],
                     f"Deleted fee structure of program {ids['program_id']}")
    db.session.commit()
    hooks.notify("fee_structure", "delete", **ids)
    return Ok(ids)


def fee_structures(principal):
    """Managers see every fee structure; a student sees their program's."""
    if has_role(principal, [Role.STUDENT]):
        found = current_student(principal)
        if not found.ok:
            return found
        q = FeeStructure.query.filter_by(program_id=found.value.program_id)
    else:
        allowed = require(principal, FEE_MANAGERS, action="view fee structures")
        if not allowed.ok:
            return allowed
        q = FeeStructure.query
    return Ok(q.join(Semester, FeeStructure.semester_id == Semester.id)
              .order_by(Semester.start_date, FeeStructure.program_id).all())


def create_staff_salary(principal, staff_id, amount, payment_date, status, description=None):
    allowed = require(principal, SALARY_MANAGERS, action="create staff salary records")
    if not allowed.ok:
        return allowed
    if not staff_id or _blank(amount) or _blank(payment_date) or _blank(status):
        return Err(ErrorKind.VALIDATION, "Missing required fields for staff salary creation.")
    if db.session.get(Staff, staff_id) is None:
        return Err(ErrorKind.NOT_FOUND, "Staff member not found.")
    parsed = parse_amount(amount)
    if not parsed.ok:
        return parsed
    paid_on = parse_date(payment_date, "Payment date")
    if not paid_on.ok:
        return paid_on

    salary = StaffSalary(staff_id=staff_id, amount=parsed.value, payment_date=paid_on.value,
                         status=status.strip().lower(), description=description or None)
    db.session.add(salary)
    db.session.flush()
    audit.log_action(principal, "create", "staff_salary", salary.id,
                     f"Salary of {salary.amount} for staff {staff_id} ({salary.status})")
    db.session.commit()
    hooks.notify("staff_salary", "create", staff_salary_id=salary.id, staff_id=staff_id)
    return Ok(salary)


def update_staff_salary(principal, salary_id, amount=None, payment_date=None, status=None,
                        description=None):
    allowed = require(principal, SALARY_MANAGERS, action="update staff salary records")
    if not allowed.ok:
        return allowed
    salary = db.session.get(StaffSalary, salary_id)
    if salary is None:
        return Err(ErrorKind.NOT_FOUND, "Staff salary record not found.")
    changes = {}
    if not _blank(amount):
        parsed = parse_amount(amount)
        if not parsed.ok:
            return parsed
        changes["amount"] = parsed.value
    if not _blank(payment_date):
        paid_on = parse_date(payment_date, "Payment date")
        if not paid_on.ok:
            return paid_on
        changes["payment_date"] = paid_on.value
    if not _blank(status):
        changes["status"] = status.strip().lower()
    if description is not None:
        changes["description"] = description or None
    if not changes:
        return Err(ErrorKind.VALIDATION, "No fields to update.")

    for field, value in changes.items():
        setattr(salary, field, value)
    audit.log_action(principal, "update", "staff_salary", salary.id,
                     f"Updated {', '.join(sorted(changes))} of salary {salary.id}")
    db.session.commit()
    hooks.notify("staff_salary", "update", staff_salary_id=salary.id, staff_id=salary.staff_id)
    return Ok(salary)


def delete_staff_salary(principal, salary_id):
    allowed = require(principal, SALARY_MANAGERS, action="delete staff salary records")
    if not allowed.ok:
        return allowed
    salary = db.session.get(StaffSalary, salary_id)
    if salary is None:
        return Err(ErrorKind.NOT_FOUND, "Staff salary record not found.")
    ids = dict(staff_salary_id=salary.id, staff_id=salary.staff_id)
    db.session.delete(salary)
    audit.log_action(principal, "delete", "staff_salary", ids["staff_salary_id"],
                     f"Deleted salary record of staff {ids['staff_id']}")
    db.session.commit()
    hooks.notify("staff_salary", "delete", **ids)
    return Ok(ids)


def staff_salaries(principal, staff_id=None):
    """Salary records, newest payment first.

    Managers see everyone's (optionally one staff member's); any other staff
    member sees only their own.
    """
    if principal is None:
        return Err(ErrorKind.UNAUTHORIZED, "Unauthorized: You must be logged in.")
    q = StaffSalary.query
    if has_role(principal, SALARY_MANAGERS):
        if staff_id:
            q = q.filter(StaffSalary.staff_id == staff_id)
    else:
        own = Staff.query.filter_by(user_id=principal.user_id).one_or_none()
        allowed = require(principal, predicate=lambda: own is not None,
                          action="view staff salary records")
        if not allowed.ok:
            return allowed
        q = q.filter(StaffSalary.staff_id == own.id)
    return Ok(q.order_by(StaffSalary.payment_date.desc(), StaffSalary.id.desc()).all())
