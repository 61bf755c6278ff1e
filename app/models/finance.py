from ..extensions import db

class FeeStructure(db.Model):
    __tablename__ = "fee_structure"
    id = db.Column(db.Integer, primary_key=True)
    program_id = db.Column(db.Integer, db.ForeignKey("program.id", ondelete="RESTRICT"), nullable=False)
    semester_id = db.Column(db.Integer, db.ForeignKey("semester.id", ondelete="RESTRICT"), nullable=False)
    total_amount = db.Column(db.Numeric(10, 2), nullable=False)
    description = db.Column(db.Text)
    __table_args__ = (
        db.UniqueConstraint("program_id", "semester_id", name="uq_program_semester_fee"),
    )

    program = db.relationship("Program")
    semester = db.relationship("Semester")

class StaffSalary(db.Model):
    __tablename__ = "staff_salary"
    id = db.Column(db.Integer, primary_key=True)
    staff_id = db.Column(db.Integer, db.ForeignKey("staff.id", ondelete="CASCADE"), nullable=False)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    payment_date = db.Column(db.Date, nullable=False)
    description = db.Column(db.Text)
    status = db.Column(db.String(50), nullable=False)    # pending/paid

    staff = db.relationship("Staff")
