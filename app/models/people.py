from ..extensions import db

class Department(db.Model):
    __tablename__ = "department"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), unique=True, nullable=False)
    head_of_department_id = db.Column(
        db.Integer, db.ForeignKey("staff.id", use_alter=True, name="fk_department_head")
    )

    head = db.relationship("Staff", foreign_keys=[head_of_department_id], post_update=True)
    staff = db.relationship("Staff", foreign_keys="Staff.department_id",
                            back_populates="department")
    programs = db.relationship("Program", back_populates="department")

class Staff(db.Model):
    __tablename__ = "staff"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"),
                        unique=True, nullable=False)
    department_id = db.Column(db.Integer, db.ForeignKey("department.id"), nullable=False)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    position = db.Column(db.String(100), nullable=False)    # Lecturer/HOD/Registrar/Bursar

    user = db.relationship("User", back_populates="staff")
    department = db.relationship("Department", foreign_keys=[department_id],
                                 back_populates="staff")
    courses = db.relationship("Course", back_populates="lecturer")

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

class Student(db.Model):
    __tablename__ = "student"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"),
                        unique=True, nullable=False)
    program_id = db.Column(db.Integer, db.ForeignKey("program.id"), nullable=False)
    department_id = db.Column(db.Integer, db.ForeignKey("department.id"), nullable=False)
    current_semester_id = db.Column(db.Integer, db.ForeignKey("semester.id"))  # set at term rollover
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    registration_number = db.Column(db.String(100), unique=True, nullable=False)

    user = db.relationship("User", back_populates="student")
    program = db.relationship("Program")
    department = db.relationship("Department")
    current_semester = db.relationship("Semester")
    enrollments = db.relationship(
        "Enrollment", back_populates="student", cascade="all, delete-orphan"
    )

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"
