from ..extensions import db

class Program(db.Model):
    __tablename__ = "program"
    id = db.Column(db.Integer, primary_key=True)
    department_id = db.Column(db.Integer, db.ForeignKey("department.id"), nullable=False)
    name = db.Column(db.String(255), unique=True, nullable=False)
    code = db.Column(db.String(50), unique=True, nullable=False)
    duration_semesters = db.Column(db.Integer, nullable=False, default=8)

    department = db.relationship("Department", back_populates="programs")
    courses = db.relationship("Course", back_populates="program")

class Semester(db.Model):
    __tablename__ = "semester"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)   # e.g. "2025/26 Sem 1"
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)

class Course(db.Model):
    __tablename__ = "course"
    id = db.Column(db.Integer, primary_key=True)
    program_id = db.Column(db.Integer, db.ForeignKey("program.id"), nullable=False)
    semester_id = db.Column(db.Integer, db.ForeignKey("semester.id"), nullable=False)
    lecturer_id = db.Column(db.Integer, db.ForeignKey("staff.id"))
    code = db.Column(db.String(50), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    credits = db.Column(db.Numeric(4, 2), nullable=False, default=3)
    description = db.Column(db.Text)
    __table_args__ = (
        db.UniqueConstraint("program_id", "code", "semester_id", name="uq_program_code_semester"),
    )

    program = db.relationship("Program", back_populates="courses")
    semester = db.relationship("Semester")
    lecturer = db.relationship("Staff", back_populates="courses")
    timetables = db.relationship("Timetable", back_populates="course",
                                 cascade="all, delete-orphan")
    enrollments = db.relationship("Enrollment", back_populates="course")
    materials = db.relationship("CourseMaterial", back_populates="course",
                                cascade="all, delete-orphan")
    assignments = db.relationship("Assignment", back_populates="course",
                                  cascade="all, delete-orphan")
    quizzes = db.relationship("Quiz", back_populates="course",
                              cascade="all, delete-orphan")

class Timetable(db.Model):
    __tablename__ = "timetable"
    id = db.Column(db.Integer, primary_key=True)
    semester_id = db.Column(db.Integer, db.ForeignKey("semester.id"), nullable=False)
    course_id = db.Column(db.Integer, db.ForeignKey("course.id"), nullable=False)
    lecturer_id = db.Column(db.Integer, db.ForeignKey("staff.id"), nullable=False)
    day_of_week = db.Column(db.String(20), nullable=False)
    start_time = db.Column(db.Time, nullable=False)
    end_time = db.Column(db.Time, nullable=False)
    room = db.Column(db.String(50))
    __table_args__ = (
        db.UniqueConstraint("semester_id", "course_id", "day_of_week", "start_time",
                            name="uq_semester_course_day_time"),
    )

    semester = db.relationship("Semester")
    course = db.relationship("Course", back_populates="timetables")
    lecturer = db.relationship("Staff")
