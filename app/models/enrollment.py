from datetime import date
from ..extensions import db
from .user import utcnow

class Enrollment(db.Model):
    __tablename__ = "enrollment"
    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("student.id", ondelete="CASCADE"), nullable=False)
    course_id = db.Column(db.Integer, db.ForeignKey("course.id"), nullable=False)
    semester_id = db.Column(db.Integer, db.ForeignKey("semester.id"), nullable=False)
    enrollment_date = db.Column(db.Date, nullable=False, default=date.today)
    __table_args__ = (
        db.UniqueConstraint("student_id", "course_id", name="uq_student_course"),
    )

    student = db.relationship("Student", back_populates="enrollments")
    course = db.relationship("Course", back_populates="enrollments")
    semester = db.relationship("Semester")
    grade = db.relationship("Grade", back_populates="enrollment", uselist=False,
                            cascade="all, delete-orphan")

class Grade(db.Model):
    __tablename__ = "grade"
    id = db.Column(db.Integer, primary_key=True)
    enrollment_id = db.Column(db.Integer, db.ForeignKey("enrollment.id", ondelete="CASCADE"),
                              unique=True, nullable=False)
    cat_score = db.Column(db.Numeric(5, 2))
    exam_score = db.Column(db.Numeric(5, 2))
    # derived from cat_score + exam_score, never edited directly
    total_score = db.Column(db.Numeric(5, 2))
    letter_grade = db.Column(db.String(5))
    gpa = db.Column(db.Numeric(3, 2))

    enrollment = db.relationship("Enrollment", back_populates="grade")

class Transcript(db.Model):
    __tablename__ = "transcript"
    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("student.id", ondelete="CASCADE"), nullable=False)
    semester_id = db.Column(db.Integer, db.ForeignKey("semester.id"), nullable=False)
    gpa = db.Column(db.Numeric(3, 2))
    cgpa = db.Column(db.Numeric(3, 2))
    generated_date = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    file_url = db.Column(db.Text)    # null until finalized
    __table_args__ = (
        db.UniqueConstraint("student_id", "semester_id", name="uq_student_semester_transcript"),
    )

    student = db.relationship("Student")
    semester = db.relationship("Semester")
