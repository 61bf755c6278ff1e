from ..extensions import db
from .user import utcnow

class CourseMaterial(db.Model):
    __tablename__ = "course_material"
    id = db.Column(db.Integer, primary_key=True)
    course_id = db.Column(db.Integer, db.ForeignKey("course.id", ondelete="CASCADE"), nullable=False)
    uploaded_by_id = db.Column(db.Integer, db.ForeignKey("staff.id", ondelete="SET NULL"))
    title = db.Column(db.String(255), nullable=False)
    type = db.Column(db.String(50), nullable=False)      # notes/presentation/video
    file_url = db.Column(db.Text, nullable=False)
    uploaded_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    course = db.relationship("Course", back_populates="materials")
    uploaded_by = db.relationship("Staff")
    views = db.relationship("MaterialView", back_populates="material",
                            cascade="all, delete-orphan")

class Assignment(db.Model):
    __tablename__ = "assignment"
    id = db.Column(db.Integer, primary_key=True)
    course_id = db.Column(db.Integer, db.ForeignKey("course.id", ondelete="CASCADE"), nullable=False)
    assigned_by_id = db.Column(db.Integer, db.ForeignKey("staff.id", ondelete="SET NULL"))
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    file_url = db.Column(db.Text)
    due_date = db.Column(db.DateTime(timezone=True), nullable=False)
    assigned_date = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    course = db.relationship("Course", back_populates="assignments")
    assigned_by = db.relationship("Staff")
    submissions = db.relationship("AssignmentSubmission", back_populates="assignment",
                                  cascade="all, delete-orphan")

class Quiz(db.Model):
    __tablename__ = "quiz"
    id = db.Column(db.Integer, primary_key=True)
    course_id = db.Column(db.Integer, db.ForeignKey("course.id", ondelete="CASCADE"), nullable=False)
    created_by_id = db.Column(db.Integer, db.ForeignKey("staff.id", ondelete="SET NULL"))
    title = db.Column(db.String(255), nullable=False)
    instructions = db.Column(db.Text)
    file_url = db.Column(db.Text)
    total_marks = db.Column(db.Integer, nullable=False)
    quiz_date = db.Column(db.DateTime(timezone=True), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    course = db.relationship("Course", back_populates="quizzes")
    created_by = db.relationship("Staff")
    submissions = db.relationship("QuizSubmission", back_populates="quiz",
                                  cascade="all, delete-orphan")

class AssignmentSubmission(db.Model):
    __tablename__ = "assignment_submission"
    id = db.Column(db.Integer, primary_key=True)
    assignment_id = db.Column(db.Integer, db.ForeignKey("assignment.id", ondelete="CASCADE"), nullable=False)
    student_id = db.Column(db.Integer, db.ForeignKey("student.id", ondelete="CASCADE"), nullable=False)
    file_url = db.Column(db.Text, nullable=False)
    submitted_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    remarks = db.Column(db.Text)
    grade = db.Column(db.Numeric(5, 2))    # null until graded

    assignment = db.relationship("Assignment", back_populates="submissions")
    student = db.relationship("Student")

class QuizSubmission(db.Model):
    __tablename__ = "quiz_submission"
    id = db.Column(db.Integer, primary_key=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey("quiz.id", ondelete="CASCADE"), nullable=False)
    student_id = db.Column(db.Integer, db.ForeignKey("student.id", ondelete="CASCADE"), nullable=False)
    file_url = db.Column(db.Text, nullable=False)
    submitted_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    feedback = db.Column(db.Text)
    score = db.Column(db.Numeric(5, 2))

    quiz = db.relationship("Quiz", back_populates="submissions")
    student = db.relationship("Student")

class MaterialView(db.Model):
    __tablename__ = "material_view"
    id = db.Column(db.Integer, primary_key=True)
    material_id = db.Column(db.Integer, db.ForeignKey("course_material.id", ondelete="CASCADE"), nullable=False)
    student_id = db.Column(db.Integer, db.ForeignKey("student.id", ondelete="CASCADE"), nullable=False)
    viewed_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    interaction_type = db.Column(db.String(50), nullable=False, default="viewed")   # viewed/downloaded
    __table_args__ = (
        db.UniqueConstraint("material_id", "student_id", name="uq_material_student_view"),
    )

    material = db.relationship("CourseMaterial", back_populates="views")
    student = db.relationship("Student")
