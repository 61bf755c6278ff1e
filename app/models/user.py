from datetime import datetime, timezone
from flask_login import UserMixin
from ..extensions import db

def utcnow():
    return datetime.now(timezone.utc)

class User(UserMixin, db.Model):
    __tablename__ = "user"
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False)
    email = db.Column(db.String(255), unique=True)
    password_hash = db.Column(db.String(256), nullable=False)
    role = db.Column(db.String(16), nullable=False)    # admin/registrar/hod/bursar/lecturer/student
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    staff = db.relationship("Staff", back_populates="user", uselist=False)
    student = db.relationship("Student", back_populates="user", uselist=False)
    logs = db.relationship("UserLog", back_populates="user", cascade="all, delete-orphan")

class UserLog(db.Model):
    __tablename__ = "user_log"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    action = db.Column(db.String(50), nullable=False)          # create/update/delete/...
    target_table = db.Column(db.String(100))
    target_id = db.Column(db.Integer)
    timestamp = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    description = db.Column(db.Text)

    user = db.relationship("User", back_populates="logs")
