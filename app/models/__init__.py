from ..extensions import db
from .user import User, UserLog
from .people import Department, Staff, Student
from .course import Program, Semester, Course, Timetable
from .enrollment import Enrollment, Grade, Transcript
from .content import (
    CourseMaterial, Assignment, Quiz,
    AssignmentSubmission, QuizSubmission, MaterialView,
)
from .finance import FeeStructure, StaffSalary

__all__ = [
    "User", "UserLog", "Department", "Staff", "Student",
    "Program", "Semester", "Course", "Timetable",
    "Enrollment", "Grade", "Transcript",
    "CourseMaterial", "Assignment", "Quiz",
    "AssignmentSubmission", "QuizSubmission", "MaterialView",
    "FeeStructure", "StaffSalary",
]
