from models.teacher import Teacher
from models.school_class import SchoolClass
from models.subject import Subject
from models.classroom import Classroom
from models.lesson import Lesson
from models.school_data import SchoolData, FeasibilityReport

__all__ = [
    "Teacher",
    "SchoolClass",
    "Subject",
    "Classroom",
    "Lesson",
    "SchoolData",
    "FeasibilityReport",
]
