"""
Students module - Student register for a school.
"""

from app.modules.students.models import Student
from app.modules.students.repository import StudentRepository

__all__ = ["Student", "StudentRepository"]
