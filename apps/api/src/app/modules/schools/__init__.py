"""
Schools module - School registration and profile.
"""

from app.modules.schools.models import School
from app.modules.schools.repository import SchoolRepository

__all__ = ["School", "SchoolRepository"]
