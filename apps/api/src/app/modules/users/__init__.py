"""
Users module - School login accounts and credentials.
"""

from app.modules.users.models import UserAccount, UserRole
from app.modules.users.repository import UserRepository

__all__ = ["UserAccount", "UserRole", "UserRepository"]
