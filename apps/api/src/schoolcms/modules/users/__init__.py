"""
Users module - Principals that author and manage content.
"""

from schoolcms.modules.users.models import CONTENT_ADMIN_ROLES, User, UserRole
from schoolcms.modules.users.repository import UserRepository

__all__ = ["User", "UserRole", "UserRepository", "CONTENT_ADMIN_ROLES"]
