"""
Users module - Portal accounts.
"""

from admit_portal.modules.users.models import User
from admit_portal.modules.users.repository import UserRepository

__all__ = ["User", "UserRepository"]
