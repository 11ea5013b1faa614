"""
Core module - Configuration, database, sessions, storage, and security.
"""

from admit_portal.core.config import Settings, get_settings, settings
from admit_portal.core.database import Base, close_db, get_db, init_db
from admit_portal.core.redis import close_redis, init_redis
from admit_portal.core.security import hash_password, verify_password

__all__ = [
    # Config
    "Settings",
    "settings",
    "get_settings",
    # Database
    "Base",
    "get_db",
    "init_db",
    "close_db",
    # Redis
    "init_redis",
    "close_redis",
    # Security
    "hash_password",
    "verify_password",
]
