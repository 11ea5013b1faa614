"""Authentication module."""

from admit_portal.modules.auth.router import router

__all__ = ["router"]
