"""
Applications Module

Handles the registration application workflow:
1. Submission with uploaded images and a generated registration ID
2. Public admit-card lookup by registration ID
3. Listing with name search and pagination
4. Editing and deleting records (login required)

Pages:
- GET / - Listing (?search=&page=)
- GET/POST /apply - Submit an application
- GET /admitcard/{registration_id} - Admit card
- GET/POST /edit/{id} - Edit an application
- POST /delete/{id} - Delete an application
"""

from .admin_router import router as admin_router
from .router import router

__all__ = ["router", "admin_router"]
