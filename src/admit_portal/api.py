from fastapi import APIRouter

from admit_portal.modules.applications import admin_router as admin_applications_router
from admit_portal.modules.applications import router as applications_router
from admit_portal.modules.auth import router as auth_router

api_router = APIRouter()

api_router.include_router(auth_router, tags=["Authentication"])

api_router.include_router(applications_router, tags=["Applications"])

api_router.include_router(admin_applications_router, tags=["Admin - Applications"])
