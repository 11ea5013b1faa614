"""
Applications Router

Public listing, the application form and admit-card lookup.

Endpoints:
- GET / - Paginated, optionally name-filtered application listing
- GET /apply - Application form (login required)
- POST /apply - Submit an application (login required)
- GET /admitcard/{registration_id} - Admit card for a registration ID

A missing admit card renders a "not found" message with status 200.
"""

import logging

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from admit_portal.core.auth import CurrentUser, get_current_user, get_optional_user
from admit_portal.core.config import Settings
from admit_portal.core.database import get_db
from admit_portal.core.deps import get_app_settings, get_templates, get_upload_storage
from admit_portal.core.errors import PortalError, UnexpectedError
from admit_portal.core.storage import UploadStorage
from admit_portal.modules.applications import service
from admit_portal.modules.applications.helpers import split_form
from admit_portal.modules.applications.models import FormVariant

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def list_applications(
    request: Request,
    search: str = Query(""),
    page: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    templates: Jinja2Templates = Depends(get_templates),
    _user: CurrentUser | None = Depends(get_optional_user),
):
    """List applications, optionally filtered by name, five per page."""
    try:
        result = await service.list_applications(
            db,
            search=search,
            page=service.normalize_page(page),
            page_size=settings.page_size,
        )
    except PortalError:
        raise
    except Exception as e:
        logger.exception(f"Error listing applications: {e}")
        raise UnexpectedError(
            "An error occurred while fetching applications. Please try again."
        ) from e

    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "persons": result.items,
            "search": result.search,
            "current_page": result.page,
            "total_pages": result.pages,
            "total": result.total,
            "page": result,
        },
    )


@router.get("/apply", response_class=HTMLResponse)
async def application_form(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    templates: Jinja2Templates = Depends(get_templates),
    _user: CurrentUser = Depends(get_current_user),
):
    return templates.TemplateResponse(
        request,
        "application.html",
        {"variant": settings.application_variant},
    )


@router.post("/apply")
async def submit_application(
    request: Request,
    db: AsyncSession = Depends(get_db),
    storage: UploadStorage = Depends(get_upload_storage),
    settings: Settings = Depends(get_app_settings),
    user: CurrentUser = Depends(get_current_user),
) -> RedirectResponse:
    """
    Submit an application.

    Redirects to the admit card of the new registration ID.

    Raises:
        ValidationError (400): Missing/invalid fields or missing/invalid files
        UploadError (500): A file could not be stored
        StorageError (500): The record could not be saved
    """
    try:
        data, files = split_form(await request.form())
        application = await service.submit_application(
            db,
            storage,
            settings,
            variant=FormVariant(settings.application_variant),
            data=data,
            files=files,
            generate_id=request.app.state.registration_ids,
        )
    except PortalError as e:
        logger.warning(f"Application rejected for user {user.id}: {e.message}")
        raise
    except Exception as e:
        logger.exception(f"Error submitting application: {e}")
        raise UnexpectedError(
            "An error occurred while processing your application. Please try again."
        ) from e

    return RedirectResponse(
        url=f"/admitcard/{application.registration_id}",
        status_code=status.HTTP_303_SEE_OTHER,
    )


@router.get("/admitcard/{registration_id}", response_class=HTMLResponse)
async def admit_card(
    request: Request,
    registration_id: str,
    db: AsyncSession = Depends(get_db),
    templates: Jinja2Templates = Depends(get_templates),
    _user: CurrentUser | None = Depends(get_optional_user),
):
    """Show the admit card for a registration ID, or a not-found message."""
    try:
        applicant = await service.find_admit_card(
            db, registration_id, prefix=request.app.state.registration_ids.prefix
        )
    except PortalError:
        raise
    except Exception as e:
        logger.exception(f"Error loading admit card {registration_id}: {e}")
        raise UnexpectedError() from e

    return templates.TemplateResponse(
        request,
        "admitcard.html",
        {"applicant": applicant, "registration_id": registration_id},
    )
