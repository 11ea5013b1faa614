"""
Applications Admin Router

Pages for managing submitted applications.
All endpoints require a logged-in session; without one the user is
redirected to the login page.

Endpoints:
- GET /edit/{id} - Edit form for an application
- POST /edit/{id} - Save edits (new images optional)
- POST /delete/{id} - Delete an application
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from admit_portal.core.auth import CurrentUser, get_current_user
from admit_portal.core.config import Settings
from admit_portal.core.database import get_db
from admit_portal.core.deps import get_app_settings, get_templates, get_upload_storage
from admit_portal.core.errors import PortalError, UnexpectedError
from admit_portal.core.storage import UploadStorage
from admit_portal.modules.applications import service
from admit_portal.modules.applications.helpers import split_form

logger = logging.getLogger(__name__)

router = APIRouter()


def _redirect_home() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/edit/{application_id}", response_class=HTMLResponse)
async def edit_form(
    request: Request,
    application_id: str,
    db: AsyncSession = Depends(get_db),
    templates: Jinja2Templates = Depends(get_templates),
    _user: CurrentUser = Depends(get_current_user),
):
    """
    Render the edit form.

    Raises:
        ApplicationNotFoundError (404): If the application does not exist
    """
    try:
        person = await service.get_application(db, application_id)
    except PortalError:
        raise
    except Exception as e:
        logger.exception(f"Error loading application {application_id}: {e}")
        raise UnexpectedError(
            "An error occurred while loading the application. Please try again."
        ) from e

    return templates.TemplateResponse(
        request,
        "edit.html",
        {"person": person, "variant": person.form_variant.value},
    )


@router.post("/edit/{application_id}")
async def update_application(
    request: Request,
    application_id: str,
    db: AsyncSession = Depends(get_db),
    storage: UploadStorage = Depends(get_upload_storage),
    settings: Settings = Depends(get_app_settings),
    user: CurrentUser = Depends(get_current_user),
) -> RedirectResponse:
    """
    Save an edited application.

    Raises:
        ApplicationNotFoundError (404): If the application does not exist
        ValidationError (400): Missing/invalid fields or invalid files
    """
    try:
        data, files = split_form(await request.form())
        await service.update_application(
            db,
            storage,
            settings,
            application_id,
            data=data,
            files=files,
        )
    except PortalError:
        raise
    except Exception as e:
        logger.exception(f"Error updating application {application_id}: {e}")
        raise UnexpectedError(
            "An error occurred while updating the application. Please try again."
        ) from e

    logger.info(f"User {user.id} edited application {application_id}")
    return _redirect_home()


@router.post("/delete/{application_id}")
async def delete_application(
    application_id: str,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> RedirectResponse:
    """
    Delete an application.

    Raises:
        ApplicationNotFoundError (404): If the application does not exist
    """
    try:
        await service.delete_application(db, application_id)
    except PortalError:
        raise
    except Exception as e:
        logger.exception(f"Error deleting application {application_id}: {e}")
        raise UnexpectedError(
            "An error occurred while deleting the application. Please try again."
        ) from e

    logger.info(f"User {user.id} deleted application {application_id}")
    return _redirect_home()
