"""
Authentication Router

Sign-up, login and logout pages.

Endpoints:
- GET/POST /signup - Create an account (logs the new user in)
- GET/POST /login - Start a session
- GET /logout - End the session
"""

import logging

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from admit_portal.core.auth import (
    CurrentUser,
    clear_session_cookie,
    get_optional_user,
    set_session_cookie,
)
from admit_portal.core.config import Settings
from admit_portal.core.database import get_db
from admit_portal.core.deps import get_app_settings, get_templates
from admit_portal.core.errors import PortalError, UnexpectedError
from admit_portal.core.logging import mask_email
from admit_portal.core.sessions import SessionData, SessionStore, get_session_store
from admit_portal.modules.auth import service

logger = logging.getLogger(__name__)

router = APIRouter()


def _redirect_home() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/signup", response_class=HTMLResponse)
async def signup_page(
    request: Request,
    _user: CurrentUser | None = Depends(get_optional_user),
    templates: Jinja2Templates = Depends(get_templates),
):
    return templates.TemplateResponse(request, "signup.html", {})


@router.post("/signup")
async def signup(
    email: str = Form(""),
    password: str = Form(""),
    confirm_password: str = Form("", alias="confirmPassword"),
    db: AsyncSession = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_app_settings),
) -> RedirectResponse:
    """
    Create an account and log it in.

    Raises:
        ValidationError (400): Missing fields, invalid email, weak or mismatched
            password, or email already registered
    """
    try:
        user = await service.register_user(
            db,
            email=email,
            password=password,
            confirm_password=confirm_password,
            bcrypt_rounds=settings.bcrypt_rounds,
        )
        token = await sessions.create(SessionData(user_id=str(user.id), email=user.email))
    except PortalError:
        raise
    except Exception as e:
        logger.exception(f"Error during signup: {e}")
        raise UnexpectedError("An error occurred during signup. Please try again.") from e

    logger.info(f"User signed up: {mask_email(user.email)}")

    response = _redirect_home()
    set_session_cookie(response, token, settings)
    return response


@router.get("/login", response_class=HTMLResponse)
async def login_page(
    request: Request,
    _user: CurrentUser | None = Depends(get_optional_user),
    templates: Jinja2Templates = Depends(get_templates),
):
    return templates.TemplateResponse(request, "login.html", {})


@router.post("/login")
async def login(
    email: str = Form(""),
    password: str = Form(""),
    db: AsyncSession = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_app_settings),
) -> RedirectResponse:
    """
    Check credentials and start a session.

    Raises:
        ValidationError (400): Missing email or password
        CredentialError (401): Unknown email or wrong password
    """
    try:
        user = await service.authenticate(db, email=email, password=password)
        token = await sessions.create(SessionData(user_id=str(user.id), email=user.email))
    except PortalError:
        raise
    except Exception as e:
        logger.exception(f"Error during login: {e}")
        raise UnexpectedError("An error occurred during login. Please try again.") from e

    logger.info(f"User logged in: {mask_email(user.email)}")

    response = _redirect_home()
    set_session_cookie(response, token, settings)
    return response


@router.get("/logout")
async def logout(
    request: Request,
    sessions: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_app_settings),
) -> RedirectResponse:
    try:
        await sessions.destroy(request.cookies.get(settings.session_cookie_name))
    except Exception as e:
        logger.exception(f"Error during logout: {e}")
        raise UnexpectedError("An error occurred during logout.") from e

    response = _redirect_home()
    clear_session_cookie(response, settings)
    return response
