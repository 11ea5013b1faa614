"""
Authentication Gate

Session-cookie authentication dependencies for FastAPI endpoints.

Gated routes depend on ``get_current_user``. A missing, unknown or expired
session raises AuthRequiredError, which the application renders as a
redirect to the login page rather than an error status.
"""

import logging
from dataclasses import dataclass

from fastapi import Depends, Request, Response

from admit_portal.core.config import Settings
from admit_portal.core.deps import get_app_settings
from admit_portal.core.errors import AuthRequiredError
from admit_portal.core.sessions import SessionStore, get_session_store

logger = logging.getLogger(__name__)

LOGIN_URL = "/login"


@dataclass
class CurrentUser:
    """
    Represents the logged-in principal.

    Populated from the server-side session on every request.

    Attributes:
        id: User's unique identifier
        email: User's email address
    """

    id: str
    email: str

    def __str__(self) -> str:
        return f"CurrentUser(id={self.id})"


async def get_optional_user(
    request: Request,
    sessions: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_app_settings),
) -> CurrentUser | None:
    """
    Resolve the session cookie to a user, or None when not logged in.

    The resolved user is also attached to ``request.state.user`` so views
    can show who is logged in.
    """
    token = request.cookies.get(settings.session_cookie_name)
    data = await sessions.get(token)

    user = CurrentUser(id=data.user_id, email=data.email) if data else None
    request.state.user = user
    return user


async def get_current_user(
    request: Request,
    user: CurrentUser | None = Depends(get_optional_user),
) -> CurrentUser:
    """
    FastAPI dependency for gated routes.

    Usage:
        @router.get("/edit/{id}")
        async def edit(user: CurrentUser = Depends(get_current_user)):
            ...

    Raises:
        AuthRequiredError: If there is no valid session (rendered as a redirect)
    """
    if user is None:
        logger.debug(f"Unauthenticated request to gated route {request.url.path}")
        raise AuthRequiredError(login_url=LOGIN_URL)
    return user


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_ttl_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(key=settings.session_cookie_name)


__all__ = [
    "CurrentUser",
    "LOGIN_URL",
    "clear_session_cookie",
    "get_current_user",
    "get_optional_user",
    "set_session_cookie",
]
