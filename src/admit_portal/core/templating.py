"""
Template Rendering

Jinja2 environment shared by all views. Every template receives the
logged-in user (or None) through a context processor.
"""

from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def _user_context(request: Request) -> dict:
    user = getattr(request.state, "user", None)
    return {
        "user": user,
        "is_logged_in": user is not None,
        "user_email": user.email if user else "",
    }


def build_templates(directory: str | Path = TEMPLATES_DIR) -> Jinja2Templates:
    return Jinja2Templates(directory=str(directory), context_processors=[_user_context])
