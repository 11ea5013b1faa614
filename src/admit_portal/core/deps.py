from fastapi import Request
from fastapi.templating import Jinja2Templates

from admit_portal.core.config import Settings
from admit_portal.core.storage import UploadStorage


def get_app_settings(request: Request) -> Settings:
    """Provides the settings the running application was built with."""
    return request.app.state.settings


def get_templates(request: Request) -> Jinja2Templates:
    """Provides the Jinja2 template renderer."""
    return request.app.state.templates


def get_upload_storage(request: Request) -> UploadStorage:
    """Provides the configured upload storage backend."""
    return request.app.state.storage
