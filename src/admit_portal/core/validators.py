"""
Form Validators

Stateless checks applied to raw submitted form values before anything is
stored. Each check raises ValidationError with a human-readable message and
has no side effects.
"""

import re
from collections.abc import Iterable, Mapping

from starlette.datastructures import UploadFile

from admit_portal.core.errors import ValidationError
from admit_portal.core.storage import has_file

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
MOBILE_PATTERN = re.compile(r"[0-9]{10}")
MIN_PASSWORD_LENGTH = 6


def is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require_fields(data: Mapping[str, object], fields: Iterable[str]) -> None:
    """Every listed field must be present and non-empty."""
    missing = [field for field in fields if is_blank(data.get(field))]
    if missing:
        raise ValidationError(
            f"Missing required field(s): {', '.join(missing)}",
            error_code="MISSING_FIELDS",
        )


def validate_email(email: str) -> None:
    if not EMAIL_PATTERN.fullmatch(email or ""):
        raise ValidationError("Please enter a valid email address", error_code="INVALID_EMAIL")


def validate_mobile(mobile: str) -> None:
    if not MOBILE_PATTERN.fullmatch(mobile or ""):
        raise ValidationError(
            "Invalid mobile number: must be exactly 10 digits",
            error_code="INVALID_MOBILE",
        )


def validate_password(password: str, confirm_password: str) -> None:
    """Password policy and confirmation check for sign-up."""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
            error_code="WEAK_PASSWORD",
        )
    if password != confirm_password:
        raise ValidationError("Passwords do not match", error_code="PASSWORD_MISMATCH")


def require_files(files: Mapping[str, UploadFile | None], names: Iterable[str]) -> None:
    """Every listed upload field must carry a file."""
    missing = [name for name in names if not has_file(files.get(name))]
    if missing:
        raise ValidationError(
            f"Missing required file(s): {', '.join(missing)}",
            error_code="MISSING_FILES",
        )
