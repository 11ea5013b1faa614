"""
Authentication Service

Sign-up and credential checks.

Email uniqueness is checked before insert; the unique index on users.email
catches the case where two sign-ups race past that check.
"""

import asyncio
import contextlib
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from admit_portal.core.errors import CredentialError, StorageError, ValidationError
from admit_portal.core.logging import mask_email
from admit_portal.core.security import hash_password, verify_password
from admit_portal.core.validators import (
    is_blank,
    require_fields,
    validate_email,
    validate_password,
)
from admit_portal.modules.users.models import User
from admit_portal.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


class EmailAlreadyRegisteredError(ValidationError):
    """Raised when signing up with an email that already has an account."""

    def __init__(self):
        super().__init__("Email already registered", error_code="EMAIL_TAKEN")


async def register_user(
    db: AsyncSession,
    *,
    email: str,
    password: str,
    confirm_password: str,
    bcrypt_rounds: int = 12,
) -> User:
    """
    Create an account from the sign-up form.

    Raises:
        ValidationError: Missing fields, bad email, weak or mismatched password
        EmailAlreadyRegisteredError: If the email already has an account
        StorageError: If the account cannot be saved
    """
    require_fields(
        {"email": email, "password": password, "confirmPassword": confirm_password},
        ("email", "password", "confirmPassword"),
    )
    email = email.strip()
    validate_email(email)
    validate_password(password, confirm_password)

    try:
        if await UserRepository.email_exists(db, email):
            logger.warning(f"Sign-up rejected, email already registered: {mask_email(email)}")
            raise EmailAlreadyRegisteredError()

        password_hash = await asyncio.to_thread(hash_password, password, bcrypt_rounds)
        user = await UserRepository.create(db, email=email, password_hash=password_hash)
    except IntegrityError as e:
        with contextlib.suppress(SQLAlchemyError):
            await db.rollback()
        logger.warning(f"Concurrent sign-up for {mask_email(email)} hit the unique index")
        raise EmailAlreadyRegisteredError() from e
    except SQLAlchemyError as e:
        with contextlib.suppress(SQLAlchemyError):
            await db.rollback()
        logger.error(f"Failed to create user: {e}")
        raise StorageError() from e

    return user


async def authenticate(db: AsyncSession, *, email: str, password: str) -> User:
    """
    Check login credentials.

    Raises:
        ValidationError: If email or password is missing
        CredentialError: If no account matches or the password is wrong
    """
    if is_blank(email) or is_blank(password):
        raise ValidationError("Email and password are required", error_code="MISSING_FIELDS")

    email = email.strip()
    try:
        user = await UserRepository.get_by_email(db, email)
    except SQLAlchemyError as e:
        logger.error(f"Failed to load user for login: {e}")
        raise StorageError() from e

    if not user:
        logger.warning(f"Login attempt for non-existent email: {mask_email(email)}")
        raise CredentialError()

    if not await asyncio.to_thread(verify_password, password, user.password_hash):
        logger.warning(f"Invalid password for user: {mask_email(email)}")
        raise CredentialError()

    return user
