"""
Applications Service Layer

Business logic for registration applications.
Orchestrates validation, upload storage and repository operations.

This module implements:
1. Submission Flow:
   - Validate required fields, email, mobile and required files
   - Check and store uploaded images
   - Generate the registration ID and create the record

2. Admit Card Lookup:
   - Exact match on registration ID, "not found" returned as None

3. Listing:
   - Case-insensitive name search, 1-based fixed-size pages

4. Edit / Delete:
   - Partial update: images replaced only when a new file is supplied
   - Not-found reported distinctly from storage failures

A record is only written after every validation and upload step has
succeeded, so a rejected request never persists anything.
"""

import contextlib
import logging
import math
from collections.abc import Callable, Mapping
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from admit_portal.core.config import Settings
from admit_portal.core.errors import NotFoundError, StorageError
from admit_portal.core.logging import mask_email
from admit_portal.core.storage import UploadStorage, has_file, prepare_upload
from admit_portal.core.validators import (
    require_fields,
    require_files,
    validate_email,
    validate_mobile,
)
from admit_portal.modules.applications import repository
from admit_portal.modules.applications.helpers import (
    DEFAULT_PREFIX,
    generate_registration_id,
    is_registration_id,
)
from admit_portal.modules.applications.models import Application, FormVariant
from admit_portal.modules.applications.schemas import (
    BASIC_FORM_FIELDS,
    BASIC_FORM_FILES,
    FULL_FORM_FIELDS,
    FULL_FORM_FILES,
    ApplicationPage,
    parse_form,
)

logger = logging.getLogger(__name__)

# Upload form field -> Application column
FILE_COLUMNS: dict[FormVariant, dict[str, str]] = {
    FormVariant.FULL: {"photo": "photo", "signature": "signature"},
    FormVariant.BASIC: {"image": "photo"},
}


class ApplicationNotFoundError(NotFoundError):
    """Raised when an application is not found."""

    def __init__(self, application_id: str | UUID | None = None):
        super().__init__(message="Application not found", error_code="APPLICATION_NOT_FOUND")
        self.application_id = application_id


# ============================================
# Helpers
# ============================================


def _parse_application_id(application_id: str | UUID) -> UUID:
    """Malformed internal IDs cannot match any record."""
    if isinstance(application_id, UUID):
        return application_id
    try:
        return UUID(application_id)
    except (ValueError, TypeError, AttributeError) as e:
        raise ApplicationNotFoundError(application_id) from e


async def _rollback(db: AsyncSession) -> None:
    with contextlib.suppress(SQLAlchemyError):
        await db.rollback()


def form_fields(variant: FormVariant) -> tuple[str, ...]:
    return FULL_FORM_FIELDS if variant == FormVariant.FULL else BASIC_FORM_FIELDS


def form_files(variant: FormVariant) -> tuple[str, ...]:
    return FULL_FORM_FILES if variant == FormVariant.FULL else BASIC_FORM_FILES


def validate_submission(
    variant: FormVariant,
    data: Mapping[str, str],
    files: Mapping[str, UploadFile | None],
    *,
    files_required: bool,
) -> None:
    """
    Run the form checks for a variant.

    Raises:
        ValidationError: On the first failing check
    """
    require_fields(data, form_fields(variant))
    validate_email(data["email"].strip())
    if variant == FormVariant.FULL:
        validate_mobile(data["mobile"].strip())
    if files_required:
        require_files(files, form_files(variant))


async def _store_files(
    storage: UploadStorage,
    settings: Settings,
    variant: FormVariant,
    files: Mapping[str, UploadFile | None],
) -> dict[str, str]:
    """
    Check then store every supplied file of the variant.

    Returns:
        Column name -> stored reference, for the files that were supplied
    """
    pending = []
    for field in form_files(variant):
        upload = files.get(field)
        if has_file(upload):
            pending.append(
                await prepare_upload(
                    field,
                    upload,
                    allowed_types=settings.allowed_image_types,
                    max_bytes=settings.max_upload_bytes,
                )
            )

    references = await storage.put_all(pending)
    columns = FILE_COLUMNS[variant]
    return {columns[field]: reference for field, reference in references.items()}


def normalize_page(raw: str | int | None) -> int:
    """Query-string page number: positive integer, anything else means page 1."""
    try:
        page = int(raw) if raw is not None else 1
    except (TypeError, ValueError):
        return 1
    return page if page >= 1 else 1


# ============================================
# Operations
# ============================================


async def submit_application(
    db: AsyncSession,
    storage: UploadStorage,
    settings: Settings,
    *,
    variant: FormVariant,
    data: Mapping[str, str],
    files: Mapping[str, UploadFile | None],
    generate_id: Callable[[], str] = generate_registration_id,
) -> Application:
    """
    Validate, store uploads and create an application.

    Args:
        db: Database session
        storage: Upload storage backend
        settings: Application settings (upload limits)
        variant: Which form was submitted
        data: Raw text fields
        files: Uploaded file parts keyed by form field
        generate_id: Registration ID generator

    Returns:
        The created application, including its registration ID

    Raises:
        ValidationError: If any field or file check fails
        UploadError: If a file cannot be stored
        StorageError: If the record cannot be saved
    """
    # The basic form's image is optional
    validate_submission(variant, data, files, files_required=variant == FormVariant.FULL)
    fields = parse_form(variant, data)

    references = await _store_files(storage, settings, variant, files)
    registration_id = generate_id()

    try:
        application = await repository.create(
            db,
            registration_id=registration_id,
            form_variant=variant,
            fields=fields,
            **references,
        )
    except IntegrityError as e:
        await _rollback(db)
        logger.error(f"Registration ID collision on {registration_id}")
        raise StorageError("Could not allocate a registration ID. Please resubmit.") from e
    except SQLAlchemyError as e:
        await _rollback(db)
        logger.error(f"Failed to save application {registration_id}: {e}")
        raise StorageError() from e

    logger.info(
        f"Application submitted: registration_id={application.registration_id}, "
        f"variant={variant.value}, email={mask_email(application.email)}"
    )
    return application


async def find_admit_card(
    db: AsyncSession, registration_id: str, prefix: str = DEFAULT_PREFIX
) -> Application | None:
    """
    Look up an application by registration ID.

    Returns:
        The application, or None when no record has that ID
    """
    registration_id = registration_id.strip()
    if not is_registration_id(registration_id, prefix):
        return None

    try:
        return await repository.get_by_registration_id(db, registration_id)
    except SQLAlchemyError as e:
        logger.error(f"Admit card lookup failed for {registration_id}: {e}")
        raise StorageError() from e


async def list_applications(
    db: AsyncSession,
    *,
    search: str | None = None,
    page: int = 1,
    page_size: int = 5,
) -> ApplicationPage:
    """
    Get one page of applications for the listing view.

    Pages are 1-based; a page past the last one is returned empty.
    """
    search = (search or "").strip()
    page = max(1, page)
    skip = (page - 1) * page_size

    try:
        applications, total = await repository.list_page(
            db,
            search=search or None,
            skip=skip,
            limit=page_size,
        )
    except SQLAlchemyError as e:
        logger.error(f"Failed to list applications: {e}")
        raise StorageError() from e

    pages = max(1, math.ceil(total / page_size))
    logger.debug(
        f"Listing applications: search={search!r}, page={page}/{pages}, "
        f"total={total}, returned={len(applications)}"
    )

    return ApplicationPage(
        items=applications,
        total=total,
        page=page,
        pages=pages,
        page_size=page_size,
        search=search,
    )


async def get_application(db: AsyncSession, application_id: str | UUID) -> Application:
    """
    Get an application by internal ID.

    Raises:
        ApplicationNotFoundError: If it does not exist
    """
    uuid_ = _parse_application_id(application_id)
    try:
        application = await repository.get_by_id(db, uuid_)
    except SQLAlchemyError as e:
        logger.error(f"Failed to load application {uuid_}: {e}")
        raise StorageError() from e

    if not application:
        raise ApplicationNotFoundError(application_id)
    return application


async def update_application(
    db: AsyncSession,
    storage: UploadStorage,
    settings: Settings,
    application_id: str | UUID,
    *,
    data: Mapping[str, str],
    files: Mapping[str, UploadFile | None],
) -> Application:
    """
    Update an application from an edit form.

    Every text field is overwritten. Image columns change only when a new
    file is supplied; otherwise the stored references are kept. The record's
    own form variant decides which checks apply.

    Raises:
        ApplicationNotFoundError: If it does not exist
        ValidationError: If any field or file check fails
        UploadError: If a new file cannot be stored
        StorageError: If the update cannot be saved
    """
    existing = await get_application(db, application_id)
    variant = existing.form_variant

    validate_submission(variant, data, files, files_required=False)
    fields = parse_form(variant, data)

    references = await _store_files(storage, settings, variant, files)
    fields.update(references)

    try:
        application = await repository.update(db, existing.id, fields)
    except SQLAlchemyError as e:
        await _rollback(db)
        logger.error(f"Failed to update application {existing.id}: {e}")
        raise StorageError() from e

    if not application:
        raise ApplicationNotFoundError(application_id)

    logger.info(
        f"Application updated: registration_id={application.registration_id}, "
        f"replaced_files={sorted(references)}"
    )
    return application


async def delete_application(db: AsyncSession, application_id: str | UUID) -> None:
    """
    Delete an application.

    Stored files are left in place.

    Raises:
        ApplicationNotFoundError: If it does not exist
    """
    uuid_ = _parse_application_id(application_id)
    try:
        deleted = await repository.delete_by_id(db, uuid_)
    except SQLAlchemyError as e:
        await _rollback(db)
        logger.error(f"Failed to delete application {uuid_}: {e}")
        raise StorageError() from e

    if not deleted:
        raise ApplicationNotFoundError(application_id)

    logger.info(f"Application deleted: id={uuid_}")
