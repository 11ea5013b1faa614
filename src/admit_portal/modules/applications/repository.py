"""
Applications Repository

Database operations for registration applications.
All operations are async and follow the repository pattern: data access
only, no validation or business rules.

"Not found" is always reported as None/False, never as an exception, so the
service layer can tell it apart from database failures.
"""

from uuid import UUID

from sqlalchemy import asc, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Application, FormVariant


async def create(
    db: AsyncSession,
    *,
    registration_id: str,
    form_variant: FormVariant,
    fields: dict,
    photo: str | None = None,
    signature: str | None = None,
) -> Application:
    """Create a new application."""

    new_application = Application(
        registration_id=registration_id,
        form_variant=form_variant,
        photo=photo,
        signature=signature,
        **fields,
    )

    db.add(new_application)
    await db.commit()
    await db.refresh(new_application)

    return new_application


async def get_by_id(db: AsyncSession, id: UUID) -> Application | None:
    """Get application by internal ID."""
    return await db.get(Application, id)


async def get_by_registration_id(db: AsyncSession, registration_id: str) -> Application | None:
    """Get application by its public registration ID (exact match)."""
    result = await db.execute(
        select(Application).where(Application.registration_id == registration_id)
    )
    return result.scalar_one_or_none()


async def list_page(
    db: AsyncSession,
    *,
    search: str | None = None,
    skip: int = 0,
    limit: int = 5,
) -> tuple[list[Application], int]:
    """
    Get one page of applications, optionally filtered by name.

    Args:
        db: Database session
        search: Case-insensitive substring matched against full_name (optional)
        skip: Number of records to skip
        limit: Maximum records to return

    Returns:
        Tuple of (applications on this page, total count matching the filter)
    """
    query = select(Application)

    if search:
        # Escape LIKE wildcards so the term is matched literally
        escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        query = query.where(Application.full_name.ilike(f"%{escaped}%", escape="\\"))

    count_query = select(func.count()).select_from(query.subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    # Past the last row; also keeps huge offsets away from the driver
    if skip >= total:
        return [], total

    query = (
        query.order_by(asc(Application.created_at), asc(Application.registration_id))
        .offset(skip)
        .limit(limit)
    )

    result = await db.execute(query)
    applications = list(result.scalars().all())

    return applications, total


async def update(db: AsyncSession, id: UUID, fields: dict) -> Application | None:
    """
    Overwrite the given fields on an application.

    Returns:
        The updated application, or None if not found
    """
    application = await get_by_id(db, id)
    if not application:
        return None

    for key, value in fields.items():
        if key in {"id", "registration_id", "form_variant"}:
            continue
        if hasattr(application, key):
            setattr(application, key, value)

    await db.commit()
    await db.refresh(application)

    return application


async def delete_by_id(db: AsyncSession, id: UUID) -> bool:
    """
    Delete an application.

    Returns:
        True if a row was deleted, False if it did not exist
    """
    result = await db.execute(delete(Application).where(Application.id == id))
    await db.commit()
    return (result.rowcount or 0) > 0
