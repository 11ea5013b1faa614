"""
Applications Models

Database model for submitted registration applications.

Both form variants are stored in one table. ``form_variant`` records which
form produced the row; fields that belong only to the other variant stay NULL.
"""

import enum
import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, Enum, Float, Index, Integer, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from admit_portal.core.database import Base


class FormVariant(str, enum.Enum):
    """Which application form a record was submitted through."""

    FULL = "full"  # personal + academic details, photo and signature
    BASIC = "basic"  # name, age, email and a single image


class Application(Base):
    """
    Registration application.

    ``registration_id`` is the public key used for admit-card lookup and
    never changes after creation. ``id`` is the internal key used by the
    edit and delete pages.
    """

    __tablename__ = "applications"

    # Primary key
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    registration_id: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    form_variant: Mapped[FormVariant] = mapped_column(
        Enum(FormVariant, name="form_variant"), nullable=False, default=FormVariant.FULL
    )

    # Applicant (both variants)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)

    # Full variant
    father_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    dob: Mapped[date | None] = mapped_column(Date, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(20), nullable=True)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    mobile: Mapped[str | None] = mapped_column(String(10), nullable=True)
    graduation: Mapped[str | None] = mapped_column(String(200), nullable=True)
    percentage: Mapped[float | None] = mapped_column(Float, nullable=True)
    passing_year: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Basic variant
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Stored file references (photo doubles as the basic variant's image)
    photo: Mapped[str | None] = mapped_column(String(500), nullable=True)
    signature: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Audit timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_applications_full_name", "full_name"),
        Index("ix_applications_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Application(id={self.id}, registration_id={self.registration_id})>"
