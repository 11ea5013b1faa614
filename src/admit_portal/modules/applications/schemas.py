"""
Applications Schemas

Pydantic schemas that turn validated form strings into typed values, plus
the page container returned by the listing service.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from admit_portal.core.errors import ValidationError
from admit_portal.modules.applications.models import Application, FormVariant

FULL_FORM_FIELDS = (
    "full_name",
    "father_name",
    "dob",
    "gender",
    "category",
    "mobile",
    "email",
    "graduation",
    "percentage",
    "passing_year",
)
FULL_FORM_FILES = ("photo", "signature")

BASIC_FORM_FIELDS = ("name", "email")
BASIC_FORM_FILES = ("image",)


class FullApplicationForm(BaseModel):
    """Application form with personal and academic details."""

    model_config = ConfigDict(str_strip_whitespace=True)

    full_name: str = Field(..., min_length=1, max_length=200)
    father_name: str = Field(..., min_length=1, max_length=200)
    dob: date
    gender: str = Field(..., min_length=1, max_length=20)
    category: str = Field(..., min_length=1, max_length=50)
    mobile: str = Field(..., min_length=10, max_length=10)
    email: str = Field(..., max_length=255)
    graduation: str = Field(..., min_length=1, max_length=200)
    percentage: float = Field(..., ge=0, le=100)
    passing_year: int = Field(..., ge=1900, le=2100)


class BasicApplicationForm(BaseModel):
    """Short application form: name, age, email and one image."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    full_name: str = Field(..., alias="name", min_length=1, max_length=200)
    age: int | None = Field(None, ge=0, le=150)
    email: str = Field(..., max_length=255)

    @field_validator("age", mode="before")
    @classmethod
    def _blank_age_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


FORM_SCHEMAS: dict[FormVariant, type[BaseModel]] = {
    FormVariant.FULL: FullApplicationForm,
    FormVariant.BASIC: BasicApplicationForm,
}


def parse_form(variant: FormVariant, data: Mapping[str, str]) -> dict:
    """
    Convert raw form strings into typed column values for a variant.

    Raises:
        ValidationError: If a value cannot be converted or is out of range
    """
    schema = FORM_SCHEMAS[variant]
    try:
        parsed = schema.model_validate(dict(data))
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ())) or "form"
        raise ValidationError(
            f"Invalid value for {location}: {first.get('msg', 'invalid value')}",
            error_code="INVALID_FIELD",
        ) from e
    return parsed.model_dump()


@dataclass
class ApplicationPage:
    """One page of the application listing."""

    items: list[Application]
    total: int
    page: int
    pages: int
    page_size: int
    search: str = ""

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.pages
