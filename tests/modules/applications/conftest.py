"""
Fixtures for applications tests.
"""

import io
from datetime import UTC, date, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from starlette.datastructures import Headers, UploadFile

from admit_portal.core.storage import UploadStorage
from admit_portal.modules.applications.models import Application, FormVariant


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.rollback = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def mock_storage():
    """Upload storage that records what it was asked to store."""
    storage = MagicMock(spec=UploadStorage)

    async def put_all(uploads):
        return {
            upload.field: f"/uploads/{upload.field}/stored-{upload.filename}" for upload in uploads
        }

    storage.put_all = AsyncMock(side_effect=put_all)
    return storage


@pytest.fixture
def settings(make_settings):
    return make_settings()


@pytest.fixture
def make_upload(png_bytes):
    """Build a multipart file part as the form parser would."""

    def _make(
        filename: str = "photo.png",
        data: bytes | None = None,
        content_type: str = "image/png",
    ):
        return UploadFile(
            file=io.BytesIO(png_bytes if data is None else data),
            filename=filename,
            headers=Headers({"content-type": content_type}),
        )

    return _make


@pytest.fixture
def full_form_data():
    """Valid text fields of the full application form."""
    return {
        "full_name": "Asha Verma",
        "father_name": "Raj Verma",
        "dob": "2000-05-17",
        "gender": "Female",
        "category": "General",
        "mobile": "9876543210",
        "email": "asha@example.com",
        "graduation": "B.Sc",
        "percentage": "78.5",
        "passing_year": "2021",
    }


@pytest.fixture
def basic_form_data():
    """Valid text fields of the basic application form."""
    return {"name": "Ravi Kumar", "age": "24", "email": "ravi@example.com"}


@pytest.fixture
def full_form_files(make_upload):
    return {"photo": make_upload("photo.png"), "signature": make_upload("sign.png")}


@pytest.fixture
def sample_application_model():
    """Create a sample full-variant application model."""
    app = MagicMock(spec=Application)
    app.id = uuid4()
    app.registration_id = "GOV1700000000000"
    app.form_variant = FormVariant.FULL
    app.full_name = "Asha Verma"
    app.father_name = "Raj Verma"
    app.dob = date(2000, 5, 17)
    app.gender = "Female"
    app.category = "General"
    app.mobile = "9876543210"
    app.email = "asha@example.com"
    app.graduation = "B.Sc"
    app.percentage = 78.5
    app.passing_year = 2021
    app.age = None
    app.photo = "/uploads/photo/1-photo.png"
    app.signature = "/uploads/signature/1-sign.png"
    app.created_at = datetime.now(UTC)
    app.updated_at = datetime.now(UTC)
    return app


@pytest.fixture
def sample_basic_application_model():
    """Create a sample basic-variant application model."""
    app = MagicMock(spec=Application)
    app.id = uuid4()
    app.registration_id = "GOV1700000000001"
    app.form_variant = FormVariant.BASIC
    app.full_name = "Ravi Kumar"
    app.email = "ravi@example.com"
    app.age = 24
    app.photo = "/uploads/image/1-image.png"
    app.signature = None
    return app
