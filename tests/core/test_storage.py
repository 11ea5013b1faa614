"""
Unit tests for upload checks and storage backends.
"""

import io
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError
from starlette.datastructures import Headers, UploadFile

from admit_portal.core.errors import UploadError, ValidationError
from admit_portal.core.storage import (
    LocalUploadStorage,
    PendingUpload,
    S3UploadStorage,
    build_storage,
    has_file,
    prepare_upload,
)

ALLOWED = ["image/jpeg", "image/png"]


def _upload(data: bytes, filename: str = "photo.png", content_type: str = "image/png"):
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


def _pending(field: str = "photo", filename: str = "My Photo.png") -> PendingUpload:
    return PendingUpload(field=field, filename=filename, content_type="image/png", data=b"abc")


class TestHasFile:
    """Tests for has_file."""

    def test_none(self):
        assert not has_file(None)

    def test_empty_file_input(self):
        assert not has_file(_upload(b"", filename=""))

    def test_chosen_file(self):
        assert has_file(_upload(b"abc"))


class TestPrepareUpload:
    """Tests for prepare_upload."""

    @pytest.mark.asyncio
    async def test_valid_image(self, png_bytes):
        pending = await prepare_upload(
            "photo", _upload(png_bytes), allowed_types=ALLOWED, max_bytes=1024
        )

        assert pending.field == "photo"
        assert pending.filename == "photo.png"
        assert pending.data == png_bytes

    @pytest.mark.asyncio
    async def test_rejects_non_image(self):
        with pytest.raises(ValidationError) as exc_info:
            await prepare_upload(
                "photo",
                _upload(b"%PDF", filename="doc.pdf", content_type="application/pdf"),
                allowed_types=ALLOWED,
                max_bytes=1024,
            )

        assert exc_info.value.error_code == "INVALID_FILE_TYPE"

    @pytest.mark.asyncio
    async def test_rejects_empty_file(self):
        with pytest.raises(ValidationError) as exc_info:
            await prepare_upload("photo", _upload(b""), allowed_types=ALLOWED, max_bytes=1024)

        assert exc_info.value.error_code == "EMPTY_FILE"

    @pytest.mark.asyncio
    async def test_rejects_oversize_file(self):
        with pytest.raises(ValidationError) as exc_info:
            await prepare_upload(
                "photo", _upload(b"x" * 2048), allowed_types=ALLOWED, max_bytes=1024
            )

        assert exc_info.value.error_code == "FILE_TOO_LARGE"


class TestLocalUploadStorage:
    """Tests for the local filesystem backend."""

    @pytest.mark.asyncio
    async def test_put_writes_file_and_returns_url(self, tmp_path):
        storage = LocalUploadStorage(tmp_path, "/uploads")

        reference = await storage.put(_pending())

        assert reference.startswith("/uploads/photo/")
        name = reference.rsplit("/", 1)[1]
        timestamp, _, original = name.partition("-")
        assert timestamp.isdigit()
        assert original == "My_Photo.png"
        assert (tmp_path / "photo" / name).read_bytes() == b"abc"

    @pytest.mark.asyncio
    async def test_put_all_keys_by_field(self, tmp_path):
        storage = LocalUploadStorage(tmp_path)

        references = await storage.put_all([_pending("photo"), _pending("signature", "s.png")])

        assert set(references) == {"photo", "signature"}
        assert references["signature"].startswith("/uploads/signature/")

    @pytest.mark.asyncio
    async def test_unsafe_filename_is_sanitised(self, tmp_path):
        storage = LocalUploadStorage(tmp_path)

        reference = await storage.put(_pending(filename="../../etc/passwd"))

        assert ".." not in reference
        assert len(list((tmp_path / "photo").iterdir())) == 1

    @pytest.mark.asyncio
    async def test_write_failure_raises_upload_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        storage = LocalUploadStorage(blocker)

        with pytest.raises(UploadError):
            await storage.put(_pending())


class TestS3UploadStorage:
    """Tests for the S3 backend against a mocked boto3 client."""

    @pytest.mark.asyncio
    async def test_put_object_key_and_url(self):
        client = MagicMock()
        storage = S3UploadStorage("bucket", folder="person-manager-app", client=client)

        reference = await storage.put(_pending(filename="Face Shot.PNG"))

        client.put_object.assert_called_once()
        kwargs = client.put_object.call_args.kwargs
        assert kwargs["Bucket"] == "bucket"
        assert kwargs["Key"].startswith("person-manager-app/")
        assert kwargs["Key"].endswith("-Face_Shot.png")
        assert kwargs["ContentType"] == "image/png"
        assert reference == f"https://bucket.s3.us-east-1.amazonaws.com/{kwargs['Key']}"

    @pytest.mark.asyncio
    async def test_public_base_url(self):
        client = MagicMock()
        storage = S3UploadStorage(
            "bucket", public_base_url="https://cdn.example.com/", client=client
        )

        reference = await storage.put(_pending())

        assert reference.startswith("https://cdn.example.com/person-manager-app/")

    @pytest.mark.asyncio
    async def test_client_error_raises_upload_error(self):
        client = MagicMock()
        client.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
        )
        storage = S3UploadStorage("bucket", client=client)

        with pytest.raises(UploadError):
            await storage.put(_pending())


class TestBuildStorage:
    """Tests for backend selection."""

    def test_local_backend(self, make_settings):
        storage = build_storage(make_settings())
        assert isinstance(storage, LocalUploadStorage)

    def test_s3_requires_bucket(self, make_settings):
        with pytest.raises(ValueError):
            build_storage(make_settings(storage_backend="s3", s3_bucket=None))

    def test_s3_backend(self, make_settings):
        storage = build_storage(
            make_settings(
                storage_backend="s3",
                s3_bucket="bucket",
                aws_access_key_id="key",
                aws_secret_access_key="secret",
            )
        )
        assert isinstance(storage, S3UploadStorage)
