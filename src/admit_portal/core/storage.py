"""
Upload Storage

Persists uploaded files and returns a reference string (relative URL for
local disk, absolute URL for object storage) that views use to display them.

Backends:
- LocalUploadStorage: ``<upload_dir>/<field>/<timestamp>-<filename>``
- S3UploadStorage: ``<folder>/<timestamp>-<stem><ext>`` in an S3-compatible bucket

Uploads are read and checked (type, size, non-empty) by ``prepare_upload``
before anything is written.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

import aiofiles
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from starlette.datastructures import UploadFile
from werkzeug.utils import secure_filename

from admit_portal.core.config import Settings
from admit_portal.core.errors import UploadError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingUpload:
    """An uploaded file that passed checks and is ready to be stored."""

    field: str
    filename: str
    content_type: str
    data: bytes


def has_file(upload: UploadFile | None) -> bool:
    """True when a multipart part actually carries a chosen file."""
    return upload is not None and bool(upload.filename)


async def prepare_upload(
    field: str,
    upload: UploadFile,
    *,
    allowed_types: list[str],
    max_bytes: int,
) -> PendingUpload:
    """
    Read an uploaded file and check it can be stored.

    Raises:
        ValidationError: If the file is empty, too large, or not an allowed image type
    """
    content_type = (upload.content_type or "").lower()
    if content_type not in allowed_types:
        raise ValidationError(
            f"{field} must be an image ({', '.join(allowed_types)})",
            error_code="INVALID_FILE_TYPE",
        )

    data = await upload.read()
    if not data:
        raise ValidationError(f"{field} file is empty", error_code="EMPTY_FILE")
    if len(data) > max_bytes:
        raise ValidationError(
            f"{field} exceeds the maximum upload size of {max_bytes // (1024 * 1024)} MB",
            error_code="FILE_TOO_LARGE",
        )

    return PendingUpload(
        field=field,
        filename=upload.filename or field,
        content_type=content_type,
        data=data,
    )


def _timestamped_name(filename: str) -> str:
    safe = secure_filename(filename) or "upload"
    return f"{int(time.time() * 1000)}-{safe}"


class UploadStorage(ABC):
    """Interface for upload backends: ``put(file) -> reference``."""

    @abstractmethod
    async def put(self, upload: PendingUpload) -> str:
        """Store the file and return its reference."""

    async def put_all(self, uploads: list[PendingUpload]) -> dict[str, str]:
        """Store several files, returning references keyed by form field."""
        return {upload.field: await self.put(upload) for upload in uploads}


class LocalUploadStorage(UploadStorage):
    """Stores uploads on the local filesystem, one subdirectory per form field."""

    def __init__(self, root: str | Path, url_prefix: str = "/uploads"):
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    async def put(self, upload: PendingUpload) -> str:
        name = _timestamped_name(upload.filename)
        directory = self.root / upload.field
        destination = directory / name

        try:
            directory.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(destination, "wb") as f:
                await f.write(upload.data)
        except OSError as e:
            logger.error(f"Failed to write upload {destination}: {e}")
            raise UploadError() from e

        logger.info(f"Stored upload field={upload.field} path={destination}")
        return f"{self.url_prefix}/{upload.field}/{name}"


class S3UploadStorage(UploadStorage):
    """
    Stores uploads in an S3-compatible bucket under a fixed folder.

    boto3 is synchronous, so calls run in a worker thread.
    """

    def __init__(
        self,
        bucket: str,
        *,
        folder: str = "person-manager-app",
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        public_base_url: str | None = None,
        aws_access_key_id: str | None = None,
        aws_secret_access_key: str | None = None,
        client=None,
    ):
        self.bucket = bucket
        self.folder = folder.strip("/")
        self.region = region
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self._client = client or boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=aws_access_key_id,
            aws_secret_access_key=aws_secret_access_key,
        )

    def _object_key(self, filename: str) -> str:
        name = PurePosixPath(secure_filename(filename) or "upload")
        stem = name.stem or "upload"
        return f"{self.folder}/{int(time.time() * 1000)}-{stem}{name.suffix.lower()}"

    def _public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    async def put(self, upload: PendingUpload) -> str:
        key = self._object_key(upload.filename)
        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=upload.data,
                ContentType=upload.content_type,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to upload {key} to bucket {self.bucket}: {e}")
            raise UploadError() from e

        logger.info(f"Stored upload field={upload.field} key={key}")
        return self._public_url(key)


def build_storage(settings: Settings) -> UploadStorage:
    """Create the upload backend selected by STORAGE_BACKEND."""
    if settings.storage_backend == "s3":
        if not settings.s3_bucket:
            raise ValueError("S3_BUCKET must be set when STORAGE_BACKEND=s3")
        return S3UploadStorage(
            settings.s3_bucket,
            folder=settings.s3_folder,
            region=settings.s3_region,
            endpoint_url=settings.s3_endpoint_url,
            public_base_url=settings.s3_public_base_url,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
        )
    return LocalUploadStorage(settings.upload_dir, settings.upload_url_prefix)


__all__ = [
    "PendingUpload",
    "UploadStorage",
    "LocalUploadStorage",
    "S3UploadStorage",
    "build_storage",
    "has_file",
    "prepare_upload",
]
