"""
S3-compatible object storage for uploaded media.

Video files and thumbnails arrive as multipart uploads, are spooled to a
local temp file and handed to the bucket by path. Only the resulting public
URL is stored on the Video row.
"""
import logging
import mimetypes
import os
import shutil
import tempfile
import uuid
from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator, List, Optional

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile

from api.config import settings
from api.errors import ApiError, InvalidArgument

logger = logging.getLogger("media")

RESOURCE_TYPES = {
    "video": "video/",
    "image": "image/",
}


class MediaUploadFailed(ApiError):
    default_status = 502


class MediaStorage:
    def __init__(self, client, bucket: str, public_base_url: str = ""):
        self._client = client
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")

    def url_for(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        if settings.MEDIA_ENDPOINT_URL:
            return f"{settings.MEDIA_ENDPOINT_URL.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{settings.MEDIA_REGION}.amazonaws.com/{key}"

    def upload(self, local_path: str, resource_type: str) -> str:
        """Upload the file at ``local_path`` and return its public URL.

        Key format: {resource_type}/{uuid}{ext}
        """
        ext = os.path.splitext(local_path)[1].lower()
        key = f"{resource_type}/{uuid.uuid4()}{ext}"
        content_type = mimetypes.guess_type(local_path)[0] or "application/octet-stream"
        try:
            self._client.upload_file(
                local_path,
                self.bucket,
                key,
                ExtraArgs={"ContentType": content_type},
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error(f"Upload of {resource_type} to bucket {self.bucket} failed: {exc}")
            raise MediaUploadFailed(f"Failed to upload {resource_type}")
        logger.info(f"Uploaded {resource_type} to {self.bucket}/{key}")
        return self.url_for(key)

    def remove(self, url: str) -> None:
        """Delete the object behind a URL returned by ``upload``.

        Failures are logged, not raised: this only runs while another error
        is already propagating.
        """
        prefix = self.url_for("")
        if not url.startswith(prefix):
            logger.warning(f"Not removing {url}: not in bucket {self.bucket}")
            return
        key = url[len(prefix):]
        try:
            self._client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            logger.error(f"Could not remove orphaned object {self.bucket}/{key}: {exc}")
            return
        logger.info(f"Removed orphaned object {self.bucket}/{key}")


@lru_cache(maxsize=1)
def get_media_storage() -> MediaStorage:
    """FastAPI dependency returning the process-wide storage client."""
    client = boto3.client(
        "s3",
        endpoint_url=settings.MEDIA_ENDPOINT_URL,
        aws_access_key_id=settings.MEDIA_ACCESS_KEY,
        aws_secret_access_key=settings.MEDIA_SECRET_KEY,
        config=Config(signature_version="s3v4"),
        region_name=settings.MEDIA_REGION,
    )
    return MediaStorage(client, settings.MEDIA_BUCKET, settings.MEDIA_PUBLIC_BASE_URL)


@contextmanager
def spooled_to_disk(upload: UploadFile) -> Iterator[str]:
    """Copy an upload to a temp file, yield its path and always remove it."""
    suffix = os.path.splitext(upload.filename or "")[1]
    fd, path = tempfile.mkstemp(suffix=suffix)
    try:
        with os.fdopen(fd, "wb") as out:
            shutil.copyfileobj(upload.file, out)
        yield path
    finally:
        if os.path.exists(path):
            os.remove(path)


def check_upload(upload: Optional[UploadFile], resource_type: str, label: str) -> UploadFile:
    if upload is None or not upload.filename:
        raise InvalidArgument(f"{label} is required")
    expected_prefix = RESOURCE_TYPES[resource_type]
    content_type = upload.content_type or "application/octet-stream"
    if content_type != "application/octet-stream" and not content_type.startswith(expected_prefix):
        raise InvalidArgument(f"{label} must be a {resource_type} file")
    return upload


def store_upload(
    storage: MediaStorage,
    upload: Optional[UploadFile],
    resource_type: str,
    label: str,
) -> str:
    upload = check_upload(upload, resource_type, label)
    with spooled_to_disk(upload) as path:
        return storage.upload(path, resource_type)


@contextmanager
def discard_on_error(storage: MediaStorage) -> Iterator[List[str]]:
    """Yield a list to collect uploaded URLs; remove them if the block raises."""
    uploaded: List[str] = []
    try:
        yield uploaded
    except Exception:
        for url in uploaded:
            storage.remove(url)
        raise
