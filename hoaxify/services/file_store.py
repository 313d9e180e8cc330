from __future__ import annotations

import io
import logging
import os
from functools import lru_cache

import boto3
from botocore.client import Config
from PIL import Image, UnidentifiedImageError

from hoaxify.config import Settings, get_settings
from hoaxify.services.tokens import random_string

logger = logging.getLogger(__name__)

IMAGE_MIME_TYPES = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "GIF": "image/gif",
    "WEBP": "image/webp",
    "BMP": "image/bmp",
}


def sniff_image_type(data: bytes) -> str | None:
    """MIME type from the magic bytes, or None if the content is not a known image."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            return IMAGE_MIME_TYPES.get(img.format or "")
    except (UnidentifiedImageError, OSError):
        return None


class LocalFileStore:
    def __init__(self, folder: str):
        self.folder = folder
        os.makedirs(self.folder, exist_ok=True)

    def path(self, filename: str) -> str:
        return os.path.join(self.folder, filename)

    def save(self, data: bytes) -> str:
        filename = random_string(32)
        with open(self.path(filename), "wb") as f:
            f.write(data)
        return filename

    def delete(self, filename: str) -> None:
        try:
            os.remove(self.path(filename))
        except FileNotFoundError:
            # already gone (double delete or lost write race)
            logger.debug("file %s already removed from %s", filename, self.folder)

    def exists(self, filename: str) -> bool:
        return os.path.exists(self.path(filename))


class SpacesFileStore:
    """DigitalOcean Spaces / S3 compatible object storage."""

    def __init__(self, settings: Settings, prefix: str, client=None):
        if not settings.spaces_bucket:
            raise RuntimeError("DO_SPACES_BUCKET is not set")
        self.bucket = settings.spaces_bucket
        self.prefix = prefix.strip("/")
        self.client = client or _spaces_client(settings)

    def _key(self, filename: str) -> str:
        return f"{self.prefix}/{filename}"

    def save(self, data: bytes) -> str:
        filename = random_string(32)
        self.client.put_object(
            Bucket=self.bucket,
            Key=self._key(filename),
            Body=data,
            ACL="public-read",
            ContentType=sniff_image_type(data) or "application/octet-stream",
        )
        return filename

    def delete(self, filename: str) -> None:
        self.client.delete_object(Bucket=self.bucket, Key=self._key(filename))

    def exists(self, filename: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket, Key=self._key(filename))
        except self.client.exceptions.ClientError:
            return False
        return True


def _spaces_client(settings: Settings):
    if not settings.spaces_key or not settings.spaces_secret or not settings.spaces_endpoint:
        raise RuntimeError("Missing DO_SPACES_KEY / DO_SPACES_SECRET / DO_SPACES_ENDPOINT")

    session = boto3.session.Session()
    return session.client(
        "s3",
        region_name=settings.spaces_region,
        endpoint_url=settings.spaces_endpoint,
        aws_access_key_id=settings.spaces_key,
        aws_secret_access_key=settings.spaces_secret,
        config=Config(signature_version="s3v4"),
    )


def build_file_store(settings: Settings, subdir: str):
    if settings.file_store_backend == "spaces":
        return SpacesFileStore(settings, prefix=subdir)
    return LocalFileStore(os.path.join(settings.upload_dir, subdir))


@lru_cache
def get_profile_store():
    settings = get_settings()
    return build_file_store(settings, settings.profile_dir)


@lru_cache
def get_attachment_store():
    settings = get_settings()
    return build_file_store(settings, settings.attachment_dir)
