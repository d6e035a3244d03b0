"""S3-compatible object storage for chat attachments.

Only the upload path is needed by the chat core: the file is written first,
and the resulting URL becomes the ``content`` of a ``file`` message.
Settings are driven exclusively by ``tripmate.core.config.Settings``.
"""
from __future__ import annotations
import logging
import os
import uuid
from dataclasses import dataclass
from typing import Optional, Protocol
import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError
from starlette.concurrency import run_in_threadpool

from tripmate.core.config import Settings, get_settings
from tripmate.core.errors import StorageError

logger = logging.getLogger(__name__)


class FileStorage(Protocol):
    async def upload(self, data: bytes, filename: str, content_type: str, folder: str) -> str: ...


def object_key(filename: str, folder: str) -> str:
    """``<folder>/<uuid>.<ext>``; the original name never reaches the key."""
    _, ext = os.path.splitext(filename or "")
    return f"{folder}/{uuid.uuid4()}{ext.lower()}"


@dataclass
class S3Storage:
    endpoint: Optional[str]
    bucket: str
    region: Optional[str]
    access_key: Optional[str]
    secret_key: Optional[str]
    force_path_style: bool = False

    def _client(self):  # lazy boto3 client
        session = boto3.session.Session()
        cfg = {}
        if self.region:
            cfg["region_name"] = self.region
        extra = {}
        if self.endpoint:
            extra["endpoint_url"] = self.endpoint
        if self.force_path_style:
            extra["config"] = BotoConfig(s3={"addressing_style": "path"})
        return session.client(
            "s3",
            aws_access_key_id=self.access_key,
            aws_secret_access_key=self.secret_key,
            **cfg,
            **extra,
        )

    def public_url(self, key: str) -> str:
        if self.endpoint:
            return f"{self.endpoint.rstrip('/')}/{self.bucket}/{key}"
        if self.region:
            return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"
        return f"https://{self.bucket}.s3.amazonaws.com/{key}"

    def put_object(self, key: str, data: bytes, content_type: str) -> None:
        self._client().put_object(
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=content_type,
            ContentDisposition="inline",
        )

    async def upload(self, data: bytes, filename: str, content_type: str, folder: str) -> str:
        key = object_key(filename, folder)
        try:
            # boto3 is blocking; keep the event loop free for other connections
            await run_in_threadpool(self.put_object, key, data, content_type)
        except (BotoCoreError, ClientError) as e:
            logger.error("S3 upload failed", extra={"key": key, "error": e.__class__.__name__})
            raise StorageError("Failed to upload file") from e
        return self.public_url(key)


def get_file_storage(settings: Settings | None = None) -> Optional[S3Storage]:
    settings = settings or get_settings()
    if not settings.s3_bucket_name:
        return None
    return S3Storage(
        endpoint=settings.s3_endpoint,
        bucket=settings.s3_bucket_name,
        region=settings.s3_region,
        access_key=settings.s3_access_key_id,
        secret_key=settings.s3_secret_access_key.get_secret_value() if settings.s3_secret_access_key else None,
        force_path_style=settings.s3_force_path_style,
    )


__all__ = [
    "FileStorage",
    "S3Storage",
    "object_key",
    "get_file_storage",
]
