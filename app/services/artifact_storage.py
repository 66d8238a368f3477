"""Object storage for generated artifacts (S3 and S3-compatible endpoints)."""

from __future__ import annotations

import logging
import time
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.domain.errors import StorageError
from app.domain.interfaces import Payload
from app.utils import is_unset_credential, slugify


def build_artifact_key(
    folder: str,
    brand_name: str,
    content_type: str,
    extension: str,
    timestamp_ms: Optional[int] = None,
    *,
    subfolder: Optional[str] = None,
) -> str:
    """Return ``folder[/subfolder]/<brand-slug>/<type-slug>/<timestamp>.<ext>``."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    parts = [folder.strip("/")]
    if subfolder:
        parts.append(subfolder.strip("/"))
    parts.extend([slugify(brand_name, "brand"), slugify(content_type, "content")])
    return "/".join(parts) + f"/{timestamp_ms}.{extension.lstrip('.')}"


class S3ArtifactStorage:
    """Upload artifacts with ``put_object`` and hand back their public URL."""

    def __init__(
        self,
        *,
        bucket: str,
        region: str = "us-east-1",
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        public_base_url: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._bucket = bucket
        self._region = region or "us-east-1"
        self._access_key = access_key
        self._secret_key = secret_key
        self._endpoint_url = endpoint_url or None
        self._public_base_url = (public_base_url or "").rstrip("/")
        self._logger = logger or logging.getLogger(__name__)
        self._s3_client = None

    @property
    def is_configured(self) -> bool:
        return not any(
            is_unset_credential(value)
            for value in (self._bucket, self._region, self._access_key, self._secret_key)
        )

    def _get_s3_client(self):
        """Lazy-load the boto3 S3 client."""
        if not self.is_configured:
            raise StorageError("S3 storage is not configured")
        if self._s3_client is None:
            self._s3_client = boto3.client(
                "s3",
                aws_access_key_id=self._access_key,
                aws_secret_access_key=self._secret_key,
                region_name=self._region,
                endpoint_url=self._endpoint_url,
            )
        return self._s3_client

    def public_url(self, key: str) -> str:
        if self._public_base_url:
            return f"{self._public_base_url}/{key}"
        return f"https://{self._bucket}.s3.{self._region}.amazonaws.com/{key}"

    def put(self, key: str, payload: Payload, content_type: str) -> str:
        """Upload ``payload`` under ``key``; the same key overwrites the same object."""
        s3_client = self._get_s3_client()
        body = payload.encode("utf-8") if isinstance(payload, str) else payload
        try:
            s3_client.put_object(Bucket=self._bucket, Key=key, Body=body, ContentType=content_type)
        except (BotoCoreError, ClientError) as e:
            self._logger.error("Failed to upload s3://%s/%s: %s", self._bucket, key, e)
            raise StorageError(f"Failed to upload {key} to S3") from e
        self._logger.info("Uploaded s3://%s/%s (%d bytes)", self._bucket, key, len(body))
        return self.public_url(key)

    def delete(self, key: str) -> None:
        s3_client = self._get_s3_client()
        try:
            s3_client.delete_object(Bucket=self._bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            self._logger.error("Failed to delete s3://%s/%s: %s", self._bucket, key, e)
            raise StorageError(f"Failed to delete {key} from S3") from e
        self._logger.info("Deleted s3://%s/%s", self._bucket, key)

    def signed_download_url(self, key: str, expires_in: int = 3600) -> str:
        s3_client = self._get_s3_client()
        try:
            return s3_client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self._bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Failed to sign download URL for {key}") from e


__all__ = ["S3ArtifactStorage", "build_artifact_key"]
