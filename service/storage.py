# service/storage.py
from __future__ import annotations

import logging
import os
import uuid
from typing import Optional

import requests

from core import config

logger = logging.getLogger(__name__)


class StorageUploadError(Exception):
    """object store upload failure"""
    pass


class InvalidUpload(ValueError):
    """file rejected before upload (size / extension)"""
    pass


def allowed_extensions() -> set[str]:
    return {e.strip().lower() for e in config.IMAGE_EXTENSION.split(",") if e.strip()}


def validate_image(filename: Optional[str], size: int) -> str:
    """returns the lowercase extension without the dot"""
    ext = os.path.splitext(filename or "")[1].lower()
    if ext not in allowed_extensions():
        raise InvalidUpload(f"unsupported file type: {ext or '(none)'}")
    if size <= 0:
        raise InvalidUpload("empty file")
    if size > config.MAX_UPLOAD_BYTES:
        raise InvalidUpload(f"file too large, max {config.MAX_UPLOAD_MB}MB")
    return ext.lstrip(".")


def proof_path(user_id: str, ext: str) -> str:
    return f"{user_id}/{uuid.uuid4()}.{ext}"


def avatar_path(user_id: str, ext: str) -> str:
    return f"{user_id}/avatar.{ext}"


class StorageClient:
    """
    Storage REST API (POST {base_url}/storage/v1/object/{bucket}/{path}).
    Only the public URL is kept by this service, never the bytes.
    """

    def __init__(
        self,
        base_url: str,
        service_key: str,
        *,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.service_key = service_key
        self.timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_config(cls) -> "StorageClient":
        return cls(
            config.SUPABASE_URL,
            config.SUPABASE_SERVICE_ROLE_KEY,
            timeout=config.STORAGE_TIMEOUT_SECONDS,
        )

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{path}"

    def upload(
        self,
        bucket: str,
        path: str,
        content: bytes,
        *,
        content_type: str = "application/octet-stream",
        upsert: bool = False,
    ) -> str:
        if not self.base_url or not self.service_key:
            raise StorageUploadError("object storage is not configured")

        try:
            resp = self._session.post(
                f"{self.base_url}/storage/v1/object/{bucket}/{path}",
                headers={
                    "apikey": self.service_key,
                    "Authorization": f"Bearer {self.service_key}",
                    "Content-Type": content_type,
                    "Cache-Control": "3600",
                    "x-upsert": "true" if upsert else "false",
                },
                data=content,
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            raise StorageUploadError(str(e)) from e

        return self.public_url(bucket, path)

    def close(self) -> None:
        self._session.close()
