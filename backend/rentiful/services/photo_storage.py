# backend/rentiful/services/photo_storage.py
from __future__ import annotations

import logging
import time
from typing import Optional

from fastapi import HTTPException
from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import storage

from ..config import settings

log = logging.getLogger("rentiful.photos")

GCS_PUBLIC_BASE = "https://storage.googleapis.com"


def photo_key(filename: str, *, prefix: Optional[str] = None, now_ms: Optional[int] = None) -> str:
    """properties/{epoch millis}-{original filename}"""
    ts = now_ms if now_ms is not None else int(time.time() * 1000)
    name = (filename or "photo").replace("/", "_").strip() or "photo"
    return f"{prefix if prefix is not None else settings.photo_key_prefix}{ts}-{name}"


class GCSPhotoStorage:
    """
    Uploads listing photos to a Google Cloud Storage bucket and returns their public URL.

    The storage client is created on first upload, so a process that never
    receives photos never needs credentials.
    """

    def __init__(
        self,
        bucket_name: Optional[str] = None,
        project_id: Optional[str] = None,
        credentials_file: Optional[str] = None,
    ) -> None:
        self.bucket_name = bucket_name or settings.gcs_bucket_name
        self.project_id = project_id or settings.gcs_project_id
        self.credentials_file = credentials_file or settings.gcs_credentials_file
        self._bucket = None

    def _get_bucket(self):
        if self._bucket is None:
            if self.credentials_file:
                client = storage.Client.from_service_account_json(self.credentials_file, project=self.project_id)
            else:
                client = storage.Client(project=self.project_id)
            self._bucket = client.bucket(self.bucket_name)
        return self._bucket

    def upload(self, *, filename: str, content: bytes, content_type: Optional[str] = None) -> str:
        if not self.bucket_name:
            raise HTTPException(status_code=502, detail="photo storage is not configured")

        key = photo_key(filename)
        try:
            blob = self._get_bucket().blob(key)
            blob.upload_from_string(content, content_type=content_type or "application/octet-stream")
        except (GoogleAPIError, GoogleAuthError, OSError) as e:
            log.error("photo upload failed for %s: %s", key, e)
            raise HTTPException(status_code=502, detail="photo upload failed") from e

        return f"{GCS_PUBLIC_BASE}/{self.bucket_name}/{key}"


def get_photo_storage() -> GCSPhotoStorage:
    return GCSPhotoStorage()
