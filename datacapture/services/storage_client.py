"""Object storage helper for captured photos."""

from __future__ import annotations

import logging
import os
import time
import uuid
from dataclasses import dataclass
from urllib.parse import quote, urlparse, urlunparse

from google.auth.credentials import AnonymousCredentials
from google.cloud import storage
from google.cloud.storage import Bucket
from starlette.concurrency import run_in_threadpool

from datacapture.config import Settings
from datacapture.core.firebase import get_storage_bucket

logger = logging.getLogger(__name__)

CAPTURED_IMAGES_PREFIX = "captured_images"
_DOWNLOAD_URL_TEMPLATE = "{host}/v0/b/{bucket}/o/{name}?alt=media&token={token}"
_FIREBASE_STORAGE_HOST = "https://firebasestorage.googleapis.com"

# Image types accepted for captured photos -> object name extension.
CAPTURED_IMAGE_EXTENSIONS = {"image/png": "png", "image/jpeg": "jpg", "image/webp": "webp", "image/gif": "gif"}


@dataclass(frozen=True)
class StoredObject:
  object_name: str
  download_url: str


def captured_photo_name(now_ms: int | None = None, mime_type: str = "image/png") -> str:
  """Return `captured_images/photo-<epoch millis>.<ext>`; webcam captures are PNG."""
  timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
  return f"{CAPTURED_IMAGES_PREFIX}/photo-{timestamp}.{CAPTURED_IMAGE_EXTENSIONS[mime_type]}"


class StorageClient:
  """Thin wrapper over the Firebase Storage bucket, or a GCS emulator in local development."""

  def __init__(self, settings: Settings, bucket: Bucket | None = None) -> None:
    self._storage_host = settings.gcs_storage_host
    if bucket is not None:
      self._bucket = bucket
    elif self._storage_host:
      emulator_endpoint = _normalize_emulator_endpoint(self._storage_host)
      os.environ["STORAGE_EMULATOR_HOST"] = emulator_endpoint
      client = storage.Client(project=settings.gcp_project_id or "local-dev", credentials=AnonymousCredentials(), client_options={"api_endpoint": emulator_endpoint})
      self._bucket = client.bucket(settings.firebase_storage_bucket or "data-capture-local")
    else:
      self._bucket = get_storage_bucket(settings)

  @property
  def bucket_name(self) -> str:
    return self._bucket.name

  async def ensure_bucket(self) -> None:
    """Create the bucket when missing; only in emulator mode."""
    if not self._storage_host:
      return

    def _create_if_missing() -> None:
      if not self._bucket.exists():
        self._bucket.client.create_bucket(self._bucket)

    await run_in_threadpool(_create_if_missing)

  def download_url(self, object_name: str, token: str) -> str:
    """Build the tokenized download URL Firebase clients use for an object."""
    host = _normalize_emulator_endpoint(self._storage_host) if self._storage_host else _FIREBASE_STORAGE_HOST
    return _DOWNLOAD_URL_TEMPLATE.format(host=host, bucket=self.bucket_name, name=quote(object_name, safe=""), token=token)

  async def upload_image(self, image_bytes: bytes, object_name: str, content_type: str = "image/png") -> StoredObject:
    """Upload image bytes and return the object's download URL."""
    blob = self._bucket.blob(object_name)
    token = str(uuid.uuid4())
    blob.metadata = {"firebaseStorageDownloadTokens": token}
    blob.content_type = content_type
    await run_in_threadpool(blob.upload_from_string, image_bytes, content_type)
    logger.info("Uploaded capture object=%s content_type=%s bytes=%d", object_name, content_type, len(image_bytes))
    return StoredObject(object_name=object_name, download_url=self.download_url(object_name, token))


def build_storage_client(settings: Settings) -> StorageClient:
  """Create a storage client instance with environment-aware credentials."""
  return StorageClient(settings)


def _normalize_emulator_endpoint(raw_endpoint: str) -> str:
  """Normalize emulator endpoint so the SDK receives scheme+host+port only."""
  parsed = urlparse(raw_endpoint)
  if not parsed.scheme or not parsed.netloc:
    return raw_endpoint.rstrip("/")
  return urlunparse((parsed.scheme, parsed.netloc, "", "", "", "")).rstrip("/")
