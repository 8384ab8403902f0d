"""Shared FastAPI dependencies for capture and storage services."""

from __future__ import annotations

from collections.abc import Callable
from functools import partial

from fastapi import Depends

from datacapture.ai.router import get_capture_model
from datacapture.config import Settings, get_settings
from datacapture.services.dispatcher import CaptureDispatcher
from datacapture.services.storage_client import StorageClient, build_storage_client


def get_dispatcher(settings: Settings = Depends(get_settings)) -> CaptureDispatcher:  # noqa: B008
  """Build a dispatcher; the model client is only created when a request is dispatched."""
  return CaptureDispatcher(get_capture_model, max_media_bytes=settings.max_upload_bytes)


def get_storage_factory(settings: Settings = Depends(get_settings)) -> Callable[[], StorageClient]:  # noqa: B008
  """Return a factory so storage credentials are only resolved on upload."""
  return partial(build_storage_client, settings)
