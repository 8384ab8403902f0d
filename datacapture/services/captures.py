"""Persist webcam captures and build the resulting preview state."""

from __future__ import annotations

import logging
from collections.abc import Callable

from datacapture.schema.extraction import OutputData, OutputType
from datacapture.services.storage_client import CAPTURED_IMAGE_EXTENSIONS, StorageClient, captured_photo_name
from datacapture.utils.data_uri import IMAGE_DATA_URI_PREFIX, InvalidDataUriError, parse_data_uri

logger = logging.getLogger(__name__)

StorageFactory = Callable[[], StorageClient]


async def store_captured_photo(data_uri: str, storage_factory: StorageFactory, *, max_bytes: int | None = None, now_ms: int | None = None) -> OutputData:
  """Upload a captured photo once; fall back to the local preview on any failure.

  Raises InvalidDataUriError when the payload is not a decodable image data URI.
  """
  if not data_uri.startswith(IMAGE_DATA_URI_PREFIX):
    raise InvalidDataUriError("Invalid image data URI.")
  decoded = parse_data_uri(data_uri)
  if decoded.mime_type not in CAPTURED_IMAGE_EXTENSIONS:
    raise InvalidDataUriError(f"Unsupported image type {decoded.mime_type}.")
  if max_bytes is not None and decoded.size > max_bytes:
    raise InvalidDataUriError(f"Image exceeds {max_bytes} byte limit.")

  local_preview = OutputData(type=OutputType.IMAGE_PREVIEW, preview_url=data_uri, is_firebase_url=False)
  object_name = captured_photo_name(now_ms, decoded.mime_type)
  try:
    stored = await storage_factory().upload_image(decoded.data, object_name, decoded.mime_type)
  except Exception:  # noqa: BLE001
    logger.warning("Capture upload failed object=%s; keeping local preview.", object_name, exc_info=True)
    return local_preview

  return OutputData(type=OutputType.IMAGE_PREVIEW, preview_url=stored.download_url, is_firebase_url=True)
