import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from datacapture.config import get_settings
from datacapture.core.firebase import initialize_firebase
from datacapture.core.logging import initialize_logging
from datacapture.services.storage_client import build_storage_client


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
  """Set up logging, Firebase and the emulator bucket before serving requests."""
  settings = get_settings()
  logger = logging.getLogger("datacapture.core.lifespan")

  try:
    initialize_logging(settings)
    logger.info("Startup environment=%s model=%s", settings.environment, settings.model_name)
  except Exception:  # noqa: BLE001
    logger.warning("Logging setup failed; continuing with default handlers.", exc_info=True)

  initialize_firebase(settings)

  # Only the local emulator needs the bucket created up front.
  if settings.gcs_storage_host:
    try:
      storage_client = build_storage_client(settings)
      await storage_client.ensure_bucket()
      logger.info("Capture bucket ensured: %s", storage_client.bucket_name)
    except Exception as exc:  # noqa: BLE001
      logger.warning("Failed to ensure capture bucket at startup: %s", exc)

  yield
