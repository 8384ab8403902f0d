import logging

import firebase_admin
from firebase_admin import credentials, storage
from google.cloud.storage import Bucket

from datacapture.config import Settings, get_settings

logger = logging.getLogger(__name__)


def _app_options(settings: Settings) -> dict[str, str]:
  options = {"projectId": settings.firebase_project_id or ""}
  if settings.firebase_storage_bucket:
    options["storageBucket"] = settings.firebase_storage_bucket
  return options


def initialize_firebase(settings: Settings | None = None) -> bool:
  """Initialize the Firebase Admin SDK; return whether an app is available."""
  if firebase_admin._apps:
    return True

  settings = settings or get_settings()
  if not settings.firebase_project_id:
    logger.warning("Firebase Project ID not set. Firebase Admin SDK not initialized.")
    return False

  try:
    if settings.firebase_service_account_json_path:
      cred = credentials.Certificate(settings.firebase_service_account_json_path)
      firebase_admin.initialize_app(cred, _app_options(settings))
    else:
      # Use default credentials (e.g. Google Application Default Credentials)
      firebase_admin.initialize_app(options=_app_options(settings))
    logger.info("Firebase Admin SDK initialized successfully.")
  except Exception as exc:  # noqa: BLE001
    logger.error("Failed to initialize Firebase Admin SDK: %s", exc)
    return False
  return True


def get_storage_bucket(settings: Settings | None = None) -> Bucket:
  """Return the Firebase Storage bucket used for captured images."""
  settings = settings or get_settings()
  if not initialize_firebase(settings):
    raise RuntimeError("Firebase is not configured; cannot access storage.")
  return storage.bucket(settings.firebase_storage_bucket)
