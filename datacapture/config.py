"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from datacapture.utils.env import default_env_path, load_env_file

load_env_file(default_env_path(), override=False)

_TEN_MEGABYTES = 10 * 1024 * 1024


@dataclass(frozen=True)
class Settings:
  """Typed settings for the data capture service."""

  environment: str
  allowed_origins: tuple[str, ...]
  debug: bool
  log_dir: str | None
  log_max_bytes: int
  log_backup_count: int
  log_http_4xx: bool
  model_name: str
  gemini_api_key: str | None
  max_upload_bytes: int
  firebase_project_id: str | None
  firebase_service_account_json_path: str | None
  firebase_storage_bucket: str | None
  gcs_storage_host: str | None
  gcp_project_id: str | None


def _parse_origins(raw: str | None) -> tuple[str, ...]:
  if not raw:
    raise ValueError("CAPTURE_ALLOWED_ORIGINS must be set to one or more origins.")

  origins = [origin.strip() for origin in raw.split(",") if origin.strip()]

  if not origins:
    raise ValueError("CAPTURE_ALLOWED_ORIGINS must include at least one origin.")

  if "*" in origins:
    raise ValueError("CAPTURE_ALLOWED_ORIGINS must not include wildcard origins.")

  return tuple(origins)


def _parse_bool(raw: str | None) -> bool:
  """Parse a boolean-ish string from environment variables."""

  if raw is None:
    return False

  normalized = raw.strip().lower()
  return normalized in {"1", "true", "yes", "on"}


def _optional_str(raw: str | None) -> str | None:
  if raw is None:
    return None
  value = raw.strip()
  return value or None


def _int_setting(name: str, default: str, *, minimum: int) -> int:
  message = f"{name} must be a positive integer." if minimum > 0 else f"{name} must be zero or a positive integer."
  raw = os.getenv(name, default)
  try:
    value = int(raw)
  except ValueError as exc:
    raise ValueError(message) from exc
  if value < minimum:
    raise ValueError(message)
  return value


def _positive_int(name: str, default: str) -> int:
  return _int_setting(name, default, minimum=1)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  """Load settings once per process."""

  environment = os.getenv("CAPTURE_ENV", "development").lower()
  debug = _parse_bool(os.getenv("CAPTURE_DEBUG"))

  log_max_bytes = _positive_int("CAPTURE_LOG_MAX_BYTES", "5242880")  # 5MB default
  log_backup_count = _int_setting("CAPTURE_LOG_BACKUP_COUNT", "10", minimum=0)

  # Allow opt-in logging of 4xx HTTPExceptions for diagnostics.
  log_http_4xx = _parse_bool(os.getenv("CAPTURE_LOG_HTTP_4XX"))

  # Limit applies to decoded bytes, not to the base64 text.
  max_upload_bytes = _positive_int("CAPTURE_MAX_UPLOAD_BYTES", str(_TEN_MEGABYTES))

  return Settings(
    environment=environment,
    allowed_origins=_parse_origins(os.getenv("CAPTURE_ALLOWED_ORIGINS")),
    debug=debug,
    log_dir=_optional_str(os.getenv("CAPTURE_LOG_DIR")),
    log_max_bytes=log_max_bytes,
    log_backup_count=log_backup_count,
    log_http_4xx=log_http_4xx,
    model_name=(os.getenv("CAPTURE_MODEL") or "gemini-2.0-flash").strip(),
    gemini_api_key=_optional_str(os.getenv("GEMINI_API_KEY")),
    max_upload_bytes=max_upload_bytes,
    firebase_project_id=_optional_str(os.getenv("FIREBASE_PROJECT_ID")),
    firebase_service_account_json_path=_optional_str(os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON_PATH")),
    firebase_storage_bucket=_optional_str(os.getenv("FIREBASE_STORAGE_BUCKET")),
    gcs_storage_host=_optional_str(os.getenv("GCS_STORAGE_HOST")),
    gcp_project_id=_optional_str(os.getenv("GCP_PROJECT_ID")),
  )
