"""Test configuration for importing the application package."""

from __future__ import annotations

import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
  sys.path.insert(0, str(ROOT))

# Settings are read at import time of the app module.
os.environ.setdefault("CAPTURE_ALLOWED_ORIGINS", "http://localhost:3000")

from dataclasses import replace  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from datacapture.ai.providers.base import AIModel, InferenceError, MediaPart, SimpleModelResponse, StructuredModelResponse  # noqa: E402
from datacapture.config import Settings  # noqa: E402
from datacapture.main import app  # noqa: E402

# 1x1 PNG signature is enough for flows; they never decode the pixels.
PNG_DATA_URI = "data:image/png;base64,iVBORw0KGgo="


class FakeModel(AIModel):
  """Records every structured call and answers with a canned payload."""

  def __init__(self, content: Any = None, error: Exception | None = None) -> None:
    self.name = "fake-model"
    self.content = content if content is not None else {}
    self.error = error
    self.calls: list[dict[str, Any]] = []

  async def generate(self, prompt: str, media: list[MediaPart] | None = None) -> SimpleModelResponse:
    raise InferenceError("Plain generation is not used by capture flows.")

  async def generate_structured(self, prompt: str, schema: dict[str, Any], media: list[MediaPart] | None = None) -> StructuredModelResponse:
    self.calls.append({"prompt": prompt, "schema": schema, "media": list(media or [])})
    if self.error is not None:
      raise self.error
    return StructuredModelResponse(content=self.content, usage={"total_tokens": 1})


@pytest.fixture
def anyio_backend():
  return "asyncio"


@pytest.fixture
def fake_model_factory():
  def _build(content: Any = None, error: Exception | None = None) -> FakeModel:
    return FakeModel(content=content, error=error)

  return _build


@pytest.fixture
def png_data_uri() -> str:
  return PNG_DATA_URI


_BASE_SETTINGS = Settings(
  environment="test",
  allowed_origins=("http://localhost:3000",),
  debug=False,
  log_dir=None,
  log_max_bytes=1024,
  log_backup_count=1,
  log_http_4xx=False,
  model_name="gemini-2.0-flash",
  gemini_api_key=None,
  max_upload_bytes=1024,
  firebase_project_id=None,
  firebase_service_account_json_path=None,
  firebase_storage_bucket="captures",
  gcs_storage_host=None,
  gcp_project_id=None,
)


@pytest.fixture
def make_settings():
  def _build(**overrides: Any) -> Settings:
    return replace(_BASE_SETTINGS, **overrides)

  return _build


@pytest.fixture
async def async_client():
  async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
    yield client
  app.dependency_overrides.clear()
