from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from httpx import AsyncClient

from datacapture.api.deps import get_dispatcher, get_storage_factory
from datacapture.main import app
from datacapture.services.dispatcher import CaptureDispatcher
from datacapture.services.storage_client import StoredObject


def _use_model(model) -> None:
  app.dependency_overrides[get_dispatcher] = lambda: CaptureDispatcher(lambda: model)


def test_health_check() -> None:
  client = TestClient(app)
  response = client.get("/health")
  assert response.status_code == 200
  assert response.json() == {"status": "ok", "version": "0.1.0"}
  assert response.headers["x-request-id"]
  assert "server" not in response.headers


def test_blank_query_returns_no_content(fake_model_factory) -> None:
  model = fake_model_factory({"response": "unused"})
  _use_model(model)
  client = TestClient(app)

  try:
    response = client.post("/v1/capture/query", json={"query": "   "})
    assert response.status_code == 204
    assert model.calls == []
  finally:
    app.dependency_overrides.clear()


@pytest.mark.anyio
async def test_query_returns_text_envelope(async_client: AsyncClient, fake_model_factory) -> None:
  model = fake_model_factory({"response": "Paris."})
  _use_model(model)

  response = await async_client.post("/v1/capture/query", json={"query": "Capital of France?"})

  assert response.status_code == 200
  assert response.json() == {"success": True, "data": "Paris.", "type": "text"}
  assert len(model.calls) == 1


@pytest.mark.anyio
async def test_image_upload_returns_canonical_extraction(async_client: AsyncClient, fake_model_factory, png_data_uri: str) -> None:
  _use_model(fake_model_factory({"table": [{"heading": "Total", "value": "9.99"}], "fullText": "Total 9.99"}))

  response = await async_client.post("/v1/capture/image", json={"dataUri": png_data_uri})

  assert response.status_code == 200
  body = response.json()
  assert body["success"] is True
  assert body["type"] == "imageAnalysis"
  assert body["data"] == {"kind": "table_with_text", "version": "1", "table": {"headers": ["Heading", "Value"], "rows": [["Total", "9.99"]]}, "fullText": "Total 9.99"}


@pytest.mark.anyio
async def test_invalid_image_is_reported_in_the_envelope(async_client: AsyncClient, fake_model_factory) -> None:
  model = fake_model_factory()
  _use_model(model)

  response = await async_client.post("/v1/capture/image", json={"dataUri": "data:text/plain,hello"})

  assert response.status_code == 200
  assert response.json() == {"success": False, "error": "Invalid image data URI."}
  assert model.calls == []


@pytest.mark.anyio
async def test_document_upload_returns_table(async_client: AsyncClient, fake_model_factory) -> None:
  _use_model(fake_model_factory({"extractedTable": {"headers": ["Order ID"], "rows": [["101"]]}}))

  response = await async_client.post("/v1/capture/document", json={"dataUri": "data:text/csv;base64,T3JkZXIgSUQKMTAx"})

  body = response.json()
  assert body["type"] == "documentAnalysis"
  assert body["data"]["kind"] == "table"
  assert body["data"]["table"] == {"headers": ["Order ID"], "rows": [["101"]]}


@pytest.mark.anyio
async def test_model_failure_is_reported_in_the_envelope(async_client: AsyncClient, fake_model_factory, png_data_uri: str) -> None:
  _use_model(fake_model_factory(error=RuntimeError("model overloaded")))

  response = await async_client.post("/v1/capture/handwriting", json={"dataUri": png_data_uri})

  assert response.status_code == 200
  assert response.json() == {"success": False, "error": "model overloaded"}


@pytest.mark.anyio
async def test_voice_endpoint_reports_not_implemented(async_client: AsyncClient, fake_model_factory) -> None:
  _use_model(fake_model_factory())
  response = await async_client.post("/v1/capture/voice")
  assert response.json() == {"success": False, "error": "Voice processing flow not implemented yet."}


@pytest.mark.anyio
async def test_missing_data_uri_is_a_validation_error(async_client: AsyncClient) -> None:
  response = await async_client.post("/v1/capture/document", json={})
  assert response.status_code == 422
  assert "requestId" in response.json()


@pytest.mark.anyio
async def test_photo_upload_returns_firebase_preview(async_client: AsyncClient, png_data_uri: str) -> None:
  storage = MagicMock()
  storage.upload_image = AsyncMock(return_value=StoredObject(object_name="captured_images/photo-1.png", download_url="https://files.test/photo-1.png"))
  app.dependency_overrides[get_storage_factory] = lambda: (lambda: storage)

  response = await async_client.post("/v1/capture/photo", json={"dataUri": png_data_uri})

  assert response.status_code == 200
  body = response.json()
  assert body["type"] == "imagePreview"
  assert body["previewUrl"] == "https://files.test/photo-1.png"
  assert body["isFirebaseUrl"] is True


@pytest.mark.anyio
async def test_photo_upload_falls_back_to_local_preview(async_client: AsyncClient, png_data_uri: str) -> None:
  storage = MagicMock()
  storage.upload_image = AsyncMock(side_effect=RuntimeError("network down"))
  app.dependency_overrides[get_storage_factory] = lambda: (lambda: storage)

  response = await async_client.post("/v1/capture/photo", json={"dataUri": png_data_uri})

  assert response.status_code == 200
  assert response.json()["previewUrl"] == png_data_uri
  assert response.json()["isFirebaseUrl"] is False


@pytest.mark.anyio
async def test_photo_upload_rejects_non_images(async_client: AsyncClient) -> None:
  storage_factory = MagicMock()
  app.dependency_overrides[get_storage_factory] = lambda: storage_factory

  response = await async_client.post("/v1/capture/photo", json={"dataUri": "data:text/plain,hi"})

  assert response.status_code == 400
  assert response.json()["detail"] == "Invalid image data URI."
  storage_factory.assert_not_called()


@pytest.mark.anyio
async def test_device_error_description(async_client: AsyncClient) -> None:
  response = await async_client.post("/v1/capture/device-error", json={"device": "microphone", "errorName": "NotAllowedError"})
  assert response.status_code == 200
  assert response.json() == {"device": "microphone", "state": "error", "description": "Microphone permission was denied. Please enable it in your browser settings."}
