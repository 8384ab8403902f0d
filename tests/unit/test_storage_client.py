from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from datacapture.services.storage_client import StorageClient, _normalize_emulator_endpoint, captured_photo_name


def _bucket(name: str = "captures") -> MagicMock:
  bucket = MagicMock()
  bucket.name = name
  return bucket


def test_captured_photo_name() -> None:
  assert captured_photo_name(1700000000123) == "captured_images/photo-1700000000123.png"
  assert captured_photo_name().startswith("captured_images/photo-")
  assert captured_photo_name(1, "image/jpeg") == "captured_images/photo-1.jpg"
  assert captured_photo_name(1, "image/webp") == "captured_images/photo-1.webp"


def test_normalize_emulator_endpoint() -> None:
  assert _normalize_emulator_endpoint("http://localhost:9199/storage/v1/") == "http://localhost:9199"
  assert _normalize_emulator_endpoint("localhost:9199/") == "localhost:9199"


def test_download_url_uses_firebase_host_and_encodes_name(make_settings) -> None:
  client = StorageClient(make_settings(), bucket=_bucket())
  url = client.download_url("captured_images/photo-1.png", "tok")
  assert url == "https://firebasestorage.googleapis.com/v0/b/captures/o/captured_images%2Fphoto-1.png?alt=media&token=tok"


def test_download_url_points_at_emulator(make_settings) -> None:
  client = StorageClient(make_settings(gcs_storage_host="http://localhost:9199/"), bucket=_bucket())
  assert client.download_url("a.png", "tok").startswith("http://localhost:9199/v0/b/captures/o/a.png")


@pytest.mark.anyio
async def test_upload_image_sets_token_metadata(make_settings) -> None:
  bucket = _bucket()
  blob = bucket.blob.return_value
  client = StorageClient(make_settings(), bucket=bucket)

  stored = await client.upload_image(b"\x89PNG", "captured_images/photo-5.png")

  bucket.blob.assert_called_once_with("captured_images/photo-5.png")
  blob.upload_from_string.assert_called_once_with(b"\x89PNG", "image/png")
  token = blob.metadata["firebaseStorageDownloadTokens"]
  assert stored.object_name == "captured_images/photo-5.png"
  assert stored.download_url.endswith(f"token={token}")


@pytest.mark.anyio
async def test_upload_image_passes_content_type_through(make_settings) -> None:
  bucket = _bucket()
  blob = bucket.blob.return_value
  client = StorageClient(make_settings(), bucket=bucket)

  await client.upload_image(b"\xff\xd8", "captured_images/photo-5.jpg", "image/jpeg")

  blob.upload_from_string.assert_called_once_with(b"\xff\xd8", "image/jpeg")
  assert blob.content_type == "image/jpeg"


@pytest.mark.anyio
async def test_ensure_bucket_only_creates_in_emulator_mode(make_settings) -> None:
  bucket = _bucket()
  bucket.exists.return_value = False

  await StorageClient(make_settings(), bucket=bucket).ensure_bucket()
  bucket.client.create_bucket.assert_not_called()

  await StorageClient(make_settings(gcs_storage_host="http://localhost:9199"), bucket=bucket).ensure_bucket()
  bucket.client.create_bucket.assert_called_once_with(bucket)
