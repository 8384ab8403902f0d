"""Router for capture endpoints (queries, images, documents, handwriting, photos)."""

import logging
from collections.abc import Callable

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse, Response

from datacapture.api.deps import get_dispatcher, get_storage_factory
from datacapture.api.models import DataUriRequest, DeviceErrorRequest, DeviceErrorResponse, TextQueryRequest
from datacapture.config import Settings, get_settings
from datacapture.schema.extraction import OutputData, ResultEnvelope
from datacapture.services.capture_devices import DeviceState, describe_media_error
from datacapture.services.captures import store_captured_photo
from datacapture.services.dispatcher import CaptureDispatcher
from datacapture.services.storage_client import StorageClient
from datacapture.utils.data_uri import InvalidDataUriError

logger = logging.getLogger(__name__)

router = APIRouter()

DISPATCHER_DEPENDENCY = Depends(get_dispatcher)
STORAGE_FACTORY_DEPENDENCY = Depends(get_storage_factory)
SETTINGS_DEPENDENCY = Depends(get_settings)


def _envelope_response(envelope: ResultEnvelope) -> JSONResponse:
  # Failures are reported in the body; the transport call itself succeeded.
  return JSONResponse(status_code=status.HTTP_200_OK, content=envelope.to_payload())


@router.post("/query", responses={204: {"description": "Blank query; nothing was dispatched."}})
async def text_query(body: TextQueryRequest, dispatcher: CaptureDispatcher = DISPATCHER_DEPENDENCY) -> Response:
  """Answer a typed or dictated query."""
  envelope = await dispatcher.handle_text_query(body.query)
  if envelope is None:
    return Response(status_code=status.HTTP_204_NO_CONTENT)
  return _envelope_response(envelope)


@router.post("/image")
async def image_upload(body: DataUriRequest, dispatcher: CaptureDispatcher = DISPATCHER_DEPENDENCY) -> JSONResponse:
  """Extract a table and full text from an image."""
  return _envelope_response(await dispatcher.handle_image_upload(body.data_uri))


@router.post("/document")
async def document_upload(body: DataUriRequest, dispatcher: CaptureDispatcher = DISPATCHER_DEPENDENCY) -> JSONResponse:
  """Extract a header/rows table from a document."""
  return _envelope_response(await dispatcher.handle_document_upload(body.data_uri))


@router.post("/handwriting")
async def handwriting_transcription(body: DataUriRequest, dispatcher: CaptureDispatcher = DISPATCHER_DEPENDENCY) -> JSONResponse:
  """Transcribe handwriting from an image."""
  return _envelope_response(await dispatcher.handle_handwriting_transcription(body.data_uri))


@router.post("/voice")
async def voice_data(dispatcher: CaptureDispatcher = DISPATCHER_DEPENDENCY) -> JSONResponse:
  return _envelope_response(await dispatcher.handle_voice_data())


@router.post("/photo", response_model=OutputData, response_model_by_alias=True)
async def captured_photo(body: DataUriRequest, storage_factory: Callable[[], StorageClient] = STORAGE_FACTORY_DEPENDENCY, settings: Settings = SETTINGS_DEPENDENCY) -> OutputData:
  """Store a webcam photo and return the preview state to display."""
  try:
    return await store_captured_photo(body.data_uri, storage_factory, max_bytes=settings.max_upload_bytes)
  except InvalidDataUriError as exc:
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.post("/device-error", response_model=DeviceErrorResponse, response_model_by_alias=True)
async def device_error(body: DeviceErrorRequest) -> DeviceErrorResponse:
  """Translate a browser camera/microphone error into a message for the user."""
  description = describe_media_error(body.error_name, body.message, body.device)
  logger.info("Capture device error device=%s error_name=%s", body.device.value, body.error_name)
  return DeviceErrorResponse(device=body.device, state=DeviceState.ERROR, description=description)
