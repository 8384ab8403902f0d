"""Validate captured media payloads and forward them to the matching flow."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from datacapture.ai.flows import (
  AiAssistantFlow,
  AiAssistantInput,
  AnalyzeUploadedDocumentFlow,
  AnalyzeUploadedDocumentInput,
  ExtractStructuredDataFromImageFlow,
  ExtractStructuredDataFromImageInput,
  TranscribeHandwritingFlow,
  TranscribeHandwritingInput,
)
from datacapture.ai.flows.base import CaptureFlow
from datacapture.ai.providers.base import AIModel
from datacapture.schema.extraction import ResultEnvelope, ResultType, adapt_extraction
from datacapture.utils.data_uri import DATA_URI_PREFIX, IMAGE_DATA_URI_PREFIX

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "An unknown error occurred"
VOICE_NOT_IMPLEMENTED = "Voice processing flow not implemented yet."

ModelFactory = Callable[[], AIModel]
FlowT = TypeVar("FlowT", bound=CaptureFlow)


def _error_message(exc: BaseException) -> str:
  message = str(exc).strip()
  return message or UNKNOWN_ERROR


def _has_prefix(value: Any, prefix: str) -> bool:
  return isinstance(value, str) and bool(value) and value.startswith(prefix)


class CaptureDispatcher:
  """Turn each capture request into exactly one flow call and a result envelope.

  The model is resolved lazily inside the guarded call, so configuration
  problems surface as failure envelopes instead of exceptions.
  """

  def __init__(self, model_factory: ModelFactory, *, max_media_bytes: int | None = None) -> None:
    self._model_factory = model_factory
    self._max_media_bytes = max_media_bytes

  def _flow(self, flow_cls: type[FlowT]) -> FlowT:
    return flow_cls(self._model_factory(), max_media_bytes=self._max_media_bytes)

  async def _dispatch(self, action: str, call: Callable[[], Awaitable[Any]], result_type: ResultType) -> ResultEnvelope:
    try:
      data = await call()
    except Exception as exc:  # noqa: BLE001
      logger.exception("Capture action failed action=%s", action)
      return ResultEnvelope.fail(_error_message(exc))

    logger.info("Capture action succeeded action=%s type=%s", action, result_type.value)
    return ResultEnvelope.ok(data, result_type)

  async def handle_text_query(self, query: str) -> ResultEnvelope | None:
    """Answer a typed or dictated query; blank queries are not dispatched."""
    if not isinstance(query, str) or not query.strip():
      logger.debug("Ignoring empty text query.")
      return None

    async def _call() -> str:
      result = await self._flow(AiAssistantFlow).run(AiAssistantInput(query=query))
      return result.response

    return await self._dispatch("text_query", _call, ResultType.TEXT)

  async def handle_image_upload(self, image_data_uri: str) -> ResultEnvelope:
    """Extract a table plus full text from an image."""
    if not _has_prefix(image_data_uri, IMAGE_DATA_URI_PREFIX):
      return ResultEnvelope.fail("Invalid image data URI.")

    async def _call() -> Any:
      result = await self._flow(ExtractStructuredDataFromImageFlow).run(ExtractStructuredDataFromImageInput(photo_data_uri=image_data_uri))
      return adapt_extraction(result.model_dump(by_alias=True))

    return await self._dispatch("image_upload", _call, ResultType.IMAGE_ANALYSIS)

  async def handle_document_upload(self, document_data_uri: str) -> ResultEnvelope:
    """Extract a header/rows table from a document."""
    if not _has_prefix(document_data_uri, DATA_URI_PREFIX):
      return ResultEnvelope.fail("Invalid document data URI.")

    async def _call() -> Any:
      result = await self._flow(AnalyzeUploadedDocumentFlow).run(AnalyzeUploadedDocumentInput(document_data_uri=document_data_uri))
      return adapt_extraction(result.model_dump(by_alias=True))

    return await self._dispatch("document_upload", _call, ResultType.DOCUMENT_ANALYSIS)

  async def handle_handwriting_transcription(self, image_data_uri: str) -> ResultEnvelope:
    """Transcribe handwriting from an image."""
    if not _has_prefix(image_data_uri, IMAGE_DATA_URI_PREFIX):
      return ResultEnvelope.fail("Invalid image data URI for handwriting transcription.")

    async def _call() -> str:
      result = await self._flow(TranscribeHandwritingFlow).run(TranscribeHandwritingInput(photo_data_uri=image_data_uri))
      return result.transcribed_text

    return await self._dispatch("handwriting_transcription", _call, ResultType.HANDWRITING_TRANSCRIPTION)

  async def handle_voice_data(self) -> ResultEnvelope:
    """Voice is transcribed in the browser and sent as a text query instead."""
    return ResultEnvelope.fail(VOICE_NOT_IMPLEMENTED)
