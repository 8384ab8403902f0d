"""Gemini provider implementation using the google-genai SDK."""

from __future__ import annotations

import json
import logging
from typing import Any, Final

from google import genai
from google.genai import types

from datacapture.ai.json_parser import parse_json_with_fallback
from datacapture.ai.providers.base import AIModel, InferenceError, MediaPart, Provider, SimpleModelResponse, StructuredModelResponse

logger = logging.getLogger("datacapture.ai.providers.gemini")


def _usage(response: Any) -> dict[str, int] | None:
  metadata = getattr(response, "usage_metadata", None)
  if not metadata:
    return None
  return {"prompt_tokens": metadata.prompt_token_count or 0, "completion_tokens": metadata.candidates_token_count or 0, "total_tokens": metadata.total_token_count or 0}


def _contents(prompt: str, media: list[MediaPart] | None) -> list[Any]:
  # Media first so the prompt can refer to "the image" / "the document".
  contents: list[Any] = [types.Part.from_bytes(data=part.data, mime_type=part.mime_type) for part in media or []]
  contents.append(prompt)
  return contents


class GeminiModel(AIModel):
  """Gemini model client with structured output and inline media support."""

  supports_structured_output = True
  supports_media = True

  def __init__(self, name: str, api_key: str | None = None, client: genai.Client | None = None) -> None:
    self.name: str = name
    if client is None:
      if not api_key:
        raise ValueError("GEMINI_API_KEY environment variable is required")
      client = genai.Client(api_key=api_key)
    self._client = client

  async def generate(self, prompt: str, media: list[MediaPart] | None = None) -> SimpleModelResponse:
    """Generate a text response from Gemini."""
    try:
      response = await self._client.aio.models.generate_content(model=self.name, contents=_contents(prompt, media))
    except Exception as exc:
      raise InferenceError(f"Gemini generation failed: {exc}") from exc

    logger.info("Gemini response model=%s media_parts=%d chars=%d", self.name, len(media or []), len(response.text or ""))
    return SimpleModelResponse(content=response.text or "", usage=_usage(response))

  async def generate_structured(self, prompt: str, schema: dict[str, Any], media: list[MediaPart] | None = None) -> StructuredModelResponse:
    """Generate JSON output constrained by the given response schema."""
    config = types.GenerateContentConfig(response_mime_type="application/json", response_schema=schema)
    try:
      response = await self._client.aio.models.generate_content(model=self.name, contents=_contents(prompt, media), config=config)
    except Exception as exc:
      raise InferenceError(f"Gemini generation failed: {exc}") from exc

    raw = response.text or ""
    logger.debug("Gemini structured response (raw):\n%s", raw)
    try:
      parsed = parse_json_with_fallback(raw)
    except json.JSONDecodeError as exc:
      raise InferenceError(f"Gemini returned invalid JSON: {exc}") from exc

    if not isinstance(parsed, dict):
      raise InferenceError(f"Gemini returned a JSON {type(parsed).__name__}, expected an object.")
    return StructuredModelResponse(content=parsed, usage=_usage(response))


class GeminiProvider(Provider):
  """Gemini provider."""

  _DEFAULT_MODEL: Final[str] = "gemini-2.0-flash"
  _AVAILABLE_MODELS: Final[set[str]] = {"gemini-2.5-pro", "gemini-2.5-flash", "gemini-2.5-flash-lite", "gemini-2.0-flash", "gemini-2.0-flash-lite"}

  def __init__(self, api_key: str | None = None) -> None:
    self.name: str = "gemini"
    self._api_key = api_key

  def get_model(self, model: str | None = None) -> AIModel:
    """Return a Gemini model client."""
    model_name = model or self._DEFAULT_MODEL
    if model_name not in self._AVAILABLE_MODELS:
      raise ValueError(f"Unsupported Gemini model '{model_name}'.")

    return GeminiModel(model_name, api_key=self._api_key)
