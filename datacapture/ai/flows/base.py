"""Base class for schema-constrained capture flows."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from functools import lru_cache
from pathlib import Path
from string import Template
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from datacapture.ai.providers.base import AIModel, InferenceError, MediaPart
from datacapture.schema.normalizer import normalize_inference_result
from datacapture.utils.data_uri import parse_data_uri

InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT", bound=BaseModel)

PROMPTS_DIR = Path(__file__).resolve().parents[1] / "prompts"

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def load_prompt(name: str) -> Template:
  """Load a prompt template from the prompts directory."""
  prompt_path = PROMPTS_DIR / f"{name}.md"
  with open(prompt_path, encoding="utf-8") as handle:
    return Template(handle.read())


class CaptureFlow(ABC, Generic[InputT, OutputT]):
  """One prompt with a declared input model, output model and JSON schema."""

  name: ClassVar[str]
  prompt_name: ClassVar[str]
  output_model: ClassVar[type[BaseModel]]
  response_schema: ClassVar[dict[str, Any]]
  output_fields: ClassVar[tuple[str, ...]]
  optional_fields: ClassVar[tuple[str, ...]] = ()

  def __init__(self, model: AIModel, *, max_media_bytes: int | None = None) -> None:
    self._model = model
    self._max_media_bytes = max_media_bytes

  @abstractmethod
  def media_uris(self, input_data: InputT) -> list[str]:
    """Return the data URIs to attach to the prompt."""

  def prompt_values(self, input_data: InputT) -> dict[str, str]:
    return {}

  def _media_parts(self, input_data: InputT) -> list[MediaPart]:
    parts: list[MediaPart] = []
    for uri in self.media_uris(input_data):
      decoded = parse_data_uri(uri)
      if self._max_media_bytes is not None and decoded.size > self._max_media_bytes:
        raise InferenceError(f"Media exceeds {self._max_media_bytes} byte limit.")
      parts.append(MediaPart(mime_type=decoded.mime_type, data=decoded.data))
    return parts

  async def run(self, input_data: InputT) -> OutputT:
    """Call the model once and return the normalized, validated output."""
    prompt = load_prompt(self.prompt_name).safe_substitute(self.prompt_values(input_data))
    media = self._media_parts(input_data)
    response = await self._model.generate_structured(prompt, self.response_schema, media)
    normalized = normalize_inference_result(response.content, self.output_fields, optional=self.optional_fields)
    try:
      output = self.output_model.model_validate(normalized)
    except ValidationError as exc:
      raise InferenceError(f"{self.name} returned output that does not match its schema: {exc.error_count()} error(s).") from exc

    logger.info("Flow completed flow=%s model=%s usage=%s", self.name, self._model.name, response.usage)
    return output  # type: ignore[return-value]
