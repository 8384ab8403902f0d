"""Base interfaces for AI providers and models."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


class InferenceError(RuntimeError):
  """Raised when a model call fails or returns an unusable payload."""


@dataclass
class SimpleModelResponse:
  content: str
  usage: dict[str, int] | None = None


@dataclass
class StructuredModelResponse:
  content: dict[str, Any]
  usage: dict[str, int] | None = None


@dataclass(frozen=True)
class MediaPart:
  """Inline media sent alongside a prompt."""

  mime_type: str
  data: bytes


class AIModel(ABC):
  """Abstract base class for AI models."""

  name: str
  supports_structured_output: bool = False
  supports_media: bool = False

  @abstractmethod
  async def generate(self, prompt: str, media: list[MediaPart] | None = None) -> SimpleModelResponse:
    """Generate a text response for the given prompt."""

  async def generate_structured(self, prompt: str, schema: dict[str, Any], media: list[MediaPart] | None = None) -> StructuredModelResponse:
    """Generate output that conforms to the provided JSON schema."""
    raise InferenceError("Structured output is not supported by this model.")


class Provider(ABC):
  """Abstract base class for AI providers."""

  name: str

  @abstractmethod
  def get_model(self, model: str | None = None) -> AIModel:
    """Return the model client for the provider."""
